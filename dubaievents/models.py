from dataclasses import dataclass, field
from datetime import date
from typing import Optional

ATTRIBUTE_FACETS = ("venue", "energy", "timing", "status")


@dataclass(frozen=True)
class Venue:
    venue_id: str      # Stable identifier, stringified so numeric and text ids compare equal
    name: str
    area: str = ""
    lat: Optional[float] = None
    lng: Optional[float] = None
    address: Optional[str] = None
    phone: Optional[str] = None
    website: Optional[str] = None
    instagram: Optional[str] = None
    category: tuple[str, ...] = ()
    highlights: tuple[str, ...] = ()
    atmosphere: tuple[str, ...] = ()
    rating: Optional[float] = None
    rating_count: int = 0

    @property
    def coordinates(self) -> Optional[tuple[float, float]]:
        if self.lat is None or self.lng is None:
            return None
        return (self.lat, self.lng)


@dataclass(frozen=True)
class EventCategory:
    primary: str
    secondary: str = ""
    confidence: float = 0.0   # 0..1


@dataclass(frozen=True)
class EventAttributes:
    venue: tuple[str, ...] = ()
    energy: tuple[str, ...] = ()
    timing: tuple[str, ...] = ()
    status: tuple[str, ...] = ()

    def facet(self, name: str) -> tuple[str, ...]:
        return getattr(self, name, ())


@dataclass(frozen=True)
class Event:
    venue_id: str      # Foreign key to Venue.venue_id
    title: str         # Best display title (event name, artist or venue name)
    event_id: str = ""
    name: str = ""     # Raw event name as supplied
    subtitle: str = ""
    artist: Optional[str] = None
    date: Optional[date] = None
    date_raw: str = ""
    time_start: str = ""
    time_end: str = ""
    ticket_price: Optional[str] = None
    special_offers: Optional[str] = None
    music_genre: tuple[str, ...] = ()
    event_vibe: tuple[str, ...] = ()
    analysis_notes: Optional[str] = None
    confidence_score: Optional[float] = None
    website_social: tuple[str, ...] = ()
    categories: tuple[EventCategory, ...] = ()
    attributes: EventAttributes = field(default_factory=EventAttributes)

    @property
    def date_key(self) -> Optional[str]:
        return self.date.isoformat() if self.date else None


@dataclass(frozen=True)
class Record:
    """One normalized API row: an event together with the venue hosting it."""
    venue: Venue
    event: Event


# --- Filter state ---

@dataclass(frozen=True)
class CategoryFilter:
    selected_primaries: frozenset[str] = frozenset()
    # (primary, selected secondaries under it) pairs
    selected_secondaries: frozenset[tuple[str, frozenset[str]]] = frozenset()

    def active_primaries(self) -> frozenset[str]:
        """Primaries that restrict results, including those implied by a secondary selection."""
        implied = {p for p, secondaries in self.selected_secondaries if secondaries}
        return frozenset(self.selected_primaries) | implied

    def secondaries_for(self, primary: str) -> frozenset[str]:
        for p, secondaries in self.selected_secondaries:
            if p == primary:
                return secondaries
        return frozenset()


@dataclass(frozen=True)
class AttributeFilter:
    venue: frozenset[str] = frozenset()
    energy: frozenset[str] = frozenset()
    timing: frozenset[str] = frozenset()
    status: frozenset[str] = frozenset()

    def facet(self, name: str) -> frozenset[str]:
        return getattr(self, name, frozenset())


@dataclass(frozen=True)
class FilterState:
    categories: CategoryFilter = field(default_factory=CategoryFilter)
    attributes: AttributeFilter = field(default_factory=AttributeFilter)
    selected_areas: frozenset[str] = frozenset({"All Dubai"})
    active_dates: frozenset[str] = frozenset()    # date keys; empty means every date
    search_query: str = ""


# --- Derived, display-ready values ---

@dataclass(frozen=True)
class DateOption:
    day: str           # Weekday abbreviation, e.g. "SUN"
    date: str          # Short label, e.g. "Jun 1"
    date_key: str      # ISO calendar day, e.g. "2025-06-01"
    is_today: bool = False
    is_saturday: bool = False
    is_sunday: bool = False
    event_count: int = 0

    @property
    def label(self) -> str:
        if self.is_today:
            return "Today"
        return f"{self.day.title()} {self.date.split()[-1]}"


@dataclass(frozen=True)
class DatePill:
    day: str
    date: str


@dataclass(frozen=True)
class Card:
    event: Event
    venue: Venue
    display_date: str
    date_pill: DatePill
    smart_subtitle: str
    entry_price: str
    offers: str
    category: str


@dataclass(frozen=True)
class MapMarker:
    venue: Venue
    color: str         # Hex colour
    matches: bool      # Whether any of the venue's events pass the filters
