"""
Event category taxonomy, as stored in the database, with UI names and colours.
"""

from collections.abc import Iterable

from dubaievents.filters import venue_matches_filters
from dubaievents.models import FilterState, Record

# database primary -> (display name, colour name)
PRIMARY_CATEGORIES: dict[str, tuple[str, str]] = {
    "Music Events": ("Music", "green"),
    "Sports & Viewing": ("Sports & Viewing", "red"),
    "Food & Dining": ("Food & Drink", "orange"),
    "Comedy & Entertainment": ("Comedy", "teal"),
    "Nightlife": ("Nightlife", "pink"),
}

SECONDARY_CATEGORIES: dict[str, list[str]] = {
    "Music Events": ["Electronic", "Hip-Hop/R&B", "Live Performance", "Arabic", "Mixed"],
    "Sports & Viewing": ["Match Viewing"],
    "Food & Dining": ["Tasting Event"],
    "Comedy & Entertainment": ["Stand-up Comedy"],
    "Nightlife": ["Nightclub", "Lounge/Bar", "Rooftop Venue"],
}

COLOR_HEX: dict[str, str] = {
    "purple": "#9333EA",
    "red": "#EF4444",
    "yellow": "#F59E0B",
    "orange": "#F97316",
    "pink": "#EC4899",
    "indigo": "#6366F1",
    "blue": "#3B82F6",
    "green": "#10B981",
    "teal": "#14B8A6",
    "gray": "#6B7280",
}

FALLBACK_COLOR = "gray"


def display_name(primary: str) -> str:
    entry = PRIMARY_CATEGORIES.get(primary)
    return entry[0] if entry else primary


def category_color(primary: str) -> str:
    entry = PRIMARY_CATEGORIES.get(primary)
    return entry[1] if entry else FALLBACK_COLOR


def hex_color(color_name: str) -> str:
    return COLOR_HEX.get(color_name, COLOR_HEX[FALLBACK_COLOR])


def secondary_categories(primary: str) -> list[str]:
    return SECONDARY_CATEGORIES.get(primary, [])


def marker_color(venue_records: Iterable[Record], state: FilterState) -> str:
    """
    Hex colour for a venue's map marker.

    Matching venues take the colour of their first event's primary category;
    venues hidden by the filters are drawn grey.
    """
    venue_records = list(venue_records)
    if not venue_records or not venue_matches_filters(venue_records, state):
        return hex_color(FALLBACK_COLOR)
    for record in venue_records:
        if record.event.categories:
            return hex_color(category_color(record.event.categories[0].primary))
    return hex_color(FALLBACK_COLOR)
