"""
Turn raw API rows into Record objects.

Rows come from a joined venue/event view and are inconsistent: the same value
can arrive under different keys (`area` / `venue_area`), list-like fields can
be real lists, JSON-encoded strings or comma-separated strings, and nearly
everything is optional. Nothing here raises on a malformed field; it degrades
to an empty value instead.
"""

import json
import re
from typing import Any, Optional

from dubaievents.dates import parse_date
from dubaievents.models import ATTRIBUTE_FACETS, Event, EventAttributes, EventCategory, Record, Venue

_SINGLE_TIME_RE = re.compile(r"^\d{1,2}:\d{2}\s?(AM|PM)$", re.IGNORECASE)
_FORMAT_TIME_RE = re.compile(r"^(\d{1,2}):(\d{2})\s?(AM|PM)$", re.IGNORECASE)
_LETTER_RE = re.compile(r"[a-zA-Z]")

FALLBACK_TITLE = "Event"


# --- List-like fields ---

def _extract_items(items: list) -> list[str]:
    out = []
    for item in items:
        if isinstance(item, str):
            label = item
        elif isinstance(item, dict):
            # [{"Rooftop": 0.9}, ...] -> label is the first key
            label = next(iter(item), "")
        elif item is None:
            label = ""
        else:
            label = str(item)
        label = label.strip()
        if label:
            out.append(label)
    return out


def to_string_list(value: Any) -> list[str]:
    """
    Coerce a list-like field into an ordered list of strings.

    '["Rooftop","Live DJ"]', "Rooftop, Live DJ" and ["Rooftop", "Live DJ"]
    all give ["Rooftop", "Live DJ"].
    """
    if not value:
        return []
    if isinstance(value, (list, tuple)):
        return _extract_items(list(value))
    if isinstance(value, str):
        try:
            parsed = json.loads(value)
        except ValueError:
            parsed = None
        if isinstance(parsed, list):
            return _extract_items(parsed)
        if isinstance(parsed, str):
            value = parsed
        if "," in value:
            return [s.strip() for s in value.split(",") if s.strip()]
        return [value.strip()] if value.strip() else []
    return [str(value)]


# --- Titles and times ---

def is_valid_title(value: Optional[str]) -> bool:
    """At least 4 chars, not truncated with '...', and at least half letters."""
    if not value or not isinstance(value, str):
        return False
    trimmed = value.strip()
    if len(trimmed) < 4 or trimmed.endswith("..."):
        return False
    return len(_LETTER_RE.findall(trimmed)) >= len(trimmed) * 0.5


def select_best_title(
    event_name: Optional[str],
    artist: Optional[str],
    venue_name: Optional[str],
) -> str:
    for candidate in (event_name, artist, venue_name):
        if is_valid_title(candidate):
            return candidate.strip()
    return FALLBACK_TITLE


def parse_event_time(value: Optional[str]) -> tuple[str, str]:
    """
    Split an event time string into (start, end).

    "8:00 PM - 2:00 AM" -> ("8:00 PM", "2:00 AM"); "8:00 PM" -> ("8:00 PM", "");
    anything else -> ("", "").
    """
    if not value or not isinstance(value, str):
        return "", ""
    trimmed = value.strip()
    if " - " in trimmed:
        start, _, end = trimmed.partition(" - ")
        return start.strip(), end.split(" - ")[0].strip()
    if _SINGLE_TIME_RE.match(trimmed):
        return trimmed, ""
    return "", ""


def format_time(value: Optional[str]) -> str:
    """Canonicalise "9:30 pm" to "9:30 PM"; unmatched input gives ""."""
    if not value:
        return ""
    m = _FORMAT_TIME_RE.match(value.strip())
    if not m:
        return ""
    hour, minute, period = m.groups()
    return f"{hour}:{minute} {period.upper()}"


# --- Categories and attributes ---

def _to_float(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _load_json(value: Any) -> Any:
    if isinstance(value, str):
        try:
            return json.loads(value)
        except ValueError:
            return None
    return value


def parse_categories(value: Any) -> tuple[EventCategory, ...]:
    raw = _load_json(value)
    if not isinstance(raw, list):
        return ()
    categories = []
    for item in raw:
        if not isinstance(item, dict) or not item.get("primary"):
            continue
        confidence = _to_float(item.get("confidence")) or 0.0
        categories.append(EventCategory(
            primary=str(item["primary"]).strip(),
            secondary=str(item.get("secondary") or "").strip(),
            confidence=min(max(confidence, 0.0), 1.0),
        ))
    return tuple(categories)


def parse_attributes(value: Any) -> EventAttributes:
    raw = _load_json(value)
    if not isinstance(raw, dict):
        return EventAttributes()
    return EventAttributes(**{
        facet: tuple(to_string_list(raw.get(facet))) for facet in ATTRIBUTE_FACETS
    })


def build_event_subtitle(categories: tuple[EventCategory, ...], attributes: EventAttributes) -> str:
    """e.g. "ROOFTOP VENUE | ROOFTOP | VIP" from the first secondary and key attributes."""
    parts = []
    if categories and categories[0].secondary:
        parts.append(categories[0].secondary)
    if attributes.venue:
        parts.append(attributes.venue[0])
    if attributes.status:
        parts.append(attributes.status[0])
    elif attributes.energy:
        parts.append(attributes.energy[0])
    return " | ".join(parts).upper()


# --- Records ---

def _first(raw: dict, *keys: str) -> Any:
    for key in keys:
        value = raw.get(key)
        if value not in (None, ""):
            return value
    return None


def _text(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, (list, tuple)):
        value = ", ".join(to_string_list(value))
    text = str(value).strip()
    return text or None


def _coordinates(lat: Any, lng: Any) -> tuple[Optional[float], Optional[float]]:
    lat, lng = _to_float(lat), _to_float(lng)
    if lat is None or lng is None:
        return None, None
    if not (-90 <= lat <= 90 and -180 <= lng <= 180):
        return None, None
    return lat, lng


def normalize_venue(raw: dict) -> Venue:
    venue_id = _first(raw, "venue_id", "venue_venue_id")
    lat, lng = _coordinates(_first(raw, "lat", "venue_lat"), _first(raw, "lng", "venue_lng"))
    rating = _to_float(raw.get("rating"))
    try:
        rating_count = int(raw.get("rating_count") or 0)
    except (TypeError, ValueError):
        rating_count = 0
    return Venue(
        venue_id=str(venue_id).strip() if venue_id is not None else "",
        name=_text(_first(raw, "name", "venue_name")) or "",
        area=_text(_first(raw, "area", "venue_area")) or "",
        lat=lat,
        lng=lng,
        address=_text(_first(raw, "address", "venue_address")),
        phone=_text(_first(raw, "phone", "venue_phone_number")),
        website=_text(_first(raw, "website", "venue_website")),
        instagram=_text(_first(raw, "final_instagram", "venue_final_instagram")),
        category=tuple(to_string_list(_first(raw, "category", "venue_category"))),
        highlights=tuple(to_string_list(raw.get("venue_highlights"))),
        atmosphere=tuple(to_string_list(raw.get("venue_atmosphere"))),
        rating=rating,
        rating_count=rating_count,
    )


def normalize_event(raw: dict, venue: Venue) -> Event:
    event_name = _text(raw.get("event_name"))
    artist = _text(_first(raw, "artist", "artists"))
    categories = parse_categories(raw.get("event_categories"))
    attributes = parse_attributes(raw.get("attributes"))
    date_raw = _text(raw.get("event_date")) or ""
    start, end = parse_event_time(_text(raw.get("event_time")))
    event_id = _first(raw, "event_id", "id")

    return Event(
        event_id=str(event_id) if event_id is not None else "",
        venue_id=venue.venue_id,
        title=select_best_title(event_name, artist, venue.name),
        name=event_name or "",
        subtitle=build_event_subtitle(categories, attributes),
        artist=artist,
        date=parse_date(date_raw),
        date_raw=date_raw,
        time_start=start,
        time_end=end,
        ticket_price=_text(raw.get("ticket_price")),
        special_offers=_text(raw.get("special_offers")),
        music_genre=tuple(to_string_list(raw.get("music_genre"))),
        event_vibe=tuple(to_string_list(raw.get("event_vibe"))),
        analysis_notes=_text(raw.get("analysis_notes")),
        confidence_score=_to_float(raw.get("confidence_score")),
        website_social=tuple(to_string_list(raw.get("website_social"))),
        categories=categories,
        attributes=attributes,
    )


def normalize_record(raw: dict) -> Record:
    venue = normalize_venue(raw)
    return Record(venue=venue, event=normalize_event(raw, venue))


def normalize_records(raws) -> list[Record]:
    return [normalize_record(raw) for raw in raws if isinstance(raw, dict)]
