"""
Card assembly: join a normalized event with its venue and precompute the
display strings the list and map views need.
"""

import calendar
import re
from typing import Optional

from dubaievents.dates import parse_date
from dubaievents.models import Card, DatePill, Record
from dubaievents.normalize import format_time

DEFAULT_CATEGORY = "Music Events"
NO_PRICE = "Contact for pricing"
NO_OFFERS = "No special offers"

_NON_WORD_RE = re.compile(r"[^\w\s]")
# Extra characters a subtitle may carry beyond venue + event name and still count as redundant
_SUBTITLE_SLACK = 10


def format_display_date(raw: str) -> str:
    """"2025-06-01" -> "Sunday, Jun 1, 2025"; unparseable input is returned as-is."""
    d = parse_date(raw)
    if d is None:
        return raw
    return f"{calendar.day_name[d.weekday()]}, {calendar.month_abbr[d.month]} {d.day}, {d.year}"


def format_date_pill(raw: str) -> DatePill:
    d = parse_date(raw)
    if d is None:
        return DatePill(day="", date=raw)
    return DatePill(
        day=calendar.day_abbr[d.weekday()].upper(),
        date=f"{calendar.month_abbr[d.month]} {d.day}",
    )


def format_short_date(raw: str) -> str:
    """"2025-06-01" -> "1 Jun 25"."""
    d = parse_date(raw)
    if d is None:
        return raw
    return f"{d.day} {calendar.month_abbr[d.month]} {d.year % 100:02d}"


def _normalize_for_compare(text: str) -> str:
    return _NON_WORD_RE.sub("", text.lower().strip())


def smart_subtitle(event_name: str, venue_name: str, subtitle: str) -> str:
    """
    Return the subtitle, or "" when it only restates the venue and event names.
    """
    if not subtitle or not subtitle.strip() or not event_name or not venue_name:
        return ""
    norm_event = _normalize_for_compare(event_name)
    norm_venue = _normalize_for_compare(venue_name)
    norm_subtitle = _normalize_for_compare(subtitle)
    redundant = (
        norm_venue in norm_subtitle
        and norm_event in norm_subtitle
        and len(norm_subtitle) < len(norm_venue) + len(norm_event) + _SUBTITLE_SLACK
    )
    return "" if redundant else subtitle


def format_entry_price(price: Optional[str]) -> str:
    if not price:
        return NO_PRICE
    if price.upper().startswith("AED"):
        return price
    return f"AED {price}"


def build_card(record: Record) -> Card:
    event, venue = record.event, record.venue
    return Card(
        event=event,
        venue=venue,
        display_date=format_display_date(event.date_raw),
        date_pill=format_date_pill(event.date_raw),
        smart_subtitle=smart_subtitle(event.title, venue.name, event.subtitle),
        entry_price=format_entry_price(event.ticket_price),
        offers=event.special_offers or NO_OFFERS,
        category=event.categories[0].primary if event.categories else DEFAULT_CATEGORY,
    )


def card_to_dict(card: Card) -> dict:
    """Serialise a Card to a plain dict for JSON output."""
    event, venue = card.event, card.venue
    return {
        "event_id": event.event_id,
        "title": event.title,
        "subtitle": card.smart_subtitle,
        "artist": event.artist,
        "date": event.date_key or event.date_raw,
        "display_date": card.display_date,
        "date_pill": {"day": card.date_pill.day, "date": card.date_pill.date},
        "time_start": format_time(event.time_start) or event.time_start,
        "time_end": format_time(event.time_end) or event.time_end,
        "entry_price": card.entry_price,
        "offers": card.offers,
        "category": card.category,
        "categories": [
            {"primary": c.primary, "secondary": c.secondary, "confidence": c.confidence}
            for c in event.categories
        ],
        "attributes": {
            "venue": list(event.attributes.venue),
            "energy": list(event.attributes.energy),
            "timing": list(event.attributes.timing),
            "status": list(event.attributes.status),
        },
        "venue": {
            "venue_id": venue.venue_id,
            "name": venue.name,
            "area": venue.area,
            "coordinates": list(venue.coordinates) if venue.coordinates else None,
            "instagram": venue.instagram,
            "phone": venue.phone,
            "website": venue.website,
            "address": venue.address,
        },
    }
