"""
End-to-end views: raw API rows + filter state -> display cards.

Each view has its own de-duplication policy:

  list       strict identity dedup (completeness wins), then one card per event id
  recurring  strict identity dedup, then one card per venue + event name
             (nearest date wins), limited to the active dates and sorted by date
"""

from collections import defaultdict
from collections.abc import Iterable
from datetime import date, datetime
from typing import Optional

from dubaievents.cards import build_card
from dubaievents.categories import marker_color
from dubaievents.dedup import dedupe_by_event_id, dedupe_cards, dedupe_recurring
from dubaievents.filters import filter_records, venue_matches_filters
from dubaievents.models import Card, FilterState, MapMarker, Record
from dubaievents.normalize import normalize_records

VIEWS = ("list", "recurring")


def _sort_by_date(cards: list[Card]) -> list[Card]:
    return sorted(cards, key=lambda c: (c.event.date is None, c.event.date or date.min))


def cards_from_records(
    records: Iterable[Record],
    state: FilterState,
    view: str = "list",
    now: Optional[datetime] = None,
) -> list[Card]:
    if view not in VIEWS:
        raise ValueError(f"Unknown view '{view}'. Choose from: {', '.join(VIEWS)}")

    cards = dedupe_cards(build_card(r) for r in filter_records(records, state))

    if view == "list":
        return dedupe_by_event_id(cards)

    cards = dedupe_recurring(cards, now=now)
    if state.active_dates:
        cards = [c for c in cards if c.event.date_key in state.active_dates]
    return _sort_by_date(cards)


def build_cards(
    raw_records: Iterable[dict],
    state: FilterState,
    view: str = "list",
    now: Optional[datetime] = None,
) -> list[Card]:
    return cards_from_records(normalize_records(raw_records), state, view=view, now=now)


def venue_cards(records: Iterable[Record], venue_id: str, date_key: Optional[str] = None) -> list[Card]:
    """Cards for one venue's detail panel, optionally limited to a single day."""
    selected = [
        r for r in records
        if r.venue.venue_id == venue_id and (date_key is None or r.event.date_key == date_key)
    ]
    return _sort_by_date(dedupe_by_event_id(build_card(r) for r in selected))


def map_markers(records: Iterable[Record], state: FilterState) -> list[MapMarker]:
    """One marker per venue with valid coordinates, in first-seen order."""
    by_venue: dict[str, list[Record]] = defaultdict(list)
    for record in records:
        if record.venue.venue_id and record.venue.coordinates:
            by_venue[record.venue.venue_id].append(record)

    return [
        MapMarker(
            venue=venue_records[0].venue,
            color=marker_color(venue_records, state),
            matches=venue_matches_filters(venue_records, state),
        )
        for venue_records in by_venue.values()
    ]
