"""
Collapse cards that describe the same logical event.

Two policies, each used by a specific view (see dubaievents.pipeline):

- dedupe_cards: strict identity (venue, name, date, start time). The card
  carrying more data wins; equal scores keep the first seen.
- dedupe_recurring: loose identity (venue, name). The occurrence closest to
  today wins; ties keep the first seen.

Output order is the order in which each key was first seen, even when a later
card replaces the one kept for that key.
"""

import logging
from collections.abc import Callable, Hashable, Iterable
from datetime import date, datetime
from typing import Optional, TypeVar

from dubaievents.models import Card

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Weights per populated field when choosing between duplicates
COMPLETENESS_WEIGHTS = {
    "artist": 2,
    "music_genre": 2,
    "event_vibe": 2,
    "analysis_notes": 1,
    "subtitle": 1,
    "venue_instagram": 1,
    "venue_phone": 1,
    "venue_website": 1,
    "venue_address": 1,
    "venue_highlights": 1,
}


def completeness_score(card: Card) -> int:
    event, venue = card.event, card.venue
    present = {
        "artist": event.artist,
        "music_genre": event.music_genre,
        "event_vibe": event.event_vibe,
        "analysis_notes": event.analysis_notes,
        "subtitle": event.subtitle,
        "venue_instagram": venue.instagram,
        "venue_phone": venue.phone,
        "venue_website": venue.website,
        "venue_address": venue.address,
        "venue_highlights": venue.highlights,
    }
    return sum(weight for name, weight in COMPLETENESS_WEIGHTS.items() if present[name])


def identity_key(card: Card) -> tuple[str, str, str, str]:
    event = card.event
    return (
        card.venue.venue_id,
        event.title.lower().strip(),
        event.date_key or event.date_raw,
        event.time_start,
    )


def recurring_key(card: Card) -> tuple[str, str]:
    return (card.venue.venue_id, card.event.title.lower().strip())


def _dedupe(
    items: Iterable[T],
    key: Callable[[T], Hashable],
    prefer: Callable[[T, T], bool],
) -> list[T]:
    """Keep one item per key; `prefer(new, kept)` decides whether new replaces kept."""
    kept: dict[Hashable, T] = {}
    for item in items:
        k = key(item)
        if k not in kept or prefer(item, kept[k]):
            kept[k] = item
    return list(kept.values())


def dedupe_cards(cards: Iterable[Card]) -> list[Card]:
    cards = list(cards)
    result = _dedupe(
        cards,
        identity_key,
        lambda new, kept: completeness_score(new) > completeness_score(kept),
    )
    logger.debug("Identity dedup: %d cards in, %d out", len(cards), len(result))
    return result


def _distance_days(card: Card, today: date) -> float:
    d = card.event.date
    if d is None:
        return float("inf")
    return abs((d - today).days)


def dedupe_recurring(cards: Iterable[Card], now: Optional[datetime] = None) -> list[Card]:
    """One card per venue and event name, keeping the occurrence nearest to today."""
    today = (now or datetime.now()).date()
    cards = list(cards)
    result = _dedupe(
        cards,
        recurring_key,
        lambda new, kept: _distance_days(new, today) < _distance_days(kept, today),
    )
    logger.debug("Recurring dedup: %d cards in, %d out", len(cards), len(result))
    return result


def dedupe_by_event_id(cards: Iterable[Card]) -> list[Card]:
    """First card per event id wins; cards without an id are all kept."""
    seen: set[str] = set()
    result = []
    for card in cards:
        event_id = card.event.event_id
        if event_id:
            if event_id in seen:
                continue
            seen.add(event_id)
        result.append(card)
    return result

