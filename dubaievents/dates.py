"""
Date parsing and per-venue date indexing.

Date keys are ISO calendar days ("2025-06-01"). Any time-of-day or UTC offset
in the source string is ignored: the day as written is the day the event
belongs to.
"""

import calendar
from collections import defaultdict
from collections.abc import Iterable
from datetime import date, datetime, timedelta
from typing import Optional

from dateutil import parser as dateparser

from dubaievents.models import DateOption, Record

DATE_PRESETS = ("all", "today", "this-week", "next-week", "this-month", "next-month")
_PARSE_DEFAULTS = (datetime(2000, 1, 1), datetime(2001, 2, 2))


def parse_date_from_format(value) -> date:
    """
    Parse an API date value into a calendar day.

    Accepts date/datetime objects and strings such as "2025-06-01",
    "2025-06-01T22:00:00+04:00", "Sun Jun 01 2025" or "June 1, 2025".
    Raises ValueError when the value cannot be parsed or does not name a
    full calendar day (a bare time, weekday or month).
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"Not a date: {value!r}")
    # Parse against two different defaults: a day that depends on the default
    # was never in the input ("10:00 PM", "Fri", "June").
    try:
        first, second = (
            dateparser.parse(value.strip(), default=default).date()
            for default in _PARSE_DEFAULTS
        )
    except (dateparser.ParserError, OverflowError) as exc:
        raise ValueError(f"Unparseable date: {value!r}") from exc
    if first != second:
        raise ValueError(f"Incomplete date: {value!r}")
    return first


def parse_date(value) -> Optional[date]:
    """Like parse_date_from_format, but returns None instead of raising."""
    try:
        return parse_date_from_format(value)
    except ValueError:
        return None


def date_key(value) -> Optional[str]:
    d = parse_date(value)
    return d.isoformat() if d else None


def _weekday_abbr(d: date) -> str:
    return calendar.day_abbr[d.weekday()].upper()


def _month_day(d: date) -> str:
    return f"{calendar.month_abbr[d.month]} {d.day}"


def _make_option(d: date, today: date, event_count: int = 0) -> DateOption:
    return DateOption(
        day=_weekday_abbr(d),
        date=_month_day(d),
        date_key=d.isoformat(),
        is_today=d == today,
        is_saturday=d.weekday() == 5,
        is_sunday=d.weekday() == 6,
        event_count=event_count,
    )


def build_venue_date_index(
    records: Iterable[Record],
    today: Optional[date] = None,
) -> dict[str, tuple[DateOption, ...]]:
    """
    Map each venue id to the sorted, de-duplicated days it has events on.

    Records without a venue id or a parseable date are skipped. Venues with no
    dated events are absent from the result.
    """
    today = today or date.today()
    seen: dict[str, dict[str, date]] = defaultdict(dict)

    for record in records:
        venue_id = record.venue.venue_id
        d = record.event.date
        if not venue_id or d is None:
            continue
        seen[venue_id].setdefault(d.isoformat(), d)

    return {
        venue_id: tuple(_make_option(d, today) for d in sorted(days.values()))
        for venue_id, days in seen.items()
    }


def count_events_by_date(records: Iterable[Record]) -> dict[str, int]:
    counts: dict[str, int] = defaultdict(int)
    for record in records:
        if key := record.event.date_key:
            counts[key] += 1
    return dict(counts)


def build_date_options(
    date_strings: Iterable,
    today: Optional[date] = None,
    lookback_days: Optional[int] = None,
    counts: Optional[dict[str, int]] = None,
) -> list[DateOption]:
    """
    Build the global date pill list from the filter-options `dates` field.

    Unparseable entries are skipped. With a look-back, days earlier than
    `today - lookback_days` are dropped.
    """
    today = today or date.today()
    counts = counts or {}
    earliest = today - timedelta(days=lookback_days) if lookback_days is not None else None

    days: dict[str, date] = {}
    for value in date_strings:
        d = parse_date(value)
        if d is None:
            continue
        if earliest is not None and d < earliest:
            continue
        days.setdefault(d.isoformat(), d)

    return [
        _make_option(d, today, counts.get(key, 0))
        for key, d in sorted(days.items(), key=lambda kv: kv[1])
    ]


def date_range_keys(preset: str, today: Optional[date] = None) -> list[str]:
    """
    Expand a date preset into the date keys it selects.

    "all" returns an empty list, which means no date restriction.
    """
    if preset not in DATE_PRESETS:
        raise ValueError(f"Unknown date preset '{preset}'. Choose from: {', '.join(DATE_PRESETS)}")
    today = today or date.today()

    if preset == "all":
        return []
    if preset == "today":
        return [today.isoformat()]

    if preset == "this-week":
        # Today through Sunday
        start, days = today, 6 - today.weekday() + 1
    elif preset == "next-week":
        start, days = today + timedelta(days=7 - today.weekday()), 7
    elif preset == "this-month":
        last = calendar.monthrange(today.year, today.month)[1]
        start, days = today, last - today.day + 1
    else:
        year = today.year + 1 if today.month == 12 else today.year
        month = today.month % 12 + 1
        start, days = date(year, month, 1), calendar.monthrange(year, month)[1]

    return [(start + timedelta(days=i)).isoformat() for i in range(days)]
