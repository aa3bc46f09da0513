"""
Filter predicates over normalized records.

`matches` is the single source of truth for visibility: the map markers and
the list/card views both call it (directly or via `venue_matches_filters`),
so the two can never disagree about what is shown.
"""

from collections.abc import Iterable

from dubaievents.dates import date_key
from dubaievents.models import ATTRIBUTE_FACETS, AttributeFilter, CategoryFilter, FilterState, Record

ALL_AREAS = "All Dubai"
_ALL_AREA_SENTINELS = frozenset({ALL_AREAS, "All"})


def _matches_categories(record: Record, categories: CategoryFilter) -> bool:
    active = categories.active_primaries()
    if not active:
        return True
    for tag in record.event.categories:
        if tag.primary not in active:
            continue
        secondaries = categories.secondaries_for(tag.primary)
        if not secondaries or tag.secondary in secondaries:
            return True
    return False


def _matches_attributes(record: Record, attributes: AttributeFilter) -> bool:
    for facet in ATTRIBUTE_FACETS:
        selected = attributes.facet(facet)
        if not selected:
            continue
        if not any(tag in selected for tag in record.event.attributes.facet(facet)):
            return False
    return True


def _matches_area(record: Record, selected_areas: frozenset[str]) -> bool:
    if not selected_areas or selected_areas & _ALL_AREA_SENTINELS:
        return True
    return record.venue.area in selected_areas


def _matches_dates(record: Record, active_dates: frozenset[str]) -> bool:
    if not active_dates:
        return True
    return record.event.date_key in active_dates


def _matches_search(record: Record, query: str) -> bool:
    query = query.strip().lower()
    if not query:
        return True
    haystack = [record.event.title, record.event.name, record.venue.name]
    for tag in record.event.categories:
        haystack.extend((tag.primary, tag.secondary))
    return any(query in text.lower() for text in haystack if text)


def matches(record: Record, state: FilterState) -> bool:
    """True when the record passes every facet of the filter state."""
    return (
        _matches_categories(record, state.categories)
        and _matches_attributes(record, state.attributes)
        and _matches_area(record, state.selected_areas)
        and _matches_dates(record, state.active_dates)
        and _matches_search(record, state.search_query)
    )


def filter_records(records: Iterable[Record], state: FilterState) -> list[Record]:
    return [r for r in records if matches(r, state)]


def venue_matches_filters(venue_records: Iterable[Record], state: FilterState) -> bool:
    """A venue is shown on the map when any of its events match."""
    return any(matches(r, state) for r in venue_records)


def build_filter_state(
    categories: Iterable[tuple[str, str | None]] = (),
    venue: Iterable[str] = (),
    energy: Iterable[str] = (),
    timing: Iterable[str] = (),
    status: Iterable[str] = (),
    areas: Iterable[str] = (),
    dates: Iterable = (),
    search: str = "",
) -> FilterState:
    """
    Assemble a FilterState from plain values.

    `categories` holds (primary, secondary) pairs; a None or empty secondary
    selects the primary on its own. Dates may be in any parseable format and
    are converted to date keys; unparseable ones are dropped.
    """
    primaries: set[str] = set()
    secondaries: dict[str, set[str]] = {}
    for primary, secondary in categories:
        if secondary:
            secondaries.setdefault(primary, set()).add(secondary)
        else:
            primaries.add(primary)

    date_keys = {key for key in (date_key(d) for d in dates) if key}

    return FilterState(
        categories=CategoryFilter(
            selected_primaries=frozenset(primaries),
            selected_secondaries=frozenset((p, frozenset(s)) for p, s in secondaries.items()),
        ),
        attributes=AttributeFilter(
            venue=frozenset(venue),
            energy=frozenset(energy),
            timing=frozenset(timing),
            status=frozenset(status),
        ),
        selected_areas=frozenset(areas) or frozenset({ALL_AREAS}),
        active_dates=frozenset(date_keys),
        search_query=search,
    )
