import pytest

from dubaievents.filters import build_filter_state
from dubaievents.models import FilterState
from dubaievents.normalize import normalize_records
from dubaievents.pipeline import build_cards, map_markers, venue_cards
from tests.conftest import NOW, make_row


def test_list_view_collapses_duplicate_rows():
    rows = [
        make_row(event_name="Glow Party", event_date="2025-06-01", event_time="10:00 PM"),
        make_row(event_name="glow party ", event_date="2025-06-01", event_time="10:00 PM", artist="DJ X"),
    ]
    cards = build_cards(rows, FilterState())
    assert len(cards) == 1
    assert cards[0].event.artist == "DJ X"


def test_list_view_applies_filters_before_dedup():
    rows = [
        make_row(area="JBR", event_name="Beach Beats"),
        make_row(event_name="Glow Party"),
    ]
    cards = build_cards(rows, build_filter_state(areas=["Downtown Dubai"]))
    assert [c.event.title for c in cards] == ["Glow Party"]


def test_pipeline_is_deterministic():
    rows = [make_row(event_date=f"2025-06-0{d}") for d in (3, 1, 2)]
    state = build_filter_state(categories=[("Nightlife", None)])
    assert build_cards(rows, state) == build_cards(rows, state)


def test_recurring_view_collapses_dates_and_sorts():
    rows = [
        make_row(event_name="Glow Party", event_date="2025-06-20"),
        make_row(event_name="Glow Party", event_date="2025-06-05"),
        make_row(event_name="Sunset Sessions", venue_id=2, name="Club Beta", event_date="2025-06-04"),
        make_row(event_name="Mystery Night", venue_id=3, name="Club Gamma", event_date="TBA"),
    ]
    cards = build_cards(rows, FilterState(), view="recurring", now=NOW)
    assert [(c.event.title, c.event.date_key) for c in cards] == [
        ("Sunset Sessions", "2025-06-04"),
        ("Glow Party", "2025-06-05"),
        ("Mystery Night", None),
    ]


def test_recurring_view_respects_active_dates():
    rows = [
        make_row(event_name="Glow Party", event_date="2025-06-05"),
        make_row(event_name="Glow Party", event_date="2025-06-20"),
    ]
    state = build_filter_state(dates=["2025-06-20"])
    cards = build_cards(rows, state, view="recurring", now=NOW)
    assert [c.event.date_key for c in cards] == ["2025-06-20"]


def test_unknown_view():
    with pytest.raises(ValueError):
        build_cards([], FilterState(), view="grid")


def test_venue_cards_for_a_day():
    records = normalize_records([
        make_row(event_id="e1", event_date="2025-06-02"),
        make_row(event_id="e1", event_date="2025-06-02"),
        make_row(event_id="e2", event_date="2025-06-01", event_name="Brunch Club"),
        make_row(event_id="e3", venue_id=2, event_date="2025-06-02"),
    ])
    assert [c.event.event_id for c in venue_cards(records, "1")] == ["e2", "e1"]
    assert [c.event.event_id for c in venue_cards(records, "1", "2025-06-02")] == ["e1"]
    assert venue_cards(records, "99") == []


def test_map_markers_colour_by_category_and_match():
    records = normalize_records([
        make_row(venue_id=1),
        make_row(venue_id=1, event_name="Second Night"),
        make_row(venue_id=2, name="Stadium Bar", area="JBR",
                 event_categories=[{"primary": "Sports & Viewing", "secondary": "Match Viewing"}]),
        make_row(venue_id=3, name="Nowhere", lat=None, lng=None),
    ])
    markers = map_markers(records, build_filter_state(areas=["Downtown Dubai"]))

    assert [m.venue.venue_id for m in markers] == ["1", "2"]
    assert markers[0].matches and markers[0].color == "#EC4899"
    assert not markers[1].matches and markers[1].color == "#6B7280"

    markers = map_markers(records, FilterState())
    assert markers[1].color == "#EF4444"
