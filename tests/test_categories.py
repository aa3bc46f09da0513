from dubaievents.categories import category_color, display_name, hex_color, marker_color, secondary_categories
from dubaievents.models import FilterState


def test_lookups():
    assert display_name("Food & Dining") == "Food & Drink"
    assert display_name("Karaoke") == "Karaoke"
    assert category_color("Nightlife") == "pink"
    assert category_color("Karaoke") == "gray"
    assert hex_color("green") == "#10B981"
    assert hex_color("chartreuse") == "#6B7280"
    assert "Rooftop Venue" in secondary_categories("Nightlife")
    assert secondary_categories("Karaoke") == []


def test_marker_color_uses_first_categorised_event(record):
    records = [record(event_categories=None), record(event_categories=[{"primary": "Music Events"}])]
    assert marker_color(records, FilterState()) == "#10B981"
    assert marker_color([record(event_categories=None)], FilterState()) == "#6B7280"
    assert marker_color([], FilterState()) == "#6B7280"
