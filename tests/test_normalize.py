from datetime import date

import pytest

from dubaievents.models import EventAttributes
from dubaievents.normalize import (
    format_time,
    is_valid_title,
    normalize_record,
    normalize_records,
    parse_event_time,
    select_best_title,
    to_string_list,
)
from tests.conftest import make_row


def test_json_and_comma_lists_normalize_the_same():
    assert to_string_list('["Rooftop","Live DJ"]') == ["Rooftop", "Live DJ"]
    assert to_string_list("Rooftop, Live DJ") == ["Rooftop", "Live DJ"]
    assert to_string_list(["Rooftop", "Live DJ"]) == ["Rooftop", "Live DJ"]


def test_list_of_objects_uses_first_key():
    assert to_string_list('[{"Techno": 0.8}, {"House": 0.5}]') == ["Techno", "House"]
    assert to_string_list([{"Techno": 1}, 42]) == ["Techno", "42"]


def test_empty_and_scalar_values():
    assert to_string_list(None) == []
    assert to_string_list("") == []
    assert to_string_list([]) == []
    assert to_string_list("Rooftop") == ["Rooftop"]
    assert to_string_list("[broken") == ["[broken"]


def test_title_prefers_event_name():
    assert select_best_title("Glow Party", "DJ Xenon", "Club Alpha") == "Glow Party"


def test_short_artist_falls_through_to_venue_name():
    assert select_best_title("", "DJ", "Club Alpha") == "Club Alpha"


def test_title_validity_rules():
    assert not is_valid_title("Ladies Ni...")
    assert not is_valid_title("2025-06-01")
    assert not is_valid_title("abc")
    assert is_valid_title("  Glow Party  ")
    assert select_best_title(None, None, None) == "Event"


def test_parse_event_time_range_and_single():
    assert parse_event_time("8:00 PM - 2:00 AM") == ("8:00 PM", "2:00 AM")
    assert parse_event_time(" 10:00 pm ") == ("10:00 pm", "")
    assert parse_event_time("late") == ("", "")
    assert parse_event_time(None) == ("", "")
    assert parse_event_time(2200) == ("", "")


def test_format_time():
    assert format_time("9:30pm") == "9:30 PM"
    assert format_time("tonight") == ""
    assert format_time("") == ""


def test_normalize_record_fields():
    rec = normalize_record(make_row(
        venue_id=7,
        area=None,
        venue_area="JBR",
        final_instagram="@clubalpha",
        event_categories='[{"primary": "Nightlife", "secondary": "Nightclub", "confidence": 1.7}]',
        attributes='{"venue": "Indoor, Rooftop", "status": ["Free Entry"]}',
        music_genre='["Techno","House"]',
        event_time="9:00 PM - 3:00 AM",
    ))
    assert rec.venue.venue_id == "7"
    assert rec.event.venue_id == "7"
    assert rec.venue.area == "JBR"
    assert rec.venue.instagram == "@clubalpha"
    assert rec.event.categories[0].secondary == "Nightclub"
    assert rec.event.categories[0].confidence == 1.0
    assert rec.event.attributes == EventAttributes(venue=("Indoor", "Rooftop"), status=("Free Entry",))
    assert rec.event.music_genre == ("Techno", "House")
    assert (rec.event.time_start, rec.event.time_end) == ("9:00 PM", "3:00 AM")
    assert rec.event.date == date(2025, 6, 1)
    assert rec.event.subtitle == "NIGHTCLUB | INDOOR | FREE ENTRY"


def test_invalid_coordinates_are_dropped():
    assert normalize_record(make_row(lat=123.0, lng=55.0)).venue.coordinates is None
    assert normalize_record(make_row(lat="n/a")).venue.coordinates is None
    assert normalize_record(make_row()).venue.coordinates == (25.1972, 55.2744)


def test_bad_date_is_kept_raw():
    rec = normalize_record(make_row(event_date="sometime soon"))
    assert rec.event.date is None
    assert rec.event.date_raw == "sometime soon"


def test_malformed_categories_and_attributes():
    rec = normalize_record(make_row(event_categories="not json", attributes=["oops"]))
    assert rec.event.categories == ()
    assert rec.event.attributes == EventAttributes()
    assert rec.event.subtitle == ""


def test_normalize_records_skips_non_dicts():
    assert len(normalize_records([make_row(), "junk", None])) == 1


def test_json_encoded_string_is_unwrapped_before_splitting():
    assert to_string_list('"Rooftop, Live DJ"') == ["Rooftop", "Live DJ"]
    assert to_string_list('"Rooftop"') == ["Rooftop"]


@pytest.mark.parametrize("value", ["10:00 PM", "Fri", "June"])
def test_event_date_without_a_day_is_left_undated(value):
    rec = normalize_record(make_row(event_date=value))
    assert rec.event.date is None
    assert rec.event.date_raw == value
