from dubaievents.cards import (
    build_card,
    card_to_dict,
    format_date_pill,
    format_display_date,
    format_entry_price,
    format_short_date,
    smart_subtitle,
)
from dubaievents.models import DatePill


def test_display_date():
    assert format_display_date("2025-06-01") == "Sunday, Jun 1, 2025"
    assert format_display_date("next friday-ish") == "next friday-ish"
    assert format_display_date("") == ""


def test_date_pill():
    assert format_date_pill("2025-06-01") == DatePill(day="SUN", date="Jun 1")
    assert format_date_pill("??") == DatePill(day="", date="??")


def test_short_date():
    assert format_short_date("2025-06-01") == "1 Jun 25"
    assert format_short_date("soon") == "soon"


def test_smart_subtitle_suppresses_name_concatenation():
    assert smart_subtitle("Glow Party", "Club Alpha", "Club Alpha - Glow Party") == ""
    assert smart_subtitle("Glow Party", "Club Alpha", "Glow Party @ Club Alpha!") == ""


def test_smart_subtitle_keeps_informative_text():
    assert smart_subtitle("Glow Party", "Club Alpha", "ROOFTOP VENUE | VIP") == "ROOFTOP VENUE | VIP"
    long_subtitle = "Club Alpha presents Glow Party with resident DJs all night"
    assert smart_subtitle("Glow Party", "Club Alpha", long_subtitle) == long_subtitle


def test_smart_subtitle_needs_all_parts():
    assert smart_subtitle("", "Club Alpha", "Anything") == ""
    assert smart_subtitle("Glow Party", "Club Alpha", "   ") == ""


def test_entry_price():
    assert format_entry_price("150") == "AED 150"
    assert format_entry_price("AED 200") == "AED 200"
    assert format_entry_price(None) == "Contact for pricing"


def test_build_card(record):
    card = build_card(record(ticket_price=150, special_offers=None))
    assert card.display_date == "Sunday, Jun 1, 2025"
    assert card.date_pill == DatePill(day="SUN", date="Jun 1")
    assert card.smart_subtitle == "ROOFTOP VENUE | ROOFTOP | VIP"
    assert card.entry_price == "AED 150"
    assert card.offers == "No special offers"
    assert card.category == "Nightlife"


def test_build_card_fallbacks(record):
    card = build_card(record(event_categories=None, attributes=None, event_date="whenever"))
    assert card.category == "Music Events"
    assert card.smart_subtitle == ""
    assert card.display_date == "whenever"


def test_card_to_dict(record):
    data = card_to_dict(build_card(record(event_time="10:00pm - 3:00am")))
    assert data["title"] == "Glow Party"
    assert data["date"] == "2025-06-01"
    assert data["time_start"] == "10:00 PM"
    assert data["time_end"] == "3:00 AM"
    assert data["venue"]["coordinates"] == [25.1972, 55.2744]
    assert data["categories"][0]["secondary"] == "Rooftop Venue"
