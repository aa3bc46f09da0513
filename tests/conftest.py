"""Shared fixtures: raw API rows shaped like the /api/venues response."""

from datetime import date, datetime

import pytest

from dubaievents.normalize import normalize_record

TODAY = date(2025, 6, 4)  # a Wednesday
NOW = datetime(2025, 6, 4, 12, 0)


def make_row(**overrides) -> dict:
    row = {
        "venue_id": 1,
        "name": "Club Alpha",
        "area": "Downtown Dubai",
        "lat": 25.1972,
        "lng": 55.2744,
        "event_id": None,
        "event_name": "Glow Party",
        "event_date": "2025-06-01",
        "event_time": "10:00 PM",
        "event_categories": [{"primary": "Nightlife", "secondary": "Rooftop Venue", "confidence": 0.9}],
        "attributes": {"venue": ["Rooftop"], "energy": ["High Energy"], "timing": ["Late Night"], "status": ["VIP"]},
    }
    row.update(overrides)
    return row


@pytest.fixture
def row():
    return make_row


@pytest.fixture
def record():
    def _record(**overrides):
        return normalize_record(make_row(**overrides))
    return _record
