"""Unit tests for trip PDF rendering."""

from datetime import date

import fitz

from backend.app.db.models import TripActivity
from backend.app.planning import render_trip_pdf


def _text(pdf_bytes: bytes) -> str:
    with fitz.open(stream=pdf_bytes, filetype="pdf") as doc:
        return "\n".join(page.get_text() for page in doc)


def test_empty_trip(trip) -> None:
    content = render_trip_pdf(trip, [])

    assert content.startswith(b"%PDF")
    text = _text(content)
    assert "Durga Puja Weekend" in text
    assert "No activities planned yet." in text
    assert "INR 5000" in text


def test_activities_grouped_by_day(test_session, trip, heritage_sites, restaurants) -> None:
    activities = [
        TripActivity(
            trip_id=trip.trip_id,
            date=date(2026, 10, 18),
            restaurant_id=restaurants[0].restaurant_id,
            estimated_cost=400,
            order_index=0,
        ),
        TripActivity(
            trip_id=trip.trip_id,
            date=date(2026, 10, 17),
            site_id=heritage_sites[0].site_id,
            estimated_cost=250,
            notes="Arrive before the queues",
            order_index=0,
        ),
    ]
    test_session.add_all(activities)
    test_session.commit()

    text = _text(render_trip_pdf(trip, activities))

    assert "Day 1" in text
    assert "Day 2" in text
    assert text.index("Site 1") < text.index("Restaurant 1")
    assert "Arrive before the queues" in text
    assert "Est: INR 650" in text


def test_long_trip_spills_onto_more_pages(test_session, trip) -> None:
    activities = [
        TripActivity(
            trip_id=trip.trip_id,
            date=date(2026, 10, 17 + i % 3),
            notes=f"Walk number {i} through North Kolkata lanes",
            order_index=i,
        )
        for i in range(60)
    ]

    content = render_trip_pdf(trip, activities)

    with fitz.open(stream=content, filetype="pdf") as doc:
        assert doc.page_count > 1
