"""Integration tests for the booking endpoints."""

from unittest.mock import AsyncMock, patch

import pytest

from backend.app.db.models.trip import PotentialTrip
from backend.app.db.trips import create_trip

pytestmark = pytest.mark.integration

IMAGE = "https://images.unsplash.com/photo-tokyo"


@pytest.fixture
def trip(test_session) -> PotentialTrip:
    return create_trip(
        test_session, name="Tokyo spring", destination="Tokyo", source="search"
    )


def booking_body(trip_id: int, **overrides) -> dict:
    body = {
        "tripId": trip_id,
        "carrier": "Air France",
        "flightNumber": "AF200",
        "origin": {"city": "Paris", "code": "CDG", "airportName": "Charles de Gaulle"},
        "destination": {"city": "Tokyo", "code": "HND", "airportName": "Haneda"},
        "departAt": "2025-04-01T09:00:00.000Z",
        "arriveAt": "2025-04-01T12:45:00.000Z",
        "price": 450,
    }
    body.update(overrides)
    return body


def test_booking_marks_trip_booked_and_looks_up_photo(client, test_session, trip):
    lookup = AsyncMock(return_value=IMAGE)
    with patch("backend.app.api.bookings.find_destination_image_url", lookup):
        response = client.post("/api/bookings", json=booking_body(trip.id))

    assert response.status_code == 201
    data = response.json()
    assert data["tripId"] == trip.id
    assert data["flightNumber"] == "AF200"
    assert data["originCode"] == "CDG"
    assert data["destinationAirportName"] == "Haneda"
    assert data["departAt"] == "2025-04-01T09:00:00"
    assert data["currency"] == "USD"
    assert data["imageUrl"] == IMAGE
    lookup.assert_awaited_once_with("Tokyo")

    test_session.refresh(trip)
    assert trip.is_booked is True


def test_supplied_image_skips_lookup(client, trip):
    lookup = AsyncMock(return_value=IMAGE)
    with patch("backend.app.api.bookings.find_destination_image_url", lookup):
        response = client.post(
            "/api/bookings", json=booking_body(trip.id, imageUrl="https://example.com/a.jpg")
        )

    assert response.json()["imageUrl"] == "https://example.com/a.jpg"
    lookup.assert_not_called()


def test_photo_failure_leaves_image_empty(client, trip):
    lookup = AsyncMock(side_effect=RuntimeError("rate limited"))
    with patch("backend.app.api.bookings.find_destination_image_url", lookup):
        response = client.post("/api/bookings", json=booking_body(trip.id))

    assert response.status_code == 201
    assert response.json()["imageUrl"] is None


def test_flat_airport_fields(client, trip):
    body = booking_body(
        trip.id,
        originCity="Paris",
        originCode="CDG",
        originAirportName="Charles de Gaulle",
        destinationCity="Tokyo",
        destinationCode="HND",
        destinationAirportName="Haneda",
    )
    del body["origin"]
    del body["destination"]

    with patch(
        "backend.app.api.bookings.find_destination_image_url", AsyncMock(return_value=None)
    ):
        response = client.post("/api/bookings", json=body)

    assert response.status_code == 201
    assert response.json()["originCity"] == "Paris"


def test_invalid_booking(client, trip):
    response = client.post(
        "/api/bookings", json=booking_body(trip.id, departAt="tomorrow", price="cheap")
    )

    assert response.status_code == 400
    assert response.json() == {"errors": ["departAt must be ISO date", "price must be number"]}


def test_list_bookings_newest_first(client, trip):
    with patch(
        "backend.app.api.bookings.find_destination_image_url", AsyncMock(return_value=None)
    ):
        for number in ("AF200", "NH207"):
            client.post("/api/bookings", json=booking_body(trip.id, flightNumber=number))

    response = client.get("/api/bookings")

    assert response.status_code == 200
    bookings = response.json()["bookings"]
    assert [b["flightNumber"] for b in bookings] == ["NH207", "AF200"]
    assert "createdAt" in bookings[0]


def test_booked_trip_leaves_recent_searches(client, trip):
    assert [s["id"] for s in client.get("/api/recent-searches").json()] == [trip.id]

    with patch(
        "backend.app.api.bookings.find_destination_image_url", AsyncMock(return_value=None)
    ):
        client.post("/api/bookings", json=booking_body(trip.id))

    assert client.get("/api/recent-searches").json() == []
