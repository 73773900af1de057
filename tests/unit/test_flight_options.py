"""Tests for synthesized flight offers and the region tables behind them."""

from datetime import datetime

import pytest
from hypothesis import given
from hypothesis import strategies as st

from backend.app.models.trip import TripState
from backend.app.planning.flight_options import candidate_carriers, synthesize_flights
from backend.app.planning.regions import (
    AIRLINE_SETS,
    carrier_code,
    resolve_airport,
    resolve_region,
)


def make_trip(origin="Paris", destination="Tokyo", start=datetime(2025, 3, 10)) -> TripState:
    return TripState(
        id=42,
        name="Test trip",
        destination=destination,
        origin=origin,
        budget=2000,
        start_date=start,
        end_date=datetime(2025, 3, 20),
    )


class TestRegions:
    @pytest.mark.parametrize(
        "text,region",
        [
            ("Paris, France", "france"),
            ("kyoto", "japan"),
            ("London", "uk"),
            ("New York City", "us"),
            ("Munich", "germany"),
            ("Amsterdam", "netherlands"),
            ("Abu Dhabi", "uae"),
            ("Doha", "qatar"),
            ("Singapore", "singapore"),
        ],
    )
    def test_resolve_region(self, text, region):
        assert resolve_region(text) == region

    def test_short_codes_match_whole_words_only(self):
        """'us' inside another word is not the United States."""
        assert resolve_region("Mauritius") is None
        assert resolve_region("Duke of York") is None
        assert resolve_region("Austin, US") == "us"

    def test_unknown_and_blank(self):
        assert resolve_region("Reykjavik") is None
        assert resolve_region("") is None
        assert resolve_region(None) is None

    def test_resolve_airport(self):
        airport = resolve_airport("Tokyo, Japan")
        assert airport is not None
        assert airport.code == "HND"
        assert airport.city == "Tokyo"
        assert resolve_airport("Lima") is None

    def test_carrier_code(self):
        assert carrier_code("Singapore Airlines") == "SI"
        assert carrier_code("Air France") == "AF"
        assert carrier_code("Zed Air") == "ZE"


class TestCandidateCarriers:
    def test_origin_and_destination_sets_interleave(self):
        carriers = [a.carrier for a in candidate_carriers("Paris", "Tokyo")]
        assert carriers[:3] == ["Air France", "All Nippon Airways", "Transavia"]
        assert len(carriers) == 6

    def test_duplicates_removed(self):
        carriers = [a.carrier.lower() for a in candidate_carriers("London", "Amsterdam")]
        assert len(carriers) == len(set(carriers))
        assert carriers.count("easyjet") == 1

    def test_unknown_destination_uses_us_set(self):
        carriers = candidate_carriers(None, "Atlantis")
        assert tuple(carriers) == AIRLINE_SETS["us"]

    def test_small_region_topped_up_with_us_carriers(self):
        carriers = [a.carrier for a in candidate_carriers(None, "Doha")]
        assert carriers[0] == "Qatar Airways"
        assert carriers[1:] == ["Delta Air Lines", "United Airlines", "American Airlines"]

    @given(
        st.sampled_from(["Paris", "Tokyo", "London", "Doha", "Berlin", "Mars", None]),
        st.sampled_from(["Paris", "Tokyo", "Dubai", "Singapore", "Nowhere", None]),
    )
    def test_always_between_three_and_six_unique_carriers(self, origin, destination):
        carriers = candidate_carriers(origin, destination)
        names = [a.carrier.lower() for a in carriers]
        assert 3 <= len(carriers) <= 6
        assert len(names) == len(set(names))


class TestSynthesizeFlights:
    def test_three_offers_with_fixed_schedule_and_prices(self):
        offers = synthesize_flights(make_trip(), trip_id=42)

        assert len(offers) == 3
        assert [o.depart_at for o in offers] == [
            "2025-03-10T09:00:00.000Z",
            "2025-03-10T11:00:00.000Z",
            "2025-03-10T13:00:00.000Z",
        ]
        assert offers[0].arrive_at == "2025-03-10T12:45:00.000Z"
        assert [o.price for o in offers] == [450, 520, 590]
        assert all(o.duration_minutes == 225 for o in offers)
        assert all(o.currency == "USD" for o in offers)

    def test_ids_and_flight_numbers(self):
        offers = synthesize_flights(make_trip(), trip_id=42)

        assert [o.id for o in offers] == ["42-1", "42-2", "42-3"]
        assert [o.flight_number for o in offers] == ["AF200", "NH207", "HV214"]

    def test_paris_to_tokyo_offers_both_ends(self):
        """Offers for Paris to Tokyo include a French and a Japanese carrier."""
        carriers = {o.carrier for o in synthesize_flights(make_trip(), trip_id=1)}
        assert carriers & {a.carrier for a in AIRLINE_SETS["france"]}
        assert carriers & {a.carrier for a in AIRLINE_SETS["japan"]}

    def test_known_airports_fill_structured_fields(self):
        offer = synthesize_flights(make_trip(), trip_id=1)[0]

        assert offer.origin == "CDG (Paris)"
        assert offer.destination == "HND (Tokyo)"
        assert offer.origin_code == "CDG"
        assert offer.destination_airport_name == "Haneda"

    def test_unknown_places_pass_through(self):
        offer = synthesize_flights(make_trip(origin="Lima", destination="Cusco"), trip_id=1)[0]

        assert offer.origin == "Lima"
        assert offer.destination == "Cusco"
        assert offer.origin_code is None
        assert "originCode" not in offer.to_wire()

    def test_missing_start_date_uses_reference_day(self):
        trip = make_trip(start=None)
        offers = synthesize_flights(trip, trip_id=1, now=datetime(2025, 1, 2, 17, 30))
        assert offers[0].depart_at == "2025-01-02T09:00:00.000Z"

    def test_wire_shape(self):
        wire = synthesize_flights(make_trip(), trip_id=7)[0].to_wire()

        assert wire["type"] == "flight"
        assert wire["carrierLogo"].startswith("https://")
        assert wire["durationMinutes"] == 225
        assert wire["flightNumber"] == "AF200"
