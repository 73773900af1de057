"""Deterministic flight offers for a complete trip."""

from __future__ import annotations

from datetime import datetime, timedelta
from itertools import zip_longest

from backend.app.models.components import FlightComponent
from backend.app.models.trip import TripState

from .regions import (
    AIRLINE_SETS,
    Airline,
    Airport,
    carrier_code,
    resolve_airport,
    resolve_region,
)

OFFER_COUNT = 3
MAX_CANDIDATES = 6
FALLBACK_REGION = "us"

# Departure hour of each offer slot
DEPARTURE_HOURS = (9, 11, 13)
BASE_PRICE_USD = 450
PRICE_STEP_USD = 70
FLIGHT_DURATION = timedelta(hours=3, minutes=45)


def candidate_carriers(origin: str | None, destination: str | None) -> list[Airline]:
    """Pick airlines serving the route, origin region first.

    Origin-region and destination-region airlines alternate so both ends of
    the route are represented among the first offers. This is deliberately not
    "all origin airlines, then all destination airlines": with three-airline
    sets that order would fill every offer from the origin region, and a
    Tokyo to Paris search must still show a French carrier. Destinations outside
    the known regions use the US set, and US carriers top up the list when
    fewer than three were found.
    """
    origin_region = resolve_region(origin)
    destination_region = resolve_region(destination) or FALLBACK_REGION

    origin_set = AIRLINE_SETS[origin_region] if origin_region else ()
    destination_set = AIRLINE_SETS[destination_region]

    ordered: list[Airline] = []
    for pair in zip_longest(origin_set, destination_set):
        ordered.extend(airline for airline in pair if airline is not None)

    combined: list[Airline] = []
    seen: set[str] = set()

    def push_unique(airlines: list[Airline] | tuple[Airline, ...]) -> None:
        for airline in airlines:
            if len(combined) >= MAX_CANDIDATES:
                return
            key = airline.carrier.lower()
            if key in seen:
                continue
            seen.add(key)
            combined.append(airline)

    push_unique(ordered)
    if len(combined) < OFFER_COUNT:
        push_unique(AIRLINE_SETS[FALLBACK_REGION])
    return combined


def _iso_utc(moment: datetime) -> str:
    return moment.strftime("%Y-%m-%dT%H:%M:%S.000Z")


def synthesize_flights(
    trip: TripState, trip_id: int, now: datetime | None = None
) -> list[FlightComponent]:
    """Build three flight offers for a trip.

    Args:
        trip: Trip snapshot; origin, destination and start date drive the offers
        trip_id: Id used to derive offer ids (``"<tripId>-<n>"``)
        now: Reference date when the trip has no start date

    Returns:
        Exactly three FlightComponent payloads
    """
    base = trip.start_date or now or datetime.now()
    base_day = base.replace(hour=0, minute=0, second=0, microsecond=0)

    airlines = candidate_carriers(trip.origin, trip.destination)
    origin_airport = resolve_airport(trip.origin)
    destination_airport = resolve_airport(trip.destination)

    offers: list[FlightComponent] = []
    for i, hour in enumerate(DEPARTURE_HOURS):
        airline = airlines[i] if i < len(airlines) else airlines[0]
        depart_at = base_day + timedelta(hours=hour)
        arrive_at = depart_at + FLIGHT_DURATION

        offers.append(
            FlightComponent(
                id=f"{trip_id}-{i + 1}",
                carrier=airline.carrier,
                carrier_logo=airline.logo,
                flight_number=f"{carrier_code(airline.carrier)}{200 + i * 7}",
                origin=_airport_label(origin_airport, trip.origin),
                destination=_airport_label(destination_airport, trip.destination),
                depart_at=_iso_utc(depart_at),
                arrive_at=_iso_utc(arrive_at),
                duration_minutes=int(FLIGHT_DURATION.total_seconds() // 60),
                price=BASE_PRICE_USD + i * PRICE_STEP_USD,
                currency="USD",
                origin_city=origin_airport.city if origin_airport else None,
                origin_code=origin_airport.code if origin_airport else None,
                origin_airport_name=origin_airport.name if origin_airport else None,
                destination_city=destination_airport.city if destination_airport else None,
                destination_code=destination_airport.code if destination_airport else None,
                destination_airport_name=(
                    destination_airport.name if destination_airport else None
                ),
            )
        )

    return offers


def _airport_label(airport: Airport | None, text: str | None) -> str:
    if airport is not None:
        return f"{airport.code} ({airport.city})"
    return (text or "").strip()
