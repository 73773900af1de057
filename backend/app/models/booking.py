"""Booking request and response models."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel

from backend.app.errors import ValidationError

from .common import CamelModel, as_number, clean_text, parse_timestamp


class AirportRef(BaseModel):
    """City, IATA code and airport name of one end of a flight."""

    city: str
    code: str
    airport_name: str


class BookingInput(BaseModel):
    """Validated booking request."""

    trip_id: int
    carrier: str
    flight_number: str
    origin: AirportRef
    destination: AirportRef
    depart_at: datetime
    arrive_at: datetime
    price: int
    currency: str = "USD"
    image_url: str | None = None

    @classmethod
    def from_payload(cls, payload: Any) -> BookingInput:
        """Validate an untrusted JSON body, collecting every problem.

        Origin and destination may be sent either as nested objects
        (``{"city", "code", "airportName"}``) or as flat ``originCity``-style
        fields.

        Raises:
            ValidationError: With one message per failed rule.
        """
        data = payload if isinstance(payload, dict) else {}
        errors: list[str] = []

        trip_id = as_number(data.get("tripId"))
        if trip_id is None:
            errors.append("tripId is required")
        carrier = clean_text(data.get("carrier"))
        if carrier is None:
            errors.append("carrier is required")
        flight_number = clean_text(data.get("flightNumber"))
        if flight_number is None:
            errors.append("flightNumber is required")

        origin = _airport_ref(data, "origin")
        if origin is None:
            errors.append("origin details are required")
        destination = _airport_ref(data, "destination")
        if destination is None:
            errors.append("destination details are required")

        depart_at = parse_timestamp(data.get("departAt"))
        if depart_at is None:
            errors.append("departAt must be ISO date")
        arrive_at = parse_timestamp(data.get("arriveAt"))
        if arrive_at is None:
            errors.append("arriveAt must be ISO date")
        price = as_number(data.get("price"))
        if price is None:
            errors.append("price must be number")

        if errors:
            raise ValidationError(errors)

        return cls(
            trip_id=int(trip_id),
            carrier=carrier,
            flight_number=flight_number,
            origin=origin,
            destination=destination,
            depart_at=depart_at,
            arrive_at=arrive_at,
            price=int(price),
            currency=clean_text(data.get("currency")) or "USD",
            image_url=clean_text(data.get("imageUrl")),
        )


def _airport_ref(data: dict[str, Any], prefix: str) -> AirportRef | None:
    nested = data.get(prefix)
    if isinstance(nested, dict):
        city = clean_text(nested.get("city"))
        code = clean_text(nested.get("code"))
        airport_name = clean_text(nested.get("airportName"))
    else:
        city = clean_text(data.get(f"{prefix}City"))
        code = clean_text(data.get(f"{prefix}Code"))
        airport_name = clean_text(data.get(f"{prefix}AirportName"))
    if city is None or code is None or airport_name is None:
        return None
    return AirportRef(city=city, code=code, airport_name=airport_name)


class BookingOut(CamelModel):
    """Booking row as returned to the browser."""

    id: int
    trip_id: int
    carrier: str
    flight_number: str
    origin_city: str
    origin_code: str
    origin_airport_name: str
    destination_city: str
    destination_code: str
    destination_airport_name: str
    depart_at: datetime
    arrive_at: datetime
    price: int
    currency: str
    image_url: str | None = None
    created_at: datetime
