"""Completion check gating prompt generation versus flight synthesis."""

from backend.app.models.trip import TRIP_FIELDS, TripField, TripState


def _has_text(value: str | None) -> bool:
    return isinstance(value, str) and value.strip() != ""


def field_present(trip: TripState, field: TripField) -> bool:
    """Return True when ``field`` holds a usable value on ``trip``."""
    if field == "name":
        return _has_text(trip.name)
    if field == "destination":
        return _has_text(trip.destination)
    if field == "origin":
        return _has_text(trip.origin)
    if field == "budget":
        return isinstance(trip.budget, int) and not isinstance(trip.budget, bool)
    if field == "startDate":
        return trip.start_date is not None
    if field == "endDate":
        return trip.end_date is not None
    return False


def missing_fields(trip: TripState) -> list[TripField]:
    """List the required fields still missing, in canonical order."""
    return [field for field in TRIP_FIELDS if not field_present(trip, field)]


def is_complete(trip: TripState) -> bool:
    """A trip is complete when all six required fields are present."""
    return not missing_fields(trip)
