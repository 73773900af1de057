"""Bring the stored trip in line with what the user has told us."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from pydantic import BaseModel, field_validator
from sqlalchemy.orm import Session

from backend.app.db.models.trip import SEARCH_SOURCE
from backend.app.db.trips import create_trip, get_trip, update_trip
from backend.app.errors import NotFoundError, ValidationError
from backend.app.exec import attempt
from backend.app.llm import LLMClient
from backend.app.models.common import as_number, clean_text, parse_timestamp
from backend.app.models.trip import TripInput, TripState

from .field_extractor import extract_fields

logger = logging.getLogger(__name__)

# OpenAI function schema for reconciling trip fields
UPDATE_TRIP_FUNCTION = {
    "name": "update_trip",
    "description": "Update the trips row with any newly available fields.",
    "parameters": {
        "type": "object",
        "properties": {
            "name": {"type": "string", "description": "Trip name"},
            "destination": {"type": "string", "description": "Destination city or country"},
            "origin": {"type": "string", "description": "Departure city or airport"},
            "budget": {"type": "integer", "description": "Total budget in USD"},
            "startDate": {"type": "string", "description": "YYYY-MM-DD"},
            "endDate": {"type": "string", "description": "YYYY-MM-DD"},
        },
        "required": [],
    },
}

SYSTEM_PROMPT = (
    "You reconcile trip fields from user-provided data and prior conversation. "
    "If you find any concrete values for name, destination, origin, budget, "
    "startDate, endDate that improve the database record, call the update_trip "
    "tool once with those fields. Use ISO YYYY-MM-DD for dates. If nothing new, "
    "do not call the tool."
)


class UpdateTripArgs(BaseModel):
    """Arguments of an ``update_trip`` tool call.

    Values that are blank or do not parse are dropped rather than rejected, so
    one bad field does not discard the rest of the call.
    """

    name: str | None = None
    destination: str | None = None
    origin: str | None = None
    budget: int | None = None
    startDate: Any = None
    endDate: Any = None

    @field_validator("name", "destination", "origin", mode="before")
    @classmethod
    def _text(cls, value: Any) -> str | None:
        return clean_text(value)

    @field_validator("budget", mode="before")
    @classmethod
    def _budget(cls, value: Any) -> int | None:
        number = as_number(value)
        return int(number) if number is not None else None

    @field_validator("startDate", "endDate", mode="before")
    @classmethod
    def _date(cls, value: Any) -> Any:
        return parse_timestamp(value)

    def changes(self) -> dict[str, Any]:
        """Column changes carried by this call."""
        columns = {
            "name": self.name,
            "destination": self.destination,
            "origin": self.origin,
            "budget": self.budget,
            "start_date": self.startDate,
            "end_date": self.endDate,
        }
        return {column: value for column, value in columns.items() if value is not None}


@dataclass
class ReconcileOutcome:
    """Trip state before and after reconciliation, plus the request fields."""

    trip_id: int
    before: TripState
    after: TripState
    provided: TripInput


def _create_from_request(session: Session, request: TripInput) -> int:
    if request.destination is None and request.name is None:
        raise ValidationError("destination or name is required to create a trip")

    if request.name:
        name = request.name
    elif request.destination:
        name = f"Trip to {request.destination}"
    else:
        name = "New Trip"

    trip = create_trip(
        session,
        name=name,
        destination=request.destination or "",
        source=SEARCH_SOURCE,
        origin=request.origin,
        budget=request.budget,
        start_date=request.start_date,
        end_date=request.end_date,
    )
    logger.info("Created trip %d from search", trip.id)
    return trip.id


def _load(session: Session, trip_id: int) -> TripState:
    row = get_trip(session, trip_id)
    if row is None:
        raise NotFoundError("Trip not found")
    return TripState.model_validate(row)


def deterministic_changes(current: TripState, request: TripInput) -> dict[str, Any]:
    """Column changes from explicit request fields and ``key: value`` chat lines.

    Explicit request values win over values found in the chat. Only values
    that differ from the stored row are returned.
    """
    extracted = extract_fields(request.messages)
    candidates: dict[str, Any] = {
        "name": request.name,
        "destination": request.destination,
        "origin": request.origin or extracted.origin,
        "budget": request.budget if request.budget is not None else extracted.budget,
        "start_date": request.start_date or parse_timestamp(extracted.start_date),
        "end_date": request.end_date or parse_timestamp(extracted.end_date),
    }
    return {
        column: value
        for column, value in candidates.items()
        if value is not None and value != getattr(current, column)
    }


def _format_value(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, datetime):
        return value.date().isoformat()
    return str(value)


def _current_trip_message(trip: TripState) -> str:
    return (
        "Current trip:\n"
        f"name: {trip.name}\n"
        f"destination: {trip.destination}\n"
        f"origin: {trip.origin or ''}\n"
        f"budget: {_format_value(trip.budget)}\n"
        f"startDate: {_format_value(trip.start_date)}\n"
        f"endDate: {_format_value(trip.end_date)}"
    )


def provided_hints(current: TripState, request: TripInput) -> str:
    """Lines describing request values that differ from the stored row."""
    hints = []
    if request.name and request.name != current.name:
        hints.append(f"name: {request.name}")
    if request.destination and request.destination != current.destination:
        hints.append(f"destination: {request.destination}")
    if request.origin and request.origin != current.origin:
        hints.append(f"origin: {request.origin}")
    if request.budget is not None and request.budget != current.budget:
        hints.append(f"budget: {request.budget}")
    if request.start_date is not None:
        hints.append(f"startDate: {_format_value(request.start_date)}")
    if request.end_date is not None:
        hints.append(f"endDate: {_format_value(request.end_date)}")
    return "\n".join(hints)


async def _model_pass(
    session: Session, trip_id: int, current: TripState, request: TripInput, llm: LLMClient
) -> bool:
    messages: list[dict[str, Any]] = [
        {"role": "system", "content": SYSTEM_PROMPT},
        {"role": "user", "content": _current_trip_message(current)},
    ]
    hints = provided_hints(current, request)
    if hints:
        messages.append({"role": "user", "content": f"New data provided:\n{hints}"})
    messages.extend(m.model_dump() for m in request.messages)

    arguments = await llm.call_tool(
        messages, UPDATE_TRIP_FUNCTION, temperature=0, max_tokens=150
    )
    if arguments is None:
        return False

    changes = UpdateTripArgs.model_validate(arguments).changes()
    if not changes:
        return False
    logger.info("Model updated trip %d: %s", trip_id, sorted(changes))
    return update_trip(session, trip_id, changes)


async def _apply_changes(session: Session, trip_id: int, changes: dict[str, Any]) -> bool:
    return update_trip(session, trip_id, changes)


async def reconcile(session: Session, request: TripInput, llm: LLMClient) -> ReconcileOutcome:
    """Create or load the trip, apply new field values, and return the result.

    Steps run in order: create when no id was given, load, apply explicit and
    chat-extracted values, then let the model fill in anything else through
    the ``update_trip`` tool. Both writes are best effort: a value the
    database rejects is rolled back and the flow carries on.

    Args:
        session: Database session
        request: Validated request fields and chat history
        llm: Language model client

    Returns:
        ReconcileOutcome with the trip as stored before and after

    Raises:
        ValidationError: Creation requested without a destination or name
        NotFoundError: The trip id does not exist
    """
    trip_id = request.trip_id
    if trip_id is None:
        trip_id = _create_from_request(session, request)

    before = _load(session, trip_id)

    changes = deterministic_changes(before, request)
    if changes:
        applied = await attempt(
            "db.apply_request_fields", _apply_changes(session, trip_id, changes)
        )
        if applied.ok:
            logger.info("Applied request fields to trip %d: %s", trip_id, sorted(changes))
        else:
            session.rollback()

    result = await attempt(
        "llm.update_trip", _model_pass(session, trip_id, before, request, llm)
    )
    if not result.ok:
        session.rollback()

    after = _load(session, trip_id)
    return ReconcileOutcome(trip_id=trip_id, before=before, after=after, provided=request)
