"""Trip models shared by the reconciliation and planning flow."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, Field

from backend.app.errors import ValidationError

from .chat import ChatMessage, parse_messages
from .common import CamelModel, as_number, clean_text, parse_timestamp

TripField = Literal["name", "destination", "origin", "startDate", "endDate", "budget"]

# Canonical order used when listing missing fields
TRIP_FIELDS: tuple[TripField, ...] = (
    "name",
    "destination",
    "origin",
    "startDate",
    "endDate",
    "budget",
)


class TripState(CamelModel):
    """Snapshot of a potential trip row."""

    id: int
    name: str = ""
    destination: str = ""
    origin: str | None = None
    budget: int | None = None
    start_date: datetime | None = None
    end_date: datetime | None = None
    source: str | None = None
    is_booked: bool = False
    created_at: datetime | None = None


class TripInput(BaseModel):
    """Fields supplied by the browser for creating or updating a trip."""

    trip_id: int | None = Field(default=None, description="Existing trip id")
    name: str | None = None
    destination: str | None = None
    origin: str | None = None
    budget: int | None = Field(default=None, description="Whole USD, truncated")
    start_date: datetime | None = None
    end_date: datetime | None = None
    messages: list[ChatMessage] = Field(default_factory=list)

    @classmethod
    def from_payload(cls, payload: Any) -> TripInput:
        """Build from an untrusted JSON body.

        Blank strings and non-numeric budgets are treated as absent; malformed
        dates are rejected.

        Raises:
            ValidationError: If startDate or endDate is present but not ISO.
        """
        data = payload if isinstance(payload, dict) else {}

        raw_id = data.get("id")
        trip_id: int | None = None
        if isinstance(raw_id, (int, float)) and not isinstance(raw_id, bool):
            number = as_number(raw_id)
            if number is not None and number == int(number) and number > 0:
                trip_id = int(number)

        raw_budget = data.get("budget")
        budget_number = (
            as_number(raw_budget) if isinstance(raw_budget, (int, float)) else None
        )

        errors: list[str] = []
        dates: dict[str, datetime | None] = {}
        for key in ("startDate", "endDate"):
            text = clean_text(data.get(key))
            if text is None:
                dates[key] = None
                continue
            parsed = parse_timestamp(text)
            if parsed is None:
                errors.append(f"{key} must be ISO date")
            dates[key] = parsed
        if errors:
            raise ValidationError(errors)

        return cls(
            trip_id=trip_id,
            name=clean_text(data.get("name")),
            destination=clean_text(data.get("destination")),
            origin=clean_text(data.get("origin")),
            budget=int(budget_number) if budget_number is not None else None,
            start_date=dates["startDate"],
            end_date=dates["endDate"],
            messages=parse_messages(data.get("messages")),
        )
