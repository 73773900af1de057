"""Detect travel plans in ingested emails and propose trips for them."""

from __future__ import annotations

import logging
from typing import Any

from pydantic import BaseModel, field_validator
from sqlalchemy.orm import Session

from backend.app.db.models.email import Email
from backend.app.db.models.trip import EMAIL_SOURCE_PREFIX, PotentialTrip
from backend.app.db.trips import create_trip
from backend.app.llm import LLMClient
from backend.app.models.common import as_number, clean_text, parse_timestamp

logger = logging.getLogger(__name__)

# OpenAI function schema for proposing a trip from an email
CREATE_TRIP_FUNCTION = {
    "name": "create_trip",
    "description": "Create a trip if the email discusses travel",
    "parameters": {
        "type": "object",
        "properties": {
            "name": {
                "type": "string",
                "description": "Short human-friendly name of the trip",
            },
            "destination": {
                "type": "string",
                "description": "City and/or country destination",
            },
            "budget": {
                "type": "integer",
                "description": "Estimated budget in whole currency units",
            },
            "startDate": {
                "type": "string",
                "description": "Trip start date in ISO 8601 format (YYYY-MM-DD) if known",
            },
            "endDate": {
                "type": "string",
                "description": "Trip end date in ISO 8601 format (YYYY-MM-DD) if known",
            },
        },
        "required": ["name", "destination"],
    },
}

SYSTEM_PROMPT = (
    "You extract structured travel plans from emails. If and only if the email "
    "clearly involves travel (trip, flight, hotel, conference travel, vacation, "
    "business trip), call the tool with best-guess values. If date(s) are "
    "present, include startDate and endDate in ISO 8601 (YYYY-MM-DD). If not, "
    "omit them. If not travel, do not call the tool."
)


class CreateTripArgs(BaseModel):
    """Arguments of a ``create_trip`` tool call."""

    name: str
    destination: str
    budget: int | None = None
    startDate: Any = None
    endDate: Any = None

    @field_validator("name", "destination", mode="before")
    @classmethod
    def _required_text(cls, value: Any) -> str:
        text = clean_text(value)
        if text is None:
            raise ValueError("must be a non-empty string")
        return text

    @field_validator("budget", mode="before")
    @classmethod
    def _budget(cls, value: Any) -> int | None:
        number = as_number(value)
        return int(number) if number is not None else None

    @field_validator("startDate", "endDate", mode="before")
    @classmethod
    def _date(cls, value: Any) -> Any:
        return parse_timestamp(value)


def email_source(email_id: int) -> str:
    return f"{EMAIL_SOURCE_PREFIX}{email_id}"


def email_prompt(email: Email) -> str:
    return (
        f"Subject: {email.subject}\n"
        f"From: {email.sender_email}\n"
        f"To: {email.recipient_email}\n"
        f"Body: {email.body}"
    )


async def propose_trip_from_email(
    session: Session, email: Email, llm: LLMClient
) -> PotentialTrip | None:
    """Let the model decide whether an email describes travel and store the trip.

    Args:
        session: Database session
        email: The persisted email
        llm: Language model client

    Returns:
        The proposed trip, or None when the model did not call the tool

    Raises:
        pydantic.ValidationError: If the tool arguments lack a name or destination
    """
    arguments = await llm.call_tool(
        [
            {"role": "system", "content": SYSTEM_PROMPT},
            {"role": "user", "content": email_prompt(email)},
        ],
        CREATE_TRIP_FUNCTION,
        temperature=0.2,
        max_tokens=300,
    )
    if arguments is None:
        logger.info("Email %d does not describe travel", email.id)
        return None

    args = CreateTripArgs.model_validate(arguments)
    trip = create_trip(
        session,
        name=args.name,
        destination=args.destination,
        source=email_source(email.id),
        budget=args.budget,
        start_date=args.startDate,
        end_date=args.endDate,
    )
    logger.info("Proposed trip %d from email %d", trip.id, email.id)
    return trip
