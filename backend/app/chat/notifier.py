"""One-line notifications about trips proposed from emails."""

from __future__ import annotations

from collections.abc import AsyncIterator

from backend.app.db.models.trip import PotentialTrip
from backend.app.llm import LLMClient

PROPOSED_TRIPS_INTENT = "proposedTrips"

SUMMARY_INSTRUCTION = (
    "You summarize trips for brief user notifications. "
    "Answer in one short sentence (<= 20 words)."
)
PROPOSED_TRIPS_INSTRUCTION = (
    "You write one short, friendly CTA (<= 20 words) about detected trips from "
    "emails. If a first name is provided, address the user by that first name. "
    "Tell the user they can press Enter (↩) to see the trips."
)


def notification_prompt(
    trip: PotentialTrip,
    total: int,
    intent: str | None = None,
    first_name: str | None = None,
) -> str:
    """Prompt for a notification about ``total`` trips, using ``trip`` as the example."""
    if intent == PROPOSED_TRIPS_INTENT:
        prefix = f"{first_name}, " if first_name else ""
        return (
            f"{PROPOSED_TRIPS_INSTRUCTION}\n"
            f"{prefix}we detected {total} trip(s) from recent emails, e.g. "
            f"{trip.destination}. Ask if they want to book them."
        )

    budget = trip.budget if trip.budget is not None else "n/a"
    return (
        f"{SUMMARY_INSTRUCTION}\n"
        f"Trip: {trip.name}\n"
        f"Destination: {trip.destination}\n"
        f"Budget: {budget}"
    )


async def summarize(llm: LLMClient, prompt: str) -> str:
    return await llm.generate_text(prompt, temperature=0.2)


def stream_summary(llm: LLMClient, prompt: str) -> AsyncIterator[str]:
    return llm.stream_text(prompt, temperature=0.2)
