"""Ask for the trip fields that are still missing."""

from __future__ import annotations

import logging
from datetime import date, datetime, timedelta
from typing import Literal

from pydantic import BaseModel, Field

from backend.app.exec import attempt
from backend.app.llm import LLMClient
from backend.app.models.chat import ChatMessage, format_transcript
from backend.app.models.components import ButtonComponent, Component, PromptComponent
from backend.app.models.trip import TripField, TripInput, TripState
from backend.app.planning.completion import missing_fields

logger = logging.getLogger(__name__)

MAX_PROMPTS = 3
MAX_SUGGESTIONS = 5

PLANNER_SYSTEM_PROMPT = (
    "You are a UX planner for a travel app. Identify which of these fields are "
    "still missing or empty in the database: name, destination, origin, "
    "startDate, endDate, budget. Return up to 3 prompts only for the missing "
    "ones. Do not duplicate fields or include fields that already exist. For "
    "each selected field, write a short, friendly question to collect JUST that "
    "field. Provide at most 3-5 concise suggestions. IMPORTANT for dates: "
    "suggest only future dates in YYYY-MM-DD, using today or any provided "
    "startDate/endDate as reference. Ensure endDate is after startDate."
)

BUTTON_SYSTEM_PROMPT = (
    "You write ultra-short, action-oriented CTA button labels for a travel app. "
    "Keep it 2-4 words, imperative voice, no emojis."
)

BUTTON_CLASSES = (
    "px-4 py-2 rounded-lg bg-white/20 hover:bg-white/30 border border-white/30 text-white"
)
DEFAULT_BUTTON_LABEL = "Continue planning"

FALLBACK_LABELS: dict[str, str] = {
    "name": "What should we call this trip?",
    "destination": "Where are you headed?",
    "origin": "Where are you departing from?",
    "startDate": "When do you want to depart?",
    "endDate": "When do you want to return? (optional)",
    "budget": "What's your budget? (USD)",
}
DEFAULT_LABEL = "Can you add this detail?"


class PromptSuggestion(BaseModel):
    """One question proposed by the model."""

    field: TripField
    question: str = Field(min_length=3)
    inputType: Literal["text", "date", "number"] | None = None
    suggestions: list[str] | None = Field(default=None, max_length=MAX_SUGGESTIONS)


class PromptsDecision(BaseModel):
    """Model output for the prompt planner."""

    prompts: list[PromptSuggestion] = Field(default_factory=list, max_length=5)


class ButtonLabel(BaseModel):
    """Model output for the call-to-action label."""

    label: str = Field(min_length=1, max_length=40)


def input_type_for(field: TripField) -> Literal["text", "date", "number"]:
    if field == "budget":
        return "number"
    if field in ("startDate", "endDate"):
        return "date"
    return "text"


def _day(value: datetime | None) -> date | None:
    return value.date() if value is not None else None


def _first_of_next_month(day: date) -> date:
    if day.month == 12:
        return date(day.year + 1, 1, 1)
    return date(day.year, day.month + 1, 1)


def date_suggestions(
    field: TripField, trip: TripState, provided: TripInput, today: date
) -> list[str]:
    """Future date suggestions for ``startDate`` or ``endDate``.

    The reference day is the stored start date, else the provided one, and
    never earlier than today.
    """
    start = _day(trip.start_date) or _day(provided.start_date) or today
    reference = max(today, start)

    if field == "startDate":
        days = [
            reference + timedelta(days=7),
            reference + timedelta(days=14),
            _first_of_next_month(reference),
        ]
    else:
        days = [reference + timedelta(days=offset) for offset in (3, 7, 14)]
    return [day.isoformat() for day in days]


def _format_value(value: object) -> str:
    if value is None:
        return ""
    if isinstance(value, datetime):
        return value.date().isoformat()
    return str(value)


def build_planner_prompt(
    trip: TripState, provided: TripInput, messages: list[ChatMessage]
) -> str:
    """User prompt for the planner call: stored state, request fields, transcript."""
    lines = [
        f"DB has -> name: {trip.name} | destination: {trip.destination} | "
        f"origin: {trip.origin or ''} | budget: {_format_value(trip.budget)} | "
        f"startDate: {_format_value(trip.start_date)} | endDate: {_format_value(trip.end_date)}"
    ]
    if provided.name:
        lines.append(f"Provided name: {provided.name}")
    if provided.destination:
        lines.append(f"Provided destination: {provided.destination}")
    if provided.origin:
        lines.append(f"Provided origin: {provided.origin}")
    if provided.budget is not None:
        lines.append(f"Provided budget: ${provided.budget}")
    if provided.start_date is not None:
        lines.append(f"Provided startDate: {_format_value(provided.start_date)}")
    if provided.end_date is not None:
        lines.append(f"Provided endDate: {_format_value(provided.end_date)}")
    conversation = format_transcript(messages)
    if conversation:
        lines.append(f"Conversation so far:\n{conversation}")
    lines.append("List up to 3 missing fields and provide a question for each.")
    return "\n".join(lines)


def _fallback_suggestions(missing: list[TripField]) -> list[PromptSuggestion]:
    return [
        PromptSuggestion(field=field, question=FALLBACK_LABELS.get(field, DEFAULT_LABEL))
        for field in missing
    ]


def build_prompts(
    suggestions: list[PromptSuggestion],
    trip: TripState,
    provided: TripInput,
    today: date,
) -> list[PromptComponent]:
    """Turn model suggestions into prompt components.

    Suggestions for fields the trip already has are dropped, each field is
    asked at most once and at most three prompts are returned. Date fields
    always get computed suggestions.
    """
    missing = set(missing_fields(trip))
    seen: set[str] = set()
    prompts: list[PromptComponent] = []

    for suggestion in suggestions:
        if suggestion.field not in missing or suggestion.field in seen:
            continue
        seen.add(suggestion.field)

        label = suggestion.question.strip() or FALLBACK_LABELS.get(
            suggestion.field, DEFAULT_LABEL
        )
        if suggestion.field in ("startDate", "endDate"):
            options: list[str] | None = date_suggestions(
                suggestion.field, trip, provided, today
            )
        elif suggestion.suggestions is not None:
            options = suggestion.suggestions[:MAX_SUGGESTIONS]
        else:
            options = None

        prompts.append(
            PromptComponent(
                field=suggestion.field,
                label=label,
                input_type=suggestion.inputType or input_type_for(suggestion.field),
                suggestions=options,
            )
        )
        if len(prompts) >= MAX_PROMPTS:
            break

    return prompts


async def build_button(trip: TripState, trip_id: int, llm: LLMClient) -> ButtonComponent:
    """Call-to-action linking to the trip page, with a model-written label."""
    lines = []
    if trip.name:
        lines.append(f"Trip name: {trip.name}")
    if trip.destination:
        lines.append(f"Destination: {trip.destination}")
    if trip.budget is not None:
        lines.append(f"Budget: ${trip.budget}")
    lines.append("Create a concise CTA label to continue with this trip.")

    result = await attempt(
        "llm.cta_label",
        llm.generate_json(
            BUTTON_SYSTEM_PROMPT, "\n".join(lines), ButtonLabel, max_tokens=60
        ),
    )
    label = result.value.label if result.ok and result.value else DEFAULT_BUTTON_LABEL

    return ButtonComponent(
        label=label,
        href=f"/trips/{trip_id}",
        classes=BUTTON_CLASSES,
        aria_label=f"Open trip {trip.name or trip.destination or trip_id}".strip(),
    )


async def plan_prompts(
    trip: TripState,
    provided: TripInput,
    llm: LLMClient,
    today: date | None = None,
) -> list[Component]:
    """Components to show for an incomplete trip.

    Args:
        trip: Trip as stored after reconciliation
        provided: Request fields and chat history
        llm: Language model client
        today: Reference day for date suggestions (defaults to today)

    Returns:
        Up to three prompt components, or a single button when the model finds
        nothing missing
    """
    today = today or date.today()

    result = await attempt(
        "llm.plan_prompts",
        llm.generate_json(
            PLANNER_SYSTEM_PROMPT,
            build_planner_prompt(trip, provided, provided.messages),
            PromptsDecision,
            max_tokens=400,
        ),
    )
    if result.ok and result.value is not None:
        suggestions = result.value.prompts
        if not suggestions:
            logger.info("Planner found nothing missing for trip %d", trip.id)
            return [await build_button(trip, trip.id, llm)]
    else:
        # Without the model, ask for the missing fields in canonical order
        suggestions = _fallback_suggestions(missing_fields(trip))

    prompts = build_prompts(suggestions, trip, provided, today)
    if not prompts:
        prompts = build_prompts(
            _fallback_suggestions(missing_fields(trip)), trip, provided, today
        )
    return list(prompts)
