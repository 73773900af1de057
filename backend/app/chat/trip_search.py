"""Conversational live flight search backed by Amadeus."""

from __future__ import annotations

import logging
from typing import Any

from backend.app.adapters.amadeus import (
    AmadeusClient,
    summarize_flights,
    summarize_hotels,
)
from backend.app.exec import attempt
from backend.app.llm import LLMClient
from backend.app.models.chat import ChatMessage
from backend.app.models.common import as_number, clean_text

logger = logging.getLogger(__name__)

# OpenAI function schema for the live search tool
RUN_TRIP_SEARCH_FUNCTION = {
    "name": "run_trip_search",
    "description": (
        "Run Amadeus searches and summarize flights. "
        "Requires origin, destination, and departure date."
    ),
    "parameters": {
        "type": "object",
        "properties": {
            "name": {"type": "string", "description": "Trip name"},
            "destination": {
                "type": "string",
                "description": "City or airport code for destination",
            },
            "origin": {"type": "string", "description": "City or airport code for origin"},
            "startDate": {"type": "string", "description": "Departure date YYYY-MM-DD"},
            "endDate": {
                "type": "string",
                "description": "Return date YYYY-MM-DD (optional)",
            },
            "budget": {"type": "number", "description": "Budget in USD (optional)"},
        },
        "required": ["destination", "origin", "startDate"],
    },
}

SYSTEM_PROMPT = (
    "You are a travel planning assistant. Use the provided history and current "
    "details. If you have enough information (destination, origin, and a "
    "departure date), call the run_trip_search tool to perform the search and "
    "then return a concise summary. If information is missing, ask up to 3 "
    "concise questions to fill the gaps. Keep replies short (<= 120 words)."
)

MISSING_FIELDS_MESSAGE = (
    "Missing required fields to search (destination, origin, startDate)."
)
SANDBOX_NOTE = (
    "Note: Amadeus sandbox data is limited. "
    "Try major origins (JFK/LHR) or closer dates."
)
NO_RESULTS = "No results."


async def run_trip_search(args: dict[str, Any], amadeus: AmadeusClient) -> str:
    """Resolve location codes, search flights and describe the outcome.

    Lookup failures are tolerated; whatever was resolved is reported so the
    model can explain the result.
    """
    name = clean_text(args.get("name"))
    destination = clean_text(args.get("destination"))
    origin = clean_text(args.get("origin"))
    depart = clean_text(args.get("startDate"))
    return_date = clean_text(args.get("endDate"))
    budget = as_number(args.get("budget"))

    if not destination or not origin or not depart:
        return MISSING_FIELDS_MESSAGE

    city = (await attempt("amadeus.find_city", amadeus.find_city(destination))).value
    city_code = city.city_code if city else None
    destination_airport = (
        await attempt("amadeus.find_airport", amadeus.find_airport_for_city(destination))
    ).value
    origin_code = (
        await attempt("amadeus.find_airport", amadeus.find_airport_for_city(origin))
    ).value

    flights: list[dict[str, Any]] = []
    flight_error: str | None = None
    search_destination = destination_airport or city_code
    if origin_code and search_destination:
        result = await attempt(
            "amadeus.search_flights",
            amadeus.search_flights(
                origin_code, search_destination, depart, return_date=return_date
            ),
        )
        if result.ok:
            flights = result.value or []
        else:
            flight_error = str(result.error)

    hotels: list[dict[str, Any]] = []
    if city_code:
        hotel_result = await attempt(
            "amadeus.search_hotels",
            amadeus.search_hotel_offers(city_code, check_in=depart, check_out=return_date),
        )
        hotels = hotel_result.value_or([])

    parts = []
    if name:
        parts.append(f"Trip: {name}")
    parts.append(f"Destination: {destination}" + (f" ({city_code})" if city_code else ""))
    parts.append(f"Origin: {origin}" + (f" ({origin_code})" if origin_code else ""))
    parts.append(f"Dates: {depart}" + (f" → {return_date}" if return_date else ""))
    if budget is not None:
        parts.append(f"Budget: ${budget:g}")
    parts.append(f"Flights: {summarize_flights(flights)}")
    if city_code:
        parts.append(f"Hotels: {summarize_hotels(hotels)}")
    if not flights:
        parts.append(
            f"Resolved codes — origin: {origin_code or 'n/a'}, "
            f"destinationAirport: {destination_airport or 'n/a'}, "
            f"city: {city_code or 'n/a'}"
        )
    parts.append(f"Amadeus base: {amadeus.base_url}")
    if flight_error:
        parts.append(f"Flights error: {flight_error}")
    if not flights:
        parts.append(SANDBOX_NOTE)

    logger.info(
        "Trip search %s -> %s on %s found %d offers",
        origin_code,
        search_destination,
        depart,
        len(flights),
    )
    return "\n".join(parts)


def seed_message(fields: dict[str, Any]) -> str:
    """Summarize the search form fields as a user turn."""
    lines = []
    if clean_text(fields.get("name")):
        lines.append(f"Trip name: {fields['name']}")
    if clean_text(fields.get("destination")):
        lines.append(f"Destination: {fields['destination']}")
    budget = fields.get("budget")
    if isinstance(budget, (int, float)) and not isinstance(budget, bool):
        lines.append(f"Budget: ${budget}")
    if clean_text(fields.get("origin")):
        lines.append(f"Origin: {fields['origin']}")
    if clean_text(fields.get("startDate")):
        lines.append(f"Start date: {fields['startDate']}")
    if clean_text(fields.get("endDate")):
        lines.append(f"End date: {fields['endDate']}")
    return "\n".join(lines)


async def search_trips(
    fields: dict[str, Any],
    history: list[ChatMessage],
    llm: LLMClient,
    amadeus: AmadeusClient,
) -> str:
    """Run the search conversation and return the model's reply.

    Args:
        fields: Search form fields (name, destination, budget, origin, dates)
        history: Prior chat turns
        llm: Language model client
        amadeus: Flight search client used by the tool

    Returns:
        Reply text, or "No results." when the model returns nothing
    """
    messages: list[dict[str, Any]] = [{"role": "system", "content": SYSTEM_PROMPT}]
    messages.extend(m.model_dump() for m in history)
    seed = seed_message(fields)
    if seed:
        messages.append({"role": "user", "content": seed})

    async def handle_search(args: dict[str, Any]) -> str:
        return await run_trip_search(args, amadeus)

    text = await llm.run_tools(
        messages,
        [RUN_TRIP_SEARCH_FUNCTION],
        {RUN_TRIP_SEARCH_FUNCTION["name"]: handle_search},
        temperature=0.2,
        max_tokens=400,
    )
    return text.strip() or NO_RESULTS
