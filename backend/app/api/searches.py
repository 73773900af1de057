"""Recent searches and conversational live search endpoints."""

import logging
from typing import Any

from fastapi import APIRouter, Depends, Request
from fastapi.responses import PlainTextResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from backend.app.adapters.amadeus import AmadeusClient, get_amadeus
from backend.app.api.deps import read_json
from backend.app.chat.trip_search import search_trips
from backend.app.db.session import get_db_session
from backend.app.db.trips import list_recent_searches
from backend.app.errors import UpstreamError
from backend.app.llm import LLMClient, get_llm
from backend.app.models.chat import parse_messages
from backend.app.models.email import RecentSearch

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["searches"])


@router.get("/recent-searches")
def recent_searches(session: Session = Depends(get_db_session)) -> list[dict[str, Any]]:
    """Up to eight unbooked trips started from the search bar, newest first."""
    try:
        rows = list_recent_searches(session, limit=8)
    except SQLAlchemyError as e:
        logger.exception("Listing recent searches failed")
        raise UpstreamError("Failed to load recent searches") from e
    return [RecentSearch.model_validate(r).to_wire(exclude_none=False) for r in rows]


@router.post("/search-trips", response_class=PlainTextResponse)
async def search_trips_endpoint(
    request: Request,
    llm: LLMClient = Depends(get_llm),
    amadeus: AmadeusClient = Depends(get_amadeus),
) -> PlainTextResponse:
    """Chat about a trip and run a live flight search once enough is known.

    Returns:
        The assistant's reply as plain text
    """
    payload = await read_json(request)
    fields = payload if isinstance(payload, dict) else {}

    try:
        text = await search_trips(
            fields, parse_messages(fields.get("messages")), llm, amadeus
        )
    except Exception:
        logger.exception("Trip search failed")
        return PlainTextResponse("Failed to search trips", status_code=500)
    return PlainTextResponse(text)
