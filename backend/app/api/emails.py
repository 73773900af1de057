"""Email ingestion and proposed-trip notification endpoints."""

import logging
import math
from collections.abc import AsyncIterator
from datetime import datetime
from typing import Any

from fastapi import APIRouter, Depends, Query, Request, status
from fastapi.responses import JSONResponse, StreamingResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from backend.app.api.deps import flag_enabled, read_json
from backend.app.chat.email_ingest import propose_trip_from_email
from backend.app.chat.notifier import notification_prompt, stream_summary, summarize
from backend.app.db.emails import create_email
from backend.app.db.session import get_db_session
from backend.app.db.trips import count_email_trips, latest_email_trip, list_email_trips
from backend.app.errors import BadRequestError, UpstreamError
from backend.app.exec import attempt
from backend.app.llm import LLMClient, get_llm
from backend.app.models.common import as_number, clean_text, parse_timestamp
from backend.app.models.email import EmailInput, EmailOut, EmailTripSummary

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/emails", tags=["emails"])

DEFAULT_TRIP_LIMIT = 6
MAX_TRIP_LIMIT = 20


def _parse_since(value: str | None) -> datetime | None:
    if not value:
        return None
    since = parse_timestamp(value)
    if since is None:
        raise BadRequestError("Invalid 'since' timestamp")
    return since


def _parse_after_id(value: str | None) -> int | None:
    if not value:
        return None
    number = as_number(value)
    if number is None:
        raise BadRequestError("Invalid 'afterId' number")
    return math.floor(number)


async def _open_stream(llm: LLMClient, prompt: str) -> AsyncIterator[str]:
    """Start the completion and wait for its first chunk.

    Failures to start surface here, before any response is sent.
    """
    chunks = stream_summary(llm, prompt)
    first = await anext(chunks, "")

    async def relay() -> AsyncIterator[str]:
        if first:
            yield first
        async for chunk in chunks:
            yield chunk

    return relay()


@router.get("", response_model=None)
async def check_emails(
    intent: str | None = Query(None, description="'proposedTrips' for the CTA wording"),
    first_name: str | None = Query(None, alias="firstName"),
    since: str | None = Query(None, description="ISO timestamp lower bound"),
    after_id: str | None = Query(None, alias="afterId"),
    stream: str | None = Query(None, description="'1' or 'true' to stream text"),
    summary: str | None = Query(None, description="'false' skips the summary"),
    session: Session = Depends(get_db_session),
    llm: LLMClient = Depends(get_llm),
) -> Any:
    """Count unbooked trips proposed from emails, with an optional notification.

    Returns:
        ``{"hasNew", "count", "summary"}``, or a plain-text stream of the
        notification when streaming is requested and there is something new
    """
    since_at = _parse_since(since)
    after = _parse_after_id(after_id)

    try:
        total = count_email_trips(session, since=since_at, after_id=after)
        latest = latest_email_trip(session, since=since_at, after_id=after) if total else None
    except SQLAlchemyError as e:
        logger.exception("Counting email trips failed")
        raise UpstreamError("Internal Server Error") from e

    text: str | None = None
    if latest is not None:
        prompt = notification_prompt(
            latest, total, intent=intent, first_name=clean_text(first_name)
        )
        if flag_enabled(stream):
            opened = await attempt("llm.email_notification", _open_stream(llm, prompt))
            if opened.ok and opened.value is not None:
                return StreamingResponse(
                    opened.value, media_type="text/plain; charset=utf-8"
                )
        elif summary != "false":
            result = await attempt("llm.email_summary", summarize(llm, prompt))
            text = result.value

    return {"hasNew": total > 0, "count": total, "summary": text}


@router.post("", status_code=status.HTTP_201_CREATED, response_model=None)
async def ingest_email(
    request: Request,
    session: Session = Depends(get_db_session),
    llm: LLMClient = Depends(get_llm),
) -> JSONResponse:
    """Store an email, then let the model propose a trip if it describes travel.

    The email is committed before the model runs; a failed model pass does
    not affect the response.
    """
    email = EmailInput.from_payload(await read_json(request))

    try:
        row = create_email(session, email)
    except SQLAlchemyError as e:
        session.rollback()
        logger.exception("Email insert failed")
        raise UpstreamError("Failed to insert email") from e

    result = await attempt("llm.create_trip", propose_trip_from_email(session, row, llm))
    if not result.ok:
        session.rollback()

    return JSONResponse(
        status_code=status.HTTP_201_CREATED,
        content=EmailOut.model_validate(row).to_wire(exclude_none=False),
    )


@router.get("/trips")
def email_trips(
    limit: str | None = Query(None, description="1-20, default 6"),
    session: Session = Depends(get_db_session),
) -> list[dict[str, Any]]:
    """Newest unbooked trips proposed from emails."""
    number = as_number(limit)
    count = int(number) if number else DEFAULT_TRIP_LIMIT
    count = max(1, min(MAX_TRIP_LIMIT, count))

    try:
        rows = list_email_trips(session, limit=count)
    except SQLAlchemyError as e:
        logger.exception("Listing email trips failed")
        raise UpstreamError("Failed to load email trips") from e
    return [EmailTripSummary.model_validate(r).to_wire(exclude_none=False) for r in rows]
