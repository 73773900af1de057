"""Component endpoint driving the trip search flow."""

import logging
from typing import Any

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from backend.app.api.deps import flag_enabled, read_json
from backend.app.chat.prompt_planner import plan_prompts
from backend.app.chat.reconciler import reconcile
from backend.app.db.session import get_db_session
from backend.app.errors import AppError, UpstreamError
from backend.app.llm import LLMClient, get_llm
from backend.app.models.common import CamelModel
from backend.app.models.trip import TripInput
from backend.app.planning.completion import is_complete
from backend.app.planning.flight_options import synthesize_flights
from backend.app.streaming.sse import component_event_response

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["components"])


async def build_components(
    session: Session, trip_input: TripInput, llm: LLMClient
) -> tuple[int, list[CamelModel]]:
    """Reconcile the trip, then either ask for missing fields or offer flights.

    Returns:
        Tuple of (trip id, components)
    """
    outcome = await reconcile(session, trip_input, llm)
    if is_complete(outcome.after):
        logger.info("Trip %d is complete, offering flights", outcome.trip_id)
        return outcome.trip_id, list(synthesize_flights(outcome.after, outcome.trip_id))

    components = await plan_prompts(outcome.after, trip_input, llm)
    return outcome.trip_id, list(components)


@router.post("/component", response_model=None)
async def create_component(
    request: Request,
    stream: str | None = Query(None, description="'1' or 'true' for server-sent events"),
    session: Session = Depends(get_db_session),
    llm: LLMClient = Depends(get_llm),
) -> Any:
    """Create or update a trip and return the UI components for its next step.

    Body fields: ``id`` for an existing trip, otherwise creation fields
    (``name``, ``destination``, ``origin``, ``budget``, ``startDate``,
    ``endDate``), plus optional ``messages`` chat history.

    Returns:
        ``{"tripId", "components"}``, or a server-sent event stream of the
        same components preceded by a context event

    Raises:
        ValidationError: 400 for missing creation fields or malformed dates
        NotFoundError: 404 for an unknown trip id
        UpstreamError: 500 for anything else
    """
    trip_input = TripInput.from_payload(await read_json(request))

    try:
        trip_id, components = await build_components(session, trip_input, llm)
    except AppError:
        raise
    except Exception as e:
        logger.exception("Component generation failed")
        raise UpstreamError("Failed to generate component") from e

    if flag_enabled(stream):
        return component_event_response(trip_id, components)
    return {"tripId": trip_id, "components": [c.to_wire() for c in components]}
