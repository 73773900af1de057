"""Trip detail endpoint backing the trip page."""

from typing import Any

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from backend.app.db.session import get_db_session
from backend.app.db.trips import get_trip
from backend.app.errors import NotFoundError
from backend.app.models.trip import TripState

router = APIRouter(prefix="/api/trips", tags=["trips"])


@router.get("/{trip_id}")
def read_trip(trip_id: int, session: Session = Depends(get_db_session)) -> dict[str, Any]:
    """Stored state of one trip."""
    row = get_trip(session, trip_id)
    if row is None:
        raise NotFoundError("Trip not found")
    return TripState.model_validate(row).to_wire(exclude_none=False)
