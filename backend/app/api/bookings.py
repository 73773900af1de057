"""Booking endpoints."""

import logging
from typing import Any

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from backend.app.adapters.photos import find_destination_image_url
from backend.app.api.deps import read_json
from backend.app.db.bookings import create_booking, list_recent_bookings
from backend.app.db.session import get_db_session
from backend.app.errors import UpstreamError
from backend.app.exec import attempt
from backend.app.models.booking import BookingInput, BookingOut

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/bookings", tags=["bookings"])


@router.post("", status_code=status.HTTP_201_CREATED, response_model=None)
async def book_flight(
    request: Request,
    session: Session = Depends(get_db_session),
) -> JSONResponse:
    """Book a flight offer for a trip.

    Marks the trip booked and stores the booking. When no ``imageUrl`` is
    given, a destination photo is looked up; a failed lookup leaves it empty.

    Raises:
        ValidationError: 400 listing every invalid field
        UpstreamError: 500 if the database write fails
    """
    booking = BookingInput.from_payload(await read_json(request))

    image_url = booking.image_url
    if image_url is None:
        lookup = await attempt(
            "photos.destination", find_destination_image_url(booking.destination.city)
        )
        image_url = lookup.value

    try:
        row = create_booking(session, booking, image_url)
    except SQLAlchemyError as e:
        session.rollback()
        logger.exception("Booking insert failed for trip %d", booking.trip_id)
        raise UpstreamError("Failed to create booking") from e

    logger.info("Booked %s for trip %d", row.flight_number, row.trip_id)
    return JSONResponse(
        status_code=status.HTTP_201_CREATED,
        content=BookingOut.model_validate(row).to_wire(exclude_none=False),
    )


@router.get("")
def list_bookings(session: Session = Depends(get_db_session)) -> dict[str, Any]:
    """The eight most recent bookings."""
    try:
        rows = list_recent_bookings(session, limit=8)
    except SQLAlchemyError as e:
        logger.exception("Listing bookings failed")
        raise UpstreamError("Failed to fetch bookings") from e
    return {
        "bookings": [BookingOut.model_validate(r).to_wire(exclude_none=False) for r in rows]
    }
