"""Query helpers for bookings."""

from sqlalchemy import select
from sqlalchemy.orm import Session

from backend.app.db.models.booking import Booking
from backend.app.db.trips import mark_booked
from backend.app.models.booking import BookingInput


def create_booking(
    session: Session, booking: BookingInput, image_url: str | None
) -> Booking:
    """Mark the trip booked and insert the booking in one transaction.

    Selecting the same flight twice inserts two bookings; the trip flag is
    simply set again.
    """
    mark_booked(session, booking.trip_id)
    row = Booking(
        trip_id=booking.trip_id,
        carrier=booking.carrier,
        flight_number=booking.flight_number,
        origin_city=booking.origin.city,
        origin_code=booking.origin.code,
        origin_airport_name=booking.origin.airport_name,
        destination_city=booking.destination.city,
        destination_code=booking.destination.code,
        destination_airport_name=booking.destination.airport_name,
        depart_at=booking.depart_at,
        arrive_at=booking.arrive_at,
        price=booking.price,
        currency=booking.currency,
        image_url=image_url,
    )
    session.add(row)
    session.commit()
    session.refresh(row)
    return row


def list_recent_bookings(session: Session, limit: int = 8) -> list[Booking]:
    """List bookings newest first."""
    stmt = (
        select(Booking)
        .order_by(Booking.created_at.desc(), Booking.id.desc())
        .limit(limit)
    )
    return list(session.execute(stmt).scalars())
