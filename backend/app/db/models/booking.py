"""Booking ORM model."""

from datetime import datetime

from sqlalchemy import DateTime, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from backend.app.db.base import Base
from backend.app.db.mixins import CreatedAtMixin


class Booking(CreatedAtMixin, Base):
    """Bookings table - a selected flight, denormalized at booking time."""

    __tablename__ = "bookings"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    trip_id: Mapped[int] = mapped_column(Integer, nullable=False)  # potential_trips.id, not enforced
    carrier: Mapped[str] = mapped_column(Text, nullable=False)
    flight_number: Mapped[str] = mapped_column(Text, nullable=False)
    origin_city: Mapped[str] = mapped_column(Text, nullable=False)
    origin_code: Mapped[str] = mapped_column(Text, nullable=False)
    origin_airport_name: Mapped[str] = mapped_column(Text, nullable=False)
    destination_city: Mapped[str] = mapped_column(Text, nullable=False)
    destination_code: Mapped[str] = mapped_column(Text, nullable=False)
    destination_airport_name: Mapped[str] = mapped_column(Text, nullable=False)
    depart_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), nullable=False)
    arrive_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), nullable=False)
    price: Mapped[int] = mapped_column(Integer, nullable=False)
    currency: Mapped[str] = mapped_column(Text, nullable=False, default="USD")
    image_url: Mapped[str | None] = mapped_column(Text, nullable=True)

    def __repr__(self) -> str:
        return f"<Booking(id={self.id}, trip_id={self.trip_id}, flight_number={self.flight_number!r})>"
