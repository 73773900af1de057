"""Trip ORM models."""

from datetime import datetime

from sqlalchemy import Boolean, DateTime, Index, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from backend.app.db.base import Base
from backend.app.db.mixins import CreatedAtMixin

SEARCH_SOURCE = "search"
EMAIL_SOURCE_PREFIX = "email:"


class PotentialTrip(CreatedAtMixin, Base):
    """Potential trips table - trips in progress, from searches or emails."""

    __tablename__ = "potential_trips"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    destination: Mapped[str] = mapped_column(Text, nullable=False)
    origin: Mapped[str | None] = mapped_column(Text, nullable=True)
    budget: Mapped[int | None] = mapped_column(Integer, nullable=True)
    source: Mapped[str] = mapped_column(Text, nullable=False)  # "search" or "email:<id>"
    start_date: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=False), nullable=True
    )
    end_date: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=False), nullable=True
    )
    is_booked: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    __table_args__ = (
        Index("idx_potential_trips_booked_created", "is_booked", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<PotentialTrip(id={self.id}, destination={self.destination!r}, source={self.source!r})>"


class Trip(CreatedAtMixin, Base):
    """Trips table - confirmed trip records."""

    __tablename__ = "trips"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    destination: Mapped[str] = mapped_column(Text, nullable=False)
    origin: Mapped[str | None] = mapped_column(Text, nullable=True)
    budget: Mapped[int | None] = mapped_column(Integer, nullable=True)
    source: Mapped[str] = mapped_column(Text, nullable=False)
    start_date: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=False), nullable=True
    )
    end_date: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=False), nullable=True
    )

    def __repr__(self) -> str:
        return f"<Trip(id={self.id}, destination={self.destination!r})>"
