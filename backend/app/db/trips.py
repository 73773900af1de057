"""Query helpers for potential trips."""

from datetime import datetime
from typing import Any

from sqlalchemy import func, select, update
from sqlalchemy.orm import Session

from backend.app.db.models.trip import EMAIL_SOURCE_PREFIX, SEARCH_SOURCE, PotentialTrip

# Columns a caller may change on an existing trip
UPDATABLE_COLUMNS = frozenset(
    {"name", "destination", "origin", "budget", "start_date", "end_date"}
)


def create_trip(
    session: Session,
    *,
    name: str,
    destination: str,
    source: str,
    origin: str | None = None,
    budget: int | None = None,
    start_date: datetime | None = None,
    end_date: datetime | None = None,
) -> PotentialTrip:
    """Insert a potential trip and commit.

    Args:
        session: Database session
        name: Display name
        destination: Destination text
        source: Provenance tag ("search" or "email:<id>")

    Returns:
        The persisted row with its id populated
    """
    trip = PotentialTrip(
        name=name,
        destination=destination,
        source=source,
        origin=origin,
        budget=budget,
        start_date=start_date,
        end_date=end_date,
        is_booked=False,
    )
    session.add(trip)
    session.commit()
    session.refresh(trip)
    return trip


def get_trip(session: Session, trip_id: int) -> PotentialTrip | None:
    """Load a potential trip by id, bypassing the identity map cache."""
    stmt = (
        select(PotentialTrip)
        .where(PotentialTrip.id == trip_id)
        .execution_options(populate_existing=True)
    )
    return session.execute(stmt).scalar_one_or_none()


def update_trip(session: Session, trip_id: int, changes: dict[str, Any]) -> bool:
    """Apply column changes to a trip and commit.

    Args:
        session: Database session
        trip_id: Trip to update
        changes: Column name to new value; unknown columns raise

    Returns:
        True if anything was written
    """
    if not changes:
        return False
    unknown = set(changes) - UPDATABLE_COLUMNS
    if unknown:
        raise ValueError(f"Cannot update trip columns: {sorted(unknown)}")

    session.execute(
        update(PotentialTrip).where(PotentialTrip.id == trip_id).values(**changes)
    )
    session.commit()
    return True


def mark_booked(session: Session, trip_id: int) -> None:
    """Flag a trip as booked. Does not commit; the caller owns the transaction."""
    session.execute(
        update(PotentialTrip).where(PotentialTrip.id == trip_id).values(is_booked=True)
    )


def _email_trip_filters(
    since: datetime | None = None, after_id: int | None = None
) -> list[Any]:
    filters: list[Any] = [
        PotentialTrip.is_booked.is_(False),
        PotentialTrip.source.like(f"{EMAIL_SOURCE_PREFIX}%"),
    ]
    if since is not None:
        filters.append(PotentialTrip.created_at > since)
    if after_id is not None:
        filters.append(PotentialTrip.id > after_id)
    return filters


def count_email_trips(
    session: Session, since: datetime | None = None, after_id: int | None = None
) -> int:
    """Count unbooked trips that were proposed from emails."""
    stmt = select(func.count()).select_from(PotentialTrip).where(
        *_email_trip_filters(since, after_id)
    )
    return int(session.execute(stmt).scalar_one())


def latest_email_trip(
    session: Session, since: datetime | None = None, after_id: int | None = None
) -> PotentialTrip | None:
    """Return the newest unbooked email-proposed trip matching the filters."""
    stmt = (
        select(PotentialTrip)
        .where(*_email_trip_filters(since, after_id))
        .order_by(PotentialTrip.created_at.desc(), PotentialTrip.id.desc())
        .limit(1)
    )
    return session.execute(stmt).scalar_one_or_none()


def list_email_trips(session: Session, limit: int) -> list[PotentialTrip]:
    """List the newest unbooked email-proposed trips."""
    stmt = (
        select(PotentialTrip)
        .where(*_email_trip_filters())
        .order_by(PotentialTrip.created_at.desc(), PotentialTrip.id.desc())
        .limit(limit)
    )
    return list(session.execute(stmt).scalars())


def list_recent_searches(session: Session, limit: int = 8) -> list[PotentialTrip]:
    """List the newest unbooked trips created from the search bar."""
    stmt = (
        select(PotentialTrip)
        .where(
            PotentialTrip.is_booked.is_(False),
            PotentialTrip.source == SEARCH_SOURCE,
        )
        .order_by(PotentialTrip.created_at.desc(), PotentialTrip.id.desc())
        .limit(limit)
    )
    return list(session.execute(stmt).scalars())
