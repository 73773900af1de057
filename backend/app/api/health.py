"""Health check endpoint for infrastructure status."""

import logging
from typing import Literal

from pydantic import BaseModel
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from backend.app.db.base import get_session
from backend.app.db.session import get_session_factory

logger = logging.getLogger(__name__)


class HealthStatus(BaseModel):
    """Health check response."""

    status: Literal["ok", "down"]
    checks: dict[str, Literal["ok", "down"]]


async def get_health() -> HealthStatus:
    """
    Check health of the relational store.

    Checks:
    - Database: Attempts to execute SELECT 1

    Returns:
        HealthStatus with overall status and individual check results
    """
    checks: dict[str, Literal["ok", "down"]] = {}

    try:
        with get_session(get_session_factory()) as session:
            session.execute(text("SELECT 1"))
        checks["db"] = "ok"
    except SQLAlchemyError as e:
        logger.warning("Database health check failed: %s", e)
        checks["db"] = "down"

    overall_status: Literal["ok", "down"] = (
        "ok" if all(status == "ok" for status in checks.values()) else "down"
    )

    return HealthStatus(status=overall_status, checks=checks)
