"""Shared request helpers for the API routers."""

import json
from typing import Any

from fastapi import Request


async def read_json(request: Request) -> Any:
    """Parse the request body as JSON; an empty or malformed body reads as ``{}``."""
    body = await request.body()
    if not body:
        return {}
    try:
        return json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError):
        return {}


def flag_enabled(value: str | None) -> bool:
    """Query flags are on when given as ``1`` or ``true``."""
    return value in ("1", "true")
