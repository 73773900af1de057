"""Common data types and helpers used across the application."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model whose JSON form uses camelCase keys, as the browser expects."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )

    def to_wire(self, exclude_none: bool = True) -> dict[str, Any]:
        """Dump to a JSON-ready dict with camelCase keys, dropping nulls by default."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=exclude_none)


def parse_timestamp(value: Any) -> datetime | None:
    """Parse an ISO 8601 date or datetime string into a naive UTC datetime.

    Accepts ``YYYY-MM-DD`` (midnight) and full timestamps with an optional
    ``Z`` or offset suffix. Returns None for anything unparseable.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str) and value.strip():
        try:
            parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError:
            return None
    else:
        return None

    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(UTC).replace(tzinfo=None)
    return parsed


def clean_text(value: Any) -> str | None:
    """Return a stripped non-empty string, or None."""
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def as_number(value: Any) -> float | None:
    """Coerce ints, floats and numeric strings to a finite float, else None."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str) and value.strip():
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    if number != number or number in (float("inf"), float("-inf")):
        return None
    return number
