"""Deterministic extraction of ``key: value`` trip fields from chat turns."""

from __future__ import annotations

import re
from collections.abc import Sequence

from pydantic import BaseModel, Field

from backend.app.models.chat import ChatMessage

ORIGIN_PATTERN = re.compile(r"^\s*origin\s*:\s*(.+?)\s*$", re.IGNORECASE)
BUDGET_PATTERN = re.compile(r"^\s*budget\s*:\s*\$?\s*(\d+)\s*$", re.IGNORECASE)
START_DATE_PATTERN = re.compile(
    r"^\s*startDate\s*:\s*(\d{4}-\d{2}-\d{2})\s*$", re.IGNORECASE
)
END_DATE_PATTERN = re.compile(
    r"^\s*endDate\s*:\s*(\d{4}-\d{2}-\d{2})\s*$", re.IGNORECASE
)

_LINE_SPLIT = re.compile(r"\n+")


class ExtractedFields(BaseModel):
    """Fields found in chat text. Absent fields stay None."""

    origin: str | None = Field(default=None, description="Departure city or code")
    budget: int | None = Field(default=None, description="Budget in whole USD")
    start_date: str | None = Field(default=None, description="YYYY-MM-DD")
    end_date: str | None = Field(default=None, description="YYYY-MM-DD")

    def is_empty(self) -> bool:
        return (
            self.origin is None
            and self.budget is None
            and self.start_date is None
            and self.end_date is None
        )


def extract_fields(messages: Sequence[ChatMessage]) -> ExtractedFields:
    """Scan user turns for ``origin:``, ``budget:``, ``startDate:`` and ``endDate:`` lines.

    Turns are scanned newest first and lines within a turn last first; the
    first match for each field wins. Scanning stops after the newest user turn
    that yields any match, so a field mentioned only in an older turn is not
    picked up once a newer turn matched a different field.

    Args:
        messages: Chat history, oldest first

    Returns:
        ExtractedFields with whatever was found
    """
    found = ExtractedFields()

    for message in reversed(messages):
        if message.role != "user":
            continue

        for line in reversed(_LINE_SPLIT.split(message.content)):
            if found.origin is None:
                match = ORIGIN_PATTERN.match(line)
                if match and match.group(1).strip():
                    found.origin = match.group(1).strip()
                    continue
            if found.budget is None:
                match = BUDGET_PATTERN.match(line)
                if match:
                    found.budget = int(match.group(1))
                    continue
            if found.start_date is None:
                match = START_DATE_PATTERN.match(line)
                if match:
                    found.start_date = match.group(1)
                    continue
            if found.end_date is None:
                match = END_DATE_PATTERN.match(line)
                if match:
                    found.end_date = match.group(1)
                    continue

        if not found.is_empty():
            break

    return found
