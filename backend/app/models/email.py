"""Email request and response models."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel

from backend.app.errors import ValidationError

from .common import CamelModel, clean_text, parse_timestamp


class EmailInput(BaseModel):
    """Validated email ingestion request."""

    subject: str
    body: str
    sender_email: str
    recipient_email: str
    folder: str = "inbox"
    is_read: bool = False
    sent_at: datetime | None = None

    @classmethod
    def from_payload(cls, payload: Any) -> EmailInput:
        """Validate an untrusted JSON body.

        Raises:
            ValidationError: Listing each missing required field.
        """
        data = payload if isinstance(payload, dict) else {}
        errors: list[str] = []
        required = {
            "subject": "subject",
            "body": "body",
            "senderEmail": "senderEmail",
            "recipientEmail": "recipientEmail",
        }
        for key, label in required.items():
            value = data.get(key)
            if not isinstance(value, str) or not value:
                errors.append(f"{label} is required")
        if errors:
            raise ValidationError(errors)

        is_read = data.get("isRead")
        return cls(
            subject=data["subject"],
            body=data["body"],
            sender_email=data["senderEmail"],
            recipient_email=data["recipientEmail"],
            folder=clean_text(data.get("folder")) or "inbox",
            is_read=is_read if isinstance(is_read, bool) else False,
            sent_at=parse_timestamp(data.get("sentAt")),
        )


class EmailOut(CamelModel):
    """Email row as returned to the browser."""

    id: int
    subject: str
    body: str
    sender_email: str
    recipient_email: str
    is_read: bool
    folder: str
    sent_at: datetime


class EmailTripSummary(CamelModel):
    """Compact row for the proposed-trips list."""

    id: int
    name: str
    destination: str
    budget: int | None = None


class RecentSearch(CamelModel):
    """Compact row for the recent-searches list."""

    id: int
    destination: str
    start_date: datetime | None = None
    end_date: datetime | None = None
    created_at: datetime
