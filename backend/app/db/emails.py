"""Query helpers for ingested emails."""

from sqlalchemy.orm import Session

from backend.app.db.models.email import Email
from backend.app.models.email import EmailInput


def create_email(session: Session, email: EmailInput) -> Email:
    """Insert an email and commit."""
    row = Email(
        subject=email.subject,
        body=email.body,
        sender_email=email.sender_email,
        recipient_email=email.recipient_email,
        folder=email.folder,
        is_read=email.is_read,
    )
    if email.sent_at is not None:
        row.sent_at = email.sent_at
    session.add(row)
    session.commit()
    session.refresh(row)
    return row
