"""Email ORM model."""

from datetime import datetime

from sqlalchemy import Boolean, DateTime, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from backend.app.db.base import Base


class Email(Base):
    """Emails table - ingested messages scanned for travel plans."""

    __tablename__ = "emails"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    subject: Mapped[str] = mapped_column(Text, nullable=False)
    body: Mapped[str] = mapped_column(Text, nullable=False)
    sender_email: Mapped[str] = mapped_column(Text, nullable=False)
    recipient_email: Mapped[str] = mapped_column(Text, nullable=False)
    is_read: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    folder: Mapped[str] = mapped_column(Text, nullable=False, default="inbox")
    sent_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=False), nullable=False, default=datetime.now
    )

    def __repr__(self) -> str:
        return f"<Email(id={self.id}, subject={self.subject!r})>"
