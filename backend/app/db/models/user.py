"""User and profile ORM models."""

from sqlalchemy import JSON, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from backend.app.db.base import Base
from backend.app.db.mixins import CreatedAtMixin


class User(CreatedAtMixin, Base):
    """Users table."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    email: Mapped[str] = mapped_column(Text, nullable=False, unique=True)

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email!r})>"


class UserProfile(CreatedAtMixin, Base):
    """User profiles table - travel party and budget preferences."""

    __tablename__ = "user_profiles"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    location: Mapped[str | None] = mapped_column(Text, nullable=True)
    adult_companions: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    kids_companion_ages: Mapped[list[int] | None] = mapped_column(JSON, nullable=True)
    budget_per_person: Mapped[int | None] = mapped_column(Integer, nullable=True)

    def __repr__(self) -> str:
        return f"<UserProfile(id={self.id}, name={self.name!r})>"
