"""ORM models for database tables."""

from .booking import Booking
from .email import Email
from .trip import EMAIL_SOURCE_PREFIX, SEARCH_SOURCE, PotentialTrip, Trip
from .user import User, UserProfile

__all__ = [
    "User",
    "UserProfile",
    "Email",
    "Trip",
    "PotentialTrip",
    "Booking",
    "EMAIL_SOURCE_PREFIX",
    "SEARCH_SOURCE",
]
