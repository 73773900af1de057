"""Convenient imports for all model types."""

from .booking import AirportRef, BookingInput, BookingOut
from .chat import ChatMessage, format_transcript, parse_messages
from .common import CamelModel, as_number, clean_text, parse_timestamp
from .components import (
    ButtonComponent,
    Component,
    ContextEvent,
    FlightComponent,
    PromptComponent,
)
from .email import EmailInput, EmailOut, EmailTripSummary, RecentSearch
from .trip import TRIP_FIELDS, TripField, TripInput, TripState

__all__ = [
    # Common
    "CamelModel",
    "as_number",
    "clean_text",
    "parse_timestamp",
    # Chat
    "ChatMessage",
    "format_transcript",
    "parse_messages",
    # Trips
    "TRIP_FIELDS",
    "TripField",
    "TripInput",
    "TripState",
    # Components
    "ButtonComponent",
    "Component",
    "ContextEvent",
    "FlightComponent",
    "PromptComponent",
    # Bookings
    "AirportRef",
    "BookingInput",
    "BookingOut",
    # Emails
    "EmailInput",
    "EmailOut",
    "EmailTripSummary",
    "RecentSearch",
]
