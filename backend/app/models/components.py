"""UI component payloads streamed to the browser.

Every payload carries a ``type`` discriminant; the browser renders buttons,
prompt inputs and flight cards from these shapes.
"""

from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import Field

from .common import CamelModel
from .trip import TripField


class ContextEvent(CamelModel):
    """First SSE event of a stream, identifying the trip."""

    type: Literal["context"] = "context"
    trip_id: int


class ButtonComponent(CamelModel):
    """Call-to-action link to a trip's detail page."""

    type: Literal["button"] = "button"
    label: str
    href: str
    classes: str
    aria_label: str


class PromptComponent(CamelModel):
    """Question asking the user for one missing trip field."""

    type: Literal["prompt"] = "prompt"
    field: TripField
    label: str
    input_type: Literal["text", "date", "number"]
    suggestions: list[str] | None = None


class FlightComponent(CamelModel):
    """Synthesized flight offer card."""

    type: Literal["flight"] = "flight"
    id: str
    carrier: str
    carrier_logo: str
    flight_number: str
    origin: str
    destination: str
    depart_at: str
    arrive_at: str
    duration_minutes: int
    price: int
    currency: str = "USD"
    origin_city: str | None = None
    origin_code: str | None = None
    origin_airport_name: str | None = None
    destination_city: str | None = None
    destination_code: str | None = None
    destination_airport_name: str | None = None


Component = Annotated[
    Union[ButtonComponent, PromptComponent, FlightComponent],
    Field(discriminator="type"),
]
