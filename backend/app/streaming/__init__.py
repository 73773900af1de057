"""Server-sent event framing for component streams."""

from backend.app.streaming.sse import (
    SSEDecoder,
    component_event_response,
    component_events,
)

__all__ = [
    "SSEDecoder",
    "component_event_response",
    "component_events",
]
