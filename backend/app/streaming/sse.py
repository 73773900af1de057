"""Component streams as server-sent events, and a decoder for reading them back."""

from __future__ import annotations

import codecs
import json
import logging
from collections.abc import AsyncIterator, Sequence
from typing import Any

from sse_starlette.sse import EventSourceResponse

from backend.app.models.components import ContextEvent
from backend.app.models.common import CamelModel

logger = logging.getLogger(__name__)

FRAME_SEPARATOR = "\n\n"


async def component_events(
    trip_id: int, components: Sequence[CamelModel]
) -> AsyncIterator[dict[str, str]]:
    """Yield the context event, then one event per component.

    There is no terminal event; closing the stream marks the end.
    """
    yield {"data": json.dumps(ContextEvent(trip_id=trip_id).to_wire())}
    for component in components:
        yield {"data": json.dumps(component.to_wire())}
    logger.debug("Streamed %d components for trip %d", len(components), trip_id)


def component_event_response(
    trip_id: int, components: Sequence[CamelModel]
) -> EventSourceResponse:
    """Server-sent event response carrying a trip's components."""
    return EventSourceResponse(
        component_events(trip_id, components),
        sep="\n",
        headers={"Cache-Control": "no-cache, no-transform"},
    )


class SSEDecoder:
    """Incremental decoder for ``data: <json>`` event streams.

    Feed it text chunks as they arrive; each call returns the events completed
    by that chunk. A partial frame at the end of a chunk is kept until the
    rest of it arrives.

    Example:
        >>> decoder = SSEDecoder()
        >>> decoder.feed('data: {"a": 1}\\n\\ndata: {"b"')
        [{'a': 1}]
        >>> decoder.feed(': 2}\\n\\n')
        [{'b': 2}]
    """

    def __init__(self) -> None:
        self._buffer = ""
        self._bytes = codecs.getincrementaldecoder("utf-8")()

    @property
    def pending(self) -> str:
        """Text received but not yet part of a complete frame."""
        return self._buffer

    def feed(self, chunk: str | bytes) -> list[Any]:
        if isinstance(chunk, bytes):
            chunk = self._bytes.decode(chunk)
        # CRLF pairs can straddle chunks
        self._buffer = (self._buffer + chunk).replace("\r\n", "\n")

        events: list[Any] = []
        while FRAME_SEPARATOR in self._buffer:
            frame, self._buffer = self._buffer.split(FRAME_SEPARATOR, 1)
            event = self._parse_frame(frame)
            if event is not None:
                events.append(event)
        return events

    @staticmethod
    def _parse_frame(frame: str) -> Any | None:
        data_lines = [
            line[len("data:"):].lstrip(" ")
            for line in frame.split("\n")
            if line.startswith("data:")
        ]
        if not data_lines:
            return None
        try:
            return json.loads("\n".join(data_lines))
        except json.JSONDecodeError:
            logger.warning("Skipping malformed SSE frame: %.80s", frame)
            return None
