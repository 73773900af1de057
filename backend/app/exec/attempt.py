"""Best-effort execution of calls whose failures are discarded by policy."""

import logging
import time
from collections.abc import Awaitable
from dataclasses import dataclass
from typing import Generic, TypeVar

from backend.app.metrics.core import record_external_call

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class AttemptResult(Generic[T]):
    """Outcome of a best-effort call.

    Exactly one of ``value`` or ``error`` is meaningful: ``ok`` tells which.
    """

    name: str
    ok: bool
    value: T | None = None
    error: BaseException | None = None
    latency_ms: int = 0

    def value_or(self, default: T) -> T:
        """Return the value on success, otherwise ``default``."""
        if self.ok and self.value is not None:
            return self.value
        return default


async def attempt(name: str, awaitable: Awaitable[T]) -> AttemptResult[T]:
    """Await ``awaitable`` once and capture any failure instead of raising.

    Failures are logged as warnings and recorded as metrics; the caller decides
    whether to look at the error. Nothing is retried.

    Args:
        name: Logical name of the call for logs and metrics.
        awaitable: Coroutine to await.

    Returns:
        AttemptResult with the value or the captured exception.
    """
    start_time = time.time()
    try:
        value = await awaitable
    except Exception as e:
        latency_ms = int((time.time() - start_time) * 1000)
        logger.warning("Best-effort call %s failed: %s", name, e)
        record_external_call(name, latency_ms, ok=False, error_kind=type(e).__name__)
        return AttemptResult(name=name, ok=False, error=e, latency_ms=latency_ms)

    latency_ms = int((time.time() - start_time) * 1000)
    record_external_call(name, latency_ms, ok=True)
    return AttemptResult(name=name, ok=True, value=value, latency_ms=latency_ms)
