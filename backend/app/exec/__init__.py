"""Best-effort execution helpers."""

from backend.app.exec.attempt import AttemptResult, attempt

__all__ = [
    "AttemptResult",
    "attempt",
]
