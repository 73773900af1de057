"""Metrics façade for outbound call tracking."""

import logging

logger = logging.getLogger(__name__)


def record_external_call(
    name: str,
    latency_ms: int,
    ok: bool,
    error_kind: str | None = None,
) -> None:
    """Record metrics for a call to the language model or another upstream.

    This is a simple stub implementation that logs metrics.
    In production, this would emit to Prometheus/OpenTelemetry.

    Args:
        name: Logical name of the call (e.g., "reconcile.update_trip").
        latency_ms: Latency in milliseconds.
        ok: Whether the call succeeded.
        error_kind: Exception class name if the call failed, None if succeeded.
    """
    logger.info(
        "external_call_metric",
        extra={
            "call": name,
            "latency_ms": latency_ms,
            "ok": ok,
            "error_kind": error_kind,
        },
    )
