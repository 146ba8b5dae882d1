"""Metrics façade for stage execution tracking."""

import logging

logger = logging.getLogger(__name__)


def record_stage_run(
    stage: str,
    agent: str | None,
    latency_ms: int,
    ok: bool,
    error_kind: str | None,
    tool_calls: int = 0,
) -> None:
    """Record metrics for one generation stage.

    This is a simple stub implementation that logs metrics.
    In production, this would emit to Prometheus/OpenTelemetry.

    Args:
        stage: Stage name.
        agent: Agent that ran the stage, if any.
        latency_ms: Latency in milliseconds.
        ok: Whether the stage produced valid output.
        error_kind: Exception class name if the stage failed, None if succeeded.
        tool_calls: Number of tool calls observed during the stage.
    """
    logger.info(
        "stage_run_metric",
        extra={
            "stage": stage,
            "agent": agent,
            "latency_ms": latency_ms,
            "ok": ok,
            "error_kind": error_kind,
            "tool_calls": tool_calls,
        },
    )


def record_confirmation(component: str, cascaded: bool, all_confirmed: bool) -> None:
    """Record a component confirmation.

    Args:
        component: Component that was confirmed.
        cascaded: Whether dependent confirmations were reset.
        all_confirmed: Whether every component is now confirmed.
    """
    logger.info(
        "confirmation_metric",
        extra={
            "component": component,
            "cascaded": cascaded,
            "all_confirmed": all_confirmed,
        },
    )
