"""Live progress events emitted while a plan is generated."""

from __future__ import annotations

import json
import logging
from collections.abc import Callable
from datetime import UTC, datetime
from enum import Enum
from typing import Any

from backend.app.errors import PlanningCancelled
from backend.app.models.itinerary import ItineraryDraft
from backend.app.models.stages import ResearchDocument, SafetyDocument

logger = logging.getLogger(__name__)

EventSink = Callable[[dict[str, Any]], Any]


class EventType(str, Enum):
    """Progress event types."""

    planning_started = "planning_started"
    stage_started = "stage_started"
    stage_completed = "stage_completed"
    agent_prompt = "agent_prompt"
    agent_response = "agent_response"
    tool_call_started = "tool_call_started"
    tool_call_completed = "tool_call_completed"
    web_search_called = "web_search_called"
    web_search_output = "web_search_output"
    tool_notice = "tool_notice"


class CancelToken:
    """Simple cancellation token."""

    def __init__(self) -> None:
        self._cancelled = False

    def cancel(self) -> None:
        """Mark this token as cancelled."""
        self._cancelled = True

    def is_cancelled(self) -> bool:
        """Check if this token has been cancelled."""
        return self._cancelled


class ProgressEmitter:
    """Delivers progress events to an optional sink.

    Delivery is best-effort: sink failures are logged and never propagate,
    and nothing is delivered once the cancel token is set.
    """

    def __init__(
        self,
        sink: EventSink | None = None,
        cancel_token: CancelToken | None = None,
    ) -> None:
        self.sink = sink
        self.cancel_token = cancel_token or CancelToken()

    @property
    def cancelled(self) -> bool:
        return self.cancel_token.is_cancelled()

    def emit(
        self,
        event_type: EventType | str,
        stage: str,
        message: str,
        *,
        agent: str | None = None,
        **fields: Any,
    ) -> None:
        """Send one event to the sink."""
        if self.sink is None or self.cancelled:
            return

        event: dict[str, Any] = {
            "type": event_type.value if isinstance(event_type, EventType) else event_type,
            "stage": stage,
            "message": message,
            "ts": datetime.now(UTC).isoformat(),
        }
        if agent is not None:
            event["agent"] = agent
        event.update(fields)

        try:
            self.sink(event)
        except Exception:
            logger.warning(
                "progress_sink_failed",
                extra={"event_type": event["type"], "stage": stage},
                exc_info=True,
            )

    def ensure_active(self, stage: str) -> None:
        """Raise PlanningCancelled if the caller has gone away."""
        if self.cancelled:
            raise PlanningCancelled(f"Planning cancelled before {stage} stage")


def redact_prompt(prompt: str | None) -> str:
    """Reduce a prompt to its first line, truncated to 100 characters."""
    if not prompt or not isinstance(prompt, str):
        return "[prompt redacted]"
    first_line = prompt.split("\n", 1)[0]
    return first_line[:100] + "..." if len(first_line) > 100 else first_line


def summarize_response(response: str | None) -> str:
    """Describe a stage response without echoing the full payload."""
    if not response or not isinstance(response, str):
        return "[no response]"

    stripped = response.strip()
    if stripped.startswith(("{", "[")):
        try:
            parsed = json.loads(stripped)
        except json.JSONDecodeError:
            parsed = None
        if isinstance(parsed, list):
            return f"[JSON Array with {len(parsed)} items]"
        if isinstance(parsed, dict):
            keys = list(parsed.keys())
            suffix = "..." if len(keys) > 5 else ""
            return f"[JSON Object with keys: {', '.join(keys[:5])}{suffix}]"

    return response[:200] + "..." if len(response) > 200 else response


def summarize_research(research: ResearchDocument) -> dict[str, int]:
    return {
        "flightOptions": len(research.flight_options),
        "hotelOptions": len(research.hotel_options),
        "carRentalOptions": len(research.car_rental_options),
        "activityIdeas": len(research.activity_ideas),
    }


def summarize_safety(safety: SafetyDocument) -> dict[str, int]:
    return {
        "safetyConcerns": len(safety.safety_concerns),
        "packingItems": len(safety.packing_list),
        "localTransportTips": len(safety.local_transport_advice),
    }


def summarize_itinerary(itinerary: ItineraryDraft) -> dict[str, Any]:
    return {
        "components": ["flight", "hotel", "carRental"],
        "activities": len(itinerary.activities),
        "estimatedTotalUsd": float(itinerary.estimated_cost_summary.total_usd),
        "daysAtDestination": itinerary.stay_at_destination.days_at_destination,
        "nightsAtDestination": itinerary.stay_at_destination.nights_at_destination,
    }
