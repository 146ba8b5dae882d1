"""Plan API endpoints for generating and streaming itinerary drafts."""

import asyncio
import json
import logging
from datetime import UTC, datetime
from typing import Any

from fastapi import APIRouter, Body, Depends
from sse_starlette.sse import EventSourceResponse

from backend.app.api.deps import get_trip_planner
from backend.app.errors import TripPlannerError
from backend.app.models.preferences import parse_trip_preferences
from backend.app.models.session import PlanningSession, next_component_to_confirm
from backend.app.planning.events import CancelToken, ProgressEmitter
from backend.app.planning.service import TripPlanner

logger = logging.getLogger(__name__)

router = APIRouter(tags=["plan"])

# Sentinel placed on the event queue once the pipeline has finished.
_DONE = object()

DONE_MESSAGE = "Planning complete. Review options and confirm components."

# Planning tasks still running, possibly after their stream has closed.
_background_tasks: set[asyncio.Task[None]] = set()


def _envelope(body: dict[str, Any]) -> str:
    """Serialize an SSE payload with its emission timestamp."""
    return json.dumps({"ts": datetime.now(UTC).isoformat(), **body})


def plan_response(session: PlanningSession) -> dict[str, Any]:
    """Build the response body for a freshly drafted session."""
    next_component = next_component_to_confirm(session.confirmations)
    return {
        "itineraryId": session.session_id,
        "itinerary": session.itinerary.model_dump(mode="json", by_alias=True),
        "nextComponentToConfirm": next_component.value if next_component else None,
    }


@router.post("/plan")
async def create_plan(
    payload: dict[str, Any] = Body(...),
    planner: TripPlanner = Depends(get_trip_planner),
) -> dict[str, Any]:
    """Generate an itinerary draft and open a planning session.

    Args:
        payload: Trip preferences in camelCase
        planner: Trip planner service

    Returns:
        itineraryId, itinerary draft, and the first component to confirm

    Raises:
        InvalidInput: if the preferences are malformed
        StageOutputInvalid, StageGenerationError: if any stage fails
    """
    preferences = parse_trip_preferences(payload)
    session = await planner.plan(preferences)
    return plan_response(session)


@router.post("/plan-stream")
async def stream_plan(
    payload: dict[str, Any] = Body(...),
    planner: TripPlanner = Depends(get_trip_planner),
) -> EventSourceResponse:
    """Generate an itinerary draft while streaming progress via Server-Sent Events.

    Stream protocol:
    - ``activity``: one progress event per pipeline step
    - ``result``: same body as POST /plan
    - ``done``: terminal marker after a result
    - ``error``: single terminal event when planning fails

    Input is validated before the stream opens, so malformed preferences
    still get a plain 400 response.
    """
    preferences = parse_trip_preferences(payload)

    queue: asyncio.Queue[Any] = asyncio.Queue()
    cancel_token = CancelToken()
    emitter = ProgressEmitter(sink=queue.put_nowait, cancel_token=cancel_token)

    async def run() -> None:
        try:
            session = await planner.plan(preferences, emitter)
            await queue.put(("result", plan_response(session)))
        except TripPlannerError as exc:
            await queue.put(("error", exc.to_detail()))
        except Exception as exc:
            logger.exception("Unexpected planning failure")
            await queue.put(
                ("error", {"error": "Failed to generate itinerary", "details": str(exc)})
            )
        finally:
            await queue.put(_DONE)

    async def event_generator() -> Any:
        """Relay queued progress events to the client.

        Yields:
            dict: SSE event
        """
        task = asyncio.create_task(run())
        _background_tasks.add(task)
        task.add_done_callback(_background_tasks.discard)
        try:
            while True:
                item = await queue.get()
                if item is _DONE:
                    break
                if isinstance(item, tuple):
                    kind, body = item
                    yield {"event": kind, "data": _envelope(body)}
                    if kind == "result":
                        yield {"event": "done", "data": _envelope({"message": DONE_MESSAGE})}
                    continue
                yield {"event": "activity", "data": json.dumps(item, default=str)}
        finally:
            # Stops event delivery and any stage that has not started yet;
            # the task ends itself at the next stage boundary.
            cancel_token.cancel()
            if not task.done():
                logger.info("Plan stream closed before planning finished")

    return EventSourceResponse(event_generator())


@router.get("/plan/{session_id}")
def get_plan(
    session_id: str,
    planner: TripPlanner = Depends(get_trip_planner),
) -> dict[str, Any]:
    """Get a planning session with its itinerary and confirmation state.

    Raises:
        SessionNotFound: 404 if session_id is unknown
    """
    session = planner.get_session(session_id)
    body = session.model_dump(mode="json", by_alias=True)
    body["status"] = session.status.value
    next_component = next_component_to_confirm(session.confirmations)
    body["nextComponentToConfirm"] = next_component.value if next_component else None
    return body
