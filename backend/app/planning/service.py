"""Entry point for creating and looking up planning sessions."""

from __future__ import annotations

import logging
import time
from uuid import uuid4

from backend.app.errors import SessionNotFound
from backend.app.models.common import StageName
from backend.app.models.preferences import TripPreferences
from backend.app.models.session import PlanningSession
from backend.app.store.sessions import SessionStore

from .events import EventType, ProgressEmitter
from .orchestrator import PipelineOrchestrator

logger = logging.getLogger(__name__)


class TripPlanner:
    """Runs the pipeline for a request and stores the resulting session."""

    def __init__(self, store: SessionStore, orchestrator: PipelineOrchestrator) -> None:
        self.store = store
        self.orchestrator = orchestrator

    async def plan(
        self,
        preferences: TripPreferences,
        emitter: ProgressEmitter | None = None,
    ) -> PlanningSession:
        """Generate a draft and open a new session with nothing confirmed.

        Nothing is stored if any stage fails.
        """
        emitter = emitter or ProgressEmitter()
        emitter.emit(
            EventType.planning_started,
            StageName.initialization.value,
            f"Planning trip to {preferences.destination_city}.",
        )

        started = time.perf_counter()
        itinerary = await self.orchestrator.build_itinerary_draft(preferences, emitter)

        session = PlanningSession(
            session_id=str(uuid4()),
            preferences=preferences,
            itinerary=itinerary,
        )
        self.store.set(session)
        logger.info(
            "Planning session created",
            extra={
                "session_id": session.session_id,
                "destination": preferences.destination_city,
                "latency_ms": int((time.perf_counter() - started) * 1000),
            },
        )
        return session

    def get_session(self, session_id: str) -> PlanningSession:
        """Look up a stored session.

        Raises:
            SessionNotFound: if session_id is unknown or expired
        """
        session = self.store.get(session_id)
        if session is None:
            raise SessionNotFound(session_id)
        return session
