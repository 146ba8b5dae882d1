"""Per-component confirmation workflow for planning sessions."""

from __future__ import annotations

import asyncio
import logging
import threading
import weakref
from datetime import UTC, datetime

from backend.app.errors import (
    OptionNotOffered,
    PendingComponents,
    SessionNotFound,
    UnknownComponent,
)
from backend.app.metrics.core import record_confirmation
from backend.app.models.common import TRIP_COMPONENTS, ComponentType
from backend.app.models.session import (
    ConfirmationRecord,
    ConfirmationResult,
    FinalApprovalResult,
    FinalDecision,
    PlanningSession,
    next_component_to_confirm,
)
from backend.app.planning.draft import recompute_from_flight
from backend.app.planning.events import ProgressEmitter
from backend.app.planning.orchestrator import PipelineOrchestrator
from backend.app.store.sessions import SessionStore

logger = logging.getLogger(__name__)

APPROVED_MESSAGE = "Final itinerary confirmed. No purchases were made."
DECLINED_MESSAGE = "Final itinerary was not approved. No purchases were made."
NO_PURCHASE_POLICY = "At this stage, nothing is purchased."

# Components whose confirmation depends on the confirmed flight's stay window.
FLIGHT_DEPENDENTS = (ComponentType.hotel, ComponentType.car_rental)


def parse_component(value: ComponentType | str) -> ComponentType:
    """Resolve a wire component name.

    Raises:
        UnknownComponent: if value is not flight, hotel, or carRental
    """
    if isinstance(value, ComponentType):
        return value
    try:
        return ComponentType(value)
    except ValueError:
        raise UnknownComponent(
            str(value), [component.value for component in TRIP_COMPONENTS]
        ) from None


class ConfirmationService:
    """Owns every mutation of a planning session after the draft exists.

    Operations on the same session are serialized; each operation works on
    a copy of the session and only commits it once every step succeeded.
    """

    def __init__(self, store: SessionStore, orchestrator: PipelineOrchestrator) -> None:
        self.store = store
        self.orchestrator = orchestrator
        # Entries vanish once no operation holds the lock.
        self._locks: weakref.WeakValueDictionary[str, asyncio.Lock] = (
            weakref.WeakValueDictionary()
        )
        self._locks_guard = threading.Lock()

    def _lock_for(self, session_id: str) -> asyncio.Lock:
        with self._locks_guard:
            lock = self._locks.get(session_id)
            if lock is None:
                lock = asyncio.Lock()
                self._locks[session_id] = lock
            return lock

    def _load(self, session_id: str) -> PlanningSession:
        session = self.store.get(session_id)
        if session is None:
            raise SessionNotFound(session_id)
        return session

    async def confirm(
        self,
        session_id: str,
        component: ComponentType | str,
        option_id: str,
        emitter: ProgressEmitter | None = None,
    ) -> ConfirmationResult:
        """Confirm one option for one component.

        Confirming a flight recomputes the stay window, re-prices hotel and
        car options, and resets their confirmations along with any final
        review or decision. Once all components are confirmed a fresh final
        review is generated.

        Raises:
            UnknownComponent: if component is not flight, hotel, or carRental
            SessionNotFound: if session_id is unknown
            OptionNotOffered: if option_id is not a current option
            StageOutputInvalid, StageGenerationError: if the final review fails
        """
        component = parse_component(component)
        option_id = str(option_id)

        async with self._lock_for(session_id):
            session = self._load(session_id)
            if session.itinerary.components.get(component).find_option(option_id) is None:
                raise OptionNotOffered(component.value, option_id)

            session.confirmations[component] = ConfirmationRecord(option_id=option_id)

            cascaded = False
            if component is ComponentType.flight:
                session.itinerary = recompute_from_flight(
                    session.itinerary, session.preferences, option_id
                )
                for dependent in FLIGHT_DEPENDENTS:
                    cascaded = cascaded or session.confirmations.get(dependent) is not None
                    session.confirmations[dependent] = None
                session.final_review = None
                session.final_confirmed = False
                session.final_decision = None

            pending = next_component_to_confirm(session.confirmations)
            if pending is None:
                session.final_review = await self.orchestrator.create_final_review(
                    session.preferences,
                    session.itinerary,
                    session.confirmations,
                    emitter,
                )
                session.final_confirmed = False
                session.final_decision = None

            self.store.set(session)

        record_confirmation(component.value, cascaded=cascaded, all_confirmed=pending is None)
        logger.info(
            "Component confirmed",
            extra={
                "session_id": session_id,
                "component": component.value,
                "option_id": option_id,
                "status": session.status.value,
            },
        )
        return ConfirmationResult(
            session_id=session.session_id,
            itinerary=session.itinerary,
            confirmations=session.confirmations,
            next_component_to_confirm=pending,
            final_review=session.final_review,
        )

    async def final_approve(self, session_id: str, approved: bool) -> FinalApprovalResult:
        """Record the final, non-binding approve/decline decision.

        Raises:
            SessionNotFound: if session_id is unknown
            PendingComponents: if any component is still unconfirmed
        """
        async with self._lock_for(session_id):
            session = self._load(session_id)
            pending = next_component_to_confirm(session.confirmations)
            if pending is not None:
                raise PendingComponents(pending.value)

            session.final_confirmed = approved
            session.final_decision = FinalDecision(
                approved=approved, decided_at=datetime.now(UTC)
            )
            self.store.set(session)

        logger.info(
            "Final decision recorded",
            extra={"session_id": session_id, "approved": approved},
        )
        return FinalApprovalResult(
            session_id=session_id,
            approved=approved,
            message=APPROVED_MESSAGE if approved else DECLINED_MESSAGE,
            no_purchase_policy=NO_PURCHASE_POLICY,
        )
