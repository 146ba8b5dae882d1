"""Shared service instances for the API layer.

Each getter is a FastAPI dependency so tests can swap implementations with
``app.dependency_overrides``.
"""

from fastapi import Depends

from backend.app.config import get_settings
from backend.app.confirm.machine import ConfirmationService
from backend.app.engine.openai_runner import OpenAIStageRunner
from backend.app.planning.orchestrator import PipelineOrchestrator
from backend.app.planning.service import TripPlanner
from backend.app.store.sessions import InMemorySessionStore, SessionStore

_store: SessionStore | None = None
_orchestrator: PipelineOrchestrator | None = None


def get_session_store() -> SessionStore:
    """Get the process-wide session store."""
    global _store
    if _store is None:
        _store = InMemorySessionStore(ttl_seconds=get_settings().session_ttl_seconds)
    return _store


def get_orchestrator() -> PipelineOrchestrator:
    """Get the pipeline orchestrator backed by the OpenAI runner."""
    global _orchestrator
    if _orchestrator is None:
        _orchestrator = PipelineOrchestrator(OpenAIStageRunner(get_settings()))
    return _orchestrator


def get_trip_planner(
    store: SessionStore = Depends(get_session_store),
    orchestrator: PipelineOrchestrator = Depends(get_orchestrator),
) -> TripPlanner:
    return TripPlanner(store, orchestrator)


_confirmation_service: ConfirmationService | None = None


def get_confirmation_service(
    store: SessionStore = Depends(get_session_store),
    orchestrator: PipelineOrchestrator = Depends(get_orchestrator),
) -> ConfirmationService:
    """Get the confirmation service.

    The service holds the per-session locks, so one instance is kept for as
    long as the store and orchestrator stay the same.
    """
    global _confirmation_service
    if (
        _confirmation_service is None
        or _confirmation_service.store is not store
        or _confirmation_service.orchestrator is not orchestrator
    ):
        _confirmation_service = ConfirmationService(store, orchestrator)
    return _confirmation_service
