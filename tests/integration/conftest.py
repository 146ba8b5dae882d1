"""Fixtures for HTTP transport tests."""

import pytest
from fastapi.testclient import TestClient
from sse_starlette import sse

from backend.app.api.deps import get_orchestrator, get_session_store
from backend.app.main import create_app


@pytest.fixture(autouse=True)
def reset_sse_exit_event():
    """sse-starlette keeps a process-wide exit event bound to the first event loop."""
    app_status = getattr(sse, "AppStatus", None)
    if app_status is not None and hasattr(app_status, "should_exit_event"):
        app_status.should_exit_event = None
    yield


@pytest.fixture
def client(orchestrator, session_store):
    """Test client wired to the scripted stage runner."""
    app = create_app()
    app.dependency_overrides[get_orchestrator] = lambda: orchestrator
    app.dependency_overrides[get_session_store] = lambda: session_store
    with TestClient(app) as test_client:
        yield test_client
