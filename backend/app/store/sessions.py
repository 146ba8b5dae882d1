"""Planning session storage."""

import threading
from datetime import UTC, datetime, timedelta
from typing import Protocol

from backend.app.models.session import PlanningSession


class SessionStore(Protocol):
    """Storage interface for planning sessions."""

    def get(self, session_id: str) -> PlanningSession | None:
        """Get a session by id.

        Args:
            session_id: Session identifier.

        Returns:
            Stored session or None if not found/expired.
        """
        ...

    def set(self, session: PlanningSession) -> None:
        """Store or replace a session.

        Args:
            session: Session to store, keyed by its session_id.
        """
        ...

    def delete(self, session_id: str) -> None:
        """Remove a session if present."""
        ...


class InMemorySessionStore:
    """In-memory session store with optional TTL.

    Sessions are copied on the way in and out, so callers can never mutate
    stored state without going through ``set``.
    """

    def __init__(self, ttl_seconds: int = 0) -> None:
        """Initialize store.

        Args:
            ttl_seconds: Session lifetime; 0 keeps sessions until deleted.
        """
        self.ttl_seconds = ttl_seconds
        self._store: dict[str, tuple[PlanningSession, datetime | None]] = {}
        self._lock = threading.Lock()

    def get(self, session_id: str) -> PlanningSession | None:
        """Get session if not expired."""
        with self._lock:
            if session_id not in self._store:
                return None
            session, expires_at = self._store[session_id]
            if expires_at is not None and datetime.now(UTC) > expires_at:
                del self._store[session_id]
                return None
            return session.model_copy(deep=True)

    def set(self, session: PlanningSession) -> None:
        """Store session, refreshing its TTL."""
        with self._lock:
            expires_at = (
                datetime.now(UTC) + timedelta(seconds=self.ttl_seconds)
                if self.ttl_seconds > 0
                else None
            )
            self._store[session.session_id] = (session.model_copy(deep=True), expires_at)

    def delete(self, session_id: str) -> None:
        with self._lock:
            self._store.pop(session_id, None)

    def __len__(self) -> int:
        with self._lock:
            return len(self._store)
