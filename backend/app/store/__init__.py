"""Session storage."""

from .sessions import InMemorySessionStore, SessionStore

__all__ = ["InMemorySessionStore", "SessionStore"]
