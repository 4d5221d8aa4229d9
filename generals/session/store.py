"""
Session Store - Versioned in-memory storage for session aggregates.

The store holds whole GameSession documents and accepts a write only when
the caller read the version currently stored (compare-and-swap). A writer
that lost the race gets ConcurrentModification and must re-read.

Sessions are copied on the way in and on the way out, so no caller can
change stored state except through save().
"""

from __future__ import annotations
import threading
from abc import ABC, abstractmethod

from ..engine_core.errors import ConcurrentModification, SessionNotFound
from ..engine_core.state import GameSession


class SessionStore(ABC):
    """Storage interface for session aggregates."""

    @abstractmethod
    def insert(self, session: GameSession) -> GameSession:
        """Store a new session at version 0."""

    @abstractmethod
    def load(self, session_id: str) -> GameSession:
        """Return a private copy of the stored session."""

    @abstractmethod
    def save(self, session: GameSession, expected_version: int) -> GameSession:
        """
        Replace the stored session if its version is still expected_version.

        Returns the stored copy with its version bumped.

        Raises:
            ConcurrentModification: if another write landed first
        """

    @abstractmethod
    def delete(self, session_id: str) -> bool:
        """Remove a session; False if it did not exist."""

    @abstractmethod
    def list_ids(self) -> list[str]:
        pass


class InMemorySessionStore(SessionStore):
    """
    Process-local store. Nothing survives a restart.
    """

    def __init__(self):
        self._sessions: dict[str, GameSession] = {}
        self._lock = threading.Lock()

    def insert(self, session: GameSession) -> GameSession:
        with self._lock:
            if session.session_id in self._sessions:
                raise ConcurrentModification(f"Session {session.session_id} already exists")
            stored = session.clone()
            stored.version = 0
            self._sessions[stored.session_id] = stored
            return stored.clone()

    def load(self, session_id: str) -> GameSession:
        with self._lock:
            stored = self._sessions.get(session_id)
            if stored is None:
                raise SessionNotFound(f"Session {session_id} not found")
            return stored.clone()

    def save(self, session: GameSession, expected_version: int) -> GameSession:
        with self._lock:
            stored = self._sessions.get(session.session_id)
            if stored is None:
                raise SessionNotFound(f"Session {session.session_id} not found")
            if stored.version != expected_version:
                raise ConcurrentModification(
                    f"Session {session.session_id} is at version {stored.version}, "
                    f"expected {expected_version}"
                )
            new_stored = session.clone()
            new_stored.version = expected_version + 1
            self._sessions[new_stored.session_id] = new_stored
            return new_stored.clone()

    def delete(self, session_id: str) -> bool:
        with self._lock:
            return self._sessions.pop(session_id, None) is not None

    def list_ids(self) -> list[str]:
        with self._lock:
            return list(self._sessions)
