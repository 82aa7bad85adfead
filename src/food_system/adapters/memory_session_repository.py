"""In-memory cooking session repository with capacity and TTL limits."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from uuid import UUID

from food_system.domain.cooking import CookingSession
from food_system.domain.errors import CapacityExceededError
from food_system.services.cooking import CookingSessionRepository

_logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


@dataclass
class InMemoryCookingSessionRepository(CookingSessionRepository):
    """Process-local session store.

    Terminal sessions expire ``terminal_ttl_seconds`` after they end. When
    the store is full the oldest terminal session is evicted; if every
    stored session is still active, new sessions are refused.
    """

    capacity: int = 1000
    terminal_ttl_seconds: int = 86400
    clock: Callable[[], datetime] = _utcnow
    _sessions: dict[UUID, CookingSession] = field(default_factory=dict, init=False)

    def add(self, session: CookingSession) -> None:
        """Store a new session, making room if needed."""
        self._expire_terminal()
        if len(self._sessions) >= self.capacity:
            self._evict_oldest_terminal()
        self._sessions[session.id] = session

    def get(self, session_id: UUID) -> CookingSession | None:
        self._expire_terminal()
        return self._sessions.get(session_id)

    def save(self, session: CookingSession) -> None:
        self._sessions[session.id] = session

    def list_sessions(self, limit: int) -> list[CookingSession]:
        self._expire_terminal()
        ordered = sorted(
            self._sessions.values(),
            key=lambda session: session.created_at,
            reverse=True,
        )
        return ordered[:limit]

    def __len__(self) -> int:
        return len(self._sessions)

    def _expire_terminal(self) -> None:
        cutoff = self.clock() - timedelta(seconds=self.terminal_ttl_seconds)
        expired = [
            session_id
            for session_id, session in self._sessions.items()
            if session.is_terminal and _ended_at(session) < cutoff
        ]
        for session_id in expired:
            del self._sessions[session_id]
        if expired:
            _logger.info("Expired cooking sessions", extra={"count": len(expired)})

    def _evict_oldest_terminal(self) -> None:
        terminal = [
            session for session in self._sessions.values() if session.is_terminal
        ]
        if not terminal:
            raise CapacityExceededError(
                "Too many active cooking sessions",
                details={"capacity": self.capacity},
            )
        oldest = min(terminal, key=_ended_at)
        del self._sessions[oldest.id]


def _ended_at(session: CookingSession) -> datetime:
    return session.ended_at or session.updated_at or session.created_at
