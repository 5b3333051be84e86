"""In-memory store of generator sessions, one per API client."""

import logging
import secrets
from collections import OrderedDict
from threading import Lock

from app.services.generator import GeneratorSession
from app.services.tiers import SecurityTier

logger = logging.getLogger(__name__)


class SessionNotFoundError(KeyError):
    """Raised when a session id is unknown or was evicted."""
    def __init__(self, session_id: str):
        self.session_id = session_id
        super().__init__(f"Session '{session_id}' not found")


class SessionStore:
    """Thread-safe map of session id to GeneratorSession.

    Sessions are never shared: each id gets its own GeneratorSession and
    history. When the store is full the least recently used session is
    evicted.
    """

    def __init__(self, max_sessions: int, history_limit: int, default_tier: SecurityTier | str):
        self.max_sessions = max_sessions
        self.history_limit = history_limit
        self.default_tier = SecurityTier(default_tier)
        self.sessions: OrderedDict[str, GeneratorSession] = OrderedDict()
        self.lock = Lock()

    def create(self, tier: SecurityTier | str | None = None) -> tuple[str, GeneratorSession]:
        session_id = secrets.token_urlsafe(16)
        session = GeneratorSession(
            tier=tier or self.default_tier,
            history_limit=self.history_limit,
        )

        with self.lock:
            while len(self.sessions) >= self.max_sessions:
                evicted, _ = self.sessions.popitem(last=False)
                logger.info("Evicted generator session %s", evicted)
            self.sessions[session_id] = session

        logger.debug("Created generator session %s", session_id)
        return session_id, session

    def get(self, session_id: str) -> GeneratorSession:
        with self.lock:
            session = self.sessions.get(session_id)
            if session is None:
                raise SessionNotFoundError(session_id)
            # Most recently used last; eviction pops from the front
            self.sessions.move_to_end(session_id)
        return session

    def delete(self, session_id: str) -> None:
        with self.lock:
            if self.sessions.pop(session_id, None) is None:
                raise SessionNotFoundError(session_id)
        logger.debug("Deleted generator session %s", session_id)

    def __len__(self) -> int:
        with self.lock:
            return len(self.sessions)
