from threading import Lock

from app.config import settings
from app.services.session_store import SessionStore

# Built on first use so an invalid DEFAULT_TIER is reported by validate_settings
_session_store: SessionStore | None = None
_lock = Lock()


def get_session_store() -> SessionStore:
    global _session_store
    with _lock:
        if _session_store is None:
            _session_store = SessionStore(
                max_sessions=settings.max_sessions,
                history_limit=settings.history_limit,
                default_tier=settings.default_tier.lower(),
            )
        return _session_store
