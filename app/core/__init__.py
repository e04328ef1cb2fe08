"""Settings, database session, clock and password/session-token helpers."""

from app.core.clock import as_utc, utcnow
from app.core.config import Settings, get_settings, settings
from app.core.database import get_db, get_session_factory

__all__ = [
    "Settings",
    "as_utc",
    "get_db",
    "get_session_factory",
    "get_settings",
    "settings",
    "utcnow",
]
