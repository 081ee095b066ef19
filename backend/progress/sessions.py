"""
Process-local achievement sessions, one per user.

Volatile by design of the product: fired achievements are forgotten on restart.
Sync routes run in a worker thread pool, so creation is serialized by a
registry lock and each session carries its own lock for evaluate/drain.
"""
import logging
import threading
from typing import Dict, Optional

from .analytics.achievements import AchievementDetector, FiredAchievementStore
from .celebrations import ConfettiPresenter

logger = logging.getLogger(__name__)


class AchievementSession:
    """Detector, its confetti presenter and the lock guarding both."""

    def __init__(self):
        self.presenter = ConfettiPresenter()
        self.detector = AchievementDetector(store=FiredAchievementStore(), presenter=self.presenter)
        self.lock = threading.Lock()


_sessions: Dict[str, AchievementSession] = {}
_registry_lock = threading.Lock()


def get_session(user_id: str) -> AchievementSession:
    """Session for the user, created on first use."""
    with _registry_lock:
        session = _sessions.get(user_id)
        if session is None:
            session = AchievementSession()
            _sessions[user_id] = session
            logger.debug(f"Started achievement session for user {user_id}")
        return session


def find_session(user_id: str) -> Optional[AchievementSession]:
    """Existing session for the user, or None. Never creates one."""
    with _registry_lock:
        return _sessions.get(user_id)


def get_detector(user_id: str) -> AchievementDetector:
    return get_session(user_id).detector


def find_detector(user_id: str) -> Optional[AchievementDetector]:
    session = find_session(user_id)
    return session.detector if session is not None else None


def reset(user_id: str) -> None:
    with _registry_lock:
        _sessions.pop(user_id, None)


def reset_all() -> None:
    with _registry_lock:
        _sessions.clear()
