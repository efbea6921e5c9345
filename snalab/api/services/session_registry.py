"""In-memory registry of analysis sessions, one per browser tab.

Sessions are kept in least-recently-used order. Creating a session past
``max_sessions`` disposes the stalest one, and a session left idle longer
than ``idle_ttl_seconds`` is disposed the next time the registry is touched.
"""
from __future__ import annotations

import logging
import threading
import time
from collections import OrderedDict
from typing import Callable, List, Optional

from snalab.config import DEFAULT_MAX_SESSIONS, DEFAULT_SESSION_TTL_SECONDS, AnalysisSettings
from snalab.errors import SessionNotFoundError
from snalab.session import AnalysisSession

logger = logging.getLogger(__name__)


class SessionRegistry:
    """Creates, looks up and disposes sessions.

    The lock only guards the id table; each session is driven by one client
    at a time.
    """

    def __init__(
        self,
        settings: Optional[AnalysisSettings] = None,
        *,
        max_sessions: int = DEFAULT_MAX_SESSIONS,
        idle_ttl_seconds: int = DEFAULT_SESSION_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Args:
            max_sessions: Live session cap (LRU eviction)
            idle_ttl_seconds: Idle time before a session expires (0 = no expiry)
            clock: Monotonic time source
        """
        self._lock = threading.Lock()
        self._sessions: "OrderedDict[str, AnalysisSession]" = OrderedDict()
        self._last_access: dict = {}
        self._settings = settings
        self.max_sessions = max_sessions
        self.idle_ttl_seconds = idle_ttl_seconds
        self._clock = clock
        self._stats = {"evictions": 0, "expirations": 0}

    def _pop(self, session_id: str) -> AnalysisSession:
        self._last_access.pop(session_id, None)
        return self._sessions.pop(session_id)

    def _expire_idle(self, now: float) -> List[AnalysisSession]:
        if self.idle_ttl_seconds <= 0:
            return []
        expired = [
            sid for sid, last in self._last_access.items()
            if now - last > self.idle_ttl_seconds
        ]
        self._stats["expirations"] += len(expired)
        return [self._pop(sid) for sid in expired]

    def _dispose_all(self, sessions: List[AnalysisSession], reason: str) -> None:
        for session in sessions:
            logger.info("Session %s %s", session.session_id, reason)
            session.dispose()

    def create(self) -> AnalysisSession:
        session = AnalysisSession(settings=self._settings)
        evicted: List[AnalysisSession] = []
        with self._lock:
            now = self._clock()
            expired = self._expire_idle(now)
            while len(self._sessions) >= self.max_sessions:
                _, stale = self._sessions.popitem(last=False)
                self._last_access.pop(stale.session_id, None)
                self._stats["evictions"] += 1
                evicted.append(stale)
            self._sessions[session.session_id] = session
            self._last_access[session.session_id] = now
        self._dispose_all(expired, "expired after idling")
        self._dispose_all(evicted, "evicted (session limit reached)")
        logger.info("Created session %s", session.session_id)
        return session

    def get(self, session_id: str) -> AnalysisSession:
        with self._lock:
            now = self._clock()
            expired = self._expire_idle(now)
            session = self._sessions.get(session_id)
            if session is not None:
                self._sessions.move_to_end(session_id)
                self._last_access[session_id] = now
        self._dispose_all(expired, "expired after idling")
        if session is None:
            raise SessionNotFoundError(f"Session {session_id} not found")
        return session

    def dispose(self, session_id: str) -> None:
        with self._lock:
            session = self._pop(session_id) if session_id in self._sessions else None
        if session is None:
            raise SessionNotFoundError(f"Session {session_id} not found")
        session.dispose()

    def stats(self) -> dict:
        with self._lock:
            return dict(self._stats, size=len(self._sessions), max_sessions=self.max_sessions)

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)
