"""
In-memory keyed session store with TTL eviction.

Replaces process-global session dicts with an explicitly owned store whose
lifecycle is: create on assessment start, save after every turn, evict when
idle for longer than ``ttl_seconds`` (measured from ``updated_at``) or when
``max_sessions`` is reached (least recently updated first).

Eviction is lazy: expired entries are dropped on ``get``/``create`` and by an
explicit ``purge_expired()`` sweep.  The internal lock guards the mapping
only; serialising concurrent turns for the SAME session id remains the
caller's job.
"""

from __future__ import annotations

import logging
import threading
from datetime import datetime
from typing import Optional
from uuid import uuid4

from sustain_advisor.assessment.scores import default_scores
from sustain_advisor.models.session import AssessmentSession
from sustain_advisor.taxonomy.assessment_taxonomy import AssessmentStage, Language
from sustain_advisor.utils.time_utils import is_expired, utcnow

logger = logging.getLogger(__name__)


class SessionNotFoundError(KeyError):
    """Raised when a session id is unknown or its session has expired."""

    def __init__(self, session_id: str) -> None:
        self.session_id = session_id
        super().__init__(session_id)

    def __str__(self) -> str:
        return f"Session not found: {self.session_id}"


class SessionStore:
    """Session id → ``AssessmentSession`` mapping with TTL and size cap.

    Attributes:
        ttl_seconds:  Idle lifetime in seconds; ``0`` disables expiry.
        max_sessions: Maximum number of live sessions.
    """

    def __init__(self, ttl_seconds: int = 3600, max_sessions: int = 10_000) -> None:
        if max_sessions < 1:
            raise ValueError(f"max_sessions must be >= 1, got {max_sessions}.")
        self.ttl_seconds = ttl_seconds
        self.max_sessions = max_sessions
        self._sessions: dict[str, AssessmentSession] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

    def __contains__(self, session_id: object) -> bool:
        with self._lock:
            return session_id in self._sessions

    def create(
        self,
        language: Language = Language.EN,
        now: Optional[datetime] = None,
    ) -> AssessmentSession:
        """Create, store and return a fresh session at stage ``opening``."""
        now = now or utcnow()
        session = AssessmentSession(
            session_id=str(uuid4()),
            stage=AssessmentStage.OPENING,
            conversation_count=0,
            scores=default_scores(),
            language=language,
            created_at=now,
            updated_at=now,
        )
        with self._lock:
            self._purge_locked(now)
            while len(self._sessions) >= self.max_sessions:
                oldest = min(self._sessions.values(), key=lambda s: s.updated_at)
                del self._sessions[oldest.session_id]
                logger.info("Session store full — evicted %s", oldest.session_id)
            self._sessions[session.session_id] = session

        logger.info("Session created | session_id=%s language=%s", session.session_id, language)
        return session

    def get(self, session_id: str, now: Optional[datetime] = None) -> AssessmentSession:
        """Return the live session for ``session_id``.

        Raises:
            SessionNotFoundError: If the id is unknown or the session expired.
        """
        now = now or utcnow()
        with self._lock:
            session = self._sessions.get(session_id)
            if session is None:
                raise SessionNotFoundError(session_id)
            if is_expired(session.updated_at, self.ttl_seconds, now):
                del self._sessions[session_id]
                logger.info("Session expired | session_id=%s", session_id)
                raise SessionNotFoundError(session_id)
            return session

    def save(self, session: AssessmentSession, now: Optional[datetime] = None) -> None:
        """Store ``session`` and stamp its ``updated_at``."""
        session.updated_at = now or utcnow()
        with self._lock:
            self._sessions[session.session_id] = session

    def purge_expired(self, now: Optional[datetime] = None) -> int:
        """Drop every expired session; return how many were removed."""
        with self._lock:
            return self._purge_locked(now or utcnow())

    def _purge_locked(self, now: datetime) -> int:
        expired = [
            sid for sid, s in self._sessions.items()
            if is_expired(s.updated_at, self.ttl_seconds, now)
        ]
        for sid in expired:
            del self._sessions[sid]
        if expired:
            logger.info("Purged %d expired session(s).", len(expired))
        return len(expired)
