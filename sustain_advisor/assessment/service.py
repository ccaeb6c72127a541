"""
Assessment session driver: start → turn* → result.

Composes the three core pieces for the conversation layer:

    start()        → new session at ``opening`` (progress 0) + opening question
    submit_turn()  → merge_scores() → stage_status() → history → persist
    get_result()   → recommend_tracks() → build_assessment_result(), cached

Each turn arrives as a ``TurnUpdate``: the already-decoded structured response
of the upstream conversation model (``scores_update``, ``next_stage`` and
``next_question``).  The driver never decides the next stage itself.  Each turn
appends the user's message and the assistant's ``next_question`` to the
session's conversation history; the opening question is not recorded.

Error handling
--------------
- Unknown / expired session ids raise ``SessionNotFoundError``.
- A turn submitted after the session reached ``complete`` raises
  ``SessionCompleteError``.
- An unrecognized ``next_stage`` label is NOT an error: the session keeps its
  current stage, the turn still counts, and the reported progress is 0.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional, Sequence

from pydantic import BaseModel, ConfigDict, Field, field_validator

from sustain_advisor.assessment.scores import merge_scores
from sustain_advisor.assessment.stages import (
    StageStatus,
    initial_status,
    parse_stage,
    stage_status,
)
from sustain_advisor.assessment.store import SessionStore
from sustain_advisor.config import AppConfig, resolve_project_path
from sustain_advisor.models.result import AssessmentResult
from sustain_advisor.models.scores import ScoreUpdate
from sustain_advisor.models.session import ChatMessage
from sustain_advisor.models.track import InvestmentTrack
from sustain_advisor.recommendations.phrases import phrase, resolve_language
from sustain_advisor.recommendations.profile import build_assessment_result
from sustain_advisor.recommendations.ranker import DEFAULT_TOP_N, recommend_tracks
from sustain_advisor.taxonomy.assessment_taxonomy import ChatRole, Language
from sustain_advisor.utils.time_utils import utcnow

logger = logging.getLogger(__name__)


class SessionCompleteError(RuntimeError):
    """Raised when a turn is submitted to a session that is already complete."""

    def __init__(self, session_id: str) -> None:
        self.session_id = session_id
        super().__init__(f"Session {session_id} is complete and accepts no further turns.")


class TurnUpdate(BaseModel):
    """Decoded per-turn response from the upstream conversation step.

    ``scores_update``, ``next_stage`` and ``next_question`` are consumed; other
    keys of the response (``analysis``, ``reasoning``) are ignored.  A null
    ``scores_update`` means the turn touched no scores.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    scores_update: ScoreUpdate = Field(default_factory=ScoreUpdate)
    next_stage: str
    next_question: str = ""

    @field_validator("scores_update", mode="before")
    @classmethod
    def empty_scores_update(cls, v: Any) -> Any:
        return ScoreUpdate() if v is None else v

    @field_validator("next_question", mode="before")
    @classmethod
    def coerce_next_question(cls, v: Any) -> str:
        return "" if v is None else str(v)


@dataclass(frozen=True)
class StartedSession:
    """Return value of ``AssessmentService.start()``."""

    session_id: str
    question:   str
    status:     StageStatus


@dataclass(frozen=True)
class TurnResult:
    """Return value of ``AssessmentService.submit_turn()``.

    ``reply`` is the assistant's next question, empty when the turn carried none.
    """

    status: StageStatus
    reply:  str


def opening_question(language: Language = Language.EN) -> str:
    """The fixed first question of every assessment."""
    return phrase(language, "opening.question")


class AssessmentService:
    """Drives assessment sessions stored in a ``SessionStore``.

    Attributes:
        store:   Session store (owned by the caller).
        catalog: Static track catalog, in ranking tie-break order.
        top_n:   Number of tracks recommended per result.
        default_language: Used when ``start()`` gets no language.
    """

    def __init__(
        self,
        store:            SessionStore,
        catalog:          Sequence[InvestmentTrack],
        top_n:            int = DEFAULT_TOP_N,
        default_language: Language = Language.EN,
    ) -> None:
        self.store = store
        self.catalog = tuple(catalog)
        self.top_n = top_n
        self.default_language = default_language

    @classmethod
    def from_config(
        cls,
        config:  AppConfig,
        catalog: Optional[Sequence[InvestmentTrack]] = None,
    ) -> "AssessmentService":
        """Build a service with a fresh store; loads the catalog if not given."""
        if catalog is None:
            from sustain_advisor.catalog.loader import load_track_catalog

            catalog = load_track_catalog(resolve_project_path(config.catalog.tracks_file))

        store = SessionStore(
            ttl_seconds=config.session.ttl_seconds,
            max_sessions=config.session.max_sessions,
        )
        return cls(
            store=store,
            catalog=catalog,
            top_n=config.matcher.top_n,
            default_language=config.session.default_language,
        )

    def start(self, language: Optional[str] = None) -> StartedSession:
        """Create a session and return its id, opening question and status."""
        lang = self.default_language if language is None else resolve_language(language)
        session = self.store.create(language=lang)
        return StartedSession(
            session_id=session.session_id,
            question=opening_question(lang),
            status=initial_status(),
        )

    def submit_turn(
        self,
        session_id:   str,
        turn:         TurnUpdate,
        user_message: Optional[str] = None,
    ) -> TurnResult:
        """Apply one decoded conversation turn to a session.

        Args:
            session_id:   Target session.
            turn:         Decoded response for this turn.
            user_message: The user's message that produced ``turn``; recorded
                in the conversation history when given.

        Returns:
            ``TurnResult`` with the ``StageStatus`` for the proposed next stage
            and the assistant's reply.

        Raises:
            SessionNotFoundError: Unknown or expired session id.
            SessionCompleteError: The session already reached ``complete``.
        """
        session = self.store.get(session_id)
        if session.is_complete:
            raise SessionCompleteError(session_id)

        now = utcnow()
        session.scores = merge_scores(session.scores, turn.scores_update)
        session.conversation_count += 1

        status = stage_status(turn.next_stage)
        proposed = parse_stage(turn.next_stage)
        if proposed is None:
            logger.warning(
                "Unrecognized next_stage %r — keeping stage %s | session_id=%s",
                turn.next_stage, session.stage, session_id,
                extra={"session_id": session_id},
            )
        else:
            session.stage = proposed
        if status.is_complete:
            session.completed_at = now

        if user_message is not None:
            session.conversation_history.append(
                ChatMessage(role=ChatRole.USER, content=user_message)
            )
        if turn.next_question:
            session.conversation_history.append(
                ChatMessage(role=ChatRole.ASSISTANT, content=turn.next_question)
            )

        self.store.save(session, now=now)
        logger.info(
            "Turn %d applied | session_id=%s stage=%s progress=%d",
            session.conversation_count, session_id, session.stage, status.progress,
            extra={"session_id": session_id},
        )
        return TurnResult(status=status, reply=turn.next_question)

    def get_result(self, session_id: str) -> AssessmentResult:
        """Return the session's result, computing and caching it on first read.

        The cached result is never recomputed, even if further turns arrive
        before completion.
        """
        session = self.store.get(session_id)
        if session.result is None:
            recommendations = recommend_tracks(
                session.scores, self.catalog, top_n=self.top_n, language=session.language
            )
            session.set_result(
                build_assessment_result(session.scores, recommendations, session.language)
            )
            self.store.save(session)
            logger.info(
                "Result computed | session_id=%s tracks=%s",
                session_id, [r.track_id for r in session.result.recommended_tracks],
                extra={"session_id": session_id},
            )
        return session.result
