"""
Assessment session record.

``AssessmentSession`` is the only mutable model in the package: ``stage``,
``conversation_count``, ``scores``, ``conversation_history`` and the
timestamps change once per user turn.  ``result`` is write-once;
``set_result()`` refuses to overwrite it.

Sessions live in a ``SessionStore`` keyed by ``session_id``; this module knows
nothing about storage.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from sustain_advisor.models.result import AssessmentResult
from sustain_advisor.models.scores import ScoreState
from sustain_advisor.taxonomy.assessment_taxonomy import AssessmentStage, ChatRole, Language


class ChatMessage(BaseModel):
    """One entry of a session's conversation history."""

    model_config = ConfigDict(frozen=True)

    role: ChatRole
    content: str


class AssessmentSession(BaseModel):
    """State of one conversational assessment.

    Attributes:
        session_id: UUID4 string.
        stage: Current assessment stage; ``opening`` at creation.
        conversation_count: Number of user turns processed so far.
        scores: Cumulative merged scores.
        conversation_history: User messages and assistant replies, oldest
            first.  The opening question is not recorded.
        language: Language used for generated text.
        result: Cached result payload, ``None`` until first computed.
        created_at: UTC creation time.
        updated_at: UTC time of the last turn (drives TTL eviction).
        completed_at: UTC time the session reached ``complete``.
    """

    # Not frozen: stage, scores, history, counters and timestamps change every turn
    model_config = ConfigDict(frozen=False)

    session_id: str
    stage: AssessmentStage = AssessmentStage.OPENING
    conversation_count: int = 0
    scores: ScoreState = Field(default_factory=ScoreState)
    conversation_history: list[ChatMessage] = Field(default_factory=list)
    language: Language = Language.EN
    result: Optional[AssessmentResult] = None
    created_at: datetime
    updated_at: datetime
    completed_at: Optional[datetime] = None

    @field_validator("conversation_count")
    @classmethod
    def validate_conversation_count(cls, v: int) -> int:
        if v < 0:
            raise ValueError(f"conversation_count must be non-negative, got {v}.")
        return v

    @property
    def is_complete(self) -> bool:
        return self.stage == AssessmentStage.COMPLETE

    def set_result(self, result: AssessmentResult) -> AssessmentResult:
        """Cache ``result`` if none is cached yet; return the cached value."""
        if self.result is None:
            self.result = result
        return self.result
