"""
Assessment result payload.

``AssessmentResult`` is what the result page consumes: the investor profile
headline, the final scores, the ranked track recommendations and the
behavioral / SDG summaries.  It is computed once per session on first read
and then cached on the session (see ``AssessmentSession.result``).

All models are frozen and serialise with camelCase keys via
``model_dump(by_alias=True)``.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from sustain_advisor.models.scores import ScoreState
from sustain_advisor.taxonomy.assessment_taxonomy import BiasType

_PAYLOAD_CONFIG = ConfigDict(
    frozen=True,
    alias_generator=to_camel,
    populate_by_name=True,
)


class InvestorProfile(BaseModel):
    """Headline classification of the investor."""

    model_config = _PAYLOAD_CONFIG

    investor_type: str = Field(alias="type")
    summary: str
    strengths: list[str] = Field(default_factory=list)
    watch_points: list[str] = Field(default_factory=list)


class RankedTrack(BaseModel):
    """One recommended track as shown on the result page.

    Attributes:
        rank: 1-based position (1 = best match).
        match_score: Rounded combined score, 0–100.
        reason: Generated justification text.
    """

    model_config = _PAYLOAD_CONFIG

    rank: int
    track_id: str
    track_name: str
    track_name_en: str
    description: str
    match_score: int
    reason: str
    sdgs: list[int] = Field(default_factory=list)
    examples: list[str] = Field(default_factory=list)

    @field_validator("rank")
    @classmethod
    def validate_rank(cls, v: int) -> int:
        if v < 1:
            raise ValueError(f"rank must be >= 1, got {v}.")
        return v

    @field_validator("reason")
    @classmethod
    def validate_reason_not_empty(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("reason must not be empty.")
        return v.strip()


class BehavioralInsights(BaseModel):
    """Detected biases and matching coaching suggestions."""

    model_config = _PAYLOAD_CONFIG

    main_biases: list[BiasType] = Field(default_factory=list)
    suggestions: list[str] = Field(default_factory=list)


class SdgAlignment(BaseModel):
    """SDG priorities the user cares about most."""

    model_config = _PAYLOAD_CONFIG

    primary_sdgs: list[int] = Field(default_factory=list, alias="primarySDGs")
    explanation: str = ""


class AssessmentResult(BaseModel):
    """Complete result payload for a finished (or force-read) assessment."""

    model_config = _PAYLOAD_CONFIG

    investor_profile: InvestorProfile
    scores: ScoreState
    recommended_tracks: list[RankedTrack] = Field(default_factory=list)
    behavioral_insights: BehavioralInsights = Field(default_factory=BehavioralInsights)
    sdg_alignment: SdgAlignment = Field(default_factory=SdgAlignment)
    generated_at: datetime
