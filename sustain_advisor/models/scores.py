"""
Assessment score models.

``ScoreState`` is the complete, cumulative picture of a user after any number
of conversation turns.  Every field always has a value; a fresh session starts
from the neutral defaults (raw 50, confidence 0, ESG 50/50/50, goal growth,
no biases, no SDG priorities).

``ScoreUpdate`` is the partial counterpart produced once per turn by the
upstream text-to-structure step.  Every field is optional and parsing is
deliberately lenient: out-of-range numbers are clamped, SDG ids outside 1..17
are dropped, malformed bias entries are dropped, and a list field that
arrives as something other than a list is treated as absent, each with a
warning.  Nothing in this module raises for an out-of-range value.

Both models accept the camelCase keys used on the wire (``timeHorizon``,
``goalType``, ``sdgPriorities``) as well as the Python field names.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from sustain_advisor.taxonomy.assessment_taxonomy import (
    SDG_MAX,
    SDG_MIN,
    VALID_BIAS_STRENGTHS,
    VALID_BIAS_TYPES,
    VALID_GOAL_TYPES,
    BiasStrength,
    BiasType,
    GoalType,
)

log = logging.getLogger(__name__)

NEUTRAL_RAW = 50.0
NEUTRAL_CONFIDENCE = 0.0
NEUTRAL_ESG = 50.0


class DimensionScore(BaseModel):
    """A 0–100 score with the assessor's 0–1 confidence in it.

    Attributes:
        raw: Score on the 0–100 scale (clamped).
        confidence: Confidence in ``raw`` on the 0–1 scale (clamped).
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    raw: float = NEUTRAL_RAW
    confidence: float = NEUTRAL_CONFIDENCE

    @field_validator("raw")
    @classmethod
    def clamp_raw(cls, v: float) -> float:
        return _clamp(v, 0.0, 100.0)

    @field_validator("confidence")
    @classmethod
    def clamp_confidence(cls, v: float) -> float:
        return _clamp(v, 0.0, 1.0)


class EsgScores(BaseModel):
    """User concern for each ESG dimension, 0–100 each."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    environmental: float = NEUTRAL_ESG
    social: float = NEUTRAL_ESG
    governance: float = NEUTRAL_ESG

    @field_validator("environmental", "social", "governance")
    @classmethod
    def clamp_dimension(cls, v: float) -> float:
        return _clamp(v, 0.0, 100.0)


class EsgUpdate(BaseModel):
    """Partial ESG update; ``None`` means "not mentioned this turn".

    ``0`` is a legitimate value and is kept as such.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    environmental: Optional[float] = None
    social: Optional[float] = None
    governance: Optional[float] = None

    @field_validator("environmental", "social", "governance")
    @classmethod
    def clamp_dimension(cls, v: Optional[float]) -> Optional[float]:
        if v is None:
            return None
        return _clamp(v, 0.0, 100.0)


class Bias(BaseModel):
    """A detected behavioral bias.

    Attributes:
        type: One of the ``BiasType`` values.
        strength: ``low``, ``medium`` or ``high``.
        evidence: Short quote or paraphrase supporting the detection.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    type: BiasType
    strength: BiasStrength
    evidence: str = ""

    @field_validator("evidence", mode="before")
    @classmethod
    def coerce_evidence(cls, v: Any) -> str:
        return "" if v is None else str(v)


class ScoreState(BaseModel):
    """Complete cumulative assessment scores for one session.

    Construct with no arguments to get the neutral starting state.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        alias_generator=to_camel,
        populate_by_name=True,
    )

    risk: DimensionScore = Field(default_factory=DimensionScore)
    time_horizon: DimensionScore = Field(default_factory=DimensionScore)
    goal_type: GoalType = GoalType.GROWTH
    esg: EsgScores = Field(default_factory=EsgScores)
    sdg_priorities: list[int] = Field(default_factory=list)
    biases: list[Bias] = Field(default_factory=list)

    @field_validator("sdg_priorities", mode="before")
    @classmethod
    def clean_sdg_priorities(cls, v: Any) -> list[int]:
        if v is None:
            return []
        if not _is_sequence(v, "sdgPriorities"):
            return []
        return _clean_sdg_ids(v)


class ScoreUpdate(BaseModel):
    """Partial score update for a single conversation turn.

    A field left as ``None`` was not touched by this turn.  ``biases``, when
    present, is the full cumulative list, not a delta.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        alias_generator=to_camel,
        populate_by_name=True,
    )

    risk: Optional[DimensionScore] = None
    time_horizon: Optional[DimensionScore] = None
    goal_type: Optional[GoalType] = None
    esg: Optional[EsgUpdate] = None
    sdg_priorities: Optional[list[int]] = None
    biases: Optional[list[Bias]] = None

    @field_validator("goal_type", mode="before")
    @classmethod
    def drop_unknown_goal_type(cls, v: Any) -> Any:
        if v is None or isinstance(v, GoalType):
            return v
        if str(v) not in VALID_GOAL_TYPES:
            log.warning("Ignoring unrecognized goalType %r in score update.", v)
            return None
        return v

    @field_validator("sdg_priorities", mode="before")
    @classmethod
    def clean_sdg_priorities(cls, v: Any) -> Optional[list[int]]:
        if v is None:
            return None
        if not _is_sequence(v, "sdgPriorities"):
            return None
        return _clean_sdg_ids(v)

    @field_validator("biases", mode="before")
    @classmethod
    def drop_malformed_biases(cls, v: Any) -> Optional[list[Any]]:
        if v is None:
            return None
        if not _is_sequence(v, "biases"):
            return None
        kept: list[Any] = []
        for i, entry in enumerate(v):
            if isinstance(entry, Bias):
                kept.append(entry)
                continue
            if (
                not isinstance(entry, dict)
                or entry.get("type") not in VALID_BIAS_TYPES
                or entry.get("strength") not in VALID_BIAS_STRENGTHS
            ):
                log.warning("Dropping malformed bias entry at index %d: %r", i, entry)
                continue
            kept.append(entry)
        return kept


# ── Helpers ───────────────────────────────────────────────────────────────────

def _is_sequence(value: Any, field: str) -> bool:
    """True for a list or tuple; anything else is logged and treated as absent."""
    if isinstance(value, (list, tuple)):
        return True
    log.warning("Ignoring %s: expected a list, got %s %r.", field, type(value).__name__, value)
    return False


def _clean_sdg_ids(values: Any) -> list[int]:
    """Coerce to ints in 1..17, drop the rest, de-duplicate keeping order."""
    cleaned: list[int] = []
    for raw in values:
        try:
            sdg = int(raw)
        except (TypeError, ValueError):
            log.warning("Dropping non-numeric SDG id %r.", raw)
            continue
        if not SDG_MIN <= sdg <= SDG_MAX:
            log.warning("Dropping out-of-range SDG id %d.", sdg)
            continue
        if sdg not in cleaned:
            cleaned.append(sdg)
    return cleaned


def _clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))
