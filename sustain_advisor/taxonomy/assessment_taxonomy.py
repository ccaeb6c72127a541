"""
Assessment taxonomy for the conversational investor profile.

Five small vocabularies describe every assessment:
  - ``AssessmentStage`` — which topic the conversation is probing.
  - ``GoalType``        — the user's primary investment objective.
  - ``BiasType``        — detected behavioral-finance tendency.
  - ``BiasStrength``    — how strongly that tendency shows.
  - ``EsgDimension``    — Environmental / Social / Governance.

``Language`` selects the phrase table used for reasons and summaries.

Usage example::

    from sustain_advisor.taxonomy.assessment_taxonomy import AssessmentStage

    stage = AssessmentStage.RISK

This module has NO imports from any other ``sustain_advisor`` package.
"""

from enum import StrEnum


class AssessmentStage(StrEnum):
    """Named phase of the conversational assessment (linear order)."""

    OPENING = "opening"
    """Introduction and background questions."""

    RISK = "risk"
    """Loss tolerance, volatility acceptance, experience."""

    GOALS = "goals"
    """Investment objective and time horizon."""

    BEHAVIOR = "behavior"
    """Behavioral bias probing."""

    VALUES = "values"
    """ESG concerns and SDG priorities."""

    CONFIRMATION = "confirmation"
    """Summary read-back; user confirms or adds information."""

    COMPLETE = "complete"
    """Terminal stage; no further turns are accepted."""


class GoalType(StrEnum):
    """Primary investment objective."""

    GROWTH = "growth"
    INCOME = "income"
    PRESERVATION = "preservation"
    IMPACT = "impact"


class BiasType(StrEnum):
    """Behavioral-finance tendencies the assessment can detect."""

    LOSS_AVERSION = "loss_aversion"
    OVERCONFIDENCE = "overconfidence"
    HERDING = "herding"
    ANCHORING = "anchoring"
    CONFIRMATION = "confirmation"
    RECENCY = "recency"


class BiasStrength(StrEnum):
    """Strength label attached to a detected bias."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class EsgDimension(StrEnum):
    """Sustainability dimension.  Declaration order is the tie-break priority."""

    ENVIRONMENTAL = "E"
    SOCIAL = "S"
    GOVERNANCE = "G"


class Language(StrEnum):
    """Supported output languages for generated text."""

    EN = "en"
    ZH = "zh"


class ChatRole(StrEnum):
    """Speaker of one conversation history entry."""

    USER = "user"
    ASSISTANT = "assistant"


STAGE_ORDER: tuple[AssessmentStage, ...] = tuple(AssessmentStage)

VALID_STAGES: frozenset[str] = frozenset(s.value for s in AssessmentStage)
VALID_GOAL_TYPES: frozenset[str] = frozenset(g.value for g in GoalType)
VALID_BIAS_TYPES: frozenset[str] = frozenset(b.value for b in BiasType)
VALID_BIAS_STRENGTHS: frozenset[str] = frozenset(s.value for s in BiasStrength)

# SDG ids run 1..17 (UN Sustainable Development Goals).
SDG_MIN = 1
SDG_MAX = 17
