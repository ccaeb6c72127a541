"""
Track matching: scores one investment track against a user's assessment.

Score formula (weighted sum, range 0–100)
-----------------------------------------
    total = (
        risk_match   * 0.30   # risk appetite vs track risk level
        + time_match * 0.20   # time horizon vs track horizon
        + esg_match  * 0.30   # ESG concern x track ESG emphasis
        + sdg_match  * 0.20   # SDG priority overlap
    )

Component explanations
----------------------
risk_match (0–100):
    100 − |track.risk_level − risk.raw|.  Both operands are 0–100.

time_match (0–100):
    100 − |track.time_horizon − time_horizon.raw|.

esg_match:
    User weights w_d = user_d / (E + S + G), falling back to
    (0.33, 0.33, 0.34) when the user's ESG sum is 0.  Then

        esg_match = Σ_d  w_d * (user_d * track_d) / 100

    This is NOT a normalised similarity: it grows multiplicatively with both
    the user's concern and the track's emphasis, so a user who cares a lot
    about one dimension gets a large contribution from tracks strong on it.
    Rankings depend on this exact shape; do not swap in cosine similarity.

sdg_match (0–100):
    50 (neutral) when the user has no SDG priorities.  Otherwise
    overlap / min(|user|, |track|) * 100, or 0 when the track lists no SDGs.

Reason generation
-----------------
Candidate phrases in fixed priority order; the first two are joined:
    1. risk_match > 80 → risk-band phrase
    2. time_match > 80 → time-band phrase
    3. user's dominant ESG dimension == track's dominant dimension
       (ties broken E > S > G on both sides) → dimension phrase
    4. sdg_match > 60 and a shared SDG exists → SDG phrase
No candidates → generic "strong investment potential" phrase.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from sustain_advisor.models.scores import EsgScores, ScoreState
from sustain_advisor.models.track import EsgProfile, InvestmentTrack
from sustain_advisor.recommendations.phrases import label, phrase
from sustain_advisor.taxonomy.assessment_taxonomy import EsgDimension, Language

RISK_WEIGHT = 0.30
TIME_WEIGHT = 0.20
ESG_WEIGHT  = 0.30
SDG_WEIGHT  = 0.20

_FALLBACK_ESG_WEIGHTS: tuple[float, float, float] = (0.33, 0.33, 0.34)
_NEUTRAL_SDG_MATCH = 50.0

_REASON_THRESHOLD     = 80.0
_SDG_REASON_THRESHOLD = 60.0
_MAX_REASONS          = 2


@dataclass
class MatchComponents:
    """All components of a track match score (unrounded).

    Attributes:
        risk_match: 0–100, closeness of risk appetite and track risk level.
        time_match: 0–100, closeness of time horizons.
        esg_match:  ESG alignment (see module docstring for the formula).
        sdg_match:  0–100, SDG priority overlap; 50 when the user has none.
    """

    risk_match: float
    time_match: float
    esg_match:  float
    sdg_match:  float

    @property
    def total(self) -> float:
        """Weighted combined score, unrounded."""
        return (
            self.risk_match   * RISK_WEIGHT
            + self.time_match * TIME_WEIGHT
            + self.esg_match  * ESG_WEIGHT
            + self.sdg_match  * SDG_WEIGHT
        )


def compute_match(scores: ScoreState, track: InvestmentTrack) -> MatchComponents:
    """Compute all match components of ``track`` for the given scores."""
    return MatchComponents(
        risk_match=100.0 - abs(track.risk_level - scores.risk.raw),
        time_match=100.0 - abs(track.time_horizon - scores.time_horizon.raw),
        esg_match=esg_alignment(scores.esg, track.esg_profile),
        sdg_match=sdg_overlap(scores.sdg_priorities, track.sdgs),
    )


def esg_alignment(user: EsgScores, track: EsgProfile) -> float:
    """Weighted ESG alignment; weights are the user's own ESG shares."""
    total = user.environmental + user.social + user.governance
    if total > 0:
        w_e = user.environmental / total
        w_s = user.social / total
        w_g = user.governance / total
    else:
        w_e, w_s, w_g = _FALLBACK_ESG_WEIGHTS

    return (
        w_e * (user.environmental * track.E) / 100.0
        + w_s * (user.social * track.S) / 100.0
        + w_g * (user.governance * track.G) / 100.0
    )


def sdg_overlap(user_sdgs: Sequence[int], track_sdgs: Sequence[int]) -> float:
    """Share of the smaller SDG set covered by the intersection, 0–100."""
    if not user_sdgs:
        return _NEUTRAL_SDG_MATCH

    overlap = len(set(user_sdgs) & set(track_sdgs))
    max_possible = min(len(set(user_sdgs)), len(set(track_sdgs)))
    if max_possible == 0:
        return 0.0
    return overlap / max_possible * 100.0


def dominant_esg(environmental: float, social: float, governance: float) -> EsgDimension:
    """Return the largest ESG dimension; ties go to E, then S, then G."""
    dimension, _ = max(
        (
            (EsgDimension.ENVIRONMENTAL, environmental),
            (EsgDimension.SOCIAL,        social),
            (EsgDimension.GOVERNANCE,    governance),
        ),
        key=lambda pair: pair[1],
    )
    return dimension


def risk_band(raw: float) -> str:
    """Risk band key: aggressive / balanced / conservative_leaning / conservative."""
    if raw > 75:
        return "aggressive"
    if raw > 50:
        return "balanced"
    if raw > 25:
        return "conservative_leaning"
    return "conservative"


def time_band(raw: float) -> str:
    """Time-horizon band key: long / medium / short."""
    if raw > 67:
        return "long"
    if raw > 34:
        return "medium"
    return "short"


def build_reason(
    scores:     ScoreState,
    track:      InvestmentTrack,
    components: MatchComponents,
    language:   Language = Language.EN,
) -> str:
    """Assemble the short justification shown next to a recommended track.

    Returns:
        At most two reason phrases joined by the language's separator, or the
        generic fallback phrase when no candidate applies.  Never empty.
    """
    reasons: list[str] = []

    if components.risk_match > _REASON_THRESHOLD:
        band = label(language, "risk_band", risk_band(scores.risk.raw))
        reasons.append(phrase(language, "reason.risk", band=band))

    if components.time_match > _REASON_THRESHOLD:
        band = label(language, "time_band", time_band(scores.time_horizon.raw))
        reasons.append(phrase(language, "reason.time", band=band))

    user_dim = dominant_esg(
        scores.esg.environmental, scores.esg.social, scores.esg.governance
    )
    track_dim = dominant_esg(
        track.esg_profile.E, track.esg_profile.S, track.esg_profile.G
    )
    if user_dim == track_dim:
        dimension = label(language, "esg_dimension", user_dim.value)
        reasons.append(phrase(language, "reason.esg", dimension=dimension))

    if components.sdg_match > _SDG_REASON_THRESHOLD and scores.sdg_priorities:
        if set(scores.sdg_priorities) & set(track.sdgs):
            reasons.append(phrase(language, "reason.sdg"))

    if not reasons:
        return phrase(language, "reason.fallback")
    return phrase(language, "separator").join(reasons[:_MAX_REASONS])
