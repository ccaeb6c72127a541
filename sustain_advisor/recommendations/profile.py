"""
Result payload builder: wraps ranked recommendations into ``AssessmentResult``.

Investor type follows the same risk bands as the reason text
(>75 aggressive, >50 balanced, >25 conservative-leaning, else conservative);
the summary adds the time-horizon band.

Strengths and watch points are deterministic:
  - strength per dominant ESG dimension scoring >= 70
  - strength when SDG priorities are set
  - strength for a long horizon (time band "long")
  - strength when risk confidence >= 0.7
  - watch point per bias of medium or high strength
  - watch point for an aggressive risk band paired with a short horizon
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from sustain_advisor.models.result import (
    AssessmentResult,
    BehavioralInsights,
    InvestorProfile,
    RankedTrack,
    SdgAlignment,
)
from sustain_advisor.models.scores import ScoreState
from sustain_advisor.recommendations.matcher import dominant_esg, risk_band, time_band
from sustain_advisor.recommendations.phrases import label, phrase, resolve_language
from sustain_advisor.recommendations.ranker import TrackRecommendation
from sustain_advisor.taxonomy.assessment_taxonomy import (
    BiasStrength,
    EsgDimension,
    Language,
)
from sustain_advisor.utils.time_utils import utcnow

_ESG_STRENGTH_THRESHOLD = 70.0
_CONFIDENCE_STRENGTH_THRESHOLD = 0.7
_WATCHED_STRENGTHS = frozenset({BiasStrength.MEDIUM, BiasStrength.HIGH})


def build_investor_profile(scores: ScoreState, language: Language) -> InvestorProfile:
    """Classify the investor and list strengths / watch points."""
    r_band = risk_band(scores.risk.raw)
    t_band = time_band(scores.time_horizon.raw)
    investor_type = label(language, "investor_type", r_band)

    summary = phrase(
        language,
        "profile.summary",
        investor_type=investor_type,
        horizon=label(language, "time_band", t_band),
    )

    strengths: list[str] = []
    esg = scores.esg
    dim = dominant_esg(esg.environmental, esg.social, esg.governance)
    dim_value = {
        EsgDimension.ENVIRONMENTAL: esg.environmental,
        EsgDimension.SOCIAL:        esg.social,
        EsgDimension.GOVERNANCE:    esg.governance,
    }[dim]
    if dim_value >= _ESG_STRENGTH_THRESHOLD:
        strengths.append(
            phrase(language, "strength.esg", dimension=label(language, "esg_dimension", dim.value))
        )
    if scores.sdg_priorities:
        sdgs = ", ".join(str(s) for s in scores.sdg_priorities)
        strengths.append(phrase(language, "strength.sdg", sdgs=sdgs))
    if t_band == "long":
        strengths.append(phrase(language, "strength.horizon"))
    if scores.risk.confidence >= _CONFIDENCE_STRENGTH_THRESHOLD:
        strengths.append(phrase(language, "strength.confidence"))

    watch_points: list[str] = []
    for bias in scores.biases:
        if bias.strength in _WATCHED_STRENGTHS:
            watch_points.append(
                phrase(
                    language,
                    "watch.bias",
                    bias=label(language, "bias", bias.type.value),
                    strength=label(language, "bias_strength", bias.strength.value),
                )
            )
    if r_band == "aggressive" and t_band == "short":
        watch_points.append(phrase(language, "watch.mismatch"))

    return InvestorProfile(
        investor_type=investor_type,
        summary=summary,
        strengths=strengths,
        watch_points=watch_points,
    )


def build_behavioral_insights(scores: ScoreState, language: Language) -> BehavioralInsights:
    """Bias types in detection order, plus one suggestion per distinct type."""
    main_biases = [b.type for b in scores.biases]
    suggestions = [
        label(language, "bias_suggestion", bias_type.value)
        for bias_type in dict.fromkeys(main_biases)
    ]
    return BehavioralInsights(main_biases=main_biases, suggestions=suggestions)


def build_sdg_alignment(scores: ScoreState, language: Language) -> SdgAlignment:
    return SdgAlignment(
        primary_sdgs=list(scores.sdg_priorities),
        explanation=phrase(language, "sdg.explanation"),
    )


def build_ranked_tracks(recommendations: Sequence[TrackRecommendation]) -> list[RankedTrack]:
    """Convert ranker output into display rows; rank is 1-based."""
    return [
        RankedTrack(
            rank=rank,
            track_id=rec.track.track_id,
            track_name=rec.track.name,
            track_name_en=rec.track.name_en,
            description=rec.track.description,
            match_score=rec.match_score,
            reason=rec.reason,
            sdgs=list(rec.track.sdgs),
            examples=list(rec.track.examples),
        )
        for rank, rec in enumerate(recommendations, start=1)
    ]


def build_assessment_result(
    scores:          ScoreState,
    recommendations: Sequence[TrackRecommendation],
    language:        Language | str = Language.EN,
    generated_at:    Optional[datetime] = None,
) -> AssessmentResult:
    """Assemble the full result payload.

    Args:
        scores:          Final cumulative scores.
        recommendations: Output of ``recommend_tracks()``, best first.
        language:        Language for all generated text.
        generated_at:    Timestamp to stamp on the payload; defaults to now (UTC).

    Returns:
        Frozen ``AssessmentResult``.
    """
    language = resolve_language(language)
    return AssessmentResult(
        investor_profile=build_investor_profile(scores, language),
        scores=scores,
        recommended_tracks=build_ranked_tracks(recommendations),
        behavioral_insights=build_behavioral_insights(scores, language),
        sdg_alignment=build_sdg_alignment(scores, language),
        generated_at=generated_at or utcnow(),
    )
