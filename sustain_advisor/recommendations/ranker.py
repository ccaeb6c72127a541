"""
Track ranker: scores the whole catalog and returns the top-N matches.

Usage flow
----------
1. score_tracks(scores, catalog)
   -> list[TrackRecommendation]  (one per track, catalog order)

2. recommend_tracks(scores, catalog, top_n=3)
   -> list[TrackRecommendation]  (best first, at most top_n)

Ordering uses the UNROUNDED combined score with a stable sort, so two tracks
with an identical score keep their catalog order (first-listed wins).  The
rounded ``match_score`` is for display only; sorting on it would create
artificial ties between e.g. 87.4 and 86.6.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Sequence

from sustain_advisor.models.scores import ScoreState
from sustain_advisor.models.track import InvestmentTrack
from sustain_advisor.recommendations.matcher import (
    MatchComponents,
    build_reason,
    compute_match,
)
from sustain_advisor.recommendations.phrases import resolve_language
from sustain_advisor.taxonomy.assessment_taxonomy import Language

logger = logging.getLogger(__name__)

DEFAULT_TOP_N = 3


@dataclass(frozen=True)
class TrackRecommendation:
    """A catalog track coupled with its match result.

    Attributes:
        track:       The catalog entry.
        match_score: Combined score rounded half-up to an integer (display).
        score:       Combined score, unrounded (ordering).
        components:  Per-factor breakdown.
        reason:      Generated justification text.
    """

    track:       InvestmentTrack
    match_score: int
    score:       float
    components:  MatchComponents
    reason:      str


def score_tracks(
    scores:   ScoreState,
    catalog:  Sequence[InvestmentTrack],
    language: Language | str = Language.EN,
) -> list[TrackRecommendation]:
    """Score every catalog track; result is in catalog order."""
    language = resolve_language(language)
    scored: list[TrackRecommendation] = []
    for track in catalog:
        components = compute_match(scores, track)
        total = components.total
        scored.append(
            TrackRecommendation(
                track=track,
                match_score=_round_half_up(total),
                score=total,
                components=components,
                reason=build_reason(scores, track, components, language),
            )
        )
    return scored


def recommend_tracks(
    scores:   ScoreState,
    catalog:  Sequence[InvestmentTrack],
    top_n:    int = DEFAULT_TOP_N,
    language: Language | str = Language.EN,
) -> list[TrackRecommendation]:
    """Return the ``top_n`` best-matching tracks, best first.

    Args:
        scores:   Final cumulative assessment scores.
        catalog:  Static track catalog (read-only).
        top_n:    Maximum number of results; ``<= 0`` yields an empty list.
        language: Language for the reason text; unsupported codes fall back
            to English.

    Returns:
        At most ``min(top_n, len(catalog))`` recommendations.  An empty
        catalog yields an empty list.
    """
    if top_n <= 0 or not catalog:
        return []

    scored = score_tracks(scores, catalog, resolve_language(language))
    # sorted() is stable: equal scores keep catalog order.
    ranked = sorted(scored, key=lambda rec: -rec.score)
    top = ranked[:top_n]

    logger.debug(
        "Ranked %d tracks; top=%s",
        len(scored),
        [(rec.track.track_id, round(rec.score, 2)) for rec in top],
    )
    return top


# ── Helper ────────────────────────────────────────────────────────────────────

def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))
