"""
Score accumulator: merges one turn's partial update into the running scores.

Merge policy (per field)
------------------------
    risk, time_horizon : update replaces current wholesale (no averaging);
                         else current; else {raw: 50, confidence: 0}.
    goal_type          : update, else current, else "growth".
    esg.*              : each dimension independently; presence is checked
                         with ``is not None`` so an explicit 0 is kept;
                         else current; else 50.
    sdg_priorities     : update replaces current wholesale (no union);
                         else current; else [].
    biases             : update REPLACES current wholesale (no append).
                         Each turn reports the full cumulative bias list,
                         so appending would double-count.  Else current;
                         else [].

``merge_scores`` is total: either argument may be ``None``, a partial or
complete score model, or a plain mapping in the wire shape (validated through
``ScoreUpdate`` first, so camelCase keys and the usual leniency apply), and
the result is always a complete ``ScoreState`` whose numeric fields are in
range.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional, Union

from sustain_advisor.models.scores import (
    NEUTRAL_ESG,
    DimensionScore,
    EsgScores,
    ScoreState,
    ScoreUpdate,
)
from sustain_advisor.taxonomy.assessment_taxonomy import GoalType

PartialScores = Union[ScoreState, ScoreUpdate, Mapping[str, Any]]


def default_scores() -> ScoreState:
    """Return the neutral starting scores for a new session."""
    return ScoreState()


def merge_scores(
    current: Optional[PartialScores],
    update: Optional[PartialScores],
) -> ScoreState:
    """Merge ``update`` over ``current`` and return complete scores.

    Args:
        current: Scores accumulated so far (model or mapping), or ``None``.
        update:  This turn's partial update, or ``None`` for a no-op turn.

    Returns:
        A new ``ScoreState``; neither input is modified.
    """
    current = _as_model(current)
    update = _as_model(update)
    cur_esg = _attr(current, "esg")
    upd_esg = _attr(update, "esg")

    return ScoreState(
        risk=_first(_attr(update, "risk"), _attr(current, "risk"), DimensionScore()),
        time_horizon=_first(
            _attr(update, "time_horizon"), _attr(current, "time_horizon"), DimensionScore()
        ),
        goal_type=_first(_attr(update, "goal_type"), _attr(current, "goal_type"), GoalType.GROWTH),
        esg=EsgScores(
            environmental=_first(
                _attr(upd_esg, "environmental"), _attr(cur_esg, "environmental"), NEUTRAL_ESG
            ),
            social=_first(_attr(upd_esg, "social"), _attr(cur_esg, "social"), NEUTRAL_ESG),
            governance=_first(
                _attr(upd_esg, "governance"), _attr(cur_esg, "governance"), NEUTRAL_ESG
            ),
        ),
        sdg_priorities=list(
            _first(_attr(update, "sdg_priorities"), _attr(current, "sdg_priorities"), [])
        ),
        biases=list(_first(_attr(update, "biases"), _attr(current, "biases"), [])),
    )


# ── Helpers ───────────────────────────────────────────────────────────────────

def _as_model(scores: Optional[PartialScores]) -> Union[ScoreState, ScoreUpdate, None]:
    if isinstance(scores, Mapping):
        return ScoreUpdate.model_validate(scores)
    return scores


def _attr(obj: object, name: str):
    return None if obj is None else getattr(obj, name, None)


def _first(*candidates):
    """Return the first candidate that is not ``None``."""
    for value in candidates:
        if value is not None:
            return value
    return None
