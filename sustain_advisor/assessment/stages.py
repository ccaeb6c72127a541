"""
Session stage controller: maps stage labels to progress and completion.

Stages run linearly::

    opening → risk → goals → behavior → values → confirmation → complete

The controller does NOT choose the next stage.  That decision comes from the
upstream conversation step as a proposed label; this module only reports
where that label sits (progress percentage) and whether it is terminal.

Progress table
--------------
    opening       10
    risk          30
    goals         50
    behavior      70
    values        90
    confirmation  95
    complete     100
    <anything else> 0   (never raises)

A freshly created session reports ``opening`` with progress 0; the table
value of 10 applies once the conversation has actually been in ``opening``
for a turn.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from sustain_advisor.taxonomy.assessment_taxonomy import AssessmentStage

STAGE_PROGRESS: dict[AssessmentStage, int] = {
    AssessmentStage.OPENING:      10,
    AssessmentStage.RISK:         30,
    AssessmentStage.GOALS:        50,
    AssessmentStage.BEHAVIOR:     70,
    AssessmentStage.VALUES:       90,
    AssessmentStage.CONFIRMATION: 95,
    AssessmentStage.COMPLETE:    100,
}

TERMINAL_STAGE = AssessmentStage.COMPLETE


@dataclass(frozen=True)
class StageStatus:
    """The stage / progress / completion triple returned to the chat layer.

    Attributes:
        stage:       The proposed label as received (unrecognized labels kept
                     verbatim so the caller can log or echo them).
        progress:    0–100 progress percentage.
        is_complete: True only for the terminal ``complete`` stage.
    """

    stage:       str
    progress:    int
    is_complete: bool


def parse_stage(label: object) -> Optional[AssessmentStage]:
    """Return the ``AssessmentStage`` for ``label``, or ``None`` if unknown."""
    if isinstance(label, AssessmentStage):
        return label
    if not isinstance(label, str):
        return None
    try:
        return AssessmentStage(label)
    except ValueError:
        return None


def stage_progress(label: object) -> int:
    """Progress percentage for a stage label; 0 for anything unrecognized."""
    stage = parse_stage(label)
    if stage is None:
        return 0
    return STAGE_PROGRESS[stage]


def is_complete(label: object) -> bool:
    return parse_stage(label) == TERMINAL_STAGE


def stage_status(label: object) -> StageStatus:
    """Build the full ``StageStatus`` for a proposed stage label."""
    return StageStatus(
        stage=str(label),
        progress=stage_progress(label),
        is_complete=is_complete(label),
    )


def initial_status() -> StageStatus:
    """Status reported at session creation: ``opening`` with progress 0."""
    return StageStatus(stage=AssessmentStage.OPENING.value, progress=0, is_complete=False)
