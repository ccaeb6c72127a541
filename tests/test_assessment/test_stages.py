"""
Tests for sustain_advisor/assessment/stages.py.

What we test
------------
stage_progress():
  - Exact progress for each of the seven stage labels.
  - Unknown labels (including None and wrong case) map to 0 without raising.
  - Progress is non-decreasing along the stage order.

is_complete():
  - True only for "complete".

stage_status() / initial_status():
  - Unknown labels are echoed verbatim with progress 0.
  - A new session reports opening / 0 / not complete.
"""

from __future__ import annotations

import pytest

from sustain_advisor.assessment.stages import (
    STAGE_PROGRESS,
    StageStatus,
    initial_status,
    is_complete,
    parse_stage,
    stage_progress,
    stage_status,
)
from sustain_advisor.taxonomy.assessment_taxonomy import STAGE_ORDER, AssessmentStage


class TestStageProgress:
    @pytest.mark.parametrize(
        "label, expected",
        [
            ("opening", 10),
            ("risk", 30),
            ("goals", 50),
            ("behavior", 70),
            ("values", 90),
            ("confirmation", 95),
            ("complete", 100),
        ],
    )
    def test_known_labels(self, label, expected):
        assert stage_progress(label) == expected

    @pytest.mark.parametrize("label", ["foo", "", "Risk", "COMPLETE", None, 3])
    def test_unknown_labels_are_zero(self, label):
        assert stage_progress(label) == 0

    def test_enum_member_accepted(self):
        assert stage_progress(AssessmentStage.VALUES) == 90

    def test_progress_non_decreasing_in_stage_order(self):
        values = [STAGE_PROGRESS[s] for s in STAGE_ORDER]
        assert values == sorted(values)

    def test_every_stage_has_progress(self):
        assert set(STAGE_PROGRESS) == set(AssessmentStage)


class TestIsComplete:
    def test_complete_is_terminal(self):
        assert is_complete("complete") is True

    @pytest.mark.parametrize("label", ["opening", "confirmation", "foo", None])
    def test_other_labels_not_terminal(self, label):
        assert is_complete(label) is False


class TestParseStage:
    def test_known(self):
        assert parse_stage("goals") == AssessmentStage.GOALS

    def test_unknown(self):
        assert parse_stage("summary") is None


class TestStageStatus:
    def test_complete_status(self):
        assert stage_status("complete") == StageStatus("complete", 100, True)

    def test_unknown_label_echoed(self):
        status = stage_status("foo")
        assert status.stage == "foo"
        assert status.progress == 0
        assert status.is_complete is False

    def test_initial_status(self):
        status = initial_status()
        assert status.stage == "opening"
        assert status.progress == 0
        assert status.is_complete is False
