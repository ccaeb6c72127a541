"""
Tests for sustain_advisor/recommendations/matcher.py.

What we test
------------
compute_match() / MatchComponents.total:
  - Worked example: risk 80 / horizon 20 / ESG 90-10-10 / SDG [13] against a
    track at 85 / 25 / E90-S5-G5 / SDG [13, 7].
  - Weights sum to 1.0.

esg_alignment():
  - Weights are the user's own ESG shares; all-zero ESG yields 0.
  - Not a normalised similarity: a stronger track emphasis scores higher.

sdg_overlap():
  - 50 when the user has no priorities, whatever the track lists.
  - 0 when the track lists no SDGs.
  - Overlap measured against the smaller set.

dominant_esg() / risk_band() / time_band():
  - Tie-break E > S > G; band thresholds are strict ">".

build_reason():
  - At most two phrases, in priority order, joined by the language separator.
  - Fallback phrase when nothing applies; never empty.
"""

from __future__ import annotations

import pytest

from sustain_advisor.models.scores import DimensionScore, EsgScores, ScoreState
from sustain_advisor.models.track import EsgProfile
from sustain_advisor.recommendations.matcher import (
    ESG_WEIGHT,
    RISK_WEIGHT,
    SDG_WEIGHT,
    TIME_WEIGHT,
    MatchComponents,
    build_reason,
    compute_match,
    dominant_esg,
    esg_alignment,
    risk_band,
    sdg_overlap,
    time_band,
)
from sustain_advisor.taxonomy.assessment_taxonomy import EsgDimension, Language


def _scores(
    risk: float = 50,
    horizon: float = 50,
    esg: tuple[float, float, float] = (50, 50, 50),
    sdgs: list[int] | None = None,
) -> ScoreState:
    e, s, g = esg
    return ScoreState(
        risk=DimensionScore(raw=risk, confidence=0.5),
        time_horizon=DimensionScore(raw=horizon, confidence=0.5),
        esg=EsgScores(environmental=e, social=s, governance=g),
        sdg_priorities=sdgs or [],
    )


# ── Worked example ────────────────────────────────────────────────────────────

class TestWorkedExample:
    @pytest.fixture
    def components(self, track_factory) -> MatchComponents:
        scores = _scores(risk=80, horizon=20, esg=(90, 10, 10), sdgs=[13])
        track = track_factory(risk_level=85, time_horizon=25, esg=(90, 5, 5), sdgs=(13, 7))
        return compute_match(scores, track)

    def test_risk_and_time_match(self, components):
        assert components.risk_match == pytest.approx(95.0)
        assert components.time_match == pytest.approx(95.0)

    def test_esg_match(self, components):
        # (90/110)*(90*90)/100 + 2 * (10/110)*(10*5)/100 = 730/11
        assert components.esg_match == pytest.approx(730 / 11)

    def test_sdg_match(self, components):
        assert components.sdg_match == pytest.approx(100.0)

    def test_total(self, components):
        expected = 0.30 * 95 + 0.20 * 95 + 0.30 * (730 / 11) + 0.20 * 100
        assert components.total == pytest.approx(expected)
        assert components.total == pytest.approx(87.409, abs=1e-3)


class TestWeights:
    def test_weights_sum_to_one(self):
        assert RISK_WEIGHT + TIME_WEIGHT + ESG_WEIGHT + SDG_WEIGHT == pytest.approx(1.0)

    def test_total_of_perfect_components(self):
        comp = MatchComponents(100, 100, 100, 100)
        assert comp.total == pytest.approx(100.0)

    def test_identical_track_risk_time_full_marks(self, track_factory):
        comp = compute_match(_scores(risk=33, horizon=77), track_factory(risk_level=33, time_horizon=77))
        assert comp.risk_match == 100.0
        assert comp.time_match == 100.0


# ── esg_alignment ─────────────────────────────────────────────────────────────

class TestEsgAlignment:
    def test_all_zero_user_esg_is_zero(self):
        user = EsgScores(environmental=0, social=0, governance=0)
        assert esg_alignment(user, EsgProfile(E=100, S=100, G=100)) == 0.0

    def test_uniform_user(self):
        # Weights 1/3 each; each product term is 50*80/100 = 40
        user = EsgScores(environmental=50, social=50, governance=50)
        assert esg_alignment(user, EsgProfile(E=80, S=80, G=80)) == pytest.approx(40.0)

    def test_grows_with_track_emphasis(self):
        user = EsgScores(environmental=90, social=10, governance=10)
        weak = esg_alignment(user, EsgProfile(E=40, S=40, G=40))
        strong = esg_alignment(user, EsgProfile(E=95, S=40, G=40))
        assert strong > weak

    def test_single_dimension_user(self):
        user = EsgScores(environmental=0, social=100, governance=0)
        assert esg_alignment(user, EsgProfile(E=10, S=70, G=10)) == pytest.approx(70.0)


# ── sdg_overlap ───────────────────────────────────────────────────────────────

class TestSdgOverlap:
    @pytest.mark.parametrize("track_sdgs", [(), (7,), (1, 2, 3, 13)])
    def test_no_user_priorities_is_neutral(self, track_sdgs):
        assert sdg_overlap([], track_sdgs) == 50.0

    def test_track_without_sdgs(self):
        assert sdg_overlap([7, 13], ()) == 0.0

    def test_measured_against_smaller_set(self):
        assert sdg_overlap([7], (7, 13, 9)) == pytest.approx(100.0)
        assert sdg_overlap([7, 13, 9, 11], (7, 1)) == pytest.approx(50.0)

    def test_no_overlap(self):
        assert sdg_overlap([3, 4], (7, 13)) == 0.0


# ── dominant_esg / bands ──────────────────────────────────────────────────────

class TestDominantEsg:
    @pytest.mark.parametrize(
        "values, expected",
        [
            ((90, 10, 10), EsgDimension.ENVIRONMENTAL),
            ((10, 90, 10), EsgDimension.SOCIAL),
            ((10, 10, 90), EsgDimension.GOVERNANCE),
            ((60, 60, 60), EsgDimension.ENVIRONMENTAL),
            ((40, 70, 70), EsgDimension.SOCIAL),
            ((70, 40, 70), EsgDimension.ENVIRONMENTAL),
        ],
    )
    def test_dominant_with_tie_break(self, values, expected):
        assert dominant_esg(*values) == expected


class TestBands:
    @pytest.mark.parametrize(
        "raw, expected",
        [
            (100, "aggressive"),
            (76, "aggressive"),
            (75, "balanced"),
            (51, "balanced"),
            (50, "conservative_leaning"),
            (26, "conservative_leaning"),
            (25, "conservative"),
            (0, "conservative"),
        ],
    )
    def test_risk_band(self, raw, expected):
        assert risk_band(raw) == expected

    @pytest.mark.parametrize(
        "raw, expected",
        [(68, "long"), (67, "medium"), (35, "medium"), (34, "short"), (0, "short")],
    )
    def test_time_band(self, raw, expected):
        assert time_band(raw) == expected


# ── build_reason ──────────────────────────────────────────────────────────────

class TestBuildReason:
    def test_worked_example_keeps_first_two(self, track_factory):
        scores = _scores(risk=80, horizon=20, esg=(90, 10, 10), sdgs=[13])
        track = track_factory(risk_level=85, time_horizon=25, esg=(90, 5, 5), sdgs=(13, 7))
        reason = build_reason(scores, track, compute_match(scores, track))
        assert reason == (
            "Matches your aggressive risk appetite; Suits short-term investment planning"
        )

    def test_esg_and_sdg_when_risk_time_far(self, track_factory):
        scores = _scores(risk=10, horizon=10, esg=(20, 20, 90), sdgs=[16])
        track = track_factory(risk_level=90, time_horizon=90, esg=(30, 30, 80), sdgs=(16, 17))
        reason = build_reason(scores, track, compute_match(scores, track))
        assert reason == (
            "Closely aligned with the governance issues you care about; "
            "Contributes to your prioritized sustainability goals"
        )

    def test_fallback_when_nothing_applies(self, track_factory):
        scores = _scores(risk=10, horizon=10, esg=(90, 10, 10), sdgs=[3])
        track = track_factory(risk_level=90, time_horizon=90, esg=(10, 90, 10), sdgs=(7,))
        reason = build_reason(scores, track, compute_match(scores, track))
        assert reason == "Has strong investment potential"

    def test_no_sdg_phrase_without_user_priorities(self, track_factory):
        # sdg_match is the neutral 50 here, below the phrase threshold anyway
        scores = _scores(risk=10, horizon=10, esg=(90, 10, 10), sdgs=[])
        track = track_factory(risk_level=90, time_horizon=90, esg=(10, 90, 10), sdgs=(7,))
        reason = build_reason(scores, track, compute_match(scores, track))
        assert "sustainability goals" not in reason

    def test_chinese_separator(self, track_factory):
        scores = _scores(risk=80, horizon=20, esg=(90, 10, 10), sdgs=[13])
        track = track_factory(risk_level=85, time_horizon=25, esg=(90, 5, 5), sdgs=(13, 7))
        reason = build_reason(scores, track, compute_match(scores, track), Language.ZH)
        assert reason == "符合你的積極型風險偏好，適合短期投資規劃"

    def test_chinese_fallback(self, track_factory):
        scores = _scores(risk=10, horizon=10, esg=(90, 10, 10), sdgs=[3])
        track = track_factory(risk_level=90, time_horizon=90, esg=(10, 90, 10), sdgs=(7,))
        reason = build_reason(scores, track, compute_match(scores, track), Language.ZH)
        assert reason == "具有良好的投資潛力"
