"""
Shared pytest fixtures for the Sustainable Investment Profiler test suite.

Provides:
  - ``track_factory``: builds an ``InvestmentTrack`` with overridable fields.
  - ``sample_catalog``: a small three-track catalog (E-, S- and G-led tracks).
  - ``sample_scores``: a complete ``ScoreState`` for an environment-focused,
    long-horizon, balanced-risk user.
  - ``catalog_file``: ``sample_catalog`` written to a temporary JSON file.
  - ``service``: an ``AssessmentService`` over ``sample_catalog``.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Callable

import pytest

from sustain_advisor.assessment.service import AssessmentService
from sustain_advisor.assessment.store import SessionStore
from sustain_advisor.models.scores import (
    Bias,
    DimensionScore,
    EsgScores,
    ScoreState,
)
from sustain_advisor.models.track import EsgProfile, InvestmentTrack
from sustain_advisor.taxonomy.assessment_taxonomy import BiasStrength, BiasType, GoalType


# ── Track fixtures ────────────────────────────────────────────────────────────

@pytest.fixture
def track_factory() -> Callable[..., InvestmentTrack]:
    """Return a builder for ``InvestmentTrack`` with sensible defaults."""

    def _make(
        track_id: str = "track_a",
        risk_level: float = 50.0,
        time_horizon: float = 50.0,
        esg: tuple[float, float, float] = (50.0, 50.0, 50.0),
        sdgs: tuple[int, ...] = (),
        examples: tuple[str, ...] = (),
    ) -> InvestmentTrack:
        e, s, g = esg
        return InvestmentTrack(
            track_id=track_id,
            name=f"{track_id} (zh)",
            name_en=track_id.replace("_", " ").title(),
            description=f"Test track {track_id}.",
            risk_level=risk_level,
            time_horizon=time_horizon,
            esg_profile=EsgProfile(E=e, S=s, G=g),
            sdgs=sdgs,
            examples=examples,
        )

    return _make


@pytest.fixture
def sample_catalog(track_factory) -> tuple[InvestmentTrack, ...]:
    """Three tracks, each led by a different ESG dimension."""
    return (
        track_factory(
            "clean_energy", risk_level=70, time_horizon=80,
            esg=(95, 50, 60), sdgs=(7, 13), examples=("Solar ETF",),
        ),
        track_factory(
            "social_housing", risk_level=40, time_horizon=60,
            esg=(40, 90, 60), sdgs=(1, 11),
        ),
        track_factory(
            "governance_leaders", risk_level=30, time_horizon=40,
            esg=(50, 55, 95), sdgs=(16, 17),
        ),
    )


@pytest.fixture
def catalog_file(tmp_path: Path, sample_catalog) -> Path:
    """Write ``sample_catalog`` to a JSON file using wire (camelCase) keys."""
    path = tmp_path / "tracks.json"
    records = [t.model_dump(mode="json", by_alias=True) for t in sample_catalog]
    path.write_text(json.dumps(records), encoding="utf-8")
    return path


# ── Score fixtures ────────────────────────────────────────────────────────────

@pytest.fixture
def sample_scores() -> ScoreState:
    """Balanced-risk, long-horizon user who cares most about the environment."""
    return ScoreState(
        risk=DimensionScore(raw=65, confidence=0.8),
        time_horizon=DimensionScore(raw=75, confidence=0.6),
        goal_type=GoalType.IMPACT,
        esg=EsgScores(environmental=90, social=60, governance=40),
        sdg_priorities=[7, 13],
        biases=[
            Bias(
                type=BiasType.LOSS_AVERSION,
                strength=BiasStrength.HIGH,
                evidence="Would sell everything after a 10% drop.",
            ),
        ],
    )


# ── Service fixture ───────────────────────────────────────────────────────────

@pytest.fixture
def service(sample_catalog) -> AssessmentService:
    """An ``AssessmentService`` with a fresh store over ``sample_catalog``."""
    return AssessmentService(
        store=SessionStore(ttl_seconds=3600, max_sessions=100),
        catalog=sample_catalog,
        top_n=3,
    )
