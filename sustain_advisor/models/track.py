"""
Investment track catalog model.

An ``InvestmentTrack`` is one predefined sustainable investment strategy
(e.g. renewable energy, green bonds).  The catalog is loaded once at process
start and never mutated, so the model is frozen.

Unlike the per-turn score models, catalog validation is strict: a track with
an out-of-range risk level or an unknown SDG id is a data error in a file we
ship, and it should fail loudly at load time.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from sustain_advisor.taxonomy.assessment_taxonomy import SDG_MAX, SDG_MIN


class EsgProfile(BaseModel):
    """How strongly a track expresses each ESG dimension (0–100)."""

    model_config = ConfigDict(frozen=True)

    E: float
    S: float
    G: float

    @field_validator("E", "S", "G")
    @classmethod
    def validate_range(cls, v: float) -> float:
        if not 0.0 <= v <= 100.0:
            raise ValueError(f"ESG profile value must be in [0, 100], got {v}.")
        return v


class InvestmentTrack(BaseModel):
    """One entry of the static track catalog.

    Attributes:
        track_id: Stable slug, e.g. ``"renewable_energy"`` (``id`` on the wire).
        name: Display name in the primary (Chinese) locale.
        name_en: English display name.
        description: One-paragraph description of the track.
        risk_level: 0 (very defensive) to 100 (very aggressive).
        time_horizon: 0 (short-term) to 100 (long-term).
        esg_profile: Per-dimension ESG emphasis.
        sdgs: SDG ids the track contributes to.
        examples: Example instruments, in display order.
    """

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    track_id: str = Field(alias="id")
    name: str
    name_en: str
    description: str = ""
    risk_level: float
    time_horizon: float
    esg_profile: EsgProfile
    sdgs: tuple[int, ...] = ()
    examples: tuple[str, ...] = ()

    @field_validator("track_id")
    @classmethod
    def validate_track_id(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("track id must not be empty.")
        return v.strip()

    @field_validator("risk_level", "time_horizon")
    @classmethod
    def validate_range(cls, v: float) -> float:
        if not 0.0 <= v <= 100.0:
            raise ValueError(f"value must be in [0, 100], got {v}.")
        return v

    @field_validator("sdgs")
    @classmethod
    def validate_sdgs(cls, v: tuple[int, ...]) -> tuple[int, ...]:
        for sdg in v:
            if not SDG_MIN <= sdg <= SDG_MAX:
                raise ValueError(f"SDG id must be in [{SDG_MIN}, {SDG_MAX}], got {sdg}.")
        return tuple(dict.fromkeys(v))
