"""
Application configuration management.

Load order (each layer overrides the previous):
  1. ``config/default.toml``      — committed static defaults
  2. ``config/local.toml``        — optional local overrides (gitignored)
  3. ``.env``                     — local secrets and env overrides (gitignored)
  4. Environment variables        — ``SUSTAIN_ADVISOR_*`` prefix

Entry point: ``load_config(config_path=None) -> AppConfig``

The session service and CLI commands receive an ``AppConfig`` instance —
never raw dicts or individual env var lookups scattered through the codebase.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, field_validator

from sustain_advisor.taxonomy.assessment_taxonomy import Language

# ── Sub-config models ─────────────────────────────────────────────────────────


class CatalogConfig(BaseModel):
    """Location of the static track catalog."""

    model_config = ConfigDict(frozen=True)

    tracks_file: str = "config/tracks/sustainable_tracks.json"


class MatcherConfig(BaseModel):
    """Track matcher settings."""

    model_config = ConfigDict(frozen=True)

    top_n: int = 3

    @field_validator("top_n")
    @classmethod
    def validate_top_n(cls, v: int) -> int:
        if v < 1:
            raise ValueError(f"top_n must be >= 1, got {v}.")
        return v


class SessionConfig(BaseModel):
    """Session store lifecycle settings.

    ``ttl_seconds`` is measured from a session's last update; ``0`` disables
    expiry.  ``max_sessions`` caps the in-memory store (oldest evicted first).
    """

    model_config = ConfigDict(frozen=True)

    ttl_seconds: int = 3600
    max_sessions: int = 10_000
    default_language: Language = Language.EN

    @field_validator("ttl_seconds")
    @classmethod
    def validate_ttl(cls, v: int) -> int:
        if v < 0:
            raise ValueError(f"ttl_seconds must be >= 0, got {v}.")
        return v

    @field_validator("max_sessions")
    @classmethod
    def validate_max_sessions(cls, v: int) -> int:
        if v < 1:
            raise ValueError(f"max_sessions must be >= 1, got {v}.")
        return v


class OutputConfig(BaseModel):
    """Filesystem paths for report output."""

    model_config = ConfigDict(frozen=True)

    report_dir: str = "data/outputs/results"


class LoggingConfig(BaseModel):
    """Logging output settings."""

    model_config = ConfigDict(frozen=True)

    level: str = "INFO"
    log_file: str = ""
    json_format: bool = False

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        valid = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in valid:
            raise ValueError(f"Log level must be one of {sorted(valid)}, got '{v}'.")
        return v.upper()


class AppConfig(BaseModel):
    """Complete application configuration — the single source of truth.

    Constructed by ``load_config()`` which merges TOML + .env.
    """

    model_config = ConfigDict(frozen=True)

    catalog: CatalogConfig = CatalogConfig()
    matcher: MatcherConfig = MatcherConfig()
    session: SessionConfig = SessionConfig()
    output: OutputConfig = OutputConfig()
    logging: LoggingConfig = LoggingConfig()
    debug: bool = False


# ── Loader ────────────────────────────────────────────────────────────────────

_PROJECT_ROOT = Path(__file__).parent.parent


def _find_project_root() -> Path:
    """Walk up from this file to find the project root (contains pyproject.toml)."""
    candidate = Path(__file__).parent
    for _ in range(5):
        if (candidate / "pyproject.toml").exists():
            return candidate
        candidate = candidate.parent
    return _PROJECT_ROOT


def resolve_project_path(path: str | Path) -> Path:
    """Resolve a config-relative path against the project root.

    Absolute paths and paths that exist relative to the working directory are
    returned unchanged.
    """
    path = Path(path)
    if path.is_absolute() or path.exists():
        return path
    return _find_project_root() / path


def load_config(config_path: Optional[Path] = None) -> AppConfig:
    """Load and merge application configuration.

    Args:
        config_path: Explicit path to a TOML config file. Defaults to
            ``<project_root>/config/default.toml``.

    Returns:
        Fully validated ``AppConfig`` instance.

    Raises:
        FileNotFoundError: If the specified ``config_path`` does not exist.
        pydantic.ValidationError: If merged config values fail validation.
    """
    root = _find_project_root()

    # 1. Load .env file (silently skip if missing)
    load_dotenv(dotenv_path=root / ".env", override=False)

    # 2. Load TOML config
    if config_path is None:
        config_path = root / "config" / "default.toml"

    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(
            f"Config file not found: {config_path}\n"
            "Create config/default.toml or pass --config."
        )

    with open(config_path, "rb") as f:
        raw: dict[str, Any] = tomllib.load(f)

    # Also merge local.toml if present (gitignored local overrides)
    local_config_path = config_path.parent / "local.toml"
    if local_config_path.exists():
        with open(local_config_path, "rb") as f:
            local_raw: dict[str, Any] = tomllib.load(f)
        raw = _deep_merge(raw, local_raw)

    # 3. Apply SUSTAIN_ADVISOR_* environment variable overrides
    raw = _apply_env_overrides(raw)

    # 4. Build and validate AppConfig
    return _build_app_config(raw)


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge ``override`` into ``base``."""
    result = dict(base)
    for key, val in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(val, dict):
            result[key] = _deep_merge(result[key], val)
        else:
            result[key] = val
    return result


def _apply_env_overrides(raw: dict[str, Any]) -> dict[str, Any]:
    """Apply SUSTAIN_ADVISOR_* env vars to the raw config dict.

    Supported overrides:
      SUSTAIN_ADVISOR_CATALOG_PATH         → raw["catalog"]["tracks_file"]
      SUSTAIN_ADVISOR_LOG_LEVEL            → raw["logging"]["level"]
      SUSTAIN_ADVISOR_SESSION_TTL_SECONDS  → raw["session"]["ttl_seconds"]
      SUSTAIN_ADVISOR_DEBUG                → raw["debug"]
    """
    if catalog_path := os.environ.get("SUSTAIN_ADVISOR_CATALOG_PATH"):
        raw.setdefault("catalog", {})["tracks_file"] = catalog_path

    if log_level := os.environ.get("SUSTAIN_ADVISOR_LOG_LEVEL"):
        raw.setdefault("logging", {})["level"] = log_level

    if ttl := os.environ.get("SUSTAIN_ADVISOR_SESSION_TTL_SECONDS"):
        raw.setdefault("session", {})["ttl_seconds"] = int(ttl)

    if debug := os.environ.get("SUSTAIN_ADVISOR_DEBUG"):
        raw["debug"] = debug.lower() in ("1", "true", "yes")

    return raw


def _build_app_config(raw: dict[str, Any]) -> AppConfig:
    """Map raw TOML dict to ``AppConfig`` model structure."""
    # Flatten top-level keys that may be nested under [project]
    project = raw.pop("project", {})

    return AppConfig(
        catalog=CatalogConfig(**raw.get("catalog", {})),
        matcher=MatcherConfig(**raw.get("matcher", {})),
        session=SessionConfig(**raw.get("session", {})),
        output=OutputConfig(**raw.get("output", {})),
        logging=LoggingConfig(**raw.get("logging", {})),
        debug=raw.get("debug", project.get("debug", False)),
    )
