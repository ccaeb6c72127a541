"""
Sustainable Investment Profiler — CLI entry point.

All commands follow this pattern:
  1. Load ``AppConfig`` via ``load_config()``.
  2. Configure logging.
  3. Validate inputs.
  4. Execute action (score, replay a session, list the catalog).
  5. Report result to stdout.

Install and run::

    pip install -e .
    sustain-advisor --help
    sustain-advisor validate-config
    sustain-advisor list-tracks
    sustain-advisor recommend --scores examples/scores.json
    sustain-advisor replay --turns examples/turns.json --language zh
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Optional

import typer

app = typer.Typer(
    name="sustain-advisor",
    help="Sustainable investment profiler — score and rank investment tracks.",
    add_completion=False,
)


# ── Helpers ───────────────────────────────────────────────────────────────────

def _load_config_or_exit(config_path: Optional[str] = None):
    """Load AppConfig, printing a friendly error and exiting on failure."""
    from sustain_advisor.config import load_config

    try:
        cfg_path = Path(config_path) if config_path else None
        return load_config(cfg_path)
    except FileNotFoundError as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)
    except Exception as exc:
        typer.echo(f"[ERROR] Config validation failed: {exc}", err=True)
        raise typer.Exit(code=1)


def _configure_logging(config):
    """Set up logging from config."""
    from sustain_advisor.utils.logging import configure_logging
    configure_logging(config.logging)


def _load_catalog_or_exit(config, catalog_path: Optional[str] = None):
    """Load the track catalog, exiting with code 1 on any catalog error."""
    from sustain_advisor.catalog.loader import load_track_catalog
    from sustain_advisor.config import resolve_project_path

    path = Path(catalog_path) if catalog_path else resolve_project_path(
        config.catalog.tracks_file
    )
    try:
        return load_track_catalog(path)
    except (FileNotFoundError, ValueError) as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)


def _report_dir(config, output_dir: Optional[str], save: bool) -> Optional[Path]:
    """Directory for report files, or None when nothing should be written."""
    from sustain_advisor.config import resolve_project_path

    if output_dir:
        return Path(output_dir)
    if save:
        return resolve_project_path(config.output.report_dir)
    return None


def _read_json_or_exit(path: Path) -> Any:
    if not path.exists():
        typer.echo(f"[ERROR] File not found: {path}", err=True)
        raise typer.Exit(code=1)
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, OSError) as exc:
        typer.echo(f"[ERROR] JSON parse error: {exc}", err=True)
        raise typer.Exit(code=1)


# ── Commands ──────────────────────────────────────────────────────────────────

@app.command("validate-config")
def validate_config(
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        help="Path to TOML config file (default: config/default.toml).",
    ),
    show_full: bool = typer.Option(
        False,
        "--full",
        help="Print full config including all fields.",
    ),
) -> None:
    """Validate the configuration file and print parsed values.

    Exits with code 1 if the config fails validation.
    """
    config = _load_config_or_exit(config_path)

    typer.echo("Configuration validated successfully.")
    typer.echo("")
    typer.echo(f"  Track catalog:    {config.catalog.tracks_file}")
    typer.echo(f"  Top-N:            {config.matcher.top_n}")
    typer.echo(f"  Session TTL (s):  {config.session.ttl_seconds}")
    typer.echo(f"  Max sessions:     {config.session.max_sessions}")
    typer.echo(f"  Language:         {config.session.default_language}")
    typer.echo(f"  Log level:        {config.logging.level}")
    typer.echo(f"  Debug mode:       {config.debug}")

    if show_full:
        typer.echo("")
        typer.echo("Full config (JSON):")
        typer.echo(json.dumps(config.model_dump(mode="json"), indent=2, default=str))

    typer.echo("")
    typer.echo("[OK] Config valid.")


@app.command("list-tracks")
def list_tracks(
    catalog_path: Optional[str] = typer.Option(
        None,
        "--catalog",
        help="Path to track catalog JSON (default: config.catalog.tracks_file).",
    ),
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        help="Path to TOML config file.",
    ),
) -> None:
    """List the investment tracks in the catalog, in tie-break order."""
    config = _load_config_or_exit(config_path)
    _configure_logging(config)
    catalog = _load_catalog_or_exit(config, catalog_path)

    typer.echo(f"{len(catalog)} track(s):")
    for track in catalog:
        sdgs = ",".join(str(s) for s in track.sdgs) or "-"
        typer.echo(
            f"  {track.track_id:<26} risk={track.risk_level:>5.1f} "
            f"horizon={track.time_horizon:>5.1f} "
            f"ESG={track.esg_profile.E:.0f}/{track.esg_profile.S:.0f}/{track.esg_profile.G:.0f} "
            f"SDG={sdgs}  {track.name_en}"
        )


@app.command("recommend")
def recommend(
    scores_file: str = typer.Option(
        ...,
        "--scores",
        "-s",
        help="JSON file with (possibly partial) assessment scores.",
    ),
    top_n: Optional[int] = typer.Option(
        None,
        "--top-n",
        help="Number of tracks to return (default: config.matcher.top_n).",
    ),
    language: str = typer.Option(
        "en",
        "--language",
        "-l",
        help="Language for reason text: en or zh.",
    ),
    output_dir: Optional[str] = typer.Option(
        None,
        "--output-dir",
        help="Write result JSON + recommendations CSV to this directory.",
    ),
    save: bool = typer.Option(
        False,
        "--save",
        help="Write reports to config.output.report_dir (ignored with --output-dir).",
    ),
    catalog_path: Optional[str] = typer.Option(
        None,
        "--catalog",
        help="Path to track catalog JSON.",
    ),
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        help="Path to TOML config file.",
    ),
) -> None:
    """Score the catalog against a scores file and print the top tracks.

    Missing score fields fall back to neutral defaults, exactly as a session
    that never touched them would.
    """
    from pydantic import ValidationError

    from sustain_advisor.assessment.scores import merge_scores
    from sustain_advisor.models.scores import ScoreUpdate
    from sustain_advisor.recommendations.phrases import resolve_language
    from sustain_advisor.recommendations.profile import build_assessment_result
    from sustain_advisor.recommendations.ranker import recommend_tracks
    from sustain_advisor.recommendations.reporter import (
        write_recommendation_csv,
        write_result_json,
    )

    config = _load_config_or_exit(config_path)
    _configure_logging(config)
    catalog = _load_catalog_or_exit(config, catalog_path)

    scores_path = Path(scores_file)
    raw = _read_json_or_exit(scores_path)
    if not isinstance(raw, dict):
        typer.echo("[ERROR] Scores file must contain a JSON object.", err=True)
        raise typer.Exit(code=1)
    try:
        scores = merge_scores(None, ScoreUpdate.model_validate(raw))
    except ValidationError as exc:
        typer.echo(f"[ERROR] Invalid scores: {exc}", err=True)
        raise typer.Exit(code=1)

    lang = resolve_language(language)
    n = top_n if top_n is not None else config.matcher.top_n
    recommendations = recommend_tracks(scores, catalog, top_n=n, language=lang)

    typer.echo(f"Top {len(recommendations)} of {len(catalog)} track(s):")
    for rank, rec in enumerate(recommendations, start=1):
        typer.echo(f"  {rank}. {rec.track.name_en} ({rec.track.track_id}) — {rec.match_score}")
        typer.echo(f"     {rec.reason}")

    out = _report_dir(config, output_dir, save)
    if out is not None:
        result = build_assessment_result(scores, recommendations, lang)
        json_path = write_result_json(result, out, label=scores_path.stem)
        csv_path = write_recommendation_csv(recommendations, out, label=scores_path.stem)
        typer.echo("")
        typer.echo(f"  Result JSON:      {json_path}")
        typer.echo(f"  Recommendations:  {csv_path}")

    typer.echo("[OK] Recommendations generated.")


@app.command("replay")
def replay(
    turns_file: str = typer.Option(
        ...,
        "--turns",
        "-t",
        help=(
            "JSON array of decoded turn responses "
            "({scores_update, next_stage, next_question, message})."
        ),
    ),
    language: Optional[str] = typer.Option(
        None,
        "--language",
        "-l",
        help="Session language: en or zh (default: config.session.default_language).",
    ),
    output_dir: Optional[str] = typer.Option(
        None,
        "--output-dir",
        help="Write the final result JSON + recommendations CSV to this directory.",
    ),
    save: bool = typer.Option(
        False,
        "--save",
        help="Write reports to config.output.report_dir (ignored with --output-dir).",
    ),
    catalog_path: Optional[str] = typer.Option(
        None,
        "--catalog",
        help="Path to track catalog JSON.",
    ),
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        help="Path to TOML config file.",
    ),
) -> None:
    """Drive a full assessment session from recorded turn responses.

    Prints stage and progress after every turn, then the final result.
    Turns after the session reaches ``complete`` are reported and skipped.
    """
    from pydantic import ValidationError

    from sustain_advisor.assessment.service import (
        AssessmentService,
        SessionCompleteError,
        TurnUpdate,
    )
    from sustain_advisor.recommendations.ranker import recommend_tracks
    from sustain_advisor.recommendations.reporter import (
        write_recommendation_csv,
        write_result_json,
    )

    config = _load_config_or_exit(config_path)
    _configure_logging(config)
    catalog = _load_catalog_or_exit(config, catalog_path)

    raw_turns = _read_json_or_exit(Path(turns_file))
    if not isinstance(raw_turns, list):
        typer.echo("[ERROR] Turns file must contain a JSON array.", err=True)
        raise typer.Exit(code=1)

    turns: list[tuple[TurnUpdate, Optional[str]]] = []
    errors: list[tuple[int, str]] = []
    for i, raw in enumerate(raw_turns):
        try:
            turn = TurnUpdate.model_validate(raw)
        except ValidationError as exc:
            errors.append((i, str(exc)))
            continue
        message = raw.get("message")
        turns.append((turn, message if isinstance(message, str) else None))
    if errors:
        typer.echo(f"[ERROR] {len(errors)} turn(s) failed validation:", err=True)
        for idx, msg in errors[:5]:
            typer.echo(f"  Turn #{idx}: {msg}", err=True)
        if len(errors) > 5:
            typer.echo(f"  ... and {len(errors) - 5} more.", err=True)
        raise typer.Exit(code=1)

    service = AssessmentService.from_config(config, catalog=catalog)
    started = service.start(language)
    typer.echo(f"Session {started.session_id}")
    typer.echo(f"  Q: {started.question}")

    for i, (turn, message) in enumerate(turns, start=1):
        try:
            outcome = service.submit_turn(started.session_id, turn, user_message=message)
        except SessionCompleteError:
            typer.echo(f"  Turn {i}: session already complete — skipped.")
            continue
        status = outcome.status
        typer.echo(
            f"  Turn {i}: stage={status.stage} progress={status.progress}%"
            f"{' (complete)' if status.is_complete else ''}"
        )
        if outcome.reply:
            typer.echo(f"  Q: {outcome.reply}")

    result = service.get_result(started.session_id)
    profile = result.investor_profile
    typer.echo("")
    typer.echo(f"Investor profile: {profile.investor_type}")
    typer.echo(f"  {profile.summary}")
    for track in result.recommended_tracks:
        typer.echo(f"  {track.rank}. {track.track_name_en} — {track.match_score}")
        typer.echo(f"     {track.reason}")

    out = _report_dir(config, output_dir, save)
    if out is not None:
        session = service.store.get(started.session_id)
        recommendations = recommend_tracks(
            session.scores, catalog, top_n=service.top_n, language=session.language
        )
        json_path = write_result_json(result, out, label=started.session_id)
        csv_path = write_recommendation_csv(recommendations, out, label=started.session_id)
        typer.echo("")
        typer.echo(f"  Result JSON:      {json_path}")
        typer.echo(f"  Recommendations:  {csv_path}")

    typer.echo("[OK] Replay complete.")


if __name__ == "__main__":
    app()
