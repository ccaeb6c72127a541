"""
Result report writer: JSON and CSV output for assessment results.

All functions are pure I/O — no session store access.  They consume
in-memory results and write human-readable + machine-readable files.

Output files
------------
  data/outputs/results/
    result_{label}_{date}.json            -- full AssessmentResult (camelCase)
    recommendations_{label}_{date}.csv    -- ranked tracks with components
"""

from __future__ import annotations

import csv
import json
import logging
from datetime import date
from pathlib import Path
from typing import Sequence

from sustain_advisor.models.result import AssessmentResult
from sustain_advisor.recommendations.ranker import TrackRecommendation

logger = logging.getLogger(__name__)

SCHEMA_VERSION = "v1.0.0"


def write_result_json(
    result:     AssessmentResult,
    output_dir: Path,
    label:      str,
    run_date:   date | None = None,
) -> Path:
    """Write an ``AssessmentResult`` to a structured JSON file.

    Args:
        result:     Result payload to serialise.
        output_dir: Target directory (created if missing).
        label:      Used in the filename (session id or input stem).
        run_date:   Date label. Defaults to today.

    Returns:
        Path to the written JSON file.
    """
    if run_date is None:
        run_date = date.today()

    output_dir.mkdir(parents=True, exist_ok=True)
    json_path = output_dir / f"result_{label}_{run_date}.json"

    payload: dict = {
        "schema_version": SCHEMA_VERSION,
        "label":          label,
        "result":         result.model_dump(mode="json", by_alias=True),
    }

    json_path.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")
    logger.info("Result JSON written: %s", json_path)
    return json_path


def write_recommendation_csv(
    recommendations: Sequence[TrackRecommendation],
    output_dir:      Path,
    label:           str,
    run_date:        date | None = None,
) -> Path:
    """Write ranked recommendations with score breakdown to a CSV file.

    Columns: rank, track_id, name_en, match_score, score, risk_match,
             time_match, esg_match, sdg_match, reason.

    Returns:
        Path to the written CSV file.
    """
    if run_date is None:
        run_date = date.today()

    output_dir.mkdir(parents=True, exist_ok=True)
    csv_path = output_dir / f"recommendations_{label}_{run_date}.csv"

    fieldnames = [
        "rank", "track_id", "name_en", "match_score", "score",
        "risk_match", "time_match", "esg_match", "sdg_match", "reason",
    ]

    with csv_path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=fieldnames)
        writer.writeheader()
        for rank, rec in enumerate(recommendations, start=1):
            writer.writerow(
                {
                    "rank":        rank,
                    "track_id":    rec.track.track_id,
                    "name_en":     rec.track.name_en,
                    "match_score": rec.match_score,
                    "score":       round(rec.score, 4),
                    "risk_match":  round(rec.components.risk_match, 2),
                    "time_match":  round(rec.components.time_match, 2),
                    "esg_match":   round(rec.components.esg_match, 2),
                    "sdg_match":   round(rec.components.sdg_match, 2),
                    "reason":      rec.reason,
                }
            )

    logger.info("Recommendation CSV written: %s (%d rows)", csv_path, len(recommendations))
    return csv_path
