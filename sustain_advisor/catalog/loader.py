"""
Track catalog loader: JSON → validated ``InvestmentTrack`` tuple.

Responsibilities
----------------
1. Load ``config/tracks/sustainable_tracks.json`` (or any catalog JSON).
2. Skip comment-only entries (objects without an ``id`` key).
3. Validate every entry against ``InvestmentTrack`` and reject duplicate ids.
4. Return the catalog as an immutable tuple, in file order.  File order is
   the ranking tie-break, so it is preserved exactly.

JSON schema (one object per track)
----------------------------------
  id           (string)   — stable slug, unique in the file
  name         (string)   — display name (zh)
  nameEn       (string)   — display name (en)
  description  (string)
  riskLevel    (number)   — 0..100
  timeHorizon  (number)   — 0..100
  esgProfile   (object)   — {"E": 0..100, "S": 0..100, "G": 0..100}
  sdgs         (int[])    — SDG ids 1..17
  examples     (string[])

Usage
-----
    from sustain_advisor.catalog.loader import load_track_catalog

    catalog = load_track_catalog(Path("config/tracks/sustainable_tracks.json"))
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from sustain_advisor.models.track import InvestmentTrack

log = logging.getLogger(__name__)


def parse_track_catalog(records: list[dict[str, Any]]) -> tuple[InvestmentTrack, ...]:
    """Validate raw catalog records.

    Raises:
        ValueError: On a non-object entry, an invalid track, or a duplicate id.
            Pydantic validation errors are re-raised as ``ValueError`` naming
            the offending index.
    """
    tracks: list[InvestmentTrack] = []
    seen_ids: set[str] = set()

    for i, rec in enumerate(records):
        if not isinstance(rec, dict):
            raise ValueError(f"Track at index {i} must be an object, got {type(rec).__name__}.")
        if "id" not in rec:
            # Comment-only entries ("_comment": ...) carry no id.
            continue
        try:
            track = InvestmentTrack.model_validate(rec)
        except ValidationError as exc:
            raise ValueError(f"Track at index {i} ({rec.get('id')!r}) is invalid: {exc}") from exc
        if track.track_id in seen_ids:
            raise ValueError(f"Duplicate track id '{track.track_id}' at index {i}.")
        seen_ids.add(track.track_id)
        tracks.append(track)

    return tuple(tracks)


def load_track_catalog(path: Path) -> tuple[InvestmentTrack, ...]:
    """Load and validate the track catalog from a JSON array file.

    Args:
        path: Path to the catalog JSON file.

    Returns:
        Tuple of ``InvestmentTrack`` in file order.

    Raises:
        FileNotFoundError: If ``path`` does not exist.
        ValueError: If the file is not a JSON array or any entry is invalid.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Track catalog not found: {path}")

    log.info("Loading track catalog from %s", path)
    try:
        raw: Any = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ValueError(f"Track catalog {path} is not valid JSON: {exc}") from exc

    if not isinstance(raw, list):
        raise ValueError(f"Track catalog {path} must contain a JSON array.")

    catalog = parse_track_catalog(raw)
    log.info("Loaded %d tracks.", len(catalog))
    return catalog
