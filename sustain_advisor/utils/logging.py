"""
Logging setup for sustain-advisor.

``configure_logging()`` is for entry points only (the CLI, or an embedding
application's startup code).  Library modules just do
``logger = logging.getLogger(__name__)``.

Log output goes to stderr so that CLI command output on stdout can be piped.

Session context
---------------
Session-scoped log calls pass ``extra={"session_id": ...}``.  The plain-text
format ignores it (the id is also in the message); the JSON format lifts it
to a top-level key so log aggregation can group a whole assessment::

    {"ts": "2026-02-24T15:00:00Z", "level": "INFO",
     "logger": "sustain_advisor.assessment.service",
     "msg": "Turn 3 applied ...", "session_id": "5f0c..."}
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from sustain_advisor.config import LoggingConfig

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%dT%H:%M:%SZ"

# Keys present on every LogRecord; anything else arrived through extra=.
_STANDARD_RECORD_KEYS = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime"}


class _JsonFormatter(logging.Formatter):
    """One JSON object per line: ``ts``, ``level``, ``logger``, ``msg``,
    ``exc`` when an exception is attached, plus any ``extra=`` keys.

    Non-ASCII text (Chinese reasons and questions) is written as-is.
    """

    def format(self, record: logging.LogRecord) -> str:
        payload: dict = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).strftime(
                LOG_DATE_FORMAT
            ),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)
        payload.update(
            (key, val)
            for key, val in vars(record).items()
            if key not in _STANDARD_RECORD_KEYS and not key.startswith("_")
        )
        return json.dumps(payload, default=str, ensure_ascii=False)


def build_formatter(json_format: bool) -> logging.Formatter:
    """Return the JSON-lines formatter or the plain-text one."""
    if json_format:
        return _JsonFormatter()
    return logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)


def _build_handlers(config: "LoggingConfig", level: int) -> list[logging.Handler]:
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if config.log_file:
        log_path = Path(config.log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_path, encoding="utf-8"))

    formatter = build_formatter(config.json_format)
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
    return handlers


def configure_logging(config: "LoggingConfig") -> None:
    """Install stderr (and optional file) handlers on the root logger.

    Replaces any handlers installed by an earlier call, so calling it once per
    CLI invocation is safe.

    Args:
        config: ``[logging]`` section of ``AppConfig``.
    """
    level = getattr(logging, config.level.upper(), logging.INFO)
    logging.basicConfig(level=level, handlers=_build_handlers(config, level), force=True)
