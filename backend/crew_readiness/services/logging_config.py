"""Structured logging configuration for the crew readiness engine."""
from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Optional

from crew_readiness.config import EngineSettings

# Context engines attach through ``extra=``
CONTEXT_FIELDS: tuple[str, ...] = ("employee_id", "program_id", "target", "duration_ms")

TEXT_FORMAT = "%(asctime)s [%(name)s] %(levelname)s: %(message)s"


class JSONFormatter(logging.Formatter):
    """One JSON object per line; engine context fields are lifted to the top level."""

    def __init__(self, context_fields: tuple[str, ...] = CONTEXT_FIELDS):
        super().__init__()
        self.context_fields = context_fields

    def format(self, record):
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "location": f"{record.module}.{record.funcName}:{record.lineno}",
        }
        for name in self.context_fields:
            value = getattr(record, name, None)
            if value is not None:
                entry[name] = value
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


def setup_logging(settings: Optional[EngineSettings] = None) -> logging.Handler:
    """
    Install a single stdout handler on the root logger.

    Level and format come from ``settings`` (LOG_LEVEL / LOG_FORMAT when read
    from the environment). An unknown level name falls back to INFO.
    """
    settings = settings or EngineSettings.from_env()

    level = logging.getLevelName(settings.log_level.upper())
    unknown_level = not isinstance(level, int)
    if unknown_level:
        level = logging.INFO

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JSONFormatter() if settings.json_logs else logging.Formatter(TEXT_FORMAT))

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers = [handler]

    if unknown_level:
        logging.getLogger("crew-readiness.config").warning(
            f"Unknown LOG_LEVEL {settings.log_level!r} — using INFO"
        )
    return handler
