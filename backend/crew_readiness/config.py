"""
Readiness engine configuration — single source of truth for the required
document catalog, classification horizons and date-normalisation thresholds.

Import from here in all engines rather than hardcoding values.
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass

logger = logging.getLogger("crew-readiness.config")


# ── Document catalog ───────────────────────────────────────────────────────────

# Mandatory for offshore eligibility (ASO = occupational health certificate,
# CBSP = basic offshore safety course, HUET = helicopter underwater escape,
# NR-33 / NR-35 = confined space / work at height)
REQUIRED_DOC_TYPES: tuple[str, ...] = ("ASO", "CBSP", "HUET", "NR-33", "NR-35")

# Tracked and displayed, never blocking
OPTIONAL_DOC_TYPES: tuple[str, ...] = ("NR-37",)


# ── Classification horizons ────────────────────────────────────────────────────

# A document expiring within this many calendar days of today is VENCENDO
EXPIRING_SOON_DAYS: int = 30

# Crew move from base to lodging this many hours before embarkation
LODGING_LEAD_HOURS: int = 24


# ── Date normalisation ─────────────────────────────────────────────────────────

# Spreadsheet day-serial epoch (1900 date system, includes the 1900 leap-year bug)
SPREADSHEET_EPOCH_ISO: str = "1899-12-30"

# |n| below this → spreadsheet day-serial
SPREADSHEET_SERIAL_MAX: int = 100_000

# |n| below this → Unix epoch seconds; at or above → epoch milliseconds
EPOCH_SECONDS_MAX: int = 100_000_000_000

# Formats tried after ISO-8601 parsing fails
FALLBACK_DATE_FORMATS: tuple[str, ...] = ("%d/%m/%Y", "%d/%m/%Y %H:%M", "%d/%m/%Y %H:%M:%S", "%d-%m-%Y")


# ── Physical location buckets ─────────────────────────────────────────────────

LOCATION_BUCKETS: tuple[str, ...] = ("base", "hospedado", "embarcado")
DEFAULT_LOCATION: str = "base"


# ── Environment overrides ──────────────────────────────────────────────────────

def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning(f"Invalid {name}={raw!r} — using default {default}")
        return default
    if value < 0:
        logger.warning(f"Negative {name}={value} — using default {default}")
        return default
    return value


def _env_codes(name: str, default: tuple[str, ...]) -> tuple[str, ...]:
    raw = os.getenv(name)
    if raw is None:
        return default
    codes = tuple(c.strip().upper() for c in raw.split(",") if c.strip())
    if not codes:
        logger.warning(f"Empty {name} — using default catalog")
        return default
    return codes


@dataclass(frozen=True)
class EngineSettings:
    """Runtime settings; defaults mirror the module constants above."""
    required_doc_types: tuple[str, ...] = REQUIRED_DOC_TYPES
    optional_doc_types: tuple[str, ...] = OPTIONAL_DOC_TYPES
    expiring_soon_days: int = EXPIRING_SOON_DAYS
    lodging_lead_hours: int = LODGING_LEAD_HOURS
    log_level: str = "INFO"
    json_logs: bool = True

    @classmethod
    def from_env(cls) -> "EngineSettings":
        """
        Build settings from environment variables:

            READINESS_EXPIRING_SOON_DAYS   int, default 30
            READINESS_REQUIRED_DOC_TYPES   comma separated codes
            READINESS_LODGING_LEAD_HOURS   int, default 24
            LOG_LEVEL                      default INFO
            LOG_FORMAT                     "json" (default) or "text"
        """
        return cls(
            required_doc_types=_env_codes("READINESS_REQUIRED_DOC_TYPES", REQUIRED_DOC_TYPES),
            expiring_soon_days=_env_int("READINESS_EXPIRING_SOON_DAYS", EXPIRING_SOON_DAYS),
            lodging_lead_hours=_env_int("READINESS_LODGING_LEAD_HOURS", LODGING_LEAD_HOURS),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            json_logs=os.getenv("LOG_FORMAT", "json").lower() != "text",
        )
