"""
Deployment timeline helpers — active rotation lookup and physical location.

Location buckets:
  embarcado   on the installation (embark ≤ now ≤ disembark)
  hospedado   in lodging during the lead time before embarkation
  base        anywhere else, and the fallback for unrecognised values
"""
from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import date, datetime, time, timedelta
from typing import Optional

from crew_readiness.config import LODGING_LEAD_HOURS
from crew_readiness.models.domain import Deployment, DeploymentWindow, LocationBucket
from crew_readiness.services.date_normalizer import normalize_date

logger = logging.getLogger("crew-readiness.timeline")


def normalize_location(value: Optional[str]) -> LocationBucket:
    """Map a free-text location ("Embarcado", " HOSPEDADO ") onto a bucket."""
    text = (value or "").strip().lower()
    try:
        return LocationBucket(text)
    except ValueError:
        return LocationBucket.BASE


def active_windows_by_employee(deployments: Iterable[Deployment]) -> dict[str, DeploymentWindow]:
    """
    Window of each employee's active deployment (no actual end date yet).

    When an employee has several open deployments the one listed last wins.
    """
    windows: dict[str, DeploymentWindow] = {}
    for dep in deployments:
        if not dep.is_active:
            continue
        employee_id = (dep.employee_id or "").strip()
        if not employee_id:
            continue
        windows[employee_id] = DeploymentWindow(
            start=normalize_date(dep.start_date),
            end=normalize_date(dep.end_date_expected),
        )
    return windows


def derive_location(
    window: Optional[DeploymentWindow],
    now: datetime,
    lodging_lead_hours: int = LODGING_LEAD_HOURS,
) -> LocationBucket:
    """Where the worker physically is at ``now`` relative to one rotation window."""
    if window is None:
        return LocationBucket.BASE
    start = normalize_date(window.start)
    end = normalize_date(window.end)
    if start is None or end is None:
        return LocationBucket.BASE

    embark_at = _as_datetime(start, now)
    # Disembark day counts as embarked until its end
    disembark_until = _as_datetime(end + timedelta(days=1), now)

    if embark_at <= now < disembark_until:
        return LocationBucket.EMBARCADO
    if embark_at - timedelta(hours=lodging_lead_hours) <= now < embark_at:
        return LocationBucket.HOSPEDADO
    return LocationBucket.BASE


def _as_datetime(day: date, like: datetime) -> datetime:
    return datetime.combine(day, time.min, tzinfo=like.tzinfo)
