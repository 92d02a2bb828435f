"""
Document status classifier.

Maps one certificate record onto the status taxonomy:

    SEM_VALIDADE      type never expires
    FALTANDO          type expires but no (parseable) expiration date on file
    VENCIDO           expired before today
    DURANTE_EMBARQUE  expires inside the active rotation window
    VENCENDO          expires within the expiring-soon horizon
    OK                everything else

Check order is fixed: VENCIDO short-circuits the window check, and the window
check runs before the horizon check. A certificate lapsing mid-rotation must
never be reported as merely VENCENDO.
"""
from __future__ import annotations

import logging
from datetime import date
from typing import Any, Optional

from crew_readiness.config import EXPIRING_SOON_DAYS
from crew_readiness.models.domain import (
    DeploymentWindow,
    DocumentRecord,
    DocumentStatus,
    DocumentType,
)
from crew_readiness.services.date_normalizer import days_between, normalize_date, resolve_today

logger = logging.getLogger("crew-readiness.status")


def classify_document_status(
    record: Optional[DocumentRecord],
    document_type: Optional[DocumentType],
    active_window: Optional[DeploymentWindow] = None,
    today: Optional[date] = None,
    expiring_soon_days: int = EXPIRING_SOON_DAYS,
) -> DocumentStatus:
    """
    Classify one document record.

    Args:
        record: The employee's live record for this type, or None if absent.
        document_type: Catalog entry. None is treated as an expiring type.
        active_window: Rotation window the document must survive, if any.
        today: Reference date. Only read from the clock when omitted; a
            supplied value that cannot be parsed raises ValueError.
        expiring_soon_days: Horizon for VENCENDO (inclusive).
    """
    ref = resolve_today(today)

    if document_type is not None and not document_type.requires_expiration:
        return DocumentStatus.SEM_VALIDADE

    expiration = normalize_date(record.expiration_date) if record is not None else None
    if expiration is None:
        return DocumentStatus.FALTANDO

    if expiration < ref:
        return DocumentStatus.VENCIDO

    bounds = _window_bounds(active_window)
    if bounds is not None and bounds[0] <= expiration <= bounds[1]:
        return DocumentStatus.DURANTE_EMBARQUE

    if days_between(expiration, ref) <= expiring_soon_days:
        return DocumentStatus.VENCENDO

    return DocumentStatus.OK


def classify_for_rotation(
    record: Optional[DocumentRecord],
    document_type: Optional[DocumentType],
    embark: Any,
    disembark: Any,
    today: Optional[date] = None,
    expiring_soon_days: int = EXPIRING_SOON_DAYS,
) -> DocumentStatus:
    """Would this document survive a specific (possibly future) rotation?"""
    window = DeploymentWindow(start=normalize_date(embark), end=normalize_date(disembark))
    return classify_document_status(
        record, document_type, window, today=today, expiring_soon_days=expiring_soon_days
    )


def _window_bounds(window: Optional[DeploymentWindow]) -> Optional[tuple[date, date]]:
    if window is None:
        return None
    start = normalize_date(window.start)
    end = normalize_date(window.end)
    if start is None or end is None:
        logger.debug(f"Ignoring window with unparseable bounds: {window!r}")
        return None
    return start, end
