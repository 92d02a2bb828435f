"""
Employee readiness aggregator.

For one employee and one target rotation, classifies every required document
and folds the results into a single verdict:

    NAO_APTO  any required document missing or expired      (hard blocker)
    ATENCAO   any required document expiring inside the window (soft warning)
    APTO      otherwise

Evidence pendency is surfaced as an independent flag and never changes the
level: it is a follow-up item for HR staff, not a travel blocker.
"""
from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from datetime import date
from typing import Optional

from crew_readiness.config import EXPIRING_SOON_DAYS
from crew_readiness.models.domain import (
    DeploymentWindow,
    DocumentRecord,
    DocumentStatus,
    DocumentType,
    EvidenceStatus,
    ReadinessLevel,
    ReadinessVerdict,
)
from crew_readiness.services.date_normalizer import normalize_date, resolve_today
from crew_readiness.services.document_status_engine import classify_document_status
from crew_readiness.services.evidence_engine import classify_evidence_status

logger = logging.getLogger("crew-readiness.readiness")

# employee_id → {document_type_code → live record}
DocumentsByEmployee = Mapping[str, Mapping[str, DocumentRecord]]


def normalize_code(code: Optional[str]) -> str:
    return (code or "").strip().upper()


def index_documents_by_employee(records: Iterable[DocumentRecord]) -> dict[str, dict[str, DocumentRecord]]:
    """
    Group records by employee and keep one live record per document type.

    A newer submission supersedes the prior one: the latest ``issue_date`` wins,
    and on a tie (or when dates are absent) the record that comes later in the
    input wins.
    """
    index: dict[str, dict[str, DocumentRecord]] = {}
    skipped = 0
    for record in records:
        employee_id = (record.employee_id or "").strip()
        code = normalize_code(record.document_type_code)
        if not employee_id or not code:
            skipped += 1
            continue
        per_type = index.setdefault(employee_id, {})
        current = per_type.get(code)
        if current is None or _supersedes(record, current):
            per_type[code] = record

    if skipped:
        logger.debug(f"Skipped {skipped} record(s) without employee id or type code")
    return index


def _supersedes(candidate: DocumentRecord, current: DocumentRecord) -> bool:
    new_issue = normalize_date(candidate.issue_date)
    old_issue = normalize_date(current.issue_date)
    if new_issue is None or old_issue is None:
        return True
    return new_issue >= old_issue


def live_record(
    documents_by_employee: DocumentsByEmployee,
    employee_id: str,
    code: str,
) -> Optional[DocumentRecord]:
    per_type = documents_by_employee.get(employee_id) or {}
    return per_type.get(code)


def reference_date(today: date, window: Optional[DeploymentWindow]) -> date:
    """
    Date the readiness check is evaluated "as of".

    For a rotation that has not started yet, documents must still be valid on
    embarkation day, so the later of today and the window start is used.
    """
    start = normalize_date(window.start) if window is not None else None
    if start is not None and start > today:
        return start
    return today


def compute_readiness(
    employee_id: str,
    required_codes: Iterable[str],
    documents_by_employee: DocumentsByEmployee,
    window: Optional[DeploymentWindow],
    today: Optional[date] = None,
    document_types: Optional[Mapping[str, DocumentType]] = None,
    expiring_soon_days: int = EXPIRING_SOON_DAYS,
) -> ReadinessVerdict:
    """Aggregate per-document classifications into one verdict for one employee."""
    ref = reference_date(resolve_today(today), window)
    catalog = document_types or {}

    missing: list[str] = []
    expired: list[str] = []
    during: list[str] = []
    statuses: dict[str, DocumentStatus] = {}
    evidence: dict[str, EvidenceStatus] = {}
    evidence_pending = False

    for raw_code in required_codes:
        code = normalize_code(raw_code)
        if not code or code in statuses:
            continue

        record = live_record(documents_by_employee, employee_id, code)
        if record is None:
            status = DocumentStatus.FALTANDO
        else:
            status = classify_document_status(
                record,
                catalog.get(code),
                window,
                today=ref,
                expiring_soon_days=expiring_soon_days,
            )
        evid = classify_evidence_status(record)

        statuses[code] = status
        evidence[code] = evid

        if status == DocumentStatus.FALTANDO:
            missing.append(code)
        elif status == DocumentStatus.VENCIDO:
            expired.append(code)
        elif status == DocumentStatus.DURANTE_EMBARQUE:
            during.append(code)

        if evid != EvidenceStatus.VERIFICADO:
            evidence_pending = True

    if missing or expired:
        level = ReadinessLevel.NAO_APTO
    elif during:
        level = ReadinessLevel.ATENCAO
    else:
        level = ReadinessLevel.APTO

    logger.debug(
        f"Readiness {employee_id}: {level.value} "
        f"(missing={missing}, expired={expired}, during={during}, evidence_pending={evidence_pending})",
        extra={"employee_id": employee_id},
    )

    return ReadinessVerdict(
        employee_id=employee_id,
        level=level,
        missing=tuple(missing),
        expired=tuple(expired),
        expiring_during_window=tuple(during),
        evidence_pending=evidence_pending,
        statuses=statuses,
        evidence=evidence,
    )
