"""
Roster-wide documentation report.

One row per live document record plus one synthetic FALTANDO row for each
required type an employee has no record for. Rows are classified against the
employee's active deployment window, so a certificate lapsing mid-rotation
shows up as DURANTE_EMBARQUE in the back-office listing.
"""
from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from datetime import date
from typing import Optional

from crew_readiness.config import EXPIRING_SOON_DAYS, REQUIRED_DOC_TYPES
from crew_readiness.models.domain import (
    DeploymentWindow,
    DocumentationRow,
    DocumentationSummary,
    DocumentRecord,
    DocumentStatus,
    DocumentType,
    EvidenceStatus,
)
from crew_readiness.services.document_status_engine import classify_document_status
from crew_readiness.services.evidence_engine import classify_evidence_status
from crew_readiness.services.readiness_engine import index_documents_by_employee, normalize_code

logger = logging.getLogger("crew-readiness.report")

# Query-string aliases accepted by the listing filter
STATUS_QUERY_ALIASES: dict[str, DocumentStatus] = {
    "expired": DocumentStatus.VENCIDO,
    "expiringSoon": DocumentStatus.VENCENDO,
    "duringDeployment": DocumentStatus.DURANTE_EMBARQUE,
    "missing": DocumentStatus.FALTANDO,
}


def build_documentation_rows(
    employee_ids: Iterable[str],
    records: Iterable[DocumentRecord],
    document_types: Mapping[str, DocumentType],
    active_windows: Optional[Mapping[str, DeploymentWindow]] = None,
    required_codes: Optional[Iterable[str]] = None,
    today: Optional[date] = None,
    expiring_soon_days: int = EXPIRING_SOON_DAYS,
) -> list[DocumentationRow]:
    required = [normalize_code(c) for c in (required_codes if required_codes is not None else REQUIRED_DOC_TYPES)]
    required = list(dict.fromkeys(c for c in required if c))
    required_set = set(required)
    windows = active_windows or {}

    index = index_documents_by_employee(records)
    rows: list[DocumentationRow] = []

    for employee_id, per_type in index.items():
        window = windows.get(employee_id)
        for code, record in per_type.items():
            rows.append(DocumentationRow(
                kind="document",
                employee_id=employee_id,
                code=code,
                required=code in required_set,
                status=classify_document_status(
                    record, document_types.get(code), window,
                    today=today, expiring_soon_days=expiring_soon_days,
                ),
                evidence_status=classify_evidence_status(record),
                record=record,
            ))

    for raw_id in employee_ids:
        employee_id = (raw_id or "").strip()
        if not employee_id:
            continue
        present = index.get(employee_id, {})
        for code in required:
            if code in present:
                continue
            rows.append(DocumentationRow(
                kind="missing",
                employee_id=employee_id,
                code=code,
                required=True,
                status=DocumentStatus.FALTANDO,
                evidence_status=EvidenceStatus.SEM_EVIDENCIA,
            ))

    logger.info(f"Documentation report: {len(rows)} row(s) for {len(index)} employee(s) with records")
    return rows


def filter_documentation_rows(
    rows: Iterable[DocumentationRow],
    status: Optional[str] = None,
    required_only: bool = False,
) -> list[DocumentationRow]:
    """Filter by status code (or query alias) and/or required types only."""
    wanted: Optional[DocumentStatus] = None
    if status:
        wanted = STATUS_QUERY_ALIASES.get(status.strip())
        if wanted is None:
            try:
                wanted = DocumentStatus(status.strip().upper())
            except ValueError:
                logger.debug(f"Unknown status filter {status!r} — ignored")

    return [
        row for row in rows
        if (wanted is None or row.status == wanted)
        and (not required_only or row.required)
    ]


def summarize_documentation(rows: Iterable[DocumentationRow]) -> DocumentationSummary:
    counts = {
        "vencidos": 0, "vencendo": 0, "durante_embarque": 0,
        "faltando": 0, "sem_evidencia": 0, "pendente_verificacao": 0,
    }
    status_keys = {
        DocumentStatus.VENCIDO: "vencidos",
        DocumentStatus.VENCENDO: "vencendo",
        DocumentStatus.DURANTE_EMBARQUE: "durante_embarque",
        DocumentStatus.FALTANDO: "faltando",
    }
    for row in rows:
        key = status_keys.get(row.status)
        if key:
            counts[key] += 1
        # Evidence counters cover uploaded documents only
        if row.kind != "document":
            continue
        if row.evidence_status == EvidenceStatus.SEM_EVIDENCIA:
            counts["sem_evidencia"] += 1
        elif row.evidence_status == EvidenceStatus.PENDENTE_VERIFICACAO:
            counts["pendente_verificacao"] += 1
    return DocumentationSummary(**counts)
