"""
Turnaround risk index builder.

A "turnaround risk" is a certificate that is still valid when the worker
disembarks from the current rotation but lapses before the next scheduled
embarkation. A "status today" check never sees it, yet it grounds the worker
on their next trip unless renewed during the shore break.

For every employee, rotations are sorted by embark date and each adjacent
(current, next) pair is inspected. A required document is at risk when

    current.disembark_date < expiration_date < next.embark_date

The index is sparse: only (employee_id, current_program_id) pairs with at
least one at-risk document appear.
"""
from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from datetime import date
from typing import Optional

from crew_readiness.config import REQUIRED_DOC_TYPES
from crew_readiness.models.domain import Assignment, DocumentType, RiskEntry, RiskKey
from crew_readiness.services.date_normalizer import normalize_date
from crew_readiness.services.perf_monitor import timed
from crew_readiness.services.readiness_engine import (
    DocumentsByEmployee,
    live_record,
    normalize_code,
)

logger = logging.getLogger("crew-readiness.turnaround")


def _timeline_by_employee(
    assignments: Iterable[Assignment],
) -> dict[str, list[tuple[date, date, Assignment]]]:
    timeline: dict[str, list[tuple[date, date, Assignment]]] = {}
    skipped = 0
    for a in assignments:
        employee_id = (a.employee_id or "").strip()
        embark = normalize_date(a.embark_date)
        disembark = normalize_date(a.disembark_date)
        if not employee_id or embark is None or disembark is None:
            skipped += 1
            continue
        timeline.setdefault(employee_id, []).append((embark, disembark, a))

    if skipped:
        logger.debug(f"Skipped {skipped} assignment(s) with missing employee or unparseable dates")

    for rotations in timeline.values():
        # Stable on ties: input order is kept for equal embark dates
        rotations.sort(key=lambda item: item[0])
    return timeline


@timed
def build_turnaround_risk_index(
    assignments: Iterable[Assignment],
    documents_by_employee: DocumentsByEmployee,
    required_codes: Optional[Iterable[str]] = None,
    document_types: Optional[Mapping[str, DocumentType]] = None,
) -> dict[RiskKey, RiskEntry]:
    """Return {(employee_id, current_program_id): RiskEntry} for every rotation gap at risk."""
    codes = [normalize_code(c) for c in (required_codes if required_codes is not None else REQUIRED_DOC_TYPES)]
    codes = list(dict.fromkeys(c for c in codes if c))
    catalog = document_types or {}

    index: dict[RiskKey, RiskEntry] = {}

    for employee_id, rotations in _timeline_by_employee(assignments).items():
        for (_, cur_disembark, current), (next_embark, _, upcoming) in zip(rotations, rotations[1:]):
            at_risk: list[str] = []
            for code in codes:
                doc_type = catalog.get(code)
                if doc_type is not None and not doc_type.requires_expiration:
                    continue
                record = live_record(documents_by_employee, employee_id, code)
                if record is None:
                    continue
                expiration = normalize_date(record.expiration_date)
                if expiration is None:
                    continue
                if cur_disembark < expiration < next_embark:
                    at_risk.append(code)

            if at_risk:
                index[(employee_id, current.program_id)] = RiskEntry(
                    employee_id=employee_id,
                    program_id=current.program_id,
                    next_program_id=upcoming.program_id,
                    codes=tuple(at_risk),
                    gap_start=cur_disembark,
                    gap_end=next_embark,
                )

    logger.info(f"Turnaround risk index: {len(index)} rotation gap(s) at risk")
    return index
