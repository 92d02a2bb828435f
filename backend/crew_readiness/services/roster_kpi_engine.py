"""Roster KPI aggregator — program-level tally of readiness, location and turnaround risk."""
from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from datetime import date
from typing import Optional

from crew_readiness.config import EXPIRING_SOON_DAYS, REQUIRED_DOC_TYPES
from crew_readiness.models.domain import (
    DocumentType,
    Program,
    ProgramKPIs,
    ReadinessLevel,
    RiskEntry,
    RiskKey,
)
from crew_readiness.services.deployment_timeline import normalize_location
from crew_readiness.services.perf_monitor import timed
from crew_readiness.services.readiness_engine import DocumentsByEmployee, compute_readiness

logger = logging.getLogger("crew-readiness.kpi")


@timed
def compute_program_kpis(
    program: Program,
    documents_by_employee: DocumentsByEmployee,
    risk_index: Mapping[RiskKey, RiskEntry],
    required_codes: Optional[Iterable[str]] = None,
    document_types: Optional[Mapping[str, DocumentType]] = None,
    today: Optional[date] = None,
    expiring_soon_days: int = EXPIRING_SOON_DAYS,
) -> ProgramKPIs:
    """
    Tally one program's crew.

    Every member counts towards ``total`` and one location bucket; members
    with an employee id are additionally evaluated for readiness against the
    program window and looked up in the turnaround risk index.
    """
    codes = tuple(required_codes) if required_codes is not None else REQUIRED_DOC_TYPES
    counts = {
        "total": 0, "apto": 0, "atencao": 0, "nao_apto": 0,
        "evidence_pending": 0, "expiring_during_window": 0,
        "base": 0, "hospedado": 0, "embarcado": 0, "turnaround_risk": 0,
    }

    for member in program.members:
        counts["total"] += 1
        counts[normalize_location(member.current_location).value] += 1

        employee_id = (member.employee_id or "").strip()
        if not employee_id:
            continue

        verdict = compute_readiness(
            employee_id,
            codes,
            documents_by_employee,
            program.window,
            today=today,
            document_types=document_types,
            expiring_soon_days=expiring_soon_days,
        )
        if verdict.level == ReadinessLevel.APTO:
            counts["apto"] += 1
        elif verdict.level == ReadinessLevel.ATENCAO:
            counts["atencao"] += 1
        else:
            counts["nao_apto"] += 1
        if verdict.evidence_pending:
            counts["evidence_pending"] += 1
        if verdict.expiring_during_window:
            counts["expiring_during_window"] += 1
        if (employee_id, program.program_id) in risk_index:
            counts["turnaround_risk"] += 1

    logger.info(
        f"Program {program.program_id}: {counts['total']} crew — "
        f"{counts['apto']} apto / {counts['atencao']} atencao / {counts['nao_apto']} nao apto, "
        f"{counts['turnaround_risk']} turnaround risk",
        extra={"program_id": program.program_id},
    )
    return ProgramKPIs(program_id=program.program_id, **counts)
