"""
Crew readiness engine — compliance and deployment-readiness rules for offshore crew.

Public operations:
    classify_document_status     status of one certificate (optionally against a rotation)
    classify_evidence_status     evidence / verification trail of one certificate
    compute_readiness            APTO / ATENCAO / NAO_APTO verdict for one employee
    build_turnaround_risk_index  certificates lapsing between two consecutive rotations
    compute_program_kpis         program-level roll-up of readiness, location and risk
"""
from crew_readiness.models.domain import (
    DocumentStatus,
    EvidenceStatus,
    LocationBucket,
    ReadinessLevel,
)
from crew_readiness.services.document_status_engine import classify_document_status, classify_for_rotation
from crew_readiness.services.evidence_engine import classify_evidence_status
from crew_readiness.services.readiness_engine import compute_readiness, index_documents_by_employee
from crew_readiness.services.roster_kpi_engine import compute_program_kpis
from crew_readiness.services.turnaround_risk_engine import build_turnaround_risk_index

__all__ = [
    "DocumentStatus",
    "EvidenceStatus",
    "LocationBucket",
    "ReadinessLevel",
    "build_turnaround_risk_index",
    "classify_document_status",
    "classify_evidence_status",
    "classify_for_rotation",
    "compute_program_kpis",
    "compute_readiness",
    "index_documents_by_employee",
]
