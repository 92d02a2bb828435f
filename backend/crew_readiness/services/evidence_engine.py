"""Evidence verification tracker — independent of expiration status."""
from typing import Optional

from crew_readiness.models.domain import DocumentRecord, EvidenceStatus


def _present(value: Optional[str]) -> bool:
    return bool(value and str(value).strip())


def classify_evidence_status(record: Optional[DocumentRecord]) -> EvidenceStatus:
    """
    SEM_EVIDENCIA         neither evidence type nor reference attached
    PENDENTE_VERIFICACAO  evidence attached, not yet verified by staff
    VERIFICADO            evidence attached and verified
    """
    if record is None:
        return EvidenceStatus.SEM_EVIDENCIA
    if not _present(record.evidence_type) and not _present(record.evidence_ref):
        return EvidenceStatus.SEM_EVIDENCIA
    if not record.verified:
        return EvidenceStatus.PENDENTE_VERIFICACAO
    return EvidenceStatus.VERIFICADO
