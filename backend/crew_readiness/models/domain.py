"""
Domain records for the readiness engine.

Canonical shapes only. Raw rows from spreadsheets, the REST layer or the
database are mapped onto these by ``models.ingest_schema`` before any engine
sees them. Every record is frozen; derived values are recomputed per query.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any, Optional


class DocumentStatus(str, Enum):
    OK = "OK"
    VENCIDO = "VENCIDO"                     # expired
    VENCENDO = "VENCENDO"                   # expiring within the horizon
    DURANTE_EMBARQUE = "DURANTE_EMBARQUE"   # expires inside the active window
    SEM_VALIDADE = "SEM_VALIDADE"           # type never expires
    FALTANDO = "FALTANDO"                   # required but absent


class EvidenceStatus(str, Enum):
    SEM_EVIDENCIA = "SEM_EVIDENCIA"
    PENDENTE_VERIFICACAO = "PENDENTE_VERIFICACAO"
    VERIFICADO = "VERIFICADO"


class ReadinessLevel(str, Enum):
    APTO = "APTO"
    ATENCAO = "ATENCAO"
    NAO_APTO = "NAO_APTO"


class LocationBucket(str, Enum):
    BASE = "base"
    HOSPEDADO = "hospedado"
    EMBARCADO = "embarcado"


# ── Reference data ─────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class DocumentType:
    code: str
    name: str = ""
    category: str = ""
    requires_expiration: bool = True


@dataclass(frozen=True)
class DocumentRecord:
    employee_id: str
    document_type_code: str
    issue_date: Optional[date] = None
    expiration_date: Optional[date] = None
    evidence_type: Optional[str] = None
    evidence_ref: Optional[str] = None
    verified: bool = False
    verified_by: Optional[str] = None
    verified_at: Optional[datetime] = None


@dataclass(frozen=True)
class DeploymentWindow:
    start: Optional[date]
    end: Optional[date]


@dataclass(frozen=True)
class Assignment:
    """One rotation of one employee inside one program."""
    employee_id: str
    program_id: str
    embark_date: Optional[date]
    disembark_date: Optional[date]


@dataclass(frozen=True)
class Deployment:
    employee_id: str
    start_date: Optional[date]
    end_date_expected: Optional[date] = None
    end_date_actual: Optional[date] = None

    @property
    def is_active(self) -> bool:
        return self.end_date_actual is None


@dataclass(frozen=True)
class ProgramMember:
    employee_id: str
    current_location: str = "Base"


@dataclass(frozen=True)
class Program:
    program_id: str
    window: DeploymentWindow
    members: tuple[ProgramMember, ...] = ()
    name: str = ""


# ── Derived values ─────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class ReadinessVerdict:
    employee_id: str
    level: ReadinessLevel
    missing: tuple[str, ...] = ()
    expired: tuple[str, ...] = ()
    expiring_during_window: tuple[str, ...] = ()
    evidence_pending: bool = False
    statuses: dict[str, DocumentStatus] = field(default_factory=dict)
    evidence: dict[str, EvidenceStatus] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "employee_id": self.employee_id,
            "level": self.level.value,
            "missing": list(self.missing),
            "expired": list(self.expired),
            "expiring_during_window": list(self.expiring_during_window),
            "evidence_pending": self.evidence_pending,
            "statuses": {code: s.value for code, s in self.statuses.items()},
            "evidence": {code: e.value for code, e in self.evidence.items()},
        }


@dataclass(frozen=True)
class RiskEntry:
    """Certificates valid through the current rotation that lapse before the next one."""
    employee_id: str
    program_id: str
    next_program_id: str
    codes: tuple[str, ...]
    gap_start: Optional[date] = None     # current disembark
    gap_end: Optional[date] = None       # next embark


RiskKey = tuple[str, str]


@dataclass(frozen=True)
class ProgramKPIs:
    program_id: str
    total: int = 0
    apto: int = 0
    atencao: int = 0
    nao_apto: int = 0
    evidence_pending: int = 0
    expiring_during_window: int = 0
    base: int = 0
    hospedado: int = 0
    embarcado: int = 0
    turnaround_risk: int = 0

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class DocumentationRow:
    """One line of the roster-wide documentation listing."""
    kind: str                          # "document" | "missing"
    employee_id: str
    code: str
    required: bool
    status: DocumentStatus
    evidence_status: EvidenceStatus
    record: Optional[DocumentRecord] = None


@dataclass(frozen=True)
class DocumentationSummary:
    vencidos: int = 0
    vencendo: int = 0
    durante_embarque: int = 0
    faltando: int = 0
    sem_evidencia: int = 0
    pendente_verificacao: int = 0

    def to_dict(self) -> dict[str, int]:
        return asdict(self)
