"""
Ingestion adapter — raw rows in, canonical domain records out.

Rows arrive from spreadsheet imports, the portal's REST payloads and legacy
exports, each with its own field names (``expiration_date`` / ``expirationDate``
/ ``DATA_VENCIMENTO``). These Pydantic models accept every known alias and
normalise values once, so the engines only ever see ``models.domain`` records.

Dates go through the date normaliser: an unparseable date becomes None (and
later classifies as FALTANDO) instead of rejecting the row.

Usage:
    from crew_readiness.models.ingest_schema import load_document_records

    records = load_document_records(rows_from_xlsx)
"""
from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import date, datetime
from typing import Any, Callable, Optional, TypeVar

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError, field_validator

from crew_readiness.models.domain import (
    Assignment,
    Deployment,
    DeploymentWindow,
    DocumentRecord,
    DocumentType,
    Program,
    ProgramMember,
)
from crew_readiness.services.date_normalizer import normalize_date

logger = logging.getLogger("crew-readiness.ingest")

_TRUTHY = {"true", "1", "yes", "y", "sim", "s", "verificado"}

T = TypeVar("T")


def _aliases(*names: str) -> AliasChoices:
    return AliasChoices(*names)


def _to_text(value: Any) -> Any:
    if value is None:
        return None
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        value = int(value) if float(value).is_integer() else value
    return str(value).strip()


def _blank_to_none(value: Any) -> Any:
    text = _to_text(value)
    return text or None


class _RawRow(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True, str_strip_whitespace=True)


class RawDocumentType(_RawRow):
    """A document-type catalog entry."""
    code: str = Field(..., min_length=1, validation_alias=_aliases("code", "CODIGO", "TIPO_DOCUMENTO"))
    name: str = Field("", validation_alias=_aliases("name", "NOME"))
    category: str = Field("", validation_alias=_aliases("category", "CATEGORIA"))
    requires_expiration: bool = Field(
        True,
        validation_alias=_aliases("requires_expiration", "requiresExpiration", "EXIGE_VALIDADE"),
    )

    @field_validator("code", mode="before")
    @classmethod
    def _code(cls, v):
        return (_to_text(v) or "").upper()

    @field_validator("name", "category", mode="before")
    @classmethod
    def _text(cls, v):
        return _to_text(v) or ""

    @field_validator("requires_expiration", mode="before")
    @classmethod
    def _expires(cls, v):
        # Blank means "not stated": expiring is the stricter assumption
        if v is None or (isinstance(v, str) and not v.strip()):
            return True
        if isinstance(v, str):
            return v.strip().lower() in _TRUTHY
        return bool(v)

    def to_domain(self) -> DocumentType:
        return DocumentType(
            code=self.code,
            name=self.name or self.code,
            category=self.category,
            requires_expiration=self.requires_expiration,
        )


class RawDocumentRecord(_RawRow):
    """One certificate held by one employee."""
    employee_id: str = Field(
        ..., min_length=1,
        validation_alias=_aliases("employee_id", "employeeId", "COLABORADOR_ID"),
    )
    document_type_code: str = Field(
        ..., min_length=1,
        validation_alias=_aliases("document_type_code", "documentTypeCode", "document_code", "TIPO_DOCUMENTO"),
    )
    issue_date: Optional[date] = Field(
        None, validation_alias=_aliases("issue_date", "issueDate", "DATA_EMISSAO"),
    )
    expiration_date: Optional[date] = Field(
        None, validation_alias=_aliases("expiration_date", "expirationDate", "DATA_VENCIMENTO"),
    )
    evidence_type: Optional[str] = Field(
        None, validation_alias=_aliases("evidence_type", "evidenceType", "EVIDENCIA_TIPO"),
    )
    evidence_ref: Optional[str] = Field(
        None, validation_alias=_aliases("evidence_ref", "evidenceRef", "EVIDENCIA_REF", "file_url"),
    )
    verified: bool = Field(False, validation_alias=_aliases("verified", "VERIFIED", "VERIFICADO"))
    verified_by: Optional[str] = Field(
        None, validation_alias=_aliases("verified_by", "verifiedBy", "VERIFICADO_POR"),
    )
    verified_at: Optional[datetime] = Field(
        None, validation_alias=_aliases("verified_at", "verifiedAt", "VERIFICADO_EM"),
    )

    @field_validator("employee_id", mode="before")
    @classmethod
    def _employee(cls, v):
        return _to_text(v) or ""

    @field_validator("document_type_code", mode="before")
    @classmethod
    def _code(cls, v):
        return (_to_text(v) or "").upper()

    @field_validator("issue_date", "expiration_date", mode="before")
    @classmethod
    def _date(cls, v):
        return normalize_date(v)

    @field_validator("evidence_type", "evidence_ref", "verified_by", mode="before")
    @classmethod
    def _optional_text(cls, v):
        return _blank_to_none(v)

    @field_validator("verified", mode="before")
    @classmethod
    def _flag(cls, v):
        if isinstance(v, str):
            return v.strip().lower() in _TRUTHY
        return bool(v)

    @field_validator("verified_at", mode="before")
    @classmethod
    def _timestamp(cls, v):
        if isinstance(v, datetime):
            return v
        if isinstance(v, str) and v.strip():
            try:
                return datetime.fromisoformat(v.strip().replace("Z", "+00:00"))
            except ValueError:
                pass
        day = normalize_date(v)
        return datetime.combine(day, datetime.min.time()) if day else None

    def to_domain(self) -> DocumentRecord:
        return DocumentRecord(**self.model_dump())


class RawAssignment(_RawRow):
    """One employee's rotation inside one program."""
    employee_id: str = Field(
        ..., min_length=1, validation_alias=_aliases("employee_id", "employeeId", "COLABORADOR_ID"),
    )
    program_id: str = Field(
        ..., min_length=1,
        validation_alias=_aliases("program_id", "programId", "PROGRAMACAO_ID", "programacao_id"),
    )
    embark_date: Optional[date] = Field(
        None, validation_alias=_aliases("embark_date", "embarkDate", "EMBARQUE_DT"),
    )
    disembark_date: Optional[date] = Field(
        None, validation_alias=_aliases("disembark_date", "disembarkDate", "DESEMBARQUE_DT"),
    )

    @field_validator("employee_id", "program_id", mode="before")
    @classmethod
    def _ids(cls, v):
        return _to_text(v) or ""

    @field_validator("embark_date", "disembark_date", mode="before")
    @classmethod
    def _date(cls, v):
        return normalize_date(v)

    def to_domain(self) -> Assignment:
        return Assignment(**self.model_dump())


class RawDeployment(_RawRow):
    employee_id: str = Field(
        ..., min_length=1, validation_alias=_aliases("employee_id", "employeeId", "COLABORADOR_ID"),
    )
    start_date: Optional[date] = Field(
        None, validation_alias=_aliases("start_date", "startDate", "EMBARQUE_DT"),
    )
    end_date_expected: Optional[date] = Field(
        None, validation_alias=_aliases("end_date_expected", "endDateExpected", "DESEMBARQUE_DT"),
    )
    end_date_actual: Optional[date] = Field(
        None, validation_alias=_aliases("end_date_actual", "endDateActual", "DESEMBARQUE_REAL_DT"),
    )

    @field_validator("employee_id", mode="before")
    @classmethod
    def _employee(cls, v):
        return _to_text(v) or ""

    @field_validator("start_date", "end_date_expected", "end_date_actual", mode="before")
    @classmethod
    def _date(cls, v):
        return normalize_date(v)

    def to_domain(self) -> Deployment:
        return Deployment(**self.model_dump())


class RawProgramMember(_RawRow):
    employee_id: str = Field("", validation_alias=_aliases("employee_id", "employeeId", "COLABORADOR_ID", "id"))
    current_location: str = Field(
        "Base", validation_alias=_aliases("current_location", "currentLocation", "LOCAL_ATUAL"),
    )

    @field_validator("employee_id", mode="before")
    @classmethod
    def _employee(cls, v):
        return _to_text(v) or ""

    @field_validator("current_location", mode="before")
    @classmethod
    def _location(cls, v):
        return _to_text(v) or "Base"


class RawProgram(_RawRow):
    """A named rotation with its crew list."""
    program_id: str = Field(..., min_length=1, validation_alias=_aliases("program_id", "programId", "id", "ID"))
    name: str = Field("", validation_alias=_aliases("name", "NOME", "TITULO"))
    embark_date: Optional[date] = Field(
        None, validation_alias=_aliases("embark_date", "embarkDate", "EMBARQUE_DT"),
    )
    disembark_date: Optional[date] = Field(
        None, validation_alias=_aliases("disembark_date", "disembarkDate", "DESEMBARQUE_DT"),
    )
    members: list[RawProgramMember] = Field(
        default_factory=list, validation_alias=_aliases("members", "COLABORADORES"),
    )

    @field_validator("program_id", "name", mode="before")
    @classmethod
    def _text(cls, v):
        return _to_text(v) or ""

    @field_validator("embark_date", "disembark_date", mode="before")
    @classmethod
    def _date(cls, v):
        return normalize_date(v)

    def to_domain(self) -> Program:
        return Program(
            program_id=self.program_id,
            name=self.name,
            window=DeploymentWindow(start=self.embark_date, end=self.disembark_date),
            members=tuple(
                ProgramMember(employee_id=m.employee_id, current_location=m.current_location)
                for m in self.members
            ),
        )


# ── Bulk loaders ───────────────────────────────────────────────────────────────

def _load(rows: Iterable[dict], model: type[BaseModel], label: str, convert: Callable[[Any], T]) -> list[T]:
    out: list[T] = []
    for i, row in enumerate(rows):
        try:
            out.append(convert(model.model_validate(row)))
        except ValidationError as e:
            logger.warning(f"Skipping {label} row {i}: {e.error_count()} validation error(s) — {e.errors()[0]['msg']}")
    if out:
        logger.info(f"Loaded {len(out)} {label} row(s)")
    return out


def load_document_types(rows: Iterable[dict]) -> dict[str, DocumentType]:
    """Catalog keyed by code; later rows override earlier ones."""
    types = _load(rows, RawDocumentType, "document type", lambda m: m.to_domain())
    return {t.code: t for t in types}


def load_document_records(rows: Iterable[dict]) -> list[DocumentRecord]:
    return _load(rows, RawDocumentRecord, "document", lambda m: m.to_domain())


def load_assignments(rows: Iterable[dict]) -> list[Assignment]:
    return _load(rows, RawAssignment, "assignment", lambda m: m.to_domain())


def load_deployments(rows: Iterable[dict]) -> list[Deployment]:
    return _load(rows, RawDeployment, "deployment", lambda m: m.to_domain())


def load_programs(rows: Iterable[dict]) -> list[Program]:
    return _load(rows, RawProgram, "program", lambda m: m.to_domain())
