"""
test_ingest_schema.py — Unit tests for the ingestion adapter.

Tests cover:
  - field-name aliases from spreadsheet, REST and legacy exports
  - date normalisation at the boundary (serials, BR format, garbage → None)
  - truthy flags ("sim", "true", 1) for verified / requires_expiration
  - invalid rows skipped with a warning instead of aborting the load
  - program rows with nested crew lists
"""

import logging
from datetime import date, datetime

from crew_readiness.models.domain import DocumentRecord, DocumentType, Program
from crew_readiness.models.ingest_schema import (
    RawDocumentRecord,
    load_assignments,
    load_deployments,
    load_document_records,
    load_document_types,
    load_programs,
)


class TestDocumentRecords:

    def test_legacy_spreadsheet_aliases(self):
        row = {
            "COLABORADOR_ID": 1042,
            "TIPO_DOCUMENTO": "aso",
            "DATA_EMISSAO": "05/01/2025",
            "DATA_VENCIMENTO": 46023,
            "EVIDENCIA_TIPO": "PDF",
            "EVIDENCIA_REF": "aso-1042.pdf",
            "VERIFIED": "sim",
        }
        [record] = load_document_records([row])
        assert record == DocumentRecord(
            employee_id="1042",
            document_type_code="ASO",
            issue_date=date(2025, 1, 5),
            expiration_date=date(2026, 1, 1),
            evidence_type="PDF",
            evidence_ref="aso-1042.pdf",
            verified=True,
        )

    def test_camel_case_aliases(self):
        row = {
            "employeeId": "E1",
            "documentTypeCode": "NR-35",
            "expirationDate": "2026-02-05",
            "verified": True,
            "verifiedBy": "rh.ana",
            "verifiedAt": "2026-01-02T10:00:00Z",
        }
        record = RawDocumentRecord.model_validate(row).to_domain()
        assert record.expiration_date == date(2026, 2, 5)
        assert record.verified_by == "rh.ana"
        assert record.verified_at.date() == date(2026, 1, 2)

    def test_snake_case_and_file_url(self):
        row = {"employee_id": "E1", "document_code": "HUET", "file_url": "s3://x.pdf", "evidence_type": " "}
        [record] = load_document_records([row])
        assert record.evidence_ref == "s3://x.pdf"
        assert record.evidence_type is None
        assert record.verified is False

    def test_unparseable_expiration_becomes_none(self):
        [record] = load_document_records([
            {"employee_id": "E1", "document_type_code": "ASO", "expiration_date": "em breve"}
        ])
        assert record.expiration_date is None

    def test_invalid_rows_skipped_with_warning(self, caplog):
        rows = [
            {"employee_id": "E1", "document_type_code": "ASO"},
            {"employee_id": "", "document_type_code": "ASO"},
            {"document_type_code": "HUET"},
            {"employee_id": "E2", "document_type_code": "HUET"},
        ]
        with caplog.at_level(logging.WARNING, logger="crew-readiness.ingest"):
            records = load_document_records(rows)
        assert [r.employee_id for r in records] == ["E1", "E2"]
        assert "row 1" in caplog.text
        assert "row 2" in caplog.text


class TestCatalogAndTimeline:

    def test_document_types(self):
        catalog = load_document_types([
            {"code": "aso", "name": "Atestado", "requires_expiration": "true"},
            {"CODIGO": "RG", "NOME": "Registro Geral", "EXIGE_VALIDADE": "nao"},
            {"code": "HUET", "requiresExpiration": None},
        ])
        assert catalog["ASO"] == DocumentType("ASO", "Atestado", "", True)
        assert catalog["RG"].requires_expiration is False
        assert catalog["HUET"].requires_expiration is True
        assert catalog["HUET"].name == "HUET"

    def test_assignments(self):
        [a] = load_assignments([
            {"COLABORADOR_ID": "E1", "PROGRAMACAO_ID": 77, "EMBARQUE_DT": "2026-01-18", "DESEMBARQUE_DT": 46054}
        ])
        assert (a.employee_id, a.program_id) == ("E1", "77")
        assert (a.embark_date, a.disembark_date) == (date(2026, 1, 18), date(2026, 2, 1))

    def test_deployments(self):
        [active, closed] = load_deployments([
            {"employee_id": "E1", "start_date": "2026-01-12", "end_date_expected": "2026-01-26"},
            {"employee_id": "E1", "start_date": "2025-12-01", "end_date_actual": datetime(2025, 12, 15, 18, 0)},
        ])
        assert active.is_active is True
        assert closed.is_active is False
        assert closed.end_date_actual == date(2025, 12, 15)

    def test_programs_with_nested_crew(self):
        [program] = load_programs([{
            "id": "P1",
            "TITULO": "P-74 janeiro",
            "EMBARQUE_DT": "2026-01-12",
            "DESEMBARQUE_DT": "2026-01-26",
            "COLABORADORES": [
                {"COLABORADOR_ID": "E1", "LOCAL_ATUAL": "Embarcado"},
                {"id": 7},
            ],
        }])
        assert isinstance(program, Program)
        assert program.window.start == date(2026, 1, 12)
        assert [(m.employee_id, m.current_location) for m in program.members] == [
            ("E1", "Embarcado"), ("7", "Base"),
        ]
