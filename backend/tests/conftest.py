"""
conftest.py — Shared pytest fixtures for the crew readiness test suite.

No database or external service fixtures are defined here.  All tests in this
suite are pure unit tests that exercise the engines in isolation with an
explicit reference date, so nothing depends on the wall clock.

Import-path bootstrapping:
    The ``backend/`` directory is inserted into sys.path so that all
    ``crew_readiness.*`` imports resolve correctly regardless of where pytest
    is invoked (and without an editable install).
"""

import os
import sys
from datetime import date

import pytest

# ---------------------------------------------------------------------------
# Ensure ``backend/`` is on the import path before any package imports occur.
# ---------------------------------------------------------------------------
_BACKEND_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if _BACKEND_DIR not in sys.path:
    sys.path.insert(0, _BACKEND_DIR)


# ---------------------------------------------------------------------------
# Reference date
# ---------------------------------------------------------------------------

@pytest.fixture(scope="session")
def today():
    """Fixed reference date used across the suite: 2026-01-10."""
    return date(2026, 1, 10)


# ---------------------------------------------------------------------------
# Document catalog
# ---------------------------------------------------------------------------

@pytest.fixture(scope="session")
def catalog():
    """
    Default offshore catalog: five required expiring certificates, one
    optional expiring certificate (NR-37) and one identity document (RG)
    that never expires.
    """
    from crew_readiness.models.domain import DocumentType
    return {
        "ASO": DocumentType("ASO", "Atestado de Saúde Ocupacional", "saude"),
        "CBSP": DocumentType("CBSP", "Curso Básico de Segurança de Plataforma", "treinamento"),
        "HUET": DocumentType("HUET", "Helicopter Underwater Escape Training", "treinamento"),
        "NR-33": DocumentType("NR-33", "Espaço confinado", "norma"),
        "NR-35": DocumentType("NR-35", "Trabalho em altura", "norma"),
        "NR-37": DocumentType("NR-37", "Plataformas de petróleo", "norma"),
        "RG": DocumentType("RG", "Registro Geral", "identidade", requires_expiration=False),
    }


# ---------------------------------------------------------------------------
# Record factory
# ---------------------------------------------------------------------------

@pytest.fixture
def make_record():
    """
    Factory for DocumentRecord with verified evidence by default, so tests
    only spell out the fields they care about.
    """
    from crew_readiness.models.domain import DocumentRecord

    def _make(code, expiration, employee_id="E001", **overrides):
        fields = {
            "employee_id": employee_id,
            "document_type_code": code,
            "issue_date": date(2025, 1, 1),
            "expiration_date": expiration,
            "evidence_type": "PDF",
            "evidence_ref": f"s3://docs/{employee_id}/{code}.pdf",
            "verified": True,
            "verified_by": "rh.ana",
        }
        fields.update(overrides)
        return DocumentRecord(**fields)

    return _make


@pytest.fixture
def compliant_documents(make_record):
    """
    E001 holds every required certificate, all valid until 2027 and verified.
    Indexed as employee_id → {code → record}.
    """
    from crew_readiness.services.readiness_engine import index_documents_by_employee
    records = [
        make_record(code, date(2027, 6, 30))
        for code in ("ASO", "CBSP", "HUET", "NR-33", "NR-35")
    ]
    return index_documents_by_employee(records)
