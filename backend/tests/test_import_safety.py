"""
test_import_safety.py — Import and circular-import checks.

Verifies that:
  1. Every crew_readiness module imports cleanly on its own.
  2. The engines import without pulling in pydantic; only the ingestion
     adapter depends on it.

No database, network, or external services are required.
"""

import importlib
import os
import subprocess
import sys

import pytest

_BACKEND_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))

MODULES = [
    "crew_readiness",
    "crew_readiness.config",
    "crew_readiness.models.domain",
    "crew_readiness.models.ingest_schema",
    "crew_readiness.services.date_normalizer",
    "crew_readiness.services.document_status_engine",
    "crew_readiness.services.evidence_engine",
    "crew_readiness.services.readiness_engine",
    "crew_readiness.services.turnaround_risk_engine",
    "crew_readiness.services.deployment_timeline",
    "crew_readiness.services.roster_kpi_engine",
    "crew_readiness.services.documentation_report",
    "crew_readiness.services.logging_config",
    "crew_readiness.services.perf_monitor",
]


class TestModuleImports:

    @pytest.mark.parametrize("name", MODULES)
    def test_module_imports(self, name):
        module = importlib.import_module(name)
        assert module.__name__ == name

    def test_public_api_exports(self):
        package = importlib.import_module("crew_readiness")
        for name in package.__all__:
            assert hasattr(package, name), name


class TestEngineIsolation:

    def test_engines_do_not_import_pydantic(self):
        """A fresh interpreter importing the engines must not load pydantic."""
        code = (
            "import sys\n"
            "import crew_readiness\n"
            "import crew_readiness.services.documentation_report\n"
            "import crew_readiness.services.deployment_timeline\n"
            "sys.exit(1 if 'pydantic' in sys.modules else 0)\n"
        )
        env = dict(os.environ, PYTHONPATH=_BACKEND_DIR)
        result = subprocess.run([sys.executable, "-c", code], env=env, capture_output=True, text=True)
        assert result.returncode == 0, result.stderr
