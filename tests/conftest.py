"""
Shared fixtures.

Services are async; tests drive them with `run(...)` (asyncio.run) so no
async pytest plugin is needed.
"""

import asyncio

import pytest

from ledger.audit import AuditLogger
from ledger.config import ImportSettings
from ledger.services.files import CsvFileSource
from ledger.services.storage import (
    InMemoryAuditStorage,
    InMemoryCategoryStorage,
    InMemoryTransactionStorage,
)


@pytest.fixture
def run():
    """Run a coroutine to completion."""
    return asyncio.run


@pytest.fixture
def categories():
    return InMemoryCategoryStorage()


@pytest.fixture
def transactions(categories):
    return InMemoryTransactionStorage(categories)


@pytest.fixture
def audit_storage():
    return InMemoryAuditStorage()


@pytest.fixture
def audit_logger(audit_storage):
    return AuditLogger(audit_storage)


@pytest.fixture
def file_source():
    return CsvFileSource(ImportSettings())


@pytest.fixture
def write_csv(tmp_path):
    """Write rows (header first) to a CSV file and return its path."""
    def _write(*lines: str, name: str = "import.csv") -> str:
        path = tmp_path / name
        path.write_text("\n".join(lines) + "\n", encoding="utf-8")
        return str(path)

    return _write
