"""Tests for the component factory."""

import pytest

from ledger.config import get_settings
from ledger.orchestrator import create_app_components
from ledger.services.storage import (
    InMemoryCategoryStorage,
    SQLiteAuditStorage,
    SQLiteCategoryStorage,
)


@pytest.fixture(autouse=True)
def fresh_settings():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class TestCreateAppComponents:
    """The factory wires one shared set of stores into every service."""

    def test_memory_backend(self, run, write_csv):
        """Test a full create/import/list cycle on the memory backend."""
        ledger = create_app_components(backend="memory")
        assert isinstance(ledger.category_storage, InMemoryCategoryStorage)

        run(ledger.create_transaction.execute(
            title="Salary", value=5000, type="income", category="Job",
        ))
        path = write_csv(
            "title, type, value, category",
            "Rent, outcome, 1200, Housing",
            "Bonus, income, 100, Job",
        )
        run(ledger.import_transactions.execute(path))

        listing = run(ledger.list_transactions.execute())
        assert [t.title for t in listing.transactions] == ["Salary", "Rent", "Bonus"]
        assert listing.balance.total == 3900
        assert run(ledger.balance_calculator.get_balance()) == listing.balance
        assert len(ledger.category_storage) == 2

    def test_sqlite_backend(self, run, tmp_path):
        """Test the sqlite backend shares one client across stores."""
        ledger = create_app_components(
            backend="sqlite",
            database_path=str(tmp_path / "ledger.db"),
        )
        assert isinstance(ledger.category_storage, SQLiteCategoryStorage)

        created = run(ledger.create_transaction.execute(
            title="Salary", value=10, type="income", category="Job",
        ))
        listing = run(ledger.list_transactions.execute())
        assert listing.transactions[0].id == created.id
        assert listing.transactions[0].category.title == "Job"

        audit = SQLiteAuditStorage(ledger.sqlite_client)
        assert run(audit.get_recent_events())
        ledger.sqlite_client.close()

    def test_backend_from_settings(self, monkeypatch):
        """Test the configured backend is used by default."""
        monkeypatch.setenv("LEDGER_STORAGE_BACKEND", "memory")
        ledger = create_app_components()
        assert ledger.sqlite_client is None

    def test_unknown_backend(self):
        """Test an unknown backend is rejected."""
        with pytest.raises(ValueError):
            create_app_components(backend="postgres")
