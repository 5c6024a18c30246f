"""Tests for BalanceCalculator."""

from ledger.models.transaction import Category, Transaction, TransactionSpec
from ledger.transactions import BalanceCalculator


def _store(run, categories, transactions, *entries):
    """Persist (type, value) entries under a single category."""
    category = Category(title="General")
    run(categories.save([category]))
    created = transactions.create([
        TransactionSpec(title=f"t{i}", type=kind, value=value, category=category)
        for i, (kind, value) in enumerate(entries)
    ])
    run(transactions.save(created))


class TestBalanceCalculator:
    """Balance = income - outcome, recomputed on every call."""

    def test_empty_ledger(self, run, transactions):
        """Test balance of an empty store is zero."""
        balance = run(BalanceCalculator(transactions).get_balance())
        assert balance.income == 0
        assert balance.outcome == 0
        assert balance.total == 0

    def test_income_minus_outcome(self, run, categories, transactions):
        """Test totals are partitioned by type."""
        _store(
            run, categories, transactions,
            ("income", 5000), ("outcome", 1200), ("income", 300), ("outcome", 100),
        )
        balance = run(BalanceCalculator(transactions).get_balance())
        assert balance.income == 5300
        assert balance.outcome == 1300
        assert balance.total == 4000

    def test_recomputed_on_each_call(self, run, categories, transactions):
        """Test no caching between calls."""
        calculator = BalanceCalculator(transactions)
        _store(run, categories, transactions, ("income", 100))
        assert run(calculator.get_balance()).total == 100

        _store(run, categories, transactions, ("outcome", 40))
        assert run(calculator.get_balance()).total == 60

    def test_unknown_types_are_ignored(self, run, categories, transactions):
        """Test a type that is neither income nor outcome counts nowhere."""
        _store(run, categories, transactions, ("income", 10), ("transfer", 99))
        balance = run(BalanceCalculator(transactions).get_balance())
        assert balance.income == 10
        assert balance.outcome == 0
        assert balance.total == 10

    def test_summarize_is_pure(self):
        """Test summarize works on any list of transactions."""
        category = Category(title="x")
        rows = [
            Transaction(title="a", type="income", value=1.5, category_id=category.id),
            Transaction(title="b", type="outcome", value=0.5, category_id=category.id),
        ]
        balance = BalanceCalculator.summarize(rows)
        assert balance.total == 1.0

    def test_total_can_be_negative(self, run, categories, transactions):
        """Test balance is not clamped at zero."""
        _store(run, categories, transactions, ("outcome", 25))
        assert run(BalanceCalculator(transactions).get_balance()).total == -25
