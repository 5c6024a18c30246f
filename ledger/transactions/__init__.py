"""Transaction services package."""

from ledger.transactions.balance import BalanceCalculator
from ledger.transactions.create import CreateTransactionService
from ledger.transactions.importer import ImportTransactionsService
from ledger.transactions.listing import ListTransactionsService

__all__ = [
    "BalanceCalculator",
    "CreateTransactionService",
    "ImportTransactionsService",
    "ListTransactionsService",
]
