"""
List Transactions Service

Read model for "show me everything": every stored transaction (categories
joined) together with the balance.
"""

from ledger.models.transaction import TransactionListing
from ledger.services.storage import TransactionStorageInterface
from ledger.transactions.balance import BalanceCalculator


class ListTransactionsService:
    """Returns all transactions and the current balance."""

    def __init__(self, transaction_storage: TransactionStorageInterface):
        self._storage = transaction_storage

    async def execute(self) -> TransactionListing:
        # One read, so the listed rows and the balance always agree
        transactions = await self._storage.get_all()
        return TransactionListing(
            transactions=transactions,
            balance=BalanceCalculator.summarize(transactions),
        )
