"""
Balance Calculator

CRITICAL: This is the ONLY place the ledger balance is computed.
Validation, listings and reports all ask this calculator; nothing else
sums transaction values.

The balance is recomputed from storage on every call. There is no cache,
because other requests may have inserted transactions in the meantime.
"""

from ledger.models.transaction import Balance, Transaction, TransactionType
from ledger.services.storage import TransactionStorageInterface


class BalanceCalculator:
    """Aggregates stored transactions into income, outcome and total."""

    def __init__(self, storage: TransactionStorageInterface):
        self._storage = storage

    async def get_balance(self) -> Balance:
        """
        Read every stored transaction and sum values by type.

        Transactions whose type is neither income nor outcome (possible via
        CSV import) count towards neither sum.
        """
        transactions = await self._storage.get_all()
        return self.summarize(transactions)

    @staticmethod
    def summarize(transactions: list[Transaction]) -> Balance:
        income = 0.0
        outcome = 0.0

        for transaction in transactions:
            if transaction.type == TransactionType.INCOME.value:
                income += transaction.value
            elif transaction.type == TransactionType.OUTCOME.value:
                outcome += transaction.value

        return Balance(income=income, outcome=outcome, total=income - outcome)
