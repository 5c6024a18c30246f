"""
Import Transactions Service

Bulk ingestion of a CSV file (title, type, value, category; one header line).

FLOW:
1. Drain every row from the file source (completion barrier)
2. Trim cells, silently drop rows missing title, type or value
3. One lookup for all referenced categories
4. One batch insert for the category titles not found (deduplicated)
5. One batch insert for all transactions
6. Delete the source file

IMPORTANT DIFFERENCES FROM CreateTransactionService:
- No balance check: an import can drive the balance negative
- Type is not validated: whatever the file says is stored

Dropped rows are not reported in the return value. They show up as debug
log lines and as `skipped_count` on the import_completed audit event.

NOTE: Nothing is rolled back. If the file cannot be deleted, the error is
raised even though categories and transactions are already committed.
"""

from contextlib import aclosing
from typing import Optional
from uuid import UUID

import structlog

from ledger.audit import AuditLogger, create_correlation_id
from ledger.models.transaction import (
    Category,
    CSVTransaction,
    Transaction,
    TransactionSpec,
)
from ledger.services.files import CsvFileSource
from ledger.services.storage import (
    CategoryStorageInterface,
    StorageError,
    TransactionStorageInterface,
)


logger = structlog.get_logger(__name__)

# title, type, value, category
ROW_WIDTH = 4


class ImportTransactionsService:
    """Imports every valid row of a CSV file as a transaction."""

    def __init__(
        self,
        category_storage: CategoryStorageInterface,
        transaction_storage: TransactionStorageInterface,
        file_source: Optional[CsvFileSource] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._categories = category_storage
        self._transactions = transaction_storage
        self._files = file_source or CsvFileSource()
        self._audit_logger = audit_logger

    async def execute(
        self,
        file_path: str,
        correlation_id: Optional[UUID] = None,
    ) -> list[Transaction]:
        """
        Import a CSV file and delete it afterwards.

        Args:
            file_path: Path of the CSV file to import

        Returns:
            The persisted transactions, in file order

        Raises:
            OSError: File could not be opened, read or deleted
            StorageError: A lookup or batch save failed (audited as system_error)
        """
        correlation_id = correlation_id or create_correlation_id()

        if self._audit_logger:
            await self._audit_logger.log_import_started(
                file_path=file_path,
                correlation_id=correlation_id,
            )

        pending: list[CSVTransaction] = []
        category_titles: list[str] = []
        skipped = 0

        async with aclosing(self._files.rows(file_path)) as rows:
            async for line_number, cells in rows:
                row, reason = self._parse_row(line_number, cells)
                if row is None:
                    skipped += 1
                    await self._report_skipped(file_path, line_number, reason, correlation_id)
                    continue

                category_titles.append(row.category)
                pending.append(row)

        # All rows observed; resolve categories in bulk
        try:
            existing = await self._categories.find_by_titles(category_titles)
            existing_titles = {category.title for category in existing}

            new_titles = list(dict.fromkeys(
                title for title in category_titles if title not in existing_titles
            ))
            new_categories = self._categories.create(new_titles)
            await self._categories.save(new_categories)

            by_title: dict[str, Category] = {}
            for category in [*new_categories, *existing]:
                by_title.setdefault(category.title, category)

            transactions = self._transactions.create([
                TransactionSpec(
                    title=row.title,
                    type=row.type,
                    value=row.value,
                    category=by_title[row.category],
                )
                for row in pending
            ])
            await self._transactions.save(transactions)
        except StorageError as e:
            if self._audit_logger:
                await self._audit_logger.log_error(
                    error_type="import_storage_failed",
                    error_message=str(e),
                    details={"file_path": file_path, "rows": len(pending)},
                    correlation_id=correlation_id,
                )
            raise

        if self._audit_logger:
            await self._audit_logger.log_import_completed(
                file_path=file_path,
                imported_count=len(transactions),
                skipped_count=skipped,
                new_categories=new_titles,
                correlation_id=correlation_id,
            )

        await self._remove_source(file_path, correlation_id)

        return transactions

    @staticmethod
    def _parse_row(
        line_number: int,
        cells: list[str],
    ) -> tuple[Optional[CSVTransaction], Optional[str]]:
        """
        Turn raw cells into a CSVTransaction.

        Returns (row, None) on success, (None, reason) when the row is dropped.
        """
        trimmed = [cell.strip() for cell in cells[:ROW_WIDTH]]
        trimmed += [""] * (ROW_WIDTH - len(trimmed))
        title, transaction_type, value, category = trimmed

        if not title or not transaction_type or not value:
            return None, "missing title, type or value"

        try:
            amount = float(value)
        except ValueError:
            return None, f"value is not a number: {value!r}"

        return CSVTransaction(
            title=title,
            type=transaction_type,
            value=amount,
            category=category,
            line_number=line_number,
        ), None

    async def _report_skipped(
        self,
        file_path: str,
        line_number: int,
        reason: str,
        correlation_id: UUID,
    ) -> None:
        logger.debug(
            "import_row_skipped",
            file_path=file_path,
            line_number=line_number,
            reason=reason,
        )
        if self._audit_logger:
            await self._audit_logger.log_import_row_skipped(
                file_path=file_path,
                line_number=line_number,
                reason=reason,
                correlation_id=correlation_id,
            )

    async def _remove_source(self, file_path: str, correlation_id: UUID) -> None:
        try:
            await self._files.remove(file_path)
        except OSError as e:
            if self._audit_logger:
                await self._audit_logger.log_source_file_cleanup_failed(
                    file_path=file_path,
                    error_message=str(e),
                    correlation_id=correlation_id,
                )
            raise

        if self._audit_logger:
            await self._audit_logger.log_source_file_deleted(
                file_path=file_path,
                correlation_id=correlation_id,
            )
