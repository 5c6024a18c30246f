"""
Data Models Package

This package contains all Pydantic models used in the Ledger system.
All data flowing through the system must conform to these schemas.
"""

from ledger.models.transaction import (
    Balance,
    Category,
    CSVTransaction,
    Transaction,
    TransactionListing,
    TransactionSpec,
    TransactionType,
)
from ledger.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Ledger models
    "Balance",
    "Category",
    "CSVTransaction",
    "Transaction",
    "TransactionListing",
    "TransactionSpec",
    "TransactionType",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
