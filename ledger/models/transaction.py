"""
Core Data Models for Ledger

These models define the schemas for all data flowing through the system.
They are designed to:
1. Enforce type safety at runtime
2. Be serializable for storage and logging
3. Keep the category reference explicit (category_id plus the joined category)

DESIGN DECISION: Transaction.type is a plain string, not TransactionType.
The single-create path validates it strictly; the CSV import path does not.
Both paths persist through the same model, so the model itself stays lenient.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


# =============================================================================
# ENUMS
# =============================================================================

class TransactionType(str, Enum):
    """Direction of a ledger entry."""
    INCOME = "income"
    OUTCOME = "outcome"

    @classmethod
    def values(cls) -> tuple[str, ...]:
        return tuple(member.value for member in cls)


# =============================================================================
# PERSISTED ENTITIES
# =============================================================================

class Category(BaseModel):
    """
    Named grouping for transactions.

    Created lazily the first time a title is referenced. There is no
    uniqueness constraint on title: two concurrent resolutions of the same
    new title can both create a row.
    """

    id: UUID = Field(
        default_factory=uuid4,
        description="Unique category ID"
    )
    title: str = Field(
        ...,
        description="Category title (unique by convention only)"
    )
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)


class Transaction(BaseModel):
    """
    A single income or outcome ledger entry.

    CRITICAL: category_id always references a saved Category.
    Storage reads always populate `category` from category_id.
    Transactions are never updated or deleted by the core.
    """

    id: UUID = Field(
        default_factory=uuid4,
        description="Unique transaction ID"
    )
    title: str
    type: str = Field(
        ...,
        description="'income' or 'outcome' (unchecked on import)"
    )
    # Floating point, non-negative by convention
    value: float
    category_id: UUID = Field(
        ...,
        description="ID of the category this transaction belongs to"
    )
    category: Optional[Category] = Field(
        default=None,
        description="Joined category, populated on every storage read"
    )
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    @field_validator('type', mode='before')
    @classmethod
    def unwrap_type(cls, v):
        """Store TransactionType members as their plain value."""
        return v.value if isinstance(v, TransactionType) else v


# =============================================================================
# INPUT / READ MODELS
# =============================================================================

class TransactionSpec(BaseModel):
    """Unsaved transaction input used for (bulk) creation."""

    title: str
    type: str
    value: float
    category: Category

    @field_validator('type', mode='before')
    @classmethod
    def unwrap_type(cls, v):
        return v.value if isinstance(v, TransactionType) else v


class CSVTransaction(BaseModel):
    """
    One surviving row of an imported CSV file.

    Cells are already trimmed. Only presence of title/type/value is checked.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    title: str
    type: str
    value: float
    category: str
    line_number: int = Field(
        ...,
        ge=1,
        description="1-based line number in the source file"
    )


class Balance(BaseModel):
    """Aggregate of every stored transaction."""

    income: float = 0.0
    outcome: float = 0.0
    total: float = 0.0


class TransactionListing(BaseModel):
    """All stored transactions together with the current balance."""

    transactions: list[Transaction] = Field(default_factory=list)
    balance: Balance
