from __future__ import annotations

"""
Ledger transaction model.

Scope
- Pure Pydantic v2 models; no I/O.
- A Transaction is immutable. Corrections and soft deletes produce a new
  version of the same transaction_id rather than mutating a record.

Sign convention
- Positive amounts are money in (income, savings deposits).
- Negative amounts are money out (expenses, debt payments, withdrawals).

Privacy
- Descriptions may contain sensitive data. Do not log them.
"""

from datetime import datetime
from decimal import Decimal, InvalidOperation
from enum import StrEnum
from typing import Any, Optional
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

from desweal.config import DEFAULT_CURRENCY


class TransactionCategory(StrEnum):
    """Closed set of ledger categories."""

    income = "income"
    expense = "expense"
    savings = "savings"
    investment = "investment"
    debt = "debt"


def new_transaction_id() -> str:
    return uuid4().hex


class Transaction(BaseModel):
    """One version of a ledger transaction.

    transaction_id may be left empty on construction; the ledger assigns one
    on append. version starts at 1 and increases with each amendment or
    tombstone.
    """

    model_config = ConfigDict(frozen=True)

    transaction_id: Optional[str] = None
    amount: Decimal
    category: TransactionCategory
    description: str = ""
    timestamp: datetime = Field(default_factory=datetime.now)
    currency: str = DEFAULT_CURRENCY
    recurring: bool = False
    attachment: Optional[str] = Field(default=None, description="Reference to a receipt or document")
    goal_id: Optional[str] = Field(default=None, description="Savings goal this transaction is tagged to")
    version: int = Field(default=1, ge=1)
    deleted: bool = False

    @field_validator("amount", mode="before")
    @classmethod
    def parse_amount(cls, value: Any) -> Decimal:
        """Parse amount from string or number without float artifacts."""
        if isinstance(value, float):
            value = str(value)
        try:
            amount = value if isinstance(value, Decimal) else Decimal(value)
        except (InvalidOperation, TypeError) as e:
            raise ValueError(f"Invalid amount: {value!r}") from e
        if not amount.is_finite():
            raise ValueError(f"Amount must be finite: {value!r}")
        return amount

    @field_serializer("amount")
    def serialize_amount(self, value: Decimal) -> str:
        """Serialize Decimal to string to preserve precision."""
        return str(value)

    @property
    def is_income(self) -> bool:
        return self.amount > 0

    @property
    def is_expense(self) -> bool:
        return self.amount < 0

    def next_version(self, **changes: Any) -> Transaction:
        """Return a new version carrying the given field changes.

        The result is re-validated, so invalid changes raise pydantic's
        ValidationError.
        """
        data = self.model_dump()
        data.update(changes)
        data["version"] = self.version + 1
        return Transaction.model_validate(data)

    def tombstone(self) -> Transaction:
        """Return the soft-deleted version of this transaction."""
        return self.next_version(deleted=True)


__all__ = [
    "Transaction",
    "TransactionCategory",
    "new_transaction_id",
]
