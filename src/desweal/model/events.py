"""
Event sourcing models for the ledger.

Every ledger write is recorded as an immutable event. Replaying the events in
order rebuilds every transaction version, tombstones included.

All events inherit from the base Event class and include:
- Automatic event_id generation (UUID)
- Automatic event_timestamp
- JSON serialization/deserialization via Pydantic v2
- Aggregate type and ID for event stream grouping

Privacy: Events contain sensitive financial data and should never be
transmitted over networks. All processing is local-only.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional
from uuid import uuid4

from pydantic import BaseModel, Field, field_serializer, field_validator

from desweal.model.transaction import Transaction


class Event(BaseModel):
    """Base event class for all event types."""

    event_id: str = Field(default_factory=lambda: str(uuid4()))
    event_type: str
    event_timestamp: datetime = Field(default_factory=datetime.now)
    aggregate_type: Optional[str] = None
    aggregate_id: Optional[str] = None

    @field_serializer("event_timestamp")
    def serialize_timestamp(self, value: datetime) -> str:
        """Serialize datetime to ISO format string."""
        return value.isoformat()

    @field_validator("event_timestamp", mode="before")
    @classmethod
    def parse_timestamp(cls, value: Any) -> datetime:
        """Parse timestamp from string or datetime."""
        if isinstance(value, str):
            return datetime.fromisoformat(value)
        return value


class TransactionRecorded(Event):
    """A new transaction or an amended version of an existing one.

    Carries the complete transaction version so replay needs no other source.
    """

    event_type: str = Field(default="TransactionRecorded", frozen=True)
    aggregate_type: str = Field(default="transaction", frozen=True)

    transaction: Transaction
    aggregate_id: Optional[str] = None

    def __init__(self, **data):
        """Initialize and set aggregate_id to the transaction's id."""
        txn = data.get("transaction")
        if "aggregate_id" not in data and isinstance(txn, Transaction):
            data["aggregate_id"] = txn.transaction_id
        super().__init__(**data)


class TransactionSoftDeleted(Event):
    """A transaction was tombstoned; version is the tombstone's version."""

    event_type: str = Field(default="TransactionSoftDeleted", frozen=True)
    aggregate_type: str = Field(default="transaction", frozen=True)

    transaction_id: str
    version: int = Field(ge=1)
    aggregate_id: Optional[str] = None

    def __init__(self, **data):
        """Initialize and set aggregate_id to transaction_id."""
        if "aggregate_id" not in data and "transaction_id" in data:
            data["aggregate_id"] = data["transaction_id"]
        super().__init__(**data)


__all__ = [
    "Event",
    "TransactionRecorded",
    "TransactionSoftDeleted",
]
