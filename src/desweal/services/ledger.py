"""
Ledger - authoritative transaction history with aggregate queries.

The ledger is append-mostly: transactions are never mutated or physically
removed. Amendments and soft deletes append a new version of the same
transaction_id, and only the latest version of each id is "current".

Concurrency:
- append, amend and soft_delete run under a per-ledger lock (single writer).
- Current state is an immutable snapshot swapped in one assignment after a
  write commits, so readers never see a partially applied write and never
  need the lock.

NO IMPORTS FROM:
- rich (console, table, prompt)
- typer

Persistence is an injected collaborator; the ledger itself does no I/O.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from datetime import date, datetime, time
from decimal import Decimal
from types import MappingProxyType
from typing import Any, Protocol

from pydantic import ValidationError as PydanticValidationError

from desweal.errors import NotFoundError, PersistenceError, ValidationError, describe_validation_error
from desweal.model.transaction import Transaction, TransactionCategory, new_transaction_id

logger = logging.getLogger(__name__)

AMENDABLE_FIELDS = frozenset(
    {"amount", "category", "description", "currency", "recurring", "attachment", "goal_id"}
)


class TransactionPersistence(Protocol):
    """Persistence collaborator used by the ledger.

    persist() receives every new transaction version before the ledger
    commits it. Returning False aborts the write.
    """

    def load_all(self) -> Iterable[Transaction]: ...

    def persist(self, transaction: Transaction) -> bool: ...


@dataclass(frozen=True)
class DateRange:
    """Inclusive timestamp range; either bound may be open."""

    start: datetime | None = None
    end: datetime | None = None

    def __post_init__(self):
        if self.start and self.end and self.end < self.start:
            raise ValidationError("Date range end precedes start")

    @classmethod
    def for_dates(cls, start: date | None = None, end: date | None = None) -> DateRange:
        """Range covering whole calendar days from start through end."""
        return cls(
            start=datetime.combine(start, time.min) if start else None,
            end=datetime.combine(end, time.max) if end else None,
        )

    def contains(self, timestamp: datetime) -> bool:
        if self.start is not None and timestamp < self.start:
            return False
        if self.end is not None and timestamp > self.end:
            return False
        return True


@dataclass(frozen=True)
class TransactionFilter:
    """Predicates for list_transactions. None means "don't filter"."""

    category: TransactionCategory | None = None
    date_range: DateRange | None = None
    recurring: bool | None = None
    goal_id: str | None = None
    include_deleted: bool = False

    def matches(self, txn: Transaction) -> bool:
        if txn.deleted and not self.include_deleted:
            return False
        if self.category is not None and txn.category != self.category:
            return False
        if self.recurring is not None and txn.recurring != self.recurring:
            return False
        if self.goal_id is not None and txn.goal_id != self.goal_id:
            return False
        if self.date_range is not None and not self.date_range.contains(txn.timestamp):
            return False
        return True


@dataclass(frozen=True)
class _LedgerState:
    revision: int
    current: Mapping[str, Transaction]


class TransactionView:
    """Lazy, restartable sequence of transactions, newest first.

    Bound to the ledger snapshot at the time it was created; later writes are
    not visible through an existing view. Each iteration starts over.
    """

    def __init__(self, state: _LedgerState, criteria: TransactionFilter):
        self._state = state
        self._criteria = criteria

    def __iter__(self) -> Iterator[Transaction]:
        ordered = sorted(
            self._state.current.values(),
            key=lambda t: (t.timestamp, t.transaction_id),
            reverse=True,
        )
        return (t for t in ordered if self._criteria.matches(t))


class Ledger:
    """Append-mostly transaction ledger.

    Usage:
        ledger = Ledger.load(store)
        txn = ledger.append({"amount": "-12.50", "category": "expense"})
        ledger.soft_delete(txn.transaction_id)
        totals = ledger.totals_by_category()
    """

    def __init__(
        self,
        persistence: TransactionPersistence | None = None,
        transactions: Iterable[Transaction] = (),
    ):
        """
        Initialize the ledger.

        Args:
            persistence: Optional collaborator receiving each new version
            transactions: Existing versions to seed from (latest version per id wins)
        """
        self._persistence = persistence
        self._write_lock = threading.Lock()
        self._history: list[Transaction] = []
        # (revision, totals) for the unranged query; replaced in one assignment
        self._totals_cache: tuple[int, dict[TransactionCategory, Decimal]] | None = None

        current: dict[str, Transaction] = {}
        for txn in transactions:
            if not txn.transaction_id:
                raise ValidationError("Stored transaction is missing transaction_id")
            self._history.append(txn)
            existing = current.get(txn.transaction_id)
            if existing is None or txn.version >= existing.version:
                current[txn.transaction_id] = txn
        self._state = _LedgerState(revision=0, current=MappingProxyType(current))

    @classmethod
    def load(cls, persistence: TransactionPersistence) -> Ledger:
        """Build a ledger from everything the persistence collaborator holds."""
        ledger = cls(persistence=persistence, transactions=persistence.load_all())
        logger.info("Loaded ledger with %d transactions", len(ledger))
        return ledger

    # ------------------------------
    # Writes
    # ------------------------------

    def append(self, transaction: Transaction | Mapping[str, Any]) -> Transaction:
        """Append a new transaction.

        Args:
            transaction: Transaction model or raw field mapping

        Returns:
            The stored transaction (with an assigned id if none was given)

        Raises:
            ValidationError: zero amount, unknown category, duplicate id, or tombstone input
            PersistenceError: persistence collaborator rejected the write
        """
        txn = self._coerce(transaction)
        if txn.deleted:
            raise ValidationError("Cannot append a deleted transaction")

        with self._write_lock:
            state = self._state
            if not (txn.transaction_id or "").strip():
                txn = txn.model_copy(update={"transaction_id": new_transaction_id()})
            elif txn.transaction_id in state.current:
                raise ValidationError(f"Duplicate transaction_id: {txn.transaction_id}")
            self._commit(state, txn)

        logger.info("Appended transaction %s (%s)", txn.transaction_id, txn.category.value)
        return txn

    def amend(self, transaction_id: str, /, **changes: Any) -> Transaction:
        """Record a corrected version of a live transaction.

        Raises:
            NotFoundError: unknown transaction_id
            ValidationError: no changes, non-amendable field, invalid value, or deleted transaction
        """
        if not changes:
            raise ValidationError("No changes given")
        forbidden = set(changes) - AMENDABLE_FIELDS
        if forbidden:
            raise ValidationError(f"Fields cannot be amended: {', '.join(sorted(forbidden))}")

        with self._write_lock:
            state = self._state
            current = state.current.get(transaction_id)
            if current is None:
                raise NotFoundError("Transaction", transaction_id)
            if current.deleted:
                raise ValidationError(f"Cannot amend deleted transaction: {transaction_id}")
            try:
                amended = current.next_version(**changes)
            except PydanticValidationError as e:
                raise ValidationError(describe_validation_error(e, "transaction")) from e
            self._check_amount(amended)
            self._commit(state, amended)

        logger.info("Amended transaction %s to version %d", transaction_id, amended.version)
        return amended

    def soft_delete(self, transaction_id: str) -> Transaction:
        """Mark a transaction deleted without removing it.

        Deleting an already deleted transaction is a no-op that returns the
        existing tombstone.

        Raises:
            NotFoundError: unknown transaction_id
        """
        with self._write_lock:
            state = self._state
            current = state.current.get(transaction_id)
            if current is None:
                raise NotFoundError("Transaction", transaction_id)
            if current.deleted:
                logger.debug("Transaction %s already deleted", transaction_id)
                return current
            tombstone = current.tombstone()
            self._commit(state, tombstone)

        logger.info("Soft-deleted transaction %s", transaction_id)
        return tombstone

    def _commit(self, state: _LedgerState, txn: Transaction) -> None:
        # Caller holds the write lock. Persist first so a rejected write leaves no trace.
        if self._persistence is not None and not self._persistence.persist(txn):
            raise PersistenceError(f"Failed to persist transaction {txn.transaction_id}")
        current = dict(state.current)
        current[txn.transaction_id] = txn
        self._history.append(txn)
        self._state = _LedgerState(revision=state.revision + 1, current=MappingProxyType(current))

    def _coerce(self, transaction: Transaction | Mapping[str, Any]) -> Transaction:
        data = transaction.model_dump() if isinstance(transaction, Transaction) else dict(transaction)
        try:
            txn = Transaction.model_validate(data)
        except PydanticValidationError as e:
            raise ValidationError(describe_validation_error(e, "transaction")) from e
        self._check_amount(txn)
        return txn

    @staticmethod
    def _check_amount(txn: Transaction) -> None:
        if txn.amount == 0:
            raise ValidationError("Transaction amount must not be zero")

    # ------------------------------
    # Reads
    # ------------------------------

    def totals_by_category(self, date_range: DateRange | None = None) -> dict[TransactionCategory, Decimal]:
        """Sum non-deleted amounts per category, optionally within a date range.

        Every category is present in the result; categories with no
        transactions total zero.
        """
        state = self._state
        cached = self._totals_cache
        if date_range is None and cached is not None and cached[0] == state.revision:
            return dict(cached[1])

        totals = {category: Decimal("0") for category in TransactionCategory}
        for txn in state.current.values():
            if txn.deleted:
                continue
            if date_range is not None and not date_range.contains(txn.timestamp):
                continue
            totals[txn.category] += txn.amount
        if date_range is None:
            self._totals_cache = (state.revision, totals)
        return dict(totals)

    def list_transactions(self, criteria: TransactionFilter | None = None) -> TransactionView:
        """Transactions matching criteria, newest first (lazy and restartable)."""
        return TransactionView(self._state, criteria or TransactionFilter())

    def get(self, transaction_id: str) -> Transaction:
        """Current version of a transaction (tombstones included)."""
        txn = self._state.current.get(transaction_id)
        if txn is None:
            raise NotFoundError("Transaction", transaction_id)
        return txn

    def history(self, transaction_id: str) -> list[Transaction]:
        """All recorded versions of a transaction, oldest first."""
        versions = [t for t in list(self._history) if t.transaction_id == transaction_id]
        if not versions:
            raise NotFoundError("Transaction", transaction_id)
        return sorted(versions, key=lambda t: t.version)

    def find_by_prefix(self, prefix: str) -> list[Transaction]:
        """Current transactions whose id starts with prefix (case-insensitive)."""
        normalized = (prefix or "").strip().lower()
        if not normalized:
            return []
        return [
            t for tid, t in self._state.current.items() if tid.lower().startswith(normalized)
        ]

    @property
    def revision(self) -> int:
        """Number of writes committed since this ledger was constructed."""
        return self._state.revision

    @property
    def active_count(self) -> int:
        return sum(1 for t in self._state.current.values() if not t.deleted)

    def __len__(self) -> int:
        return len(self._state.current)


__all__ = [
    "AMENDABLE_FIELDS",
    "DateRange",
    "Ledger",
    "TransactionFilter",
    "TransactionPersistence",
    "TransactionView",
]
