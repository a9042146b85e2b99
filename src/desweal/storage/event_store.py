"""
Event store implementation using SQLite.

This module provides an append-only event store and the ledger persistence
adapter built on it. Events are immutable and stored in order, forming the
source of truth for ledger state.

Privacy: Event store is local-only SQLite. Never transmit events over
networks as they contain sensitive financial data.
"""

from __future__ import annotations

import json
import logging
import sqlite3
from pathlib import Path

from desweal.model.events import Event, TransactionRecorded, TransactionSoftDeleted
from desweal.model.transaction import Transaction

logger = logging.getLogger(__name__)

# Map event types to classes for deserialization
EVENT_TYPE_MAP: dict[str, type[Event]] = {
    "TransactionRecorded": TransactionRecorded,
    "TransactionSoftDeleted": TransactionSoftDeleted,
}


class EventStore:
    """Append-only event store using SQLite.

    Design:
    - Append-only: events never modified or deleted
    - Sequential: events have sequence numbers for ordering
    - Replayable: events are read back in sequence order
    - Local-only: SQLite database file, no network I/O

    Usage:
        store = EventStore("data/events.db")
        store.append_event(TransactionRecorded(transaction=txn))
        events = store.get_all_events()
    """

    def __init__(self, db_path: str | Path):
        """Initialize event store with SQLite database.

        Args:
            db_path: Path to SQLite database file. Will be created if doesn't exist.
        """
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_schema()

    def _init_schema(self) -> None:
        """Initialize database schema if not exists."""
        conn = sqlite3.connect(self.db_path)
        try:
            cursor = conn.cursor()

            cursor.execute("""
                CREATE TABLE IF NOT EXISTS events (
                    event_id TEXT PRIMARY KEY,
                    event_type TEXT NOT NULL,
                    event_timestamp TEXT NOT NULL,
                    aggregate_type TEXT,
                    aggregate_id TEXT,
                    event_data TEXT NOT NULL,
                    created_at TEXT DEFAULT (datetime('now'))
                )
            """)

            cursor.execute("""
                CREATE TABLE IF NOT EXISTS event_sequence (
                    sequence_number INTEGER PRIMARY KEY AUTOINCREMENT,
                    event_id TEXT NOT NULL,
                    FOREIGN KEY (event_id) REFERENCES events(event_id)
                )
            """)

            conn.commit()
        finally:
            conn.close()

    def append_event(self, event: Event) -> None:
        """Append an event to the store.

        The event row and its sequence row are written in one SQLite
        transaction; either both land or neither does.
        """
        conn = sqlite3.connect(self.db_path)
        try:
            cursor = conn.cursor()

            event_data = event.model_dump_json()

            cursor.execute(
                """
                INSERT INTO events (
                    event_id, event_type, event_timestamp,
                    aggregate_type, aggregate_id, event_data
                ) VALUES (?, ?, ?, ?, ?, ?)
            """,
                (
                    event.event_id,
                    event.event_type,
                    event.event_timestamp.isoformat(),
                    event.aggregate_type,
                    event.aggregate_id,
                    event_data,
                ),
            )

            cursor.execute(
                """
                INSERT INTO event_sequence (event_id) VALUES (?)
            """,
                (event.event_id,),
            )

            conn.commit()
        finally:
            conn.close()

    def get_all_events(self) -> list[Event]:
        """Retrieve all events in the order they were appended."""
        conn = sqlite3.connect(self.db_path)
        try:
            cursor = conn.cursor()
            cursor.execute("""
                SELECT e.event_data
                FROM events e
                JOIN event_sequence es ON e.event_id = es.event_id
                ORDER BY es.sequence_number
            """)
            return [self._deserialize_event(event_data) for (event_data,) in cursor.fetchall()]
        finally:
            conn.close()

    def _deserialize_event(self, event_data: str) -> Event:
        """Deserialize event from JSON into the class named by its event_type."""
        data = json.loads(event_data)
        event_type = data.get("event_type")

        event_class = EVENT_TYPE_MAP.get(event_type)
        if not event_class:
            raise ValueError(f"Unknown event type: {event_type}")

        return event_class.model_validate_json(event_data)


class TransactionEventStore(EventStore):
    """Ledger persistence adapter backed by the event store.

    Implements the ledger's persistence collaborator protocol:
    - persist(): records a transaction version as an event
    - load_all(): replays events into every transaction version
    """

    def persist(self, transaction: Transaction) -> bool:
        """Record one transaction version. Returns False if SQLite rejects the write."""
        if transaction.deleted:
            event: Event = TransactionSoftDeleted(
                transaction_id=transaction.transaction_id,
                version=transaction.version,
            )
        else:
            event = TransactionRecorded(transaction=transaction)
        try:
            self.append_event(event)
        except sqlite3.Error:
            logger.exception("Failed to persist transaction %s", transaction.transaction_id)
            return False
        return True

    def load_all(self) -> list[Transaction]:
        """Replay the event log into transaction versions, in recorded order."""
        versions: list[Transaction] = []
        latest: dict[str, Transaction] = {}
        for event in self.get_all_events():
            if isinstance(event, TransactionRecorded):
                txn = event.transaction
            elif isinstance(event, TransactionSoftDeleted):
                previous = latest.get(event.transaction_id)
                if previous is None:
                    logger.warning(
                        "Skipping deletion of unknown transaction %s", event.transaction_id
                    )
                    continue
                txn = previous.model_copy(update={"deleted": True, "version": event.version})
            else:
                continue
            latest[txn.transaction_id] = txn
            versions.append(txn)
        return versions


__all__ = ["EventStore", "EVENT_TYPE_MAP", "TransactionEventStore"]
