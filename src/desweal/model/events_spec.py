"""
Tests for event sourcing models.
"""

from datetime import datetime
from decimal import Decimal
import json

from desweal.model.events import Event, TransactionRecorded, TransactionSoftDeleted
from desweal.model.transaction import Transaction, TransactionCategory


class DescribeEvent:
    def it_should_generate_event_id_and_timestamp(self):
        event = Event(event_type="TestEvent")

        assert event.event_id is not None
        assert isinstance(event.event_timestamp, datetime)

    def it_should_parse_iso_timestamps(self):
        event = Event(event_type="TestEvent", event_timestamp="2026-03-01T10:00:00")

        assert event.event_timestamp == datetime(2026, 3, 1, 10, 0)


class DescribeTransactionRecorded:
    def it_should_use_transaction_id_as_aggregate_id(self):
        txn = Transaction(transaction_id="t1", amount="-4.20", category="expense")

        event = TransactionRecorded(transaction=txn)

        assert event.aggregate_type == "transaction"
        assert event.aggregate_id == "t1"

    def it_should_preserve_amount_sign_and_category_through_json(self):
        txn = Transaction(
            transaction_id="t1",
            amount="-4.20",
            category="debt",
            timestamp=datetime(2026, 1, 2, 3, 4),
            recurring=True,
        )

        restored = TransactionRecorded.model_validate_json(
            TransactionRecorded(transaction=txn).model_dump_json()
        )

        assert restored.transaction == txn
        assert restored.transaction.amount == Decimal("-4.20")
        assert restored.transaction.category == TransactionCategory.debt

    def it_should_store_amount_as_string(self):
        txn = Transaction(transaction_id="t1", amount="10.10", category="income")

        data = json.loads(TransactionRecorded(transaction=txn).model_dump_json())

        assert data["transaction"]["amount"] == "10.10"


class DescribeTransactionSoftDeleted:
    def it_should_use_transaction_id_as_aggregate_id(self):
        event = TransactionSoftDeleted(transaction_id="t1", version=2)

        assert event.aggregate_id == "t1"
        assert event.event_type == "TransactionSoftDeleted"
