"""
Tests for the ledger - appends, soft deletes, amendments and aggregate queries.
"""

from __future__ import annotations

import threading
from datetime import date, datetime
from decimal import Decimal

import pytest

from desweal.errors import NotFoundError, PersistenceError, ValidationError
from desweal.model.transaction import Transaction, TransactionCategory
from desweal.services.ledger import DateRange, Ledger, TransactionFilter


class _RecordingPersistence:
    def __init__(self, accept: bool = True):
        self.accept = accept
        self.persisted: list[Transaction] = []

    def load_all(self):
        return list(self.persisted)

    def persist(self, transaction: Transaction) -> bool:
        if self.accept:
            self.persisted.append(transaction)
        return self.accept


def _txn(amount: str, category: str = "expense", when: datetime | None = None, **kwargs) -> dict:
    data = {"amount": amount, "category": category, "description": "test", **kwargs}
    if when is not None:
        data["timestamp"] = when
    return data


@pytest.fixture
def ledger() -> Ledger:
    return Ledger()


class DescribeLedger:
    class DescribeAppend:
        def it_should_assign_an_id_when_absent(self, ledger):
            txn = ledger.append(_txn("-12.50"))

            assert txn.transaction_id
            assert ledger.get(txn.transaction_id) == txn

        def it_should_keep_a_given_id(self, ledger):
            txn = ledger.append(_txn("100", "income", transaction_id="salary-1"))

            assert txn.transaction_id == "salary-1"

        @pytest.mark.parametrize("blank", ["", "   "])
        def it_should_assign_an_id_when_blank(self, blank):
            store = _RecordingPersistence()
            ledger = Ledger(persistence=store)

            txn = ledger.append(_txn("5", "income", transaction_id=blank))

            assert txn.transaction_id.strip()
            assert Ledger.load(store).get(txn.transaction_id) == txn

        def it_should_accept_transaction_models(self, ledger):
            model = Transaction(amount=Decimal("-5"), category=TransactionCategory.debt)

            txn = ledger.append(model)

            assert txn.category == TransactionCategory.debt
            assert len(ledger) == 1

        def it_should_reject_zero_amount_and_leave_count_unchanged(self, ledger):
            ledger.append(_txn("10", "income"))

            with pytest.raises(ValidationError):
                ledger.append(_txn("0"))
            with pytest.raises(ValidationError):
                ledger.append(_txn("0.00"))

            assert len(ledger) == 1

        def it_should_reject_unknown_category(self, ledger):
            with pytest.raises(ValidationError, match="category"):
                ledger.append(_txn("-3", "groceries"))

            assert len(ledger) == 0

        def it_should_reject_constructed_models_with_unknown_category(self, ledger):
            bogus = Transaction.model_construct(
                amount=Decimal("-1"), category="bogus", description="", timestamp=datetime(2026, 1, 1),
                transaction_id=None, currency="CAD", recurring=False, attachment=None,
                goal_id=None, version=1, deleted=False,
            )

            with pytest.raises(ValidationError):
                ledger.append(bogus)

        def it_should_reject_duplicate_ids(self, ledger):
            ledger.append(_txn("-1", transaction_id="dup"))

            with pytest.raises(ValidationError, match="Duplicate"):
                ledger.append(_txn("-2", transaction_id="dup"))

            assert ledger.get("dup").amount == Decimal("-1")

        def it_should_reject_tombstones(self, ledger):
            with pytest.raises(ValidationError):
                ledger.append(_txn("-1", deleted=True))

        def it_should_bump_revision(self, ledger):
            ledger.append(_txn("-1"))
            ledger.append(_txn("-2"))

            assert ledger.revision == 2

    class DescribeSoftDelete:
        def it_should_mark_deleted_without_removing(self, ledger):
            txn = ledger.append(_txn("-20"))

            tombstone = ledger.soft_delete(txn.transaction_id)

            assert tombstone.deleted
            assert tombstone.version == 2
            assert len(ledger) == 1
            assert ledger.active_count == 0

        def it_should_fail_for_unknown_id(self, ledger):
            with pytest.raises(NotFoundError):
                ledger.soft_delete("nope")

        def it_should_be_a_no_op_when_repeated(self, ledger):
            txn = ledger.append(_txn("-20"))
            first = ledger.soft_delete(txn.transaction_id)
            revision = ledger.revision

            second = ledger.soft_delete(txn.transaction_id)

            assert second == first
            assert ledger.revision == revision
            assert len(ledger.history(txn.transaction_id)) == 2

        def it_should_exclude_deleted_amounts_from_totals(self, ledger):
            ledger.append(_txn("-10"))
            doomed = ledger.append(_txn("-25"))
            ledger.append(_txn("300", "income"))
            ledger.totals_by_category()  # warm the cache

            ledger.soft_delete(doomed.transaction_id)

            totals = ledger.totals_by_category()
            assert totals[TransactionCategory.expense] == Decimal("-10")
            assert totals[TransactionCategory.income] == Decimal("300")

    class DescribeAmend:
        def it_should_record_a_new_version(self, ledger):
            txn = ledger.append(_txn("-10", transaction_id="t1"))

            amended = ledger.amend("t1", amount="-12", description="fixed")

            assert amended.version == 2
            assert amended.amount == Decimal("-12")
            assert amended.timestamp == txn.timestamp
            assert [t.version for t in ledger.history("t1")] == [1, 2]
            assert ledger.totals_by_category()[TransactionCategory.expense] == Decimal("-12")

        def it_should_refuse_identity_fields(self, ledger):
            ledger.append(_txn("-10", transaction_id="t1"))

            with pytest.raises(ValidationError):
                ledger.amend("t1", transaction_id="t2")
            with pytest.raises(ValidationError):
                ledger.amend("t1", timestamp=datetime(2020, 1, 1))

        def it_should_refuse_zero_amount_and_bad_category(self, ledger):
            ledger.append(_txn("-10", transaction_id="t1"))

            with pytest.raises(ValidationError):
                ledger.amend("t1", amount="0")
            with pytest.raises(ValidationError):
                ledger.amend("t1", category="misc")

            assert ledger.get("t1").version == 1

        def it_should_refuse_deleted_transactions(self, ledger):
            ledger.append(_txn("-10", transaction_id="t1"))
            ledger.soft_delete("t1")

            with pytest.raises(ValidationError):
                ledger.amend("t1", amount="-5")

        def it_should_fail_for_unknown_id(self, ledger):
            with pytest.raises(NotFoundError):
                ledger.amend("missing", amount="-5")

    class DescribeTotalsByCategory:
        def it_should_include_every_category(self, ledger):
            totals = ledger.totals_by_category()

            assert set(totals) == set(TransactionCategory)
            assert all(v == 0 for v in totals.values())

        def it_should_respect_inclusive_date_range(self, ledger):
            ledger.append(_txn("-1", when=datetime(2026, 1, 31, 23, 59)))
            ledger.append(_txn("-2", when=datetime(2026, 2, 1, 0, 0)))
            ledger.append(_txn("-4", when=datetime(2026, 2, 28, 18, 0)))
            ledger.append(_txn("-8", when=datetime(2026, 3, 1, 0, 0)))

            february = DateRange.for_dates(date(2026, 2, 1), date(2026, 2, 28))

            assert ledger.totals_by_category(february)[TransactionCategory.expense] == Decimal("-6")
            assert ledger.totals_by_category()[TransactionCategory.expense] == Decimal("-15")

        def it_should_keep_a_single_cached_result(self, ledger):
            ledger.append(_txn("-1", when=datetime(2026, 1, 5)))
            for day in range(1, 29):
                ledger.totals_by_category(DateRange.for_dates(date(2026, 1, day), date(2026, 1, day)))
            ledger.totals_by_category()

            revision, _ = ledger._totals_cache
            assert revision == ledger.revision

        def it_should_refresh_cached_totals_after_writes(self, ledger):
            ledger.append(_txn("-1"))
            assert ledger.totals_by_category()[TransactionCategory.expense] == Decimal("-1")

            ledger.append(_txn("-2"))

            assert ledger.totals_by_category()[TransactionCategory.expense] == Decimal("-3")

        def it_should_not_leak_cache_mutations(self, ledger):
            ledger.append(_txn("-1"))

            ledger.totals_by_category()[TransactionCategory.expense] = Decimal("999")

            assert ledger.totals_by_category()[TransactionCategory.expense] == Decimal("-1")

    class DescribeListTransactions:
        def it_should_order_newest_first(self, ledger):
            ledger.append(_txn("-1", when=datetime(2026, 1, 1), transaction_id="a"))
            ledger.append(_txn("-2", when=datetime(2026, 3, 1), transaction_id="b"))
            ledger.append(_txn("-3", when=datetime(2026, 2, 1), transaction_id="c"))

            ids = [t.transaction_id for t in ledger.list_transactions()]

            assert ids == ["b", "c", "a"]

        def it_should_filter_by_category_recurring_and_range(self, ledger):
            ledger.append(_txn("-50", "debt", when=datetime(2026, 1, 5), recurring=True, transaction_id="loan"))
            ledger.append(_txn("-20", "expense", when=datetime(2026, 1, 6), recurring=True, transaction_id="gym"))
            ledger.append(_txn("-70", "debt", when=datetime(2026, 2, 5), transaction_id="extra"))

            recurring_debt = TransactionFilter(category=TransactionCategory.debt, recurring=True)
            january = TransactionFilter(date_range=DateRange.for_dates(date(2026, 1, 1), date(2026, 1, 31)))

            assert [t.transaction_id for t in ledger.list_transactions(recurring_debt)] == ["loan"]
            assert {t.transaction_id for t in ledger.list_transactions(january)} == {"loan", "gym"}

        def it_should_hide_deleted_unless_asked(self, ledger):
            ledger.append(_txn("-1", transaction_id="gone"))
            ledger.soft_delete("gone")

            assert list(ledger.list_transactions()) == []
            shown = list(ledger.list_transactions(TransactionFilter(include_deleted=True)))
            assert [t.transaction_id for t in shown] == ["gone"]

        def it_should_be_restartable(self, ledger):
            ledger.append(_txn("-1"))
            ledger.append(_txn("-2"))
            view = ledger.list_transactions()

            assert list(view) == list(view)
            assert len(list(view)) == 2

        def it_should_not_see_writes_after_creation(self, ledger):
            ledger.append(_txn("-1"))
            view = ledger.list_transactions()

            ledger.append(_txn("-2"))

            assert len(list(view)) == 1

    class DescribePersistence:
        def it_should_persist_every_new_version(self):
            store = _RecordingPersistence()
            ledger = Ledger(persistence=store)

            txn = ledger.append(_txn("-10"))
            ledger.amend(txn.transaction_id, amount="-11")
            ledger.soft_delete(txn.transaction_id)

            assert [t.version for t in store.persisted] == [1, 2, 3]
            assert store.persisted[-1].deleted

        def it_should_leave_state_unchanged_when_persist_fails(self):
            ledger = Ledger(persistence=_RecordingPersistence(accept=False))

            with pytest.raises(PersistenceError):
                ledger.append(_txn("-10"))

            assert len(ledger) == 0
            assert ledger.revision == 0

        def it_should_load_latest_version_per_id(self):
            store = _RecordingPersistence()
            original = Ledger(persistence=store)
            original.append(_txn("-10", transaction_id="t1"))
            original.amend("t1", amount="-15")
            original.append(_txn("40", "income", transaction_id="t2"))
            original.soft_delete("t2")

            reloaded = Ledger.load(store)

            assert reloaded.get("t1").amount == Decimal("-15")
            assert reloaded.get("t2").deleted
            assert len(reloaded.history("t1")) == 2
            assert reloaded.totals_by_category() == original.totals_by_category()

    class DescribeConcurrency:
        def it_should_not_lose_appends_from_parallel_writers(self, ledger):
            def writer():
                for _ in range(50):
                    ledger.append(_txn("-1"))

            threads = [threading.Thread(target=writer) for _ in range(4)]
            for t in threads:
                t.start()
            for t in threads:
                t.join()

            assert len(ledger) == 200
            assert ledger.totals_by_category()[TransactionCategory.expense] == Decimal("-200")


class DescribeDateRange:
    def it_should_reject_end_before_start(self):
        with pytest.raises(ValidationError):
            DateRange.for_dates(date(2026, 2, 1), date(2026, 1, 1))

    def it_should_allow_open_bounds(self):
        since = DateRange.for_dates(start=date(2026, 1, 1))

        assert since.contains(datetime(2099, 1, 1))
        assert not since.contains(datetime(2025, 12, 31, 23, 59))
