from __future__ import annotations

from datetime import date
from decimal import Decimal

from rich.console import Console
from rich.text import Text

from desweal.errors import NotFoundError, ValidationError
from desweal.model.transaction import Transaction
from desweal.services.ledger import DateRange, Ledger
from desweal.storage.event_store import TransactionEventStore
from desweal.workspace import Workspace

console = Console()

MIN_PREFIX_LENGTH = 8


def open_ledger(workspace: Workspace, write: bool = False) -> Ledger:
    """Load the workspace ledger.

    With write=False the ledger is detached from the event store, so every
    operation runs for real in memory but nothing is persisted (dry-run).
    A workspace without an event store then yields an empty ledger and no
    files are created.
    """
    if write:
        return Ledger.load(TransactionEventStore(workspace.event_store_path))
    if not workspace.event_store_path.exists():
        return Ledger()
    return Ledger(transactions=TransactionEventStore(workspace.event_store_path).load_all())


def resolve_transaction(ledger: Ledger, txid: str) -> Transaction:
    """Find a transaction by full id or unambiguous prefix."""
    normalized = (txid or "").strip().lower()
    matches = ledger.find_by_prefix(normalized)
    exact = [t for t in matches if t.transaction_id.lower() == normalized]
    if exact:
        return exact[0]
    if len(normalized) < MIN_PREFIX_LENGTH or not matches:
        raise NotFoundError("Transaction", txid)
    if len(matches) > 1:
        raise ValidationError(f"Ambiguous transaction prefix '{txid}' matches {len(matches)} transactions")
    return matches[0]


def date_range(start: date | None, end: date | None) -> DateRange | None:
    if start is None and end is None:
        return None
    return DateRange.for_dates(start, end)


def fmt_amount(amt: Decimal) -> Text:
    s = f"{amt:,.2f}"
    if amt < 0:
        return Text(s, style="bold red")
    elif amt > 0:
        return Text(s, style="bold green")
    return Text(s)


def print_error(error: Exception) -> None:
    console.print(f"[red]Error:[/] {error}")
