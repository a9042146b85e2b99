from __future__ import annotations

from datetime import date
from decimal import Decimal
from itertools import islice
from typing import Optional

from rich.table import Table
from rich.text import Text

from desweal.errors import DeswealError, ValidationError
from desweal.model.transaction import TransactionCategory
from desweal.services.ledger import TransactionFilter
from desweal.workspace import Workspace
from .util import console, date_range, fmt_amount, open_ledger, print_error


def run(
    *,
    workspace: Workspace,
    category: Optional[str] = None,
    start: Optional[date] = None,
    end: Optional[date] = None,
    recurring: Optional[bool] = None,
    goal: Optional[str] = None,
    include_deleted: bool = False,
    limit: Optional[int] = None,
) -> int:
    """Show ledger transactions, newest first, as a Rich table.

    Returns an exit code (0 for success, 1 for invalid filters).
    """
    try:
        cat = TransactionCategory(category) if category else None
    except ValueError:
        print_error(ValidationError(f"Unknown category: {category}"))
        return 1

    try:
        criteria = TransactionFilter(
            category=cat,
            date_range=date_range(start, end),
            recurring=recurring,
            goal_id=goal,
            include_deleted=include_deleted,
        )
        ledger = open_ledger(workspace)
    except DeswealError as e:
        print_error(e)
        return 1

    rows = list(islice(ledger.list_transactions(criteria), limit))
    if not rows:
        console.print("[yellow]No matching transactions.[/]")
        return 0

    table = Table(title="Transactions", show_lines=False)
    table.add_column("Date", style="cyan", no_wrap=True)
    table.add_column("Description", style="white")
    table.add_column("Category", style="yellow")
    table.add_column("Amount", justify="right")
    table.add_column("TxnID8", style="dim", no_wrap=True)
    table.add_column("Notes", style="dim")

    net = Decimal("0")
    for t in rows:
        notes = []
        if t.recurring:
            notes.append("recurring")
        if t.goal_id:
            notes.append(f"goal:{t.goal_id}")
        if t.version > 1:
            notes.append(f"v{t.version}")
        if t.deleted:
            notes.append("[red]deleted[/red]")
        else:
            net += t.amount

        table.add_row(
            t.timestamp.strftime("%Y-%m-%d"),
            t.description,
            t.category.value,
            fmt_amount(t.amount),
            t.transaction_id[:8],
            " | ".join(notes),
        )

    table.add_row("", "", "", Text(""), "", "")
    table.add_row("", Text("Net", style="bold"), "", fmt_amount(net), "", "")

    console.print(table)
    return 0
