from __future__ import annotations

"""
Record a new transaction in the ledger.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from desweal.errors import DeswealError
from desweal.workspace import Workspace
from .util import console, fmt_amount, open_ledger, print_error


def run(
    *,
    amount: Decimal | str,
    category: str,
    description: str = "",
    timestamp: Optional[datetime] = None,
    recurring: bool = False,
    goal: Optional[str] = None,
    attachment: Optional[str] = None,
    workspace: Workspace,
    write: bool = False,
) -> int:
    """Append a transaction (dry-run unless write=True).

    Returns:
        Exit code (0 on success, 1 on validation or persistence error)
    """
    fields = {
        "amount": amount,
        "category": category,
        "description": description,
        "recurring": recurring,
        "goal_id": goal,
        "attachment": attachment,
    }
    if timestamp is not None:
        fields["timestamp"] = timestamp

    try:
        ledger = open_ledger(workspace, write=write)
        txn = ledger.append(fields)
    except DeswealError as e:
        print_error(e)
        return 1

    line = fmt_amount(txn.amount)
    line.append(f"  {txn.category.value}  {txn.timestamp:%Y-%m-%d}  {txn.transaction_id[:8]}", style="default")
    console.print(line)

    if not write:
        console.print("[dim]Dry-run: use --write to persist[/]")
    else:
        console.print("[green]Recorded.[/]")
    return 0
