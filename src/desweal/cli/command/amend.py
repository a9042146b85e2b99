from __future__ import annotations

"""
Correct a transaction by recording a new version of it.
"""

from decimal import Decimal
from typing import Any, Optional

from desweal.errors import DeswealError, ValidationError
from desweal.workspace import Workspace
from .util import console, open_ledger, print_error, resolve_transaction


def run(
    *,
    txid: str,
    amount: Optional[Decimal | str] = None,
    category: Optional[str] = None,
    description: Optional[str] = None,
    recurring: Optional[bool] = None,
    goal: Optional[str] = None,
    attachment: Optional[str] = None,
    workspace: Workspace,
    write: bool = False,
) -> int:
    """Amend the fields given; unspecified fields keep their current value.

    Returns:
        Exit code (0 on success, 1 on error)
    """
    changes: dict[str, Any] = {
        key: value
        for key, value in {
            "amount": amount,
            "category": category,
            "description": description,
            "recurring": recurring,
            "goal_id": goal,
            "attachment": attachment,
        }.items()
        if value is not None
    }

    try:
        if not changes:
            raise ValidationError("Nothing to amend: pass at least one field option")
        ledger = open_ledger(workspace, write=write)
        txn = resolve_transaction(ledger, txid)
        amended = ledger.amend(txn.transaction_id, **changes)
    except DeswealError as e:
        print_error(e)
        return 1

    console.print(
        f"[cyan]{amended.transaction_id[:8]}[/] now at version {amended.version}: "
        + ", ".join(f"{k}={v}" for k, v in changes.items())
    )
    if not write:
        console.print("[dim]Dry-run: use --write to persist[/]")
    return 0
