from __future__ import annotations

"""
Soft-delete a transaction. The record stays in the ledger history.
"""

from desweal.errors import DeswealError
from desweal.workspace import Workspace
from .util import console, open_ledger, print_error, resolve_transaction


def run(*, txid: str, workspace: Workspace, write: bool = False) -> int:
    """Soft-delete by id or unambiguous id prefix. Deleting twice is a no-op.

    Returns:
        Exit code (0 on success, 1 on error)
    """
    try:
        ledger = open_ledger(workspace, write=write)
        txn = resolve_transaction(ledger, txid)
        if txn.deleted:
            console.print(f"[yellow]Already deleted:[/] {txn.transaction_id[:8]}")
            return 0
        ledger.soft_delete(txn.transaction_id)
    except DeswealError as e:
        print_error(e)
        return 1

    console.print(f"[green]Deleted[/] {txn.transaction_id[:8]}")
    if not write:
        console.print("[dim]Dry-run: use --write to persist[/]")
    return 0
