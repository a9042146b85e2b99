from __future__ import annotations

"""
Category totals for a period.
"""

from datetime import date
from decimal import Decimal
from typing import Optional

from rich.table import Table

from desweal.errors import DeswealError
from desweal.workspace import Workspace
from .util import console, date_range, fmt_amount, open_ledger, print_error


def run(
    *,
    workspace: Workspace,
    start: Optional[date] = None,
    end: Optional[date] = None,
) -> int:
    """Display summed amounts per category over non-deleted transactions.

    Returns:
        Exit code (0 on success, 1 on invalid range)
    """
    try:
        period = date_range(start, end)
        ledger = open_ledger(workspace)
    except DeswealError as e:
        print_error(e)
        return 1

    totals = ledger.totals_by_category(period)

    title = "Totals by Category"
    if start or end:
        title += f" ({start or '…'} to {end or '…'})"

    table = Table(title=title)
    table.add_column("Category", style="cyan", no_wrap=True)
    table.add_column("Total", justify="right")

    for category, amount in totals.items():
        table.add_row(category.value, fmt_amount(amount))

    console.print(table)
    console.print(f"\n[bold]Net:[/] {sum(totals.values(), Decimal('0')):,.2f}")
    return 0
