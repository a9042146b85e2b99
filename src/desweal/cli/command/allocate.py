from __future__ import annotations

"""
Split income across the buckets of a distribution scheme.
"""

from datetime import date
from decimal import Decimal
from typing import Optional

from rich.table import Table

from desweal.errors import DeswealError
from desweal.model.config_io import load_schemes_config
from desweal.services.distribution_engine import Allocation, DistributionEngine
from desweal.workspace import Workspace
from .util import console, date_range, open_ledger, print_error


def run(
    *,
    scheme: str,
    income: Optional[Decimal | str] = None,
    start: Optional[date] = None,
    end: Optional[date] = None,
    workspace: Workspace,
) -> int:
    """Allocate an explicit income amount, or the ledger's income for a period.

    Returns:
        Exit code (0 on success, 1 on error)
    """
    engine = DistributionEngine()
    try:
        selected = engine.resolve(scheme, load_schemes_config(workspace.schemes_config))
        if income is not None:
            allocation = engine.allocate(income, selected)
        else:
            allocation = engine.propose(open_ledger(workspace), selected, date_range(start, end))
    except DeswealError as e:
        print_error(e)
        return 1

    _display_allocation(allocation, selected.buckets)
    return 0


def _display_allocation(allocation: Allocation, percentages: dict[str, Decimal]) -> None:
    table = Table(title=f"Allocation: {allocation.scheme_name}")
    table.add_column("Bucket", style="cyan", no_wrap=True)
    table.add_column("%", style="magenta", justify="right")
    table.add_column("Amount", style="green", justify="right")

    for label, amount in allocation.buckets.items():
        table.add_row(label, f"{percentages[label]}", f"${amount:,.2f}")

    console.print(table)
    console.print(f"\n[bold]Income:[/] ${allocation.income:,.2f}")
