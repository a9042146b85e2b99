from __future__ import annotations

"""
List preset and custom distribution schemes.
"""

from rich.table import Table

from desweal.errors import DeswealError
from desweal.model.config_io import load_schemes_config
from desweal.services.distribution_engine import DistributionEngine
from desweal.workspace import Workspace
from .util import console, print_error


def run(*, workspace: Workspace) -> int:
    """Show every scheme with its buckets and whether it passes validation."""
    engine = DistributionEngine()
    try:
        custom = load_schemes_config(workspace.schemes_config)
    except DeswealError as e:
        print_error(e)
        return 1

    table = Table(title="Distribution Schemes", show_lines=True)
    table.add_column("Name", style="cyan", no_wrap=True)
    table.add_column("Kind", style="magenta")
    table.add_column("Buckets", style="white")
    table.add_column("Status")

    for scheme in engine.presets() + custom.schemes:
        buckets = ", ".join(f"{label} {pct}%" for label, pct in scheme.buckets.items())
        violation = engine.validate_scheme(scheme)
        status = "[green]valid[/]" if violation is None else f"[red]{violation.message}[/]"
        table.add_row(scheme.name, scheme.kind.value, buckets, status)

    console.print(table)
    return 0
