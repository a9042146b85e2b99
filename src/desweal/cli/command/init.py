"""Initialize a new desweal workspace directory."""

from __future__ import annotations

from desweal.workspace import Workspace

from .util import console

_STARTER_SCHEMES_YML = """\
# Custom distribution schemes
# Presets (50/30/20, 60/20/20, 70/20/10) are always available.
# Percentages must be non-negative and sum to 100. The last bucket absorbs
# rounding residual when income is split.
#
# Example:
#   schemes:
#     - name: aggressive-saver
#       buckets:
#         needs: '50'
#         savings: '40'
#         wants: '10'

schemes: []
"""

_STARTER_GOALS_YML = """\
# Savings goals
# Use 'desweal goal --add' to manage them, or edit this file directly.
# Transactions tagged with a goal_id count toward that goal; a goal with no
# tagged transactions counts savings transactions between its dates.
#
# Example:
#   goals:
#     - goal_id: emergency-fund
#       name: Emergency fund
#       target: '5000'
#       start_date: '2026-01-01'
#       state: active

goals: []
"""


def run(*, workspace: Workspace) -> int:
    """Initialize a workspace with required directories and starter config.

    Skips anything that already exists (safe to run on an existing workspace).

    Returns:
        Exit code (0 = success)
    """
    console.print(f"[bold cyan]Initializing workspace:[/] {workspace.root}\n")

    created = []
    skipped = []

    for directory in [workspace.data_dir, workspace.config_dir]:
        if directory.exists():
            skipped.append(str(directory))
        else:
            directory.mkdir(parents=True, exist_ok=True)
            created.append(str(directory))

    for path, content in [
        (workspace.schemes_config, _STARTER_SCHEMES_YML),
        (workspace.goals_config, _STARTER_GOALS_YML),
    ]:
        if path.exists():
            skipped.append(str(path))
        else:
            path.write_text(content, encoding="utf-8")
            created.append(str(path))

    for item in created:
        console.print(f"  [green]created[/] {item}")
    for item in skipped:
        console.print(f"  [dim]exists[/]  {item}")

    console.print("\n[green]Workspace ready.[/] Next: desweal add --amount 2500 --category income --write")
    return 0
