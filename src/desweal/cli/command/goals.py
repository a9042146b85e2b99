from __future__ import annotations

"""
Savings goal progress and projected completion.
"""

from datetime import date
from typing import Optional

from rich.table import Table

from desweal.errors import DeswealError
from desweal.model.config_io import load_goals_config, save_goals_config
from desweal.model.goal import GoalState
from desweal.services.goal_tracker import GoalProgress, GoalProjection, GoalTracker
from desweal.workspace import Workspace
from .util import console, open_ledger, print_error

_STATE_STYLE = {
    GoalState.active: "cyan",
    GoalState.completed: "green",
    GoalState.archived: "dim",
}


def run(
    *,
    workspace: Workspace,
    as_of: Optional[date] = None,
    include_archived: bool = False,
    write: bool = False,
) -> int:
    """Show progress for each goal and move reached goals to completed.

    State changes are only saved with write=True.

    Returns:
        Exit code (0 on success, 1 on error)
    """
    tracker = GoalTracker()
    try:
        config = load_goals_config(workspace.goals_config)
        ledger = open_ledger(workspace)
    except DeswealError as e:
        print_error(e)
        return 1

    if not config.goals:
        console.print("[yellow]No goals defined.[/] Add one with 'desweal goal --add'.")
        return 0

    table = Table(title="Savings Goals", show_lines=True)
    table.add_column("Goal", style="cyan", no_wrap=True)
    table.add_column("State")
    table.add_column("Progress", justify="right")
    table.add_column("Target", justify="right")
    table.add_column("%", justify="right")
    table.add_column("Per Month", justify="right")
    table.add_column("Projected")

    refreshed = config
    newly_completed = []
    for goal in config.goals:
        current = tracker.refresh(goal, ledger)
        if current.state != goal.state:
            newly_completed.append(goal.goal_id)
            refreshed = refreshed.replace_goal(current)
        if current.is_archived and not include_archived:
            continue
        progress = tracker.progress(current, ledger)
        projection = tracker.projected_completion_date(current, ledger, as_of=as_of)
        _add_goal_row(table, current.name or current.goal_id, current.state, progress, projection)

    console.print(table)

    for goal_id in newly_completed:
        console.print(f"[green]🎉 Goal reached:[/] {goal_id}")

    if newly_completed:
        if write:
            save_goals_config(workspace.goals_config, refreshed)
            console.print(f"[green]Saved[/] {workspace.goals_config}")
        else:
            console.print("[dim]Dry-run: use --write to mark completed goals[/]")
    return 0


def _add_goal_row(
    table: Table,
    label: str,
    state: GoalState,
    progress: GoalProgress,
    projection: GoalProjection,
) -> None:
    if projection.indeterminate:
        projected = "[yellow]indeterminate[/]"
    else:
        projected = projection.projected_date.isoformat()

    raw = f"${progress.progress:,.2f}"
    if progress.raw_total > progress.target:
        raw += f" [dim](${progress.raw_total:,.2f})[/]"

    table.add_row(
        label,
        f"[{_STATE_STYLE[state]}]{state.value}[/]",
        raw,
        f"${progress.target:,.2f}",
        f"{progress.percent}%",
        f"${projection.velocity:,.2f}",
        projected,
    )
