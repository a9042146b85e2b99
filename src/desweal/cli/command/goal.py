from __future__ import annotations

"""
Manage savings goals (add, archive).
"""

from datetime import date
from decimal import Decimal
from typing import Optional

from pydantic import ValidationError as PydanticValidationError

from desweal.errors import DeswealError, NotFoundError, ValidationError, describe_validation_error
from desweal.model.config_io import load_goals_config, save_goals_config
from desweal.model.goal import GoalConfig, SavingsGoal
from desweal.services.goal_tracker import GoalTracker
from desweal.workspace import Workspace
from .util import console, print_error


def run(
    *,
    add: Optional[str] = None,
    archive: Optional[str] = None,
    name: Optional[str] = None,
    target: Optional[Decimal | str] = None,
    start: Optional[date] = None,
    target_date: Optional[date] = None,
    workspace: Workspace,
    write: bool = False,
) -> int:
    """Add a goal or archive an existing one.

    Actions (mutually exclusive):
    - --add GOAL_ID --target AMOUNT: Add an active goal
    - --archive GOAL_ID: Archive an active or completed goal

    Returns:
        Exit code (0 on success, 1 on error)
    """
    if (add is None) == (archive is None):
        console.print("[red]Error:[/] Specify exactly one action: --add or --archive")
        return 1

    try:
        config = load_goals_config(workspace.goals_config)
        if add:
            updated = _add(config, add, name, target, start, target_date)
            console.print(f"[green]Adding goal '{add}'[/] (target {updated.find_goal(add).target})")
        else:
            updated = _archive(config, archive)
            console.print(f"[green]Archiving goal '{archive}'[/]")
    except DeswealError as e:
        print_error(e)
        return 1

    if not write:
        console.print("[dim]Dry-run: use --write to persist[/]")
        return 0

    save_goals_config(workspace.goals_config, updated)
    console.print(f"[green]Saved[/] {workspace.goals_config}")
    return 0


def _add(
    config: GoalConfig,
    goal_id: str,
    name: Optional[str],
    target: Optional[Decimal | str],
    start: Optional[date],
    target_date: Optional[date],
) -> GoalConfig:
    if target is None:
        raise ValidationError("--target is required when adding a goal")
    if config.find_goal(goal_id):
        raise ValidationError(f"Goal already exists: {goal_id}")
    try:
        goal = SavingsGoal(
            goal_id=goal_id,
            name=name or goal_id,
            target=target,
            start_date=start,
            target_date=target_date,
        )
    except PydanticValidationError as e:
        raise ValidationError(describe_validation_error(e, "goal")) from e
    return GoalConfig(goals=[*config.goals, goal])


def _archive(config: GoalConfig, goal_id: str) -> GoalConfig:
    goal = config.find_goal(goal_id)
    if goal is None:
        raise NotFoundError("Goal", goal_id)
    return config.replace_goal(GoalTracker().archive(goal))
