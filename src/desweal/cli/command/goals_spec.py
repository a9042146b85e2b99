from __future__ import annotations

"""
Tests for goals command.
"""

from datetime import date, datetime
from pathlib import Path
from tempfile import TemporaryDirectory

from desweal.cli.command import add, goal, goals
from desweal.model.config_io import load_goals_config
from desweal.model.goal import GoalState
from desweal.workspace import Workspace


def _setup(workspace: Workspace, deposit: str):
    goal.run(add="car", target="1000", workspace=workspace, write=True)
    add.run(
        amount=deposit,
        category="savings",
        goal="car",
        timestamp=datetime(2026, 2, 1),
        workspace=workspace,
        write=True,
    )


class DescribeGoalsCommand:
    def it_should_mark_reached_goals_completed_with_write(self):
        with TemporaryDirectory() as tmpdir:
            workspace = Workspace(root=Path(tmpdir))
            _setup(workspace, "1000")

            rc = goals.run(workspace=workspace, as_of=date(2026, 2, 15), write=True)

            assert rc == 0
            assert load_goals_config(workspace.goals_config).find_goal("car").state == GoalState.completed

    def it_should_leave_state_alone_during_dry_run(self):
        with TemporaryDirectory() as tmpdir:
            workspace = Workspace(root=Path(tmpdir))
            _setup(workspace, "1000")

            rc = goals.run(workspace=workspace, as_of=date(2026, 2, 15))

            assert rc == 0
            assert load_goals_config(workspace.goals_config).find_goal("car").state == GoalState.active

    def it_should_show_partial_progress(self):
        with TemporaryDirectory() as tmpdir:
            workspace = Workspace(root=Path(tmpdir))
            _setup(workspace, "300")

            assert goals.run(workspace=workspace, as_of=date(2026, 2, 15), write=True) == 0
            assert load_goals_config(workspace.goals_config).find_goal("car").state == GoalState.active

    def it_should_handle_no_goals(self):
        with TemporaryDirectory() as tmpdir:
            assert goals.run(workspace=Workspace(root=Path(tmpdir))) == 0
