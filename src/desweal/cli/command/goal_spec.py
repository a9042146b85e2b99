from __future__ import annotations

"""
Tests for goal command.
"""

from pathlib import Path
from tempfile import TemporaryDirectory

from desweal.cli.command import goal
from desweal.model.config_io import load_goals_config
from desweal.model.goal import GoalState
from desweal.workspace import Workspace


class DescribeGoalCommand:
    def it_should_add_goal(self):
        with TemporaryDirectory() as tmpdir:
            workspace = Workspace(root=Path(tmpdir))

            rc = goal.run(add="car", target="1000", workspace=workspace, write=True)

            saved = load_goals_config(workspace.goals_config).find_goal("car")
            assert rc == 0
            assert saved.name == "car"
            assert saved.state == GoalState.active

    def it_should_require_target(self):
        with TemporaryDirectory() as tmpdir:
            assert goal.run(add="car", workspace=Workspace(root=Path(tmpdir)), write=True) == 1

    def it_should_reject_non_positive_target(self):
        with TemporaryDirectory() as tmpdir:
            workspace = Workspace(root=Path(tmpdir))

            assert goal.run(add="car", target="0", workspace=workspace, write=True) == 1

    def it_should_archive_goal_once(self):
        with TemporaryDirectory() as tmpdir:
            workspace = Workspace(root=Path(tmpdir))
            goal.run(add="car", target="1000", workspace=workspace, write=True)

            assert goal.run(archive="car", workspace=workspace, write=True) == 0
            assert goal.run(archive="car", workspace=workspace, write=True) == 1

            saved = load_goals_config(workspace.goals_config).find_goal("car")
            assert saved.state == GoalState.archived

    def it_should_fail_to_archive_unknown_goal(self):
        with TemporaryDirectory() as tmpdir:
            assert goal.run(archive="nope", workspace=Workspace(root=Path(tmpdir)), write=True) == 1
