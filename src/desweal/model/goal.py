from __future__ import annotations

"""
Savings goal models.

Scope
- Pure Pydantic v2 models for savings goals
- Mirrors config/goals.yml structure
- Progress is never stored here; GoalTracker derives it from the ledger
"""

from datetime import date
from decimal import Decimal
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field, field_serializer, field_validator, model_validator


class GoalState(StrEnum):
    """Lifecycle state of a savings goal.

    active -> completed (one-way), active -> archived, completed -> archived.
    Nothing leaves archived.
    """

    active = "active"
    completed = "completed"
    archived = "archived"


class SavingsGoal(BaseModel):
    """A savings target tracked against ledger contributions."""

    goal_id: str = Field(min_length=1)
    name: str = ""
    target: Decimal = Field(gt=0, description="Target amount in currency units")
    start_date: date | None = Field(default=None, description="Start of the active window")
    target_date: date | None = Field(default=None, description="End of the active window")
    state: GoalState = GoalState.active

    @field_validator("target", mode="before")
    @classmethod
    def parse_target(cls, value: Any) -> Any:
        if isinstance(value, float):
            return Decimal(str(value))
        return value

    @field_serializer("target")
    def serialize_target(self, value: Decimal) -> str:
        return str(value)

    @model_validator(mode="after")
    def _validate_window(self) -> SavingsGoal:
        if self.start_date and self.target_date and self.target_date < self.start_date:
            raise ValueError(f"Goal {self.goal_id}: target_date precedes start_date")
        return self

    @property
    def is_archived(self) -> bool:
        return self.state == GoalState.archived


class GoalConfig(BaseModel):
    """Root configuration for savings goals (config/goals.yml)."""

    goals: list[SavingsGoal] = Field(default_factory=list)

    def find_goal(self, goal_id: str) -> SavingsGoal | None:
        for goal in self.goals:
            if goal.goal_id == goal_id:
                return goal
        return None

    def replace_goal(self, goal: SavingsGoal) -> GoalConfig:
        """Return a config with the goal of the same id swapped for `goal`."""
        return GoalConfig(
            goals=[goal if g.goal_id == goal.goal_id else g for g in self.goals]
        )


__all__ = [
    "GoalConfig",
    "GoalState",
    "SavingsGoal",
]
