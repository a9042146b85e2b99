"""
Goal tracker - savings goal progress derived from the ledger.

Contributions to a goal are the non-deleted transactions tagged with its
goal_id. A goal with no tagged transactions at all falls back to every
savings-category transaction inside its active window.

Goal lifecycle:
- active -> completed when contributions reach the target (one-way)
- active or completed -> archived by user action
- nothing leaves archived

NO IMPORTS FROM:
- rich (console, table, prompt)
- typer
"""

from __future__ import annotations

import calendar
import logging
from dataclasses import dataclass
from datetime import date
from decimal import ROUND_CEILING, Decimal

from desweal.config import VELOCITY_WINDOW_MONTHS
from desweal.errors import ValidationError
from desweal.model.goal import GoalState, SavingsGoal
from desweal.model.transaction import Transaction, TransactionCategory
from desweal.services.ledger import DateRange, Ledger, TransactionFilter

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GoalProgress:
    """Progress view model for one goal."""

    goal_id: str
    target: Decimal
    raw_total: Decimal  # may exceed target or be negative
    progress: Decimal  # clamped to [0, target]
    completed: bool
    tagged: bool  # False when using the savings-category fallback

    @property
    def percent(self) -> Decimal:
        return (self.progress / self.target * 100).quantize(Decimal("0.1"))

    @property
    def remaining(self) -> Decimal:
        return max(self.target - self.raw_total, Decimal("0"))


@dataclass(frozen=True)
class GoalProjection:
    """Projected completion of a goal from recent contribution velocity."""

    goal_id: str
    velocity: Decimal  # average contribution per month over the window
    projected_date: date | None

    @property
    def indeterminate(self) -> bool:
        return self.projected_date is None


def add_months(d: date, months: int) -> date:
    """Shift a date by whole months, clamping the day to the target month's length."""
    year, month_index = divmod(d.month - 1 + months, 12)
    year += d.year
    month = month_index + 1
    day = min(d.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


class GoalTracker:
    """Computes goal progress and drives the goal state machine."""

    def __init__(self, window_months: int = VELOCITY_WINDOW_MONTHS):
        if window_months < 1:
            raise ValidationError("Velocity window must be at least one month")
        self.window_months = window_months

    def contributions(self, goal: SavingsGoal, ledger: Ledger) -> tuple[list[Transaction], bool]:
        """Transactions counting toward the goal and whether they are explicitly tagged."""
        tagged_any = next(
            iter(ledger.list_transactions(TransactionFilter(goal_id=goal.goal_id, include_deleted=True))),
            None,
        )
        if tagged_any is not None:
            return list(ledger.list_transactions(TransactionFilter(goal_id=goal.goal_id))), True

        window = DateRange.for_dates(goal.start_date, goal.target_date)
        criteria = TransactionFilter(category=TransactionCategory.savings, date_range=window)
        return list(ledger.list_transactions(criteria)), False

    def progress(self, goal: SavingsGoal, ledger: Ledger) -> GoalProgress:
        txns, tagged = self.contributions(goal, ledger)
        raw_total = sum((t.amount for t in txns), Decimal("0"))
        return GoalProgress(
            goal_id=goal.goal_id,
            target=goal.target,
            raw_total=raw_total,
            progress=max(Decimal("0"), min(raw_total, goal.target)),
            completed=raw_total >= goal.target,
            tagged=tagged,
        )

    def velocity(self, goal: SavingsGoal, ledger: Ledger, as_of: date) -> Decimal:
        """Average monthly contribution over the trailing window ending with as_of's month."""
        window_start = add_months(as_of.replace(day=1), -(self.window_months - 1))
        period = DateRange.for_dates(window_start, as_of)
        txns, _ = self.contributions(goal, ledger)
        total = sum((t.amount for t in txns if period.contains(t.timestamp)), Decimal("0"))
        return total / self.window_months

    def projected_completion_date(
        self,
        goal: SavingsGoal,
        ledger: Ledger,
        as_of: date | None = None,
    ) -> GoalProjection:
        """Linearly extrapolate when the goal reaches its target.

        Returns as_of itself when the goal is already reached, and an
        indeterminate projection when velocity is not positive.
        """
        as_of = as_of or date.today()
        progress = self.progress(goal, ledger)
        velocity = self.velocity(goal, ledger, as_of)

        if progress.completed:
            return GoalProjection(goal_id=goal.goal_id, velocity=velocity, projected_date=as_of)
        if velocity <= 0:
            return GoalProjection(goal_id=goal.goal_id, velocity=velocity, projected_date=None)

        months = int((progress.remaining / velocity).to_integral_value(rounding=ROUND_CEILING))
        return GoalProjection(
            goal_id=goal.goal_id,
            velocity=velocity,
            projected_date=add_months(as_of, months),
        )

    # ------------------------------
    # State machine
    # ------------------------------

    def refresh(self, goal: SavingsGoal, ledger: Ledger) -> SavingsGoal:
        """Move an active goal to completed once its target is reached."""
        if goal.state != GoalState.active:
            return goal
        if not self.progress(goal, ledger).completed:
            return goal
        logger.info("Goal %s completed", goal.goal_id)
        return goal.model_copy(update={"state": GoalState.completed})

    def archive(self, goal: SavingsGoal) -> SavingsGoal:
        """Archive an active or completed goal.

        Raises:
            ValidationError: goal is already archived
        """
        if goal.is_archived:
            raise ValidationError(f"Goal {goal.goal_id} is already archived")
        logger.info("Goal %s archived from %s", goal.goal_id, goal.state.value)
        return goal.model_copy(update={"state": GoalState.archived})


__all__ = [
    "GoalProgress",
    "GoalProjection",
    "GoalTracker",
    "add_months",
]
