"""
Service layer for the DESWEAL ledger core.

This package contains the functional core separated from the imperative
shell (CLI). Services hold no UI framework imports and receive their
collaborators through constructors or arguments.

Principles:
- No UI framework imports (Rich, Typer)
- All dependencies injected
- Functions return data structures, not void
- Fully testable with simple unit tests
"""

from desweal.services.distribution_engine import (
    Allocation,
    DistributionEngine,
    SchemeViolation,
    SchemeViolationKind,
)
from desweal.services.goal_tracker import GoalProgress, GoalProjection, GoalTracker
from desweal.services.ledger import (
    DateRange,
    Ledger,
    TransactionFilter,
    TransactionPersistence,
    TransactionView,
)

__all__ = [
    "Allocation",
    "DateRange",
    "DistributionEngine",
    "GoalProgress",
    "GoalProjection",
    "GoalTracker",
    "Ledger",
    "SchemeViolation",
    "SchemeViolationKind",
    "TransactionFilter",
    "TransactionPersistence",
    "TransactionView",
]
