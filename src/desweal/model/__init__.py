from .distribution import PRESET_SCHEMES, DistributionScheme, SchemeConfig, SchemeKind
from .goal import GoalConfig, GoalState, SavingsGoal
from .transaction import Transaction, TransactionCategory, new_transaction_id

__all__ = [
    # models
    "DistributionScheme",
    "GoalConfig",
    "GoalState",
    "PRESET_SCHEMES",
    "SavingsGoal",
    "SchemeConfig",
    "SchemeKind",
    "Transaction",
    "TransactionCategory",
    "new_transaction_id",
]
