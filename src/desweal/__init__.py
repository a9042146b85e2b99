"""
DESWEAL ledger core.

Transaction ledger with rule-based income distribution and savings goal
tracking. Local-only: nothing in this package performs network I/O.
"""

__version__ = "0.1.0"
