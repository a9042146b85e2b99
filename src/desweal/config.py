"""
Central configuration for the DESWEAL ledger core.

Path resolution lives in desweal.workspace.Workspace, which computes all data
locations from a single workspace root:
  1. Explicit --data-dir CLI option
  2. DESWEAL_DATA environment variable
  3. Current working directory
"""

from decimal import Decimal

DEFAULT_CURRENCY = "CAD"

# Smallest currency unit; allocations are quantized to this.
CURRENCY_QUANTUM = Decimal("0.01")

# Allowed deviation from 100 when summing scheme percentages.
PERCENT_TOLERANCE = Decimal("0.01")

# Trailing calendar months used for goal contribution velocity.
VELOCITY_WINDOW_MONTHS = 3
