from __future__ import annotations

# Command implementations for the desweal CLI.
# Each command module exposes a `run(...)` function that performs the action
# and prints to the console. Typer wrappers in desweal.cli.app delegate here.

__all__ = [
    "add",
    "allocate",
    "amend",
    "delete",
    "goal",
    "goals",
    "init",
    "scheme",
    "schemes",
    "totals",
    "transactions",
]
