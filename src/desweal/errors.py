"""
Error types raised by the ledger core.

All errors are raised synchronously to the caller of the failing operation.
A failed operation leaves prior state unmodified.
"""

from __future__ import annotations

from pydantic import ValidationError as PydanticValidationError


class DeswealError(Exception):
    """Base class for all ledger core errors."""


class ValidationError(DeswealError, ValueError):
    """Malformed input: zero amount, unknown category, invalid scheme, bad transition."""


class NotFoundError(DeswealError, LookupError):
    """Operation referenced an unknown identifier."""

    def __init__(self, kind: str, identifier: str):
        self.kind = kind
        self.identifier = identifier
        super().__init__(f"{kind} not found: {identifier}")


class PersistenceError(DeswealError):
    """The persistence collaborator rejected a write."""


def describe_validation_error(error: PydanticValidationError, default_loc: str = "value") -> str:
    """Flatten a pydantic ValidationError into one line of "field: message" parts."""
    parts = []
    for err in error.errors():
        loc = ".".join(str(p) for p in err.get("loc", ())) or default_loc
        parts.append(f"{loc}: {err.get('msg')}")
    return "; ".join(parts)


__all__ = [
    "DeswealError",
    "ValidationError",
    "NotFoundError",
    "PersistenceError",
    "describe_validation_error",
]
