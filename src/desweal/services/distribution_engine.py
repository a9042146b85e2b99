"""
Distribution engine - split an income amount across scheme buckets.

Each bucket receives income * percentage / total percentage, rounded
half-to-even to the smallest currency unit. Dividing by the scheme's actual
total keeps schemes that only sum to 100 within tolerance proportional, so
the rounding residual stays within one unit per bucket. The residual is
added to the last bucket with a positive percentage (spilling into earlier
buckets if that one would go negative), so allocations always sum exactly to
the income amount.

NO IMPORTS FROM:
- rich (console, table, prompt)
- typer

All functions return data structures.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from decimal import ROUND_HALF_EVEN, Decimal, InvalidOperation
from enum import StrEnum
from typing import Optional

from pydantic import ValidationError as PydanticValidationError

from desweal.config import CURRENCY_QUANTUM, PERCENT_TOLERANCE
from desweal.errors import NotFoundError, ValidationError, describe_validation_error
from desweal.model.distribution import PRESET_SCHEMES, DistributionScheme, SchemeConfig, SchemeKind
from desweal.model.transaction import TransactionCategory
from desweal.services.ledger import DateRange, Ledger

logger = logging.getLogger(__name__)

HUNDRED = Decimal("100")


class SchemeViolationKind(StrEnum):
    """Which scheme invariant was broken."""

    empty = "empty"
    negative_percentage = "negative_percentage"
    sum_not_100 = "sum_not_100"


@dataclass(frozen=True)
class SchemeViolation:
    """First invariant violation found in a scheme."""

    kind: SchemeViolationKind
    message: str
    bucket: Optional[str] = None


@dataclass(frozen=True)
class Allocation:
    """Result of applying a scheme to an income amount."""

    scheme_name: str
    income: Decimal
    buckets: dict[str, Decimal] = field(default_factory=dict)

    @property
    def total(self) -> Decimal:
        return sum(self.buckets.values(), Decimal("0"))


def _to_decimal(value: Decimal | int | str | float) -> Decimal:
    if isinstance(value, float):
        value = str(value)
    try:
        return value if isinstance(value, Decimal) else Decimal(value)
    except (InvalidOperation, TypeError) as e:
        raise ValidationError(f"Invalid amount: {value!r}") from e


class DistributionEngine:
    """
    Applies distribution schemes to income.

    This is the functional core - pure computation with no I/O.
    """

    def __init__(
        self,
        quantum: Decimal = CURRENCY_QUANTUM,
        tolerance: Decimal = PERCENT_TOLERANCE,
    ):
        """
        Args:
            quantum: Smallest currency unit allocations are rounded to
            tolerance: Allowed deviation of the percentage sum from 100
        """
        self.quantum = quantum
        self.tolerance = tolerance

    def validate_scheme(self, scheme: DistributionScheme) -> SchemeViolation | None:
        """Return the first invariant the scheme violates, or None if valid."""
        if not scheme.buckets:
            return SchemeViolation(
                kind=SchemeViolationKind.empty,
                message=f"Scheme '{scheme.name}' has no buckets",
            )
        for label, pct in scheme.buckets.items():
            if pct < 0:
                return SchemeViolation(
                    kind=SchemeViolationKind.negative_percentage,
                    message=f"Bucket '{label}' has negative percentage {pct}",
                    bucket=label,
                )
        total = scheme.total_percentage
        if abs(total - HUNDRED) > self.tolerance:
            return SchemeViolation(
                kind=SchemeViolationKind.sum_not_100,
                message=f"Scheme '{scheme.name}' percentages sum to {total}, expected 100",
            )
        return None

    def ensure_valid(self, scheme: DistributionScheme) -> DistributionScheme:
        """Raise ValidationError if the scheme violates an invariant."""
        violation = self.validate_scheme(scheme)
        if violation is not None:
            raise ValidationError(violation.message)
        return scheme

    def allocate(self, income_amount: Decimal | int | str, scheme: DistributionScheme) -> Allocation:
        """Split income across the scheme's buckets.

        Args:
            income_amount: Positive amount expressed in whole currency units (e.g. 100.00)
            scheme: Scheme to apply

        Returns:
            Allocation whose bucket amounts sum exactly to income_amount

        Raises:
            ValidationError: income not positive, finer than the currency unit, or invalid scheme
        """
        income = _to_decimal(income_amount)
        if not income.is_finite() or income <= 0:
            raise ValidationError(f"Income must be positive: {income_amount}")
        if self._quantize(income) != income:
            raise ValidationError(f"Income {income} is finer than currency unit {self.quantum}")
        self.ensure_valid(scheme)

        total_pct = scheme.total_percentage
        buckets = {
            label: self._quantize(income * pct / total_pct) for label, pct in scheme.buckets.items()
        }

        residual = income - sum(buckets.values(), Decimal("0"))
        if residual:
            self._absorb_residual(buckets, residual, scheme)

        return Allocation(scheme_name=scheme.name, income=income, buckets=buckets)

    def _quantize(self, value: Decimal) -> Decimal:
        try:
            return value.quantize(self.quantum, rounding=ROUND_HALF_EVEN)
        except InvalidOperation as e:
            raise ValidationError(f"Amount {value} is too large to allocate") from e

    def _absorb_residual(self, buckets: dict[str, Decimal], residual: Decimal, scheme: DistributionScheme) -> None:
        # Last positive bucket first; a negative residual larger than that
        # bucket spills into earlier positive buckets so none drops below zero.
        target = self._residual_bucket(scheme)
        if residual > 0 or buckets[target] + residual >= 0:
            buckets[target] += residual
            logger.debug("Assigned rounding residual %s to bucket %s", residual, target)
            return
        positive = [label for label, pct in scheme.buckets.items() if pct > 0]
        for label in reversed(positive):
            taken = min(buckets[label], -residual)
            buckets[label] -= taken
            residual += taken
            if not residual:
                break
        logger.debug("Spread rounding residual across buckets of %s", scheme.name)

    def propose(
        self,
        ledger: Ledger,
        scheme: DistributionScheme,
        date_range: DateRange | None = None,
    ) -> Allocation:
        """Allocate the ledger's income total for the period.

        Raises:
            ValidationError: no positive income in the period, or invalid scheme
        """
        income = ledger.totals_by_category(date_range)[TransactionCategory.income]
        income = self._quantize(income)
        if income <= 0:
            raise ValidationError("No income recorded for the period")
        return self.allocate(income, scheme)

    @staticmethod
    def _residual_bucket(scheme: DistributionScheme) -> str:
        positive = [label for label, pct in scheme.buckets.items() if pct > 0]
        return positive[-1] if positive else scheme.labels[-1]

    # ------------------------------
    # Scheme registry
    # ------------------------------

    @staticmethod
    def presets() -> list[DistributionScheme]:
        return list(PRESET_SCHEMES.values())

    def resolve(self, name: str, custom: SchemeConfig | None = None) -> DistributionScheme:
        """Find a scheme by name, presets first.

        Raises:
            NotFoundError: no preset or custom scheme has that name
        """
        scheme = PRESET_SCHEMES.get(name)
        if scheme is None and custom is not None:
            scheme = custom.find_scheme(name)
        if scheme is None:
            raise NotFoundError("Scheme", name)
        return scheme

    def build_custom(self, name: str, buckets: dict[str, Decimal | int | str]) -> DistributionScheme:
        """Create a custom scheme, validated against the preset invariants.

        Raises:
            ValidationError: name clashes with a preset, or percentages are invalid
        """
        if name in PRESET_SCHEMES:
            raise ValidationError(f"Scheme name is reserved for a preset: {name}")
        try:
            scheme = DistributionScheme(
                name=name,
                buckets={label: _to_decimal(pct) for label, pct in buckets.items()},
                kind=SchemeKind.custom,
            )
        except PydanticValidationError as e:
            raise ValidationError(describe_validation_error(e, "scheme")) from e
        return self.ensure_valid(scheme)


__all__ = [
    "Allocation",
    "DistributionEngine",
    "SchemeViolation",
    "SchemeViolationKind",
]
