from __future__ import annotations

"""
Distribution scheme models for splitting income into buckets.

Scope
- Pure Pydantic v2 models for named percentage policies
- Mirrors config/schemes.yml structure
- No I/O operations (handled by scheme_io.py)

A scheme is structurally valid on construction (labels present, numeric
percentages). The percentage invariant (non-negative, summing to 100) is
checked by DistributionEngine.validate_scheme so that invalid user input can
be reported precisely instead of failing at parse time.
"""

from decimal import Decimal
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field, field_serializer, field_validator


class SchemeKind(StrEnum):
    """Where a scheme comes from."""

    preset = "preset"
    custom = "custom"


class DistributionScheme(BaseModel):
    """Named mapping of bucket label to percentage.

    Bucket order is significant: the last bucket absorbs rounding residual
    during allocation.
    """

    name: str = Field(min_length=1, description="Scheme name")
    buckets: dict[str, Decimal] = Field(description="Bucket label to percentage")
    kind: SchemeKind = Field(default=SchemeKind.custom)
    description: str | None = None

    @field_validator("buckets", mode="before")
    @classmethod
    def parse_buckets(cls, value: Any) -> Any:
        """Convert percentages to Decimal without float artifacts."""
        if isinstance(value, dict):
            return {
                str(label).strip(): Decimal(str(pct)) if isinstance(pct, float) else pct
                for label, pct in value.items()
            }
        return value

    @field_serializer("buckets")
    def serialize_buckets(self, value: dict[str, Decimal]) -> dict[str, str]:
        return {label: str(pct) for label, pct in value.items()}

    @property
    def total_percentage(self) -> Decimal:
        return sum(self.buckets.values(), Decimal("0"))

    @property
    def labels(self) -> list[str]:
        return list(self.buckets)


class SchemeConfig(BaseModel):
    """Root configuration for custom schemes (config/schemes.yml)."""

    schemes: list[DistributionScheme] = Field(default_factory=list)

    def find_scheme(self, name: str) -> DistributionScheme | None:
        for scheme in self.schemes:
            if scheme.name == name:
                return scheme
        return None


def _preset(name: str, description: str, **buckets: int) -> DistributionScheme:
    return DistributionScheme(
        name=name,
        buckets={label: Decimal(pct) for label, pct in buckets.items()},
        kind=SchemeKind.preset,
        description=description,
    )


PRESET_SCHEMES: dict[str, DistributionScheme] = {
    scheme.name: scheme
    for scheme in (
        _preset("50/30/20", "Needs, wants, savings", needs=50, wants=30, savings=20),
        _preset("60/20/20", "Heavier needs, equal wants and savings", needs=60, wants=20, savings=20),
        _preset("70/20/10", "Needs, savings, wants", needs=70, savings=20, wants=10),
    )
}


__all__ = [
    "DistributionScheme",
    "PRESET_SCHEMES",
    "SchemeConfig",
    "SchemeKind",
]
