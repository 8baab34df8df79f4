"""Immutable value objects shared across the domain layer."""

from __future__ import annotations

import math
from collections.abc import Iterator, Mapping
from enum import StrEnum

from pydantic import BaseModel, Field, field_validator
from pydantic.config import ConfigDict


class ResourceKind(StrEnum):
    """Closed set of resource categories tracked by the ledger."""

    FOOD = "food"
    MATERIALS = "materials"
    KNOWLEDGE = "knowledge"
    POWER = "power"
    DATA = "data"


RESOURCE_ORDER: tuple[ResourceKind, ...] = tuple(ResourceKind)


class ResourceVector(BaseModel):
    """Immutable mapping from resource kind to a real quantity.

    Components that are not present read as zero. Vectors are used both for
    full balances (every kind present) and sparse deltas such as costs, gains
    and rates, so negative components are allowed here; non-negativity of the
    spendable balance is enforced by the ledger.
    """

    model_config = ConfigDict(frozen=True)

    amounts: dict[ResourceKind, float] = Field(default_factory=dict)

    @field_validator("amounts")
    @classmethod
    def _ensure_finite(cls, value: dict[ResourceKind, float]) -> dict[ResourceKind, float]:
        """Reject NaN and infinite components."""
        for resource, amount in value.items():
            if not math.isfinite(amount):
                msg = f"Resource {resource} must be finite, got {amount}."
                raise ValueError(msg)
        return value

    @classmethod
    def zero(cls) -> ResourceVector:
        """Return a full vector holding zero for every resource kind."""
        return cls(amounts=dict.fromkeys(RESOURCE_ORDER, 0.0))

    @classmethod
    def of(cls, values: Mapping[ResourceKind | str, float] | None = None) -> ResourceVector:
        """Build a vector from a mapping keyed by kinds or their string values."""
        if not values:
            return cls()
        return cls(
            amounts={ResourceKind(key): float(amount) for key, amount in values.items()}
        )

    def get(self, resource: ResourceKind) -> float:
        """Return the component for *resource* (zero when absent)."""
        return self.amounts.get(resource, 0.0)

    def items(self) -> Iterator[tuple[ResourceKind, float]]:
        """Iterate components in canonical resource order."""
        for resource in RESOURCE_ORDER:
            if resource in self.amounts:
                yield resource, self.amounts[resource]

    def scaled(self, factor: float) -> ResourceVector:
        """Return a vector with every component multiplied by *factor*."""
        return ResourceVector(
            amounts={resource: amount * factor for resource, amount in self.items()}
        )

    def plus(self, other: ResourceVector) -> ResourceVector:
        """Return the component-wise sum of both vectors."""
        combined = dict(self.amounts)
        for resource, amount in other.items():
            combined[resource] = combined.get(resource, 0.0) + amount
        return ResourceVector(amounts=combined)

    def minus(self, other: ResourceVector) -> ResourceVector:
        """Return the component-wise difference ``self - other``."""
        return self.plus(other.scaled(-1.0))

    def positive_part(self) -> ResourceVector:
        """Return only the strictly positive components."""
        return ResourceVector(
            amounts={resource: amount for resource, amount in self.items() if amount > 0}
        )

    def negative_part(self) -> ResourceVector:
        """Return the magnitudes of the strictly negative components."""
        return ResourceVector(
            amounts={resource: -amount for resource, amount in self.items() if amount < 0}
        )

    def is_zero(self) -> bool:
        """Return ``True`` when every component equals zero."""
        return all(amount == 0 for amount in self.amounts.values())

    def as_dict(self) -> dict[ResourceKind, float]:
        """Return a mutable copy of the components in canonical order."""
        return dict(self.items())


__all__ = ["RESOURCE_ORDER", "ResourceKind", "ResourceVector"]
