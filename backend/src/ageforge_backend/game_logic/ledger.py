"""Resource balances tracked by a game."""

from __future__ import annotations

from pydantic import BaseModel, Field, model_validator
from pydantic.config import ConfigDict

from ageforge_backend.shared.value_objects import ResourceKind, ResourceVector


class ResourceLedger(BaseModel):
    """Spendable and lifetime balances held in an immutable fashion.

    ``current`` never drops below zero and ``lifetime`` only grows: the
    mutators clamp every result instead of raising, so callers do not have to
    guard against floating point drift.
    """

    model_config = ConfigDict(frozen=True)

    current: ResourceVector = Field(default_factory=ResourceVector.zero)
    lifetime: ResourceVector = Field(default_factory=ResourceVector.zero)

    @model_validator(mode="after")
    def _validate_non_negative(self) -> ResourceLedger:
        """Ensure stored balances are non-negative."""
        for label, vector in (("current", self.current), ("lifetime", self.lifetime)):
            for resource, amount in vector.items():
                if amount < 0:
                    msg = f"Ledger {label} balance for {resource} cannot be negative."
                    raise ValueError(msg)
        return self

    @classmethod
    def empty(cls) -> ResourceLedger:
        """Return a ledger holding nothing."""
        return cls()

    def amount(self, resource: ResourceKind) -> float:
        """Return the spendable balance for *resource*."""
        return self.current.get(resource)

    def total(self, resource: ResourceKind) -> float:
        """Return the lifetime total for *resource*."""
        return self.lifetime.get(resource)

    def can_afford(self, cost: ResourceVector) -> bool:
        """Return whether every component of *cost* is covered."""
        return all(self.current.get(resource) >= amount for resource, amount in cost.items())

    def apply_cost(self, cost: ResourceVector) -> ResourceLedger:
        """Subtract *cost* from the spendable balance, flooring at zero."""
        if cost.is_zero():
            return self
        current = self.current.as_dict()
        for resource, amount in cost.items():
            current[resource] = max(current.get(resource, 0.0) - amount, 0.0)
        return ResourceLedger(current=ResourceVector(amounts=current), lifetime=self.lifetime)

    def apply_gain(self, gain: ResourceVector) -> ResourceLedger:
        """Add *gain* to the spendable balance.

        Positive components are mirrored into the lifetime totals. Negative
        components leave the lifetime totals untouched and the spendable result
        is floored at zero.
        """
        if gain.is_zero():
            return self
        current = self.current.as_dict()
        lifetime = self.lifetime.as_dict()
        for resource, amount in gain.items():
            current[resource] = max(current.get(resource, 0.0) + amount, 0.0)
            if amount > 0:
                lifetime[resource] = lifetime.get(resource, 0.0) + amount
        return ResourceLedger(
            current=ResourceVector(amounts=current),
            lifetime=ResourceVector(amounts=lifetime),
        )


__all__ = ["ResourceLedger"]
