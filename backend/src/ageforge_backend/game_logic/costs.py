"""Geometric purchase price curve."""

from __future__ import annotations

import math

from ageforge_backend.shared.value_objects import ResourceVector

_ROUNDING_TOLERANCE = 1e-9


def purchase_cost(base_cost: ResourceVector, growth: float, owned: int) -> ResourceVector:
    """Return the price of the next unit when *owned* are already held.

    Every component is ``ceil(base * growth ** owned)``; components absent from
    *base_cost* stay absent.
    """
    if owned < 0:
        msg = "Owned count cannot be negative."
        raise ValueError(msg)
    factor = growth**owned
    # 110.00000000000001 must price as 110, not 111.
    return ResourceVector(
        amounts={
            resource: float(math.ceil(amount * factor - _ROUNDING_TOLERANCE))
            for resource, amount in base_cost.items()
        }
    )


__all__ = ["purchase_cost"]
