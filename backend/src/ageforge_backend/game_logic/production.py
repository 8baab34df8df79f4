"""Producer/consumer evaluation for a single time slice."""

from __future__ import annotations

from collections.abc import Mapping

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict

from ageforge_backend.game_logic.catalog import GameCatalog
from ageforge_backend.game_logic.ledger import ResourceLedger
from ageforge_backend.game_logic.modifiers import ModifierAccumulator
from ageforge_backend.shared.value_objects import ResourceVector


class ProductionResult(BaseModel):
    """Ledger after a production slice and the utilization of each producer."""

    model_config = ConfigDict(frozen=True)

    ledger: ResourceLedger
    utilization: dict[str, float] = Field(default_factory=dict)


def run_production(
    ledger: ResourceLedger,
    catalog: GameCatalog,
    producer_counts: Mapping[str, int],
    modifiers: ModifierAccumulator,
    *,
    tier_index: int,
    dt: float,
) -> ProductionResult:
    """Run every unlocked producer for *dt* seconds against *ledger*.

    Producers are evaluated in catalog order against the running balance, so an
    earlier producer's output is available to later consumers within the same
    slice. A producer short on any input runs at the fraction of demand the
    scarcest input can cover.
    """
    current = ledger.current.as_dict()
    lifetime = ledger.lifetime.as_dict()
    utilization: dict[str, float] = {}
    if dt <= 0:
        return ProductionResult(ledger=ledger)

    for structure in catalog.structures:
        if structure.unlock_tier > tier_index:
            continue
        count = producer_counts.get(structure.identifier, 0)
        if count <= 0:
            continue

        input_factor = modifiers.input_factor(structure.identifier)
        needs = {
            resource: rate * count * dt * input_factor
            for resource, rate in structure.inputs.items()
        }
        ratio = 1.0
        for resource, need in needs.items():
            if need > 0:
                ratio = min(ratio, current.get(resource, 0.0) / need)
        ratio = min(max(ratio, 0.0), 1.0)
        utilization[structure.identifier] = ratio
        if ratio <= 0:
            continue

        for resource, need in needs.items():
            current[resource] = max(current.get(resource, 0.0) - need * ratio, 0.0)

        multiplier = modifiers.global_output * modifiers.for_producer(structure.identifier)
        for resource, rate in structure.outputs.items():
            amount = rate * count * dt * ratio * multiplier * modifiers.for_resource(resource)
            if amount <= 0:
                continue
            current[resource] = current.get(resource, 0.0) + amount
            lifetime[resource] = lifetime.get(resource, 0.0) + amount

    return ProductionResult(
        ledger=ResourceLedger(
            current=ResourceVector(amounts=current),
            lifetime=ResourceVector(amounts=lifetime),
        ),
        utilization=utilization,
    )


def rates_per_second(
    ledger: ResourceLedger,
    catalog: GameCatalog,
    producer_counts: Mapping[str, int],
    modifiers: ModifierAccumulator,
    *,
    tier_index: int,
) -> ResourceVector:
    """Return the net change one second of production would cause."""
    result = run_production(
        ledger,
        catalog,
        producer_counts,
        modifiers,
        tier_index=tier_index,
        dt=1.0,
    )
    return result.ledger.current.minus(ledger.current)


__all__ = ["ProductionResult", "rates_per_second", "run_production"]
