from __future__ import annotations

import pytest
from pydantic import ValidationError

from ageforge_backend.game_logic.catalog import ProducerDefinition, get_default_catalog
from ageforge_backend.game_logic.costs import purchase_cost
from ageforge_backend.shared.value_objects import ResourceKind, ResourceVector


def test_first_purchase_costs_the_base_price() -> None:
    base = ResourceVector.of({"food": 20, "materials": 10})

    assert purchase_cost(base, 1.15, 0).as_dict() == {
        ResourceKind.FOOD: 20.0,
        ResourceKind.MATERIALS: 10.0,
    }


def test_cost_rounds_up_each_component() -> None:
    cost = purchase_cost(ResourceVector.of({"food": 20, "materials": 10}), 1.15, 1)

    assert cost.get(ResourceKind.FOOD) == 23
    assert cost.get(ResourceKind.MATERIALS) == 12


def test_unspecified_components_stay_absent() -> None:
    cost = purchase_cost(ResourceVector.of({"knowledge": 55}), 1.6, 3)

    assert set(cost.amounts) == {ResourceKind.KNOWLEDGE}


def test_costs_strictly_increase_for_every_catalog_entity() -> None:
    catalog = get_default_catalog()
    for entity in (*catalog.structures, *catalog.upgrades, *catalog.units):
        previous = purchase_cost(entity.base_cost, entity.cost_growth, 0)
        for owned in range(1, 40):
            current = purchase_cost(entity.base_cost, entity.cost_growth, owned)
            for resource, amount in current.items():
                assert amount > previous.get(resource), (entity.identifier, owned)
            previous = current


def test_negative_owned_count_is_rejected() -> None:
    with pytest.raises(ValueError, match="negative"):
        purchase_cost(ResourceVector.of({"food": 20}), 1.15, -1)


def test_definitions_reject_prices_too_small_to_grow() -> None:
    with pytest.raises(ValidationError):
        ProducerDefinition(
            identifier="pebble",
            name="Pebble",
            base_cost=ResourceVector.of({"food": 2}),
            cost_growth=1.15,
            outputs=ResourceVector.of({"food": 1}),
        )


def test_definitions_reject_growth_at_or_below_one() -> None:
    with pytest.raises(ValidationError):
        ProducerDefinition(
            identifier="flat",
            name="Flat",
            base_cost=ResourceVector.of({"food": 200}),
            cost_growth=1.0,
            outputs=ResourceVector.of({"food": 1}),
        )
