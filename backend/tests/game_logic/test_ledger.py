from __future__ import annotations

import pytest
from pydantic import ValidationError

from ageforge_backend.game_logic.ledger import ResourceLedger
from ageforge_backend.shared.value_objects import ResourceKind, ResourceVector


def _ledger(**amounts: float) -> ResourceLedger:
    return ResourceLedger.empty().apply_gain(ResourceVector.of(amounts))


def test_gain_is_mirrored_into_lifetime() -> None:
    ledger = _ledger(food=5).apply_gain(ResourceVector.of({"food": 3, "data": 1}))

    assert ledger.amount(ResourceKind.FOOD) == 8
    assert ledger.total(ResourceKind.FOOD) == 8
    assert ledger.amount(ResourceKind.DATA) == 1
    assert ledger.total(ResourceKind.DATA) == 1


def test_negative_gain_never_decrements_lifetime() -> None:
    ledger = _ledger(food=5).apply_gain(ResourceVector.of({"food": -8}))

    assert ledger.amount(ResourceKind.FOOD) == 0
    assert ledger.total(ResourceKind.FOOD) == 5


def test_cost_is_floored_at_zero() -> None:
    ledger = _ledger(food=5, materials=2).apply_cost(
        ResourceVector.of({"food": 8, "materials": 1})
    )

    assert ledger.amount(ResourceKind.FOOD) == 0
    assert ledger.amount(ResourceKind.MATERIALS) == 1
    assert ledger.total(ResourceKind.FOOD) == 5


def test_can_afford_checks_every_component() -> None:
    ledger = _ledger(food=10, materials=4)

    assert ledger.can_afford(ResourceVector.of({"food": 10, "materials": 4}))
    assert not ledger.can_afford(ResourceVector.of({"food": 10, "materials": 5}))
    assert not ledger.can_afford(ResourceVector.of({"power": 1}))
    assert ledger.can_afford(ResourceVector())


def test_zero_vectors_return_the_same_ledger() -> None:
    ledger = _ledger(food=1)

    assert ledger.apply_gain(ResourceVector()) is ledger
    assert ledger.apply_cost(ResourceVector()) is ledger


def test_negative_balances_are_rejected() -> None:
    with pytest.raises(ValidationError):
        ResourceLedger(current=ResourceVector.of({"food": -1}))


def test_non_finite_amounts_are_rejected() -> None:
    with pytest.raises(ValidationError):
        ResourceVector.of({"food": float("inf")})
