"""Read-only projection of a game state for presentation layers."""

from __future__ import annotations

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict

from ageforge_backend.game_logic.catalog import GameCatalog  # noqa: TC001
from ageforge_backend.game_logic.configuration import (
    SimulationConfiguration,  # noqa: TC001
)
from ageforge_backend.game_logic.costs import purchase_cost
from ageforge_backend.game_logic.engine import SimulationEngine
from ageforge_backend.game_logic.progression import tier_progress
from ageforge_backend.game_logic.state import GameState  # noqa: TC001
from ageforge_backend.shared.enums import GamePhase
from ageforge_backend.shared.value_objects import ResourceKind, ResourceVector


class ResourceView(BaseModel):
    model_config = ConfigDict(frozen=True)

    resource: ResourceKind
    current: float
    lifetime: float
    rate_per_second: float


class PurchasableView(BaseModel):
    """Structure, upgrade or unit as offered to the player."""

    model_config = ConfigDict(frozen=True)

    identifier: str
    name: str
    owned: int = Field(..., ge=0)
    next_cost: dict[ResourceKind, float]
    affordable: bool


class UpgradeView(PurchasableView):
    max_rank: int = Field(..., ge=1)


class ManualActionView(BaseModel):
    model_config = ConfigDict(frozen=True)

    identifier: str
    label: str
    gain_preview: dict[ResourceKind, float]
    cost: dict[ResourceKind, float]
    affordable: bool


class FrameView(BaseModel):
    """Everything a client needs to draw one frame."""

    model_config = ConfigDict(frozen=True)

    revision: int = Field(..., ge=0)
    tier_index: int = Field(..., ge=0)
    tier_name: str
    phase: GamePhase = GamePhase.BUILD
    next_tier_name: str | None = None
    next_tier_progress: float = Field(default=1.0, ge=0, le=1)
    resources: tuple[ResourceView, ...] = Field(default_factory=tuple)
    structures: tuple[PurchasableView, ...] = Field(default_factory=tuple)
    upgrades: tuple[UpgradeView, ...] = Field(default_factory=tuple)
    units: tuple[PurchasableView, ...] = Field(default_factory=tuple)
    manual_actions: tuple[ManualActionView, ...] = Field(default_factory=tuple)
    army_size: int = Field(default=0, ge=0)
    army_cap: int = Field(default=0, ge=0)
    victory: bool = False
    dirty: bool = False


def _purchasable(
    state: GameState, identifier: str, name: str, owned: int, cost: ResourceVector
) -> PurchasableView:
    return PurchasableView(
        identifier=identifier,
        name=name,
        owned=owned,
        next_cost=cost.as_dict(),
        affordable=state.ledger.can_afford(cost),
    )


def derive_frame(
    state: GameState,
    catalog: GameCatalog,
    configuration: SimulationConfiguration,
) -> FrameView:
    """Project *state* into a :class:`FrameView`.

    Only content unlocked at the current tier is listed. Upgrades already at
    their maximum rank are omitted.
    """
    engine = SimulationEngine(catalog, configuration)
    tier = state.tier_index
    rates = engine.rates(state)
    modifiers = engine.modifiers_for(state)

    resources = tuple(
        ResourceView(
            resource=resource,
            current=state.ledger.amount(resource),
            lifetime=state.ledger.total(resource),
            rate_per_second=rates.get(resource),
        )
        for resource in ResourceKind
        if catalog.resource_visible(resource, tier)
    )
    structures = tuple(
        _purchasable(
            state,
            structure.identifier,
            structure.name,
            state.producer_count(structure.identifier),
            purchase_cost(
                structure.base_cost,
                structure.cost_growth,
                state.producer_count(structure.identifier),
            ),
        )
        for structure in catalog.structures
        if structure.unlock_tier <= tier
    )
    upgrades = []
    for upgrade in catalog.upgrades:
        rank = state.upgrade_rank(upgrade.identifier)
        if upgrade.unlock_tier > tier or rank >= upgrade.max_rank:
            continue
        cost = purchase_cost(upgrade.base_cost, upgrade.cost_growth, rank)
        upgrades.append(
            UpgradeView(
                identifier=upgrade.identifier,
                name=upgrade.name,
                owned=rank,
                max_rank=upgrade.max_rank,
                next_cost=cost.as_dict(),
                affordable=state.ledger.can_afford(cost),
            )
        )
    units = tuple(
        _purchasable(
            state,
            unit.identifier,
            unit.name,
            state.unit_count(unit.identifier),
            purchase_cost(
                unit.base_cost, unit.cost_growth, state.unit_count(unit.identifier)
            ),
        )
        for unit in catalog.units
        if unit.unlock_tier <= tier
    )
    manual_bonus = 1.0 + tier * configuration.tier_manual_bonus
    manual_actions = tuple(
        ManualActionView(
            identifier=action.identifier,
            label=action.label,
            gain_preview={
                resource: amount * modifiers.for_manual(resource) * manual_bonus
                for resource, amount in action.gain.items()
            },
            cost=action.cost.as_dict(),
            affordable=state.ledger.can_afford(action.cost),
        )
        for action in catalog.manual_actions
        if action.available_at(tier)
    )

    next_tier = catalog.tiers[tier + 1] if tier < catalog.final_tier_index else None
    victory = tier == catalog.final_tier_index and all(
        state.ledger.total(resource) >= amount
        for resource, amount in catalog.victory_target.items()
    )
    return FrameView(
        revision=state.revision,
        tier_index=tier,
        tier_name=catalog.tiers[tier].name,
        phase=state.phase,
        next_tier_name=next_tier.name if next_tier else None,
        next_tier_progress=tier_progress(next_tier, state.ledger) if next_tier else 1.0,
        resources=resources,
        structures=structures,
        upgrades=tuple(upgrades),
        units=units,
        manual_actions=manual_actions,
        army_size=state.army_size,
        army_cap=configuration.army_cap(tier),
        victory=victory,
        dirty=state.dirty,
    )


class FrameViewCache:
    """Memoize the last derived frame until the state changes."""

    def __init__(
        self, catalog: GameCatalog, configuration: SimulationConfiguration
    ) -> None:
        self._catalog = catalog
        self._configuration = configuration
        self._key: tuple[int, bool] | None = None
        self._frame: FrameView | None = None

    def frame_for(self, state: GameState) -> FrameView:
        """Return the frame for *state*, recomputing only after a visible change."""
        key = (state.revision, state.dirty)
        if self._frame is None or key != self._key:
            self._frame = derive_frame(state, self._catalog, self._configuration)
            self._key = key
        return self._frame

    def invalidate(self) -> None:
        self._key = None
        self._frame = None


__all__ = [
    "FrameView",
    "FrameViewCache",
    "ManualActionView",
    "PurchasableView",
    "ResourceView",
    "UpgradeView",
    "derive_frame",
]
