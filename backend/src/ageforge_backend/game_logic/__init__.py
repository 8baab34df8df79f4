"""Core rules and mechanics that drive the Ageforge economy."""

from ageforge_backend.game_logic.actions import (
    ActionDispatcher,
    ActionOutcome,
    BattleResultCommand,
    DisbandCommand,
    GameAction,
    ManualActionCommand,
    PurchaseCommand,
    ResetCommand,
    StartBattleCommand,
)
from ageforge_backend.game_logic.battle import (
    BattleResult,
    BattleRoster,
    apply_battle_result,
    export_battle_roster,
)
from ageforge_backend.game_logic.catalog import (
    GameCatalog,
    ManualActionDefinition,
    ProducerDefinition,
    TierDefinition,
    UnitDefinition,
    UpgradeDefinition,
    UpgradeEffect,
    get_default_catalog,
)
from ageforge_backend.game_logic.configuration import (
    SessionOverrides,
    SimulationConfiguration,
    SimulationDefaults,
    build_session_configuration,
    get_default_simulation_configuration,
)
from ageforge_backend.game_logic.costs import purchase_cost
from ageforge_backend.game_logic.engine import SimulationEngine, StepResult
from ageforge_backend.game_logic.ledger import ResourceLedger
from ageforge_backend.game_logic.modifiers import (
    ModifierAccumulator,
    accumulate_modifiers,
)
from ageforge_backend.game_logic.offline import (
    OfflineReport,
    apply_offline_catch_up,
    compute_offline_elapsed,
)
from ageforge_backend.game_logic.persistence import (
    CorruptSnapshotError,
    GameSnapshot,
    GameStateStore,
    InMemoryGameStateStore,
    load_game_state,
    restore_snapshot,
    serialize_snapshot,
)
from ageforge_backend.game_logic.production import rates_per_second, run_production
from ageforge_backend.game_logic.progression import TierTransition, advance_tiers
from ageforge_backend.game_logic.runtime import GameRuntime
from ageforge_backend.game_logic.scheduler import FixedStepScheduler, FrameAdvance
from ageforge_backend.game_logic.state import (
    GameState,
    ProgressionState,
    SimulationClock,
    new_game_state,
)
from ageforge_backend.game_logic.view import FrameView, FrameViewCache, derive_frame

__all__ = [
    "ActionDispatcher",
    "ActionOutcome",
    "BattleResult",
    "BattleResultCommand",
    "BattleRoster",
    "CorruptSnapshotError",
    "DisbandCommand",
    "FixedStepScheduler",
    "FrameAdvance",
    "FrameView",
    "FrameViewCache",
    "GameAction",
    "GameCatalog",
    "GameRuntime",
    "GameSnapshot",
    "GameState",
    "GameStateStore",
    "InMemoryGameStateStore",
    "ManualActionCommand",
    "ManualActionDefinition",
    "ModifierAccumulator",
    "OfflineReport",
    "ProducerDefinition",
    "ProgressionState",
    "PurchaseCommand",
    "ResetCommand",
    "ResourceLedger",
    "SessionOverrides",
    "SimulationClock",
    "SimulationConfiguration",
    "SimulationDefaults",
    "SimulationEngine",
    "StartBattleCommand",
    "StepResult",
    "TierDefinition",
    "TierTransition",
    "UnitDefinition",
    "UpgradeDefinition",
    "UpgradeEffect",
    "accumulate_modifiers",
    "advance_tiers",
    "apply_battle_result",
    "apply_offline_catch_up",
    "build_session_configuration",
    "compute_offline_elapsed",
    "derive_frame",
    "export_battle_roster",
    "get_default_catalog",
    "get_default_simulation_configuration",
    "load_game_state",
    "new_game_state",
    "purchase_cost",
    "rates_per_second",
    "restore_snapshot",
    "run_production",
    "serialize_snapshot",
]
