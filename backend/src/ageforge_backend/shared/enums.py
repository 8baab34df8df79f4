"""Shared enumerations used across the backend."""

from enum import StrEnum


class EntityKind(StrEnum):
    """Families of purchasable entities defined by the catalog."""

    STRUCTURE = "structure"
    UPGRADE = "upgrade"
    UNIT = "unit"


class ModifierCategory(StrEnum):
    """Closed set of multiplier categories an upgrade effect can target."""

    GLOBAL_OUTPUT = "global_output"
    RESOURCE_OUTPUT = "resource_output"
    PRODUCER_OUTPUT = "producer_output"
    PRODUCER_INPUT = "producer_input"
    MANUAL_GAIN = "manual_gain"


class RejectionReason(StrEnum):
    """Why a player command left the state untouched."""

    INVALID_ENTITY = "invalid_entity"
    UNAFFORDABLE = "unaffordable"
    TIER_LOCKED = "tier_locked"
    MAX_RANK = "max_rank"
    ARMY_CAP = "army_cap"
    NOTHING_TO_DISBAND = "nothing_to_disband"
    NO_ARMY = "no_army"
    BATTLE_IN_PROGRESS = "battle_in_progress"
    NO_BATTLE_IN_PROGRESS = "no_battle_in_progress"


class GamePhase(StrEnum):
    """Whether the economy is building up or waiting on a battle result."""

    BUILD = "build"
    BATTLE = "battle"
