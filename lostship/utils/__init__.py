"""Utility functions and constants for Lost Ship."""

from .constants import (
    ACE_KILLS,
    DESTROYED_SCOUT_REBUILD_COST,
    HULL_CAPACITY,
    HULL_CAPACITY_UPGRADED,
    HULL_REPAIR_COST_PER_POINT,
    INOPERABLE_SCOUT_REPAIR_COST,
    MAX_NAME_LENGTH,
    MK1_STATS,
    MK2_STATS,
    MK3_STATS,
    RNG_SEED_DEFAULT,
    ROSTER_SIZE,
    SICK_BAY_RECOVERY_LEAPS,
    STARTING_FUEL,
    STARTING_PARTS,
    SUBSYSTEM_REPAIR_COST_PER_RUNG,
    UPGRADE_COST,
    VETERAN_KILLS,
)
from .naming import default_pilot_name, default_ship_name
from .rng import GameRNG, RollSource, ScriptedRNG

__all__ = [
    "ACE_KILLS",
    "DESTROYED_SCOUT_REBUILD_COST",
    "HULL_CAPACITY",
    "HULL_CAPACITY_UPGRADED",
    "HULL_REPAIR_COST_PER_POINT",
    "INOPERABLE_SCOUT_REPAIR_COST",
    "MAX_NAME_LENGTH",
    "MK1_STATS",
    "MK2_STATS",
    "MK3_STATS",
    "RNG_SEED_DEFAULT",
    "ROSTER_SIZE",
    "SICK_BAY_RECOVERY_LEAPS",
    "STARTING_FUEL",
    "STARTING_PARTS",
    "SUBSYSTEM_REPAIR_COST_PER_RUNG",
    "UPGRADE_COST",
    "VETERAN_KILLS",
    "default_pilot_name",
    "default_ship_name",
    "GameRNG",
    "RollSource",
    "ScriptedRNG",
]
