"""Step 6: Repairs, upgrades and the sick bay.

Costs in parts:
- Scout at 50% damage: free. Inoperable: 1. Destroyed: 6 (rebuild).
- Subsystem: 2 per rung restored. Hull: 1 per point.
- Upgrade (subsystem or hull): 4, once.

Rejected repairs leave the expedition unchanged and explain why.
"""

import logging

from ..models.expedition import SUBSYSTEM_NAMES, Expedition
from ..models.scout import PilotStatus, ShipDamage
from ..models.subsystem import SubsystemStatus
from ..utils.constants import (
    DESTROYED_SCOUT_REBUILD_COST,
    HULL_REPAIR_COST_PER_POINT,
    INOPERABLE_SCOUT_REPAIR_COST,
    SICK_BAY_RECOVERY_LEAPS,
    SUBSYSTEM_REPAIR_COST_PER_RUNG,
    UPGRADE_COST,
)
from .results import ActionResult, ErrorType

logger = logging.getLogger(__name__)

_SCOUT_REPAIR_COSTS = {
    ShipDamage.HALF: 0,
    ShipDamage.INOPERABLE: INOPERABLE_SCOUT_REPAIR_COST,
    ShipDamage.DESTROYED: DESTROYED_SCOUT_REBUILD_COST,
}


def _subsystem_label(index: int) -> str:
    return SUBSYSTEM_NAMES[index].replace("_", " ")


def _not_enough_parts(needed: int, available: int) -> ActionResult:
    return ActionResult.rejected(
        ErrorType.INSUFFICIENT_RESOURCES,
        f"Not enough parts: need {needed}, have {available}.",
    )


def repair_scout(expedition: Expedition, index: int) -> ActionResult:
    """Repair the scout in hangar slot ``index`` back to full working order."""
    if not 0 <= index < len(expedition.ships):
        return ActionResult.rejected(ErrorType.INVALID_SELECTION, f"No scout #{index + 1}.")

    ship = expedition.ships[index]
    if ship.damage == ShipDamage.NORMAL:
        return ActionResult.rejected(
            ErrorType.INVALID_SELECTION, f"{ship.name} needs no repairs."
        )

    cost = _SCOUT_REPAIR_COSTS[ship.damage]
    if not expedition.can_afford(cost):
        return _not_enough_parts(cost, expedition.parts)

    expedition.spend_parts(cost)
    verb = "rebuilt" if ship.damage == ShipDamage.DESTROYED else "repaired"
    ship.damage = ShipDamage.NORMAL
    logger.info(f"{ship.name} {verb} for {cost} parts")
    return ActionResult.ok(f"{ship.name} {verb} for {cost} parts.")


def repair_subsystem(expedition: Expedition, index: int) -> ActionResult:
    """Restore subsystem ``index`` toward NORMAL at 2 parts per rung.

    Restores as many rungs as the parts on hand pay for.
    """
    if not 0 <= index < len(SUBSYSTEM_NAMES):
        return ActionResult.rejected(ErrorType.INVALID_SELECTION, f"No subsystem #{index + 1}.")

    subsystem = expedition.subsystems[index]
    label = _subsystem_label(index)
    if subsystem.status == SubsystemStatus.NORMAL:
        return ActionResult.rejected(ErrorType.INVALID_SELECTION, f"The {label} needs no repairs.")

    affordable = expedition.parts // SUBSYSTEM_REPAIR_COST_PER_RUNG
    if affordable == 0:
        return _not_enough_parts(SUBSYSTEM_REPAIR_COST_PER_RUNG, expedition.parts)

    rungs = min(subsystem.status.rung, affordable)
    for _ in range(rungs):
        subsystem.status = subsystem.status.improve()
    cost = rungs * SUBSYSTEM_REPAIR_COST_PER_RUNG
    expedition.spend_parts(cost)
    logger.info(f"{label} repaired {rungs} rung(s) for {cost} parts")
    return ActionResult.ok(f"The {label} is now {subsystem.status} ({cost} parts).")


def repair_hull(expedition: Expedition) -> ActionResult:
    """Patch hull damage at 1 part per point, as far as parts allow."""
    if expedition.hull_damage == 0:
        return ActionResult.rejected(ErrorType.INVALID_SELECTION, "The hull needs no repairs.")

    affordable = expedition.parts // HULL_REPAIR_COST_PER_POINT
    if affordable == 0:
        return _not_enough_parts(HULL_REPAIR_COST_PER_POINT, expedition.parts)

    points = min(expedition.hull_damage, affordable)
    cost = points * HULL_REPAIR_COST_PER_POINT
    expedition.spend_parts(cost)
    expedition.hull_damage -= points
    logger.info(f"Hull repaired {points} point(s) for {cost} parts")
    return ActionResult.ok(
        f"Hull repaired: {expedition.hull_damage} / {expedition.hull_capacity} damage ({cost} parts)."
    )


def upgrade_subsystem(expedition: Expedition, index: int) -> ActionResult:
    """Buy the one-time upgrade for subsystem ``index``."""
    if not 0 <= index < len(SUBSYSTEM_NAMES):
        return ActionResult.rejected(ErrorType.INVALID_SELECTION, f"No subsystem #{index + 1}.")

    subsystem = expedition.subsystems[index]
    label = _subsystem_label(index)
    if subsystem.upgrade:
        return ActionResult.rejected(
            ErrorType.INVALID_SELECTION, f"The {label} is already upgraded."
        )
    if not expedition.can_afford(UPGRADE_COST):
        return _not_enough_parts(UPGRADE_COST, expedition.parts)

    expedition.spend_parts(UPGRADE_COST)
    subsystem.upgrade = True
    logger.info(f"{label} upgraded")
    return ActionResult.ok(f"The {label} is upgraded ({UPGRADE_COST} parts).")


def upgrade_hull(expedition: Expedition) -> ActionResult:
    """Buy the one-time hull upgrade, raising hull capacity by one."""
    if expedition.hull_upgrade:
        return ActionResult.rejected(ErrorType.INVALID_SELECTION, "The hull is already upgraded.")
    if not expedition.can_afford(UPGRADE_COST):
        return _not_enough_parts(UPGRADE_COST, expedition.parts)

    expedition.spend_parts(UPGRADE_COST)
    expedition.hull_upgrade = True
    logger.info("Hull upgraded")
    return ActionResult.ok(f"The hull is upgraded ({UPGRADE_COST} parts).")


def free_repairs(expedition: Expedition) -> list[str]:
    """Patch every scout at 50% damage back to NORMAL at no cost.

    Returns:
        Names of the scouts repaired
    """
    repaired = []
    for ship in expedition.ships:
        if ship.damage == ShipDamage.HALF:
            ship.damage = ShipDamage.NORMAL
            repaired.append(ship.name)
    return repaired


def recovery_leaps(expedition: Expedition) -> int | None:
    """Leaps an injured pilot needs in the sick bay.

    Returns:
        0 for an upgraded sick bay in NORMAL condition (instant),
        None if the sick bay is inoperable (no recovery)
    """
    sick_bay = expedition.sick_bay
    if sick_bay.status == SubsystemStatus.INOPERABLE:
        return None
    if sick_bay.status == SubsystemStatus.NORMAL and sick_bay.upgrade:
        return 0
    return SICK_BAY_RECOVERY_LEAPS[sick_bay.status.name]


def heal_instantly(expedition: Expedition) -> list[str]:
    """Heal every injured pilot at once if the sick bay allows it.

    Returns:
        Names of the pilots healed
    """
    if recovery_leaps(expedition) != 0:
        return []
    healed = []
    for pilot in expedition.pilots:
        if pilot.status == PilotStatus.INJURED:
            pilot.heal()
            healed.append(pilot.name)
    return healed


def tend_injured(expedition: Expedition) -> tuple[list[str], list[str]]:
    """Advance every injured pilot's recovery by one leap.

    With an inoperable sick bay, pilots injured this leap (timer still 0)
    die; pilots already under treatment keep waiting.

    Returns:
        Tuple of (names healed, names lost)
    """
    needed = recovery_leaps(expedition)
    healed, lost = [], []
    for pilot in expedition.pilots:
        if pilot.status != PilotStatus.INJURED:
            continue
        if needed is None:
            if pilot.injury_timer == 0:
                pilot.kill()
                lost.append(pilot.name)
            else:
                pilot.injury_timer += 1
            continue
        pilot.injury_timer += 1
        if pilot.injury_timer >= needed:
            pilot.heal()
            healed.append(pilot.name)
    return healed, lost
