"""Step 2: Threat assessment.

Maps a 2d6 roll, adjusted by how long it has been since the last incident,
to an enemy formation. The buckets below encode the game's difficulty curve.
"""

import logging

from ..models.fighter import ThreatTier
from ..utils.rng import RollSource

logger = logging.getLogger(__name__)

MK1, MK2, MK3 = ThreatTier.MK1, ThreatTier.MK2, ThreatTier.MK3

# Formation for each roll total from 4 to 14; <= 3 is clear, >= 15 is the full wing
_FORMATIONS = {
    4: [MK1] * 4,
    5: [MK1] * 5,
    6: [MK1] * 6,
    7: [MK2],
    8: [MK2, MK1, MK1],
    9: [MK2] + [MK1] * 3,
    10: [MK2] * 2,
    11: [MK2, MK2, MK1],
    12: [MK3],
    13: [MK3] + [MK1] * 3,
    14: [MK3, MK2],
}
_FULL_WING = [MK3, MK3, MK2, MK2, MK1, MK1]


def threat_modifier(leaps_since_incident: int) -> int:
    """Roll modifier for the threat table.

    Danger ramps up the longer the ship goes without an incident:
    -3 on the first leap, -2 on the second, -1 on the third, 0 through
    the seventh, then +1 for every leap beyond seven.
    """
    if leaps_since_incident == 1:
        return -3
    if leaps_since_incident == 2:
        return -2
    if leaps_since_incident == 3:
        return -1
    if 4 <= leaps_since_incident <= 7:
        return 0
    return leaps_since_incident - 7


def formation_for_total(total: int) -> list[ThreatTier] | None:
    """Look up the enemy formation for a modified threat roll.

    Returns:
        List of tier tags in formation order, or None for no encounter
    """
    if total <= 3:
        return None
    if total >= 15:
        return list(_FULL_WING)
    return list(_FORMATIONS[total])


def assess_threat(leaps_since_incident: int, rng: RollSource) -> list[ThreatTier] | None:
    """Execute Step 2: Assess Threat.

    Args:
        leaps_since_incident: Leaps since the last encounter (including this one)
        rng: Roll source

    Returns:
        Enemy formation, or None if the sector is clear
    """
    modifier = threat_modifier(leaps_since_incident)
    total = rng.roll(6) + rng.roll(6) + modifier
    formation = formation_for_total(total)
    logger.debug(
        f"Threat roll: total {total} (modifier {modifier:+d}) -> "
        f"{[str(t) for t in formation] if formation else 'clear'}"
    )
    return formation
