"""Steps 4 and 5: Searching wreckage and scanning the system.

This module handles:
1. Parts recovered from the wreckage of an enemy formation
2. Fuel found by the system scan
"""

import logging
from enum import Enum

from ..models.fighter import ThreatTier
from ..utils.rng import RollSource

logger = logging.getLogger(__name__)


class ScanResult(Enum):
    """Outcome of a system scan."""

    BARREN = "Barren"
    FUEL = "Fuel"
    ANOMALY = "Anomaly"  # Reserved: no effect yet
    HOME = "Home"  # Reserved: home system signal, no effect yet

    def __str__(self) -> str:
        return self.value


def wreckage_bonus(threats: list[ThreatTier]) -> int:
    """Salvage bonus for the heaviest fighters encountered.

    Mk2 and Mk3 both present: +3. Mk3 only: +2. Mk2 only: +1. Otherwise 0.
    """
    has_mk2 = ThreatTier.MK2 in threats
    has_mk3 = ThreatTier.MK3 in threats
    if has_mk2 and has_mk3:
        return 3
    if has_mk3:
        return 2
    if has_mk2:
        return 1
    return 0


def search_wreckage(threats: list[ThreatTier], rng: RollSource) -> int:
    """Execute Step 4: Search Wreckage.

    Args:
        threats: Enemy formation fought this leap (empty if none)
        rng: Roll source

    Returns:
        Parts recovered
    """
    parts = rng.roll(6) + wreckage_bonus(threats)
    logger.debug(f"Wreckage search: {parts} parts")
    return parts


def scan_modifier(leaps_since_incident: int) -> int:
    """Roll modifier for the system scan: like the threat table, capped at +1."""
    if leaps_since_incident == 1:
        return -3
    if leaps_since_incident == 2:
        return -2
    if leaps_since_incident == 3:
        return -1
    if 4 <= leaps_since_incident <= 7:
        return 0
    return 1


def system_scan(leaps_since_incident: int, rng: RollSource) -> tuple[int, ScanResult]:
    """Execute Step 5: Scan the System.

    Buckets: below 6 barren; 6 or 8 one fuel; 7 anomaly; 9 two fuel;
    10 three fuel; above 10 home system signal.

    Args:
        leaps_since_incident: Leaps since the last encounter
        rng: Roll source

    Returns:
        Tuple of (fuel found, scan result)
    """
    total = rng.roll(6) + rng.roll(6) + scan_modifier(leaps_since_incident)
    if total < 6:
        outcome = (0, ScanResult.BARREN)
    elif total in (6, 8):
        outcome = (1, ScanResult.FUEL)
    elif total == 7:
        outcome = (0, ScanResult.ANOMALY)
    elif total == 9:
        outcome = (2, ScanResult.FUEL)
    elif total == 10:
        outcome = (3, ScanResult.FUEL)
    else:
        outcome = (0, ScanResult.HOME)
    logger.debug(f"System scan: total {total} -> {outcome[1]} ({outcome[0]} fuel)")
    return outcome
