"""Enemy fighter data model."""

from dataclasses import dataclass
from enum import Enum

from ..utils.constants import MK1_STATS, MK2_STATS, MK3_STATS


class ThreatTier(Enum):
    """Enemy fighter strength class."""

    MK1 = "Mk1"
    MK2 = "Mk2"
    MK3 = "Mk3"

    @property
    def base_stats(self) -> tuple[int, int, int]:
        """(hp, guns, fuel) for a fresh fighter of this tier."""
        return _TIER_STATS[self]

    def __str__(self) -> str:
        return self.value


_TIER_STATS = {
    ThreatTier.MK1: MK1_STATS,
    ThreatTier.MK2: MK2_STATS,
    ThreatTier.MK3: MK3_STATS,
}


@dataclass
class Fighter:
    """An enemy fighter in combat.

    hp and fuel only ever go down. A fighter at 0 hp is defeated; a
    fighter at 0 fuel has withdrawn. Neither can be targeted or act.
    """

    model: ThreatTier
    hp: int
    guns: int
    fuel: int

    def __post_init__(self):
        """Validate fighter data after initialization."""
        if self.hp < 0:
            raise ValueError(f"Invalid hp: {self.hp} (must be >= 0)")
        if self.guns < 0:
            raise ValueError(f"Invalid guns: {self.guns} (must be >= 0)")
        if self.fuel < 0:
            raise ValueError(f"Invalid fuel: {self.fuel} (must be >= 0)")

    @classmethod
    def from_tier(cls, tier: ThreatTier) -> "Fighter":
        hp, guns, fuel = tier.base_stats
        return cls(model=tier, hp=hp, guns=guns, fuel=fuel)

    @property
    def defeated(self) -> bool:
        return self.hp == 0

    @property
    def withdrawn(self) -> bool:
        return self.fuel == 0

    @property
    def active(self) -> bool:
        return not self.defeated and not self.withdrawn


def fighters_from_formation(formation: list[ThreatTier]) -> list[Fighter]:
    """Expand a formation of tier tags into fresh Fighter records."""
    return [Fighter.from_tier(tier) for tier in formation]
