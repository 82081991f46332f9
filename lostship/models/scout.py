"""Scout craft and pilot data models."""

from dataclasses import dataclass
from enum import Enum

from ..utils.constants import ACE_KILLS, VETERAN_KILLS


class ShipDamage(Enum):
    """Damage ladder for a scout craft."""

    NORMAL = "Normal"
    HALF = "50%"
    INOPERABLE = "Inoperable"
    DESTROYED = "Destroyed"

    @property
    def severity(self) -> int:
        return _SHIP_LADDER.index(self)

    def degrade(self) -> "ShipDamage":
        """Return the result of a damaging hit: NORMAL -> HALF -> DESTROYED.

        INOPERABLE and DESTROYED craft are unchanged.
        """
        return _SHIP_DEGRADE[self]

    def worsen_to(self, other: "ShipDamage") -> "ShipDamage":
        """Return whichever of self and other is worse. Damage never heals here."""
        return other if other.severity > self.severity else self

    def __str__(self) -> str:
        return self.value


_SHIP_LADDER = [
    ShipDamage.NORMAL,
    ShipDamage.HALF,
    ShipDamage.INOPERABLE,
    ShipDamage.DESTROYED,
]

_SHIP_DEGRADE = {
    ShipDamage.NORMAL: ShipDamage.HALF,
    ShipDamage.HALF: ShipDamage.DESTROYED,
    ShipDamage.INOPERABLE: ShipDamage.INOPERABLE,
    ShipDamage.DESTROYED: ShipDamage.DESTROYED,
}


class Rank(Enum):
    """Pilot rank, derived from confirmed kills."""

    ROOKIE = "Rookie"
    VETERAN = "Veteran"
    ACE = "Ace"

    @classmethod
    def for_kills(cls, kills: int) -> "Rank":
        if kills >= ACE_KILLS:
            return cls.ACE
        if kills >= VETERAN_KILLS:
            return cls.VETERAN
        return cls.ROOKIE

    @property
    def attack_modifier(self) -> int:
        return _RANK_MODIFIERS[self]

    def __str__(self) -> str:
        return self.value


_RANK_MODIFIERS = {Rank.ROOKIE: 0, Rank.VETERAN: 1, Rank.ACE: 2}
_RANK_ORDER = [Rank.ROOKIE, Rank.VETERAN, Rank.ACE]


class PilotStatus(Enum):
    """Pilot condition. KIA is terminal."""

    NORMAL = "Normal"
    INJURED = "Injured"
    KIA = "KIA"

    def __str__(self) -> str:
        return self.value


@dataclass
class Ship:
    """A scout craft in the colony ship's hangar."""

    name: str
    damage: ShipDamage = ShipDamage.NORMAL

    def __post_init__(self):
        """Validate ship data after initialization."""
        if not self.name:
            raise ValueError("name cannot be empty")

    @property
    def flyable(self) -> bool:
        return self.damage in (ShipDamage.NORMAL, ShipDamage.HALF)

    @property
    def attack_modifier(self) -> int:
        return -1 if self.damage == ShipDamage.HALF else 0


@dataclass
class Pilot:
    """A scout pilot.

    Rank follows kills and is never demoted. Status moves
    NORMAL -> INJURED -> KIA under fire; only the sick bay heals.
    """

    name: str
    kills: int = 0
    rank: Rank = Rank.ROOKIE
    status: PilotStatus = PilotStatus.NORMAL
    injury_timer: int = 0  # Leaps spent injured

    def __post_init__(self):
        """Validate pilot data after initialization."""
        if not self.name:
            raise ValueError("name cannot be empty")
        if self.kills < 0:
            raise ValueError(f"Invalid kills: {self.kills} (must be >= 0)")
        if self.injury_timer < 0:
            raise ValueError(f"Invalid injury_timer: {self.injury_timer} (must be >= 0)")

    @property
    def alive(self) -> bool:
        return self.status != PilotStatus.KIA

    def record_kill(self) -> None:
        """Credit a kill and promote if the new tally earns it."""
        self.kills += 1
        earned = Rank.for_kills(self.kills)
        if _RANK_ORDER.index(earned) > _RANK_ORDER.index(self.rank):
            self.rank = earned

    def wound(self) -> None:
        """NORMAL -> INJURED, INJURED -> KIA."""
        if self.status == PilotStatus.NORMAL:
            self.status = PilotStatus.INJURED
            self.injury_timer = 0
        elif self.status == PilotStatus.INJURED:
            self.kill()

    def kill(self) -> None:
        self.status = PilotStatus.KIA
        self.injury_timer = 0

    def heal(self) -> None:
        if self.status == PilotStatus.INJURED:
            self.status = PilotStatus.NORMAL
            self.injury_timer = 0


@dataclass
class Scout:
    """A scout in flight formation: a ship, its assigned pilot, and its position.

    Scouts are views over the expedition roster. ``ship`` and ``pilot`` are
    the roster's own objects, so changes made through a Scout land in the
    roster directly.
    """

    position: int  # Flight-order index, 0 = lead
    ship: Ship
    pilot: Pilot

    @property
    def can_act(self) -> bool:
        """True if this scout is able to take a combat turn."""
        return self.ship.flyable and self.pilot.alive
