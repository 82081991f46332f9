"""Expedition state container."""

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

from ..utils.constants import (
    HULL_CAPACITY,
    HULL_CAPACITY_UPGRADED,
    ROSTER_SIZE,
    STARTING_FUEL,
    STARTING_PARTS,
)
from ..utils.naming import default_pilot_name, default_ship_name
from .leap import Leap, LeapProgress
from .scout import Pilot, Scout, Ship
from .subsystem import SubSystem

if TYPE_CHECKING:
    from ..engine.combat import CombatSession


class LeapStep(Enum):
    """The seven steps of a leap, in order of play."""

    LEAP = 1
    ASSESS_THREAT = 2
    FIGHT = 3
    SALVAGE = 4
    SCAN = 5
    UPKEEP = 6
    LOOP = 7

    def next(self) -> "LeapStep":
        return LeapStep(self.value % 7 + 1)

    @property
    def label(self) -> str:
        return _STEP_LABELS[self]


_STEP_LABELS = {
    LeapStep.LEAP: "Leap into system",
    LeapStep.ASSESS_THREAT: "Assess threat",
    LeapStep.FIGHT: "Fight",
    LeapStep.SALVAGE: "Search wreckage for parts",
    LeapStep.SCAN: "Scan the system",
    LeapStep.UPKEEP: "Make repairs and bury your dead",
    LeapStep.LOOP: "Leap again",
}

# Order used wherever subsystems are addressed by index
SUBSYSTEM_NAMES = ["engine", "mining_laser", "scout_bay", "sick_bay", "sensors"]


def _is_permutation(order: list[int]) -> bool:
    return sorted(order) == list(range(ROSTER_SIZE))


@dataclass
class Expedition:
    """Main game state container.

    Holds the colony ship's resources and subsystems, the hangar roster
    and the leap log. The roster is addressed by stable index: ``ships[i]``
    is flown by ``pilots[crew[i]]``, and ``flight_order[p]`` is the ship in
    flight position ``p``. All game logic operates on this state.
    """

    fuel: int = STARTING_FUEL
    parts: int = STARTING_PARTS
    hull_damage: int = 0
    hull_upgrade: bool = False
    leaps_since_incident: int = 0
    engine: SubSystem = field(default_factory=SubSystem)
    mining_laser: SubSystem = field(default_factory=SubSystem)
    scout_bay: SubSystem = field(default_factory=SubSystem)
    sick_bay: SubSystem = field(default_factory=SubSystem)
    sensors: SubSystem = field(default_factory=SubSystem)
    ships: list[Ship] = field(default_factory=list)
    pilots: list[Pilot] = field(default_factory=list)
    crew: list[int] = field(default_factory=lambda: list(range(ROSTER_SIZE)))
    flight_order: list[int] = field(default_factory=lambda: list(range(ROSTER_SIZE)))
    leaps: list[Leap] = field(default_factory=list)  # Append-only leap log
    step: LeapStep = LeapStep.LOOP  # Ready to leap
    combat: "CombatSession | None" = None
    current_leap: LeapProgress | None = None
    message: str = ""  # Last narration shown to the player
    game_over: bool = False

    def __post_init__(self):
        """Fill in the default roster and validate expedition data."""
        if not self.ships:
            self.ships = [Ship(name=default_ship_name(i)) for i in range(ROSTER_SIZE)]
        if not self.pilots:
            self.pilots = [Pilot(name=default_pilot_name(i)) for i in range(ROSTER_SIZE)]
        if self.fuel < 0:
            raise ValueError(f"Invalid fuel: {self.fuel} (must be >= 0)")
        if self.parts < 0:
            raise ValueError(f"Invalid parts: {self.parts} (must be >= 0)")
        if self.hull_damage < 0:
            raise ValueError(f"Invalid hull_damage: {self.hull_damage} (must be >= 0)")
        if len(self.ships) != ROSTER_SIZE or len(self.pilots) != ROSTER_SIZE:
            raise ValueError(f"Roster must hold exactly {ROSTER_SIZE} ships and pilots")
        if not _is_permutation(self.crew):
            raise ValueError(f"Invalid crew assignment: {self.crew}")
        if not _is_permutation(self.flight_order):
            raise ValueError(f"Invalid flight order: {self.flight_order}")

    @classmethod
    def new(cls) -> "Expedition":
        """Create an expedition with the standard starting state."""
        return cls()

    # ------------------------------------------------------------------
    # Roster views
    # ------------------------------------------------------------------

    def pilot_of(self, ship_index: int) -> Pilot:
        return self.pilots[self.crew[ship_index]]

    def scout_at(self, position: int) -> Scout:
        ship_index = self.flight_order[position]
        return Scout(
            position=position,
            ship=self.ships[ship_index],
            pilot=self.pilot_of(ship_index),
        )

    def formation(self) -> list[Scout]:
        """Scouts in flight order, lead first."""
        return [self.scout_at(p) for p in range(ROSTER_SIZE)]

    # ------------------------------------------------------------------
    # Subsystems and resources
    # ------------------------------------------------------------------

    @property
    def subsystems(self) -> list[SubSystem]:
        """Subsystems in SUBSYSTEM_NAMES order."""
        return [getattr(self, name) for name in SUBSYSTEM_NAMES]

    @property
    def hull_capacity(self) -> int:
        return HULL_CAPACITY_UPGRADED if self.hull_upgrade else HULL_CAPACITY

    @property
    def in_combat(self) -> bool:
        return self.combat is not None

    def can_afford(self, parts: int) -> bool:
        return self.parts >= parts

    def spend_parts(self, parts: int) -> int:
        """Deduct up to ``parts`` parts, never going below zero.

        Returns:
            Parts actually spent
        """
        spent = min(parts, self.parts)
        self.parts -= spent
        return spent

    def burn_fuel(self, amount: int = 1) -> int:
        """Deduct up to ``amount`` fuel, never going below zero.

        Returns:
            Fuel actually burned
        """
        burned = min(amount, self.fuel)
        self.fuel -= burned
        return burned
