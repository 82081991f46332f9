"""Historical leap record."""

from dataclasses import dataclass

from .fighter import ThreatTier


@dataclass(frozen=True)
class Leap:
    """Summary of one completed leap, appended to the expedition log.

    Attributes:
        number: Leap number (1 for the first leap of the expedition)
        combat_rounds: Rounds fought (0 if the sector was clear)
        parts_found: Parts recovered from wreckage
        fuel_found: Fuel recovered by the system scan
        threats: Enemy formation encountered (empty if none)
        damage_taken: Enemy hits that damaged a scout, a pilot or the colony ship
        scan_result: Outcome of the system scan ("Barren", "Fuel", ...)
    """

    number: int
    combat_rounds: int = 0
    parts_found: int = 0
    fuel_found: int = 0
    threats: tuple[ThreatTier, ...] = ()
    damage_taken: int = 0
    scan_result: str | None = None

    def __post_init__(self):
        """Validate leap data after initialization."""
        if self.number < 1:
            raise ValueError(f"Invalid number: {self.number} (must be >= 1)")


@dataclass
class LeapProgress:
    """Running tally for the leap in progress, frozen into a Leap at step 7."""

    number: int
    combat_rounds: int = 0
    parts_found: int = 0
    fuel_found: int = 0
    threats: tuple[ThreatTier, ...] = ()
    damage_taken: int = 0
    scan_result: str | None = None

    @property
    def had_incident(self) -> bool:
        return bool(self.threats)

    def to_record(self) -> Leap:
        return Leap(
            number=self.number,
            combat_rounds=self.combat_rounds,
            parts_found=self.parts_found,
            fuel_found=self.fuel_found,
            threats=self.threats,
            damage_taken=self.damage_taken,
            scan_result=self.scan_result,
        )
