"""Colony ship subsystem data model."""

from dataclasses import dataclass
from enum import Enum


class SubsystemStatus(Enum):
    """Four-rung degradation ladder for colony ship subsystems (100/66/33/0%)."""

    NORMAL = "Normal"
    SERVICEABLE = "Serviceable"
    BARELY_FUNCTIONING = "Barely Functioning"
    INOPERABLE = "Inoperable"

    @property
    def rung(self) -> int:
        """Rungs below NORMAL (0 for NORMAL, 3 for INOPERABLE)."""
        return _SUBSYSTEM_LADDER.index(self)

    def degrade(self) -> "SubsystemStatus":
        """Return the next worse status. INOPERABLE stays INOPERABLE."""
        return _SUBSYSTEM_DEGRADE[self]

    def improve(self) -> "SubsystemStatus":
        """Return the status one rung better. NORMAL stays NORMAL."""
        return _SUBSYSTEM_LADDER[max(self.rung - 1, 0)]

    def __str__(self) -> str:
        return self.value


_SUBSYSTEM_LADDER = [
    SubsystemStatus.NORMAL,
    SubsystemStatus.SERVICEABLE,
    SubsystemStatus.BARELY_FUNCTIONING,
    SubsystemStatus.INOPERABLE,
]

_SUBSYSTEM_DEGRADE = {
    SubsystemStatus.NORMAL: SubsystemStatus.SERVICEABLE,
    SubsystemStatus.SERVICEABLE: SubsystemStatus.BARELY_FUNCTIONING,
    SubsystemStatus.BARELY_FUNCTIONING: SubsystemStatus.INOPERABLE,
    SubsystemStatus.INOPERABLE: SubsystemStatus.INOPERABLE,
}


@dataclass
class SubSystem:
    """A colony ship subsystem (engine, mining laser, scout bay, sick bay, sensors).

    Status only gets worse under enemy fire and gets better only through
    the repair action. The upgrade flag is one-way.
    """

    status: SubsystemStatus = SubsystemStatus.NORMAL
    upgrade: bool = False

    def __post_init__(self):
        """Validate subsystem data after initialization."""
        if not isinstance(self.status, SubsystemStatus):
            raise ValueError(f"Invalid status: {self.status!r} (must be a SubsystemStatus)")

    def take_hit(self) -> None:
        """Drop one rung on the degradation ladder."""
        self.status = self.status.degrade()

    @property
    def operational(self) -> bool:
        return self.status != SubsystemStatus.INOPERABLE
