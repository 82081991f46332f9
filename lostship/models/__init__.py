"""Data models for Lost Ship."""

from .expedition import SUBSYSTEM_NAMES, Expedition, LeapStep
from .fighter import Fighter, ThreatTier, fighters_from_formation
from .leap import Leap, LeapProgress
from .scout import Pilot, PilotStatus, Rank, Scout, Ship, ShipDamage
from .subsystem import SubSystem, SubsystemStatus

__all__ = [
    "SUBSYSTEM_NAMES",
    "Expedition",
    "LeapStep",
    "Fighter",
    "ThreatTier",
    "fighters_from_formation",
    "Leap",
    "LeapProgress",
    "Pilot",
    "PilotStatus",
    "Rank",
    "Scout",
    "Ship",
    "ShipDamage",
    "SubSystem",
    "SubsystemStatus",
]
