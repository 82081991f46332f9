"""Game engine components."""

from .combat import CombatSession, Target
from .leap_cycle import LeapController
from .results import ActionResult, ErrorType
from .salvage import ScanResult
from .threat import assess_threat

__all__ = [
    "CombatSession",
    "Target",
    "LeapController",
    "ActionResult",
    "ErrorType",
    "ScanResult",
    "assess_threat",
]
