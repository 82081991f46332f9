"""Command outcomes reported back to the presentation layer."""

from dataclasses import dataclass
from enum import Enum


class ErrorType(Enum):
    """Classification of rejected commands."""

    INVALID_SELECTION = "invalid_selection"
    INSUFFICIENT_RESOURCES = "insufficient_resources"
    WRONG_PHASE = "wrong_phase"
    FUEL_EXHAUSTED = "fuel_exhausted"


@dataclass
class ActionResult:
    """Outcome of a single command.

    Rejected commands leave the game state unchanged. ``terminal`` is only
    set when the expedition has ended (fuel exhausted at the leap step).
    """

    accepted: bool
    message: str
    error_type: ErrorType | None = None
    terminal: bool = False

    @classmethod
    def ok(cls, message: str) -> "ActionResult":
        return cls(accepted=True, message=message)

    @classmethod
    def rejected(cls, error_type: ErrorType, message: str) -> "ActionResult":
        return cls(
            accepted=False,
            message=message,
            error_type=error_type,
            terminal=error_type == ErrorType.FUEL_EXHAUSTED,
        )
