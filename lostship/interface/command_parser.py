"""Text command parser.

This module turns typed commands like "attack 1 2" or "repair system 3"
into Command objects naming a LeapController method. Numbers typed by the
player are 1-based; Command arguments are 0-based engine indices.
"""

from dataclasses import dataclass
from enum import Enum

from ..engine.leap_cycle import LeapController
from ..engine.results import ActionResult

HELP_TEXT = """Commands:
  leap (n)                      advance the leap cycle / let the next enemy act
  attack <scout> <enemy> (a)    scout in flight position <scout> attacks <enemy>
  laser <enemy> (m)             fire the mining laser (from round 2)
  hold                          hold the mining laser this round
  repair scout <n>              repair scout in hangar slot <n>
  repair system <n>             repair subsystem <n> (1 engine .. 5 sensors)
  repair hull                   patch hull damage
  upgrade system <n>            upgrade subsystem <n>
  upgrade hull                  upgrade the hull
  rename scout|pilot <n> <name> rename a scout or pilot
  move <n> up|down              change flight order
  crew <n> up|down              swap pilot assignments
  status, help, quit"""

# Commands handled by the caller rather than the controller
SPECIAL_COMMANDS = ("status", "help", "quit")


class ErrorType(Enum):
    """Classification of command input errors."""

    UNKNOWN_COMMAND = "unknown_command"
    SYNTAX_ERROR = "syntax_error"


class CommandParseError(Exception):
    """Raised when command parsing fails with classification."""

    def __init__(self, error_type: ErrorType, message: str):
        """Initialize parse error.

        Args:
            error_type: Classification of the error
            message: Human-readable error message
        """
        self.error_type = error_type
        self.message = message
        super().__init__(message)


@dataclass(frozen=True)
class Command:
    """A parsed command: a LeapController method name and its arguments."""

    action: str
    args: tuple = ()

    @property
    def special(self) -> bool:
        return self.action in SPECIAL_COMMANDS


_ALIASES = {
    "n": "leap",
    "next": "leap",
    "advance": "leap",
    "a": "attack",
    "m": "laser",
    "h": "help",
    "?": "help",
    "st": "status",
    "q": "quit",
    "exit": "quit",
}

_NO_ARG_ACTIONS = {"leap": "advance_leap", "hold": "hold_laser"}

_DIRECTIONS = {"up": -1, "down": 1}

_SYNTAX = {
    "attack": "attack <scout> <enemy>",
    "laser": "laser <enemy>",
    "repair": "repair scout <n> | repair system <n> | repair hull",
    "upgrade": "upgrade system <n> | upgrade hull",
    "rename": "rename scout|pilot <n> <name>",
    "move": "move <n> up|down",
    "crew": "crew <n> up|down",
}


class CommandParser:
    """Parse typed commands into Commands."""

    def parse(self, text: str) -> Command:
        """Parse a command string.

        Args:
            text: Command string to parse

        Returns:
            Parsed Command

        Raises:
            CommandParseError: If the command is unknown or malformed
        """
        words = text.strip().split()
        if not words:
            raise CommandParseError(ErrorType.SYNTAX_ERROR, "Empty command")

        verb = _ALIASES.get(words[0].lower(), words[0].lower())
        args = words[1:]

        if verb in ("leap", "hold", *SPECIAL_COMMANDS):
            if args:
                raise CommandParseError(
                    ErrorType.SYNTAX_ERROR, f"'{verb}' takes no arguments"
                )
            return Command(_NO_ARG_ACTIONS.get(verb, verb))

        parse_method = getattr(self, f"_parse_{verb}", None)
        if parse_method is None:
            raise CommandParseError(ErrorType.UNKNOWN_COMMAND, f"Unknown command: '{words[0]}'")
        return parse_method(args)

    def _syntax_error(self, verb: str) -> CommandParseError:
        return CommandParseError(
            ErrorType.SYNTAX_ERROR,
            f"Syntax error: invalid command format\nCorrect format: {_SYNTAX[verb]}",
        )

    def _number(self, word: str) -> int:
        if not word.isdigit():
            raise CommandParseError(
                ErrorType.SYNTAX_ERROR, f"Invalid number: '{word}' is not a number"
            )
        number = int(word)
        if number < 1:
            raise CommandParseError(
                ErrorType.SYNTAX_ERROR, f"Invalid number: must be 1 or more (got {number})"
            )
        return number - 1

    def _direction(self, verb: str, word: str) -> int:
        if word.lower() not in _DIRECTIONS:
            raise self._syntax_error(verb)
        return _DIRECTIONS[word.lower()]

    def _parse_attack(self, args: list[str]) -> Command:
        if len(args) != 2:
            raise self._syntax_error("attack")
        return Command("scout_attack", (self._number(args[0]), self._number(args[1])))

    def _parse_laser(self, args: list[str]) -> Command:
        if len(args) != 1:
            raise self._syntax_error("laser")
        return Command("fire_mining_laser", (self._number(args[0]),))

    def _parse_repair(self, args: list[str]) -> Command:
        args = [args[0].lower(), *args[1:]] if args else args
        if args == ["hull"]:
            return Command("repair_hull")
        if len(args) == 2 and args[0] == "scout":
            return Command("repair_scout", (self._number(args[1]),))
        if len(args) == 2 and args[0] == "system":
            return Command("repair_subsystem", (self._number(args[1]),))
        raise self._syntax_error("repair")

    def _parse_upgrade(self, args: list[str]) -> Command:
        args = [args[0].lower(), *args[1:]] if args else args
        if args == ["hull"]:
            return Command("upgrade_hull")
        if len(args) == 2 and args[0] == "system":
            return Command("upgrade_subsystem", (self._number(args[1]),))
        raise self._syntax_error("upgrade")

    def _parse_rename(self, args: list[str]) -> Command:
        args = [args[0].lower(), *args[1:]] if args else args
        if len(args) < 3 or args[0] not in ("scout", "pilot"):
            raise self._syntax_error("rename")
        return Command(
            f"rename_{args[0]}", (self._number(args[1]), " ".join(args[2:]))
        )

    def _parse_move(self, args: list[str]) -> Command:
        if len(args) != 2:
            raise self._syntax_error("move")
        return Command("reorder", (self._number(args[0]), self._direction("move", args[1])))

    def _parse_crew(self, args: list[str]) -> Command:
        if len(args) != 2:
            raise self._syntax_error("crew")
        return Command(
            "reassign_pilot", (self._number(args[0]), self._direction("crew", args[1]))
        )


def dispatch(controller: LeapController, command: Command) -> ActionResult:
    """Run a parsed command against the controller."""
    if command.special:
        raise ValueError(f"Special command '{command.action}' must be handled by the caller")
    return getattr(controller, command.action)(*command.args)
