"""Seedable roll sources for deterministic gameplay."""

import random
from typing import Iterable, Protocol


class RollSource(Protocol):
    """Anything that can roll a die for the game engine."""

    def roll(self, sides: int) -> int: ...


class GameRNG:
    """Wrapper around Python's random.Random for deterministic game behavior.

    All randomness in the game should go through this class to ensure
    deterministic behavior when using the same seed.
    """

    def __init__(self, seed: int | None = None):
        """Initialize RNG with given seed.

        Args:
            seed: Integer seed for deterministic randomness (None seeds from the OS)
        """
        self.seed = seed
        self.rng = random.Random(seed)

    def roll(self, sides: int) -> int:
        """Roll a die with the game's table semantics.

        The result lies in [1, sides) - the top face is never rolled. The
        outcome tables are calibrated against this, so a "d6" yields 1-5.
        A one-sided die always yields 1.

        Args:
            sides: Number of sides (must be >= 1)

        Returns:
            Random integer between 1 and sides - 1 (or 1 when sides == 1)
        """
        if sides < 1:
            raise ValueError(f"Invalid sides: {sides} (must be >= 1)")
        if sides == 1:
            return 1
        return self.rng.randrange(1, sides)

    def get_state(self):
        """Get the current state of the RNG.

        Returns:
            RNG state tuple that can be used with set_state
        """
        return self.rng.getstate()

    def set_state(self, state):
        """Set the state of the RNG.

        Args:
            state: RNG state tuple from get_state
        """
        self.rng.setstate(state)


class ScriptedRNG:
    """Roll source that replays a fixed sequence of results.

    Used to drive the outcome tables through exact totals in tests and
    playtests. Results are returned as given; sides is only recorded.
    """

    def __init__(self, results: Iterable[int]):
        self.results = list(results)
        self.calls: list[int] = []

    def roll(self, sides: int) -> int:
        if not self.results:
            raise IndexError(f"ScriptedRNG exhausted after {len(self.calls)} rolls")
        self.calls.append(sides)
        return self.results.pop(0)

    @property
    def remaining(self) -> int:
        return len(self.results)
