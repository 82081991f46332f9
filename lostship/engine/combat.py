"""Step 3: Combat resolution.

This module handles:
1. The outcome tables (scout attack, mining laser, enemy hit, targeting, scout damage)
2. The CombatSession state machine: scouts act, then each enemy fighter acts
   in formation order, round after round, until every fighter is destroyed
   or has run out of fuel and withdrawn

All rolls go through an injected roll source. The tables are calibrated
against its [1, sides) semantics, so a d6 never shows a 6.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum

from ..models.expedition import Expedition
from ..models.fighter import Fighter, ThreatTier, fighters_from_formation
from ..models.scout import Pilot, PilotStatus, Scout, Ship, ShipDamage
from ..utils.rng import RollSource
from .results import ActionResult, ErrorType

logger = logging.getLogger(__name__)


class Target(Enum):
    """Where an enemy hit lands."""

    SUPERFICIAL = "superficial"
    FIFTH_SCOUT = "fifth scout"
    FOURTH_SCOUT = "fourth scout"
    THIRD_SCOUT = "third scout"
    SECOND_SCOUT = "second scout"
    LEAD_SCOUT = "lead scout"
    HULL = "hull"
    ENGINES = "engines"
    MINING_LASER = "mining laser"
    SCOUT_BAY = "scout bay"
    SICK_BAY = "sick bay"
    SENSORS = "sensors"


_TARGET_TABLE = {
    1: Target.SUPERFICIAL,
    2: Target.FIFTH_SCOUT,
    3: Target.FOURTH_SCOUT,
    4: Target.THIRD_SCOUT,
    5: Target.SECOND_SCOUT,
    6: Target.LEAD_SCOUT,
    7: Target.HULL,
    8: Target.ENGINES,
    9: Target.MINING_LASER,
    10: Target.SCOUT_BAY,
    11: Target.SICK_BAY,
    12: Target.SENSORS,
}

# Flight position hit by each scout target
_SCOUT_TARGETS = {
    Target.FIFTH_SCOUT: 4,
    Target.FOURTH_SCOUT: 3,
    Target.THIRD_SCOUT: 2,
    Target.SECOND_SCOUT: 1,
    Target.LEAD_SCOUT: 0,
}

# Expedition attribute hit by each subsystem target
_SUBSYSTEM_TARGETS = {
    Target.ENGINES: "engine",
    Target.MINING_LASER: "mining_laser",
    Target.SCOUT_BAY: "scout_bay",
    Target.SICK_BAY: "sick_bay",
    Target.SENSORS: "sensors",
}


# =========================================================================
# OUTCOME TABLES
# =========================================================================


def apply_damage(hp: int, damage: int) -> int:
    """Subtract damage from hp, clamped at zero."""
    return max(hp - damage, 0)


def scout_attack_damage(ship: Ship, pilot: Pilot, rng: RollSource) -> int:
    """Roll a scout attack and return the damage dealt.

    d6 + rank modifier (Veteran +1, Ace +2) + ship modifier (50% damage -1):
    5 deals 1; 6 deals 2, or 1 if the pilot is injured; anything else misses.
    """
    result = rng.roll(6) + pilot.rank.attack_modifier + ship.attack_modifier
    if result == 5 or (result == 6 and pilot.status == PilotStatus.INJURED):
        return 1
    if result == 6 and pilot.status == PilotStatus.NORMAL:
        return 2
    return 0


def mining_laser_damage(upgraded: bool, rng: RollSource) -> int:
    """Roll a mining laser shot: d6 (+1 upgraded); 4-5 -> 1, 6 -> 2, 7 -> 3."""
    result = rng.roll(6)
    if upgraded:
        result += 1
    if 4 <= result <= 5:
        return 1
    if result == 6:
        return 2
    if result == 7:
        return 3
    return 0


def enemy_hits(rng: RollSource) -> bool:
    """Roll one enemy gun: hits on better than 3."""
    return rng.roll(6) > 3


def enemy_targeting(rounds: int, rng: RollSource) -> Target:
    """Roll where an enemy hit lands.

    In the first round only the scouts are in range (one die). From the
    second round on the colony ship is in range too (two dice).
    """
    result = rng.roll(6) + rng.roll(6) if rounds > 1 else rng.roll(6)
    return _TARGET_TABLE.get(result, Target.HULL)


def damage_scout(ship: Ship, pilot: Pilot, rng: RollSource) -> str:
    """Roll the scout damage table against a scout and apply the result.

    Returns:
        Narration of what happened
    """
    result = rng.roll(6)
    if result == 1:
        return "Superficial damage."
    if result == 2:
        if pilot.status == PilotStatus.NORMAL:
            pilot.wound()
            return "Pilot injured."
        if pilot.status == PilotStatus.INJURED:
            pilot.wound()
            return "Injured pilot KIA."
        return "Pilot already lost."
    if result == 3:
        pilot.kill()
        return "Pilot KIA."
    if result == 4:
        if ship.damage == ShipDamage.NORMAL:
            ship.damage = ship.damage.degrade()
            return "Scout at 50% damage."
        if ship.damage == ShipDamage.HALF:
            ship.damage = ship.damage.degrade()
            return "Damaged scout is destroyed."
        return "Scout already out of action."
    if result == 5:
        ship.damage = ship.damage.worsen_to(ShipDamage.INOPERABLE)
        return "Scout inoperable, recalling now..."
    pilot.kill()
    ship.damage = ShipDamage.DESTROYED
    return "Scout destroyed, pilot KIA."


# =========================================================================
# COMBAT SESSION
# =========================================================================


@dataclass
class CombatSession:
    """State of one battle.

    Each round has a scout half and an enemy half. During the scout half
    every able scout attacks once and, from round 2, the mining laser may
    fire once. During the enemy half each active fighter fires its guns,
    one fighter per advance. At the end of the round every surviving
    fighter burns one unit of fuel.

    Attributes:
        formation: Ship indices in flight order, fixed for the whole battle
        enemy_formation: Tier tags as rolled on the threat table
        enemy_stats: Fighter records parallel to enemy_formation
        scout_turns: Per flight position, has this scout acted this half
        enemy_turns: Per fighter, has this fighter acted this half
        rounds: Current round, starting at 1
        scout_half: True while the scouts act
        laser_fired: Mining laser used this round
        engaged: False until the battle starts
        combat_text: Narration of the last action
        hits_taken: Enemy hits that damaged a scout, a pilot or the colony ship
    """

    formation: list[int]
    enemy_formation: list[ThreatTier]
    enemy_stats: list[Fighter]
    scout_turns: list[bool] = field(default_factory=list)
    enemy_turns: list[bool] = field(default_factory=list)
    rounds: int = 1
    scout_half: bool = True
    laser_fired: bool = False
    engaged: bool = False
    combat_text: str = ""
    hits_taken: int = 0

    def __post_init__(self):
        """Validate combat data after initialization."""
        if len(self.enemy_stats) != len(self.enemy_formation):
            raise ValueError("enemy_stats must parallel enemy_formation")
        if not self.scout_turns:
            self.scout_turns = [True] * len(self.formation)
        if not self.enemy_turns:
            self.enemy_turns = [True] * len(self.enemy_stats)
        if self.rounds < 1:
            raise ValueError(f"Invalid rounds: {self.rounds} (must be >= 1)")

    @classmethod
    def open(cls, flight_order: list[int], threats: list[ThreatTier]) -> "CombatSession":
        """Create a session for a freshly rolled enemy formation.

        Every turn flag starts set so nothing can act before engage().
        """
        return cls(
            formation=list(flight_order),
            enemy_formation=list(threats),
            enemy_stats=fighters_from_formation(threats),
            scout_turns=[True] * len(flight_order),
            enemy_turns=[True] * len(threats),
        )

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def is_resolved(self) -> bool:
        """True once every fighter is destroyed or has withdrawn."""
        return all(not fighter.active for fighter in self.enemy_stats)

    @property
    def colony_ship_in_range(self) -> bool:
        return self.rounds > 1

    @property
    def status_line(self) -> str:
        in_range = (
            "Colony ship in range!" if self.colony_ship_in_range else "Colony ship not yet in range."
        )
        return f"Round: {self.rounds} | {in_range}"

    def scout(self, expedition: Expedition, position: int) -> Scout:
        ship_index = self.formation[position]
        return Scout(
            position=position,
            ship=expedition.ships[ship_index],
            pilot=expedition.pilot_of(ship_index),
        )

    def _laser_done(self, expedition: Expedition) -> bool:
        # Round 1 the colony ship is out of range; a dead laser cannot fire
        return self.laser_fired or self.rounds == 1 or not expedition.mining_laser.operational

    def engage(self) -> None:
        """Start the battle: clear every turn flag, scouts act first."""
        self.scout_turns = [False] * len(self.formation)
        self.enemy_turns = [False] * len(self.enemy_stats)
        self.scout_half = True
        self.laser_fired = False
        self.engaged = True
        self.combat_text = "Enemy fighters closing! Scouts launch."
        logger.info(f"Combat engaged: {[str(t) for t in self.enemy_formation]}")

    def update_turn_state(self, expedition: Expedition) -> None:
        """Bookkeeping after every action: skip units that cannot act and flip halves.

        Flips at most one half per call.
        """
        if not self.engaged or self.is_resolved:
            return

        if self.scout_half:
            self._skip_disabled_scouts(expedition)
            if all(self.scout_turns) and self._laser_done(expedition):
                self.scout_half = False
                self.scout_turns = [False] * len(self.formation)
                logger.debug(f"Round {self.rounds}: enemy half")
        else:
            self._skip_inactive_enemies()
            if all(self.enemy_turns):
                self._end_round()
                self._skip_disabled_scouts(expedition)

    def _skip_disabled_scouts(self, expedition: Expedition) -> None:
        for position in range(len(self.formation)):
            if not self.scout(expedition, position).can_act:
                self.scout_turns[position] = True

    def _skip_inactive_enemies(self) -> None:
        for i, fighter in enumerate(self.enemy_stats):
            if not fighter.active:
                self.enemy_turns[i] = True

    def _end_round(self) -> None:
        self.scout_half = True
        self.enemy_turns = [False] * len(self.enemy_stats)
        self.laser_fired = False
        self.rounds += 1
        for fighter in self.enemy_stats:
            if fighter.hp > 0 and fighter.fuel > 0:
                fighter.fuel -= 1
        logger.debug(f"Round {self.rounds}: scout half")

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    def _check_scout_half(self) -> ActionResult | None:
        if not self.engaged:
            return ActionResult.rejected(ErrorType.WRONG_PHASE, "The battle has not started.")
        if self.is_resolved:
            return ActionResult.rejected(ErrorType.WRONG_PHASE, "The battle is over.")
        if not self.scout_half:
            return ActionResult.rejected(
                ErrorType.WRONG_PHASE, "Enemy fighters are taking their turn."
            )
        return None

    def _check_target(self, enemy_index: int) -> ActionResult | None:
        if not 0 <= enemy_index < len(self.enemy_stats):
            return ActionResult.rejected(
                ErrorType.INVALID_SELECTION, f"No enemy fighter #{enemy_index + 1}."
            )
        fighter = self.enemy_stats[enemy_index]
        if fighter.defeated:
            return ActionResult.rejected(
                ErrorType.INVALID_SELECTION, f"Enemy {fighter.model} is already destroyed."
            )
        if fighter.withdrawn:
            return ActionResult.rejected(
                ErrorType.INVALID_SELECTION, f"Enemy {fighter.model} has withdrawn."
            )
        return None

    def scout_attack(
        self, expedition: Expedition, position: int, enemy_index: int, rng: RollSource
    ) -> ActionResult:
        """Attack an enemy fighter with the scout in flight position ``position``."""
        error = self._check_scout_half()
        if error:
            return error
        if not 0 <= position < len(self.formation):
            return ActionResult.rejected(
                ErrorType.INVALID_SELECTION, f"No scout in flight position {position + 1}."
            )
        scout = self.scout(expedition, position)
        if not scout.can_act:
            return ActionResult.rejected(
                ErrorType.INVALID_SELECTION, f"{scout.ship.name} cannot fly."
            )
        if self.scout_turns[position]:
            return ActionResult.rejected(
                ErrorType.INVALID_SELECTION, f"{scout.ship.name} has already attacked this round."
            )
        error = self._check_target(enemy_index)
        if error:
            return error

        fighter = self.enemy_stats[enemy_index]
        damage = scout_attack_damage(scout.ship, scout.pilot, rng)
        fighter.hp = apply_damage(fighter.hp, damage)
        self.scout_turns[position] = True

        if damage == 0:
            text = f"{scout.ship.name} misses the enemy {fighter.model}."
        else:
            text = f"{scout.ship.name} hits the enemy {fighter.model} for {damage}."
            if fighter.defeated:
                scout.pilot.record_kill()
                text += f" Fighter destroyed! {scout.pilot.name} has {scout.pilot.kills} kills."
        logger.debug(text)
        self.combat_text = text
        self.update_turn_state(expedition)
        return ActionResult.ok(text)

    def fire_mining_laser(
        self, expedition: Expedition, enemy_index: int, rng: RollSource
    ) -> ActionResult:
        """Fire the colony ship's mining laser at an enemy fighter."""
        error = self._check_scout_half()
        if error:
            return error
        if not self.colony_ship_in_range:
            return ActionResult.rejected(
                ErrorType.WRONG_PHASE, "Colony ship not yet in range."
            )
        if self.laser_fired:
            return ActionResult.rejected(
                ErrorType.INVALID_SELECTION, "Mining laser already fired this round."
            )
        if not expedition.mining_laser.operational:
            return ActionResult.rejected(
                ErrorType.INVALID_SELECTION, "Mining laser is inoperable."
            )
        error = self._check_target(enemy_index)
        if error:
            return error

        fighter = self.enemy_stats[enemy_index]
        damage = mining_laser_damage(expedition.mining_laser.upgrade, rng)
        fighter.hp = apply_damage(fighter.hp, damage)
        self.laser_fired = True

        if damage == 0:
            text = f"Mining laser misses the enemy {fighter.model}."
        else:
            text = f"Mining laser hits the enemy {fighter.model} for {damage}."
            if fighter.defeated:
                text += " Fighter destroyed!"
        logger.debug(text)
        self.combat_text = text
        self.update_turn_state(expedition)
        return ActionResult.ok(text)

    def hold_laser(self, expedition: Expedition) -> ActionResult:
        """Stand the mining laser down for this round."""
        error = self._check_scout_half()
        if error:
            return error
        if self._laser_done(expedition):
            return ActionResult.rejected(
                ErrorType.INVALID_SELECTION, "Mining laser has nothing to hold this round."
            )
        self.laser_fired = True
        self.combat_text = "Mining laser holds fire."
        self.update_turn_state(expedition)
        return ActionResult.ok(self.combat_text)

    def resolve_enemy_turn(self, expedition: Expedition, rng: RollSource) -> ActionResult:
        """Let the next enemy fighter in formation order take its turn."""
        if not self.engaged:
            return ActionResult.rejected(ErrorType.WRONG_PHASE, "The battle has not started.")
        if self.is_resolved:
            return ActionResult.rejected(ErrorType.WRONG_PHASE, "The battle is over.")
        if self.scout_half:
            # A new round may open with nothing left for the scouts to do
            self.update_turn_state(expedition)
        if self.scout_half:
            return ActionResult.rejected(
                ErrorType.WRONG_PHASE, "Scouts still have orders to carry out."
            )

        lines = []
        for i, acted in enumerate(self.enemy_turns):
            if acted:
                continue
            self.enemy_turns[i] = True
            fighter = self.enemy_stats[i]
            if not fighter.active:
                continue
            for _ in range(fighter.guns):
                if enemy_hits(rng):
                    target = enemy_targeting(self.rounds, rng)
                    lines.append(self._apply_hit(expedition, fighter, target, rng))
                else:
                    lines.append("Miss!")
            break

        text = "  ".join(lines) if lines else "No enemy fighters left to act."
        logger.debug(text)
        self.combat_text = text
        self.update_turn_state(expedition)
        return ActionResult.ok(text)

    def _apply_hit(
        self, expedition: Expedition, fighter: Fighter, target: Target, rng: RollSource
    ) -> str:
        if target == Target.SUPERFICIAL:
            return f"Enemy {fighter.model} deals superficial damage!"

        if target in _SCOUT_TARGETS:
            scout = self.scout(expedition, _SCOUT_TARGETS[target])
            before = (scout.ship.damage, scout.pilot.status)
            result = damage_scout(scout.ship, scout.pilot, rng)
            if (scout.ship.damage, scout.pilot.status) != before:
                self.hits_taken += 1
            return f"Enemy {fighter.model} damages {scout.ship.name}. {result}"
        if target in _SUBSYSTEM_TARGETS:
            subsystem = getattr(expedition, _SUBSYSTEM_TARGETS[target])
            before = subsystem.status
            subsystem.take_hit()
            if subsystem.status != before:
                self.hits_taken += 1
            return f"Enemy {fighter.model} damages the {target.value}."
        self.hits_taken += 1
        expedition.hull_damage += 1
        return f"Enemy {fighter.model} damages the hull."
