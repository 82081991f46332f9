"""Leap cycle controller.

This module sequences the seven steps of a leap, one step per advance:
1. Leap into system (burns 1 fuel)
2. Assess threat (may open a combat session)
3. Fight (if necessary; the cycle waits here until the battle is resolved)
4. Search wreckage for parts
5. Scan the system for fuel
6. Make repairs and bury your dead
7. Leap again (the leap is written to the log)

It is also the single entry point for player commands. Every command
returns an ActionResult; rejected commands leave the expedition unchanged.
Running out of fuel at step 1 ends the expedition.
"""

import logging
from typing import TYPE_CHECKING

from ..models.expedition import Expedition, LeapStep
from ..models.leap import LeapProgress
from ..utils.constants import MAX_NAME_LENGTH
from ..utils.rng import GameRNG, RollSource
from . import repair
from .combat import CombatSession
from .results import ActionResult, ErrorType
from .salvage import search_wreckage, system_scan
from .threat import assess_threat

if TYPE_CHECKING:
    from ..interface.snapshot import ExpeditionSnapshot

logger = logging.getLogger(__name__)


class LeapController:
    """Drives an expedition through the leap cycle.

    Each step is an independent method that performs the step's work on
    entry. advance_leap() moves to the next step in order and never skips.
    """

    def __init__(self, expedition: Expedition | None = None, rng: RollSource | None = None):
        """Initialize the controller.

        Args:
            expedition: Expedition to drive (a fresh one if omitted)
            rng: Roll source (an unseeded GameRNG if omitted)
        """
        self.expedition = expedition if expedition is not None else Expedition.new()
        self.rng = rng if rng is not None else GameRNG()
        self._step_handlers = {
            LeapStep.LEAP: self.execute_step_leap,
            LeapStep.ASSESS_THREAT: self.execute_step_assess_threat,
            LeapStep.FIGHT: self.execute_step_fight,
            LeapStep.SALVAGE: self.execute_step_salvage,
            LeapStep.SCAN: self.execute_step_scan,
            LeapStep.UPKEEP: self.execute_step_upkeep,
            LeapStep.LOOP: self.execute_step_loop,
        }

    # =========================================================================
    # STEP METHODS
    # Each method performs ONE step's entry work and returns its narration
    # =========================================================================

    def execute_step_leap(self) -> ActionResult:
        """Step 1: leap into the next system, burning one fuel."""
        expedition = self.expedition
        if expedition.fuel == 0:
            expedition.game_over = True
            logger.warning(f"Fuel exhausted after {len(expedition.leaps)} leaps")
            return ActionResult.rejected(
                ErrorType.FUEL_EXHAUSTED,
                "Out of fuel. The colony ship drifts, silent, between the stars. GAME OVER.",
            )

        expedition.leaps_since_incident += 1
        expedition.burn_fuel(1)
        expedition.current_leap = LeapProgress(number=len(expedition.leaps) + 1)
        logger.info(f"Leap {expedition.current_leap.number}: fuel {expedition.fuel}")
        return ActionResult.ok(
            f"Leap {expedition.current_leap.number} complete. Fuel remaining: {expedition.fuel}."
        )

    def execute_step_assess_threat(self) -> ActionResult:
        """Step 2: roll on the threat table and open combat if anything is out there."""
        expedition = self.expedition
        threats = assess_threat(expedition.leaps_since_incident, self.rng)
        if not threats:
            return ActionResult.ok("Sensors show no threats. Sector clear.")

        self._progress().threats = tuple(threats)
        expedition.combat = CombatSession.open(expedition.flight_order, threats)
        names = ", ".join(str(t) for t in threats)
        logger.info(f"Threat detected: {names}")
        return ActionResult.ok(f"Enemy formation detected: {names}. Scouts to the launch bay!")

    def execute_step_fight(self) -> ActionResult:
        """Step 3: start the battle, if there is one."""
        session = self.expedition.combat
        if session is None:
            return ActionResult.ok("Nothing to fight. Sector clear.")
        session.engage()
        session.update_turn_state(self.expedition)
        return ActionResult.ok(session.combat_text)

    def execute_step_salvage(self) -> ActionResult:
        """Step 4: search the wreckage for parts."""
        progress = self._progress()
        parts = search_wreckage(list(progress.threats), self.rng)
        self.expedition.parts += parts
        progress.parts_found = parts
        return ActionResult.ok(f"Salvage crews recover {parts} parts.")

    def execute_step_scan(self) -> ActionResult:
        """Step 5: scan the system for fuel."""
        fuel, result = system_scan(self.expedition.leaps_since_incident, self.rng)
        self.expedition.fuel += fuel
        progress = self._progress()
        progress.fuel_found = fuel
        progress.scan_result = str(result)
        return ActionResult.ok(f"System scan: {result}. {fuel} fuel recovered.")

    def execute_step_upkeep(self) -> ActionResult:
        """Step 6: free field repairs and the sick bay."""
        repaired = repair.free_repairs(self.expedition)
        healed, lost = repair.tend_injured(self.expedition)
        lines = []
        if repaired:
            lines.append(f"Field repairs: {', '.join(repaired)}.")
        if healed:
            lines.append(f"Back on duty: {', '.join(healed)}.")
        if lost:
            lines.append(f"Lost in the sick bay: {', '.join(lost)}.")
        if not lines:
            lines.append("Upkeep complete.")
        lines.append("Repairs and upgrades are available before the next leap.")
        return ActionResult.ok(" ".join(lines))

    def execute_step_loop(self) -> ActionResult:
        """Step 7: log the leap and get ready for the next one."""
        expedition = self.expedition
        progress = self._progress()
        expedition.leaps.append(progress.to_record())
        if progress.had_incident:
            expedition.leaps_since_incident = 0
        expedition.current_leap = None
        logger.info(f"Leap {progress.number} logged")
        return ActionResult.ok(f"Leap {progress.number} logged. Ready to leap.")

    # =========================================================================
    # ORCHESTRATION
    # =========================================================================

    def advance_leap(self) -> ActionResult:
        """Advance the leap cycle by one step.

        During a battle, each advance in the enemy half lets one enemy
        fighter act. Once the battle is resolved the next advance moves on
        to the wreckage search.
        """
        expedition = self.expedition
        if expedition.game_over:
            return self._narrate(
                ActionResult.rejected(ErrorType.FUEL_EXHAUSTED, "The expedition is over.")
            )

        if expedition.step == LeapStep.FIGHT and expedition.combat is not None:
            session = expedition.combat
            if not session.is_resolved:
                return self._narrate(session.resolve_enemy_turn(expedition, self.rng))
            self._end_combat()

        next_step = expedition.step.next()
        result = self._step_handlers[next_step]()
        if result.accepted:
            expedition.step = next_step
            logger.debug(f"Step {next_step.value}: {next_step.label}")
        return self._narrate(result)

    def _end_combat(self) -> None:
        """Fold a resolved battle back into the expedition."""
        expedition = self.expedition
        session = expedition.combat
        progress = self._progress()
        progress.combat_rounds = session.rounds
        progress.damage_taken = session.hits_taken
        healed = repair.heal_instantly(expedition)
        if healed:
            logger.info(f"Sick bay patched up {', '.join(healed)}")
        expedition.combat = None
        logger.info(f"Combat resolved after {session.rounds} round(s)")

    def _progress(self) -> LeapProgress:
        if self.expedition.current_leap is None:
            self.expedition.current_leap = LeapProgress(number=len(self.expedition.leaps) + 1)
        return self.expedition.current_leap

    def _narrate(self, result: ActionResult) -> ActionResult:
        self.expedition.message = result.message
        if not result.accepted:
            logger.debug(f"Rejected ({result.error_type.value}): {result.message}")
        return result

    # =========================================================================
    # COMBAT COMMANDS
    # =========================================================================

    def _active_combat(self) -> CombatSession | None:
        if self.expedition.step != LeapStep.FIGHT:
            return None
        return self.expedition.combat

    def scout_attack(self, position: int, enemy_index: int) -> ActionResult:
        """Order the scout in flight position ``position`` to attack an enemy."""
        session = self._active_combat()
        if session is None:
            return self._narrate(ActionResult.rejected(ErrorType.WRONG_PHASE, "Not in combat."))
        return self._narrate(session.scout_attack(self.expedition, position, enemy_index, self.rng))

    def fire_mining_laser(self, enemy_index: int) -> ActionResult:
        """Fire the colony ship's mining laser at an enemy."""
        session = self._active_combat()
        if session is None:
            return self._narrate(ActionResult.rejected(ErrorType.WRONG_PHASE, "Not in combat."))
        return self._narrate(session.fire_mining_laser(self.expedition, enemy_index, self.rng))

    def hold_laser(self) -> ActionResult:
        """Skip the mining laser shot this round."""
        session = self._active_combat()
        if session is None:
            return self._narrate(ActionResult.rejected(ErrorType.WRONG_PHASE, "Not in combat."))
        return self._narrate(session.hold_laser(self.expedition))

    # =========================================================================
    # HANGAR AND CREW COMMANDS
    # =========================================================================

    def _reject_in_combat(self, action: str) -> ActionResult | None:
        if self.expedition.in_combat:
            return ActionResult.rejected(
                ErrorType.WRONG_PHASE, f"{action} must wait until the battle is over."
            )
        return None

    def repair_scout(self, index: int) -> ActionResult:
        return self._narrate(
            self._reject_in_combat("Repairs") or repair.repair_scout(self.expedition, index)
        )

    def repair_subsystem(self, index: int) -> ActionResult:
        return self._narrate(
            self._reject_in_combat("Repairs") or repair.repair_subsystem(self.expedition, index)
        )

    def repair_hull(self) -> ActionResult:
        return self._narrate(
            self._reject_in_combat("Repairs") or repair.repair_hull(self.expedition)
        )

    def upgrade_subsystem(self, index: int) -> ActionResult:
        return self._narrate(
            self._reject_in_combat("Upgrades") or repair.upgrade_subsystem(self.expedition, index)
        )

    def upgrade_hull(self) -> ActionResult:
        return self._narrate(
            self._reject_in_combat("Upgrades") or repair.upgrade_hull(self.expedition)
        )

    def rename_scout(self, index: int, text: str) -> ActionResult:
        """Rename the scout in hangar slot ``index``."""
        ships = self.expedition.ships
        if not 0 <= index < len(ships):
            return self._narrate(
                ActionResult.rejected(ErrorType.INVALID_SELECTION, f"No scout #{index + 1}.")
            )
        name, error = _clean_name(text)
        if error:
            return self._narrate(error)
        old = ships[index].name
        ships[index].name = name
        return self._narrate(ActionResult.ok(f"{old} renamed to {name}."))

    def rename_pilot(self, index: int, text: str) -> ActionResult:
        """Rename the pilot in crew slot ``index``."""
        pilots = self.expedition.pilots
        if not 0 <= index < len(pilots):
            return self._narrate(
                ActionResult.rejected(ErrorType.INVALID_SELECTION, f"No pilot #{index + 1}.")
            )
        name, error = _clean_name(text)
        if error:
            return self._narrate(error)
        old = pilots[index].name
        pilots[index].name = name
        return self._narrate(ActionResult.ok(f"{old} is now known as {name}."))

    def reorder(self, position: int, direction: int) -> ActionResult:
        """Swap the scout in flight position ``position`` with its neighbour.

        Args:
            position: Flight position (0 = lead)
            direction: -1 to move toward the lead, +1 to move back; wraps at the ends
        """
        error = self._reject_in_combat("Changing the flight order") or _check_move(
            position, direction, len(self.expedition.flight_order), "flight position"
        )
        if error:
            return self._narrate(error)
        order = self.expedition.flight_order
        other = (position + direction) % len(order)
        order[position], order[other] = order[other], order[position]
        moved = self.expedition.ships[order[other]].name
        return self._narrate(ActionResult.ok(f"{moved} moves to flight position {other + 1}."))

    def reassign_pilot(self, index: int, direction: int) -> ActionResult:
        """Swap the pilot of hangar slot ``index`` with the neighbouring slot's pilot."""
        error = self._reject_in_combat("Crew changes") or _check_move(
            index, direction, len(self.expedition.crew), "scout"
        )
        if error:
            return self._narrate(error)
        crew = self.expedition.crew
        other = (index + direction) % len(crew)
        crew[index], crew[other] = crew[other], crew[index]
        pilot = self.expedition.pilots[crew[other]]
        ship = self.expedition.ships[other]
        return self._narrate(ActionResult.ok(f"{pilot.name} now flies {ship.name}."))

    # =========================================================================
    # DISPLAY
    # =========================================================================

    def snapshot(self) -> "ExpeditionSnapshot":
        """Read-only view of the expedition for display."""
        from ..interface.snapshot import ExpeditionSnapshot

        return ExpeditionSnapshot.capture(self.expedition)


def _clean_name(text: str) -> tuple[str, ActionResult | None]:
    name = (text or "").strip()
    if not name:
        return name, ActionResult.rejected(ErrorType.INVALID_SELECTION, "Name cannot be empty.")
    if len(name) > MAX_NAME_LENGTH:
        return name, ActionResult.rejected(
            ErrorType.INVALID_SELECTION, f"Name too long (max {MAX_NAME_LENGTH} characters)."
        )
    return name, None


def _check_move(index: int, direction: int, size: int, what: str) -> ActionResult | None:
    if not 0 <= index < size:
        return ActionResult.rejected(ErrorType.INVALID_SELECTION, f"No {what} #{index + 1}.")
    if direction not in (-1, 1):
        return ActionResult.rejected(
            ErrorType.INVALID_SELECTION, f"Invalid direction: {direction} (must be -1 or 1)"
        )
    return None
