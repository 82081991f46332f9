#!/usr/bin/env python3
"""Lost Ship - Main entry point.

A solitaire dice game: leap a damaged colony ship from system to system,
fight off raiders with your scouts, salvage, refuel and repair until the
fuel runs out.
"""

import argparse
import logging
import sys

from lostship.engine.leap_cycle import LeapController
from lostship.interface.command_parser import (
    HELP_TEXT,
    CommandParseError,
    CommandParser,
    ErrorType,
    dispatch,
)
from lostship.interface.snapshot import ExpeditionSnapshot
from lostship.utils.rng import GameRNG


def format_status(snapshot: ExpeditionSnapshot) -> str:
    """Plain text status report."""
    lines = [
        f"Step {snapshot.step}: {snapshot.step_label}",
        f"Fuel: {snapshot.fuel}  Parts: {snapshot.parts}  "
        f"Hull: {snapshot.hull_damage} / {snapshot.hull_capacity}  "
        f"Leaps since incident: {snapshot.leaps_since_incident}",
        "Subsystems: "
        + ", ".join(
            f"{s.name.replace('_', ' ')} {s.status}{' (upgraded)' if s.upgrade else ''}"
            for s in snapshot.subsystems
        ),
        "Flight order:",
    ]
    for scout in snapshot.scouts:
        marker = "" if scout.can_act else "  [grounded]"
        lines.append(
            f"  {scout.position + 1}. {scout.ship_name:<12} {scout.damage:<10} "
            f"{scout.pilot.name} ({scout.pilot.rank}, {scout.pilot.status}, "
            f"{scout.pilot.kills} kills){marker}"
        )
    if snapshot.combat:
        combat = snapshot.combat
        half = "scouts" if combat.scout_half else "enemy"
        lines.append(f"{combat.status_line} | {half} half")
        for i, enemy in enumerate(combat.enemies):
            state = "" if enemy.active else "  [out]"
            lines.append(
                f"  #{i + 1} {enemy.model} hp {enemy.hp} guns {enemy.guns} fuel {enemy.fuel}{state}"
            )
    return "\n".join(lines)


def run(controller: LeapController) -> None:
    """Read commands from stdin until quit or game over."""
    parser = CommandParser()
    print(format_status(controller.snapshot()))
    while True:
        try:
            text = input("\n> ")
        except EOFError:
            break
        if not text.strip():
            continue
        try:
            command = parser.parse(text)
        except CommandParseError as e:
            print(f"❌ {e.message}")
            if e.error_type == ErrorType.UNKNOWN_COMMAND:
                print("Type 'help' for available commands.")
            continue

        if command.action == "quit":
            break
        if command.action == "help":
            print(HELP_TEXT)
            continue
        if command.action == "status":
            print(format_status(controller.snapshot()))
            continue

        result = dispatch(controller, command)
        print(result.message if result.accepted else f"❌ {result.message}")
        if result.terminal:
            break


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Lost Ship - Solitaire dice game of leaps, raiders and repairs",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s                # New expedition with a random seed
  %(prog)s --seed 42      # Reproducible dice
  %(prog)s --debug        # Show dice rolls and phase transitions
        """,
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Random seed for the dice (default: random)",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging (dice rolls, half and step transitions)",
    )
    args = parser.parse_args()

    log_level = logging.DEBUG if args.debug else logging.WARNING
    logging.basicConfig(
        level=log_level,
        format="[%(levelname)s] %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )

    print("=" * 60)
    print("Lost Ship")
    print("=" * 60)
    print("Goal: keep the colony ship leaping for as long as the fuel holds.")
    print("Type 'help' for commands.\n")

    controller = LeapController(rng=GameRNG(args.seed))
    try:
        run(controller)
    except KeyboardInterrupt:
        print("\n\nExpedition abandoned. Exiting...")
        sys.exit(0)

    leaps = len(controller.expedition.leaps)
    print(f"\nThe expedition logged {leaps} leap{'s' if leaps != 1 else ''}.")


if __name__ == "__main__":
    main()
