import argparse
import logging
import sys
import time
from pathlib import Path

import yaml

from .calibration import calibrate
from .combat.battle import Battle, Snapshot
from .core.mapfile import load_map
from .errors import SkirmishError
from .render import render_snapshot
from .settings import Settings
from .utils.logging import configure_logging

logger = logging.getLogger(__name__)

CLEAR_SCREEN = "\x1b[2J\x1b[H"


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        prog="gridskirmish",
        description="Deterministic grid combat between Elves and Goblins",
    )
    parser.add_argument("map_path", type=Path, help="Path to the battle map text file.")
    parser.add_argument(
        "--settings",
        dest="settings_path",
        type=Path,
        default=None,
        help="Path to a user settings YAML file to load/override defaults.",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable verbose debug logging.",
    )
    parser.add_argument(
        "--watch",
        action="store_true",
        help="Draw the board after every round of the base game.",
    )
    parser.add_argument(
        "--delay",
        type=float,
        default=0.1,
        help="Seconds to pause between frames with --watch (default: 0.1).",
    )
    parser.add_argument(
        "--skip-calibration",
        action="store_true",
        help="Only play the base game.",
    )
    return parser.parse_args(argv)


def _frame_printer(delay: float):
    def show(round_number: int, snapshot: Snapshot) -> None:
        print(CLEAR_SCREEN, end="")
        print(f"Round {round_number}:")
        print(render_snapshot(snapshot), flush=True)
        if delay > 0:
            time.sleep(delay)

    return show


def main(argv=None) -> int:
    args = parse_args(argv)
    configure_logging(level=logging.DEBUG if args.debug else logging.WARNING)

    try:
        settings = Settings.load(user_path=args.settings_path)
        battle_map = load_map(args.map_path)
    except (OSError, ValueError, yaml.YAMLError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    battle = Battle(battle_map, settings.battle)
    if args.watch:
        print("Initially:")
        print(render_snapshot(battle.snapshot()))
    outcome = battle.run(on_round=_frame_printer(args.delay) if args.watch else None)
    print(
        f"{outcome.winner.label} win after {outcome.completed_rounds} full rounds "
        f"with {outcome.remaining_hitpoints} total hit points left"
    )
    print(f"Outcome: {outcome.completed_rounds} * {outcome.remaining_hitpoints} = {outcome.score}")

    if args.skip_calibration:
        return 0

    try:
        result = calibrate(battle_map, settings)
    except SkirmishError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    print(f"{result.faction.label} win with {result.attack_power} attack power")
    print(
        f"Outcome: {result.outcome.completed_rounds} * {result.outcome.remaining_hitpoints} = {result.score}"
    )
    return 0
