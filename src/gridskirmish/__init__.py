"""
gridskirmish: a deterministic, turn-based combat simulator on a walled grid.

This package provides headless domain logic including:
- Map parsing and validation
- Grid and unit table with a strict one-to-one occupancy invariant
- Breadth-first pathfinding and melee resolution with reading-order tie-breaks
- Battle round engine producing outcomes and renderable snapshots
- Calibration of the minimum attack power needed for a win without losses

The command-line driver in gridskirmish.cli composes these pieces.
"""
from .calibration import CalibrationResult, calibrate, try_attack_power
from .combat import Battle, BattleState, Outcome, RoundReport, Snapshot
from .core import BattleMap, Faction, load_map, parse_map
from .errors import (
    BattleOver,
    CalibrationError,
    InvariantViolation,
    MapFormatError,
    SettingsError,
    SkirmishError,
)
from .render import render_snapshot
from .settings import BattleSettings, CalibrationSettings, Settings

__all__ = [
    "CalibrationResult",
    "calibrate",
    "try_attack_power",
    "Battle",
    "BattleState",
    "Outcome",
    "RoundReport",
    "Snapshot",
    "BattleMap",
    "Faction",
    "load_map",
    "parse_map",
    "BattleOver",
    "CalibrationError",
    "InvariantViolation",
    "MapFormatError",
    "SettingsError",
    "SkirmishError",
    "render_snapshot",
    "BattleSettings",
    "CalibrationSettings",
    "Settings",
]
