from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, Optional, Tuple

from ..core.grid import EMPTY, WALL, Cell, CellKind, Grid
from ..core.mapfile import EMPTY_SYMBOL, WALL_SYMBOL, BattleMap
from ..core.units import Faction, UnitTable
from ..errors import BattleOver, InvariantViolation
from ..settings import BattleSettings
from .log import CombatLog
from .pathfinder import MoveKind, choose_move
from .resolver import CombatResolver

logger = logging.getLogger(__name__)


class BattleState(Enum):
    RUNNING = "running"
    TERMINATED = "terminated"


@dataclass(frozen=True)
class Outcome:
    """Final result of a battle."""

    winner: Faction
    completed_rounds: int
    remaining_hitpoints: int

    @property
    def score(self) -> int:
        return self.completed_rounds * self.remaining_hitpoints


@dataclass
class RoundReport:
    """What happened during one call to Battle.play_round().

    completed is False when a faction ran out of units before every turn was taken.
    """

    round_number: int
    completed: bool
    deaths: Dict[Faction, int] = field(default_factory=lambda: {f: 0 for f in Faction})
    winner: Optional[Faction] = None


@dataclass(frozen=True)
class Snapshot:
    """Renderable board state: map symbols plus living units as (faction, x, y, hp)."""

    round_number: int
    rows: Tuple[str, ...]
    units: Tuple[Tuple[Faction, int, int, int], ...]


RoundCallback = Callable[[int, Snapshot], None]
StopCondition = Callable[[RoundReport], bool]


class Battle:
    """One game: a grid and unit table built from a map, played round by round.

    Usage:
        battle = Battle(parse_map(text), settings.battle)
        outcome = battle.run()
        outcome.score

    The grid and units belong to this battle alone; build a new Battle for every replay.
    """

    def __init__(
        self,
        battle_map: BattleMap,
        settings: Optional[BattleSettings] = None,
        *,
        log: CombatLog | None = None,
    ) -> None:
        self.settings = settings or BattleSettings()
        self.log = log or CombatLog()
        self.resolver = CombatResolver(self.log)
        self.grid = Grid(battle_map.width, battle_map.height)
        self.units = UnitTable()
        self.state = BattleState.RUNNING
        self.winner: Optional[Faction] = None
        self.completed_rounds = 0
        self.deaths: Dict[Faction, int] = {f: 0 for f in Faction}

        for y, row in enumerate(battle_map.rows):
            for x, ch in enumerate(row):
                faction = Faction.from_symbol(ch)
                if faction is not None:
                    unit = self.units.add(
                        faction, x, y, self.settings.hitpoints, self.settings.attack_power[faction]
                    )
                    self.grid.set(x, y, Cell.occupied(unit.id))
                elif ch == WALL_SYMBOL:
                    self.grid.set(x, y, WALL)
        logger.debug("Battle created with %d units: %s", len(self.units), self.units.counts())

    # --------------- Public API ---------------

    @property
    def running(self) -> bool:
        return self.state is BattleState.RUNNING

    def remaining_hitpoints(self) -> int:
        return self.units.hitpoint_sum()

    def outcome(self) -> Outcome:
        if self.winner is None:
            raise InvariantViolation("Battle has no winner yet")
        return Outcome(
            winner=self.winner,
            completed_rounds=self.completed_rounds,
            remaining_hitpoints=self.remaining_hitpoints(),
        )

    def play_round(self) -> RoundReport:
        """Play one pass over the units alive at round start, in reading order."""
        if not self.running:
            raise BattleOver("Battle already terminated")

        report = RoundReport(round_number=self.completed_rounds + 1, completed=False)
        self.log.round = report.round_number

        for (x, y), unit_id in self.units.turn_order():
            loser = self._eliminated_faction()
            if loser is not None:
                self._terminate(loser.enemy)
                report.winner = self.winner
                return report

            # Units only move on their own turn, so a living slot owner is still here.
            if self.grid.at(x, y) != Cell.occupied(unit_id):
                if self.units[unit_id].alive:
                    raise InvariantViolation(f"Unit {unit_id} left ({x}, {y}) before its turn")
                continue

            self._take_turn(unit_id, report)
            if self.settings.check_invariants:
                self.check_invariants()

        self.completed_rounds += 1
        report.completed = True
        logger.debug("Round %d complete: %s", report.round_number, self.units.counts())
        return report

    def run(
        self,
        on_round: Optional[RoundCallback] = None,
        stop_when: Optional[StopCondition] = None,
    ) -> Optional[Outcome]:
        """Play rounds until one faction is eliminated.

        Args:
            on_round: Called with (round_number, snapshot) after each completed round.
            stop_when: Called with each RoundReport; returning True abandons the
                battle and makes run() return None.

        Returns:
            The Outcome, or None if stop_when abandoned the battle.
        """
        while self.running:
            report = self.play_round()
            if stop_when is not None and stop_when(report):
                logger.debug("Battle abandoned after round %d", report.round_number)
                return None
            if report.completed and on_round is not None:
                on_round(report.round_number, self.snapshot())

        outcome = self.outcome()
        logger.info(
            "%s win after %d full rounds with %d hit points left (score %d)",
            outcome.winner.label,
            outcome.completed_rounds,
            outcome.remaining_hitpoints,
            outcome.score,
        )
        return outcome

    def snapshot(self) -> Snapshot:
        rows = []
        for y in range(self.grid.height):
            chars = []
            for x in range(self.grid.width):
                cell = self.grid.at(x, y)
                if cell.kind is CellKind.OCCUPIED:
                    chars.append(self.units[cell.unit_id].faction.value)
                elif cell.kind is CellKind.WALL:
                    chars.append(WALL_SYMBOL)
                else:
                    chars.append(EMPTY_SYMBOL)
            rows.append("".join(chars))
        units = tuple(
            (u.faction, u.x, u.y, u.hp)
            for u in sorted(self.units.living(), key=lambda u: (u.y, u.x))
        )
        return Snapshot(round_number=self.completed_rounds, rows=tuple(rows), units=units)

    def check_invariants(self) -> None:
        """Verify that living units and occupied cells are in one-to-one agreement.

        Raises:
            InvariantViolation: describing the first disagreement found.
        """
        seen = set()
        for x, y, unit_id in self.grid.occupied_cells():
            if unit_id >= len(self.units):
                raise InvariantViolation(f"Cell ({x}, {y}) references unknown unit {unit_id}")
            unit = self.units[unit_id]
            if not unit.alive:
                raise InvariantViolation(f"Cell ({x}, {y}) holds dead unit {unit_id}")
            if unit.position != (x, y):
                raise InvariantViolation(
                    f"Unit {unit_id} cached at ({unit.x}, {unit.y}) but found at ({x}, {y})"
                )
            if unit_id in seen:
                raise InvariantViolation(f"Unit {unit_id} occupies more than one cell")
            seen.add(unit_id)
        for unit in self.units.living():
            if unit.id not in seen:
                raise InvariantViolation(f"Living unit {unit.id} missing from grid at ({unit.x}, {unit.y})")

    # --------------- Internal helpers ---------------

    def _eliminated_faction(self) -> Optional[Faction]:
        for faction in Faction:
            if not self.units.has_living(faction):
                return faction
        return None

    def _terminate(self, winner: Faction) -> None:
        self.state = BattleState.TERMINATED
        self.winner = winner

    def _take_turn(self, unit_id: int, report: RoundReport) -> None:
        move = choose_move(self.grid, self.units, unit_id)
        if move.kind is MoveKind.NO_TARGET:
            return
        if move.kind is MoveKind.STEP:
            self._travel(unit_id, *move.step)

        result = self.resolver.attack(self.grid, self.units, unit_id)
        if result is not None and result.defeated:
            report.deaths[result.defender_faction] += 1
            self.deaths[result.defender_faction] += 1

    def _travel(self, unit_id: int, x: int, y: int) -> None:
        unit = self.units[unit_id]
        if self.grid.at(unit.x, unit.y) != Cell.occupied(unit_id):
            raise InvariantViolation(f"Unit {unit_id} out of sync with grid at ({unit.x}, {unit.y})")
        if not self.grid.at(x, y).is_empty:
            raise InvariantViolation(f"Unit {unit_id} must move into an empty cell, ({x}, {y}) is not")

        self.grid.set(unit.x, unit.y, EMPTY)
        self.grid.set(x, y, Cell.occupied(unit_id))
        self.log.add(
            "move",
            f"{unit.faction.value}{unit_id} moves ({unit.x}, {unit.y}) -> ({x}, {y}).",
            unit=unit_id,
            to=(x, y),
        )
        unit.x, unit.y = x, y
