from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, List, Optional

from ..core.grid import CellKind, Grid, Point, neighbors, reading_order
from ..core.units import Faction, UnitTable
from ..errors import InvariantViolation

logger = logging.getLogger(__name__)


@dataclass
class SearchResult:
    """Outcome of a breadth-first search.

    Attributes:
        distances: Shortest known distance from the origin for every explored cell.
        goals: Every goal cell found at goal_distance, in discovery order.
        goal_distance: Distance of the nearest goals, or None if none was reached.
    """

    distances: Dict[Point, int] = field(default_factory=dict)
    goals: List[Point] = field(default_factory=list)
    goal_distance: Optional[int] = None


def breadth_first_search(
    origin: Point,
    passable: Callable[[Point], bool],
    *,
    is_goal: Optional[Callable[[Point], bool]] = None,
    max_distance: Optional[int] = None,
) -> SearchResult:
    """Breadth-first search over the 4-neighbourhood of origin.

    The origin is seeded at distance 0 whether or not it is passable. A cell is
    entered only if passable(cell). Once a goal is found the search finishes its
    current wave so that every goal at the same distance is collected, then
    stops. Cells beyond max_distance are never explored.

    Raises:
        InvariantViolation: if a cell is reached more cheaply than already recorded.
    """
    result = SearchResult()
    distances = result.distances
    distances[origin] = 0
    frontier = deque([origin])

    while frontier:
        pos = frontier.popleft()
        dist = distances[pos]
        if result.goal_distance is not None and dist > result.goal_distance:
            break

        if pos != origin and is_goal is not None and is_goal(pos):
            result.goals.append(pos)
            result.goal_distance = dist
            continue

        if max_distance is not None and dist >= max_distance:
            continue
        if result.goal_distance is not None:
            # Children would be farther than the goals already found.
            continue

        for nxt in neighbors(*pos):
            known = distances.get(nxt)
            if known is not None:
                if known > dist + 1:
                    raise InvariantViolation(
                        f"Search ordering inversion at {nxt}: recorded {known}, reached with {dist + 1}"
                    )
                continue
            if not passable(nxt):
                continue
            distances[nxt] = dist + 1
            frontier.append(nxt)

    return result


class MoveKind(Enum):
    IN_RANGE = "in_range"
    NO_TARGET = "no_target"
    STEP = "step"


@dataclass(frozen=True)
class Move:
    """A unit's movement decision for one turn."""

    kind: MoveKind
    destination: Optional[Point] = None
    step: Optional[Point] = None


IN_RANGE = Move(MoveKind.IN_RANGE)
NO_TARGET = Move(MoveKind.NO_TARGET)


def _is_enemy_at(grid: Grid, units: UnitTable, pos: Point, enemy: Faction) -> bool:
    cell = grid.at(*pos)
    if cell.kind is not CellKind.OCCUPIED:
        return False
    unit = units[cell.unit_id]
    return unit.alive and unit.faction is enemy


def adjacent_to_enemy(grid: Grid, units: UnitTable, pos: Point, enemy: Faction) -> bool:
    return any(_is_enemy_at(grid, units, n, enemy) for n in neighbors(*pos))


def choose_move(grid: Grid, units: UnitTable, unit_id: int) -> Move:
    """Decide how a unit moves this turn.

    1. Already next to a living enemy: IN_RANGE, no movement.
    2. Search outward through empty cells for target-adjacent cells (empty
       cells next to a living enemy). None reachable: NO_TARGET.
    3. The destination is the reading-order first of the nearest ones.
    4. The step is found by searching back from the destination: of the
       mover's empty neighbours that lie on a shortest path, the reading-order
       first one.
    """
    mover = units[unit_id]
    origin = mover.position
    enemy = mover.faction.enemy

    if adjacent_to_enemy(grid, units, origin, enemy):
        return IN_RANGE

    def is_empty(pos: Point) -> bool:
        return grid.at(*pos).kind is CellKind.EMPTY

    def is_target_adjacent(pos: Point) -> bool:
        return adjacent_to_enemy(grid, units, pos, enemy)

    outward = breadth_first_search(origin, is_empty, is_goal=is_target_adjacent)
    if not outward.goals:
        return NO_TARGET

    destination = min(outward.goals, key=reading_order)
    total = outward.goal_distance

    backward = breadth_first_search(
        destination,
        lambda pos: pos == origin or is_empty(pos),
        max_distance=total,
    )
    if backward.distances.get(origin) != total:
        raise InvariantViolation(
            f"Backward search from {destination} reached {origin} at "
            f"{backward.distances.get(origin)}, expected {total}"
        )

    steps = [
        n
        for n in neighbors(*origin)
        if is_empty(n) and backward.distances.get(n) == total - 1
    ]
    if not steps:
        raise InvariantViolation(f"No first step from {origin} toward {destination}")

    step = min(steps, key=reading_order)
    return Move(MoveKind.STEP, destination=destination, step=step)
