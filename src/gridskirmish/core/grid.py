from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterator, List, Optional, Tuple

from ..errors import InvariantViolation

logger = logging.getLogger(__name__)

Point = Tuple[int, int]

# Up, left, right, down: reading order of the four orthogonal neighbours.
OFFSETS: Tuple[Point, ...] = ((0, -1), (-1, 0), (1, 0), (0, 1))


def reading_order(point: Point) -> Tuple[int, int]:
    """Sort key for (x, y) points: row first, then column."""
    x, y = point
    return (y, x)


def neighbors(x: int, y: int) -> Iterator[Point]:
    for dx, dy in OFFSETS:
        yield x + dx, y + dy


class CellKind(Enum):
    EMPTY = "empty"
    WALL = "wall"
    OCCUPIED = "occupied"


@dataclass(frozen=True)
class Cell:
    """Contents of one grid square. Only OCCUPIED cells carry a unit id."""

    kind: CellKind
    unit_id: Optional[int] = None

    @classmethod
    def occupied(cls, unit_id: int) -> "Cell":
        return cls(CellKind.OCCUPIED, unit_id)

    @property
    def is_empty(self) -> bool:
        return self.kind is CellKind.EMPTY

    @property
    def is_wall(self) -> bool:
        return self.kind is CellKind.WALL

    def __repr__(self) -> str:
        if self.kind is CellKind.OCCUPIED:
            return f"Cell.occupied({self.unit_id})"
        return f"Cell.{self.kind.name}"


EMPTY = Cell(CellKind.EMPTY)
WALL = Cell(CellKind.WALL)


class Grid:
    """
    Fixed-size rectangular array of cells, the single source of truth for occupancy.

    Coordinates are (x, y) with (0, 0) at top-left; x grows to the right, y grows down.
    Maps are enclosed by walls, so callers never step outside; doing so is a defect.
    """

    def __init__(self, width: int, height: int) -> None:
        if width <= 0 or height <= 0:
            raise ValueError("Grid width/height must be > 0")
        self._width = width
        self._height = height
        self._cells: List[List[Cell]] = [[EMPTY for _ in range(width)] for _ in range(height)]
        logger.debug("Grid created: %dx%d", width, height)

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self._width and 0 <= y < self._height

    def at(self, x: int, y: int) -> Cell:
        if not self.in_bounds(x, y):
            raise InvariantViolation(f"Grid access out of bounds at ({x}, {y})")
        return self._cells[y][x]

    def set(self, x: int, y: int, cell: Cell) -> None:
        if not self.in_bounds(x, y):
            raise InvariantViolation(f"Grid write out of bounds at ({x}, {y})")
        self._cells[y][x] = cell

    def occupied_cells(self) -> Iterator[Tuple[int, int, int]]:
        """Yield (x, y, unit_id) for every occupied cell in reading order."""
        for y, row in enumerate(self._cells):
            for x, cell in enumerate(row):
                if cell.kind is CellKind.OCCUPIED:
                    yield x, y, cell.unit_id

    def __repr__(self) -> str:
        return f"Grid({self._width}x{self._height})"
