from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Sequence, Tuple, Union

from ..errors import MapFormatError
from .units import Faction

logger = logging.getLogger(__name__)

WALL_SYMBOL = "#"
EMPTY_SYMBOL = "."
KNOWN_SYMBOLS = frozenset({WALL_SYMBOL, EMPTY_SYMBOL} | {f.value for f in Faction})


@dataclass(frozen=True)
class BattleMap:
    """A validated, immutable starting map. rows[y][x] is the symbol at (x, y)."""

    rows: Tuple[str, ...]

    @property
    def width(self) -> int:
        return len(self.rows[0])

    @property
    def height(self) -> int:
        return len(self.rows)

    def unit_count(self, faction: Faction) -> int:
        return sum(row.count(faction.value) for row in self.rows)


def parse_map(text: Union[str, Sequence[str]]) -> BattleMap:
    """Parse and validate a battle map.

    Accepts either the raw text or a sequence of rows. Every row must have the
    same length, only '#', '.', 'E' and 'G' are allowed, the border must be
    walls and both factions must be present.

    Raises:
        MapFormatError: if any of the above does not hold.
    """
    lines = text.splitlines() if isinstance(text, str) else list(text)
    rows = [line.rstrip("\r") for line in lines]
    while rows and not rows[-1].strip():
        rows.pop()
    if not rows:
        raise MapFormatError("Map is empty")

    width = len(rows[0])
    for y, row in enumerate(rows):
        if len(row) != width:
            raise MapFormatError(f"Row {y} has length {len(row)}, expected {width}")
        for x, ch in enumerate(row):
            if ch not in KNOWN_SYMBOLS:
                raise MapFormatError(f"Unknown map symbol {ch!r} at ({x}, {y})")

    height = len(rows)
    for y, row in enumerate(rows):
        for x, ch in enumerate(row):
            on_border = y in (0, height - 1) or x in (0, width - 1)
            if on_border and ch != WALL_SYMBOL:
                raise MapFormatError(f"Map is not enclosed by walls at ({x}, {y})")

    battle_map = BattleMap(rows=tuple(rows))
    for faction in Faction:
        if battle_map.unit_count(faction) == 0:
            raise MapFormatError(f"Map has no {faction.label}")

    logger.debug(
        "Parsed %dx%d map: %d elves, %d goblins",
        width,
        height,
        battle_map.unit_count(Faction.ELF),
        battle_map.unit_count(Faction.GOBLIN),
    )
    return battle_map


def load_map(path: Union[str, Path]) -> BattleMap:
    path = Path(path)
    with path.open("r", encoding="utf-8") as f:
        text = f.read()
    logger.info("Loaded map from %s", path)
    return parse_map(text)
