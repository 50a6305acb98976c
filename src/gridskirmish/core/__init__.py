"""
Board state for a battle: the cell grid, the unit table and the map loader.
"""

from .grid import EMPTY, WALL, Cell, CellKind, Grid, Point, neighbors, reading_order
from .mapfile import BattleMap, load_map, parse_map
from .units import Faction, Unit, UnitTable

__all__ = [
    "EMPTY",
    "WALL",
    "Cell",
    "CellKind",
    "Grid",
    "Point",
    "neighbors",
    "reading_order",
    "BattleMap",
    "load_map",
    "parse_map",
    "Faction",
    "Unit",
    "UnitTable",
]
