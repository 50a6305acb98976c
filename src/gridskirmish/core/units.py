from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterator, List, Optional, Tuple

from .grid import Point, reading_order

logger = logging.getLogger(__name__)


class Faction(str, Enum):
    """The two opposing sides. Values are the map symbols."""

    ELF = "E"
    GOBLIN = "G"

    @property
    def enemy(self) -> "Faction":
        return Faction.GOBLIN if self is Faction.ELF else Faction.ELF

    @property
    def label(self) -> str:
        return "Elves" if self is Faction.ELF else "Goblins"

    @classmethod
    def from_symbol(cls, symbol: str) -> Optional["Faction"]:
        for faction in cls:
            if faction.value == symbol:
                return faction
        return None


@dataclass
class Unit:
    """A combat unit.

    Attributes:
        id: Stable index into the unit table.
        faction: Side the unit fights for; never changes.
        x, y: Cached position; must agree with the grid while alive.
        hp: Hit points; hp > 0 means alive, dead units are clamped to 0.
        attack_power: Damage dealt per attack.
    """

    id: int
    faction: Faction
    x: int
    y: int
    hp: int
    attack_power: int

    @property
    def alive(self) -> bool:
        return self.hp > 0

    @property
    def position(self) -> Tuple[int, int]:
        return (self.x, self.y)

    def take_damage(self, amount: int) -> int:
        """Apply damage, clamping HP to zero. Returns the damage actually applied."""
        if amount < 0:
            raise ValueError("damage must be non-negative")
        before = self.hp
        self.hp = max(0, self.hp - amount)
        return before - self.hp

    def __repr__(self) -> str:
        return f"Unit(id={self.id}, {self.faction.value}@({self.x},{self.y}), hp={self.hp})"


class UnitTable:
    """Dense collection of units addressed by id. Dead units stay as markers."""

    def __init__(self) -> None:
        self._units: List[Unit] = []

    def add(self, faction: Faction, x: int, y: int, hp: int, attack_power: int) -> Unit:
        unit = Unit(id=len(self._units), faction=faction, x=x, y=y, hp=hp, attack_power=attack_power)
        self._units.append(unit)
        return unit

    def __getitem__(self, unit_id: int) -> Unit:
        return self._units[unit_id]

    def __len__(self) -> int:
        return len(self._units)

    def __iter__(self) -> Iterator[Unit]:
        return iter(self._units)

    def living(self, faction: Optional[Faction] = None) -> List[Unit]:
        return [u for u in self._units if u.alive and (faction is None or u.faction is faction)]

    def has_living(self, faction: Faction) -> bool:
        return any(u.alive and u.faction is faction for u in self._units)

    def hitpoint_sum(self, faction: Optional[Faction] = None) -> int:
        return sum(u.hp for u in self.living(faction))

    def counts(self) -> Dict[Faction, int]:
        counts = {faction: 0 for faction in Faction}
        for unit in self.living():
            counts[unit.faction] += 1
        return counts

    def turn_order(self) -> List[Tuple[Point, int]]:
        """(position, unit id) of living units in reading order, snapshotted for one round."""
        return sorted(((u.position, u.id) for u in self.living()), key=lambda entry: reading_order(entry[0]))
