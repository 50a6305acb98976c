from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from ..core.grid import EMPTY, CellKind, Grid, neighbors
from ..core.units import Faction, Unit, UnitTable
from ..errors import InvariantViolation
from .log import CombatLog

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AttackResult:
    """Result of an attack action."""

    attacker: int
    defender: int
    defender_faction: Faction
    damage: int
    defender_hp_before: int
    defender_hp_after: int
    defeated: bool


class CombatResolver:
    """Melee resolution: weakest adjacent enemy, fixed damage, immediate death."""

    def __init__(self, log: CombatLog | None = None) -> None:
        self.log = log or CombatLog()

    def select_target(self, grid: Grid, units: UnitTable, attacker: Unit) -> Optional[Unit]:
        """Lowest-hp living enemy next to the attacker; ties go to reading order."""
        enemy = attacker.faction.enemy
        candidates = []
        for x, y in neighbors(attacker.x, attacker.y):
            cell = grid.at(x, y)
            if cell.kind is not CellKind.OCCUPIED:
                continue
            unit = units[cell.unit_id]
            if unit.alive and unit.faction is enemy:
                candidates.append(unit)
        if not candidates:
            return None
        return min(candidates, key=lambda u: (u.hp, u.y, u.x))

    def attack(self, grid: Grid, units: UnitTable, attacker_id: int) -> Optional[AttackResult]:
        """Attack the weakest adjacent enemy, if any.

        Returns:
            AttackResult, or None when no enemy is in range.

        Raises:
            InvariantViolation: if the attacker's cell does not hold the attacker.
        """
        attacker = units[attacker_id]
        cell = grid.at(attacker.x, attacker.y)
        if cell.kind is not CellKind.OCCUPIED or cell.unit_id != attacker_id or not attacker.alive:
            raise InvariantViolation(
                f"Unit {attacker_id} must attack from its own cell; ({attacker.x}, {attacker.y}) holds {cell!r}"
            )

        target = self.select_target(grid, units, attacker)
        if target is None:
            return None

        before = target.hp
        applied = target.take_damage(attacker.attack_power)
        after = target.hp

        self.log.add(
            "attack",
            f"{attacker.faction.value}{attacker.id} attacks {target.faction.value}{target.id} "
            f"at ({target.x}, {target.y}) for {applied} damage (HP {before}->{after}).",
            attacker=attacker.id,
            defender=target.id,
            damage=applied,
            hp_before=before,
            hp_after=after,
        )

        defeated = not target.alive
        if defeated:
            grid.set(target.x, target.y, EMPTY)
            self.log.add(
                "defeat",
                f"{target.faction.value}{target.id} was defeated at ({target.x}, {target.y}).",
                attacker=attacker.id,
                defender=target.id,
            )
        return AttackResult(
            attacker=attacker.id,
            defender=target.id,
            defender_faction=target.faction,
            damage=applied,
            defender_hp_before=before,
            defender_hp_after=after,
            defeated=defeated,
        )
