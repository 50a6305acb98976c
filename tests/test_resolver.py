import pytest

from gridskirmish.combat.battle import Battle
from gridskirmish.combat.log import CombatLog
from gridskirmish.combat.resolver import CombatResolver
from gridskirmish.core.grid import EMPTY
from gridskirmish.core.mapfile import parse_map
from gridskirmish.core.units import Faction
from gridskirmish.errors import InvariantViolation
from gridskirmish.settings import BattleSettings

SURROUNDED = """\
#####
#.G.#
#GEG#
#.G.#
#####
"""
# Ids in reading order: G0 (2,1), G1 (1,2), E2 (2,2), G3 (3,2), G4 (2,3)


def test_equal_hitpoints_attack_first_in_reading_order():
    battle = Battle(parse_map(SURROUNDED))
    resolver = CombatResolver()

    result = resolver.attack(battle.grid, battle.units, 2)

    assert result.defender == 0
    assert result.damage == 3
    assert (result.defender_hp_before, result.defender_hp_after) == (200, 197)
    assert not result.defeated
    assert battle.units[0].hp == 197


def test_left_beats_right_on_the_same_row():
    battle = Battle(parse_map("#####\n#GEG#\n#####"), BattleSettings(hitpoints=9))
    result = CombatResolver().attack(battle.grid, battle.units, 1)
    assert result.defender == 0
    assert battle.units[0].hp == 6
    assert battle.units[2].hp == 9


def test_lowest_hitpoints_beats_reading_order():
    battle = Battle(parse_map(SURROUNDED))
    battle.units[3].hp = 50
    battle.units[4].hp = 40

    result = CombatResolver().attack(battle.grid, battle.units, 2)
    assert result.defender == 4
    assert battle.units[4].hp == 37


def test_killing_blow_clears_the_cell():
    battle = Battle(parse_map(SURROUNDED))
    battle.units[1].hp = 2
    log = CombatLog()

    result = CombatResolver(log).attack(battle.grid, battle.units, 2)

    assert result.defender == 1
    assert result.defender_faction is Faction.GOBLIN
    assert result.damage == 2
    assert result.defeated
    assert battle.units[1].hp == 0
    assert battle.grid.at(1, 2) == EMPTY
    assert [ev.type for ev in log.events()] == ["attack", "defeat"]
    assert log.events("defeat")[0].data["defender"] == 1


def test_dead_neighbours_are_ignored():
    battle = Battle(parse_map(SURROUNDED))
    battle.units[0].hp = 0  # dead marker left in the table but still on the grid

    result = CombatResolver().attack(battle.grid, battle.units, 2)
    assert result.defender == 1


def test_no_adjacent_enemy_means_no_attack():
    battle = Battle(parse_map("######\n#E..G#\n######"))
    assert CombatResolver().attack(battle.grid, battle.units, 0) is None
    assert battle.units[1].hp == 200


def test_attacking_from_a_foreign_cell_is_fatal():
    battle = Battle(parse_map(SURROUNDED))
    battle.grid.set(2, 2, EMPTY)

    with pytest.raises(InvariantViolation, match=r"\(2, 2\)"):
        CombatResolver().attack(battle.grid, battle.units, 2)


def test_disabled_log_records_nothing():
    battle = Battle(parse_map(SURROUNDED))
    log = CombatLog(enabled=False)
    CombatResolver(log).attack(battle.grid, battle.units, 2)
    assert log.events() == []
