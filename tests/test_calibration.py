import pytest
from pydantic import ValidationError

from gridskirmish.calibration import calibrate, try_attack_power
from gridskirmish.core.mapfile import parse_map
from gridskirmish.core.units import Faction
from gridskirmish.errors import CalibrationError
from gridskirmish.settings import CalibrationSettings, Settings


@pytest.mark.parametrize(
    "name, power, rounds, hitpoints, score",
    [
        ("mixed", 15, 29, 172, 4988),
        ("elf_corner", 4, 33, 948, 31284),
        ("goblin_pocket", 15, 37, 94, 3478),
        ("corridor", 12, 39, 166, 6474),
        ("open_field", 34, 30, 38, 1140),
    ],
)
def test_minimum_attack_power_for_a_clean_win(canonical_maps, name, power, rounds, hitpoints, score):
    result = calibrate(parse_map(canonical_maps[name]), Settings())

    assert result.faction is Faction.ELF
    assert result.attack_power == power
    assert result.outcome.winner is Faction.ELF
    assert result.outcome.completed_rounds == rounds
    assert result.outcome.remaining_hitpoints == hitpoints
    assert result.score == score


def test_clean_wins_are_monotone_around_the_boundary(canonical_maps):
    battle_map = parse_map(canonical_maps["mixed"])
    settings = Settings()

    assert try_attack_power(battle_map, settings, Faction.ELF, 14) is None
    for power in (15, 16, 20, 40):
        outcome = try_attack_power(battle_map, settings, Faction.ELF, power)
        assert outcome is not None
        assert outcome.winner is Faction.ELF


def test_each_power_is_tried_at_most_once(canonical_maps):
    result = calibrate(parse_map(canonical_maps["mixed"]), Settings())
    powers = [power for power, _ in result.trials]

    assert len(powers) == len(set(powers))
    # Doubling from the floor: 4, 8 fail, 16 wins; then bisect 9..16
    assert powers[:3] == [4, 8, 16]
    assert (15, True) in result.trials
    assert (14, False) in result.trials


def test_floor_is_returned_when_it_already_wins(canonical_maps):
    settings = Settings(calibration=CalibrationSettings(min_attack_power=20))
    result = calibrate(parse_map(canonical_maps["mixed"]), settings)
    assert result.attack_power == 20
    assert result.trials == [(20, True)]


def test_gives_up_beyond_the_configured_ceiling(canonical_maps):
    settings = Settings(calibration=CalibrationSettings(min_attack_power=4, max_attack_power=12))
    with pytest.raises(CalibrationError, match="12"):
        calibrate(parse_map(canonical_maps["mixed"]), settings)


def test_calibrated_faction_can_be_chosen():
    battle_map = parse_map("#####\n#EG.#\n#####")
    result = calibrate(battle_map, Settings(), faction=Faction.GOBLIN)

    assert result.faction is Faction.GOBLIN
    assert result.outcome.winner is Faction.GOBLIN
    # Goblin needs 50 hits at power 4, the elf needs 67 at power 3
    assert result.attack_power == 4
    assert result.outcome.completed_rounds == 50
    assert result.outcome.remaining_hitpoints == 50


def test_non_positive_trial_power_is_rejected(canonical_maps):
    with pytest.raises(ValidationError):
        try_attack_power(parse_map(canonical_maps["mixed"]), Settings(), Faction.ELF, 0)
