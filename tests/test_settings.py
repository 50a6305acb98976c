from __future__ import annotations

import textwrap
from pathlib import Path

import pytest
from pydantic import ValidationError

from gridskirmish.core.units import Faction
from gridskirmish.errors import SettingsError
from gridskirmish.settings import BattleSettings, CalibrationSettings, Settings


def test_builtin_defaults() -> None:
    settings = Settings.load()

    assert settings.battle.hitpoints == 200
    assert settings.battle.attack_power == {Faction.ELF: 3, Faction.GOBLIN: 3}
    assert settings.battle.check_invariants is False
    assert settings.calibration.faction is Faction.ELF
    assert settings.calibration.min_attack_power == 4
    assert settings.calibration.max_attack_power == 1024


def test_user_file_overrides_are_merged(tmp_path: Path) -> None:
    fp = tmp_path / "settings.yaml"
    fp.write_text(
        textwrap.dedent(
            """
            battle:
              attack_power:
                E: 15
              check_invariants: true
            calibration:
              max_attack_power: 64
            """
        ),
        encoding="utf-8",
    )

    settings = Settings.load(user_path=fp)

    assert settings.battle.attack_power[Faction.ELF] == 15
    assert settings.battle.attack_power[Faction.GOBLIN] == 3
    assert settings.battle.hitpoints == 200
    assert settings.battle.check_invariants is True
    assert settings.calibration.min_attack_power == 4
    assert settings.calibration.max_attack_power == 64


def test_missing_user_file_warns_and_uses_defaults(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level("WARNING"):
        settings = Settings.load(user_path=tmp_path / "nope.yaml")
    assert settings.battle.hitpoints == 200
    assert any("not found" in rec.message for rec in caplog.records)


def test_non_positive_values_rejected() -> None:
    with pytest.raises(ValidationError):
        BattleSettings(attack_power={Faction.ELF: 0})
    with pytest.raises(ValidationError):
        BattleSettings(hitpoints=0)


def test_calibration_bounds_must_be_ordered() -> None:
    with pytest.raises(ValidationError):
        CalibrationSettings(min_attack_power=10, max_attack_power=5)


def test_invalid_user_file_rejected(tmp_path: Path) -> None:
    fp = tmp_path / "settings.yaml"
    fp.write_text("battle:\n  hitpoints: -1\n", encoding="utf-8")
    with pytest.raises(ValidationError):
        Settings.load(user_path=fp)


def test_with_attack_power_returns_a_copy() -> None:
    base = BattleSettings()
    boosted = base.with_attack_power(Faction.ELF, 20)

    assert boosted.attack_power[Faction.ELF] == 20
    assert boosted.attack_power[Faction.GOBLIN] == 3
    assert base.attack_power[Faction.ELF] == 3


@pytest.mark.parametrize("content", ["- 1\n- 2\n", "42\n", "just text\n"])
def test_user_file_must_be_a_mapping(tmp_path: Path, content: str) -> None:
    fp = tmp_path / "settings.yaml"
    fp.write_text(content, encoding="utf-8")
    with pytest.raises(SettingsError, match="must hold a mapping"):
        Settings.load(user_path=fp)


def test_with_attack_power_validates_the_copy() -> None:
    base = BattleSettings()
    with pytest.raises(ValidationError):
        base.with_attack_power(Faction.ELF, 0)
    with pytest.raises(ValidationError):
        base.with_attack_power(Faction.GOBLIN, -5)
