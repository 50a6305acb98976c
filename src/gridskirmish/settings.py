from __future__ import annotations

import logging
from importlib import resources
from pathlib import Path
from typing import Dict, Optional

import yaml
from pydantic import BaseModel, Field, PositiveInt, field_validator, model_validator

from .core.units import Faction
from .errors import SettingsError

logger = logging.getLogger(__name__)

DEFAULT_HITPOINTS = 200
DEFAULT_ATTACK_POWER = 3


class BattleSettings(BaseModel):
    """Per-game parameters handed to a fresh Battle."""

    hitpoints: PositiveInt = Field(DEFAULT_HITPOINTS, description="Starting hit points of every unit")
    attack_power: Dict[Faction, PositiveInt] = Field(
        default_factory=lambda: {f: DEFAULT_ATTACK_POWER for f in Faction},
        description="Attack power per faction",
    )
    check_invariants: bool = Field(False, description="Verify grid/unit agreement after every turn")

    @field_validator("attack_power")
    @classmethod
    def fill_missing_factions(cls, v: Dict[Faction, int]) -> Dict[Faction, int]:
        return {f: v.get(f, DEFAULT_ATTACK_POWER) for f in Faction}

    def with_attack_power(self, faction: Faction, power: int) -> "BattleSettings":
        """Validated copy with faction's attack power replaced."""
        attack_power = {**self.attack_power, faction: power}
        return type(self).model_validate({**self.model_dump(), "attack_power": attack_power})


class CalibrationSettings(BaseModel):
    """Bounds for the minimum-attack-power search."""

    faction: Faction = Field(Faction.ELF, description="Faction whose attack power is calibrated")
    min_attack_power: PositiveInt = Field(DEFAULT_ATTACK_POWER + 1, description="First power tried")
    max_attack_power: PositiveInt = Field(1024, description="Give up beyond this power")

    @model_validator(mode="after")
    def check_bounds(self) -> "CalibrationSettings":
        if self.max_attack_power < self.min_attack_power:
            raise ValueError("max_attack_power must be >= min_attack_power")
        return self


class Settings(BaseModel):
    battle: BattleSettings = Field(default_factory=BattleSettings)
    calibration: CalibrationSettings = Field(default_factory=CalibrationSettings)

    @staticmethod
    def _load_yaml(path: Path) -> dict:
        with path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            raise SettingsError(f"Settings file {path} must hold a mapping, not {type(data).__name__}")
        return data

    @classmethod
    def _deep_merge(cls, base: dict, overlay: dict) -> dict:
        merged = dict(base)
        for k, v in (overlay or {}).items():
            if isinstance(v, dict) and isinstance(base.get(k), dict):
                merged[k] = cls._deep_merge(base[k], v)
            else:
                merged[k] = v
        return merged

    @classmethod
    def load(cls, user_path: Optional[Path] = None) -> "Settings":
        """Load settings from built-in defaults and optional user override file.

        If user_path is provided and exists, overlay values onto defaults.
        """
        try:
            with resources.files("gridskirmish.config").joinpath("default_settings.yaml").open(
                "r", encoding="utf-8"
            ) as f:
                default_data = yaml.safe_load(f) or {}
        except FileNotFoundError:
            logger.warning("Default settings not found; falling back to model defaults.")
            default_data = Settings().model_dump(mode="json")

        user_data = {}
        if user_path is not None:
            user_path = Path(user_path)
            if user_path.exists():
                user_data = cls._load_yaml(user_path)
                logger.info("Loaded user settings from %s", user_path)
            else:
                logger.warning("User settings file not found: %s", user_path)

        merged = cls._deep_merge(default_data, user_data)
        settings = cls.model_validate(merged)
        logger.debug("Settings merged: %s", settings)
        return settings
