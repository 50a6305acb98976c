class SkirmishError(Exception):
    """Base error for gridskirmish domain exceptions."""


class MapFormatError(SkirmishError, ValueError):
    """Raised when a battle map is malformed. Reported before any simulation starts."""


class InvariantViolation(SkirmishError, RuntimeError):
    """Raised when the simulation state is inconsistent. Indicates a defect; the game must abort."""


class BattleOver(SkirmishError):
    """Raised when asking a terminated battle to keep playing."""


class CalibrationError(SkirmishError):
    """Raised when no attack power within the configured bound produces a clean win."""


class SettingsError(SkirmishError, ValueError):
    """Raised when a settings file does not hold a mapping of settings."""
