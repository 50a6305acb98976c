from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from .combat.battle import Battle, Outcome, RoundReport
from .combat.log import CombatLog
from .core.mapfile import BattleMap
from .core.units import Faction
from .errors import CalibrationError
from .settings import Settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CalibrationResult:
    """Minimal attack power giving the calibrated faction a win without losses."""

    faction: Faction
    attack_power: int
    outcome: Outcome
    trials: List[Tuple[int, bool]] = field(default_factory=list)

    @property
    def score(self) -> int:
        return self.outcome.score


def try_attack_power(
    battle_map: BattleMap, settings: Settings, faction: Faction, power: int
) -> Optional[Outcome]:
    """Replay the whole game with faction's attack power set to power.

    Returns:
        The Outcome if faction wins without losing a unit, else None. The
        replay is abandoned as soon as faction loses a unit.
    """
    battle = Battle(
        battle_map,
        settings.battle.with_attack_power(faction, power),
        log=CombatLog(enabled=False),
    )

    def lost_a_unit(report: RoundReport) -> bool:
        return report.deaths[faction] > 0

    outcome = battle.run(stop_when=lost_a_unit)
    if outcome is None or outcome.winner is not faction:
        return None
    return outcome


def calibrate(
    battle_map: BattleMap,
    settings: Optional[Settings] = None,
    faction: Optional[Faction] = None,
) -> CalibrationResult:
    """Find the minimum attack power for a clean win.

    Doubles a trial power from calibration.min_attack_power until a clean win
    is observed, then binary-searches between the last failing power and that
    bound. Relies on clean wins being monotone in attack power.

    Raises:
        CalibrationError: if no power up to calibration.max_attack_power wins cleanly.
    """
    settings = settings or Settings()
    faction = faction or settings.calibration.faction
    floor = settings.calibration.min_attack_power
    ceiling = settings.calibration.max_attack_power

    results: Dict[int, Optional[Outcome]] = {}
    trials: List[Tuple[int, bool]] = []

    def clean_win(power: int) -> bool:
        if power not in results:
            outcome = try_attack_power(battle_map, settings, faction, power)
            results[power] = outcome
            trials.append((power, outcome is not None))
            logger.debug("Attack power %d: %s", power, "clean win" if outcome else "failed")
        return results[power] is not None

    lo = floor
    hi = floor
    while not clean_win(hi):
        lo = hi + 1
        if hi >= ceiling:
            raise CalibrationError(
                f"{faction.label} cannot win without losses at attack power <= {ceiling}"
            )
        hi = min(hi * 2, ceiling)

    while lo < hi:
        mid = lo + (hi - lo) // 2
        if clean_win(mid):
            hi = mid
        else:
            lo = mid + 1

    outcome = results[hi]
    logger.info(
        "%s win cleanly with %d attack power after %d trials (score %d)",
        faction.label,
        hi,
        len(trials),
        outcome.score,
    )
    return CalibrationResult(faction=faction, attack_power=hi, outcome=outcome, trials=trials)
