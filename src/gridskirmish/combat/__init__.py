"""
Combat package for gridskirmish.

Contains:
- Breadth-first pathfinding with reading-order tie-breaks.
- Melee resolution against the weakest adjacent enemy.
- The round engine driving a Battle to its outcome.
- Combat logging to track moves, attacks and defeats.
"""

from .battle import Battle, BattleState, Outcome, RoundReport, Snapshot
from .log import CombatEvent, CombatLog
from .pathfinder import Move, MoveKind, SearchResult, breadth_first_search, choose_move
from .resolver import AttackResult, CombatResolver

__all__ = [
    "Battle",
    "BattleState",
    "Outcome",
    "RoundReport",
    "Snapshot",
    "CombatEvent",
    "CombatLog",
    "Move",
    "MoveKind",
    "SearchResult",
    "breadth_first_search",
    "choose_move",
    "AttackResult",
    "CombatResolver",
]
