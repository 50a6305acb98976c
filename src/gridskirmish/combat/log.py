from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional
import logging

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CombatEvent:
    """A log event emitted during a battle.

    Common event types: "move", "attack", "defeat".
    """

    type: str
    message: str
    round: int = 0
    data: Optional[Dict[str, Any]] = None


class CombatLog:
    """Lightweight in-memory combat log to capture notable events."""

    def __init__(self, enabled: bool = True) -> None:
        self.enabled = enabled
        self.round = 0
        self._events: List[CombatEvent] = []

    def add(self, event_type: str, message: str, **data: Any) -> None:
        if not self.enabled:
            return
        ev = CombatEvent(type=event_type, message=message, round=self.round, data=data or None)
        self._events.append(ev)
        # Defeats are the only events worth seeing at the default level
        if event_type == "defeat":
            logger.info(message)
        else:
            logger.debug(message)

    def events(self, event_type: Optional[str] = None) -> List[CombatEvent]:
        if event_type is None:
            return list(self._events)
        return [ev for ev in self._events if ev.type == event_type]
