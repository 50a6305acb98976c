from __future__ import annotations

from typing import Dict, List

from .combat.battle import Snapshot


def render_snapshot(snapshot: Snapshot) -> str:
    """Draw a snapshot as text: each map row followed by the hp of the units on it.

    Example row: ``#.GE.# G(200), E(197)``
    """
    health: Dict[int, List[str]] = {}
    for faction, x, y, hp in snapshot.units:
        health.setdefault(y, []).append(f"{faction.value}({hp})")

    lines = []
    for y, row in enumerate(snapshot.rows):
        entries = health.get(y)
        lines.append(f"{row} {', '.join(entries)}" if entries else row)
    return "\n".join(lines)
