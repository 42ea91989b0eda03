"""Game snapshots and winner resolution."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Tuple


def parse_score(raw: Any) -> Optional[int]:
    """Parse a scoreboard score; anything non-numeric is treated as absent."""
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw
    try:
        return int(str(raw).strip())
    except ValueError:
        return None


@dataclass(frozen=True)
class CompetitorRecord:
    display_name: str
    short_name: str
    score: Optional[int]


@dataclass(frozen=True)
class EventSnapshot:
    event_id: str
    name: str
    completed: bool
    competitors: Tuple[CompetitorRecord, ...] = ()


def resolve_winner(snapshot: EventSnapshot) -> Optional[str]:
    """Return the winning competitor's display name, or None when undecided.

    Only the first pairing is considered. Incomplete games, missing or
    unparsable scores and ties all yield None.
    """
    if not snapshot.completed or len(snapshot.competitors) < 2:
        return None
    first, second = snapshot.competitors[0], snapshot.competitors[1]
    if first.score is None or second.score is None:
        return None
    if first.score == second.score:
        return None
    winner = first if first.score > second.score else second
    return winner.display_name


__all__ = ["CompetitorRecord", "EventSnapshot", "parse_score", "resolve_winner"]
