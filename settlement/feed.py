"""Scoreboard feed (ESPN site API format)."""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import requests

from .events import CompetitorRecord, EventSnapshot, parse_score

logger = logging.getLogger(__name__)


def _parse_competitor(raw: Any) -> Optional[CompetitorRecord]:
    if not isinstance(raw, dict):
        return None
    team = raw.get("team") if isinstance(raw.get("team"), dict) else {}
    display_name = team.get("displayName")
    if not isinstance(display_name, str) or not display_name:
        return None
    short_name = team.get("shortDisplayName") or team.get("abbreviation") or display_name
    return CompetitorRecord(
        display_name=display_name,
        short_name=str(short_name),
        score=parse_score(raw.get("score")),
    )


def parse_event(raw: Dict[str, Any]) -> Optional[EventSnapshot]:
    event_id = raw.get("id")
    if event_id is None or str(event_id) == "":
        return None
    status = raw.get("status") if isinstance(raw.get("status"), dict) else {}
    status_type = status.get("type") if isinstance(status.get("type"), dict) else {}
    completed = bool(status_type.get("completed", False))

    competitors: tuple[CompetitorRecord, ...] = ()
    competitions = raw.get("competitions") or []
    if isinstance(competitions, list) and competitions and isinstance(competitions[0], dict):
        parsed = [_parse_competitor(item) for item in competitions[0].get("competitors") or []]
        competitors = tuple(item for item in parsed if item is not None)

    return EventSnapshot(
        event_id=str(event_id),
        name=str(raw.get("name") or event_id),
        completed=completed,
        competitors=competitors,
    )


class ScoreboardFeed:
    def __init__(
        self,
        url: str,
        timeout: float = 10.0,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.url = url
        self.timeout = timeout
        self._http = session or requests.Session()

    def fetch(self) -> List[EventSnapshot]:
        """Return the current snapshot; an empty list on any failure."""
        try:
            response = self._http.get(
                self.url,
                timeout=self.timeout,
                headers={"Accept": "application/json"},
            )
            response.raise_for_status()
            data = response.json()
        except requests.RequestException as exc:
            logger.error("Error fetching scoreboard (%s): %s", self.url, exc)
            return []
        except ValueError as exc:
            logger.error("Scoreboard returned invalid JSON (%s): %s", self.url, exc)
            return []

        if not isinstance(data, dict) or not isinstance(data.get("events"), list):
            logger.warning("Scoreboard response malformed: missing events list")
            return []

        snapshots: List[EventSnapshot] = []
        for raw in data["events"]:
            if not isinstance(raw, dict):
                continue
            snapshot = parse_event(raw)
            if snapshot is None:
                logger.debug("Skipping malformed scoreboard event: %s", raw.get("id"))
                continue
            snapshots.append(snapshot)
        return snapshots


__all__ = ["ScoreboardFeed", "parse_event"]
