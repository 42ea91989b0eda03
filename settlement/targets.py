"""Winner to settlement-target mapping."""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Literal, Mapping, Optional

from pydantic import BaseModel, Field, ValidationError, model_validator
from web3 import Web3

logger = logging.getLogger(__name__)

TargetKind = Literal["name", "address"]

# Scoreboard display names -> league token names accepted by forwardFeesToBC.
NFL_TEAM_TOKENS: Dict[str, str] = {
    "Atlanta Falcons": "Atlanta",
    "Arizona Cardinals": "Arizona",
    "Baltimore Ravens": "Baltimore",
    "Buffalo Bills": "Buffalo",
    "Carolina Panthers": "Carolina",
    "Chicago Bears": "Chicago",
    "Cincinnati Bengals": "Cincinnati",
    "Cleveland Browns": "Cleveland",
    "Dallas Cowboys": "Dallas",
    "Denver Broncos": "Denver",
    "Detroit Lions": "Detroit",
    "Green Bay Packers": "Green Bay",
    "Houston Texans": "Houston",
    "Indianapolis Colts": "Indianapolis",
    "Jacksonville Jaguars": "Jacksonville",
    "Kansas City Chiefs": "Kansas City",
    "Las Vegas Raiders": "Las Vegas",
    "Los Angeles Chargers": "Los Angeles (C)",
    "Los Angeles Rams": "Los Angeles (R)",
    "Miami Dolphins": "Miami",
    "Minnesota Vikings": "Minnesota",
    "New England Patriots": "New England",
    "New Orleans Saints": "New Orleans",
    "New York Giants": "New York (G)",
    "New York Jets": "New York (J)",
    "Philadelphia Eagles": "Philadelphia",
    "Pittsburgh Steelers": "Pittsburgh",
    "San Francisco 49ers": "San Francisco",
    "Seattle Seahawks": "Seattle",
    "Tampa Bay Buccaneers": "Tampa Bay",
    "Tennessee Titans": "Tennessee",
    "Washington Commanders": "Washington",
}


class TargetMappingError(LookupError):
    pass


class SettlementTarget(BaseModel):
    team: str = Field(min_length=1, max_length=128)
    kind: TargetKind = "name"
    value: str = Field(min_length=1, max_length=128)
    secondary_address: Optional[str] = Field(default=None, pattern=r"^0x[a-fA-F0-9]{40}$")

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def validate_value(self) -> "SettlementTarget":
        if self.kind == "address" and not Web3.is_address(self.value):
            raise ValueError(f"target value for {self.team} must be an address")
        return self

    @property
    def argument(self) -> str:
        """Value passed to the settlement contract."""
        if self.kind == "address":
            return Web3.to_checksum_address(self.value)
        return self.value


class TargetMap:
    """Immutable team -> target table; every entry shares a single kind."""

    def __init__(self, targets: Iterable[SettlementTarget], kind: TargetKind = "name") -> None:
        self.kind = kind
        table: Dict[str, SettlementTarget] = {}
        for target in targets:
            if target.kind != kind:
                raise ValueError(
                    f"Target for {target.team} uses kind {target.kind!r}; deployment expects {kind!r}"
                )
            if target.team in table:
                raise ValueError(f"Duplicate settlement target for {target.team}")
            table[target.team] = target
        self._targets: Mapping[str, SettlementTarget] = table

    def __len__(self) -> int:
        return len(self._targets)

    def __contains__(self, team: object) -> bool:
        return team in self._targets

    def lookup(self, winner: str) -> SettlementTarget:
        target = self._targets.get(winner)
        if target is None:
            raise TargetMappingError(f"No settlement target mapping found for winner: {winner}")
        return target

    @classmethod
    def from_names(cls, table: Mapping[str, str]) -> "TargetMap":
        return cls(
            (SettlementTarget(team=team, kind="name", value=value) for team, value in table.items()),
            kind="name",
        )


def _normalize_target_payload(payload: Any, kind: TargetKind) -> Iterable[Dict[str, Any]]:
    if isinstance(payload, list):
        for item in payload:
            if isinstance(item, dict):
                candidate = dict(item)
                candidate.setdefault("kind", kind)
                yield candidate
    elif isinstance(payload, dict):
        if "team" in payload and "value" in payload:
            candidate = dict(payload)
            candidate.setdefault("kind", kind)
            yield candidate
        else:
            for team, value in payload.items():
                if isinstance(value, str):
                    yield {"team": team, "kind": kind, "value": value}
                elif isinstance(value, dict):
                    candidate = dict(value)
                    candidate.setdefault("team", team)
                    candidate.setdefault("kind", kind)
                    yield candidate


def load_target_map(
    *,
    kind: TargetKind = "name",
    inline: Optional[str] = None,
    path: Optional[Path] = None,
) -> TargetMap:
    """Build the target table from inline JSON and/or a JSON file.

    Falls back to the built-in NFL token table when no source is configured.
    """
    sources: list[tuple[str, Any]] = []
    configured = bool(inline) or path is not None

    if inline:
        try:
            sources.append(("env:SETTLEMENT_TARGETS", json.loads(inline)))
        except json.JSONDecodeError as exc:
            logger.error("Failed to parse SETTLEMENT_TARGETS JSON: %s", exc)

    if path is not None:
        resolved = Path(path).expanduser()
        try:
            with resolved.open("r", encoding="utf-8") as handle:
                sources.append((f"file:{resolved}", json.load(handle)))
        except json.JSONDecodeError as exc:
            logger.error("Failed to parse settlement target file %s: %s", resolved, exc)
        except OSError as exc:
            logger.error("Unable to read settlement target file %s: %s", resolved, exc)

    if not configured:
        if kind != "name":
            raise ValueError("SETTLEMENT_TARGETS must be configured when SETTLEMENT_TARGET_KIND=address")
        logger.info("Using built-in NFL token table (%s teams)", len(NFL_TEAM_TOKENS))
        return TargetMap.from_names(NFL_TEAM_TOKENS)

    entries: List[SettlementTarget] = []
    seen: set[str] = set()
    for source, payload in sources:
        for candidate in _normalize_target_payload(payload, kind):
            try:
                entry = SettlementTarget.model_validate(candidate)
            except ValidationError as exc:
                logger.error("Invalid settlement target from %s: %s", source, exc)
                continue
            if entry.kind != kind:
                logger.error(
                    "Skipping settlement target %s from %s: kind %s does not match %s",
                    entry.team,
                    source,
                    entry.kind,
                    kind,
                )
                continue
            if entry.team in seen:
                logger.debug("Skipping duplicate settlement target %s (%s)", entry.team, source)
                continue
            seen.add(entry.team)
            entries.append(entry)

    if not entries:
        raise ValueError("No valid settlement targets configured")
    logger.info("Loaded %s settlement targets (kind=%s)", len(entries), kind)
    return TargetMap(entries, kind=kind)


__all__ = [
    "NFL_TEAM_TOKENS",
    "SettlementTarget",
    "TargetMap",
    "TargetMappingError",
    "load_target_map",
]
