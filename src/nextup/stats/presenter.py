"""Shape raw player stat payloads for display."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from nextup.config.positions import normalize_position, stat_fields_for
from nextup.models import Player

logger = logging.getLogger(__name__)

PLACEHOLDER = "--"
SUMMARY_SIZE = 4

STAT_LABELS: Mapping[str, str] = {
    "passingYards": "YDS",
    "passingTDs": "TD",
    "touchdowns": "TD",
    "interceptions": "INT",
    "qbr": "QBR",
    "completionPercentage": "CMP%",
    "completions": "CMP",
    "passingAttempts": "ATT",
    "rushingYards": "RUSH YDS",
    "rushingTDs": "RUSH TD",
    "receivingYards": "REC YDS",
    "receivingTDs": "REC TD",
    "tackles": "TACK",
    "sacks": "SACKS",
}

# Backend spellings the first-letter heuristic gets wrong. Anything not listed
# here falls back to lower-casing the first character.
BACKEND_FIELD_ALIASES: Mapping[str, str] = {
    "QBR": "qbr",
    "TD": "touchdowns",
    "TDs": "touchdowns",
    "INT": "interceptions",
    "PBU": "passBreakups",
    "TFL": "tacklesForLoss",
}

_INTERNAL_CAPITAL = re.compile(r"(?<!^)(?=[A-Z])")


@dataclass(frozen=True)
class StatCell:
    field: str
    label: str
    value: Optional[Any] = None

    @property
    def display(self) -> str:
        if self.value is None:
            return PLACEHOLDER
        if isinstance(self.value, float) and self.value.is_integer():
            return str(int(self.value))
        if isinstance(self.value, float):
            return f"{self.value:.1f}"
        return str(self.value)


@dataclass(frozen=True)
class PlayerCard:
    name: str
    team_name: Optional[str]
    jersey_number: str
    position: str
    height: str
    weight: str
    age: str
    summary: Tuple[StatCell, ...]
    stats: Tuple[StatCell, ...]


def _canonical_key(key: str) -> str:
    alias = BACKEND_FIELD_ALIASES.get(key)
    if alias is not None:
        return alias
    if not key:
        return key
    return key[0].lower() + key[1:]


def normalize_stat_keys(raw: Mapping[str, Any]) -> Dict[str, Any]:
    """Re-key a stat payload onto canonical field names.

    Two raw keys landing on the same field resolve last-write-wins in
    iteration order.
    """

    normalized: Dict[str, Any] = {}
    for key, value in raw.items():
        field = _canonical_key(key)
        if field in normalized:
            logger.debug("Stat key %s collides on %s; keeping the later value", key, field)
        normalized[field] = value
    return normalized


def format_label(field: str) -> str:
    label = STAT_LABELS.get(field)
    if label is not None:
        return label
    return _INTERNAL_CAPITAL.sub(" ", field).upper()


def summary_fields(canonical: str) -> List[str]:
    return stat_fields_for(canonical)[:SUMMARY_SIZE]


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def aggregate_stats(games: Any) -> Dict[str, float]:
    """Sum numeric fields across per-game stat rows.

    Anything other than a non-empty list yields an empty mapping.
    """

    if not isinstance(games, list) or not games:
        return {}
    totals: Dict[str, float] = {}
    for game in games:
        if not isinstance(game, Mapping):
            continue
        for key, value in game.items():
            if _is_number(value):
                totals[key] = totals.get(key, 0) + value
    return totals


def stat_cells(stats: Mapping[str, Any], fields: Iterable[str]) -> Tuple[StatCell, ...]:
    return tuple(StatCell(field=f, label=format_label(f), value=stats.get(f)) for f in fields)


def _vital(value: Any, suffix: str = "") -> str:
    if value is None or value == "":
        return PLACEHOLDER
    return f"{value}{suffix}"


def build_player_card(player: Player, stats: Optional[Mapping[str, Any]] = None) -> PlayerCard:
    """Assemble the stat card for a player.

    ``stats`` overrides the stats embedded in the player payload, which is how
    the coach view passes in season totals from :func:`aggregate_stats`.
    """

    canonical = normalize_position(player.position or "")
    source = player.stats if stats is None else stats
    values = normalize_stat_keys(source or {})
    fields = stat_fields_for(canonical)
    return PlayerCard(
        name=player.name,
        team_name=player.team.name if player.team else None,
        jersey_number=_vital(player.jersey_number),
        position=canonical or PLACEHOLDER,
        height=_vital(player.height),
        weight=_vital(player.weight, " lbs"),
        age=_vital(player.age),
        summary=stat_cells(values, fields[:SUMMARY_SIZE]),
        stats=stat_cells(values, fields),
    )
