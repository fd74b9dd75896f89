"""Depth chart helpers: group a roster by canonical position and split it by unit."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from nextup.config.positions import (
    DEFENSE_POSITIONS,
    OFFENSE_POSITIONS,
    SPECIAL_TEAMS_POSITIONS,
    normalize_position,
)
from nextup.models import Player

UNKNOWN_POSITION = "Unknown"

PositionGroups = Dict[str, List[Player]]

# Checked in order; the first set containing a code wins.
_UNIT_MEMBERSHIP: Tuple[Tuple[str, frozenset], ...] = (
    ("offense", OFFENSE_POSITIONS),
    ("defense", DEFENSE_POSITIONS),
    ("special_teams", SPECIAL_TEAMS_POSITIONS),
)

_DEPTH_LABELS = ("1st", "2nd", "3rd")


@dataclass(frozen=True)
class CategorizedPositions:
    """Position groups split into four disjoint units."""

    offense: PositionGroups = field(default_factory=dict)
    defense: PositionGroups = field(default_factory=dict)
    special_teams: PositionGroups = field(default_factory=dict)
    other: PositionGroups = field(default_factory=dict)

    def bucket(self, name: str) -> PositionGroups:
        if name not in ("offense", "defense", "special_teams", "other"):
            raise KeyError(f"Unknown unit {name!r}")
        return getattr(self, name)

    def player_count(self) -> int:
        return sum(
            len(players)
            for groups in (self.offense, self.defense, self.special_teams, self.other)
            for players in groups.values()
        )


def group_by_position(players: Iterable[Player]) -> PositionGroups:
    """Bucket players by canonical position, keeping input order within each bucket."""

    groups: PositionGroups = {}
    for player in players:
        code = normalize_position(player.position or UNKNOWN_POSITION)
        groups.setdefault(code, []).append(player)
    return groups


def unit_for(code: str) -> str:
    for unit, members in _UNIT_MEMBERSHIP:
        if code in members:
            return unit
    return "other"


def categorize(groups: Mapping[str, Sequence[Player]]) -> CategorizedPositions:
    """Partition position groups into offense, defense, special teams and other."""

    buckets: Dict[str, PositionGroups] = {
        "offense": {},
        "defense": {},
        "special_teams": {},
        "other": {},
    }
    for code, players in groups.items():
        buckets[unit_for(code)][code] = list(players)
    return CategorizedPositions(**buckets)


def depth_label(index: int) -> Optional[str]:
    if 0 <= index < len(_DEPTH_LABELS):
        return _DEPTH_LABELS[index]
    return None


def depth_slots(players: Sequence[Player], size: int = 4) -> List[Optional[Player]]:
    """Pad or cut a position group to ``size`` depth chart slots."""

    slots: List[Optional[Player]] = list(players[:size])
    slots.extend([None] * (size - len(slots)))
    return slots
