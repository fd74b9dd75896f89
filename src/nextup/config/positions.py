"""Position canonicalization and per-position stat field configuration."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Mapping, Tuple


@dataclass(frozen=True)
class PositionInfo:
    code: str
    aliases: Tuple[str, ...]
    stat_fields: Tuple[str, ...]


# Keys are spelled exactly as the backend sends them; lookup is case-sensitive.
POSITION_ALIASES: Mapping[str, str] = {
    "Quarterback": "QB",
    "QB": "QB",
    "Running Back": "RB",
    "RB": "RB",
    "Wide Receiver": "WR",
    "WR": "WR",
    "Tight End": "TE",
    "TE": "TE",
    "Left Tackle": "LT",
    "LT": "LT",
    "Left Guard": "LG",
    "LG": "LG",
    "Center": "C",
    "C": "C",
    "Right Guard": "RG",
    "RG": "RG",
    "Right Tackle": "RT",
    "RT": "RT",
    "Defensive End": "DE",
    "DE": "DE",
    "EDGE": "DE",
    "Left Defensive Tackle": "LDT",
    "LDT": "LDT",
    "Right Defensive Tackle": "RDT",
    "RDT": "RDT",
    "Will Linebacker": "WLB",
    "WLB": "WLB",
    "Mike Linebacker": "MLB",
    "MLB": "MLB",
    "Sam Linebacker": "SLB",
    "SLB": "SLB",
    "Cornerback": "CB",
    "CB": "CB",
    "Safety": "S",
    "S": "S",
    "Punter": "P",
    "P": "P",
    "Kicker": "K",
    "K": "K",
}

_LINEMAN_FIELDS = ("pancakeBlocks", "sacksAllowed", "snapsPlayed", "penalties")
_TACKLE_FIELDS = ("sacksAllowed", "pancakeBlocks", "snapsPlayed", "penalties")
_DL_FIELDS = ("sacks", "tacklesForLoss", "pressures", "totalTackles", "forcedFumbles", "penalties")
_LB_FIELDS = ("tackles", "tacklesForLoss", "sacks", "interceptions", "penalties")
_DB_FIELDS = (
    "tackles",
    "interceptions",
    "passBreakups",
    "forcedFumbles",
    "interceptionReturnYards",
    "interceptionReturnTouchDown",
    "penalties",
)

# Order is display order; the first four entries form the summary bar.
POSITION_STAT_FIELDS: Mapping[str, Tuple[str, ...]] = {
    "QB": (
        "completions",
        "passingAttempts",
        "completionPercentage",
        "yardsPerPassAttempt",
        "touchdowns",
        "interceptions",
        "longestPass",
        "sacked",
        "rushingYards",
        "penalties",
    ),
    "RB": (
        "rushingAttempts",
        "rushingYards",
        "yardsPerRushAttempt",
        "rushingTDs",
        "receptions",
        "longestRushing",
        "receivingYards",
        "fumbles",
        "penalties",
    ),
    "WR": (
        "receptions",
        "targets",
        "yardsPerReception",
        "receivingYards",
        "receivingTDs",
        "longestReception",
        "fumbles",
        "penalties",
    ),
    "TE": (
        "receptions",
        "receivingYards",
        "receivingTDs",
        "targets",
        "yardsPerReception",
        "longestReception",
        "fumbles",
        "penalties",
    ),
    "LT": _TACKLE_FIELDS,
    "RT": _TACKLE_FIELDS,
    "C": (
        "cleanSnaps",
        "totalSnaps",
        "snapAccuracy",
        "pancakeBlocks",
        "sacksAllowed",
        "snapsPlayed",
        "penalties",
    ),
    "LG": _LINEMAN_FIELDS,
    "RG": _LINEMAN_FIELDS,
    "DE": _DL_FIELDS,
    "LDT": _DL_FIELDS,
    "RDT": _DL_FIELDS,
    "WLB": _LB_FIELDS,
    "MLB": _LB_FIELDS,
    "SLB": _LB_FIELDS,
    "CB": _DB_FIELDS,
    "S": _DB_FIELDS,
    "P": ("yardsPerPunt", "touchbacks"),
    "K": ("fieldGoalMade", "fieldGoalAttempts", "longestFieldGoal", "blockedKicks"),
}

# Membership sets for depth chart categorization. Kept disjoint; generic
# codes (DT, LB, FS, SS, LS) cover rosters that skip the detailed spellings.
OFFENSE_POSITIONS = frozenset({"QB", "RB", "WR", "TE", "LT", "LG", "C", "RG", "RT", "OL"})
DEFENSE_POSITIONS = frozenset(
    {"DE", "LDE", "RDE", "DT", "LDT", "RDT", "DL", "LB", "WLB", "MLB", "SLB", "CB", "S", "FS", "SS"}
)
SPECIAL_TEAMS_POSITIONS = frozenset({"K", "P", "LS"})

POSITION_DISPLAY_NAMES: Mapping[str, str] = {
    "QB": "Quarterback",
    "RB": "Running Back",
    "WR": "Wide Receiver",
    "TE": "Tight End",
    "LT": "Left Tackle",
    "LG": "Left Guard",
    "C": "Center",
    "RG": "Right Guard",
    "RT": "Right Tackle",
    "DE": "Defensive End",
    "LDT": "Left Defensive Tackle",
    "RDT": "Right Defensive Tackle",
    "WLB": "Will Linebacker",
    "MLB": "Mike Linebacker",
    "SLB": "Sam Linebacker",
    "CB": "Cornerback",
    "S": "Safety",
    "P": "Punter",
    "K": "Kicker",
    "OL": "Offensive Lineman",
    "DL": "Defensive Lineman",
    "FS": "Free Safety",
    "SS": "Strong Safety",
    "LB": "Linebacker",
    "LS": "Long Snapper",
}


def normalize_position(position: str) -> str:
    """Return the canonical code for ``position``, or ``position`` unchanged."""

    return POSITION_ALIASES.get(position, position)


def stat_fields_for(canonical: str) -> List[str]:
    """Return the ordered stat fields tracked for a canonical position code."""

    return list(POSITION_STAT_FIELDS.get(canonical, ()))


def stats_for_position(position: str) -> List[str]:
    return stat_fields_for(normalize_position(position))


def display_name(canonical: str) -> str:
    return POSITION_DISPLAY_NAMES.get(canonical, canonical)


def _aliases_by_code() -> Dict[str, List[str]]:
    grouped: Dict[str, List[str]] = {}
    for alias, code in POSITION_ALIASES.items():
        grouped.setdefault(code, []).append(alias)
    return grouped


def iter_positions() -> Iterable[PositionInfo]:
    """Yield every canonical position with its aliases and stat fields."""

    for code, aliases in _aliases_by_code().items():
        yield PositionInfo(
            code=code,
            aliases=tuple(alias for alias in aliases if alias != code),
            stat_fields=POSITION_STAT_FIELDS.get(code, ()),
        )
