"""Stat presentation helpers."""

from .presenter import (
    BACKEND_FIELD_ALIASES,
    PLACEHOLDER,
    STAT_LABELS,
    PlayerCard,
    StatCell,
    aggregate_stats,
    build_player_card,
    format_label,
    normalize_stat_keys,
    stat_cells,
    summary_fields,
)

__all__ = [
    "BACKEND_FIELD_ALIASES",
    "PLACEHOLDER",
    "STAT_LABELS",
    "PlayerCard",
    "StatCell",
    "aggregate_stats",
    "build_player_card",
    "format_label",
    "normalize_stat_keys",
    "stat_cells",
    "summary_fields",
]
