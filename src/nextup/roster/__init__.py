"""Roster shaping for depth charts."""

from .grouping import (
    UNKNOWN_POSITION,
    CategorizedPositions,
    PositionGroups,
    categorize,
    depth_label,
    depth_slots,
    group_by_position,
    unit_for,
)

__all__ = [
    "UNKNOWN_POSITION",
    "CategorizedPositions",
    "PositionGroups",
    "categorize",
    "depth_label",
    "depth_slots",
    "group_by_position",
    "unit_for",
]
