"""Usage aggregation across wall angles and grades.

Turns the nested angle -> hold -> grade counts into one usage value per
hold for a given (angle, grade) filter. Every function here is pure and
independent of mapping iteration order; missing keys count as zero.

Example::

    >>> active = select_active_map(usage_map, "40")
    >>> usage = usage_per_hold(active, "V4")
    >>> count_matching_boulders(usage_map, "V4", "40")
    12
"""

import re
from collections import defaultdict

from src.constants import ALL
from src.heatmap.models import (
    AngleUsageMap,
    GradeCounts,
    angle_boulders,
    angle_holds,
    grade_count,
)

_NUMBER_RE = re.compile(r"(\d+(?:\.\d+)?)")


def merge_angles(usage_map: AngleUsageMap) -> dict[str, GradeCounts]:
    """Sum every angle's per-hold, per-grade counts.

    Args:
        usage_map: Angle label -> angle data. Angles without hold
            counts contribute nothing.

    Returns:
        Hold id -> grade -> total count across all angles. The hold ids
        are the union over all angles; empty input gives ``{}``.
    """
    merged: dict[str, dict[str, int]] = defaultdict(dict)
    for data in usage_map.values():
        for hold_id, grades in data.holds.items():
            totals = merged[hold_id]
            for grade, count in grades.items():
                totals[grade] = totals.get(grade, 0) + count
    return dict(merged)


def merge_boulders(usage_map: AngleUsageMap) -> set[str]:
    """Return the distinct boulder ids set at any angle."""
    merged: set[str] = set()
    for data in usage_map.values():
        merged.update(data.boulders)
    return merged


def select_active_map(usage_map: AngleUsageMap, angle: str) -> dict[str, GradeCounts]:
    """Return the hold counts the heatmap is computed from.

    ``"all"`` merges every angle; any other label selects that angle's
    holds, or an empty mapping when the angle is unknown.
    """
    if angle == ALL:
        return merge_angles(usage_map)
    return angle_holds(usage_map, angle)


def usage_per_hold(active_map: dict[str, GradeCounts], grade: str) -> dict[str, int]:
    """Collapse per-grade counts into one usage value per hold.

    Args:
        active_map: Hold id -> grade counts (see :func:`select_active_map`).
        grade: Grade label, or ``"all"`` to sum every grade.

    Returns:
        Hold id -> usage. Holds with no matching usage are kept with 0.
    """
    if grade == ALL:
        return {hold_id: sum(grades.values()) for hold_id, grades in active_map.items()}
    return {hold_id: grade_count(grades, grade) for hold_id, grades in active_map.items()}


def count_matching_boulders(usage_map: AngleUsageMap, grade: str, angle: str) -> int:
    """Count boulders at the selected angle(s) with the selected grade.

    Each angle's boulders are counted on their own, so a boulder set at
    two angles counts twice under ``angle="all"``.
    """
    angles = list(usage_map) if angle == ALL else [angle]
    total = 0
    for label in angles:
        for boulder in angle_boulders(usage_map, label).values():
            if grade == ALL or boulder.grade == grade:
                total += 1
    return total


def _natural_key(label: str) -> tuple[tuple[int, float | str], ...]:
    parts = _NUMBER_RE.split(label)
    return tuple((0, float(part)) if _NUMBER_RE.fullmatch(part) else (1, part) for part in parts)


def available_angles(usage_map: AngleUsageMap) -> list[str]:
    """Return the angle labels in natural order (``"5" < "40"``)."""
    return sorted(usage_map, key=_natural_key)


def available_grades(usage_map: AngleUsageMap) -> list[str]:
    """Return every grade seen in hold counts or boulders, in natural order."""
    grades: set[str] = set()
    for data in usage_map.values():
        for counts in data.holds.values():
            grades.update(counts)
        grades.update(b.grade for b in data.boulders.values() if b.grade is not None)
    return sorted(grades, key=_natural_key)
