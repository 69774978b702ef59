"""Hover text for a single hold."""

from src.constants import ALL
from src.heatmap.models import GradeCounts, grade_count


def hover_lines(grade_counts: GradeCounts | None, grade: str) -> list[str] | None:
    """Return the hover detail lines for a hold.

    Args:
        grade_counts: The hold's per-grade counts in the active map, or
            None when the hold is not in the active map.
        grade: Selected grade label, or ``"all"``.

    Returns:
        ``"<grade>: <count>"`` lines. Under ``"all"`` every grade is
        listed by descending count, ties in their original order; for a
        single grade only that grade's line is returned. None when the
        hold has no entry in the active map.
    """
    if grade_counts is None:
        return None
    if grade == ALL:
        ranked = sorted(grade_counts.items(), key=lambda item: item[1], reverse=True)
        return [f"{label}: {count}" for label, count in ranked]
    return [f"{grade}: {grade_count(grade_counts, grade)}"]


def hover_text(grade_counts: GradeCounts | None, grade: str) -> str | None:
    """Return :func:`hover_lines` joined by newlines."""
    lines = hover_lines(grade_counts, grade)
    if lines is None:
        return None
    return "\n".join(lines)
