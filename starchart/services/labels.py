"""
Axis label decimation.

The canvas is only 495px wide, so the x axis can carry a handful of labels at
most. The budget grows with the number of distinct months shown (two months
never need more than two labels) and is capped at six. Labels are spaced by a
fixed index step; the last index always carries the "live" marker.
"""

from collections.abc import Sequence
from datetime import date

# Shown on the last tick instead of a date: the series runs up to today
LIVE_MARKER = "⚡"

MAX_X_LABELS = 6
MIN_X_LABELS = 2

# English month initials, independent of the process locale
_MONTH_INITIALS = "JFMAMJJASOND"


def month_span(dates: Sequence[date]) -> int:
    """Count the distinct (year, month) pairs in `dates`."""
    return len({(d.year, d.month) for d in dates})


def target_label_count(dates: Sequence[date]) -> int:
    """How many x labels to aim for: one per month, between 2 and 6."""
    return max(MIN_X_LABELS, min(month_span(dates), MAX_X_LABELS))


def format_label(day: date) -> str:
    """Month initial plus 2-digit year, e.g. "J21" for January 2021."""
    return f"{_MONTH_INITIALS[day.month - 1]}{day.year % 100:02d}"


def plan_labels(dates: Sequence[date]) -> list[str | None]:
    """
    Decide which indices carry an x label and what it says.

    Args:
        dates: Ordered dates of the plotted series

    Returns:
        Label text per index, None where nothing should be drawn
    """
    n = len(dates)
    if n == 0:
        return []

    step = n // (target_label_count(dates) - 1)
    labels: list[str | None] = []
    for index, day in enumerate(dates):
        if index == n - 1:
            labels.append(LIVE_MARKER)
        elif index == 0:
            labels.append(format_label(day))
        elif step and index % step == 0 and index <= n - 1 - step / 2:
            labels.append(format_label(day))
        else:
            labels.append(None)
    return labels


def y_tick_limit(point_count: int) -> int:
    """Maximum number of y labels for a series of `point_count` points."""
    if point_count <= 2:
        return 2
    if point_count == 3:
        return 3
    return 4
