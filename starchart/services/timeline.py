"""
Daily cumulative star series.

Turns an unordered collection of star events into one point per calendar day,
spanning repository creation through today:

    created ... first star ... last star ... today
    0  0  0  0  n1  n1  n2 ...  N   N   N   N

Days before the final zero of the leading zero run are masked (value None):
they keep their position, so index-based axis labels stay stable, but only the
zero right before growth is drawn.
"""

from collections import Counter
from collections.abc import Iterable
from dataclasses import dataclass, replace
from datetime import date, timedelta

from starchart.services.github.types import StarEvent

ONE_DAY = timedelta(days=1)


@dataclass(frozen=True)
class DailyPoint:
    """Cumulative star count at the end of one calendar day (None = not drawn)."""

    date: date
    cumulative_count: int | None


Timeline = list[DailyPoint]


def _days(start: date, end: date) -> Iterable[date]:
    """Yield every day from start up to (excluding) end."""
    day = start
    while day < end:
        yield day
        day += ONE_DAY


def aggregate_daily(events: Iterable[StarEvent]) -> list[tuple[date, int]]:
    """
    Group events by day and compute the running total.

    Returns:
        (day, stars on or before day) pairs for days that had stars, ascending
    """
    per_day = Counter(event.occurred_on for event in events)
    running = 0
    totals: list[tuple[date, int]] = []
    for day in sorted(per_day):
        running += per_day[day]
        totals.append((day, running))
    return totals


def mask_leading_zeros(points: Timeline) -> Timeline:
    """
    Replace every value before the last exact zero with None.

    Length is unchanged. Running it on an already masked timeline is a no-op.
    """
    last_zero = -1
    for index, point in enumerate(points):
        if point.cumulative_count == 0:
            last_zero = index

    return [
        replace(point, cumulative_count=None) if index < last_zero else point
        for index, point in enumerate(points)
    ]


def build_timeline(
    events: Iterable[StarEvent],
    repo_created_on: date,
    today: date,
) -> Timeline:
    """
    Build the plotted series for a repository.

    Args:
        events: Star events in any order (several may share a day)
        repo_created_on: Repository creation day
        today: Current day; the series is extended flat up to it

    Returns:
        One DailyPoint per day, contiguous and ascending, with the leading
        zero run masked
    """
    totals = aggregate_daily(events)
    points: Timeline = []

    if not totals:
        # Never starred: zeros from creation through today
        points = [DailyPoint(day, 0) for day in _days(repo_created_on, today)]
        points.append(DailyPoint(today, 0))
        return mask_leading_zeros(points)

    first_day = totals[0][0]
    points.extend(DailyPoint(day, 0) for day in _days(repo_created_on, first_day))

    # Real days, with gaps carrying the previous total
    for (day, count), (next_day, _) in zip(totals, totals[1:]):
        points.append(DailyPoint(day, count))
        points.extend(DailyPoint(gap, count) for gap in _days(day + ONE_DAY, next_day))

    last_day, last_count = totals[-1]
    points.append(DailyPoint(last_day, last_count))

    # Flat extension: no new stars assumed after the last one
    tail = _days(last_day + ONE_DAY, today + ONE_DAY)
    points.extend(DailyPoint(day, last_count) for day in tail)

    return mask_leading_zeros(points)
