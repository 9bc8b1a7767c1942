"""
Review scoring helpers.

A review is "above average" against the owner's own history: the first
review always is, later ones need to beat the mean views or the mean
retention of everything submitted before.
"""

from typing import Iterable, Optional, Tuple


def is_above_average(
    views: float,
    retention: float,
    previous: Iterable[Tuple[float, float]],
) -> bool:
    """previous holds (views, retention_percentage) of earlier reviews."""
    history = list(previous)
    if not history:
        return True

    avg_views = sum(v for v, _ in history) / len(history)
    avg_retention = sum(r for _, r in history) / len(history)
    return views > avg_views or retention > avg_retention


def rolling_average(current: Optional[float], count: int, value: float) -> float:
    """Fold value into an average of count earlier samples."""
    if current is None or count <= 0:
        return value
    return (current * count + value) / (count + 1)


def history_baselines(
    previous: Iterable[Tuple[float, float]],
    views: float,
    retention: float,
) -> Tuple[float, float]:
    """Channel (views, retention) baselines once a new review joins the history."""
    history = list(previous)
    count = len(history)
    avg_views = sum(v for v, _ in history) / count if count else None
    avg_retention = sum(r for _, r in history) / count if count else None
    return (
        rolling_average(avg_views, count, views),
        rolling_average(avg_retention, count, retention),
    )
