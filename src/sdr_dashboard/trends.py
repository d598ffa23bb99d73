from __future__ import annotations

from typing import List, Optional, Sequence

from .metrics import round_half_up
from .models import DailyActivityRecord, MetricTrend, PeakDay, TrendRow, TrendStatus, coerce_count

TRACKED_METRICS = ("dials", "conversations")

NO_PRIOR = MetricTrend(percent=None, status=TrendStatus.NO_PRIOR)


def percent_change(current: float, previous: float) -> MetricTrend:
    """
    Day-over-day change as a percentage with one decimal.

    A flat zero stays a real 0.0 change; a rise from zero is flagged as
    ``FROM_ZERO`` because it has no finite percentage.
    """

    if previous == 0:
        if current == 0:
            return MetricTrend(percent=0.0, status=TrendStatus.CHANGE)
        return MetricTrend(percent=None, status=TrendStatus.FROM_ZERO)
    return MetricTrend(
        percent=round_half_up((current - previous) / previous * 100, 1),
        status=TrendStatus.CHANGE,
    )


def sort_by_day(records: Sequence[DailyActivityRecord]) -> List[DailyActivityRecord]:
    return sorted(records, key=lambda record: record.day)


def metric_trends(records: Sequence[DailyActivityRecord], metric: str) -> List[MetricTrend]:
    """Per-record change for ``metric``; the first record is marked ``NO_PRIOR``."""
    ordered = sort_by_day(records)
    result: List[MetricTrend] = []
    previous: Optional[DailyActivityRecord] = None
    for record in ordered:
        if previous is None:
            result.append(NO_PRIOR)
        else:
            result.append(
                percent_change(coerce_count(record.count(metric)), coerce_count(previous.count(metric)))
            )
        previous = record
    return result


def trends(
    records: Sequence[DailyActivityRecord],
    metrics: Sequence[str] = TRACKED_METRICS,
) -> List[TrendRow]:
    ordered = sort_by_day(records)
    per_metric = {metric: metric_trends(ordered, metric) for metric in metrics}
    return [
        TrendRow(day=record.day, metrics={metric: per_metric[metric][index] for metric in metrics})
        for index, record in enumerate(ordered)
    ]


def rank_peak_days(records: Sequence[DailyActivityRecord], limit: Optional[int] = None) -> List[PeakDay]:
    """
    Rank days by conversations, best first.

    ``sorted`` is stable, so ties keep day-ascending order.
    """

    ranked = sorted(
        sort_by_day(records),
        key=lambda record: coerce_count(record.conversations),
        reverse=True,
    )
    if limit is not None:
        ranked = ranked[:limit]
    return [PeakDay(day=record.day, performance=coerce_count(record.conversations)) for record in ranked]
