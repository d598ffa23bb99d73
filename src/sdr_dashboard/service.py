from __future__ import annotations

from datetime import date
from typing import List, Optional, Sequence

from .dataset import ActivityDataset
from .metrics import conversion_rate, distribution, summarize
from .models import DailyActivityRecord, DailyBreakdownRow, DashboardFilters, DashboardResult
from .trends import metric_trends, rank_peak_days, sort_by_day, trends

TOP_DAYS_LIMIT = 5


class DashboardService:
    """
    Assembles the SDR dashboard payload from a set of daily activity records.
    """

    def __init__(self, records: Sequence[DailyActivityRecord]) -> None:
        self.dataset = ActivityDataset(records=records)

    def build(self, filters: DashboardFilters, today: Optional[date] = None) -> DashboardResult:
        selected = self.dataset.select(filters, today=today)
        return self.summarize_records(selected, filters)

    @staticmethod
    def summarize_records(
        records: Sequence[DailyActivityRecord],
        filters: Optional[DashboardFilters] = None,
    ) -> DashboardResult:
        filters = filters or DashboardFilters()
        ordered = sort_by_day(records)
        return DashboardResult(
            summary=summarize(ordered),
            distribution=distribution(ordered, channels=filters.activity.channels()),
            trends=trends(ordered),
            daily=daily_breakdown(ordered),
            peak_days=rank_peak_days(ordered, limit=TOP_DAYS_LIMIT),
            records=ordered,
        )


def daily_breakdown(records: Sequence[DailyActivityRecord]) -> List[DailyBreakdownRow]:
    ordered = sort_by_day(records)
    conversation_trends = metric_trends(ordered, "conversations")
    return [
        DailyBreakdownRow(
            day=record.day,
            dials=record.dials,
            conversations=record.conversations,
            conversion_rate=conversion_rate(record),
            conversation_trend=trend,
        )
        for record, trend in zip(ordered, conversation_trends)
    ]
