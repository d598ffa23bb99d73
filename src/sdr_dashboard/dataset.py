from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional, Sequence

from .models import DailyActivityRecord, DashboardFilters
from .timeframe import filter_by_range, filter_by_window


@dataclass
class ActivityDataset:
    records: Sequence[DailyActivityRecord]

    def __post_init__(self) -> None:
        self.records = tuple(sorted(self.records, key=lambda record: record.day))

    def select(self, filters: DashboardFilters, today: Optional[date] = None) -> Sequence[DailyActivityRecord]:
        """
        Narrow the dataset to what the dashboard should display.

        The trailing timeframe window is applied first, then the explicit
        date range, which can only narrow the windowed result further.
        """

        reference = filters.reference or today or date.today()
        windowed = filter_by_window(self.records, filters.timeframe, reference)
        return tuple(filter_by_range(windowed, filters.start, filters.end))
