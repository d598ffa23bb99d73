from __future__ import annotations

import calendar
from datetime import date, timedelta
from typing import List, Optional, Sequence, Union

from .models import DailyActivityRecord, Timeframe

_MONTHS_BACK = {Timeframe.MONTH: 1, Timeframe.QUARTER: 3}


def _shift_months(day: date, months: int) -> date:
    # Clamp to the last day of the target month (Mar 31 - 1 month -> Feb 28/29).
    month_index = day.year * 12 + (day.month - 1) - months
    year, month = divmod(month_index, 12)
    month += 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(day.day, last_day))


def window_start(window: Union[Timeframe, str], reference: date) -> date:
    timeframe = Timeframe(window)
    if timeframe is Timeframe.WEEK:
        return reference - timedelta(days=7)
    return _shift_months(reference, _MONTHS_BACK[timeframe])


def filter_by_window(
    records: Sequence[DailyActivityRecord],
    window: Union[Timeframe, str],
    reference: Optional[date] = None,
) -> List[DailyActivityRecord]:
    """
    Keep records on or after the start of the trailing ``window``.

    There is no upper bound; ``reference`` defaults to today.
    """

    cutoff = window_start(window, reference or date.today())
    return [record for record in records if record.day >= cutoff]


def filter_by_range(
    records: Sequence[DailyActivityRecord],
    start: Optional[date],
    end: Optional[date],
) -> List[DailyActivityRecord]:
    """Keep ``start <= day <= end``; a no-op unless both bounds are set."""
    if start is None or end is None:
        return list(records)
    return [record for record in records if start <= record.day <= end]
