from __future__ import annotations

import math
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, List, Optional, Sequence

from .models import DailyActivityRecord, DistributionSlice, MetricsSummary, coerce_count

# Estimated dollar value of a booked meeting.
PIPELINE_VALUE_PER_MEETING = 5000

DISTRIBUTION_CHANNELS = (
    ("Calls", "calls"),
    ("Emails", "emails"),
    ("LinkedIn", "linked_in"),
    ("Meetings", "meetings"),
)


def safe_divide(numerator: float, denominator: float, default: float = 0.0) -> float:
    if not denominator:
        return default
    result = numerator / denominator
    if math.isnan(result) or math.isinf(result):
        return default
    return result


def round_half_up(value: float, digits: int = 0) -> float:
    """Round for display with halves going away from zero, unlike ``round()``."""
    if math.isnan(value) or math.isinf(value):
        return 0.0
    # Floats this large carry no fractional part; Decimal.quantize would overflow its precision.
    if abs(value) >= 2 ** 52:
        return float(value)
    exponent = Decimal(1).scaleb(-digits)
    return float(Decimal(repr(value)).quantize(exponent, rounding=ROUND_HALF_UP))


def total(records: Iterable[DailyActivityRecord], metric: str) -> int:
    return sum(coerce_count(getattr(record, metric, 0)) for record in records)


def summarize(records: Sequence[DailyActivityRecord]) -> MetricsSummary:
    total_dials = total(records, "dials")
    total_conversations = total(records, "conversations")
    total_meetings = total(records, "meetings")
    count = len(records)

    return MetricsSummary(
        dial_to_conversion=round_half_up(safe_divide(total_conversations, total_dials) * 100, 1),
        meeting_rate=round_half_up(safe_divide(total_meetings, total_conversations) * 100, 1),
        total_leads=total_conversations,
        pipeline_value=total_meetings * PIPELINE_VALUE_PER_MEETING,
        average_dials=round_half_up(safe_divide(total_dials, count), 1),
        average_conversations=round_half_up(safe_divide(total_conversations, count), 1),
    )


def distribution(
    records: Sequence[DailyActivityRecord],
    channels: Optional[Sequence[str]] = None,
) -> List[DistributionSlice]:
    """
    Sum each outreach channel across ``records``.

    Buckets always come back in ``Calls, Emails, LinkedIn, Meetings`` order;
    ``channels`` limits which of them are emitted.
    """

    allowed = set(channels) if channels is not None else None
    return [
        DistributionSlice(name=name, value=total(records, attribute))
        for name, attribute in DISTRIBUTION_CHANNELS
        if allowed is None or name in allowed
    ]


def conversion_rate(record: DailyActivityRecord) -> float:
    return round_half_up(safe_divide(coerce_count(record.conversations), coerce_count(record.dials)) * 100, 1)
