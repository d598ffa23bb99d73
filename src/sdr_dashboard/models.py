from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any, Dict, Iterable, Mapping, Optional, Sequence

ACTIVITY_FIELDS = ("dials", "conversations", "calls", "emails", "linked_in", "meetings")

# Attribute name -> JSON key used by the frontend.
WIRE_NAMES = {
    "dials": "dials",
    "conversations": "conversations",
    "calls": "calls",
    "emails": "emails",
    "linked_in": "linkedIn",
    "meetings": "meetings",
}


_LEADING_INT = re.compile(r"\s*([+-]?\d+)", re.ASCII)


def coerce_count(value: Any) -> int:
    """
    Lenient integer coercion for activity counts.

    Behaves like ``parseInt(value) || 0``: numeric strings are parsed, floats
    are truncated, and anything missing or unparseable becomes 0.
    """

    if value is None or isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if value != value or value in (float("inf"), float("-inf")):
            return 0
        return int(value)
    match = _LEADING_INT.match(str(value))
    return int(match.group(1)) if match else 0


def parse_day(value: Any) -> date:
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


@dataclass(frozen=True)
class DailyActivityRecord:
    """
    One calendar day of SDR activity.

    ``day`` is the natural ordering key and is expected to be unique within a
    sequence. ``conversations <= dials`` is expected but never enforced.
    """

    day: date
    dials: int = 0
    conversations: int = 0
    calls: int = 0
    emails: int = 0
    linked_in: int = 0
    meetings: int = 0

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any], day: Optional[date] = None) -> "DailyActivityRecord":
        """
        Build a record from a loosely typed payload (form data, JSON, DB rows).

        Both ``linkedIn`` and ``linked_in`` are accepted for the LinkedIn count.
        """

        raw_day = day if day is not None else data.get("day")
        if raw_day is None:
            raise ValueError("Activity record requires a day.")
        counts = {}
        for attribute, wire_name in WIRE_NAMES.items():
            raw = data.get(wire_name, data.get(attribute))
            counts[attribute] = coerce_count(raw)
        return cls(day=parse_day(raw_day), **counts)

    def count(self, metric: str) -> int:
        return getattr(self, metric)

    def as_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"day": self.day.isoformat()}
        for attribute, wire_name in WIRE_NAMES.items():
            payload[wire_name] = getattr(self, attribute)
        return payload


@dataclass(frozen=True)
class ActivityQuery:
    """Inclusive day bounds for loading records from a store. ``None`` means unbounded."""

    start: Optional[date] = None
    end: Optional[date] = None

    def matches(self, day: date) -> bool:
        if self.start is not None and day < self.start:
            return False
        if self.end is not None and day > self.end:
            return False
        return True


class Timeframe(str, Enum):
    WEEK = "week"
    MONTH = "month"
    QUARTER = "quarter"


class ActivityFilter(str, Enum):
    ALL = "all"
    CALLS = "calls"
    MEETINGS = "meetings"

    def channels(self) -> Optional[Sequence[str]]:
        if self is ActivityFilter.CALLS:
            return ("Calls",)
        if self is ActivityFilter.MEETINGS:
            return ("Meetings",)
        return None


@dataclass(frozen=True)
class MetricsSummary:
    dial_to_conversion: float = 0.0
    meeting_rate: float = 0.0
    total_leads: int = 0
    pipeline_value: int = 0
    average_dials: float = 0.0
    average_conversations: float = 0.0

    def as_dict(self) -> Dict[str, Any]:
        return {
            "dialToConversion": self.dial_to_conversion,
            "meetingRate": self.meeting_rate,
            "totalLeads": self.total_leads,
            "pipelineValue": self.pipeline_value,
            "averageDials": self.average_dials,
            "averageConversations": self.average_conversations,
        }


@dataclass(frozen=True)
class DistributionSlice:
    name: str
    value: int

    def as_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "value": self.value}


class TrendStatus(str, Enum):
    NO_PRIOR = "no_prior"
    CHANGE = "change"
    FROM_ZERO = "from_zero"


@dataclass(frozen=True)
class MetricTrend:
    """
    Day-over-day change for one metric.

    ``percent`` is ``None`` unless ``status`` is ``CHANGE``: the first row of a
    series has no prior data, and a rise from zero has no finite percentage.
    """

    percent: Optional[float]
    status: TrendStatus

    def as_dict(self) -> Dict[str, Any]:
        return {"percent": self.percent, "status": self.status.value}


@dataclass(frozen=True)
class TrendRow:
    day: date
    metrics: Mapping[str, MetricTrend]

    def as_dict(self) -> Dict[str, Any]:
        return {
            "date": self.day.isoformat(),
            "metrics": {WIRE_NAMES.get(name, name): trend.as_dict() for name, trend in self.metrics.items()},
        }


@dataclass(frozen=True)
class PeakDay:
    day: date
    performance: int

    def as_dict(self) -> Dict[str, Any]:
        return {"day": self.day.isoformat(), "performance": self.performance}


@dataclass(frozen=True)
class DailyBreakdownRow:
    day: date
    dials: int
    conversations: int
    conversion_rate: float
    conversation_trend: MetricTrend

    def as_dict(self) -> Dict[str, Any]:
        return {
            "day": self.day.isoformat(),
            "dials": self.dials,
            "conversations": self.conversations,
            "conversionRate": self.conversion_rate,
            "trend": self.conversation_trend.as_dict(),
        }


@dataclass(frozen=True)
class DashboardFilters:
    """
    Filters shared by the dashboard views.

    ``timeframe`` selects the trailing window anchored at ``reference``;
    ``start``/``end`` further narrow the windowed result (both inclusive).
    """

    timeframe: Timeframe = Timeframe.WEEK
    reference: Optional[date] = None
    start: Optional[date] = None
    end: Optional[date] = None
    activity: ActivityFilter = ActivityFilter.ALL


@dataclass(frozen=True)
class ProjectionPoint:
    month: int
    viewers: int
    revenue: float
    costs: float
    roi: int

    def as_dict(self) -> Dict[str, Any]:
        return {
            "month": self.month,
            "viewers": self.viewers,
            "revenue": self.revenue,
            "costs": self.costs,
            "roi": self.roi,
        }


@dataclass(frozen=True)
class ProjectionSummary:
    first_year_roi: int
    monthly_revenue_potential: int

    def as_dict(self) -> Dict[str, Any]:
        return {
            "firstYearRoi": self.first_year_roi,
            "monthlyRevenuePotential": self.monthly_revenue_potential,
        }


@dataclass(frozen=True)
class DashboardResult:
    summary: MetricsSummary
    distribution: Sequence[DistributionSlice] = field(default_factory=list)
    trends: Sequence[TrendRow] = field(default_factory=list)
    daily: Sequence[DailyBreakdownRow] = field(default_factory=list)
    peak_days: Sequence[PeakDay] = field(default_factory=list)
    records: Sequence[DailyActivityRecord] = field(default_factory=list)

    def as_dict(self) -> Dict[str, Any]:
        """
        Convert the nested dataclasses into a JSON-serialisable structure.

        FastAPI callers can ship this straight to the UI.
        """

        return {
            "summary": self.summary.as_dict(),
            "distribution": _serialize(self.distribution),
            "trends": _serialize(self.trends),
            "daily": _serialize(self.daily),
            "peakDays": _serialize(self.peak_days),
            "records": _serialize(self.records),
        }


def _serialize(items: Iterable[Any]) -> list:
    return [item.as_dict() for item in items]
