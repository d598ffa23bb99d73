"""
Church live-streaming ROI projection.

The model is intentionally coarse: online viewers grow 5% per month from the
expected engagement share of in-person attendance, 60% of in-person giving
converts online, equipment is amortised over the first year, and staff time
is valued at a flat hourly rate.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, fields
from typing import Any, List, Mapping, Optional, Sequence

from .metrics import round_half_up, safe_divide
from .models import ProjectionPoint, ProjectionSummary

PROJECTION_MONTHS = 12
ENGAGEMENT_GROWTH_PER_MONTH = 0.05
ONLINE_GIVING_RATIO = 0.6
WEEKS_PER_MONTH = 4
STAFF_HOURLY_RATE = 25


class InvalidROIInputsError(ValueError):
    def __init__(self, field_name: str, value: Any, message: Optional[str] = None):
        super().__init__(message or f"ROI input '{field_name}' must be a finite number, got {value!r}.")
        self.field_name = field_name
        self.value = value


@dataclass(frozen=True)
class ROIInputs:
    weekly_attendance: float
    average_giving: float
    streaming_cost: float
    equipment_cost: float
    staff_hours: float
    online_engagement: float

    WIRE_NAMES = {
        "weekly_attendance": "weeklyAttendance",
        "average_giving": "averageGiving",
        "streaming_cost": "streamingCost",
        "equipment_cost": "equipmentCost",
        "staff_hours": "staffHours",
        "online_engagement": "onlineEngagement",
    }

    @classmethod
    def field_names(cls) -> Sequence[str]:
        return [item.name for item in fields(cls)]

    @classmethod
    def is_complete(cls, data: Mapping[str, Any]) -> bool:
        return all(not _is_blank(_lookup(data, name)) for name in cls.field_names())

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "ROIInputs":
        """
        Parse form values (numbers or numeric strings, camelCase or snake_case keys).

        Raises ``InvalidROIInputsError`` for a missing or non-numeric value.
        """

        values = {}
        for name in cls.field_names():
            raw = _lookup(data, name)
            if _is_blank(raw) or isinstance(raw, bool):
                raise InvalidROIInputsError(name, raw)
            try:
                number = float(raw)
            except (TypeError, ValueError) as exc:
                raise InvalidROIInputsError(name, raw) from exc
            if math.isnan(number) or math.isinf(number):
                raise InvalidROIInputsError(name, raw)
            values[name] = number
        return cls(**values)


def _lookup(data: Mapping[str, Any], name: str) -> Any:
    wire_name = ROIInputs.WIRE_NAMES[name]
    if wire_name in data:
        return data[wire_name]
    return data.get(name)


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def monthly_costs(inputs: ROIInputs) -> float:
    return (
        inputs.streaming_cost
        + inputs.equipment_cost / 12
        + inputs.staff_hours * STAFF_HOURLY_RATE * WEEKS_PER_MONTH
    )


def _finite(name: str, value: float) -> float:
    if not math.isfinite(value):
        raise InvalidROIInputsError(name, value, f"ROI inputs are too large: projected {name} is not finite.")
    return value


def project(inputs: ROIInputs) -> List[ProjectionPoint]:
    costs = _finite("costs", monthly_costs(inputs))
    points: List[ProjectionPoint] = []
    for index in range(PROJECTION_MONTHS):
        audience = inputs.weekly_attendance * (inputs.online_engagement / 100) * (1 + index * ENGAGEMENT_GROWTH_PER_MONTH)
        viewers = math.floor(_finite("viewers", audience))
        revenue = _finite("revenue", viewers * (inputs.average_giving * ONLINE_GIVING_RATIO) * WEEKS_PER_MONTH)
        roi = safe_divide(revenue - costs, costs) * 100
        points.append(
            ProjectionPoint(
                month=index + 1,
                viewers=viewers,
                revenue=revenue,
                costs=costs,
                roi=int(round_half_up(roi)),
            )
        )
    return points


def project_if_complete(data: Mapping[str, Any]) -> List[ProjectionPoint]:
    """Run the projection only once every input has a value; otherwise return nothing."""
    if not ROIInputs.is_complete(data):
        return []
    return project(ROIInputs.from_mapping(data))


def summarize_projection(points: Sequence[ProjectionPoint]) -> Optional[ProjectionSummary]:
    if len(points) < PROJECTION_MONTHS:
        return None
    final = points[PROJECTION_MONTHS - 1]
    return ProjectionSummary(
        first_year_roi=final.roi,
        monthly_revenue_potential=int(round_half_up(final.revenue)),
    )
