"""
SDR activity dashboard helpers.

This package reduces daily sales-development activity into the summary
cards, channel distribution and day-over-day trends shown on the dashboard,
and projects the return on a church live-streaming investment.
"""

from .metrics import distribution, safe_divide, summarize  # noqa: F401
from .models import (  # noqa: F401
    ActivityFilter,
    ActivityQuery,
    DailyActivityRecord,
    DailyBreakdownRow,
    DashboardFilters,
    DashboardResult,
    DistributionSlice,
    MetricsSummary,
    MetricTrend,
    PeakDay,
    ProjectionPoint,
    ProjectionSummary,
    Timeframe,
    TrendRow,
    TrendStatus,
)
from .repository import (  # noqa: F401
    ActivityRepository,
    ActivityStoreError,
    DuplicateActivityError,
    InMemoryActivityRepository,
    SQLActivityRepository,
    build_repository_from_env,
)
from .roi import InvalidROIInputsError, ROIInputs, project, project_if_complete, summarize_projection  # noqa: F401
from .service import DashboardService  # noqa: F401
from .timeframe import filter_by_range, filter_by_window  # noqa: F401
from .trends import percent_change, rank_peak_days, trends  # noqa: F401
