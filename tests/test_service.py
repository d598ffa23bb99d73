"""
Tests for dashboard assembly.
"""

from datetime import date

from sdr_dashboard.dataset import ActivityDataset
from sdr_dashboard.models import ActivityFilter, DashboardFilters, Timeframe, TrendStatus
from sdr_dashboard.service import DashboardService, daily_breakdown


class TestActivityDataset:
    """Test suite for the filter pipeline."""

    def test_records_sorted_by_day(self, sample_records):
        dataset = ActivityDataset(records=list(reversed(sample_records)))

        assert list(dataset.records) == sample_records

    def test_range_applied_after_window(self, sample_records):
        dataset = ActivityDataset(records=sample_records)
        filters = DashboardFilters(
            timeframe=Timeframe.WEEK,
            reference=date(2024, 1, 10),
            start=date(2024, 1, 1),
            end=date(2024, 1, 4),
        )

        selected = dataset.select(filters)

        assert [record.day.day for record in selected] == [3, 4]

    def test_today_used_when_no_reference(self, sample_records):
        dataset = ActivityDataset(records=sample_records)

        selected = dataset.select(DashboardFilters(), today=date(2024, 1, 8))

        assert len(selected) == 5


class TestDashboardService:
    """Test suite for the dashboard payload."""

    def test_build_summary(self, sample_records, reference_day):
        result = DashboardService(sample_records).build(DashboardFilters(reference=reference_day))

        assert result.summary.dial_to_conversion == 13.1
        assert len(result.records) == 5
        assert len(result.trends) == 5

    def test_window_excludes_everything(self, sample_records):
        result = DashboardService(sample_records).build(DashboardFilters(reference=date(2026, 1, 1)))

        assert result.records == []
        assert result.summary.average_dials == 0
        assert [item.value for item in result.distribution] == [0, 0, 0, 0]

    def test_activity_filter_narrows_distribution(self, sample_records, reference_day):
        filters = DashboardFilters(reference=reference_day, activity=ActivityFilter.MEETINGS)

        result = DashboardService(sample_records).build(filters)

        assert [(item.name, item.value) for item in result.distribution] == [("Meetings", 19)]

    def test_peak_days_limited_to_five(self, sample_records):
        filters = DashboardFilters(timeframe=Timeframe.QUARTER, reference=date(2024, 1, 31))

        result = DashboardService(sample_records).build(filters)

        assert len(result.peak_days) == 5
        assert result.peak_days[0].day == date(2024, 1, 4)

    def test_as_dict_shape(self, sample_records, reference_day):
        payload = DashboardService(sample_records).build(DashboardFilters(reference=reference_day)).as_dict()

        assert set(payload) == {"summary", "distribution", "trends", "daily", "peakDays", "records"}
        assert payload["summary"]["dialToConversion"] == 13.1
        assert payload["records"][0]["linkedIn"] == 25
        assert payload["distribution"][2] == {"name": "LinkedIn", "value": 136}


class TestDailyBreakdown:
    """Test suite for the per-day analytics table."""

    def test_rows(self, sample_records):
        rows = daily_breakdown(sample_records)

        assert rows[0].conversation_trend.status is TrendStatus.NO_PRIOR
        assert rows[1].conversion_rate == 13.3
        assert rows[1].conversation_trend.percent == 20.0
        assert rows[2].conversation_trend.percent == -22.2

    def test_row_serialisation(self, sample_records):
        row = daily_breakdown(sample_records)[0].as_dict()

        assert row == {
            "day": "2024-01-01",
            "dials": 120,
            "conversations": 15,
            "conversionRate": 12.5,
            "trend": {"percent": None, "status": "no_prior"},
        }
