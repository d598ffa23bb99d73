"""
Unit tests for day-over-day trends and peak day ranking.
"""

from datetime import date

from sdr_dashboard.models import DailyActivityRecord, TrendStatus
from sdr_dashboard.trends import metric_trends, percent_change, rank_peak_days, trends


def _record(day: int, dials: int = 0, conversations: int = 0) -> DailyActivityRecord:
    return DailyActivityRecord(date(2024, 1, day), dials=dials, conversations=conversations)


class TestPercentChange:
    """Test suite for guarded percentage deltas."""

    def test_increase(self):
        trend = percent_change(110, 100)

        assert trend.percent == 10.0
        assert trend.status is TrendStatus.CHANGE

    def test_decrease_rounds_to_one_decimal(self):
        assert percent_change(110, 135).percent == -18.5

    def test_flat_zero_is_real_zero(self):
        trend = percent_change(0, 0)

        assert trend.percent == 0.0
        assert trend.status is TrendStatus.CHANGE

    def test_rise_from_zero_is_flagged(self):
        trend = percent_change(5, 0)

        assert trend.percent is None
        assert trend.status is TrendStatus.FROM_ZERO


class TestTrends:
    """Test suite for trend series."""

    def test_two_day_dial_trend(self):
        rows = trends([_record(1, dials=100), _record(2, dials=110)])

        assert rows[1].metrics["dials"].percent == 10.0

    def test_first_row_has_no_prior_marker(self):
        rows = trends([_record(1, dials=100), _record(2, dials=110)])

        first = rows[0].metrics["dials"]
        assert first.status is TrendStatus.NO_PRIOR
        assert first.percent is None

    def test_one_row_per_record(self, sample_records):
        rows = trends(sample_records)

        assert len(rows) == len(sample_records)
        assert rows[1].metrics["dials"].percent == 12.5
        assert rows[1].metrics["conversations"].percent == 20.0

    def test_sorts_by_day(self):
        rows = trends([_record(2, dials=110), _record(1, dials=100)])

        assert [row.day.day for row in rows] == [1, 2]
        assert rows[1].metrics["dials"].percent == 10.0

    def test_empty_input(self):
        assert trends([]) == []

    def test_metric_trends_single_metric(self, sample_records):
        series = metric_trends(sample_records, "conversations")

        assert [item.status for item in series][:2] == [TrendStatus.NO_PRIOR, TrendStatus.CHANGE]

    def test_serialises_wire_names(self):
        row = trends([_record(1, dials=100)])[0]

        assert row.as_dict() == {
            "date": "2024-01-01",
            "metrics": {
                "dials": {"percent": None, "status": "no_prior"},
                "conversations": {"percent": None, "status": "no_prior"},
            },
        }


class TestRankPeakDays:
    """Test suite for top performing days."""

    def test_descending_by_conversations(self, sample_records):
        ranked = rank_peak_days(sample_records)

        assert [item.day.day for item in ranked] == [4, 2, 5, 1, 3]
        assert ranked[0].performance == 20

    def test_ties_keep_day_order(self):
        records = [_record(3, conversations=10), _record(1, conversations=10), _record(2, conversations=12)]

        ranked = rank_peak_days(records)

        assert [item.day.day for item in ranked] == [2, 1, 3]

    def test_limit(self, sample_records):
        assert len(rank_peak_days(sample_records, limit=2)) == 2
