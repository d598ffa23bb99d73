"""
Tests for the async dashboard session.
"""

import asyncio
import threading
import time
from datetime import date
from typing import Optional

import pytest

from sdr_dashboard.models import ActivityQuery, DashboardFilters, Timeframe
from sdr_dashboard.repository import InMemoryActivityRepository
from sdr_dashboard.sample_data import SAMPLE_ACTIVITY
from sdr_dashboard.session import DashboardSession
from sdr_dashboard.state import FETCH_ERROR_MESSAGE, FORM_ERROR_MESSAGE


class SlowRepository(InMemoryActivityRepository):
    """While ``slow`` is set, ``list`` stalls and then sees no data."""

    def __init__(self):
        super().__init__(SAMPLE_ACTIVITY)
        self.slow = True

    def list(self, query: Optional[ActivityQuery] = None):
        if self.slow:
            time.sleep(0.2)
            return ()
        return super().list(query)


class GatedRepository(InMemoryActivityRepository):
    """``list`` takes its snapshot immediately but returns only once ``gate`` is set."""

    def __init__(self):
        super().__init__(SAMPLE_ACTIVITY)
        self.gate = threading.Event()

    def list(self, query: Optional[ActivityQuery] = None):
        snapshot = super().list(query)
        self.gate.wait(timeout=2)
        return snapshot


@pytest.fixture
def session(repository, reference_day):
    return DashboardSession(repository, clock=lambda: reference_day, toast_seconds=None)


class TestRefresh:
    """Test suite for fetching dashboard data."""

    @pytest.mark.asyncio
    async def test_refresh_loads_window(self, session):
        state = await session.refresh()

        assert state.loading is False
        assert len(state.records) == 5
        assert state.result.summary.dial_to_conversion == 13.1

    @pytest.mark.asyncio
    async def test_change_filters_refetches(self, session):
        filters = DashboardFilters(timeframe=Timeframe.WEEK, reference=date(2024, 1, 10))

        state = await session.change_filters(filters)

        assert [record.day.day for record in state.records] == [3, 4, 5]

    @pytest.mark.asyncio
    async def test_refresh_failure(self, failing_repository, reference_day):
        session = DashboardSession(failing_repository, clock=lambda: reference_day, toast_seconds=None)

        state = await session.refresh()

        assert state.error == FETCH_ERROR_MESSAGE
        assert state.result is None

    @pytest.mark.asyncio
    async def test_late_response_does_not_overwrite(self, reference_day):
        repository = SlowRepository()
        session = DashboardSession(repository, clock=lambda: reference_day, toast_seconds=None)

        first = asyncio.create_task(session.refresh())
        await asyncio.sleep(0.05)
        repository.slow = False
        await session.refresh()
        await first

        assert session.state.latest_token == 2
        assert len(session.state.records) == 5


class TestSubmit:
    """Test suite for submitting daily metrics."""

    @pytest.mark.asyncio
    async def test_submit_stores_today(self, session, repository, reference_day):
        await session.refresh()

        state = await session.submit({"dials": "80", "conversations": "9", "linkedIn": "4"})

        stored = repository.list()[-1]
        assert stored.day == reference_day
        assert stored.linked_in == 4
        assert state.records[-1] == stored
        assert state.toast.kind == "success"
        assert state.form_open is False

    @pytest.mark.asyncio
    async def test_fetch_started_before_submit_keeps_new_record(self, reference_day):
        repository = GatedRepository()
        session = DashboardSession(repository, clock=lambda: reference_day, toast_seconds=None)

        pending = asyncio.create_task(session.refresh())
        await asyncio.sleep(0.05)
        await session.submit({"dials": "80", "conversations": "9"})
        repository.gate.set()
        await pending

        assert session.state.records[-1].day == reference_day
        assert session.state.loading is False
        assert repository.list()[-1].day == reference_day

    @pytest.mark.asyncio
    async def test_submit_failure_keeps_values(self, failing_repository, reference_day):
        session = DashboardSession(failing_repository, clock=lambda: reference_day, toast_seconds=None)
        values = {"dials": "80", "conversations": "9"}

        state = await session.submit(values)

        assert state.form_values == values
        assert state.form_error == FORM_ERROR_MESSAGE
        assert state.toast.kind == "error"

    @pytest.mark.asyncio
    async def test_duplicate_day_fails(self, repository):
        session = DashboardSession(repository, clock=lambda: date(2024, 1, 1), toast_seconds=None)

        state = await session.submit({"dials": "1"})

        assert state.form_error == FORM_ERROR_MESSAGE

    @pytest.mark.asyncio
    async def test_toast_auto_dismisses(self, repository, reference_day):
        session = DashboardSession(repository, clock=lambda: reference_day, toast_seconds=0.01)

        state = await session.submit({"dials": "10"})
        assert state.toast is not None

        await asyncio.sleep(0.05)

        assert session.state.toast is None

    def test_manual_dismiss(self, session):
        assert session.dismiss_toast().toast is None
