"""
Pytest configuration and shared fixtures.
"""

from datetime import date
from typing import Optional

import pytest
from fastapi.testclient import TestClient

from sdr_dashboard.configuration import DashboardConfig
from sdr_dashboard.models import ActivityQuery, DailyActivityRecord
from sdr_dashboard.repository import ActivityRepository, ActivityStoreError, InMemoryActivityRepository
from sdr_dashboard.sample_data import SAMPLE_ACTIVITY
from sdr_dashboard.server import create_app


class FailingRepository(ActivityRepository):
    """Store that rejects every call, for error-path tests."""

    def list(self, query: Optional[ActivityQuery] = None):
        raise ActivityStoreError("store unavailable")

    def append(self, record: DailyActivityRecord) -> DailyActivityRecord:
        raise ActivityStoreError("store unavailable")


@pytest.fixture
def sample_records():
    return list(SAMPLE_ACTIVITY)


@pytest.fixture
def reference_day():
    """A day one week after the first sample record."""
    return date(2024, 1, 8)


@pytest.fixture
def repository():
    return InMemoryActivityRepository(SAMPLE_ACTIVITY)


@pytest.fixture
def failing_repository():
    return FailingRepository()


@pytest.fixture
def client(repository):
    app = create_app(config=DashboardConfig(), repository=repository)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def failing_client(failing_repository):
    app = create_app(config=DashboardConfig(), repository=failing_repository)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def roi_payload():
    return {
        "weeklyAttendance": 100,
        "averageGiving": 20,
        "streamingCost": 200,
        "equipmentCost": 1200,
        "staffHours": 5,
        "onlineEngagement": 50,
    }
