from __future__ import annotations

import asyncio
import logging
from datetime import date
from typing import Any, Callable, Mapping, Optional

from .dataset import ActivityDataset
from .models import DailyActivityRecord, DashboardFilters
from .repository import ActivityRepository, ActivityStoreError
from .state import (
    DashboardState,
    FetchFailed,
    FetchStarted,
    FetchSucceeded,
    FiltersChanged,
    SubmitFailed,
    SubmitStarted,
    SubmitSucceeded,
    ToastDismissed,
    reduce,
)

logger = logging.getLogger(__name__)

TOAST_SECONDS = 3.0


class DashboardSession:
    """
    Drives ``DashboardState`` against an activity store.

    Store calls run in a worker thread; every other step is a synchronous
    reducer transition.
    """

    def __init__(
        self,
        repository: ActivityRepository,
        clock: Callable[[], date] = date.today,
        toast_seconds: Optional[float] = TOAST_SECONDS,
    ) -> None:
        self.repository = repository
        self.clock = clock
        self.toast_seconds = toast_seconds
        self.state = DashboardState()

    def dispatch(self, action: Any) -> DashboardState:
        self.state = reduce(self.state, action)
        return self.state

    async def refresh(self) -> DashboardState:
        token = self.state.next_token
        filters = self.state.filters
        self.dispatch(FetchStarted(token))
        try:
            records = await asyncio.to_thread(self.repository.list)
        except ActivityStoreError as exc:
            logger.warning("Failed to fetch dashboard data: %s", exc)
            return self.dispatch(FetchFailed(token))

        selected = ActivityDataset(records=records).select(filters, today=self.clock())
        return self.dispatch(FetchSucceeded(token, selected))

    async def change_filters(self, filters: DashboardFilters) -> DashboardState:
        self.dispatch(FiltersChanged(filters))
        return await self.refresh()

    async def submit(self, values: Optional[Mapping[str, Any]] = None) -> DashboardState:
        """
        Store the form values as today's activity.

        On failure the form stays open with its values intact so the user can
        resubmit.
        """

        form_values = dict(values if values is not None else self.state.form_values)
        self.dispatch(SubmitStarted(form_values))
        record = DailyActivityRecord.from_mapping(form_values, day=self.clock())
        try:
            stored = await asyncio.to_thread(self.repository.append, record)
        except ActivityStoreError as exc:
            logger.warning("Failed to submit activity for %s: %s", record.day.isoformat(), exc)
            self.dispatch(SubmitFailed())
        else:
            self.dispatch(SubmitSucceeded(stored))
        self._schedule_toast_dismissal()
        return self.state

    def dismiss_toast(self) -> DashboardState:
        return self.dispatch(ToastDismissed())

    def _schedule_toast_dismissal(self) -> None:
        if self.toast_seconds is None or self.state.toast is None:
            return
        toast_id = self.state.toast.id
        asyncio.get_running_loop().call_later(self.toast_seconds, self.dispatch, ToastDismissed(toast_id))
