"""
Dashboard view state and its transitions.

All UI flags live in one immutable ``DashboardState``; ``reduce`` applies an
action and returns the next state. Fetches carry a request token and any
response whose token is older than the latest issued one is dropped.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple

from .models import DailyActivityRecord, DashboardFilters, DashboardResult
from .service import DashboardService

logger = logging.getLogger(__name__)

FORM_FIELDS = ("dials", "conversations", "calls", "emails", "linkedIn", "meetings")

FETCH_ERROR_MESSAGE = "Failed to fetch dashboard data"
SUBMIT_SUCCESS_MESSAGE = "Data successfully submitted!"
SUBMIT_ERROR_MESSAGE = "Failed to submit data"
FORM_ERROR_MESSAGE = "Failed to submit data. Please try again."


def empty_form() -> Dict[str, str]:
    return {name: "" for name in FORM_FIELDS}


@dataclass(frozen=True)
class Toast:
    id: int
    message: str
    kind: str = "success"


@dataclass(frozen=True)
class DashboardState:
    filters: DashboardFilters = DashboardFilters()
    records: Tuple[DailyActivityRecord, ...] = ()
    result: Optional[DashboardResult] = None
    loading: bool = False
    error: Optional[str] = None
    latest_token: int = 0
    form_open: bool = False
    form_values: Mapping[str, Any] = field(default_factory=empty_form)
    submitting: bool = False
    form_error: Optional[str] = None
    toast: Optional[Toast] = None
    toast_seq: int = 0

    @property
    def next_token(self) -> int:
        return self.latest_token + 1


@dataclass(frozen=True)
class FetchStarted:
    token: int


@dataclass(frozen=True)
class FetchSucceeded:
    token: int
    records: Sequence[DailyActivityRecord]


@dataclass(frozen=True)
class FetchFailed:
    token: int
    message: str = FETCH_ERROR_MESSAGE


@dataclass(frozen=True)
class FiltersChanged:
    filters: DashboardFilters


@dataclass(frozen=True)
class FormOpened:
    pass


@dataclass(frozen=True)
class FormClosed:
    pass


@dataclass(frozen=True)
class FormChanged:
    field: str
    value: Any


@dataclass(frozen=True)
class SubmitStarted:
    values: Optional[Mapping[str, Any]] = None


@dataclass(frozen=True)
class SubmitSucceeded:
    record: DailyActivityRecord


@dataclass(frozen=True)
class SubmitFailed:
    message: str = SUBMIT_ERROR_MESSAGE


@dataclass(frozen=True)
class ToastDismissed:
    toast_id: Optional[int] = None
    """Only dismiss this toast; ``None`` dismisses whatever is showing"""


def _with_toast(state: DashboardState, message: str, kind: str, **changes: Any) -> DashboardState:
    toast_id = state.toast_seq + 1
    return replace(state, toast=Toast(id=toast_id, message=message, kind=kind), toast_seq=toast_id, **changes)


def _is_stale(state: DashboardState, token: int) -> bool:
    if token != state.latest_token:
        logger.debug("Discarding stale fetch response (token=%s, latest=%s)", token, state.latest_token)
        return True
    return False


def reduce(state: DashboardState, action: Any) -> DashboardState:
    if isinstance(action, FetchStarted):
        return replace(state, loading=True, error=None, latest_token=max(state.latest_token, action.token))

    if isinstance(action, FetchSucceeded):
        if _is_stale(state, action.token):
            return state
        records = tuple(action.records)
        return replace(
            state,
            records=records,
            result=DashboardService.summarize_records(records, state.filters),
            loading=False,
            error=None,
        )

    if isinstance(action, FetchFailed):
        if _is_stale(state, action.token):
            return state
        return _with_toast(
            state,
            action.message,
            "error",
            records=(),
            result=None,
            loading=False,
            error=action.message,
        )

    if isinstance(action, FiltersChanged):
        return replace(state, filters=action.filters)

    if isinstance(action, FormOpened):
        return replace(state, form_open=True, form_error=None)

    if isinstance(action, FormClosed):
        return replace(state, form_open=False, form_error=None)

    if isinstance(action, FormChanged):
        values = dict(state.form_values)
        values[action.field] = action.value
        return replace(state, form_values=values)

    if isinstance(action, SubmitStarted):
        values = dict(action.values) if action.values is not None else state.form_values
        return replace(state, submitting=True, form_error=None, form_values=values)

    if isinstance(action, SubmitSucceeded):
        # Fetches issued before the append carry a snapshot without the new record.
        records = tuple(sorted((*state.records, action.record), key=lambda record: record.day))
        return _with_toast(
            state,
            SUBMIT_SUCCESS_MESSAGE,
            "success",
            records=records,
            result=DashboardService.summarize_records(records, state.filters),
            submitting=False,
            loading=False,
            latest_token=state.next_token,
            form_open=False,
            form_values=empty_form(),
            form_error=None,
        )

    if isinstance(action, SubmitFailed):
        return _with_toast(
            state,
            action.message,
            "error",
            submitting=False,
            form_error=FORM_ERROR_MESSAGE,
        )

    if isinstance(action, ToastDismissed):
        if state.toast is None:
            return state
        if action.toast_id is not None and action.toast_id != state.toast.id:
            return state
        return replace(state, toast=None)

    raise TypeError(f"Unknown dashboard action: {action!r}")
