"""FastAPI server exposing SDR activity stats and the streaming ROI calculator."""
from __future__ import annotations

import asyncio
import logging
from datetime import date
from typing import Annotated, Any, Dict, List, Optional, Union

from fastapi import Depends, FastAPI, HTTPException, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, ConfigDict, Field, model_validator

from .configuration import DashboardConfig, configure_logging
from .models import ActivityFilter, DailyActivityRecord, DashboardFilters, Timeframe
from .repository import ActivityRepository, ActivityStoreError, DuplicateActivityError, build_repository_from_env
from .roi import InvalidROIInputsError, ROIInputs, project, summarize_projection
from .service import DashboardService

logger = logging.getLogger(__name__)


class ActivityPayload(BaseModel):
    """Form submission; ``day`` is optional and defaults to today."""

    model_config = ConfigDict(populate_by_name=True)

    day: Optional[date] = None
    dials: int = Field(0, ge=0)
    conversations: int = Field(0, ge=0)
    calls: int = Field(0, ge=0)
    emails: int = Field(0, ge=0)
    linked_in: int = Field(0, ge=0, alias="linkedIn")
    meetings: int = Field(0, ge=0)

    def to_record(self, today: date) -> DailyActivityRecord:
        return DailyActivityRecord(
            day=self.day or today,
            dials=self.dials,
            conversations=self.conversations,
            calls=self.calls,
            emails=self.emails,
            linked_in=self.linked_in,
            meetings=self.meetings,
        )


class ActivityResponse(BaseModel):
    message: str
    record: Dict[str, Any]


class ROIRequest(BaseModel):
    """
    Raw calculator form values.

    Blank or missing fields mean the form is incomplete, so values are kept
    as sent and only parsed once all six are filled in.
    """

    model_config = ConfigDict(populate_by_name=True)

    weekly_attendance: Optional[Union[float, str]] = Field(None, alias="weeklyAttendance")
    average_giving: Optional[Union[float, str]] = Field(None, alias="averageGiving")
    streaming_cost: Optional[Union[float, str]] = Field(None, alias="streamingCost")
    equipment_cost: Optional[Union[float, str]] = Field(None, alias="equipmentCost")
    staff_hours: Optional[Union[float, str]] = Field(None, alias="staffHours")
    online_engagement: Optional[Union[float, str]] = Field(None, alias="onlineEngagement")

    def to_inputs(self) -> Optional[ROIInputs]:
        """``None`` while incomplete; raises ``InvalidROIInputsError`` for unusable values."""
        values = self.model_dump()
        if not ROIInputs.is_complete(values):
            return None
        return ROIInputs.from_mapping(values)


class ROIResponse(BaseModel):
    complete: bool
    projections: List[Dict[str, Any]]
    summary: Optional[Dict[str, Any]] = None


class DashboardQuery(BaseModel):
    timeframe: Timeframe = Timeframe.WEEK
    start: Optional[date] = None
    end: Optional[date] = None
    activity: ActivityFilter = ActivityFilter.ALL
    reference: Optional[date] = None

    @model_validator(mode="after")
    def _validate_range(self) -> "DashboardQuery":
        if self.start and self.end and self.end < self.start:
            raise ValueError("end must not be before start")
        return self

    def to_filters(self) -> DashboardFilters:
        return DashboardFilters(
            timeframe=self.timeframe,
            reference=self.reference,
            start=self.start,
            end=self.end,
            activity=self.activity,
        )


def get_repository(request: Request) -> ActivityRepository:
    return request.app.state.repository


def create_app(
    config: Optional[DashboardConfig] = None,
    repository: Optional[ActivityRepository] = None,
) -> FastAPI:
    cfg = config or DashboardConfig.from_env()
    app = FastAPI(title="SDR Activity Dashboard API", version="0.1.0")
    app.state.repository = repository or build_repository_from_env(cfg.store)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=cfg.server.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health")
    async def health() -> Dict[str, str]:
        return {"status": "OK"}

    @app.get("/api/stats/daily")
    async def daily_stats(store: ActivityRepository = Depends(get_repository)) -> List[Dict[str, Any]]:
        records = await _load_records(store)
        return [record.as_dict() for record in records]

    @app.post("/api/activities", status_code=201, response_model=ActivityResponse)
    async def submit_activity(
        payload: ActivityPayload,
        store: ActivityRepository = Depends(get_repository),
    ) -> ActivityResponse:
        record = payload.to_record(date.today())
        logger.info("Received activity data: %s", record.as_dict())
        try:
            stored = await asyncio.to_thread(store.append, record)
        except DuplicateActivityError as exc:
            logger.info("Rejected duplicate activity: %s", exc)
            raise HTTPException(status_code=409, detail=str(exc)) from exc
        except ActivityStoreError as exc:
            logger.warning("Failed to store activity: %s", exc)
            raise HTTPException(status_code=500, detail=str(exc)) from exc
        return ActivityResponse(message="Data received successfully", record=stored.as_dict())

    @app.get("/api/dashboard")
    async def dashboard(
        query: Annotated[DashboardQuery, Query()],
        store: ActivityRepository = Depends(get_repository),
    ) -> Dict[str, Any]:
        records = await _load_records(store)
        result = DashboardService(records).build(query.to_filters())
        return result.as_dict()

    @app.post("/api/roi/projection", response_model=ROIResponse)
    async def roi_projection(request: ROIRequest) -> ROIResponse:
        try:
            inputs = request.to_inputs()
            if inputs is None:
                return ROIResponse(complete=False, projections=[])
            points = project(inputs)
        except InvalidROIInputsError as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        summary = summarize_projection(points)
        return ROIResponse(
            complete=True,
            projections=[point.as_dict() for point in points],
            summary=summary.as_dict() if summary else None,
        )

    return app


async def _load_records(store: ActivityRepository) -> List[DailyActivityRecord]:
    try:
        return list(await asyncio.to_thread(store.list))
    except ActivityStoreError as exc:
        logger.exception("Failed to load activity")
        raise HTTPException(status_code=500, detail=str(exc)) from exc


def main() -> None:
    import uvicorn

    config = DashboardConfig.from_env()
    configure_logging(config.logging)
    uvicorn.run(create_app(config), host=config.server.host, port=config.server.port)


if __name__ == "__main__":
    main()
