from __future__ import annotations

import uuid
from typing import Dict, List, Optional

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from snow_cat.config import app_config
from snow_cat.logging import get_logger, setup_logging
from snow_cat.models import ForecastSnapshot
from snow_cat.services.mood import Mood, MoodThresholds, evaluate

setup_logging(app_config.logging)
logger = get_logger(__name__)

app = FastAPI(title="Snow Cat API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


class ConditionPayload(BaseModel):
    id: Optional[int] = None
    main: Optional[str] = None
    description: Optional[str] = None


class HourPayload(BaseModel):
    dt: Optional[int] = None
    temp: Optional[float] = None
    pop: Optional[float] = None
    snow: Optional[Dict[str, float]] = None
    weather: Optional[List[ConditionPayload]] = None


class DayTemperaturePayload(BaseModel):
    max: Optional[float] = None
    min: Optional[float] = None


class DayPayload(BaseModel):
    temp: Optional[DayTemperaturePayload] = None
    snow: Optional[float] = None
    uvi: Optional[float] = None
    humidity: Optional[float] = None
    wind_speed: Optional[float] = None
    weather: Optional[List[ConditionPayload]] = None


class ForecastPayload(BaseModel):
    hourly: List[HourPayload]
    daily: List[DayPayload]


class MoodRequest(BaseModel):
    forecast: ForecastPayload
    offset: int = Field(default=0, ge=0)


class OutlookRequest(BaseModel):
    forecast: ForecastPayload


class SignalsPayload(BaseModel):
    snow48h_mm: float
    warm3d_count: int
    warm5d_count: int
    sun3d_count: int
    sun5d_count: int
    freezethaw_count: int
    snow2d_mm: float
    today_max_c: Optional[float] = None


class MoodResponse(BaseModel):
    mood: Mood
    offset: int
    signals: SignalsPayload
    rationale: str


class OutlookEntry(BaseModel):
    offset: int
    mood: Mood


class OutlookResponse(BaseModel):
    moods: List[OutlookEntry]


mood_thresholds = MoodThresholds.from_sources(config_data=app_config.mood)


def _to_snapshot(payload: ForecastPayload) -> ForecastSnapshot:
    return ForecastSnapshot.from_dict(payload.model_dump(exclude_none=True))


def _validate(snapshot: ForecastSnapshot, offset: int, *, trace_id: str) -> None:
    """Reject requests the classifier cannot answer meaningfully."""
    if not snapshot.daily:
        logger.warning("mood.invalid_request", trace_id=trace_id, reason="empty_daily")
        raise HTTPException(status_code=422, detail="Forecast has no daily entries")
    if offset >= len(snapshot.daily):
        logger.warning(
            "mood.invalid_request",
            trace_id=trace_id,
            reason="offset_out_of_range",
            offset=offset,
            days=len(snapshot.daily),
        )
        raise HTTPException(
            status_code=422,
            detail=f"offset {offset} is beyond the {len(snapshot.daily)}-day forecast",
        )


@app.get("/health")
def health() -> Dict[str, str]:
    return {"status": "ok"}


@app.post("/mood", response_model=MoodResponse)
def post_mood(request: MoodRequest) -> MoodResponse:
    trace_id = uuid.uuid4().hex
    snapshot = _to_snapshot(request.forecast)
    _validate(snapshot, request.offset, trace_id=trace_id)

    result = evaluate(snapshot, request.offset, config=mood_thresholds)
    logger.info(
        "mood.classified",
        trace_id=trace_id,
        offset=request.offset,
        mood=result.mood.value,
        hours=len(snapshot.hourly),
        days=len(snapshot.daily),
    )
    return MoodResponse(
        mood=result.mood,
        offset=request.offset,
        signals=SignalsPayload(**result.signals.to_dict()),
        rationale=result.rationale,
    )


@app.post("/mood/outlook", response_model=OutlookResponse)
def post_outlook(request: OutlookRequest) -> OutlookResponse:
    trace_id = uuid.uuid4().hex
    snapshot = _to_snapshot(request.forecast)
    _validate(snapshot, 0, trace_id=trace_id)

    moods = [
        OutlookEntry(offset=offset, mood=evaluate(snapshot, offset, config=mood_thresholds).mood)
        for offset in range(len(snapshot.daily))
    ]
    logger.info("mood.outlook", trace_id=trace_id, days=len(moods))
    return OutlookResponse(moods=moods)
