"""
Scoring Router - Scientific Productivity Scoring
app/routers/scoring.py

Read-only endpoints over the scoring engine: per-researcher breakdowns and
ranks, population leaderboards and summary statistics.
"""

import logging
from datetime import date, datetime, timezone
from typing import Dict, List, Optional

from fastapi import APIRouter, Depends, Query, Request, status
from fastapi.exceptions import HTTPException, RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field, ValidationError

from app.core.dependencies import get_scoring_service
from app.core.exceptions import DatabaseConnectionException, EntityNotFoundException
from app.models.activity import PointsDateRange
from app.models.scoring import (
    AveragePoints,
    CriteriaEntry,
    DepartmentPoints,
    LeaderboardEntry,
    RankingReport,
    ScoreBreakdown,
)
from app.services.scoring_service import ScoringService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1", tags=["Scoring"])



#  Schemas


class ErrorResponse(BaseModel):
    error_code: str
    message: str
    details: Optional[dict] = None
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))



#  Exception Helpers


def raise_error(status_code: int, error_code: str, message: str):
    raise HTTPException(
        status_code=status_code,
        detail=ErrorResponse(error_code=error_code, message=message).model_dump(mode="json"),
    )


def raise_validation_error(msg: str):
    raise_error(status.HTTP_422_UNPROCESSABLE_ENTITY, "VALIDATION_ERROR", msg)


def _error_content(error_code: str, message: str, details: Optional[dict] = None) -> dict:
    return ErrorResponse(error_code=error_code, message=message, details=details).model_dump(mode="json")


async def entity_not_found_handler(request: Request, exc: EntityNotFoundException):
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content=_error_content(
            f"{exc.entity_type.upper()}_NOT_FOUND",
            str(exc),
            {"entity_id": exc.entity_id},
        ),
    )


async def database_unavailable_handler(request: Request, exc: DatabaseConnectionException):
    logger.error(f"Store unavailable: {exc.message}")
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content=_error_content("STORE_UNAVAILABLE", "Activity store is unavailable"),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    err = errors[0] if errors else {}
    loc = err.get("loc", [])
    field = ".".join(str(l) for l in loc if l not in ("body", "query", "path"))
    error_type = err.get("type", "")
    message = err.get("msg", "Request validation failed")
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=_error_content(
            "VALIDATION_ERROR",
            f"{field}: {message}" if field else message,
            {"field": field, "type": error_type} if field else None,
        ),
    )


def _date_range(start: Optional[date], end: Optional[date]) -> Optional[PointsDateRange]:
    if start is None and end is None:
        return None
    if start is None or end is None:
        raise_validation_error("Both 'start' and 'end' are required for a date range")
    try:
        return PointsDateRange.for_dates(start, end)
    except ValidationError:
        raise_validation_error("'end' must be after 'start'")



#  Endpoints


@router.get(
    "/researchers/{user_id}/score",
    response_model=ScoreBreakdown,
    summary="Scientific points breakdown for one researcher",
)
async def get_researcher_score(
    user_id: int,
    start: Optional[date] = Query(None, description="Period start (inclusive)"),
    end: Optional[date] = Query(None, description="Period end (exclusive)"),
    service: ScoringService = Depends(get_scoring_service),
):
    date_range = _date_range(start, end)
    return await service.get_score(user_id, date_range)


@router.get(
    "/researchers/{user_id}/rank",
    response_model=RankingReport,
    summary="Overall and department rank, leaderboards and similar researchers",
)
async def get_researcher_rank(
    user_id: int,
    service: ScoringService = Depends(get_scoring_service),
):
    return await service.get_rank_report(user_id)


@router.get(
    "/rankings/top-researchers",
    response_model=List[LeaderboardEntry],
    summary="Highest scoring researchers",
)
async def get_top_researchers(
    limit: int = Query(5, ge=1, le=100),
    service: ScoringService = Depends(get_scoring_service),
):
    return await service.top_researchers(limit)


@router.get(
    "/rankings/top-departments",
    response_model=List[DepartmentPoints],
    summary="Departments by total scientific points",
)
async def get_top_departments(
    limit: int = Query(5, ge=1, le=100),
    service: ScoringService = Depends(get_scoring_service),
):
    return await service.top_departments(limit)


@router.get(
    "/rankings/criteria",
    response_model=Dict[str, List[CriteriaEntry]],
    summary="Leaderboards by title, research, conferences and other activity counts",
)
async def get_criteria_rankings(
    limit: int = Query(10, ge=1, le=100),
    service: ScoringService = Depends(get_scoring_service),
):
    rankings = await service.criteria_rankings(limit)
    return {criterion.value: entries for criterion, entries in rankings.items()}


@router.get(
    "/stats/average-points",
    response_model=AveragePoints,
    summary="Average scientific points across eligible researchers",
)
async def get_average_points(service: ScoringService = Depends(get_scoring_service)):
    return await service.average_points()
