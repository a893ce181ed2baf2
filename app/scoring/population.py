"""
Population Score Batch
app/scoring/population.py

Scores many researchers through pooled_map. A researcher whose computation
fails gets a zero breakdown; the batch itself never aborts.
"""

from __future__ import annotations

from typing import Dict, List, Optional, Sequence

import structlog

from app.models.activity import PointsDateRange
from app.models.researcher import Researcher
from app.models.scoring import ScoreBreakdown
from app.scoring.points_calculator import ActivityPointCalculator
from app.scoring.pool import pooled_map

logger = structlog.get_logger(__name__)

DEFAULT_CONCURRENCY = 6
DEFAULT_DEPARTMENT_CONCURRENCY = 4


async def score_population(
    calculator: ActivityPointCalculator,
    user_ids: Sequence[int],
    concurrency: int = DEFAULT_CONCURRENCY,
    date_range: Optional[PointsDateRange] = None,
) -> Dict[int, ScoreBreakdown]:
    """
    Score every user id with at most ``concurrency`` computations in flight.

    Returns:
        Mapping user_id -> ScoreBreakdown, one entry per distinct input id.
    """

    async def score_one(user_id: int) -> ScoreBreakdown:
        try:
            return await calculator.compute_score(user_id, date_range)
        except Exception:
            logger.error("researcher_scoring_failed", user_id=user_id, exc_info=True)
            return ScoreBreakdown.empty()

    ids = list(user_ids)
    results = await pooled_map(ids, concurrency, score_one)
    logger.info("population_scored", size=len(ids), concurrency=concurrency)
    return dict(zip(ids, results))


def group_by_department(researchers: Sequence[Researcher]) -> Dict[str, List[Researcher]]:
    """Department -> members, in first-seen order; researchers without one are skipped."""
    groups: Dict[str, List[Researcher]] = {}
    for researcher in researchers:
        if researcher.department:
            groups.setdefault(researcher.department, []).append(researcher)
    return groups


async def score_departments(
    calculator: ActivityPointCalculator,
    researchers: Sequence[Researcher],
    department_concurrency: int = DEFAULT_DEPARTMENT_CONCURRENCY,
    member_concurrency: int = DEFAULT_CONCURRENCY,
) -> Dict[str, Dict[int, ScoreBreakdown]]:
    """
    Score researchers department by department.

    At most ``department_concurrency`` departments run at once, each with at
    most ``member_concurrency`` members in flight.
    """
    groups = group_by_department(researchers)
    codes = list(groups)

    async def score_department(code: str) -> Dict[int, ScoreBreakdown]:
        member_ids = [member.id for member in groups[code]]
        return await score_population(calculator, member_ids, member_concurrency)

    results = await pooled_map(codes, department_concurrency, score_department)
    return dict(zip(codes, results))
