"""
Activity Point Calculator
app/scoring/points_calculator.py

Computes one researcher's ScoreBreakdown from their activity records.

Steps:
  1. Fetch all 14 categories concurrently, each through fetch_category().
  2. Score every record with its category rule (app/scoring/rules.py).
  3. For categories with an annual bonus, group items by year and append
     one synthetic bonus item after each year's items.
  4. Build the breakdown (subtotals and total derived from the items).

The calculator only reads; identical records and clock give identical output.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional, Tuple

import structlog

from app.models.activity import ActivityRecord, PointsDateRange
from app.models.enumerations import ActivityCategory
from app.models.scoring import ScoreBreakdown, ScoreItem
from app.repositories.activity_repository import ActivityRepository
from app.scoring.rules import (
    ANNUAL_BONUS_RULES,
    CATEGORY_RULES,
    annual_bonus_title,
)

logger = structlog.get_logger(__name__)


@dataclass
class CategoryFetch:
    """Outcome of fetching one category: records, or the error that prevented it."""
    category: ActivityCategory
    records: List[ActivityRecord] = field(default_factory=list)
    error: Optional[BaseException] = None

    @property
    def ok(self) -> bool:
        return self.error is None


async def fetch_category(
    repository: ActivityRepository,
    user_id: int,
    category: ActivityCategory,
    date_range: Optional[PointsDateRange] = None,
) -> CategoryFetch:
    """Fetch one category and capture any failure as a value."""
    try:
        records = await repository.fetch_category_records(user_id, category, date_range)
    except Exception as e:
        return CategoryFetch(category=category, error=e)
    return CategoryFetch(category=category, records=list(records))


def apply_annual_bonus(
    category: ActivityCategory,
    items: List[ScoreItem],
    bonus_rule: Callable[[int], int],
) -> List[ScoreItem]:
    """
    Regroup items by year (ascending) and append each year's bonus item.

    Years whose bonus is 0 get no synthetic item.
    """
    by_year: Dict[int, List[ScoreItem]] = {}
    for item in items:
        by_year.setdefault(item.year, []).append(item)

    result: List[ScoreItem] = []
    for year in sorted(by_year):
        year_items = by_year[year]
        result.extend(year_items)
        count = len(year_items)
        bonus = bonus_rule(count)
        if bonus > 0:
            result.append(ScoreItem(
                id=None,
                title=annual_bonus_title(category, count),
                year=year,
                points=bonus,
                details={"type": "annual_bonus", "count": count},
            ))
    return result


class ActivityPointCalculator:
    """Calculate a researcher's scientific points."""

    def __init__(
        self,
        repository: ActivityRepository,
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ):
        self.repository = repository
        self.clock = clock

    def score_category(
        self,
        category: ActivityCategory,
        records: List[ActivityRecord],
        current_year: int,
    ) -> List[ScoreItem]:
        """Apply the category rule to each record, then any annual bonus."""
        rule = CATEGORY_RULES[category]
        items = [rule(record, current_year) for record in records]
        bonus_rule = ANNUAL_BONUS_RULES.get(category)
        if bonus_rule is not None:
            items = apply_annual_bonus(category, items, bonus_rule)
        return items

    async def compute_score(
        self,
        user_id: int,
        date_range: Optional[PointsDateRange] = None,
    ) -> ScoreBreakdown:
        """
        Compute the full breakdown for one researcher.

        Args:
            user_id: Researcher id
            date_range: Optional [start, end) window forwarded to the fetchers

        Returns:
            ScoreBreakdown covering every category (failed categories are empty)
        """
        breakdown, _ = await self.compute_breakdown(user_id, date_range)
        return breakdown

    async def compute_breakdown(
        self,
        user_id: int,
        date_range: Optional[PointsDateRange] = None,
    ) -> Tuple[ScoreBreakdown, List[ActivityCategory]]:
        """compute_score plus the categories whose fetch failed."""
        current_year = self.clock().year
        fetches = await asyncio.gather(*(
            fetch_category(self.repository, user_id, category, date_range)
            for category in ActivityCategory
        ))

        breakdown: Dict[ActivityCategory, List[ScoreItem]] = {}
        failed: List[ActivityCategory] = []
        for fetch in fetches:
            if not fetch.ok:
                # A failed category scores as empty; the rest of the breakdown stands.
                logger.warning(
                    "category_fetch_failed",
                    user_id=user_id,
                    category=fetch.category.value,
                    error=str(fetch.error),
                )
                failed.append(fetch.category)
                breakdown[fetch.category] = []
                continue
            breakdown[fetch.category] = self.score_category(
                fetch.category, fetch.records, current_year
            )

        result = ScoreBreakdown.from_items(breakdown)
        logger.info(
            "score_computed",
            user_id=user_id,
            total_points=result.total_points,
            failed_categories=[category.value for category in failed],
            date_range=(
                [date_range.start_inclusive.isoformat(), date_range.end_exclusive.isoformat()]
                if date_range else None
            ),
        )
        return result, failed

