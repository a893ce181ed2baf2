"""
Criteria Leaderboards
app/scoring/criteria.py

Per-criterion leaderboards over raw activity counts (not points): academic
title seniority, published and global research, conferences, seminars plus
courses, committees, volunteer work and thank-you letters.
"""

from __future__ import annotations

from typing import Callable, Dict, List, Mapping, Sequence

from app.config import get_academic_title_rank
from app.models.activity import ActivityRecord
from app.models.enumerations import ActivityCategory, RankingCriterion
from app.models.researcher import Researcher
from app.models.scoring import CriteriaEntry, ResearcherActivityStats

GLOBAL_CLASSIFICATIONS = ("global", "عالمية", "عالمي")

# Categories whose records the criteria need.
CRITERIA_CATEGORIES = (
    ActivityCategory.RESEARCH,
    ActivityCategory.CONFERENCES,
    ActivityCategory.SEMINARS,
    ActivityCategory.COURSES,
    ActivityCategory.COMMITTEES,
    ActivityCategory.VOLUNTEER_WORK,
    ActivityCategory.THANK_YOU_BOOKS,
)


def _classifications(record: ActivityRecord) -> List[str]:
    value = record.get("classifications")
    if not value:
        return []
    if isinstance(value, str):
        return [value]
    return [str(item) for item in value]


def is_global_research(record: ActivityRecord) -> bool:
    # Snowflake VARIANT columns may arrive as a JSON string, so match substrings.
    return any(
        tag in label
        for label in _classifications(record)
        for tag in GLOBAL_CLASSIFICATIONS
    )


def build_activity_stats(
    researcher: Researcher,
    records: Mapping[ActivityCategory, Sequence[ActivityRecord]],
) -> ResearcherActivityStats:
    """Count one researcher's activities for every criterion."""

    def count(category: ActivityCategory) -> int:
        return len(records.get(category, ()))

    research = records.get(ActivityCategory.RESEARCH, ())
    return ResearcherActivityStats(
        id=researcher.id,
        full_name=researcher.full_name,
        department=researcher.department,
        academic_title=researcher.academic_title,
        academic_title_rank=get_academic_title_rank(researcher.academic_title),
        published_research=sum(1 for r in research if r.get("is_published")),
        global_research=sum(1 for r in research if is_global_research(r)),
        conferences_count=count(ActivityCategory.CONFERENCES),
        seminars_and_courses_count=count(ActivityCategory.SEMINARS) + count(ActivityCategory.COURSES),
        committees_count=count(ActivityCategory.COMMITTEES),
        volunteer_work_count=count(ActivityCategory.VOLUNTEER_WORK),
        thank_you_books_count=count(ActivityCategory.THANK_YOU_BOOKS),
    )


CRITERION_FIELDS: Dict[RankingCriterion, str] = {
    RankingCriterion.ACADEMIC_TITLE: "academic_title_rank",
    RankingCriterion.PUBLISHED_RESEARCH: "published_research",
    RankingCriterion.GLOBAL_RESEARCH: "global_research",
    RankingCriterion.CONFERENCES: "conferences_count",
    RankingCriterion.SEMINARS_AND_COURSES: "seminars_and_courses_count",
    RankingCriterion.COMMITTEES: "committees_count",
    RankingCriterion.VOLUNTEER_WORK: "volunteer_work_count",
    RankingCriterion.THANK_YOU_BOOKS: "thank_you_books_count",
}


def _entry(rank: int, stats: ResearcherActivityStats, value) -> CriteriaEntry:
    return CriteriaEntry(
        rank=rank,
        id=stats.id,
        full_name=stats.full_name,
        department=stats.department,
        academic_title=stats.academic_title,
        value=value,
    )


def rank_by(
    stats: Sequence[ResearcherActivityStats],
    criterion: RankingCriterion,
    limit: int,
) -> List[CriteriaEntry]:
    """
    Leaderboard for one criterion, highest first; ties keep input order.

    The academic-title board lists only ranked titles and reports the title
    itself as the value.
    """
    field_name = CRITERION_FIELDS[criterion]
    key: Callable[[ResearcherActivityStats], int] = lambda s: getattr(s, field_name)

    pool = list(stats)
    if criterion == RankingCriterion.ACADEMIC_TITLE:
        pool = [s for s in pool if s.academic_title_rank > 0]
    ordered = sorted(pool, key=lambda s: -key(s))[:max(limit, 0)]

    entries = []
    for position, s in enumerate(ordered, start=1):
        value = s.academic_title if criterion == RankingCriterion.ACADEMIC_TITLE else key(s)
        entries.append(_entry(position, s, value))
    return entries


def criteria_rankings(
    stats: Sequence[ResearcherActivityStats],
    limit: int = 10,
) -> Dict[RankingCriterion, List[CriteriaEntry]]:
    """All criterion leaderboards, keyed by criterion."""
    if limit < 1:
        raise ValueError(f"limit must be >= 1, got {limit}")
    return {criterion: rank_by(stats, criterion, limit) for criterion in RankingCriterion}
