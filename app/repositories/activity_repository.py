"""
Activity Repository - Scientific Productivity Scoring
app/repositories/activity_repository.py

Read-only access to one researcher's activity records, one category at a time.
The record tables are owned by the CRUD layer; scoring only reads snapshots.
"""

from __future__ import annotations

import asyncio
from collections import defaultdict
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from app.core.exceptions import CategoryFetchException, RepositoryException
from app.models.activity import ActivityRecord, PointsDateRange
from app.models.enumerations import ActivityCategory
from app.repositories.base import BaseRepository


class ActivityRepository:
    """Interface consumed by the point calculator."""

    async def fetch_category_records(
        self,
        user_id: int,
        category: ActivityCategory,
        date_range: Optional[PointsDateRange] = None,
    ) -> List[ActivityRecord]:
        """Return the researcher's records for one category, or raise."""
        raise NotImplementedError


# =============================================================================
# SNOWFLAKE
# =============================================================================

@dataclass(frozen=True)
class CategoryQuery:
    """How one category's table maps onto ActivityRecord."""
    table: str
    title_expr: str
    date_expr: Optional[str]
    payload_columns: Tuple[str, ...] = ()
    year_column: Optional[str] = None
    # Expression the date-range filter is applied to
    range_expr: Optional[str] = None


CATEGORY_QUERIES: Dict[ActivityCategory, CategoryQuery] = {
    ActivityCategory.RESEARCH: CategoryQuery(
        table="research",
        title_expr="COALESCE(research_title, title)",
        date_expr=None,
        payload_columns=("research_type", "author_type", "is_completed", "is_published",
                         "classifications", "scopus_quartile"),
        year_column="year",
        range_expr="COALESCE(created_at, updated_at, CURRENT_TIMESTAMP())",
    ),
    ActivityCategory.CONFERENCES: CategoryQuery(
        table="conferences",
        title_expr="conference_title",
        date_expr="date",
        payload_columns=("scope", "type", "is_committee_member"),
    ),
    ActivityCategory.POSITIONS: CategoryQuery(
        table="positions",
        title_expr="position_title",
        date_expr="start_date",
        range_expr="COALESCE(start_date, created_at, updated_at, CURRENT_TIMESTAMP())",
    ),
    ActivityCategory.PUBLICATIONS: CategoryQuery(
        table="publications",
        title_expr="COALESCE(publication_title, title)",
        date_expr="publication_date",
        payload_columns=("publication_type",),
        range_expr="COALESCE(publication_date, created_at, updated_at, CURRENT_TIMESTAMP())",
    ),
    ActivityCategory.COURSES: CategoryQuery(
        table="courses",
        title_expr="course_name",
        date_expr="date",
        payload_columns=("type",),
    ),
    ActivityCategory.SEMINARS: CategoryQuery(
        table="seminars",
        title_expr="seminar_title",
        date_expr="date",
        payload_columns=("type",),
    ),
    ActivityCategory.WORKSHOPS: CategoryQuery(
        table="workshops",
        title_expr="workshop_title",
        date_expr="date",
        payload_columns=("type",),
    ),
    ActivityCategory.ASSIGNMENTS: CategoryQuery(
        table="assignments",
        title_expr="COALESCE(subject, assignment_subject)",
        date_expr="assignment_date",
    ),
    ActivityCategory.VOLUNTEER_WORK: CategoryQuery(
        table="volunteer_work",
        title_expr="COALESCE(work_title, title)",
        date_expr="start_date",
        payload_columns=("type",),
        range_expr="COALESCE(start_date, created_at, updated_at, CURRENT_TIMESTAMP())",
    ),
    ActivityCategory.COMMITTEES: CategoryQuery(
        table="committees",
        title_expr="committee_name",
        date_expr="assignment_date",
        payload_columns=("assignment_type",),
    ),
    ActivityCategory.THANK_YOU_BOOKS: CategoryQuery(
        table="thank_you_books",
        title_expr="granting_organization",
        date_expr=None,
        payload_columns=("month",),
        year_column="year",
        range_expr="COALESCE(DATE_FROM_PARTS(year, 1, 1), created_at, updated_at, CURRENT_TIMESTAMP())",
    ),
    ActivityCategory.SUPERVISION: CategoryQuery(
        table="supervision",
        title_expr="student_name",
        date_expr="start_date",
        payload_columns=("degree_type",),
        range_expr="COALESCE(start_date, created_at, updated_at, CURRENT_TIMESTAMP())",
    ),
    ActivityCategory.SCIENTIFIC_EVALUATIONS: CategoryQuery(
        table="scientific_evaluations",
        title_expr="evaluation_title",
        date_expr="evaluation_date",
        payload_columns=("evaluation_type",),
        range_expr="COALESCE(evaluation_date, created_at, updated_at, CURRENT_TIMESTAMP())",
    ),
    ActivityCategory.JOURNAL_MEMBERSHIPS: CategoryQuery(
        table="journal_memberships",
        title_expr="journal_name",
        date_expr="start_date",
        payload_columns=("role",),
        range_expr="COALESCE(start_date, created_at, updated_at, CURRENT_TIMESTAMP())",
    ),
}


def build_category_sql(
    category: ActivityCategory,
    date_range: Optional[PointsDateRange] = None,
) -> Tuple[str, tuple]:
    """
    Build the SELECT for one category.

    Returns:
        (sql, range_params); the caller prepends the user id parameter.
    """
    query = CATEGORY_QUERIES[category]
    columns = ["id", "user_id", f"{query.title_expr} AS title"]
    if query.date_expr:
        columns.append(f"{query.date_expr} AS occurred_on")
    if query.year_column:
        columns.append(f"{query.year_column} AS year")
    columns.extend(query.payload_columns)

    sql = f"""
        SELECT {', '.join(columns)}
        FROM {query.table}
        WHERE user_id = %s
    """
    params: tuple = ()
    if date_range is not None:
        range_expr = query.range_expr or query.date_expr
        sql += f" AND {range_expr} >= %s AND {range_expr} < %s"
        params = (date_range.start_inclusive, date_range.end_exclusive)
    sql += " ORDER BY id"
    return sql, params


class SnowflakeActivityRepository(BaseRepository, ActivityRepository):
    """
    Activity records from Snowflake, one SELECT per category.

    The connector is blocking, so each query runs in a worker thread.
    """

    def _fetch_sync(
        self,
        user_id: int,
        category: ActivityCategory,
        date_range: Optional[PointsDateRange],
    ) -> List[ActivityRecord]:
        sql, range_params = build_category_sql(category, date_range)
        try:
            rows = self.execute_query(sql, (user_id, *range_params), fetch_all=True) or []
        except RepositoryException as e:
            raise CategoryFetchException(category.value, user_id, str(e)) from e
        return [self._row_to_record(category, self.row_to_dict(row)) for row in rows]

    def _row_to_record(self, category: ActivityCategory, row: Dict) -> ActivityRecord:
        query = CATEGORY_QUERIES[category]
        occurred_on = row.get("occurred_on")
        if isinstance(occurred_on, datetime):
            occurred_on = occurred_on.date()
        year = row.get("year")
        return ActivityRecord(
            category=category,
            user_id=int(row["user_id"]),
            id=row.get("id"),
            title=row.get("title"),
            occurred_on=occurred_on,
            year=int(year) if year else None,
            payload={column: row.get(column) for column in query.payload_columns},
        )

    async def fetch_category_records(
        self,
        user_id: int,
        category: ActivityCategory,
        date_range: Optional[PointsDateRange] = None,
    ) -> List[ActivityRecord]:
        return await asyncio.to_thread(self._fetch_sync, user_id, category, date_range)


# =============================================================================
# IN-MEMORY
# =============================================================================

def record_moment(record: ActivityRecord, now: datetime) -> datetime:
    """Point in time a record is filtered on: its date, else Jan 1 of its year, else now."""
    if record.occurred_on is not None:
        d = record.occurred_on
        return datetime(d.year, d.month, d.day, tzinfo=timezone.utc)
    if record.year:
        return datetime(int(record.year), 1, 1, tzinfo=timezone.utc)
    return now


class InMemoryActivityRepository(ActivityRepository):
    """
    Activity store held in process memory.

    Used for local development (ACTIVITY_BACKEND=memory) and tests.
    """

    def __init__(
        self,
        records: Iterable[ActivityRecord] = (),
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ):
        self._records: Dict[Tuple[int, ActivityCategory], List[ActivityRecord]] = defaultdict(list)
        self._clock = clock
        for record in records:
            self.add(record)

    def add(self, record: ActivityRecord) -> None:
        self._records[(record.user_id, record.category)].append(record)

    def extend(self, records: Iterable[ActivityRecord]) -> None:
        for record in records:
            self.add(record)

    async def fetch_category_records(
        self,
        user_id: int,
        category: ActivityCategory,
        date_range: Optional[PointsDateRange] = None,
    ) -> List[ActivityRecord]:
        records = list(self._records.get((user_id, category), []))
        if date_range is None:
            return records
        now = self._clock()
        return [r for r in records if date_range.contains(record_moment(r, now))]
