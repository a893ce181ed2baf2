# tests/conftest.py

"""
Pytest Fixtures - Shared test configurations and data for the scoring engine

DIRECTORY REFERENCE (sample_directory):
- 1 Alice Haddad   PHYS  professor            eligible
- 2 Bilal Karim    PHYS  lecturer             eligible
- 3 Carla Mendes   CHEM  assistant_professor  eligible
- 4 Dana Yousef    (no department)            eligible
- 5 Admin User     role=admin                 not eligible
- 6 Old Account    is_active=False            not eligible
"""

from datetime import date, datetime, timezone
from typing import Iterable, List, Optional

import pytest
from fastapi.testclient import TestClient

from app.core.dependencies import get_scoring_service
from app.main import app
from app.models.activity import ActivityRecord, PointsDateRange
from app.models.enumerations import ActivityCategory
from app.models.researcher import DirectoryEntry
from app.repositories.activity_repository import InMemoryActivityRepository
from app.repositories.researcher_repository import InMemoryResearcherRepository
from app.scoring.points_calculator import ActivityPointCalculator
from app.services.scoring_service import ScoringService

FIXED_NOW = datetime(2025, 6, 1, 12, 0, tzinfo=timezone.utc)


def fixed_clock() -> datetime:
    return FIXED_NOW


def make_record(
    category: ActivityCategory,
    user_id: int = 1,
    record_id: Optional[int] = None,
    title: Optional[str] = None,
    occurred_on: Optional[date] = None,
    year: Optional[int] = None,
    **payload,
) -> ActivityRecord:
    """Build an ActivityRecord; extra keyword arguments become the payload."""
    return ActivityRecord(
        category=category,
        user_id=user_id,
        id=record_id,
        title=title,
        occurred_on=occurred_on,
        year=year,
        payload=payload,
    )


class FailingActivityRepository(InMemoryActivityRepository):
    """In-memory store whose reads fail for the given categories (or users)."""

    def __init__(
        self,
        records: Iterable[ActivityRecord] = (),
        failing_categories: Iterable[ActivityCategory] = (),
        failing_users: Iterable[int] = (),
    ):
        super().__init__(records, clock=fixed_clock)
        self.failing_categories = set(failing_categories)
        self.failing_users = set(failing_users)

    async def fetch_category_records(self, user_id, category, date_range=None):
        if category in self.failing_categories or user_id in self.failing_users:
            raise ConnectionError(f"store unavailable for {category.value}")
        return await super().fetch_category_records(user_id, category, date_range)


class ExplodingCalculator(ActivityPointCalculator):
    """Calculator that fails outright for selected users."""

    def __init__(self, repository, failing_users: Iterable[int]):
        super().__init__(repository, clock=fixed_clock)
        self.failing_users = set(failing_users)

    async def compute_score(self, user_id, date_range=None):
        if user_id in self.failing_users:
            raise RuntimeError(f"cannot score {user_id}")
        return await super().compute_score(user_id, date_range)


# =============================================================================
# DIRECTORY FIXTURES
# =============================================================================

@pytest.fixture
def directory_entries() -> List[DirectoryEntry]:
    return [
        DirectoryEntry(id=1, full_name="Alice Haddad", department="PHYS", academic_title="professor",
                       username="alice", email="alice@uni.edu", role="teacher"),
        DirectoryEntry(id=2, full_name="Bilal Karim", department="PHYS", academic_title="lecturer",
                       username="bilal", email="bilal@uni.edu", role="researcher"),
        DirectoryEntry(id=3, full_name="Carla Mendes", department="CHEM", academic_title="assistant_professor",
                       username="carla", email="carla@uni.edu", role=None),
        DirectoryEntry(id=4, full_name="Dana Yousef", department=None, academic_title="مدرس",
                       username="dana", email="dana@uni.edu", role="Teaching Staff"),
        DirectoryEntry(id=5, full_name="Admin User", department="ADMIN",
                       username="admin", email="admin@uni.edu", role="admin"),
        DirectoryEntry(id=6, full_name="Old Account", department="PHYS",
                       username="old", email="old@uni.edu", role="teacher", is_active=False),
    ]


@pytest.fixture
def researcher_repository(directory_entries) -> InMemoryResearcherRepository:
    return InMemoryResearcherRepository(directory_entries)


# =============================================================================
# ACTIVITY FIXTURES
# =============================================================================

@pytest.fixture
def activity_records() -> List[ActivityRecord]:
    """
    Points per researcher with the fixed clock (2025):
      Alice: research Q1 global (30) + research bonus (2) + global committee conference (12) = 44
      Bilal: two lecturer courses in 2024 (16) + course bonus (1) + committee chair (7)        = 24
      Carla: local conference participant (5) + ministry thank-you letter (6)                  = 11
      Dana:  nothing                                                                           = 0
    """
    C = ActivityCategory
    return [
        make_record(C.RESEARCH, 1, 101, "Quantum dots", year=2024, is_completed=True,
                    is_published=True, classifications=["global"], scopus_quartile="Q1"),
        make_record(C.CONFERENCES, 1, 102, "ICPS", occurred_on=date(2024, 5, 2), scope="global",
                    type="participant", is_committee_member=True),
        make_record(C.COURSES, 2, 201, "Optics I", occurred_on=date(2024, 2, 1), type="lecturer"),
        make_record(C.COURSES, 2, 202, "Optics II", occurred_on=date(2024, 9, 1), type="lecturer"),
        make_record(C.COMMITTEES, 2, 203, "Exams committee", occurred_on=date(2023, 3, 1),
                    assignment_type="رئيس اللجنة"),
        make_record(C.CONFERENCES, 3, 301, "Chem Days", occurred_on=date(2025, 1, 10), scope="local",
                    type="باحث", is_committee_member=False),
        make_record(C.THANK_YOU_BOOKS, 3, 302, "وزارة التعليم العالي", year=2023, month=4),
    ]


@pytest.fixture
def activity_repository(activity_records) -> InMemoryActivityRepository:
    return InMemoryActivityRepository(activity_records, clock=fixed_clock)


@pytest.fixture
def calculator(activity_repository) -> ActivityPointCalculator:
    return ActivityPointCalculator(activity_repository, clock=fixed_clock)


@pytest.fixture
def scoring_service(activity_repository, researcher_repository, calculator) -> ScoringService:
    return ScoringService(
        activity_repository=activity_repository,
        researcher_repository=researcher_repository,
        calculator=calculator,
    )


@pytest.fixture
def year_2024() -> PointsDateRange:
    return PointsDateRange.for_dates(date(2024, 1, 1), date(2025, 1, 1))


# =============================================================================
# FASTAPI TEST CLIENT FIXTURE
# =============================================================================

@pytest.fixture
def client(scoring_service):
    """TestClient with the scoring service bound to the in-memory fixtures."""
    app.dependency_overrides[get_scoring_service] = lambda: scoring_service
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
