"""
Dependencies - Scientific Productivity Scoring
app/core/dependencies.py

FastAPI dependency injection for repositories and the scoring service.
ACTIVITY_BACKEND selects Snowflake or the in-memory store.
"""

from functools import lru_cache

from app.config import settings
from app.repositories.activity_repository import (
    ActivityRepository,
    InMemoryActivityRepository,
    SnowflakeActivityRepository,
)
from app.repositories.researcher_repository import (
    InMemoryResearcherRepository,
    ResearcherRepository,
    SnowflakeResearcherRepository,
)
from app.services.cache import get_cache
from app.services.scoring_service import ScoringService


@lru_cache()
def get_activity_repository() -> ActivityRepository:
    """Get cached ActivityRepository instance."""
    if settings.ACTIVITY_BACKEND == "snowflake":
        return SnowflakeActivityRepository()
    return InMemoryActivityRepository()


@lru_cache()
def get_researcher_repository() -> ResearcherRepository:
    """Get cached ResearcherRepository instance."""
    if settings.ACTIVITY_BACKEND == "snowflake":
        return SnowflakeResearcherRepository()
    return InMemoryResearcherRepository()


@lru_cache()
def get_scoring_service() -> ScoringService:
    """Get cached ScoringService instance."""
    return ScoringService(
        activity_repository=get_activity_repository(),
        researcher_repository=get_researcher_repository(),
        cache=get_cache(),
    )
