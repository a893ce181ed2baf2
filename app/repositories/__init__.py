"""
Repositories Package - Scientific Productivity Scoring
app/repositories/__init__.py

Read-only data access for activity records and the researcher directory.
"""

from app.repositories.base import BaseRepository
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

__all__ = [
    "BaseRepository",
    "ActivityRepository",
    "InMemoryActivityRepository",
    "SnowflakeActivityRepository",
    "ResearcherRepository",
    "InMemoryResearcherRepository",
    "SnowflakeResearcherRepository",
]
