"""
Researcher Repository - Scientific Productivity Scoring
app/repositories/researcher_repository.py

User-directory lookups. "Eligible" researchers are the ranking population:
active teaching staff or researchers with a name and an email, excluding
administrators and test accounts. The policy belongs to the directory; it is
reproduced here as a SQL clause and as a predicate for the in-memory store.
"""

from __future__ import annotations

import asyncio
from typing import Iterable, List, Optional

from app.models.researcher import DirectoryEntry, Researcher
from app.repositories.base import BaseRepository

RESEARCHER_ROLES = (
    "teacher",
    "researcher",
    "teaching staff",
    "teaching_staff",
    "teaching-staff",
)
TEST_USERNAME = "test_user"
TEST_DEPARTMENT = "Test Department"

ELIGIBLE_RESEARCHERS_WHERE = f"""
    u.is_active = TRUE
    AND (
        NULLIF(TRIM(u.role), '') IS NULL
        OR LOWER(TRIM(u.role)) IN ({", ".join(f"'{role}'" for role in RESEARCHER_ROLES)})
    )
    AND (u.role IS NULL OR LOWER(TRIM(u.role)) <> 'admin')
    AND COALESCE(u.username, '') <> '{TEST_USERNAME}'
    AND (u.department IS NULL OR u.department <> '{TEST_DEPARTMENT}')
    AND u.full_name IS NOT NULL
    AND TRIM(u.full_name) <> ''
    AND u.email IS NOT NULL
    AND TRIM(u.email) <> ''
"""


def is_eligible_researcher(entry: DirectoryEntry) -> bool:
    """Python form of ELIGIBLE_RESEARCHERS_WHERE."""
    role = (entry.role or "").strip().lower()
    if not entry.is_active:
        return False
    if role and role not in RESEARCHER_ROLES:
        return False
    if entry.username == TEST_USERNAME:
        return False
    if entry.department == TEST_DEPARTMENT:
        return False
    if not (entry.full_name or "").strip():
        return False
    if not (entry.email or "").strip():
        return False
    return True


def _to_researcher(entry: DirectoryEntry) -> Researcher:
    return Researcher(
        id=entry.id,
        full_name=(entry.full_name or "").strip() or f"User {entry.id}",
        department=entry.department,
        academic_title=entry.academic_title,
    )


class ResearcherRepository:
    """Interface consumed by the scoring service."""

    async def list_eligible_researchers(self) -> List[Researcher]:
        raise NotImplementedError

    async def get_by_id(self, user_id: int) -> Optional[Researcher]:
        raise NotImplementedError


class SnowflakeResearcherRepository(BaseRepository, ResearcherRepository):
    """Researcher directory backed by the Snowflake users table."""

    def _row_to_researcher(self, row) -> Researcher:
        data = self.row_to_dict(row)
        return _to_researcher(DirectoryEntry(
            id=int(data["id"]),
            full_name=data.get("full_name"),
            department=data.get("department"),
            academic_title=data.get("academic_title"),
        ))

    def _list_sync(self) -> List[Researcher]:
        sql = f"""
            SELECT u.id, u.full_name, u.department, u.academic_title
            FROM users u
            WHERE {ELIGIBLE_RESEARCHERS_WHERE}
            ORDER BY u.id ASC
        """
        rows = self.execute_query(sql, fetch_all=True) or []
        return [self._row_to_researcher(row) for row in rows]

    def _get_sync(self, user_id: int) -> Optional[Researcher]:
        sql = """
            SELECT id, full_name, department, academic_title
            FROM users
            WHERE id = %s
        """
        row = self.execute_query(sql, (user_id,), fetch_one=True)
        return self._row_to_researcher(row) if row else None

    async def list_eligible_researchers(self) -> List[Researcher]:
        return await asyncio.to_thread(self._list_sync)

    async def get_by_id(self, user_id: int) -> Optional[Researcher]:
        return await asyncio.to_thread(self._get_sync, user_id)


class InMemoryResearcherRepository(ResearcherRepository):
    """Researcher directory held in process memory (development and tests)."""

    def __init__(self, entries: Iterable[DirectoryEntry] = ()):
        self._entries = {entry.id: entry for entry in entries}

    def add(self, entry: DirectoryEntry) -> None:
        self._entries[entry.id] = entry

    async def list_eligible_researchers(self) -> List[Researcher]:
        return [
            _to_researcher(entry)
            for _, entry in sorted(self._entries.items())
            if is_eligible_researcher(entry)
        ]

    async def get_by_id(self, user_id: int) -> Optional[Researcher]:
        entry = self._entries.get(user_id)
        return _to_researcher(entry) if entry else None
