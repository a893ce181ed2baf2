"""
Ranking Aggregator
app/scoring/ranking.py

Orders a scored population and locates one researcher in it, both overall
and within their department.

Order: total_points descending, then name by collation_key(). Python's sort
is stable, so full ties keep input order.
"""

from __future__ import annotations

import unicodedata
from typing import List, Optional, Sequence

from app.models.scoring import LeaderboardEntry, RankResult, ScoredResearcher

# Arabic tatweel is stripped along with the combining marks.
_TATWEEL = "ـ"


def collation_key(name: Optional[str]) -> str:
    """
    Locale-aware comparison key for researcher names.

    NFKD decomposition with combining marks removed covers Latin accents and
    Arabic harakat (both are category Mn); casefold() handles case.
    """
    decomposed = unicodedata.normalize("NFKD", name or "")
    stripped = "".join(
        ch for ch in decomposed
        if not unicodedata.combining(ch) and ch != _TATWEEL
    )
    return stripped.casefold().strip()


def sort_key(member: ScoredResearcher):
    return (-member.total_points, collation_key(member.full_name))


def sort_population(population: Sequence[ScoredResearcher]) -> List[ScoredResearcher]:
    """Return a new list in ranking order."""
    return sorted(population, key=sort_key)


def leaderboard(ordered: Sequence[ScoredResearcher], n: int) -> List[LeaderboardEntry]:
    """First ``n`` members of an already ordered sequence, with 1-based ranks."""
    return [
        LeaderboardEntry(rank=position, **member.model_dump())
        for position, member in enumerate(ordered[:max(n, 0)], start=1)
    ]


def top_n(population: Sequence[ScoredResearcher], n: int) -> List[LeaderboardEntry]:
    return leaderboard(sort_population(population), n)


def _position(ordered: Sequence[ScoredResearcher], target_id: int) -> int:
    for index, member in enumerate(ordered, start=1):
        if member.id == target_id:
            return index
    return 0


def rank(
    population: Sequence[ScoredResearcher],
    target_id: int,
    top_n: int = 10,
    subgroup_top_n: int = 5,
) -> RankResult:
    """
    Rank ``target_id`` within ``population`` and within its department.

    A target that is absent, or has no department, gets rank 0 for the
    corresponding view. An empty population yields an all-zero result.
    """
    ordered = sort_population(population)
    target = next((m for m in ordered if m.id == target_id), None)

    department = target.department if target else None
    if department:
        subgroup = [m for m in ordered if m.department == department]
    else:
        subgroup = []

    return RankResult(
        target_id=target_id,
        population_rank=_position(ordered, target_id),
        population_size=len(ordered),
        subgroup_rank=_position(subgroup, target_id),
        subgroup_size=len(subgroup),
        target_points=target.total_points if target else 0,
        top_n=leaderboard(ordered, top_n),
        subgroup_top_n=leaderboard(subgroup, subgroup_top_n),
    )
