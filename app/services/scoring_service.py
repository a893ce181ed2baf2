"""
Scoring Service - Scientific Productivity Scoring
app/services/scoring_service.py

Orchestrates the scoring engine for the API:
  - single researcher breakdowns (optionally cached in Redis)
  - rank reports (population, department, leaderboards, similar peers)
  - top researchers, top departments, average points
  - criteria leaderboards over activity counts
"""

import logging
from typing import Dict, List, Optional, Tuple

import redis

from app.config import Settings, settings as default_settings
from app.core.exceptions import EntityNotFoundException
from app.models.activity import ActivityRecord, PointsDateRange
from app.models.enumerations import ActivityCategory, RankingCriterion
from app.models.researcher import Researcher
from app.models.scoring import (
    AveragePoints,
    CriteriaEntry,
    DepartmentLeaderboardEntry,
    DepartmentPoints,
    LeaderboardEntry,
    RankingReport,
    ScoreBreakdown,
    ScoredResearcher,
    SimilarPeer,
)
from app.repositories.activity_repository import ActivityRepository
from app.repositories.researcher_repository import ResearcherRepository
from app.scoring.criteria import CRITERIA_CATEGORIES, build_activity_stats, criteria_rankings
from app.scoring.points_calculator import ActivityPointCalculator, fetch_category
from app.scoring.pool import pooled_map
from app.scoring.population import score_departments, score_population
from app.scoring.ranking import collation_key, rank, top_n
from app.scoring.similarity import find_similar
from app.scoring.utils import average
from app.services.redis_cache import RedisCache

logger = logging.getLogger(__name__)


class CachedPointCalculator(ActivityPointCalculator):
    """
    ActivityPointCalculator that reads and writes all-time breakdowns through
    Redis. Date-ranged scores are never cached, and neither is a breakdown
    with a failed category. Redis errors fall through to the store.
    """

    def __init__(self, repository: ActivityRepository, cache: Optional[RedisCache], ttl_seconds: int, **kwargs):
        super().__init__(repository, **kwargs)
        self.cache = cache
        self.ttl_seconds = ttl_seconds

    async def compute_score(
        self,
        user_id: int,
        date_range: Optional[PointsDateRange] = None,
    ) -> ScoreBreakdown:
        use_cache = self.cache is not None and date_range is None
        if use_cache:
            try:
                cached = self.cache.get_score(user_id)
            except (redis.RedisError, ValueError) as e:
                logger.warning(f"Score cache read failed for user {user_id}: {e}")
                cached = None
            if cached is not None:
                logger.debug(f"Score cache hit for user {user_id}")
                return cached

        breakdown, failed = await self.compute_breakdown(user_id, date_range)

        if use_cache and not failed:
            try:
                self.cache.set_score(user_id, breakdown, self.ttl_seconds)
            except redis.RedisError as e:
                logger.warning(f"Score cache write failed for user {user_id}: {e}")
        return breakdown


def _scored(researcher: Researcher, breakdown: ScoreBreakdown) -> ScoredResearcher:
    return ScoredResearcher(
        id=researcher.id,
        full_name=researcher.full_name,
        department=researcher.department,
        academic_title=researcher.academic_title,
        total_points=breakdown.total_points,
    )


class ScoringService:
    """Entry point used by the scoring router."""

    def __init__(
        self,
        activity_repository: ActivityRepository,
        researcher_repository: ResearcherRepository,
        cache: Optional[RedisCache] = None,
        config: Settings = default_settings,
        calculator: Optional[ActivityPointCalculator] = None,
    ):
        self.activity_repository = activity_repository
        self.researchers = researcher_repository
        self.config = config
        self.calculator = calculator or CachedPointCalculator(
            activity_repository, cache, config.CACHE_TTL_SCORES
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    async def _require_researcher(self, user_id: int) -> Researcher:
        researcher = await self.researchers.get_by_id(user_id)
        if researcher is None:
            raise EntityNotFoundException("Researcher", user_id)
        return researcher

    async def _score_population(self) -> Tuple[List[Researcher], Dict[int, ScoreBreakdown]]:
        population = await self.researchers.list_eligible_researchers()
        breakdowns = await score_population(
            self.calculator,
            [r.id for r in population],
            self.config.SCORING_CONCURRENCY,
        )
        return population, breakdowns

    # ------------------------------------------------------------------
    # Single researcher
    # ------------------------------------------------------------------

    async def get_score(
        self,
        user_id: int,
        date_range: Optional[PointsDateRange] = None,
    ) -> ScoreBreakdown:
        """Breakdown for one researcher; raises EntityNotFoundException if unknown."""
        await self._require_researcher(user_id)
        return await self.calculator.compute_score(user_id, date_range)

    async def get_rank_report(self, user_id: int) -> RankingReport:
        """
        Rank one researcher against the eligible population.

        The target is ranked against eligible researchers only; a known but
        ineligible researcher gets rank 0 and still receives similar peers.
        """
        target = await self._require_researcher(user_id)
        population, breakdowns = await self._score_population()

        target_breakdown = breakdowns.get(user_id)
        if target_breakdown is None:
            target_breakdown = await self.calculator.compute_score(user_id)

        scored = [_scored(r, breakdowns[r.id]) for r in population]
        result = rank(
            scored,
            user_id,
            top_n=self.config.TOP_N_LONG,
            subgroup_top_n=self.config.SUBGROUP_TOP_N,
        )

        subgroup_top = [
            DepartmentLeaderboardEntry(
                **entry.model_dump(),
                summary=breakdowns[entry.id].summary,
            )
            for entry in result.subgroup_top_n
        ]

        by_id = {r.id: r for r in population}
        matches = find_similar(
            user_id,
            target_breakdown.category_counts(),
            [(r.id, breakdowns[r.id].category_counts()) for r in population],
            min_similarity_percent=self.config.SIMILARITY_MIN_PERCENT,
            top_k=self.config.SIMILARITY_TOP_K,
        )
        similar_peers = [
            SimilarPeer(
                id=match.peer_id,
                full_name=by_id[match.peer_id].full_name,
                department=by_id[match.peer_id].department,
                academic_title=by_id[match.peer_id].academic_title,
                similarity_percent=match.similarity_percent,
            )
            for match in matches
        ]

        logger.info(
            f"Ranked user {user_id}: {result.population_rank}/{result.population_size} overall, "
            f"{result.subgroup_rank}/{result.subgroup_size} in department"
        )
        return RankingReport(
            user_id=user_id,
            department=target.department,
            population_rank=result.population_rank,
            population_size=result.population_size,
            subgroup_rank=result.subgroup_rank,
            subgroup_size=result.subgroup_size,
            target_points=target_breakdown.total_points,
            top3=result.top_n[:self.config.TOP_N_SHORT],
            top10=result.top_n,
            subgroup_top5=subgroup_top,
            similar_peers=similar_peers,
        )

    # ------------------------------------------------------------------
    # Leaderboards and statistics
    # ------------------------------------------------------------------

    async def top_researchers(self, limit: int = 5) -> List[LeaderboardEntry]:
        if limit < 1:
            raise ValueError(f"limit must be >= 1, got {limit}")
        population, breakdowns = await self._score_population()
        return top_n([_scored(r, breakdowns[r.id]) for r in population], limit)

    async def top_departments(self, limit: int = 5) -> List[DepartmentPoints]:
        """Departments by total points, then researcher count, then name."""
        if limit < 1:
            raise ValueError(f"limit must be >= 1, got {limit}")
        population = await self.researchers.list_eligible_researchers()
        per_department = await score_departments(
            self.calculator,
            population,
            department_concurrency=self.config.DEPARTMENT_CONCURRENCY,
            member_concurrency=self.config.SCORING_CONCURRENCY,
        )

        departments = []
        for code, breakdowns in per_department.items():
            if not breakdowns:
                continue
            total = sum(b.total_points for b in breakdowns.values())
            departments.append(DepartmentPoints(
                code=code,
                researchers_count=len(breakdowns),
                total_points=total,
                avg_points=average(total, len(breakdowns)),
            ))
        departments.sort(key=lambda d: (-d.total_points, -d.researchers_count, collation_key(d.code)))
        return departments[:limit]

    async def average_points(self) -> AveragePoints:
        population, breakdowns = await self._score_population()
        total = sum(breakdowns[r.id].total_points for r in population)
        return AveragePoints(
            researchers_count=len(population),
            total_points=total,
            avg_points=average(total, len(population)),
        )

    async def criteria_rankings(self, limit: int = 10) -> Dict[RankingCriterion, List[CriteriaEntry]]:
        if limit < 1:
            raise ValueError(f"limit must be >= 1, got {limit}")
        population = await self.researchers.list_eligible_researchers()

        async def collect(researcher: Researcher):
            records: Dict[ActivityCategory, List[ActivityRecord]] = {}
            for category in CRITERIA_CATEGORIES:
                fetch = await fetch_category(self.activity_repository, researcher.id, category)
                if not fetch.ok:
                    logger.warning(
                        f"Criteria fetch failed for user {researcher.id} "
                        f"({category.value}): {fetch.error}"
                    )
                records[category] = fetch.records
            return build_activity_stats(researcher, records)

        stats = await pooled_map(population, self.config.SCORING_CONCURRENCY, collect)
        return criteria_rankings(stats, limit)
