"""
Scoring Models - Scientific Productivity Scoring
app/models/scoring.py

Value objects produced by the scoring engine. All of them are derived per
request and never persisted.
"""

from pydantic import BaseModel, ConfigDict, Field, model_validator
from typing import Any, Dict, List, Optional, Union

from app.models.enumerations import ActivityCategory


class ScoreItem(BaseModel):
    """One scored unit derived from one activity record (or a synthetic bonus)."""

    model_config = ConfigDict(frozen=True)

    id: Optional[int] = Field(default=None, description="Source record id; None for bonus items")
    title: Optional[str] = None
    year: int
    points: int = Field(..., ge=0)
    details: Dict[str, Any] = Field(default_factory=dict)


class ScoreBreakdown(BaseModel):
    """
    Per-category scored items plus subtotals and total for one researcher.

    Invariants (checked on construction):
        summary[c] == sum(item.points for item in breakdown[c])
        total_points == sum(summary.values())
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    breakdown: Dict[ActivityCategory, List[ScoreItem]]
    summary: Dict[ActivityCategory, int]
    total_points: int = Field(..., ge=0, alias="totalPoints")

    @model_validator(mode="after")
    def validate_totals(self):
        categories = set(ActivityCategory)
        if set(self.breakdown) != categories or set(self.summary) != categories:
            raise ValueError("breakdown and summary must cover every activity category")
        for category, items in self.breakdown.items():
            subtotal = sum(item.points for item in items)
            if self.summary[category] != subtotal:
                raise ValueError(
                    f"summary[{category.value}]={self.summary[category]} "
                    f"does not match item sum {subtotal}"
                )
        if self.total_points != sum(self.summary.values()):
            raise ValueError("total_points must equal the sum of category subtotals")
        return self

    @classmethod
    def from_items(cls, breakdown: Dict[ActivityCategory, List[ScoreItem]]) -> "ScoreBreakdown":
        """Build a breakdown, deriving subtotals and total from the items."""
        full = {category: list(breakdown.get(category, [])) for category in ActivityCategory}
        summary = {category: sum(item.points for item in items) for category, items in full.items()}
        return cls(breakdown=full, summary=summary, total_points=sum(summary.values()))

    @classmethod
    def empty(cls) -> "ScoreBreakdown":
        """Zero-point breakdown used when a researcher could not be scored."""
        return cls.from_items({})

    def category_counts(self) -> Dict[ActivityCategory, int]:
        """Number of scored items per category (the similarity vector)."""
        return {category: len(items) for category, items in self.breakdown.items()}


class ScoredResearcher(BaseModel):
    """A population member with its total points, as handed to ranking."""

    id: int
    full_name: str
    department: Optional[str] = None
    academic_title: Optional[str] = None
    total_points: int = 0


class LeaderboardEntry(ScoredResearcher):
    rank: int


class RankResult(BaseModel):
    """
    Population and department-relative rank of one researcher.

    A rank of 0 means "not ranked" (target absent or no department).
    """

    target_id: int
    population_rank: int = 0
    population_size: int = 0
    subgroup_rank: int = 0
    subgroup_size: int = 0
    target_points: int = 0
    top_n: List[LeaderboardEntry] = Field(default_factory=list)
    subgroup_top_n: List[LeaderboardEntry] = Field(default_factory=list)


class SimilarityResult(BaseModel):
    peer_id: int
    similarity_percent: int = Field(..., ge=0, le=100)


class SimilarPeer(BaseModel):
    id: int
    full_name: str
    department: Optional[str] = None
    academic_title: Optional[str] = None
    similarity_percent: int


class DepartmentLeaderboardEntry(LeaderboardEntry):
    summary: Dict[ActivityCategory, int] = Field(default_factory=dict)


class RankingReport(BaseModel):
    """Payload of GET /researchers/{id}/rank."""

    user_id: int
    department: Optional[str] = None
    population_rank: int
    population_size: int
    subgroup_rank: int
    subgroup_size: int
    target_points: int
    top3: List[LeaderboardEntry]
    top10: List[LeaderboardEntry]
    subgroup_top5: List[DepartmentLeaderboardEntry]
    similar_peers: List[SimilarPeer]


class DepartmentPoints(BaseModel):
    code: str
    researchers_count: int
    total_points: int
    avg_points: float


class ResearcherActivityStats(BaseModel):
    """Per-researcher activity counts used by the criteria leaderboards."""

    id: int
    full_name: str
    department: Optional[str] = None
    academic_title: Optional[str] = None
    academic_title_rank: int = 0
    published_research: int = 0
    global_research: int = 0
    conferences_count: int = 0
    seminars_and_courses_count: int = 0
    committees_count: int = 0
    volunteer_work_count: int = 0
    thank_you_books_count: int = 0


class CriteriaEntry(BaseModel):
    rank: int
    id: int
    full_name: str
    department: Optional[str] = None
    academic_title: Optional[str] = None
    value: Union[int, str]


class AveragePoints(BaseModel):
    researchers_count: int
    total_points: int
    avg_points: float
