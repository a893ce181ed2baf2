# tests/test_models.py

"""
Model Validation Tests - Tests for Pydantic model validations and settings
"""

import pytest
from datetime import date, datetime, timezone
from pydantic import ValidationError

from app.config import Settings, get_academic_title_rank
from app.models.activity import PointsDateRange
from app.models.enumerations import ActivityCategory, RankingCriterion
from app.models.researcher import DirectoryEntry, Researcher
from app.models.scoring import ScoreBreakdown, ScoreItem, SimilarityResult



# ENUMERATION TESTS


class TestActivityCategoryEnum:
    """Tests for ActivityCategory enumeration."""

    def test_category_count(self):
        """Test that exactly 14 categories exist."""
        assert len(ActivityCategory) == 14

    def test_wire_names(self):
        """Test the camelCase names used in breakdown JSON."""
        assert ActivityCategory.VOLUNTEER_WORK.value == "volunteerWork"
        assert ActivityCategory.THANK_YOU_BOOKS.value == "thankYouBooks"
        assert ActivityCategory.SCIENTIFIC_EVALUATIONS.value == "scientificEvaluations"
        assert ActivityCategory.JOURNAL_MEMBERSHIPS.value == "journalMemberships"

    def test_ranking_criteria(self):
        assert [c.value for c in RankingCriterion] == [
            "academicTitle", "publishedResearch", "globalResearch", "conferences",
            "seminarsAndCourses", "committees", "volunteerWork", "thankYouBooks",
        ]



# SCORE BREAKDOWN TESTS


class TestScoreBreakdown:
    """Tests for ScoreBreakdown invariants."""

    def test_from_items_derives_totals(self):
        breakdown = ScoreBreakdown.from_items({
            ActivityCategory.RESEARCH: [ScoreItem(id=1, year=2024, points=10), ScoreItem(year=2024, points=2)],
            ActivityCategory.COMMITTEES: [ScoreItem(id=3, year=2023, points=7)],
        })
        assert breakdown.summary[ActivityCategory.RESEARCH] == 12
        assert breakdown.summary[ActivityCategory.COMMITTEES] == 7
        assert breakdown.summary[ActivityCategory.COURSES] == 0
        assert breakdown.total_points == 19

    def test_mismatched_summary_rejected(self):
        full = {c: [] for c in ActivityCategory}
        summary = {c: 0 for c in ActivityCategory}
        summary[ActivityCategory.RESEARCH] = 5
        with pytest.raises(ValidationError):
            ScoreBreakdown(breakdown=full, summary=summary, total_points=5)

    def test_mismatched_total_rejected(self):
        full = {c: [] for c in ActivityCategory}
        summary = {c: 0 for c in ActivityCategory}
        with pytest.raises(ValidationError):
            ScoreBreakdown(breakdown=full, summary=summary, total_points=1)

    def test_missing_category_rejected(self):
        with pytest.raises(ValidationError):
            ScoreBreakdown(breakdown={}, summary={}, total_points=0)

    def test_negative_points_rejected(self):
        with pytest.raises(ValidationError):
            ScoreItem(year=2024, points=-1)

    def test_json_uses_camel_case_total(self):
        data = ScoreBreakdown.empty().model_dump(mode="json", by_alias=True)
        assert data["totalPoints"] == 0
        assert "thankYouBooks" in data["summary"]

    def test_json_round_trip(self):
        original = ScoreBreakdown.from_items({
            ActivityCategory.SUPERVISION: [ScoreItem(id=4, title="Thesis", year=2022, points=10,
                                                     details={"degreeType": "phd"})],
        })
        assert ScoreBreakdown.model_validate_json(original.model_dump_json()) == original

    def test_category_counts(self):
        breakdown = ScoreBreakdown.from_items({
            ActivityCategory.RESEARCH: [ScoreItem(year=2024, points=1), ScoreItem(year=2024, points=2)],
        })
        counts = breakdown.category_counts()
        assert counts[ActivityCategory.RESEARCH] == 2
        assert counts[ActivityCategory.COURSES] == 0

    def test_frozen(self):
        breakdown = ScoreBreakdown.empty()
        with pytest.raises(ValidationError):
            breakdown.total_points = 5


class TestSimilarityResult:

    def test_percent_bounds(self):
        with pytest.raises(ValidationError):
            SimilarityResult(peer_id=1, similarity_percent=101)



# DATE RANGE TESTS


class TestPointsDateRange:

    def test_for_dates_is_utc(self):
        window = PointsDateRange.for_dates(date(2024, 1, 1), date(2025, 1, 1))
        assert window.start_inclusive == datetime(2024, 1, 1, tzinfo=timezone.utc)

    def test_end_must_follow_start(self):
        with pytest.raises(ValidationError):
            PointsDateRange.for_dates(date(2024, 1, 1), date(2024, 1, 1))

    def test_half_open(self):
        window = PointsDateRange.for_dates(date(2024, 1, 1), date(2025, 1, 1))
        assert window.contains(datetime(2024, 1, 1, tzinfo=timezone.utc))
        assert not window.contains(datetime(2025, 1, 1, tzinfo=timezone.utc))

    def test_naive_moment_treated_as_utc(self):
        window = PointsDateRange.for_dates(date(2024, 1, 1), date(2025, 1, 1))
        assert window.contains(datetime(2024, 6, 1))



# RESEARCHER TESTS


class TestResearcher:

    def test_blank_department_becomes_none(self):
        assert Researcher(id=1, full_name="A", department="  ").department is None

    def test_empty_name_rejected(self):
        with pytest.raises(ValidationError):
            Researcher(id=1, full_name="")

    def test_directory_entry_defaults(self):
        entry = DirectoryEntry(id=1)
        assert entry.is_active is True
        assert entry.full_name is None



# SETTINGS TESTS


class TestSettings:

    def test_defaults(self):
        config = Settings(_env_file=None)
        assert config.SCORING_CONCURRENCY == 6
        assert config.DEPARTMENT_CONCURRENCY == 4
        assert config.SIMILARITY_MIN_PERCENT == 30

    def test_concurrency_bounds(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, SCORING_CONCURRENCY=0)

    def test_snowflake_backend_requires_credentials(self):
        with pytest.raises(ValidationError, match="SNOWFLAKE_ACCOUNT"):
            Settings(_env_file=None, ACTIVITY_BACKEND="snowflake")

    def test_production_rejects_memory_backend(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, APP_ENV="production")

    @pytest.mark.parametrize("title, expected", [
        ("professor", 5), ("أستاذ مشارك", 4), ("assistant_professor", 3),
        ("مدرس", 2), ("assistant_lecturer", 1), ("visiting scholar", 0), (None, 0),
    ])
    def test_academic_title_rank(self, title, expected):
        assert get_academic_title_rank(title) == expected
