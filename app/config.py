"""Application configuration with comprehensive validation."""
from typing import Optional, Literal, Dict
from functools import lru_cache
from pydantic import Field, SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


# =============================================================================
# ACADEMIC TITLE RANKS
# =============================================================================
# Maps stored academic title (English key or Arabic label) -> seniority rank.
# Titles missing from this table are unranked and excluded from the
# academic-title leaderboard.
# =============================================================================

ACADEMIC_TITLE_RANKS: Dict[str, int] = {
    "professor": 5,
    "أستاذ": 5,
    "associate_professor": 4,
    "أستاذ مشارك": 4,
    "assistant_professor": 3,
    "أستاذ مساعد": 3,
    "lecturer": 2,
    "مدرس": 2,
    "assistant_lecturer": 1,
    "مدرس مساعد": 1,
}


def get_academic_title_rank(title: Optional[str]) -> int:
    """
    Get the seniority rank for an academic title.

    Args:
        title: Stored academic title (e.g. "professor", "أستاذ مساعد")

    Returns:
        Rank in 1..5, or 0 if the title is empty or unknown
    """
    if not title:
        return 0
    return ACADEMIC_TITLE_RANKS.get(title.strip(), 0)


class Settings(BaseSettings):
    """Application settings with production-grade validation."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    APP_NAME: str = "Scientific Productivity Scoring API"
    APP_VERSION: str = "1.0.0"
    APP_ENV: Literal["development", "staging", "production"] = "development"
    DEBUG: bool = False
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    LOG_FORMAT: Literal["json", "console"] = "json"

    # API
    API_V1_PREFIX: str = "/api/v1"

    # Activity store backend
    ACTIVITY_BACKEND: Literal["memory", "snowflake"] = "memory"

    # Snowflake (required only when ACTIVITY_BACKEND == "snowflake")
    SNOWFLAKE_ACCOUNT: Optional[str] = None
    SNOWFLAKE_USER: Optional[str] = None
    SNOWFLAKE_PASSWORD: Optional[SecretStr] = None
    SNOWFLAKE_DATABASE: Optional[str] = None
    SNOWFLAKE_SCHEMA: Optional[str] = None
    SNOWFLAKE_WAREHOUSE: Optional[str] = None
    SNOWFLAKE_ROLE: Optional[str] = None

    # Redis
    REDIS_URL: str = "redis://localhost:6379/0"
    SCORE_CACHE_ENABLED: bool = False
    CACHE_TTL_SCORES: int = Field(default=300, ge=1, le=86400)

    # Fan-out limits. Each unit computation fans out again into one read per
    # category, so both values stay small.
    SCORING_CONCURRENCY: int = Field(default=6, ge=1, le=32)
    DEPARTMENT_CONCURRENCY: int = Field(default=4, ge=1, le=16)

    # Leaderboard sizes
    TOP_N_SHORT: int = Field(default=3, ge=1, le=100)
    TOP_N_LONG: int = Field(default=10, ge=1, le=100)
    SUBGROUP_TOP_N: int = Field(default=5, ge=1, le=100)

    # Peer similarity
    SIMILARITY_MIN_PERCENT: int = Field(default=30, ge=0, le=100)
    SIMILARITY_TOP_K: int = Field(default=5, ge=1, le=100)

    @model_validator(mode="after")
    def validate_snowflake_settings(self):
        """Ensure Snowflake credentials exist when it is the activity store."""
        if self.ACTIVITY_BACKEND == "snowflake":
            missing = [
                name for name in ("SNOWFLAKE_ACCOUNT", "SNOWFLAKE_USER", "SNOWFLAKE_PASSWORD")
                if not getattr(self, name)
            ]
            if missing:
                raise ValueError(
                    f"ACTIVITY_BACKEND=snowflake requires {', '.join(missing)}"
                )
        return self

    @model_validator(mode="after")
    def validate_production_settings(self):
        """Ensure production runs against a real store."""
        if self.APP_ENV == "production":
            if self.DEBUG:
                raise ValueError("DEBUG must be False in production")
            if self.ACTIVITY_BACKEND == "memory":
                raise ValueError("In-memory activity store is not allowed in production")
        return self

@lru_cache
def get_settings() -> Settings:
    return Settings()

settings = get_settings()
