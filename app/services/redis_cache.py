import redis
from typing import Optional, TypeVar, Type
from pydantic import BaseModel
from app.config import settings
from app.models.scoring import ScoreBreakdown

T = TypeVar("T", bound=BaseModel)

SCORE_KEY_PREFIX = "score"


def score_key(user_id: int) -> str:
    """Cache key for a researcher's all-time breakdown."""
    return f"{SCORE_KEY_PREFIX}:{user_id}"


class RedisCache:
    def __init__(self, url: Optional[str] = None):
        self.client = redis.from_url(
            url or settings.REDIS_URL,
            decode_responses=True,
            socket_connect_timeout=5,
        )

    def get(self, key: str, model: Type[T]) -> Optional[T]:
        """Get cached item and deserialize to Pydantic model."""
        data = self.client.get(key)
        if data:
            return model.model_validate_json(data)
        return None

    def set(self, key: str, value: BaseModel, ttl_seconds: int) -> None:
        """Cache Pydantic model with TTL."""
        self.client.setex(
            key,
            ttl_seconds,
            value.model_dump_json(),
        )

    # ---- score helpers ----

    def get_score(self, user_id: int) -> Optional[ScoreBreakdown]:
        return self.get(score_key(user_id), ScoreBreakdown)

    def set_score(self, user_id: int, breakdown: ScoreBreakdown, ttl_seconds: int) -> None:
        self.set(score_key(user_id), breakdown, ttl_seconds)
