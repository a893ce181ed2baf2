"""
Cache Service Singleton - Scientific Productivity Scoring
app/services/cache.py

Provides a singleton Redis cache instance for computed score breakdowns.
Gracefully handles Redis unavailability.
"""
import logging
import redis
from typing import Optional
from app.services.redis_cache import RedisCache
from app.config import settings

logger = logging.getLogger(__name__)

# Singleton instance
_cache: Optional[RedisCache] = None


def get_cache() -> Optional[RedisCache]:
    """
    Get or create Redis cache instance.

    Returns:
        RedisCache instance if caching is enabled and Redis is available,
        None otherwise.

    Note:
        Returns None if Redis is unavailable, allowing scores to be computed
        without caching (graceful degradation).
    """
    global _cache
    if not settings.SCORE_CACHE_ENABLED:
        return None
    if _cache is None:
        try:
            _cache = RedisCache()
            _cache.client.ping()  # Test connection
        except (redis.RedisError, ConnectionError) as e:
            logger.warning("Redis unavailable, score cache disabled: %s", e)
            _cache = None
    return _cache


def reset_cache() -> None:
    """
    Reset the cache singleton.

    Useful for testing or when Redis connection needs to be re-established.
    """
    global _cache
    _cache = None
