"""
Services module for the Scientific Productivity Scoring API.
"""

from app.services.cache import get_cache, reset_cache
from app.services.redis_cache import RedisCache
from app.services.snowflake import get_snowflake_connection

__all__ = [
    "get_cache",
    "reset_cache",
    "RedisCache",
    "get_snowflake_connection",
]
