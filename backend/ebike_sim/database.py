from typing import Optional
import redis
from ebike_sim.config import settings

# Redis
def get_redis_client() -> Optional[redis.Redis]:
    """
    Client for the translation store, or None when no Redis host is configured.
    """
    if not settings.REDIS_HOST:
        return None
    return redis.Redis(
        host=settings.REDIS_HOST,
        port=settings.REDIS_PORT,
        db=settings.REDIS_DB,
        decode_responses=True,
        socket_timeout=5
    )
