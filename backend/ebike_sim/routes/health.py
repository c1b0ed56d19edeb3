from typing import Dict, Optional

import redis
from fastapi import APIRouter, Depends, HTTPException, status

from ebike_sim.database import get_redis_client

router = APIRouter()

@router.get("/health", status_code=status.HTTP_200_OK)
def health_check(client: Optional[redis.Redis] = Depends(get_redis_client)) -> Dict[str, str]:
    """
    Health check endpoint to verify backend and translation store connectivity.
    """
    status_report = {
        "status": "healthy",
        "translations": "static"
    }

    # Redis is optional; without it labels come from the in-memory table
    if client is not None:
        try:
            client.ping()
            status_report["translations"] = "redis"
        except redis.RedisError as e:
            status_report["translations"] = f"error: {str(e)}"
            status_report["status"] = "unhealthy"

    if status_report["status"] != "healthy":
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=status_report
        )

    return status_report
