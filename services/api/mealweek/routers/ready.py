import logging

from fastapi import APIRouter
from redis.exceptions import RedisError

from ..core.ai_client import ai_client
from ..infra.redis_client import get_redis

logger = logging.getLogger("mealweek.ready")

router = APIRouter()


@router.get("/ready")
async def ready():
    redis_ok = False
    try:
        r = await get_redis()
        redis_ok = bool(await r.ping())
    except (RedisError, OSError) as e:
        logger.warning(f"Redis ping failed: {e}")
    return {
        "ok": True,
        "redis_ok": redis_ok,
        "ai_mode": ai_client.mode,
        "ai_last_error": ai_client.last_error,
    }
