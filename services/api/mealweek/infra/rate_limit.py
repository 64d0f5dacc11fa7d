import logging
import math
import time
from dataclasses import dataclass
from typing import Optional

from redis.asyncio import Redis as AsyncRedis
from redis.exceptions import RedisError

from ..errors import PersistenceFailed, Throttled
from .redis_client import key as redis_key

logger = logging.getLogger("mealweek.ratelimit")


@dataclass(frozen=True)
class RateLimitResult:
    allowed: bool
    count: int
    reset_at_ms: int


def _now_ms() -> int:
    return int(time.time() * 1000)


async def check_rate_limit(
    r: AsyncRedis,
    name: str,
    limit: int,
    window_seconds: int,
    now_ms: Optional[int] = None,
) -> RateLimitResult:
    """Fixed window counter: at most ``limit`` hits per ``window_seconds``.

    The window id is part of the key, so a new window starts from zero even if
    the previous key has not expired yet.
    """
    now_ms = _now_ms() if now_ms is None else now_ms
    window_ms = window_seconds * 1000
    window_id = now_ms // window_ms
    rkey = redis_key("ratelimit", name, str(window_id))

    try:
        count = await r.incr(rkey)
        if count == 1:
            await r.pexpire(rkey, window_ms)
    except RedisError as e:
        logger.error(f"Rate limit check failed for {name}: {e}")
        raise PersistenceFailed("Rate limiter unavailable")

    return RateLimitResult(
        allowed=count <= limit,
        count=count,
        reset_at_ms=(window_id + 1) * window_ms,
    )


async def enforce_rate_limit(
    r: AsyncRedis,
    name: str,
    limit: int,
    window_seconds: int,
    now_ms: Optional[int] = None,
) -> RateLimitResult:
    """Like check_rate_limit but raises Throttled when the window is used up."""
    now_ms = _now_ms() if now_ms is None else now_ms
    result = await check_rate_limit(r, name, limit, window_seconds, now_ms=now_ms)
    if not result.allowed:
        retry_after = math.ceil((result.reset_at_ms - now_ms) / 1000)
        logger.info(f"Rate limit exceeded for {name}, retry after {retry_after}s")
        raise Throttled(retry_after=retry_after)
    return result
