"""FastAPI dependencies for the meal planner API.

Provides:
- User resolution (header → env → unauthorized)
- Redis and plan store access scoped to that user
"""

from typing import Optional

from fastapi import Depends, Header
from redis.asyncio import Redis as AsyncRedis

from .errors import Unauthorized
from .infra.plan_store import PlanStore
from .infra.redis_client import get_redis
from .settings import settings


def get_current_user_id(
    x_user_id: Optional[str] = Header(None, alias="X-User-Id"),
) -> str:
    """Resolve the caller's user id.

    Resolution order:
    1. X-User-Id header (set by the auth proxy in front of the API)
    2. settings.default_user_id (single-user installs)

    Raises:
        Unauthorized if neither is present
    """
    user_id = (x_user_id or "").strip() or settings.default_user_id
    if not user_id:
        raise Unauthorized()
    return user_id


async def get_plan_store(
    user_id: str = Depends(get_current_user_id),
    r: AsyncRedis = Depends(get_redis),
) -> PlanStore:
    return PlanStore(r, user_id)
