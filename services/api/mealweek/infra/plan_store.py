"""Redis-backed store for confirmed week plans.

Layout per user:
- ``<prefix>:plan:<user>:<week>``     JSON PersistedPlan
- ``<prefix>:checked:<user>:<week>``  JSON list of checked shopping item ids
- ``<prefix>:plan-index:<user>``      sorted set, member = week key, score = save time (ms)

The checked ledger lives apart from the plan so ticking items never rewrites
the plan. Nothing here is transactional: two saves of the same week race and
the last one wins.
"""

import json
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Awaitable, Callable, Optional

from pydantic import ValidationError
from redis.asyncio import Redis as AsyncRedis
from redis.exceptions import RedisError

from ..core.week_keys import get_week_info_by_key, parse_week_key
from ..errors import PersistenceFailed, ValidationFailed
from ..schemas import AppState, MealPlanResponse, PersistedPlan, PlanListItem
from .redis_client import key as redis_key

logger = logging.getLogger("mealweek.store")


@dataclass
class DeleteOutcome:
    week_key: str
    plan_existed: bool = False
    failed_steps: list[str] = field(default_factory=list)

    @property
    def complete(self) -> bool:
        return not self.failed_steps


class PlanStore:
    def __init__(self, r: AsyncRedis, user_id: str):
        self.r = r
        self.user_id = user_id

    # --- keys ---

    def plan_key(self, week_key: str) -> str:
        return redis_key("plan", self.user_id, week_key)

    def checked_key(self, week_key: str) -> str:
        return redis_key("checked", self.user_id, week_key)

    @property
    def index_key(self) -> str:
        return redis_key("plan-index", self.user_id)

    # --- plans ---

    async def save(
        self,
        week_key: str,
        input_state: AppState,
        result: MealPlanResponse,
        now: Optional[datetime] = None,
    ) -> PersistedPlan:
        """Write (or replace) the plan for a week and bump it to the top of the index."""
        parse_week_key(week_key)
        now = now or datetime.now(timezone.utc)
        plan = PersistedPlan(
            week_key=week_key,
            created_at=now,
            input_state=input_state,
            result=result,
        )
        score = int(now.timestamp() * 1000)

        try:
            await self.r.set(self.plan_key(week_key), plan.model_dump_json(by_alias=True))
            # ZADD on an existing member only updates its score
            await self.r.zadd(self.index_key, {week_key: score})
        except RedisError as e:
            logger.error(f"Failed to save plan {self.plan_key(week_key)}: {e}")
            raise PersistenceFailed("Failed to save plan")

        logger.info(f"Saved plan user={self.user_id} week={week_key}")
        return plan

    async def get(self, week_key: str) -> Optional[PersistedPlan]:
        """Return the stored plan, or None if there is none.

        A record that no longer parses raises PersistenceFailed instead of
        being dropped.
        """
        parse_week_key(week_key)
        pkey = self.plan_key(week_key)
        try:
            raw = await self.r.get(pkey)
        except RedisError as e:
            logger.error(f"Failed to fetch plan {pkey}: {e}")
            raise PersistenceFailed("Failed to fetch plan")

        if raw is None:
            return None

        try:
            return PersistedPlan.model_validate_json(raw)
        except ValidationError as e:
            logger.error(f"Invalid plan data in Redis for key {pkey}: {e}")
            raise PersistenceFailed("Invalid plan data")

    async def delete(self, week_key: str) -> DeleteOutcome:
        """Remove plan, checked ledger and index entry.

        Best effort, not atomic: every step runs even if an earlier one fails.
        A partial failure can leave an orphaned ledger or index entry and is
        reported as PersistenceFailed; calling delete again finishes the job
        since each step is idempotent.
        """
        parse_week_key(week_key)
        outcome = DeleteOutcome(week_key=week_key)

        async def drop_plan():
            outcome.plan_existed = bool(await self.r.delete(self.plan_key(week_key)))

        async def drop_checked():
            await self.r.delete(self.checked_key(week_key))

        async def drop_index_entry():
            await self.r.zrem(self.index_key, week_key)

        steps: list[tuple[str, Callable[[], Awaitable[None]]]] = [
            ("plan", drop_plan),
            ("checked", drop_checked),
            ("index", drop_index_entry),
        ]
        for name, step in steps:
            try:
                await step()
            except RedisError as e:
                logger.error(f"Delete step '{name}' failed for user={self.user_id} week={week_key}: {e}")
                outcome.failed_steps.append(name)

        if not outcome.complete:
            raise PersistenceFailed(
                f"Plan deletion incomplete ({', '.join(outcome.failed_steps)}); retry to finish"
            )
        logger.info(f"Deleted plan user={self.user_id} week={week_key} existed={outcome.plan_existed}")
        return outcome

    # --- index ---

    async def list_index(self) -> list[str]:
        """Week keys, most recently saved first."""
        try:
            return list(await self.r.zrange(self.index_key, 0, -1, desc=True))
        except RedisError as e:
            logger.error(f"Failed to read plan index {self.index_key}: {e}")
            raise PersistenceFailed("Failed to fetch plans")

    async def list_plans(self) -> list[PlanListItem]:
        items = []
        for week_key in await self.list_index():
            try:
                info = get_week_info_by_key(week_key)
            except ValidationFailed:
                logger.warning(f"Skipping malformed week key {week_key!r} in {self.index_key}")
                continue
            items.append(PlanListItem(
                week_key=week_key,
                week_number=info.week_number,
                year=info.year,
                date_range=info.date_range,
            ))
        return items

    # --- checked ledger ---

    async def get_checked(self, week_key: str) -> set[str]:
        parse_week_key(week_key)
        ckey = self.checked_key(week_key)
        try:
            raw = await self.r.get(ckey)
        except RedisError as e:
            logger.error(f"Failed to fetch checked items {ckey}: {e}")
            raise PersistenceFailed("Failed to fetch checked items")

        if raw is None:
            return set()

        try:
            data = json.loads(raw)
        except json.JSONDecodeError:
            data = None
        if not isinstance(data, list) or not all(isinstance(i, str) for i in data):
            logger.error(f"Invalid checked items data in Redis for key {ckey}")
            raise PersistenceFailed("Invalid checked items data")
        return set(data)

    async def set_checked(self, week_key: str, ids: set[str]) -> None:
        parse_week_key(week_key)
        ckey = self.checked_key(week_key)
        try:
            await self.r.set(ckey, json.dumps(sorted(ids)))
        except RedisError as e:
            logger.error(f"Failed to update checked items {ckey}: {e}")
            raise PersistenceFailed("Failed to update checked items")
