import logging

from fastapi import APIRouter, Depends, Request
from redis.asyncio import Redis as AsyncRedis
from slowapi import Limiter
from slowapi.util import get_remote_address

from ..agents.grocery_agent import grocery_agent
from ..agents.planner_agent import planner_agent
from ..core.prompts import previous_meals_from_plan
from ..core.week_keys import get_previous_week_key, parse_week_key
from ..deps import get_current_user_id
from ..errors import PersistenceFailed, ValidationFailed
from ..infra.plan_store import PlanStore
from ..infra.rate_limit import enforce_rate_limit
from ..infra.redis_client import get_redis
from ..schemas import (
    AppState,
    GenerateMealPlanRequest,
    GenerateShoppingListRequest,
    MealPlanOnlyResponse,
    ShoppingListResponse,
)
from ..settings import settings

logger = logging.getLogger("mealweek.generate")

router = APIRouter()

# Per-IP guard in front of the per-user window below
limiter = Limiter(key_func=get_remote_address)


def _require_ready(state: AppState, field: str = "appState") -> None:
    if not state.is_ready:
        raise ValidationFailed(
            "At least one cuisine must be selected",
            details=[{"field": f"{field}.selectedCuisines", "message": "must not be empty"}],
        )


async def _previous_week_meals(r: AsyncRedis, user_id: str, week_key: str) -> list[str]:
    store = PlanStore(r, user_id)
    try:
        previous = await store.get(get_previous_week_key(week_key))
    except PersistenceFailed as e:
        # Only feeds the "do not repeat" hint; generation goes on without it
        logger.warning(f"Previous week lookup failed for {week_key}: {e}")
        return []
    if previous is None:
        return []
    return previous_meals_from_plan(previous.result.week_plan)


@router.post("/generate-meal-plan", response_model=MealPlanOnlyResponse)
@limiter.limit(settings.ip_rate_limit)
async def generate_meal_plan(
    request: Request,
    payload: GenerateMealPlanRequest,
    user_id: str = Depends(get_current_user_id),
    r: AsyncRedis = Depends(get_redis),
):
    """Generate a full week plan, or replace selected slots of ``currentPlan``."""
    _require_ready(payload.app_state)
    if payload.week_key is not None:
        parse_week_key(payload.week_key)

    await enforce_rate_limit(
        r, f"meal-plan:{user_id}", settings.plan_rate_limit, settings.plan_rate_window_s
    )

    previous_meals = []
    if payload.week_key:
        previous_meals = await _previous_week_meals(r, user_id, payload.week_key)

    if payload.is_partial:
        slots = list(dict.fromkeys(payload.regenerate_slots))
        logger.info(f"Regenerating {len(slots)} slot(s) for user={user_id}")
        week_plan = await planner_agent.regenerate_slots(
            payload.app_state, payload.current_plan, slots, previous_meals
        )
    else:
        logger.info(f"Generating week plan for user={user_id} week={payload.week_key}")
        week_plan = await planner_agent.generate_week_plan(payload.app_state, previous_meals)

    return MealPlanOnlyResponse(week_plan=week_plan)


@router.post("/generate-shopping-list", response_model=ShoppingListResponse)
@limiter.limit(settings.ip_rate_limit)
async def generate_shopping_list(
    request: Request,
    payload: GenerateShoppingListRequest,
    user_id: str = Depends(get_current_user_id),
    r: AsyncRedis = Depends(get_redis),
):
    """Derive shopping trips from a confirmed week plan."""
    await enforce_rate_limit(
        r, f"shopping-list:{user_id}", settings.shopping_rate_limit, settings.shopping_rate_window_s
    )

    logger.info(f"Generating shopping list for user={user_id}")
    trips = await grocery_agent.generate_shopping_list(payload.week_plan, payload.app_state)
    return ShoppingListResponse(shopping_trips=trips)
