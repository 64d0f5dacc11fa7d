from fastapi import APIRouter, Depends

from ..core.shopping_ids import attach_item_ids
from ..deps import get_plan_store
from ..errors import NotFound
from ..infra.plan_store import PlanStore
from ..schemas import (
    CheckedOut,
    PlanListOut,
    PlanOut,
    SavePlanRequest,
    ShoppingOut,
    SuccessOut,
    UpdateCheckedRequest,
)

router = APIRouter()


@router.get("/plans", response_model=PlanListOut)
async def list_plans(store: PlanStore = Depends(get_plan_store)):
    """List saved weeks, most recently saved first."""
    return PlanListOut(plans=await store.list_plans())


@router.get("/plans/{week_key}", response_model=PlanOut)
async def get_plan(week_key: str, store: PlanStore = Depends(get_plan_store)):
    plan = await store.get(week_key)
    if plan is None:
        raise NotFound()
    return PlanOut(plan=plan)


@router.put("/plans/{week_key}", response_model=PlanOut)
async def save_plan(
    week_key: str,
    payload: SavePlanRequest,
    store: PlanStore = Depends(get_plan_store),
):
    """Save a confirmed plan, replacing any plan already stored for the week."""
    plan = await store.save(week_key, payload.input_state, payload.result)
    return PlanOut(plan=plan)


@router.delete("/plans/{week_key}", response_model=SuccessOut)
async def delete_plan(week_key: str, store: PlanStore = Depends(get_plan_store)):
    await store.delete(week_key)
    return SuccessOut()


@router.get("/plans/{week_key}/checked", response_model=CheckedOut)
async def get_checked(week_key: str, store: PlanStore = Depends(get_plan_store)):
    return CheckedOut(checked_ids=sorted(await store.get_checked(week_key)))


@router.put("/plans/{week_key}/checked", response_model=SuccessOut)
async def update_checked(
    week_key: str,
    payload: UpdateCheckedRequest,
    store: PlanStore = Depends(get_plan_store),
):
    await store.set_checked(week_key, set(payload.checked_ids))
    return SuccessOut()


@router.get("/plans/{week_key}/shopping", response_model=ShoppingOut)
async def get_shopping(week_key: str, store: PlanStore = Depends(get_plan_store)):
    """Shopping trips with stable item ids and the ids still ticked."""
    plan = await store.get(week_key)
    if plan is None:
        raise NotFound()

    trips = attach_item_ids(plan.result.shopping_trips)
    known = {item.id for trip in trips for item in trip.items}
    checked = await store.get_checked(week_key)
    return ShoppingOut(week_key=week_key, trips=trips, checked_ids=sorted(checked & known))
