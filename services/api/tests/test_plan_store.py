import json
from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, patch

import pytest
from redis.exceptions import RedisError

from mealweek.errors import PersistenceFailed, ValidationFailed
from mealweek.infra.plan_store import PlanStore
from mealweek.schemas import Category, MealPlanResponse, ShoppingItem, ShoppingTrip

T0 = datetime(2025, 1, 6, 9, 0, tzinfo=timezone.utc)


@pytest.fixture
def result(week_plan):
    return MealPlanResponse(
        week_plan=week_plan,
        shopping_trips=[ShoppingTrip(label="Trip 1 (Mon-Thu)", items=[
            ShoppingItem(name="Eggs", amount="10 pcs", category=Category.DAIRY),
        ])],
    )


@pytest.fixture
def store(mock_redis):
    return PlanStore(mock_redis, "user-1")


def test_key_layout(store):
    assert store.plan_key("2025-02") == "meal-planner:plan:user-1:2025-02"
    assert store.checked_key("2025-02") == "meal-planner:checked:user-1:2025-02"
    assert store.index_key == "meal-planner:plan-index:user-1"


@pytest.mark.asyncio
async def test_save_and_get(store, app_state, result):
    saved = await store.save("2025-02", app_state, result, now=T0)
    loaded = await store.get("2025-02")

    assert loaded == saved
    assert loaded.week_key == "2025-02"
    assert loaded.created_at == T0
    assert loaded.result.week_plan[0].dinner.name == "Dinner 1"


@pytest.mark.asyncio
async def test_stored_json_is_camel_case(store, mock_redis, app_state, result):
    await store.save("2025-02", app_state, result, now=T0)
    data = json.loads(await mock_redis.get(store.plan_key("2025-02")))
    assert set(data) == {"weekKey", "createdAt", "inputState", "result"}
    assert "selectedCuisines" in data["inputState"]
    assert "shoppingTrips" in data["result"]


@pytest.mark.asyncio
async def test_get_missing_returns_none(store):
    assert await store.get("2025-02") is None


@pytest.mark.asyncio
async def test_index_is_most_recent_first(store, mock_redis, app_state, result):
    await store.save("2025-02", app_state, result, now=T0)
    await store.save("2025-03", app_state, result, now=T0 + timedelta(minutes=1))
    assert await store.list_index() == ["2025-03", "2025-02"]

    # Re-saving an older week moves it to the front without duplicating it
    await store.save("2025-02", app_state, result, now=T0 + timedelta(minutes=2))
    assert await store.list_index() == ["2025-02", "2025-03"]
    assert await mock_redis.zcard(store.index_key) == 2
    score = await mock_redis.zscore(store.index_key, "2025-02")
    assert int(score) == int((T0 + timedelta(minutes=2)).timestamp() * 1000)


@pytest.mark.asyncio
async def test_list_plans_adds_week_info(store, app_state, result):
    await store.save("2025-05", app_state, result, now=T0)
    plans = await store.list_plans()

    assert len(plans) == 1
    assert plans[0].week_key == "2025-05"
    assert plans[0].week_number == 5
    assert plans[0].year == 2025
    assert plans[0].date_range == "Jan 27 - Feb 2"


@pytest.mark.asyncio
async def test_list_plans_skips_malformed_index_entries(store, mock_redis, app_state, result):
    await store.save("2025-05", app_state, result, now=T0)
    await mock_redis.zadd(store.index_key, {"garbage": 1})

    assert [p.week_key for p in await store.list_plans()] == ["2025-05"]


@pytest.mark.asyncio
async def test_delete_removes_plan_ledger_and_index(store, mock_redis, app_state, result):
    await store.save("2025-02", app_state, result, now=T0)
    await store.save("2025-03", app_state, result, now=T0 + timedelta(minutes=1))
    await store.set_checked("2025-02", {"a", "b"})

    outcome = await store.delete("2025-02")

    assert outcome.complete
    assert outcome.plan_existed
    assert await store.get("2025-02") is None
    assert await store.get_checked("2025-02") == set()
    assert await mock_redis.exists(store.checked_key("2025-02")) == 0
    assert await store.list_index() == ["2025-03"]


@pytest.mark.asyncio
async def test_delete_missing_plan_is_fine(store):
    outcome = await store.delete("2025-02")
    assert outcome.complete
    assert not outcome.plan_existed


@pytest.mark.asyncio
async def test_delete_partial_failure_then_retry(store, mock_redis, app_state, result):
    await store.save("2025-02", app_state, result, now=T0)
    await store.set_checked("2025-02", {"a"})

    with patch.object(mock_redis, "zrem", AsyncMock(side_effect=RedisError("connection lost"))):
        with pytest.raises(PersistenceFailed) as exc:
            await store.delete("2025-02")
    assert "index" in exc.value.message

    # Earlier steps still ran
    assert await store.get("2025-02") is None
    assert await store.get_checked("2025-02") == set()
    assert await store.list_index() == ["2025-02"]

    outcome = await store.delete("2025-02")
    assert outcome.complete
    assert await store.list_index() == []


@pytest.mark.asyncio
async def test_corrupt_plan_raises(store, mock_redis):
    await mock_redis.set(store.plan_key("2025-02"), "{not json")
    with pytest.raises(PersistenceFailed) as exc:
        await store.get("2025-02")
    assert exc.value.message == "Invalid plan data"


@pytest.mark.asyncio
async def test_plan_with_wrong_days_raises(store, mock_redis, app_state, result):
    await store.save("2025-02", app_state, result, now=T0)
    data = json.loads(await mock_redis.get(store.plan_key("2025-02")))
    data["result"]["weekPlan"] = data["result"]["weekPlan"][:6]
    await mock_redis.set(store.plan_key("2025-02"), json.dumps(data))

    with pytest.raises(PersistenceFailed):
        await store.get("2025-02")


@pytest.mark.asyncio
async def test_checked_round_trip(store, mock_redis):
    assert await store.get_checked("2025-02") == set()
    await store.set_checked("2025-02", {"b", "a"})

    assert await store.get_checked("2025-02") == {"a", "b"}
    assert json.loads(await mock_redis.get(store.checked_key("2025-02"))) == ["a", "b"]


@pytest.mark.asyncio
async def test_corrupt_checked_raises(store, mock_redis):
    await mock_redis.set(store.checked_key("2025-02"), json.dumps({"a": 1}))
    with pytest.raises(PersistenceFailed):
        await store.get_checked("2025-02")


@pytest.mark.asyncio
async def test_users_are_isolated(mock_redis, app_state, result):
    alice = PlanStore(mock_redis, "alice")
    bob = PlanStore(mock_redis, "bob")
    await alice.save("2025-02", app_state, result, now=T0)
    await alice.set_checked("2025-02", {"x"})

    assert await bob.get("2025-02") is None
    assert await bob.get_checked("2025-02") == set()
    assert await bob.list_index() == []


@pytest.mark.asyncio
async def test_invalid_week_key_rejected(store, app_state, result):
    with pytest.raises(ValidationFailed):
        await store.save("2025-99", app_state, result)
    with pytest.raises(ValidationFailed):
        await store.get("bad")


@pytest.mark.asyncio
async def test_redis_failure_on_get(store, mock_redis):
    with patch.object(mock_redis, "get", AsyncMock(side_effect=RedisError("down"))):
        with pytest.raises(PersistenceFailed):
            await store.get("2025-02")
