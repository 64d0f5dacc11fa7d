import os

os.environ.setdefault("AI_MODE", "mock")

import pytest
import fakeredis
import fakeredis.aioredis
from fastapi.testclient import TestClient

from mealweek.main import app
from mealweek.infra import redis_client
from mealweek.routers.generate import limiter
from mealweek.core.rules import default_app_state
from mealweek.schemas import (
    AppState,
    CuisineId,
    Day,
    DayPlan,
    DAYS_ORDER,
    Meal,
    MealItem,
    PersonId,
    Schedules,
)

TEST_USER = "user-1"


@pytest.fixture
def redis_server():
    return fakeredis.FakeServer()


@pytest.fixture(autouse=True)
def mock_redis(redis_server):
    async_redis = fakeredis.aioredis.FakeRedis(server=redis_server, decode_responses=True)

    # Force the client into the infra module
    redis_client._redis_async = async_redis

    yield async_redis

    # Cleanup
    redis_client._redis_async = None


@pytest.fixture(autouse=True)
def reset_ip_limiter():
    limiter.reset()
    yield


@pytest.fixture
def sync_redis(redis_server):
    """Same data as mock_redis, for seeding from sync tests."""
    return fakeredis.FakeRedis(server=redis_server, decode_responses=True)


@pytest.fixture
def client():
    with TestClient(app, headers={"X-User-Id": TEST_USER}) as c:
        yield c


@pytest.fixture
def anon_client():
    with TestClient(app) as c:
        yield c


def _build_state(fill, overrides=None, cuisines=None, special=""):
    """AppState with every slot set to ``fill`` except the given overrides.

    ``overrides`` maps (person, day, meal) -> status.
    """
    overrides = overrides or {}
    people = {}
    for person in PersonId:
        week = {}
        for day in Day:
            week[day.value] = {
                meal.value: overrides.get((person, day, meal), fill) for meal in Meal
            }
        people[person.value] = week
    return AppState(
        schedules=Schedules.model_validate(people),
        selected_cuisines=cuisines if cuisines is not None else [CuisineId.ITALIAN],
        special_conditions=special,
    )


@pytest.fixture
def make_state():
    return _build_state


@pytest.fixture
def app_state():
    return default_app_state()


@pytest.fixture
def week_plan():
    """Seven days, dinner every day, breakfast on weekends, no lunches."""
    plan = []
    for i, day in enumerate(DAYS_ORDER):
        breakfast = None
        if day in (Day.SAT, Day.SUN):
            breakfast = MealItem(name=f"Breakfast {day.value}", time=15, portions=2)
        plan.append(DayPlan(
            day=day,
            breakfast=breakfast,
            lunch=None,
            dinner=MealItem(name=f"Dinner {i + 1}", time=30 + i, portions=2),
        ))
    return plan
