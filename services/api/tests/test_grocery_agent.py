from unittest.mock import AsyncMock, patch

import pytest

from mealweek.agents.grocery_agent import GroceryAgent
from mealweek.errors import GenerationFailed
from mealweek.schemas import Category, ShoppingItem, ShoppingListResponse, ShoppingTrip


@pytest.mark.asyncio
async def test_mock_list_splits_trips(app_state, week_plan):
    agent = GroceryAgent()
    agent.mode = "mock"

    trips = await agent.generate_shopping_list(week_plan, app_state)

    assert [t.label for t in trips] == ["Trip 1 (Mon-Thu)", "Trip 2 (Fri-Sun)"]
    assert [i.for_meal for i in trips[0].items] == ["Dinner 1", "Dinner 2", "Dinner 3", "Dinner 4"]
    assert [i.for_meal for i in trips[1].items] == [
        "Dinner 5", "Breakfast sat", "Dinner 6", "Breakfast sun", "Dinner 7",
    ]
    assert trips[0].items[0].amount == "2 portions"


@pytest.mark.asyncio
async def test_gemini_list(app_state, week_plan):
    agent = GroceryAgent()
    agent.mode = "gemini"
    expected = [ShoppingTrip(label="Trip 1 (Mon-Thu)", items=[
        ShoppingItem(name="Eggs", amount="10 pcs", category=Category.DAIRY),
    ])]

    with patch("mealweek.agents.grocery_agent.ai_client") as mock_client:
        mock_client.generate_structured = AsyncMock(
            return_value=ShoppingListResponse(shopping_trips=expected)
        )
        trips = await agent.generate_shopping_list(week_plan, app_state)

    assert trips == expected
    prompt = mock_client.generate_structured.call_args[0][0]
    assert "MEAL PLAN\nMonday: Dinner — Dinner 1" in prompt


@pytest.mark.asyncio
async def test_gemini_failure(app_state, week_plan):
    agent = GroceryAgent()
    agent.mode = "gemini"

    with patch("mealweek.agents.grocery_agent.ai_client") as mock_client:
        mock_client.generate_structured = AsyncMock(return_value=None)
        with pytest.raises(GenerationFailed) as exc:
            await agent.generate_shopping_list(week_plan, app_state)

    assert exc.value.message == "Failed to generate shopping list"
