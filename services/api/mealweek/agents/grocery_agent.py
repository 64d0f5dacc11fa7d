"""Grocery List Agent."""
import asyncio
import logging

from ..core.ai_client import ai_client
from ..core.prompts import build_shopping_list_prompt
from ..errors import GenerationFailed
from ..schemas import (
    AppState,
    Category,
    Day,
    DayPlan,
    MEALS_ORDER,
    ShoppingItem,
    ShoppingListResponse,
    ShoppingTrip,
)
from ..settings import settings

logger = logging.getLogger("mealweek.grocery")

# Trip split used by the mock list; the prompt asks Gemini for the same one
TRIP_SPLIT = [
    ("Trip 1 (Mon-Thu)", {Day.MON, Day.TUE, Day.WED, Day.THU}),
    ("Trip 2 (Fri-Sun)", {Day.FRI, Day.SAT, Day.SUN}),
]


class GroceryAgent:
    def __init__(self):
        self.mode = settings.ai_mode

    async def generate_shopping_list(self, week_plan: list[DayPlan], state: AppState) -> list[ShoppingTrip]:
        """Generate shopping trips for a confirmed week plan."""
        if self.mode == "mock":
            return self._mock_shopping_list(week_plan)

        prompt = build_shopping_list_prompt(week_plan, state)
        try:
            response = await asyncio.wait_for(
                ai_client.generate_structured(prompt, ShoppingListResponse),
                timeout=settings.generation_timeout_s,
            )
        except asyncio.TimeoutError:
            logger.error("Shopping list generation timed out after %ss", settings.generation_timeout_s)
            raise GenerationFailed("Failed to generate shopping list")

        if response is None:
            raise GenerationFailed("Failed to generate shopping list")
        return response.shopping_trips

    def _mock_shopping_list(self, week_plan: list[DayPlan]) -> list[ShoppingTrip]:
        trips = []
        for label, days in TRIP_SPLIT:
            items = []
            for day_plan in week_plan:
                if day_plan.day not in days:
                    continue
                for meal in MEALS_ORDER:
                    item = day_plan.meal(meal)
                    if item is None:
                        continue
                    items.append(ShoppingItem(
                        name=f"Ingredients for {item.name}",
                        amount=f"{item.portions} portions",
                        category=Category.PANTRY,
                        for_meal=item.name,
                    ))
            trips.append(ShoppingTrip(label=label, items=items))
        return trips


grocery_agent = GroceryAgent()
