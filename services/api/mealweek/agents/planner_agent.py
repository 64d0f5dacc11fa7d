"""Week Plan Agent.

Turns an AppState into a 7-day plan via the generation service, either from
scratch or by replacing selected slots of an existing plan. In mock mode a
deterministic local planner stands in for Gemini.
"""

import asyncio
import logging
from typing import Iterable, Optional

from ..core.ai_client import ai_client
from ..core.prompts import (
    build_meal_plan_prompt,
    build_partial_regeneration_prompt,
    previous_meals_from_plan,
)
from ..core.rules import CUISINE_NAMES
from ..core.slots import resolve_slot
from ..errors import GenerationFailed
from ..schemas import (
    AppState,
    CuisineId,
    DayPlan,
    DAYS_ORDER,
    MEALS_ORDER,
    MealItem,
    MealPlanOnlyResponse,
    MealSlot,
    MealSlotStatus,
    PEOPLE,
    check_week_plan,
)
from ..settings import settings

logger = logging.getLogger("mealweek.planner")

MOCK_DISHES: dict[CuisineId, list[str]] = {
    CuisineId.EASTERN_EUROPEAN: ["Syrniki", "Borscht", "Chicken cutlets with mash", "Pelmeni"],
    CuisineId.ASIAN: ["Chicken teriyaki", "Egg fried rice", "Beef stir-fry", "Miso soup"],
    CuisineId.MEXICAN: ["Chicken quesadilla", "Tacos al pastor", "Huevos rancheros", "Tortilla soup"],
    CuisineId.AMERICAN: ["Pancakes", "Cheeseburger", "Chicken noodle soup", "BLT sandwich"],
    CuisineId.ITALIAN: ["Spaghetti carbonara", "Risotto ai funghi", "Frittata", "Minestra di pollo"],
    CuisineId.MEDITERRANEAN: ["Shakshuka", "Greek salad with chicken", "Falafel wrap", "Avgolemono"],
    CuisineId.JAPANESE: ["Salmon onigiri", "Chicken katsu", "Ramen", "Tamagoyaki"],
    CuisineId.THAI: ["Pad thai", "Green curry", "Tom kha gai", "Thai basil chicken"],
    CuisineId.GEORGIAN: ["Khachapuri", "Chakhokhbili", "Kharcho", "Lobio"],
    CuisineId.SCANDINAVIAN: ["Salmon smørrebrød", "Swedish meatballs", "Salmon soup", "Rye porridge"],
}


def _mock_time(state: AppState, slot: MealSlot) -> int:
    statuses = {state.schedules.status(p, slot.day, slot.meal) for p in PEOPLE}
    if MealSlotStatus.FULL in statuses:
        return 30
    if MealSlotStatus.SOUP in statuses:
        return 40
    return 10


class _MockDishSource:
    """Round-robin over selected cuisines, never repeating a name."""

    def __init__(self, state: AppState, taken: Iterable[str] = ()):
        self._cuisines = list(state.selected_cuisines) or list(CuisineId)
        self._taken = set(taken)
        self._turn = 0

    def next(self) -> str:
        while True:
            cuisine = self._cuisines[self._turn % len(self._cuisines)]
            dishes = MOCK_DISHES[cuisine]
            round_no = self._turn // len(self._cuisines)
            name = dishes[round_no % len(dishes)]
            if round_no >= len(dishes):
                name = f"{name} ({CUISINE_NAMES[cuisine]} #{round_no // len(dishes) + 1})"
            self._turn += 1
            if name not in self._taken:
                self._taken.add(name)
                return name


def _mock_item(state: AppState, slot: MealSlot, source: _MockDishSource) -> Optional[MealItem]:
    info = resolve_slot(state, slot.day, slot.meal)
    if info.portions == 0:
        return None
    return MealItem(name=source.next(), time=_mock_time(state, slot), portions=info.portions)


class PlannerAgent:
    def __init__(self):
        self.mode = settings.ai_mode

    async def generate_week_plan(
        self, state: AppState, previous_meals: Optional[list[str]] = None
    ) -> list[DayPlan]:
        if self.mode == "mock":
            return self._mock_week_plan(state, previous_meals or [])

        prompt = build_meal_plan_prompt(state, previous_meals)
        return await self._complete(prompt)

    async def regenerate_slots(
        self,
        state: AppState,
        current_plan: list[DayPlan],
        slots: list[MealSlot],
        previous_meals: Optional[list[str]] = None,
    ) -> list[DayPlan]:
        """Replace only ``slots``; every other slot is expected back unchanged.

        That expectation lives in the prompt. A structurally valid response is
        accepted even when the service also changed unmarked slots.
        """
        if self.mode == "mock":
            return self._mock_regenerate(state, current_plan, slots)

        prompt = build_partial_regeneration_prompt(state, current_plan, slots, previous_meals)
        return await self._complete(prompt)

    async def _complete(self, prompt: str) -> list[DayPlan]:
        try:
            response = await asyncio.wait_for(
                ai_client.generate_structured(prompt, MealPlanOnlyResponse),
                timeout=settings.generation_timeout_s,
            )
        except asyncio.TimeoutError:
            logger.error("Meal plan generation timed out after %ss", settings.generation_timeout_s)
            raise GenerationFailed()

        if response is None:
            raise GenerationFailed()

        try:
            return check_week_plan(response.week_plan)
        except ValueError as e:
            logger.error(f"Meal plan response rejected: {e}")
            raise GenerationFailed()

    def _mock_week_plan(self, state: AppState, previous_meals: list[str]) -> list[DayPlan]:
        source = _MockDishSource(state, taken=previous_meals)
        plan = []
        for day in DAYS_ORDER:
            meals = {
                meal.value: _mock_item(state, MealSlot(day=day, meal=meal), source)
                for meal in MEALS_ORDER
            }
            plan.append(DayPlan(day=day, **meals))
        return plan

    def _mock_regenerate(
        self, state: AppState, current_plan: list[DayPlan], slots: list[MealSlot]
    ) -> list[DayPlan]:
        source = _MockDishSource(state, taken=previous_meals_from_plan(current_plan))
        marked = set(slots)
        plan = []
        for day_plan in current_plan:
            updates = {
                meal.value: _mock_item(state, MealSlot(day=day_plan.day, meal=meal), source)
                for meal in MEALS_ORDER
                if MealSlot(day=day_plan.day, meal=meal) in marked
            }
            plan.append(day_plan.model_copy(update=updates))
        return plan


planner_agent = PlannerAgent()
