"""PlanGenerator that talks to the meal planner HTTP API."""

import logging
from typing import Any, Optional

import httpx
from pydantic import ValidationError

from ..errors import GenerationFailed, MealPlannerError, Throttled, Unauthorized, ValidationFailed
from ..schemas import (
    AppState,
    DayPlan,
    GenerateMealPlanRequest,
    GenerateShoppingListRequest,
    MealPlanOnlyResponse,
    MealSlot,
    ShoppingListResponse,
    ShoppingTrip,
    check_week_plan,
)

logger = logging.getLogger("mealweek.workflow")


class HttpPlanGenerator:
    """Calls ``/api/generate-meal-plan`` and ``/api/generate-shopping-list``.

    The ``httpx.AsyncClient`` carries the base URL and the ``X-User-Id``
    header. Every failure comes out as a MealPlannerError subclass.
    """

    def __init__(self, client: httpx.AsyncClient, prefix: str = "/api"):
        self.client = client
        self.prefix = prefix

    async def generate_plan(
        self,
        app_state: AppState,
        week_key: Optional[str] = None,
        current_plan: Optional[list[DayPlan]] = None,
        regenerate_slots: Optional[list[MealSlot]] = None,
    ) -> list[DayPlan]:
        body = GenerateMealPlanRequest(
            app_state=app_state,
            week_key=week_key,
            current_plan=current_plan,
            regenerate_slots=regenerate_slots,
        )
        data = await self._post("/generate-meal-plan", body.model_dump(mode="json", by_alias=True, exclude_none=True))
        try:
            return check_week_plan(MealPlanOnlyResponse.model_validate(data).week_plan)
        except (ValidationError, ValueError) as e:
            logger.error(f"Malformed meal plan response: {e}")
            raise GenerationFailed()

    async def generate_shopping_list(self, week_plan: list[DayPlan], app_state: AppState) -> list[ShoppingTrip]:
        body = GenerateShoppingListRequest(week_plan=week_plan, app_state=app_state)
        data = await self._post("/generate-shopping-list", body.model_dump(mode="json", by_alias=True, exclude_none=True))
        try:
            return ShoppingListResponse.model_validate(data).shopping_trips
        except ValidationError as e:
            logger.error(f"Malformed shopping list response: {e}")
            raise GenerationFailed("Failed to generate shopping list")

    async def _post(self, path: str, body: dict[str, Any]) -> Any:
        try:
            resp = await self.client.post(f"{self.prefix}{path}", json=body)
        except httpx.HTTPError as e:
            logger.error(f"Request to {path} failed: {e}")
            raise GenerationFailed()

        try:
            data = resp.json()
        except ValueError:
            data = None

        if resp.is_success:
            return data

        raise self._error_for(resp, data if isinstance(data, dict) else {})

    @staticmethod
    def _error_for(resp: httpx.Response, data: dict[str, Any]) -> MealPlannerError:
        message = data.get("error")
        if resp.status_code == 401:
            return Unauthorized(message)
        if resp.status_code == 429:
            retry_after = data.get("retryAfter", resp.headers.get("Retry-After", 0))
            try:
                retry_after = int(retry_after)
            except (TypeError, ValueError):
                retry_after = 0
            return Throttled(retry_after=retry_after, message=message)
        if resp.status_code == 400:
            return ValidationFailed(message, details=data.get("details"))
        return GenerationFailed(message)
