"""Client-side plan generation workflow.

One ``GenerationWorkflow`` per session. It sequences calls to a
``PlanGenerator`` and owns the only copy of the in-progress state:

    idle -> generating-plan -> plan-ready -> generating-shopping -> complete

Failures fall back to ``idle`` (first plan) or ``plan-ready`` (regeneration,
shopping list), so a plan that was already shown is never lost.

There is no cancellation. Each call takes a ticket from a counter when it is
dispatched; a completion whose ticket is no longer the latest is dropped.
"""

import logging
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Callable, Optional, Protocol

from ..errors import GenerationFailed, MealPlannerError, Throttled
from ..schemas import AppState, Day, DayPlan, Meal, MealSlot, ShoppingTrip

logger = logging.getLogger("mealweek.workflow")


class Stage(str, Enum):
    IDLE = "idle"
    GENERATING_PLAN = "generating-plan"
    PLAN_READY = "plan-ready"
    GENERATING_SHOPPING = "generating-shopping"
    COMPLETE = "complete"


@dataclass(frozen=True)
class GenerationState:
    stage: Stage = Stage.IDLE
    week_plan: Optional[list[DayPlan]] = None
    shopping_trips: Optional[list[ShoppingTrip]] = None
    selected_slots: frozenset[MealSlot] = field(default_factory=frozenset)
    error: Optional[str] = None

    @property
    def is_busy(self) -> bool:
        return self.stage in (Stage.GENERATING_PLAN, Stage.GENERATING_SHOPPING)


class PlanGenerator(Protocol):
    async def generate_plan(
        self,
        app_state: AppState,
        week_key: Optional[str] = None,
        current_plan: Optional[list[DayPlan]] = None,
        regenerate_slots: Optional[list[MealSlot]] = None,
    ) -> list[DayPlan]: ...

    async def generate_shopping_list(
        self, week_plan: list[DayPlan], app_state: AppState
    ) -> list[ShoppingTrip]: ...


def _error_message(e: MealPlannerError) -> str:
    if isinstance(e, Throttled):
        return f"{e.message} (retry in {e.retry_after}s)"
    return e.message


class GenerationWorkflow:
    def __init__(self, generator: PlanGenerator):
        self._generator = generator
        self._state = GenerationState()
        self._ticket = 0

    @property
    def state(self) -> GenerationState:
        return self._state

    def _dispatch(self, update: Callable[[GenerationState], GenerationState]) -> int:
        self._ticket += 1
        self._state = update(self._state)
        return self._ticket

    def _complete(self, ticket: int, update: Callable[[GenerationState], GenerationState]) -> bool:
        if ticket != self._ticket:
            logger.debug(f"Discarding stale completion (ticket {ticket}, latest {self._ticket})")
            return False
        self._state = update(self._state)
        return True

    async def generate_plan(self, app_state: AppState, week_key: Optional[str] = None) -> GenerationState:
        ticket = self._dispatch(lambda s: replace(s, stage=Stage.GENERATING_PLAN, error=None))
        try:
            plan = await self._generator.generate_plan(app_state, week_key=week_key)
        except MealPlannerError as e:
            logger.warning(f"Plan generation failed: {e.message}")
            message = _error_message(e)
            self._complete(ticket, lambda s: replace(s, stage=Stage.IDLE, error=message))
            return self._state
        except Exception:
            logger.exception("Plan generation failed unexpectedly")
            message = GenerationFailed().message
            self._complete(ticket, lambda s: replace(s, stage=Stage.IDLE, error=message))
            return self._state

        self._complete(ticket, lambda s: GenerationState(stage=Stage.PLAN_READY, week_plan=plan))
        return self._state

    async def regenerate_plan(self, app_state: AppState, week_key: Optional[str] = None) -> GenerationState:
        """Regenerate the selected slots, or the whole week when nothing is selected."""
        current_plan = self._state.week_plan
        if current_plan is None:
            return await self.generate_plan(app_state, week_key)

        slots = sorted(self._state.selected_slots, key=lambda s: s.sort_key)
        ticket = self._dispatch(lambda s: replace(
            s, stage=Stage.GENERATING_PLAN, shopping_trips=None, error=None
        ))
        try:
            if slots:
                plan = await self._generator.generate_plan(
                    app_state, week_key=week_key, current_plan=current_plan, regenerate_slots=slots
                )
            else:
                plan = await self._generator.generate_plan(app_state, week_key=week_key)
        except MealPlannerError as e:
            logger.warning(f"Plan regeneration failed: {e.message}")
            message = _error_message(e)
            self._complete(ticket, lambda s: replace(s, stage=Stage.PLAN_READY, error=message))
            return self._state
        except Exception:
            logger.exception("Plan regeneration failed unexpectedly")
            message = GenerationFailed().message
            self._complete(ticket, lambda s: replace(s, stage=Stage.PLAN_READY, error=message))
            return self._state

        self._complete(ticket, lambda s: GenerationState(stage=Stage.PLAN_READY, week_plan=plan))
        return self._state

    async def confirm_plan(self, app_state: AppState) -> GenerationState:
        week_plan = self._state.week_plan
        if week_plan is None:
            return self._state

        ticket = self._dispatch(lambda s: replace(s, stage=Stage.GENERATING_SHOPPING, error=None))
        try:
            trips = await self._generator.generate_shopping_list(week_plan, app_state)
        except MealPlannerError as e:
            logger.warning(f"Shopping list generation failed: {e.message}")
            message = _error_message(e)
            self._complete(ticket, lambda s: replace(s, stage=Stage.PLAN_READY, error=message))
            return self._state
        except Exception:
            logger.exception("Shopping list generation failed unexpectedly")
            message = GenerationFailed("Failed to generate shopping list").message
            self._complete(ticket, lambda s: replace(s, stage=Stage.PLAN_READY, error=message))
            return self._state

        self._complete(ticket, lambda s: replace(s, stage=Stage.COMPLETE, shopping_trips=trips))
        return self._state

    def toggle_slot(self, day: Day, meal: Meal) -> None:
        slot = MealSlot(day=day, meal=meal)
        self._state = replace(self._state, selected_slots=self._state.selected_slots ^ {slot})

    def clear_selection(self) -> None:
        self._state = replace(self._state, selected_slots=frozenset())

    def reset_to_plan_stage(self) -> None:
        """Drop the shopping list and go back to editing the plan."""
        if self._state.week_plan is None:
            return
        self._dispatch(lambda s: replace(s, stage=Stage.PLAN_READY, shopping_trips=None, error=None))

    def reset(self) -> None:
        self._dispatch(lambda s: GenerationState())
