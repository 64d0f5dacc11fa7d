"""Pydantic schemas for the meal planner API.

Models for:
- The weekly schedule and app state (planning input)
- Week plans and shopping lists (generation output)
- Persisted plans and list items
- Request/response envelopes for the HTTP routes

Wire names are camelCase (``selectedCuisines``, ``weekPlan``...), Python
attributes are snake_case; both are accepted on input.
"""

from datetime import datetime
from enum import Enum
from typing import Annotated, Optional

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# --- Enumerations ---

class MealSlotStatus(str, Enum):
    FULL = "full"      # cooking at home
    COFFEE = "coffee"  # light / quick meal
    SOUP = "soup"
    SKIP = "skip"


class Day(str, Enum):
    MON = "mon"
    TUE = "tue"
    WED = "wed"
    THU = "thu"
    FRI = "fri"
    SAT = "sat"
    SUN = "sun"


class Meal(str, Enum):
    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    DINNER = "dinner"


class PersonId(str, Enum):
    VITALIK = "vitalik"
    LENA = "lena"


class CuisineId(str, Enum):
    EASTERN_EUROPEAN = "eastern-european"
    ASIAN = "asian"
    MEXICAN = "mexican"
    AMERICAN = "american"
    ITALIAN = "italian"
    MEDITERRANEAN = "mediterranean"
    JAPANESE = "japanese"
    THAI = "thai"
    GEORGIAN = "georgian"
    SCANDINAVIAN = "scandinavian"


class Category(str, Enum):
    DAIRY = "dairy"
    MEAT = "meat"
    PRODUCE = "produce"
    PANTRY = "pantry"
    FROZEN = "frozen"
    BAKERY = "bakery"
    CONDIMENTS = "condiments"


# Enum definition order is the canonical order
DAYS_ORDER: tuple[Day, ...] = tuple(Day)
MEALS_ORDER: tuple[Meal, ...] = tuple(Meal)
PEOPLE: tuple[PersonId, ...] = tuple(PersonId)


# --- Schedule ---

class DaySchedule(CamelModel):
    model_config = ConfigDict(frozen=True)

    breakfast: MealSlotStatus
    lunch: MealSlotStatus
    dinner: MealSlotStatus

    def status(self, meal: Meal) -> MealSlotStatus:
        return getattr(self, meal.value)


class PersonWeekSchedule(CamelModel):
    model_config = ConfigDict(frozen=True)

    mon: DaySchedule
    tue: DaySchedule
    wed: DaySchedule
    thu: DaySchedule
    fri: DaySchedule
    sat: DaySchedule
    sun: DaySchedule

    def day(self, day: Day) -> DaySchedule:
        return getattr(self, day.value)


class Schedules(CamelModel):
    model_config = ConfigDict(frozen=True)

    vitalik: PersonWeekSchedule
    lena: PersonWeekSchedule

    def person(self, person: PersonId) -> PersonWeekSchedule:
        return getattr(self, person.value)

    def status(self, person: PersonId, day: Day, meal: Meal) -> MealSlotStatus:
        return self.person(person).day(day).status(meal)


class AppState(CamelModel):
    schedules: Schedules
    selected_cuisines: list[CuisineId]
    special_conditions: str = ""

    @field_validator("selected_cuisines")
    @classmethod
    def _dedupe_cuisines(cls, v: list[CuisineId]) -> list[CuisineId]:
        return list(dict.fromkeys(v))

    @property
    def is_ready(self) -> bool:
        """At least one cuisine must be selected before generating."""
        return len(self.selected_cuisines) > 0


# --- Week plan ---

class MealItem(CamelModel):
    name: str = Field(..., min_length=1)
    time: int = Field(..., ge=0, description="Preparation time in minutes")
    portions: int = Field(..., ge=1)


class DayPlan(CamelModel):
    day: Day
    breakfast: Optional[MealItem] = None
    lunch: Optional[MealItem] = None
    dinner: Optional[MealItem] = None

    def meal(self, meal: Meal) -> Optional[MealItem]:
        return getattr(self, meal.value)


class MealSlot(CamelModel):
    model_config = ConfigDict(frozen=True)

    day: Day
    meal: Meal

    @property
    def sort_key(self) -> tuple[int, int]:
        return DAYS_ORDER.index(self.day), MEALS_ORDER.index(self.meal)


def check_week_plan(days: list[DayPlan]) -> list[DayPlan]:
    """A week plan is exactly seven days in canonical order."""
    got = [d.day for d in days]
    if got != list(DAYS_ORDER):
        raise ValueError(
            "week plan must contain exactly 7 days in order "
            f"{[d.value for d in DAYS_ORDER]}, got {[d.value for d in got]}"
        )
    return days


WeekPlan = Annotated[list[DayPlan], AfterValidator(check_week_plan)]


# --- Shopping ---

class ShoppingItem(CamelModel):
    name: str = Field(..., min_length=1)
    amount: str
    category: Category
    for_meal: Optional[str] = None


class ShoppingItemWithId(ShoppingItem):
    id: str


class ShoppingTrip(CamelModel):
    label: str
    items: list[ShoppingItem]


class ShoppingTripWithIds(CamelModel):
    label: str
    items: list[ShoppingItemWithId]


# --- Generation responses ---

class MealPlanOnlyResponse(CamelModel):
    week_plan: list[DayPlan]


class ShoppingListResponse(CamelModel):
    shopping_trips: list[ShoppingTrip]


class MealPlanResponse(CamelModel):
    week_plan: WeekPlan
    shopping_trips: list[ShoppingTrip]


# --- Persistence ---

class PersistedPlan(CamelModel):
    week_key: str
    created_at: datetime
    input_state: AppState
    result: MealPlanResponse


class PlanListItem(CamelModel):
    week_key: str
    week_number: int
    year: int
    date_range: str


# --- Requests ---

class GenerateMealPlanRequest(CamelModel):
    app_state: AppState
    week_key: Optional[str] = None
    current_plan: Optional[WeekPlan] = None
    regenerate_slots: Optional[list[MealSlot]] = None

    @property
    def is_partial(self) -> bool:
        return bool(self.current_plan) and bool(self.regenerate_slots)


class GenerateShoppingListRequest(CamelModel):
    week_plan: WeekPlan
    app_state: AppState


class SavePlanRequest(CamelModel):
    input_state: AppState
    result: MealPlanResponse


class UpdateCheckedRequest(CamelModel):
    checked_ids: list[str]


# --- Responses ---

class PlanOut(CamelModel):
    plan: PersistedPlan


class PlanListOut(CamelModel):
    plans: list[PlanListItem]


class CheckedOut(CamelModel):
    checked_ids: list[str]


class ShoppingOut(CamelModel):
    week_key: str
    trips: list[ShoppingTripWithIds]
    checked_ids: list[str]


class SuccessOut(BaseModel):
    success: bool = True
