"""Static rule tables and household defaults used to build generation prompts."""

from ..schemas import (
    AppState,
    Category,
    CuisineId,
    Day,
    DaySchedule,
    Meal,
    MealSlotStatus,
    PersonId,
    PersonWeekSchedule,
    Schedules,
)

TARGET_LANGUAGE = "Russian"
HOUSEHOLD_LOCATION = "Finland"

CUISINE_NAMES: dict[CuisineId, str] = {
    CuisineId.EASTERN_EUROPEAN: "Eastern European",
    CuisineId.ASIAN: "Asian",
    CuisineId.MEXICAN: "Mexican",
    CuisineId.AMERICAN: "American",
    CuisineId.ITALIAN: "Italian",
    CuisineId.MEDITERRANEAN: "Mediterranean",
    CuisineId.JAPANESE: "Japanese",
    CuisineId.THAI: "Thai",
    CuisineId.GEORGIAN: "Georgian",
    CuisineId.SCANDINAVIAN: "Scandinavian",
}

DEFAULT_SELECTED_CUISINES: list[CuisineId] = [
    CuisineId.EASTERN_EUROPEAN,
    CuisineId.ASIAN,
    CuisineId.MEXICAN,
    CuisineId.AMERICAN,
]

# Hardcoded, never offered for selection
EXCLUDED_CUISINES = ["Indian", "Nepali"]

COOKING_TIME = {"optimal": 30, "max": 60}  # minutes

BANNED_INGREDIENTS = [
    "Carrot cream soup",
    "minestrone",
    "Buckwheat",
    "oatmeal",
    "Prunes",
    "dried apricots",
    "dried fruit",
    "Vegetable casseroles",
    "Sweet potato",
    "Lentil and bean soups",
    "Capers",
]

MEAT_RULES = {
    "pork": "bacon only",
    "beef": "maximum once per week",
    "fish": "salmon/trout/tuna only, maximum once per week",
}

PANTRY_STAPLES = ["salt", "pepper", "vegetable oil", "sugar"]

DAY_NAMES: dict[Day, str] = {
    Day.MON: "Monday",
    Day.TUE: "Tuesday",
    Day.WED: "Wednesday",
    Day.THU: "Thursday",
    Day.FRI: "Friday",
    Day.SAT: "Saturday",
    Day.SUN: "Sunday",
}

MEAL_NAMES: dict[Meal, str] = {
    Meal.BREAKFAST: "Breakfast",
    Meal.LUNCH: "Lunch",
    Meal.DINNER: "Dinner",
}

STATUS_LABELS: dict[MealSlotStatus, str] = {
    MealSlotStatus.FULL: "cooking",
    MealSlotStatus.COFFEE: "light",
    MealSlotStatus.SOUP: "soup",
    MealSlotStatus.SKIP: "skip",
}

# Label used when both members share the same status
SHARED_STATUS_LABELS: dict[MealSlotStatus, str] = {
    MealSlotStatus.FULL: "cooking",
    MealSlotStatus.COFFEE: "light (both)",
    MealSlotStatus.SOUP: "soup (both)",
    MealSlotStatus.SKIP: "no one eats",
}

PERSON_NAMES: dict[PersonId, str] = {
    PersonId.VITALIK: "Vitalik",
    PersonId.LENA: "Lena",
}

CATEGORY_DESCRIPTIONS: dict[Category, str] = {
    Category.DAIRY: "dairy (eggs, milk, cheese, yogurt, sour cream, cottage cheese)",
    Category.MEAT: "meat and fish",
    Category.PRODUCE: "vegetables and fruit",
    Category.PANTRY: "dry goods (grains, pasta, canned goods, jarred sauces)",
    Category.FROZEN: "frozen food",
    Category.BAKERY: "bread and pastries",
    Category.CONDIMENTS: "sauces and seasonings",
}

# Click order in the schedule grid
STATUS_CYCLE: list[MealSlotStatus] = [
    MealSlotStatus.FULL,
    MealSlotStatus.COFFEE,
    MealSlotStatus.SOUP,
    MealSlotStatus.SKIP,
]

for _enum, _table in (
    (CuisineId, CUISINE_NAMES),
    (Day, DAY_NAMES),
    (Meal, MEAL_NAMES),
    (MealSlotStatus, STATUS_LABELS),
    (MealSlotStatus, SHARED_STATUS_LABELS),
    (PersonId, PERSON_NAMES),
    (Category, CATEGORY_DESCRIPTIONS),
    (MealSlotStatus, STATUS_CYCLE),
):
    _missing = set(_enum) - set(_table)
    if _missing:
        raise RuntimeError(f"rule table for {_enum.__name__} is missing {_missing}")


WEEKDAY_SCHEDULE = DaySchedule(
    breakfast=MealSlotStatus.FULL,
    lunch=MealSlotStatus.SKIP,
    dinner=MealSlotStatus.FULL,
)

WEEKEND_SCHEDULE = DaySchedule(
    breakfast=MealSlotStatus.FULL,
    lunch=MealSlotStatus.FULL,
    dinner=MealSlotStatus.FULL,
)


def default_week_schedule() -> PersonWeekSchedule:
    return PersonWeekSchedule(
        mon=WEEKDAY_SCHEDULE,
        tue=WEEKDAY_SCHEDULE,
        wed=WEEKDAY_SCHEDULE,
        thu=WEEKDAY_SCHEDULE,
        fri=WEEKDAY_SCHEDULE,
        sat=WEEKEND_SCHEDULE,
        sun=WEEKEND_SCHEDULE,
    )


def default_app_state() -> AppState:
    return AppState(
        schedules=Schedules(vitalik=default_week_schedule(), lena=default_week_schedule()),
        selected_cuisines=list(DEFAULT_SELECTED_CUISINES),
        special_conditions="",
    )
