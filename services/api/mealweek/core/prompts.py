"""Prompt builders for meal plan, partial regeneration and shopping list generation.

All builders are pure: the same input always yields the same text. Sections
are separated by a blank line and always appear in the same order.
"""

from typing import Iterable, Optional

from ..schemas import AppState, DayPlan, DAYS_ORDER, MEALS_ORDER, MealSlot, PEOPLE
from .rules import (
    BANNED_INGREDIENTS,
    CATEGORY_DESCRIPTIONS,
    COOKING_TIME,
    CUISINE_NAMES,
    DAY_NAMES,
    EXCLUDED_CUISINES,
    HOUSEHOLD_LOCATION,
    MEAL_NAMES,
    MEAT_RULES,
    PANTRY_STAPLES,
    TARGET_LANGUAGE,
)
from .slots import SlotInfo, resolve_slot

REPLACE_MARKER = "<- REPLACE"

_WEEK_PLAN_FORMAT = """{
  "weekPlan": [
    {
      "day": "mon",
      "breakfast": { "name": "Dish name", "time": 15, "portions": 2 } | null,
      "lunch": { "name": "...", "time": 30, "portions": 2 } | null,
      "dinner": { "name": "...", "time": 45, "portions": 2 } | null
    },
    ...for all 7 days
  ]
}"""

_DAY_ORDER_TEXT = ", ".join(d.value for d in DAYS_ORDER)


def _slot_text(info: SlotInfo) -> str:
    if info.portions == 0:
        return "null"
    return f"{info.portions} portions ({info.description})"


def _role_section(extra: Optional[str] = None) -> str:
    text = f"ROLE\nYou are a meal planner for a family of {len(PEOPLE)} living in {HOUSEHOLD_LOCATION}."
    if extra:
        text += f"\n{extra}"
    return text


def _schedule_section(state: AppState) -> str:
    lines = []
    for day in DAYS_ORDER:
        meals = [
            f"{MEAL_NAMES[meal]}: {_slot_text(resolve_slot(state, day, meal))}"
            for meal in MEALS_ORDER
        ]
        lines.append(f"{DAY_NAMES[day]}: {', '.join(meals)}")
    schedule = "\n".join(lines)

    return f"""MEAL STRUCTURE
Weekly schedule:
{schedule}

Rules:
- "null" means no dish is needed: put null in the answer
- "light" means a simple quick dish (sandwich, omelette, porridge)
- "soup" means a soup is expected for that meal
- The number of portions is given for every meal"""


def _rule_sections(state: AppState) -> list[str]:
    selected = ", ".join(CUISINE_NAMES[c] for c in state.selected_cuisines)
    return [
        f"CUISINES\nSelected: {selected}\nExcluded: {', '.join(EXCLUDED_CUISINES)}",
        f"""INGREDIENT RESTRICTIONS
- Pork: {MEAT_RULES['pork']}
- Beef: {MEAT_RULES['beef']}
- Fish: {MEAT_RULES['fish']}
- Banned: {', '.join(BANNED_INGREDIENTS)}""",
        f"COOKING TIME\n- Optimal: {COOKING_TIME['optimal']} min\n- Maximum: {COOKING_TIME['max']} min",
    ]


def _optional_sections(state: AppState, previous_meals: Optional[Iterable[str]]) -> list[str]:
    sections = []
    conditions = state.special_conditions.strip()
    if conditions:
        sections.append(f"SPECIAL CONDITIONS THIS WEEK\n{conditions}")

    meals = [m for m in (previous_meals or []) if m]
    if meals:
        sections.append(
            "PREVIOUS WEEK'S MEALS (do not repeat)\n" + "\n".join(f"- {m}" for m in meals)
        )
    return sections


def build_meal_plan_prompt(state: AppState, previous_meals: Optional[Iterable[str]] = None) -> str:
    """Build the full week plan generation prompt."""
    sections = [_role_section(), _schedule_section(state)]
    sections.extend(_rule_sections(state))
    sections.extend(_optional_sections(state, previous_meals))

    sections.append(f"""OUTPUT FORMAT
JSON object:
{_WEEK_PLAN_FORMAT}

IMPORTANT:
- All dish names in {TARGET_LANGUAGE}
- Days in order: {_DAY_ORDER_TEXT}
- time is the cooking time in minutes
- Do not repeat dishes within the week
- Variety: alternate cuisines and dish types""")

    return "\n\n".join(sections)


def build_partial_regeneration_prompt(
    state: AppState,
    current_plan: list[DayPlan],
    slots_to_regenerate: Iterable[MealSlot],
    previous_meals: Optional[Iterable[str]] = None,
) -> str:
    """Build a prompt that replaces only the given slots of ``current_plan``."""
    marked = sorted(set(slots_to_regenerate), key=lambda s: s.sort_key)
    marked_set = set(marked)

    sections = [_role_section("You must REPLACE only the marked dishes and keep all the others.")]

    plan_lines = []
    for day_plan in current_plan:
        meals = []
        for meal in MEALS_ORDER:
            item = day_plan.meal(meal)
            marker = f" {REPLACE_MARKER}" if MealSlot(day=day_plan.day, meal=meal) in marked_set else ""
            value = item.name if item else "null"
            meals.append(f"{MEAL_NAMES[meal]}: {value}{marker}")
        plan_lines.append(f"{DAY_NAMES[day_plan.day]}: {', '.join(meals)}")

    sections.append(
        f'CURRENT PLAN (dishes marked "{REPLACE_MARKER}" must be replaced with new ones)\n'
        + "\n".join(plan_lines)
    )

    slot_lines = [
        f"{DAY_NAMES[s.day]} — {MEAL_NAMES[s.meal]}: {_slot_text(resolve_slot(state, s.day, s.meal))}"
        for s in marked
    ]
    sections.append("SLOTS TO REPLACE\n" + "\n".join(slot_lines))

    sections.extend(_rule_sections(state))
    sections.extend(_optional_sections(state, previous_meals))

    sections.append(f"""OUTPUT FORMAT
JSON object with the FULL week plan (all 7 days):
{_WEEK_PLAN_FORMAT}

IMPORTANT:
- Return the FULL week plan (all 7 days)
- For slots NOT marked "{REPLACE_MARKER}" return EXACTLY the same dishes as now (same name, time and portions)
- For slots marked "{REPLACE_MARKER}" come up with NEW dishes
- A slot listed with null portions must stay null
- New dishes must differ from the ones currently in the plan
- All dish names in {TARGET_LANGUAGE}
- Days in order: {_DAY_ORDER_TEXT}""")

    return "\n\n".join(sections)


def build_shopping_list_prompt(week_plan: list[DayPlan], state: AppState) -> str:
    """Build the shopping list prompt for a confirmed week plan."""
    sections = ["TASK\nMake a shopping list for the following weekly meal plan."]

    plan_lines = []
    for day_plan in week_plan:
        meals = []
        for meal in MEALS_ORDER:
            item = day_plan.meal(meal)
            if item:
                meals.append(f"{MEAL_NAMES[meal]} — {item.name} ({item.time} min, {item.portions} portions)")
        if meals:
            plan_lines.append(f"{DAY_NAMES[day_plan.day]}: {'; '.join(meals)}")

    sections.append("MEAL PLAN\n" + "\n".join(plan_lines))

    sections.append("""OUTPUT FORMAT
JSON object:
{
  "shoppingTrips": [
    {
      "label": "Trip 1 (Mon-Thu)",
      "items": [
        { "name": "Eggs", "amount": "10 pcs", "category": "dairy", "forMeal": "Omelette" },
        { "name": "Chicken fillet", "amount": "600 g", "category": "meat" },
        ...
      ]
    },
    {
      "label": "Trip 2 (Fri-Sun)",
      "items": [...]
    }
  ]
}""")

    category_lines = [f"- {cat.value} — {desc}" for cat, desc in CATEGORY_DESCRIPTIONS.items()]
    sections.append("CATEGORIES (use only these IDs)\n" + "\n".join(category_lines))

    sections.append(f"""RULES:
- Merge identical ingredients (sum the quantities)
- Do NOT include basic staples: {', '.join(PANTRY_STAPLES)}
- Split into 2 trips: start of the week (Mon-Thu) and end of the week (Fri-Sun)
- All names in {TARGET_LANGUAGE}""")

    return "\n\n".join(sections)


def previous_meals_from_plan(week_plan: list[DayPlan]) -> list[str]:
    """Dish names of a week plan in day/meal order, empty slots skipped."""
    names = []
    for day_plan in week_plan:
        for meal in MEALS_ORDER:
            item = day_plan.meal(meal)
            if item is not None:
                names.append(item.name)
    return names
