"""Per-slot portions and descriptions, plus the schedule status cycle."""

from dataclasses import dataclass

from ..schemas import AppState, Day, Meal, MealSlotStatus, PEOPLE, PersonId, Schedules
from .rules import PERSON_NAMES, SHARED_STATUS_LABELS, STATUS_CYCLE, STATUS_LABELS


@dataclass(frozen=True)
class SlotInfo:
    day: Day
    meal: Meal
    portions: int
    description: str


def is_eating(status: MealSlotStatus) -> bool:
    return status is not MealSlotStatus.SKIP


def resolve_slot(state: AppState, day: Day, meal: Meal) -> SlotInfo:
    """Calculate portions and description for a slot from both schedules."""
    statuses = [state.schedules.status(person, day, meal) for person in PEOPLE]
    portions = sum(1 for s in statuses if is_eating(s))

    if portions == 0:
        description = "no one eats"
    elif len(set(statuses)) == 1:
        description = SHARED_STATUS_LABELS[statuses[0]]
    else:
        description = ", ".join(
            f"{PERSON_NAMES[person]}: {STATUS_LABELS[status]}"
            for person, status in zip(PEOPLE, statuses)
        )

    return SlotInfo(day=day, meal=meal, portions=portions, description=description)


def next_status(status: MealSlotStatus) -> MealSlotStatus:
    idx = STATUS_CYCLE.index(status)
    return STATUS_CYCLE[(idx + 1) % len(STATUS_CYCLE)]


def toggle_schedule_slot(schedules: Schedules, person: PersonId, day: Day, meal: Meal) -> Schedules:
    """Return a copy of ``schedules`` with one slot advanced to its next status."""
    week = schedules.person(person)
    day_schedule = week.day(day)
    new_day = day_schedule.model_copy(update={meal.value: next_status(day_schedule.status(meal))})
    new_week = week.model_copy(update={day.value: new_day})
    return schedules.model_copy(update={person.value: new_week})
