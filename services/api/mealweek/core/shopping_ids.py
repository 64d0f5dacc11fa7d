import hashlib

from ..schemas import ShoppingItem, ShoppingItemWithId, ShoppingTrip, ShoppingTripWithIds

ID_LENGTH = 16


def shopping_item_id(trip_index: int, item_index: int, item: ShoppingItem) -> str:
    """Stable id from an item's position and content.

    Checked state is stored by id, so an unchanged list keeps its ticks after
    being regenerated.
    """
    h = hashlib.sha256()
    for part in (
        str(trip_index),
        str(item_index),
        item.name.strip().lower(),
        item.amount.strip(),
        item.category.value,
    ):
        h.update(part.encode("utf-8"))
        h.update(b"|")
    return h.hexdigest()[:ID_LENGTH]


def attach_item_ids(trips: list[ShoppingTrip]) -> list[ShoppingTripWithIds]:
    return [
        ShoppingTripWithIds(
            label=trip.label,
            items=[
                ShoppingItemWithId(**item.model_dump(), id=shopping_item_id(t_idx, i_idx, item))
                for i_idx, item in enumerate(trip.items)
            ],
        )
        for t_idx, trip in enumerate(trips)
    ]
