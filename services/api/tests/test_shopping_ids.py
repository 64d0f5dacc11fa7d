from mealweek.core.shopping_ids import ID_LENGTH, attach_item_ids, shopping_item_id
from mealweek.schemas import Category, ShoppingItem, ShoppingTrip


def _trips():
    return [
        ShoppingTrip(label="Trip 1 (Mon-Thu)", items=[
            ShoppingItem(name="Eggs", amount="10 pcs", category=Category.DAIRY, for_meal="Omelette"),
            ShoppingItem(name="Chicken fillet", amount="600 g", category=Category.MEAT),
        ]),
        ShoppingTrip(label="Trip 2 (Fri-Sun)", items=[
            ShoppingItem(name="Eggs", amount="10 pcs", category=Category.DAIRY),
        ]),
    ]


def test_ids_are_stable_across_calls():
    first = attach_item_ids(_trips())
    second = attach_item_ids(_trips())
    assert [i.id for t in first for i in t.items] == [i.id for t in second for i in t.items]


def test_ids_are_unique_within_a_list():
    ids = [i.id for t in attach_item_ids(_trips()) for i in t.items]
    assert len(ids) == len(set(ids))
    assert all(len(i) == ID_LENGTH for i in ids)


def test_same_item_in_different_trips_gets_different_ids():
    trips = attach_item_ids(_trips())
    assert trips[0].items[0].name == trips[1].items[0].name
    assert trips[0].items[0].id != trips[1].items[0].id


def test_name_case_and_whitespace_do_not_matter():
    a = ShoppingItem(name="Eggs", amount="10 pcs", category=Category.DAIRY)
    b = ShoppingItem(name="  eggs ", amount=" 10 pcs", category=Category.DAIRY)
    assert shopping_item_id(0, 0, a) == shopping_item_id(0, 0, b)


def test_for_meal_is_not_part_of_the_id():
    a = ShoppingItem(name="Eggs", amount="10 pcs", category=Category.DAIRY, for_meal="Omelette")
    b = ShoppingItem(name="Eggs", amount="10 pcs", category=Category.DAIRY)
    assert shopping_item_id(0, 0, a) == shopping_item_id(0, 0, b)


def test_amount_change_changes_id():
    a = ShoppingItem(name="Eggs", amount="10 pcs", category=Category.DAIRY)
    b = ShoppingItem(name="Eggs", amount="12 pcs", category=Category.DAIRY)
    assert shopping_item_id(0, 0, a) != shopping_item_id(0, 0, b)


def test_attach_keeps_fields():
    trip = attach_item_ids(_trips())[0]
    assert trip.label == "Trip 1 (Mon-Thu)"
    assert trip.items[0].for_meal == "Omelette"
    assert trip.items[1].category == Category.MEAT
