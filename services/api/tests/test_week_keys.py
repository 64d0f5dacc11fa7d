from datetime import date

import pytest

from mealweek.core.week_keys import (
    format_date_range,
    get_current_week_info,
    get_next_week_key,
    get_plan_key,
    get_previous_week_key,
    get_week_info_by_key,
    parse_week_key,
    week_key_for_date,
    weeks_in_year,
)
from mealweek.errors import ValidationFailed


def test_plan_key_is_zero_padded():
    assert get_plan_key(2025, 3) == "2025-03"
    assert get_plan_key(2025, 42) == "2025-42"


def test_keys_sort_chronologically():
    keys = [get_plan_key(2025, w) for w in (10, 2, 1, 52)] + [get_plan_key(2024, 52)]
    assert sorted(keys) == ["2024-52", "2025-01", "2025-02", "2025-10", "2025-52"]


def test_week_key_for_date_uses_iso_year():
    # Monday Dec 30 2024 belongs to week 1 of 2025
    assert week_key_for_date(date(2024, 12, 30)) == "2025-01"
    # Friday Jan 1 2021 still belongs to week 53 of 2020
    assert week_key_for_date(date(2021, 1, 1)) == "2020-53"


def test_next_and_previous_cross_year():
    assert get_next_week_key("2024-52") == "2025-01"
    assert get_previous_week_key("2025-01") == "2024-52"
    assert get_next_week_key("2020-53") == "2021-01"
    assert get_previous_week_key("2021-01") == "2020-53"


def test_next_then_previous_is_identity():
    for key in ("2025-01", "2025-26", "2020-53", "2026-52"):
        assert get_previous_week_key(get_next_week_key(key)) == key


def test_weeks_in_year():
    assert weeks_in_year(2020) == 53
    assert weeks_in_year(2021) == 52


@pytest.mark.parametrize("key,expected", [
    ("2025-02", "Jan 6-12"),
    ("2025-05", "Jan 27 - Feb 2"),
    ("2025-01", "Dec 30 - Jan 5"),
])
def test_format_date_range(key, expected):
    assert format_date_range(key) == expected


@pytest.mark.parametrize("bad", [
    "", "2025-1", "2025-W01", "25-01", "2025-00", "2021-53", "2025-54", "abcd-ef",
    "2025-02\n", " 2025-02",
    # Arabic-Indic digits
    "\u0662\u0660\u0662\u0665-\u0660\u0662",
])
def test_invalid_keys_rejected(bad):
    with pytest.raises(ValidationFailed) as exc:
        parse_week_key(bad)
    assert exc.value.status_code == 400
    assert exc.value.details[0]["field"] == "weekKey"


def test_week_info_by_key():
    info = get_week_info_by_key("2025-05")
    assert info.week_key == "2025-05"
    assert info.year == 2025
    assert info.week_number == 5
    assert info.date_range == "Jan 27 - Feb 2"


def test_current_week_info_for_given_day():
    info = get_current_week_info(today=date(2025, 1, 8))
    assert info.week_key == "2025-02"
    assert info.date_range == "Jan 6-12"
