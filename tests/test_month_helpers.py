from datetime import date

import pytest

from app.services.month_helpers import (
    add_months,
    create_month_string,
    get_month_range,
    last_of_month,
    month_ref_for,
    months_between,
    parse_month_string,
    shift_month,
)


def test_month_ref_is_zero_padded():
    assert month_ref_for(date(2024, 3, 9)) == "2024-03"
    assert create_month_string(2024, 11) == "2024-11"


def test_parse_month_string():
    assert parse_month_string("2024-02") == (2024, 2)
    with pytest.raises(ValueError):
        parse_month_string("2024-13")
    with pytest.raises(ValueError):
        parse_month_string("february")


def test_shift_month_crosses_years():
    assert shift_month(2024, 12, 1) == (2025, 1)
    assert shift_month(2024, 1, -1) == (2023, 12)
    assert shift_month(2024, 5, 0) == (2024, 5)


def test_add_months_clamps_to_month_end():
    assert add_months(date(2024, 1, 31), 1) == date(2024, 2, 29)
    assert add_months(date(2023, 1, 31), 1) == date(2023, 2, 28)
    assert add_months(date(2024, 1, 31), 2) == date(2024, 3, 31)
    assert add_months(date(2024, 1, 15), 12) == date(2025, 1, 15)


def test_months_between():
    assert months_between(date(2024, 1, 15), date(2024, 3, 1)) == 2
    assert months_between(date(2024, 11, 30), date(2025, 2, 1)) == 3
    assert months_between(date(2024, 5, 1), date(2024, 5, 31)) == 0


def test_month_range():
    assert get_month_range(2024, 12) == (date(2024, 12, 1), date(2025, 1, 1))
    assert last_of_month(2024, 2) == date(2024, 2, 29)
