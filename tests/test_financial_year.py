"""Tests for Indian financial year helpers."""

from datetime import date

import pytest

from invoicing.domain.services.financial_year import (
    get_financial_year,
    get_financial_year_end,
    get_financial_year_start,
    get_quarter,
    get_quarter_from_month,
    is_same_financial_year,
)


@pytest.mark.parametrize(
    "on, label",
    [
        (date(2025, 2, 10), "2024-25"),
        (date(2025, 3, 31), "2024-25"),
        (date(2025, 4, 1), "2025-26"),
        (date(2025, 12, 31), "2025-26"),
        (date(1999, 6, 1), "1999-00"),
    ],
)
def test_financial_year_label(on, label):
    assert get_financial_year(on) == label


def test_financial_year_defaults_to_today():
    assert get_financial_year() == get_financial_year(date.today())


def test_financial_year_bounds():
    assert get_financial_year_start(date(2025, 2, 10)) == date(2024, 4, 1)
    assert get_financial_year_end(date(2025, 2, 10)) == date(2025, 3, 31)
    assert get_financial_year_start(date(2025, 4, 1)) == date(2025, 4, 1)


def test_same_financial_year():
    assert is_same_financial_year(date(2024, 4, 1), date(2025, 3, 31)) is True
    assert is_same_financial_year(date(2025, 3, 31), date(2025, 4, 1)) is False


@pytest.mark.parametrize(
    "month, quarter",
    [(4, "Q1"), (6, "Q1"), (7, "Q2"), (9, "Q2"), (10, "Q3"), (12, "Q3"), (1, "Q4"), (3, "Q4")],
)
def test_quarter_from_month(month, quarter):
    assert get_quarter_from_month(month) == quarter


def test_quarter_of_date():
    assert get_quarter(date(2025, 2, 10)) == "Q4"
