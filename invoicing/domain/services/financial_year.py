# invoicing/domain/services/financial_year.py
"""
Indian financial year helpers.

FY runs April to March and is labelled ``YYYY-YY``:
  - 2025-02-10 -> 2024-25  (Feb 2025 falls in FY Apr 2024 - Mar 2025)
  - 2025-04-01 -> 2025-26  (Apr 2025 starts FY 2025-26)
"""

from __future__ import annotations

from datetime import date


def _fy_start_year(on: date) -> int:
    return on.year if on.month >= 4 else on.year - 1


def get_financial_year(on: date | None = None) -> str:
    on = on or date.today()
    start = _fy_start_year(on)
    return f"{start}-{(start + 1) % 100:02d}"


def get_financial_year_start(on: date | None = None) -> date:
    on = on or date.today()
    return date(_fy_start_year(on), 4, 1)


def get_financial_year_end(on: date | None = None) -> date:
    on = on or date.today()
    return date(_fy_start_year(on) + 1, 3, 31)


def is_same_financial_year(first: date, second: date) -> bool:
    return get_financial_year(first) == get_financial_year(second)


def get_quarter_from_month(month: int) -> str:
    """FY quarter for a calendar month (1-12)."""
    if 4 <= month <= 6:
        return "Q1"
    if 7 <= month <= 9:
        return "Q2"
    if 10 <= month <= 12:
        return "Q3"
    return "Q4"


def get_quarter(on: date | None = None) -> str:
    on = on or date.today()
    return get_quarter_from_month(on.month)
