"""Date manipulation utilities"""

from datetime import date
from typing import Optional, Tuple


def current_tax_year(today: Optional[date] = None) -> int:
    """Tax year is the calendar year"""
    return (today or date.today()).year


def tax_year_bounds(year: int) -> Tuple[date, date]:
    """First and last day of a tax year (inclusive)"""
    return date(year, 1, 1), date(year, 12, 31)
