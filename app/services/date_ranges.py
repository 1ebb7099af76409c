# app/services/date_ranges.py
#
# Date Range Utilities
# Calendar-month windows for monthly income/expense reports.

import calendar
from datetime import date, datetime
from typing import Optional, Tuple


def get_month_range(
    month: Optional[int] = None,
    year: Optional[int] = None,
    today: Optional[date] = None,
) -> Tuple[datetime, datetime, int, int]:
    """
    month: 0-indexed (0 = January) or None; year: e.g. 2024 or None.
    Returns (start, end_inclusive, month, year).

    The window is [first day 00:00:00, last day 23:59:59]. A missing year
    or month falls back to today's; callers holding a human 1-12 month
    must subtract 1 first.
    """
    today = today or date.today()

    target_year = year or today.year
    target_month = month if month is not None else today.month - 1

    if not (0 <= target_month <= 11):
        raise ValueError(f"month must be in 0..11, got {target_month}")

    start = datetime(target_year, target_month + 1, 1)
    last_day = calendar.monthrange(target_year, target_month + 1)[1]
    end = datetime(target_year, target_month + 1, last_day, 23, 59, 59)

    return start, end, target_month, target_year
