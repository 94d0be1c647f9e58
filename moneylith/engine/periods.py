"""Calendar-month arithmetic used by the engine."""

import calendar
from datetime import date


def add_months(value: date, months: int) -> date:
    """Shift a date by a number of calendar months.

    The day is clamped to the last day of the target month,
    so 2024-03-31 minus one month is 2024-02-29.

    Args:
        value: Start date.
        months: Months to add (negative to go back).

    Returns:
        Shifted date.
    """
    index = value.year * 12 + (value.month - 1) + months
    year, month = divmod(index, 12)
    month += 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(value.day, last_day))


def month_difference(start: date, end: date) -> int:
    """Whole calendar months from start to end, ignoring the day.

    Negative when end lies in an earlier month than start.
    """
    return (end.year - start.year) * 12 + (end.month - start.month)


def months_spanned(start: date, end: date) -> int:
    """Number of calendar months touched from start to end, inclusive.

    January 15 to March 2 spans 3 months.
    """
    return month_difference(start, end) + 1


def lookback_cutoff(today: date, window_months: int) -> date:
    """First date inside a lookback window of window_months months.

    The window includes the current month, so a window of 1 starts today
    and a window of 6 starts five calendar months back.
    """
    return add_months(today, -(window_months - 1))
