"""Next review date for recurring tasks.

Month-based frequencies use calendar months, not fixed day counts: the day of
month is kept and clamped to the last day of a shorter target month
(Jan 31 + 1 month -> Feb 28, or Feb 29 in a leap year). Time of day and
tzinfo of the input are kept as-is.
"""

from __future__ import annotations

import calendar
from datetime import datetime, timedelta

from review_engine.domain.enums import TaskFrequency

_DAY_STEPS: dict[TaskFrequency, int] = {
    TaskFrequency.DAILY: 1,
    TaskFrequency.WEEKLY: 7,
}

_MONTH_STEPS: dict[TaskFrequency, int] = {
    TaskFrequency.MONTHLY: 1,
    TaskFrequency.QUARTERLY: 3,
    TaskFrequency.YEARLY: 12,
}


def add_months(value: datetime, months: int) -> datetime:
    """Return value shifted by whole calendar months, clamping the day of month."""
    month_index = value.month - 1 + months
    year = value.year + month_index // 12
    month = month_index % 12 + 1
    last_day = calendar.monthrange(year, month)[1]
    return value.replace(year=year, month=month, day=min(value.day, last_day))


def next_due_date(review_date: datetime, frequency: TaskFrequency) -> datetime:
    """Return when a task reviewed at review_date is due for review again.

    Raises:
        ValueError: frequency is not a TaskFrequency member.
    """
    frequency = TaskFrequency(frequency)
    if frequency in _DAY_STEPS:
        return review_date + timedelta(days=_DAY_STEPS[frequency])
    return add_months(review_date, _MONTH_STEPS[frequency])
