"""Recurring Schedule Domain Value

Schedule embedded in a recurring (template) invoice and the calendar
arithmetic that advances it.
"""

from calendar import monthrange
from datetime import datetime, timedelta
from enum import Enum
from typing import Optional

from pydantic import Field

from src.domain.base import BaseModel


class RecurringFrequency(str, Enum):
    """How often a recurring invoice fires"""
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    YEARLY = "yearly"


MONTHS_PER_PERIOD = {
    RecurringFrequency.MONTHLY: 1,
    RecurringFrequency.QUARTERLY: 3,
    RecurringFrequency.YEARLY: 12,
}


class RecurringSchedule(BaseModel):
    """
    Recurring Schedule - drives automatic generation of follow-on invoices

    Domain Rules:
    - interval >= 1 (e.g. interval=2 with monthly = every two months)
    - next_invoice_date only ever moves forward
    - end_date is optional (None = runs until deactivated)
    - is_active can be toggled without touching the dates
    """

    frequency: RecurringFrequency = Field(
        default=RecurringFrequency.MONTHLY,
        description="Recurrence unit (weekly, monthly, quarterly, yearly)"
    )

    interval: int = Field(
        default=1,
        ge=1,
        description="Number of frequency units between invoices"
    )

    start_date: datetime = Field(
        description="First date the schedule applies"
    )

    end_date: Optional[datetime] = Field(
        default=None,
        description="Optional last date (exclusive) for generation"
    )

    next_invoice_date: datetime = Field(
        description="Date the next invoice becomes due for generation"
    )

    is_active: bool = Field(
        default=True,
        description="Paused schedules are never due"
    )


def add_months(value: datetime, months: int) -> datetime:
    """Add calendar months, clamping the day to the end of the target month"""
    month_index = value.month - 1 + months
    year = value.year + month_index // 12
    month = month_index % 12 + 1
    _, last_day = monthrange(year, month)
    return value.replace(year=year, month=month, day=min(value.day, last_day))


def calculate_next_invoice_date(
    current: datetime, frequency: RecurringFrequency, interval: int = 1
) -> datetime:
    """
    Compute the occurrence after ``current``

    The step is applied to the current next_invoice_date (not to "now") so
    a delayed run does not shift the schedule.

    Args:
        current: Current next_invoice_date
        frequency: Recurrence unit
        interval: Number of units to advance (values below 1 count as 1)

    Returns:
        Following occurrence date
    """
    interval = max(1, interval)
    frequency = RecurringFrequency(frequency)
    if frequency == RecurringFrequency.WEEKLY:
        return current + timedelta(days=7 * interval)
    return add_months(current, MONTHS_PER_PERIOD[frequency] * interval)
