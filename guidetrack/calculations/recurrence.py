"""
Recurring expense materialisation.

A recurring expense is expanded once, at creation time, into one
independent Expense per month. There is no recurrence rule evaluated at
query time and no series object: editing or deleting one generated
expense leaves the others untouched.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from guidetrack.calculations.dates import add_months
from guidetrack.models.base import utc_now
from guidetrack.models.records import Expense

MAX_RECURRENCE_MONTHS = 60


def clamp_recurrence_months(months: Optional[int], max_months: int = MAX_RECURRENCE_MONTHS) -> int:
    """Series length forced into 1..max_months; missing or zero becomes 1."""
    return max(1, min(max_months, months or 1))


def expand_recurring_expense(
    title: str,
    amount: Decimal,
    category: str,
    start: date,
    is_recurring: bool = False,
    recurrence_months: Optional[int] = None,
    notes: Optional[str] = None,
    created_at: Optional[datetime] = None,
    max_months: int = MAX_RECURRENCE_MONTHS,
) -> list[Expense]:
    """
    Build the Expense records for one form submission.

    Non-recurring input yields a single expense. Recurring input yields
    one expense per month starting at start; a day that does not exist
    in a shorter month (e.g. the 31st) moves to that month's last day.
    """
    months = clamp_recurrence_months(recurrence_months, max_months) if is_recurring else 1
    created_at = created_at or utc_now()

    return [
        Expense(
            title=title.strip(),
            amount=amount,
            category=category,
            date=add_months(start, offset),
            is_recurring=is_recurring,
            recurrence_months=months if is_recurring else None,
            notes=(notes or "").strip() or None,
            created_at=created_at,
        )
        for offset in range(months)
    ]
