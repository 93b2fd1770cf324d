"""
Derived Report Models

FinancialSummary, MonthlyReport and AgencyReport are outputs only.
They are recomputed on every query and never persisted.
"""

from decimal import Decimal
from enum import Enum

from pydantic import Field

from guidetrack.models.base import Money, RecordModel
from guidetrack.models.tour import TourEntry


class Period(str, Enum):
    """Dashboard period filter applied before aggregation."""
    MONTH = "month"
    YEAR = "year"
    ALL = "all"


class FinancialSummary(RecordModel):
    """
    Income breakdown and profit figures over a set of tours and expenses.

    paid_amount sums the BASE income of PAID tours, not the recorded
    paid_amount field of each tour.
    """

    total_income: Money = Decimal("0")
    total_daily_rates: Money = Decimal("0")
    total_tips: Money = Decimal("0")
    total_commissions: Money = Decimal("0")
    total_expenses: Money = Decimal("0")
    net_profit: Money = Decimal("0")
    net_margin: int = Field(
        default=0,
        description="Net profit as a whole percentage of total income"
    )
    unpaid_amount: Money = Decimal("0")
    paid_amount: Money = Decimal("0")


class MonthlyReport(RecordModel):
    """Totals for one calendar month (tours bucketed by start date)."""

    month: int = Field(..., ge=1, le=12)
    year: int
    total_income: Money
    total_expenses: Money
    net_profit: Money
    tour_count: int = Field(..., ge=0)


class AgencyReport(RecordModel):
    """Totals for the tours booked through one agency."""

    agency_id: str
    agency_name: str
    tour_count: int = Field(..., ge=0)
    total_daily_rates: Money
    total_commissions: Money
    total_tips: Money
    total_income: Money
    unpaid_amount: Money


class DashboardView(RecordModel):
    """What the home screen shows for one period."""

    period: Period
    summary: FinancialSummary
    upcoming_tours: list[TourEntry] = Field(default_factory=list)
    tour_count: int = Field(default=0, ge=0)
    expense_count: int = Field(default=0, ge=0)
