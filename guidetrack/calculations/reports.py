"""
Report builders.

Both builders recompute everything from the given collections on every
call. Data sets are personal-scale (hundreds of records), so there is
no incremental or cached state to go stale.
"""

from datetime import date
from typing import Iterable, Optional, Protocol

from guidetrack.calculations.dates import filter_by_month, month_window
from guidetrack.calculations.metrics import (
    ZERO,
    get_tour_base_income,
    get_tour_commissions_total,
    get_tour_tips_total,
    get_tour_total_income,
)
from guidetrack.calculations.summary import unpaid_total
from guidetrack.models.records import Expense
from guidetrack.models.reports import AgencyReport, MonthlyReport
from guidetrack.models.tour import TourEntry


class AgencyRef(Protocol):
    """Anything with an id and a name - an Agency or a lighter stand-in."""
    id: str
    name: str


def build_monthly_reports(
    tours: Iterable[TourEntry],
    expenses: Iterable[Expense],
    month_count: int = 12,
    today: Optional[date] = None,
) -> list[MonthlyReport]:
    """
    One report per calendar month, oldest first, ending with the current month.

    Tours are counted only in the month they start in, even when their
    end date spills into the next month.
    """
    tours = list(tours)
    expenses = list(expenses)
    reports = []

    for year, month in month_window(month_count, today):
        month_tours = filter_by_month(tours, year, month)
        month_expenses = filter_by_month(expenses, year, month)

        total_income = sum((get_tour_total_income(t) for t in month_tours), ZERO)
        total_expenses = sum((e.amount for e in month_expenses), ZERO)

        reports.append(MonthlyReport(
            month=month,
            year=year,
            total_income=total_income,
            total_expenses=total_expenses,
            net_profit=total_income - total_expenses,
            tour_count=len(month_tours),
        ))

    return reports


def build_agency_reports(
    tours: Iterable[TourEntry],
    agencies: Iterable[AgencyRef],
) -> list[AgencyReport]:
    """
    One report per supplied agency, in the order given.

    Agencies without tours are included with zero totals. Tours whose
    agency_id matches no supplied agency appear in no report.
    """
    tours = list(tours)
    reports = []

    for agency in agencies:
        agency_tours = [t for t in tours if t.agency_id == agency.id]
        total_daily_rates = sum((get_tour_base_income(t) for t in agency_tours), ZERO)
        total_tips = sum((get_tour_tips_total(t) for t in agency_tours), ZERO)
        total_commissions = sum((get_tour_commissions_total(t) for t in agency_tours), ZERO)

        reports.append(AgencyReport(
            agency_id=agency.id,
            agency_name=agency.name,
            tour_count=len(agency_tours),
            total_daily_rates=total_daily_rates,
            total_commissions=total_commissions,
            total_tips=total_tips,
            total_income=total_daily_rates + total_tips + total_commissions,
            unpaid_amount=unpaid_total(agency_tours),
        ))

    return reports


def rank_agency_reports(reports: Iterable[AgencyReport]) -> list[AgencyReport]:
    """Drop agencies without tours and order the rest by income, highest first."""
    active = [report for report in reports if report.tour_count > 0]
    return sorted(active, key=lambda report: report.total_income, reverse=True)
