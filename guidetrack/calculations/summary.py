"""
Financial aggregation over a collection of tours and expenses.

Period-agnostic: callers filter the collections (see
guidetrack.calculations.dates.filter_by_period) before calling.
"""

from decimal import Decimal
from typing import Iterable

from guidetrack.calculations.currency import round_half_up
from guidetrack.calculations.metrics import (
    ZERO,
    get_tour_base_income,
    get_tour_commissions_total,
    get_tour_tips_total,
)
from guidetrack.models.records import Expense
from guidetrack.models.reports import FinancialSummary
from guidetrack.models.tour import PaymentStatus, TourEntry


def unpaid_total(tours: Iterable[TourEntry]) -> Decimal:
    """
    Outstanding base income over every tour that is not PAID.

    Tips and commissions are collected in person and are never
    considered receivable.
    """
    return sum(
        (
            get_tour_base_income(tour) - tour.paid_amount
            for tour in tours
            if tour.payment_status != PaymentStatus.PAID
        ),
        ZERO,
    )


def net_margin(net_profit: Decimal, total_income: Decimal) -> int:
    """Net profit as a whole percentage of income; 0 when there is no income."""
    if total_income <= 0:
        return 0
    return round_half_up(net_profit / total_income * 100)


def calculate_financial_summary(
    tours: Iterable[TourEntry],
    expenses: Iterable[Expense],
) -> FinancialSummary:
    tours = list(tours)

    total_daily_rates = ZERO
    total_tips = ZERO
    total_commissions = ZERO
    paid_amount = ZERO

    for tour in tours:
        base = get_tour_base_income(tour)
        total_daily_rates += base
        total_tips += get_tour_tips_total(tour)
        total_commissions += get_tour_commissions_total(tour)
        # PAID tours count as paid in full, whatever paid_amount says
        if tour.payment_status == PaymentStatus.PAID:
            paid_amount += base

    total_income = total_daily_rates + total_tips + total_commissions
    total_expenses = sum((expense.amount for expense in expenses), ZERO)
    net_profit = total_income - total_expenses

    return FinancialSummary(
        total_income=total_income,
        total_daily_rates=total_daily_rates,
        total_tips=total_tips,
        total_commissions=total_commissions,
        total_expenses=total_expenses,
        net_profit=net_profit,
        net_margin=net_margin(net_profit, total_income),
        unpaid_amount=unpaid_total(tours),
        paid_amount=paid_amount,
    )
