"""
Calculation core.

Pure functions over immutable snapshots: no storage access, no mutation
of inputs, no logging. State flows in as parameters and out as values.
"""

from guidetrack.calculations.conflicts import find_conflicts, has_conflict
from guidetrack.calculations.currency import (
    format_currency,
    parse_turkish_number,
    round_half_up,
)
from guidetrack.calculations.dates import (
    add_months,
    filter_by_month,
    filter_by_period,
    filter_by_year,
    format_date,
    format_date_range,
    parse_date_string,
    to_date_string,
)
from guidetrack.calculations.metrics import (
    get_tour_base_income,
    get_tour_commissions_total,
    get_tour_duration_days,
    get_tour_remaining_amount,
    get_tour_status,
    get_tour_tips_total,
    get_tour_total_income,
    get_upcoming_tours,
)
from guidetrack.calculations.recurrence import expand_recurring_expense
from guidetrack.calculations.reports import (
    build_agency_reports,
    build_monthly_reports,
    rank_agency_reports,
)
from guidetrack.calculations.summary import calculate_financial_summary

__all__ = [
    # Dates and currency
    "add_months",
    "filter_by_month",
    "filter_by_period",
    "filter_by_year",
    "format_currency",
    "format_date",
    "format_date_range",
    "parse_date_string",
    "parse_turkish_number",
    "round_half_up",
    "to_date_string",
    # Tour metrics
    "get_tour_base_income",
    "get_tour_commissions_total",
    "get_tour_duration_days",
    "get_tour_remaining_amount",
    "get_tour_status",
    "get_tour_tips_total",
    "get_tour_total_income",
    "get_upcoming_tours",
    # Conflicts
    "find_conflicts",
    "has_conflict",
    # Aggregation and reports
    "build_agency_reports",
    "build_monthly_reports",
    "calculate_financial_summary",
    "rank_agency_reports",
    # Recurrence
    "expand_recurring_expense",
]
