"""
Per-tour derived values.

Every function here is a pure function of one TourEntry (plus "today"
for the status). Nothing is cached on the tour.

    total income = base income + tips total + commissions total
    base income  = daily rate x duration
"""

from datetime import date
from decimal import Decimal
from typing import Iterable, Optional

from guidetrack.models.tour import TourEntry, TourStatus, TourType


HALF_DAY = Decimal("0.5")
ZERO = Decimal("0")


def get_tour_duration_days(tour: TourEntry) -> Decimal:
    """
    Billable days for a tour.

    HALF tours always count 0.5 whatever their dates. Other tours count
    the inclusive calendar days between start and end, never less than 1.
    """
    if tour.type == TourType.HALF:
        return HALF_DAY
    days = (tour.end_date - tour.start_date).days + 1
    return Decimal(max(1, days))


def get_tour_base_income(tour: TourEntry) -> Decimal:
    return tour.daily_rate * get_tour_duration_days(tour)


def get_tour_tips_total(tour: TourEntry) -> Decimal:
    return sum((tip.amount for tip in tour.tips), ZERO)


def get_tour_commissions_total(tour: TourEntry) -> Decimal:
    return sum((commission.amount for commission in tour.commissions), ZERO)


def get_tour_total_income(tour: TourEntry) -> Decimal:
    return (
        get_tour_base_income(tour)
        + get_tour_tips_total(tour)
        + get_tour_commissions_total(tour)
    )


def get_tour_remaining_amount(tour: TourEntry) -> Decimal:
    """Base income still to be received. Negative when overpaid."""
    return get_tour_base_income(tour) - tour.paid_amount


def get_tour_status(tour: TourEntry, today: Optional[date] = None) -> TourStatus:
    """
    Where today falls relative to the inclusive [start, end] range.

    Evaluated against the clock on every call; a tour moves from
    UPCOMING to CURRENT to PAST without any stored transition.
    """
    today = today or date.today()
    if today < tour.start_date:
        return TourStatus.UPCOMING
    if today > tour.end_date:
        return TourStatus.PAST
    return TourStatus.CURRENT


def get_upcoming_tours(
    tours: Iterable[TourEntry],
    limit: int = 3,
    today: Optional[date] = None,
) -> list[TourEntry]:
    """Tours that are not yet over, soonest first."""
    today = today or date.today()
    pending = [tour for tour in tours if get_tour_status(tour, today) != TourStatus.PAST]
    pending.sort(key=lambda tour: tour.start_date)
    return pending[:limit]
