"""
Booking overlap detection.

Advisory only: a conflict produces a warning for the user, never a
refused save. Guides do take overlapping bookings from different
agencies on purpose.
"""

from typing import Iterable, Optional

from guidetrack.calculations.dates import DateLike, parse_date_string
from guidetrack.models.tour import TourEntry


def find_conflicts(
    new_start: DateLike,
    new_end: DateLike,
    existing_tours: Iterable[TourEntry],
    exclude_id: Optional[str] = None,
) -> list[TourEntry]:
    """
    Existing tours whose inclusive date range overlaps [new_start, new_end].

    The tour with id exclude_id (the one being edited) is skipped.
    """
    start = parse_date_string(new_start)
    end = parse_date_string(new_end)
    return [
        tour
        for tour in existing_tours
        if tour.id != exclude_id
        and start <= tour.end_date
        and end >= tour.start_date
    ]


def has_conflict(
    new_start: DateLike,
    new_end: DateLike,
    existing_tours: Iterable[TourEntry],
    exclude_id: Optional[str] = None,
) -> bool:
    return bool(find_conflicts(new_start, new_end, existing_tours, exclude_id))
