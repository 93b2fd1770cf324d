"""Tests for per-tour metrics and the conflict detector."""

import pytest
from datetime import date, timedelta
from decimal import Decimal

from guidetrack.calculations.conflicts import find_conflicts, has_conflict
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
from guidetrack.models import PaymentStatus, TourStatus, TourType


class TestDuration:
    """Tests for billable day counts."""

    def test_full_day(self, make_tour):
        assert get_tour_duration_days(make_tour()) == 1

    def test_half_day(self, make_tour):
        assert get_tour_duration_days(make_tour(tour_type=TourType.HALF)) == Decimal("0.5")

    def test_half_day_ignores_dates(self, make_tour):
        tour = make_tour(start="2024-03-10", end="2024-03-14", tour_type=TourType.HALF)
        assert get_tour_duration_days(tour) == Decimal("0.5")

    def test_package_inclusive(self, make_tour):
        tour = make_tour(start="2024-03-10", end="2024-03-12", tour_type=TourType.PACKAGE)
        assert get_tour_duration_days(tour) == 3

    def test_package_across_month_end(self, make_tour):
        tour = make_tour(start="2024-02-28", end="2024-03-01", tour_type=TourType.PACKAGE)
        assert get_tour_duration_days(tour) == 3

    def test_end_before_start_counts_one_day(self, make_tour):
        tour = make_tour(start="2024-03-10", end="2024-03-08", tour_type=TourType.PACKAGE)
        assert get_tour_duration_days(tour) == 1

    def test_package_grows_one_day_per_day(self, make_tour):
        start = date(2024, 3, 10)
        previous = None
        for extra in range(0, 10):
            tour = make_tour(
                start=start.isoformat(),
                end=(start + timedelta(days=extra)).isoformat(),
                tour_type=TourType.PACKAGE,
            )
            days = get_tour_duration_days(tour)
            assert days >= 1
            if previous is not None:
                assert days == previous + 1
            previous = days


class TestIncome:
    """Tests for income figures of a single tour."""

    def test_single_tour_scenario(self, make_tour, tip, commission):
        tour = make_tour(
            start="2024-06-10",
            tips=[tip("200")],
            commissions=[commission("300")],
            payment_status=PaymentStatus.PARTIAL,
            paid_amount=Decimal("750"),
        )
        assert get_tour_duration_days(tour) == 1
        assert get_tour_base_income(tour) == Decimal("1500")
        assert get_tour_tips_total(tour) == Decimal("200")
        assert get_tour_commissions_total(tour) == Decimal("300")
        assert get_tour_total_income(tour) == Decimal("2000")
        assert get_tour_remaining_amount(tour) == Decimal("750")

    def test_half_day_base_income(self, make_tour):
        tour = make_tour(tour_type=TourType.HALF, rate="1500")
        assert get_tour_base_income(tour) == Decimal("750")

    def test_empty_extras_are_zero(self, make_tour):
        tour = make_tour()
        assert get_tour_tips_total(tour) == 0
        assert get_tour_commissions_total(tour) == 0

    @pytest.mark.parametrize("tour_type,end", [
        (TourType.HALF, "2024-03-10"),
        (TourType.FULL, "2024-03-10"),
        (TourType.PACKAGE, "2024-03-16"),
    ])
    def test_total_is_sum_of_parts(self, make_tour, tip, commission, tour_type, end):
        tour = make_tour(
            end=end,
            tour_type=tour_type,
            rate="1234.56",
            tips=[tip("10.10"), tip("0.20")],
            commissions=[commission("99.99")],
        )
        assert get_tour_total_income(tour) == (
            get_tour_base_income(tour)
            + get_tour_tips_total(tour)
            + get_tour_commissions_total(tour)
        )

    def test_remaining_negative_when_overpaid(self, make_tour):
        tour = make_tour(paid_amount=Decimal("2000"))
        assert get_tour_remaining_amount(tour) == Decimal("-500")


class TestStatus:
    """Tests for time-relative status."""

    def test_upcoming(self, make_tour):
        tour = make_tour(start="2024-03-20")
        assert get_tour_status(tour, date(2024, 3, 19)) == TourStatus.UPCOMING

    def test_current_on_start_and_end(self, make_tour):
        tour = make_tour(start="2024-03-10", end="2024-03-12", tour_type=TourType.PACKAGE)
        assert get_tour_status(tour, date(2024, 3, 10)) == TourStatus.CURRENT
        assert get_tour_status(tour, date(2024, 3, 11)) == TourStatus.CURRENT
        assert get_tour_status(tour, date(2024, 3, 12)) == TourStatus.CURRENT

    def test_past(self, make_tour):
        tour = make_tour(start="2024-03-10")
        assert get_tour_status(tour, date(2024, 3, 11)) == TourStatus.PAST

    def test_exactly_one_status_for_every_day(self, make_tour):
        tour = make_tour(start="2024-03-10", end="2024-03-12", tour_type=TourType.PACKAGE)
        seen = []
        for offset in range(-3, 6):
            seen.append(get_tour_status(tour, date(2024, 3, 10) + timedelta(days=offset)))
        assert seen == (
            [TourStatus.UPCOMING] * 3 + [TourStatus.CURRENT] * 3 + [TourStatus.PAST] * 3
        )

    def test_upcoming_tours_sorted_and_limited(self, make_tour, today):
        past = make_tour(start="2024-03-01", title="past")
        running = make_tour(start="2024-03-14", end="2024-03-16", tour_type=TourType.PACKAGE, title="running")
        later = make_tour(start="2024-04-01", title="later")
        soon = make_tour(start="2024-03-20", title="soon")
        latest = make_tour(start="2024-05-01", title="latest")

        upcoming = get_upcoming_tours([later, past, latest, soon, running], limit=3, today=today)

        assert [t.title for t in upcoming] == ["running", "soon", "later"]


class TestConflicts:
    """Tests for overlap detection."""

    def test_overlap_found(self, make_tour):
        existing = make_tour(start="2024-03-10", end="2024-03-12", tour_type=TourType.PACKAGE)
        assert find_conflicts("2024-03-11", "2024-03-11", [existing]) == [existing]

    def test_boundaries_are_inclusive(self, make_tour):
        existing = make_tour(start="2024-03-10", end="2024-03-12", tour_type=TourType.PACKAGE)
        assert has_conflict("2024-03-12", "2024-03-14", [existing])
        assert has_conflict("2024-03-08", "2024-03-10", [existing])

    def test_adjacent_days_do_not_conflict(self, make_tour):
        existing = make_tour(start="2024-03-10", end="2024-03-12", tour_type=TourType.PACKAGE)
        assert not has_conflict("2024-03-13", "2024-03-15", [existing])
        assert not has_conflict("2024-03-07", "2024-03-09", [existing])

    def test_edited_tour_is_excluded(self, make_tour):
        existing = make_tour(start="2024-03-10")
        assert not has_conflict("2024-03-10", "2024-03-10", [existing], exclude_id=existing.id)

    def test_accepts_dates_and_strings(self, make_tour):
        existing = make_tour(start="2024-03-10")
        assert has_conflict(date(2024, 3, 10), "2024-03-10", [existing])

    @pytest.mark.parametrize("first,second", [
        (("2024-03-01", "2024-03-05"), ("2024-03-05", "2024-03-09")),
        (("2024-03-01", "2024-03-05"), ("2024-03-06", "2024-03-09")),
        (("2024-03-01", "2024-03-31"), ("2024-03-10", "2024-03-11")),
        (("2024-03-10", "2024-03-10"), ("2024-03-10", "2024-03-10")),
    ])
    def test_symmetric(self, make_tour, first, second):
        as_tour_a = make_tour(start=first[0], end=first[1], tour_type=TourType.PACKAGE)
        as_tour_b = make_tour(start=second[0], end=second[1], tour_type=TourType.PACKAGE)

        assert has_conflict(first[0], first[1], [as_tour_b]) == has_conflict(
            second[0], second[1], [as_tour_a]
        )
