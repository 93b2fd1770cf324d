"""Shared fixtures: record factories and a fixed 'today'."""

from datetime import date
from decimal import Decimal

import pytest

from guidetrack.models import Agency, Commission, Expense, Tip, TourEntry, TourType


TODAY = date(2024, 3, 15)


@pytest.fixture
def today():
    return TODAY


@pytest.fixture
def make_tour():
    """Factory for TourEntry with sensible defaults."""

    def _make(
        start="2024-03-10",
        end=None,
        tour_type=TourType.FULL,
        rate="1500",
        agency_id="agency-2",
        **fields,
    ):
        return TourEntry(
            title=fields.pop("title", "Efes Antik Kenti"),
            type=tour_type,
            start_date=start,
            end_date=end or start,
            agency_id=agency_id,
            daily_rate=Decimal(rate),
            **fields,
        )

    return _make


@pytest.fixture
def make_expense():
    def _make(day="2024-03-05", amount="500", category="Ulaşım", **fields):
        return Expense(
            title=fields.pop("title", "Benzin"),
            amount=Decimal(amount),
            category=category,
            date=day,
            **fields,
        )

    return _make


@pytest.fixture
def tip():
    return lambda amount: Tip(amount=Decimal(amount))


@pytest.fixture
def commission():
    return lambda amount, category="Halı": Commission(category=category, amount=Decimal(amount))


@pytest.fixture
def agencies():
    return [
        Agency(id="agency-1", name="Özel Tur", default_daily_rate=Decimal("1500")),
        Agency(id="agency-2", name="TUI", default_daily_rate=Decimal("2000")),
    ]
