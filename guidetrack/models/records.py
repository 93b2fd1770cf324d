"""
Agency, Expense, User and Settings Models

These are the remaining persisted collections next to tours.
All of them are plain data - no behaviour beyond schema checks.
"""

import datetime as dt
from decimal import Decimal
from typing import Literal, Optional

from pydantic import Field, field_validator

from guidetrack.models.base import Money, RecordModel, generate_id, utc_now


DEFAULT_EXPENSE_CATEGORIES = (
    "Kira",
    "Bağkur",
    "Ulaşım",
    "Yemek",
    "Fatura",
    "Telefon",
    "Sağlık",
    "Diğer",
)

TR_MONTHS = (
    "Ocak", "Şubat", "Mart", "Nisan", "Mayıs", "Haziran",
    "Temmuz", "Ağustos", "Eylül", "Ekim", "Kasım", "Aralık",
)


class Agency(RecordModel):
    """
    A booking source.

    default_daily_rate only pre-fills new tour forms; calculations always
    use the rate stored on the tour itself.
    """

    id: str = Field(default_factory=generate_id)
    name: str = Field(
        ...,
        min_length=1,
        max_length=200,
    )
    default_daily_rate: Money = Field(
        default=Decimal("0"),
        ge=0,
    )
    contact_person: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    notes: Optional[str] = None
    created_at: dt.datetime = Field(default_factory=utc_now)


class Expense(RecordModel):
    """
    A cost entry.

    Recurring expenses are materialised up front as one Expense per month
    (see guidetrack.calculations.recurrence). Each generated record is
    independent; recurrence_months only documents the series length.
    """

    id: str = Field(default_factory=generate_id)
    title: str = Field(
        ...,
        min_length=1,
        max_length=200,
    )
    amount: Money = Field(
        ...,
        ge=0,
    )
    category: str = Field(
        ...,
        min_length=1,
        max_length=100,
    )
    date: dt.date
    is_recurring: bool = False
    recurrence_months: Optional[int] = Field(
        default=None,
        ge=1,
    )
    notes: Optional[str] = None
    created_at: dt.datetime = Field(default_factory=utc_now)


class UserProfile(RecordModel):
    """The device owner. is_premium is carried as data only."""

    id: str = Field(default_factory=generate_id)
    name: str
    email: Optional[str] = None
    is_premium: bool = False
    premium_expires_at: Optional[dt.datetime] = None
    created_at: dt.datetime = Field(default_factory=utc_now)


class AppSettings(RecordModel):
    """User-editable preferences persisted with the data."""

    default_daily_rate: Money = Field(
        default=Decimal("1500"),
        ge=0,
    )
    notifications_enabled: bool = True
    first_day_of_week: Literal[0, 1] = Field(
        default=1,
        description="0 = Sunday, 1 = Monday"
    )

    @field_validator("first_day_of_week", mode="before")
    @classmethod
    def coerce_first_day(cls, v):
        # Older stored documents may carry the value as a string
        if isinstance(v, str) and v.strip() in {"0", "1"}:
            return int(v)
        return v


DEFAULT_SETTINGS = AppSettings()


def default_agencies() -> list[Agency]:
    """Agencies seeded into an empty store."""
    return [
        Agency(id="agency-1", name="Özel Tur", default_daily_rate=Decimal("1500")),
        Agency(id="agency-2", name="TUI", default_daily_rate=Decimal("2000")),
        Agency(id="agency-3", name="Neckermann", default_daily_rate=Decimal("1800")),
        Agency(id="agency-4", name="Thomas Cook", default_daily_rate=Decimal("1800")),
    ]
