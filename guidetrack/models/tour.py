"""
Tour Models for GuideTrack

A tour is a single booked guiding engagement. Tips and commissions are
owned by their tour and only change as part of a tour update.

DESIGN DECISION: Income figures (base, tips, commissions, total) are
NEVER stored on the tour. They are derived on every read by
guidetrack.calculations.metrics so they can never drift apart.
"""

from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import Field

from guidetrack.models.base import Money, RecordModel, generate_id, utc_now


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class TourType(str, Enum):
    """
    Booking type.

    HALF and FULL tours cover a single calendar day (end == start).
    PACKAGE tours span several days.
    """
    HALF = "HALF"
    FULL = "FULL"
    PACKAGE = "PACKAGE"


class PaymentStatus(str, Enum):
    """Whether the base (daily rate) income of a tour has been received."""
    UNPAID = "UNPAID"
    PARTIAL = "PARTIAL"
    PAID = "PAID"


class TourStatus(str, Enum):
    """
    Time-relative lifecycle state.

    Never stored - recomputed from the wall clock on every read.
    """
    UPCOMING = "UPCOMING"
    CURRENT = "CURRENT"
    PAST = "PAST"


TOUR_TYPE_LABELS = {
    TourType.HALF: "Yarım Gün",
    TourType.FULL: "Tam Gün",
    TourType.PACKAGE: "Paket Tur",
}

PAYMENT_STATUS_LABELS = {
    PaymentStatus.UNPAID: "Ödenmedi",
    PaymentStatus.PARTIAL: "Kısmi Ödendi",
    PaymentStatus.PAID: "Ödendi",
}

TOUR_STATUS_LABELS = {
    TourStatus.UPCOMING: "Yaklaşan",
    TourStatus.CURRENT: "Aktif",
    TourStatus.PAST: "Geçmiş",
}

DEFAULT_COMMISSION_CATEGORIES = (
    "Halı",
    "Taş",
    "Seramik",
    "At Turu",
    "ATV Turu",
    "Yemek",
    "Balon",
    "Deri",
    "Kuru Yemiş",
    "Diğer",
)


# =============================================================================
# TOUR SUB-ENTRIES
# =============================================================================

class Tip(RecordModel):
    """A tip received during a tour."""

    id: str = Field(default_factory=generate_id)
    amount: Money = Field(
        ...,
        ge=0,
        description="Tip amount"
    )
    note: Optional[str] = None


class Commission(RecordModel):
    """
    Commission earned on a tour (shop visits, excursions, ...).

    The category is free text; DEFAULT_COMMISSION_CATEGORIES holds the
    suggestions offered by the form.
    """

    id: str = Field(default_factory=generate_id)
    category: str = Field(
        ...,
        min_length=1,
        max_length=100,
    )
    amount: Money = Field(
        ...,
        ge=0,
        description="Commission amount"
    )


# =============================================================================
# TOUR
# =============================================================================

class TourEntry(RecordModel):
    """
    A booked engagement.

    The daily rate is captured at booking time and is independent of the
    agency's current default rate.

    Not validated here (the form layer rejects these before save):
    - end_date before start_date
    - end_date != start_date for HALF/FULL tours
    - paid_amount above base income
    The calculations compute whatever the stored data implies.
    """

    id: str = Field(default_factory=generate_id)
    title: str = ""
    type: TourType = TourType.FULL
    start_date: date
    end_date: date
    agency_id: str = Field(
        ...,
        description="Weak reference to an Agency id"
    )
    daily_rate: Money = Field(
        ...,
        ge=0,
        description="Per-day rate for this booking"
    )
    payment_status: PaymentStatus = PaymentStatus.UNPAID
    paid_amount: Money = Field(
        default=Decimal("0"),
        description="Amount actually received"
    )
    paid_date: Optional[datetime] = None
    tips: list[Tip] = Field(default_factory=list)
    commissions: list[Commission] = Field(default_factory=list)
    notes: str = ""
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)
