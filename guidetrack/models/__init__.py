"""
Data Models Package

This package contains all Pydantic models used in GuideTrack.
All data flowing through the system must conform to these schemas.
"""

from guidetrack.models.base import Money, RecordModel, generate_id, utc_now
from guidetrack.models.tour import (
    DEFAULT_COMMISSION_CATEGORIES,
    PAYMENT_STATUS_LABELS,
    TOUR_STATUS_LABELS,
    TOUR_TYPE_LABELS,
    Commission,
    PaymentStatus,
    Tip,
    TourEntry,
    TourStatus,
    TourType,
)
from guidetrack.models.records import (
    DEFAULT_EXPENSE_CATEGORIES,
    DEFAULT_SETTINGS,
    TR_MONTHS,
    Agency,
    AppSettings,
    Expense,
    UserProfile,
    default_agencies,
)
from guidetrack.models.reports import (
    AgencyReport,
    DashboardView,
    FinancialSummary,
    MonthlyReport,
    Period,
)
from guidetrack.models.validation import ValidationIssue, ValidationResult
from guidetrack.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Base
    "Money",
    "RecordModel",
    "generate_id",
    "utc_now",
    # Tour models
    "Commission",
    "PaymentStatus",
    "Tip",
    "TourEntry",
    "TourStatus",
    "TourType",
    "DEFAULT_COMMISSION_CATEGORIES",
    "PAYMENT_STATUS_LABELS",
    "TOUR_STATUS_LABELS",
    "TOUR_TYPE_LABELS",
    # Other records
    "Agency",
    "AppSettings",
    "Expense",
    "UserProfile",
    "DEFAULT_EXPENSE_CATEGORIES",
    "DEFAULT_SETTINGS",
    "TR_MONTHS",
    "default_agencies",
    # Reports
    "AgencyReport",
    "DashboardView",
    "FinancialSummary",
    "MonthlyReport",
    "Period",
    # Validation
    "ValidationIssue",
    "ValidationResult",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
