"""
Form Validation

DESIGN DECISION: The calculation core accepts whatever it is given.
Rejecting bad input is the job of this layer, which runs before a form
is saved.

Two severities:
- ERROR: blocks the save (missing title, non-positive rate, end before start)
- WARNING: shown to the user, never blocks (overlapping booking,
  paid amount above base income)

IMPORTANT: Validation NEVER silently fixes issues.
It reports them and lets the caller decide.
"""

from datetime import date
from decimal import Decimal
from typing import Iterable, Optional

from guidetrack.calculations.conflicts import find_conflicts
from guidetrack.calculations.dates import format_date_range
from guidetrack.calculations.metrics import HALF_DAY
from guidetrack.config import get_settings
from guidetrack.models.tour import TourEntry, TourType
from guidetrack.models.validation import ValidationIssue, ValidationResult


class FormValidator:
    """Validates tour, expense and agency form submissions."""

    def __init__(self, max_recurrence_months: Optional[int] = None):
        self._max_recurrence_months = (
            max_recurrence_months
            or get_settings().reports.max_recurrence_months
        )

    # ── Tours ──

    def validate_tour(
        self,
        title: str,
        tour_type: TourType,
        start_date: date,
        end_date: date,
        agency_id: str,
        daily_rate: Decimal,
        paid_amount: Decimal = Decimal("0"),
        existing_tours: Iterable[TourEntry] = (),
        tour_id: Optional[str] = None,
    ) -> ValidationResult:
        """
        Validate a tour form.

        Args:
            existing_tours: Tours to check for overlapping dates
            tour_id: Id of the tour being edited, excluded from the overlap check
        """
        issues = []

        if not title or not title.strip():
            issues.append(ValidationIssue(
                field="title",
                issue_type="missing",
                message="Tur adı zorunludur.",
                severity="error",
            ))

        if not agency_id:
            issues.append(ValidationIssue(
                field="agency",
                issue_type="missing",
                message="Ajans seçimi zorunludur.",
                severity="error",
            ))

        if daily_rate is None or daily_rate <= 0:
            issues.append(ValidationIssue(
                field="daily_rate",
                issue_type="invalid_value",
                message="Geçerli bir yevmiye girin.",
                severity="error",
                suggested_fix="Enter a daily rate greater than zero",
            ))

        if tour_type == TourType.PACKAGE and end_date < start_date:
            issues.append(ValidationIssue(
                field="end_date",
                issue_type="inconsistent",
                message="Bitiş tarihi başlangıçtan önce olamaz.",
                severity="error",
            ))
        elif tour_type != TourType.PACKAGE and end_date != start_date:
            issues.append(ValidationIssue(
                field="end_date",
                issue_type="inconsistent",
                message="Half and full day tours must end on their start date",
                severity="error",
                suggested_fix="Use a package tour for multi-day bookings",
            ))

        if daily_rate and daily_rate > 0 and end_date >= start_date:
            days = HALF_DAY if tour_type == TourType.HALF else Decimal((end_date - start_date).days + 1)
            base_income = daily_rate * days
            if paid_amount > base_income:
                issues.append(ValidationIssue(
                    field="paid_amount",
                    issue_type="suspicious_value",
                    message=f"Paid amount ({paid_amount}) exceeds base income ({base_income})",
                    severity="warning",
                    suggested_fix="Record tips and commissions separately",
                ))

        conflicts = find_conflicts(start_date, end_date, existing_tours, exclude_id=tour_id)
        if conflicts:
            clashing = ", ".join(
                f"{tour.title or tour.id} ({format_date_range(tour.start_date, tour.end_date)})"
                for tour in conflicts
            )
            issues.append(ValidationIssue(
                field="dates",
                issue_type="conflict",
                message="Bu tarihte başka bir tur var! Çakışma oluşabilir.",
                severity="warning",
                suggested_fix=f"Overlaps with: {clashing}",
            ))

        return ValidationResult(entity_type="tour", entity_id=tour_id, issues=issues)

    # ── Expenses ──

    def validate_expense(
        self,
        title: str,
        amount: Decimal,
        category: str,
        is_recurring: bool = False,
        recurrence_months: Optional[int] = None,
        expense_id: Optional[str] = None,
    ) -> ValidationResult:
        issues = []

        if not title or not title.strip():
            issues.append(ValidationIssue(
                field="title",
                issue_type="missing",
                message="Başlık zorunludur.",
                severity="error",
            ))

        if amount is None or amount <= 0:
            issues.append(ValidationIssue(
                field="amount",
                issue_type="invalid_value",
                message="Geçerli bir tutar girin.",
                severity="error",
            ))

        if not category:
            issues.append(ValidationIssue(
                field="category",
                issue_type="missing",
                message="Kategori seçimi zorunludur.",
                severity="error",
            ))

        if is_recurring and recurrence_months is not None and not (
            1 <= recurrence_months <= self._max_recurrence_months
        ):
            issues.append(ValidationIssue(
                field="recurrence_months",
                issue_type="out_of_range",
                message=(
                    f"Recurrence must be between 1 and {self._max_recurrence_months} months; "
                    "the value will be clamped"
                ),
                severity="warning",
            ))

        return ValidationResult(entity_type="expense", entity_id=expense_id, issues=issues)

    # ── Agencies ──

    def validate_agency(
        self,
        name: str,
        default_daily_rate: Decimal,
        agency_id: Optional[str] = None,
    ) -> ValidationResult:
        issues = []

        if not name or not name.strip():
            issues.append(ValidationIssue(
                field="name",
                issue_type="missing",
                message="Ajans adı zorunludur.",
                severity="error",
            ))

        if default_daily_rate is None or default_daily_rate < 0:
            issues.append(ValidationIssue(
                field="default_daily_rate",
                issue_type="invalid_value",
                message="Geçerli bir yevmiye girin.",
                severity="error",
            ))

        return ValidationResult(entity_type="agency", entity_id=agency_id, issues=issues)

    def get_user_friendly_summary(self, result: ValidationResult) -> str:
        """Plain-text summary of a validation result for display."""
        if result.is_valid and not result.warnings:
            return "All checks passed."

        lines = []
        if result.has_errors:
            lines.append("Please fix the following before saving:")
            for issue in result.issues:
                if issue.severity == "error":
                    lines.append(f"   • {issue.message}")
                    if issue.suggested_fix:
                        lines.append(f"     {issue.suggested_fix}")

        if result.warnings:
            if lines:
                lines.append("")
            lines.append("Please check:")
            for warning in result.warnings:
                lines.append(f"   • {warning}")

        return "\n".join(lines)


def agency_in_use(agency_id: str, tours: Iterable[TourEntry]) -> bool:
    """True while any tour references the agency; deletion must be blocked."""
    return any(tour.agency_id == agency_id for tour in tours)
