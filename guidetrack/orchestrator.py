"""
Main Orchestrator for GuideTrack

This module ties together the store, the form validator, the calculation
core and the exporters, and defines the end-to-end flows for:
1. Recording work (tour form -> validate -> add/update -> persist)
2. Recording money (tips, commissions, payments, expenses)
3. Reading figures (dashboard, monthly and agency reports)
4. Getting data out and back in (CSV exports, JSON backups)

DESIGN DECISION: The orchestrator enforces the boundaries:
- Nothing is dispatched without passing form validation
- Conflicting bookings are reported, never refused
- An agency cannot be deleted while a tour references it
- Every change goes through the store, so every change is audited

Screens (or any other front end) talk to GuideTrackService only.
"""

from datetime import date
from decimal import Decimal
from pathlib import Path
from typing import Optional

import structlog

from guidetrack.audit import AuditLogger, create_correlation_id
from guidetrack.calculations import (
    build_agency_reports,
    build_monthly_reports,
    calculate_financial_summary,
    expand_recurring_expense,
    filter_by_period,
    format_currency,
    get_tour_base_income,
    get_upcoming_tours,
    rank_agency_reports,
)
from guidetrack.config import get_settings
from guidetrack.models.base import utc_now
from guidetrack.models.records import Agency, AppSettings, Expense, UserProfile
from guidetrack.models.reports import AgencyReport, DashboardView, MonthlyReport, Period
from guidetrack.models.tour import Commission, PaymentStatus, Tip, TourEntry, TourType
from guidetrack.models.validation import ValidationResult
from guidetrack.services.export import (
    build_combined_csv,
    build_expenses_csv,
    build_tours_csv,
    export_filename,
    write_export,
)
from guidetrack.services.storage import JsonFileStorage, StorageInterface
from guidetrack.state import (
    AddAgency,
    AddCommission,
    AddExpense,
    AddExpenseCategory,
    AddTip,
    AddTour,
    AppStore,
    DeleteAgency,
    DeleteExpense,
    DeleteTour,
    SetUser,
    UpdateAgency,
    UpdateExpense,
    UpdatePaymentStatus,
    UpdateSettings,
    UpdateTour,
)
from guidetrack.validation import FormValidator, agency_in_use


class ValidationFailedError(Exception):
    """A form submission had error-level issues and was not saved."""

    def __init__(self, result: ValidationResult):
        self.result = result
        messages = "; ".join(result.errors_by_field().values())
        super().__init__(f"{result.entity_type} not saved: {messages}")


class TourNotFoundError(Exception):
    """No tour with the given id exists."""
    pass


class ExpenseNotFoundError(Exception):
    """No expense with the given id exists."""
    pass


class AgencyInUseError(Exception):
    """The agency is still referenced by at least one tour."""
    pass


class GuideTrackService:
    """
    Orchestrates every user-facing flow.

    Usage:
        service = await GuideTrackService.open()
        tour, result = await service.save_tour(
            title="Efes", tour_type=TourType.FULL,
            start_date=date(2024, 3, 10), end_date=date(2024, 3, 10),
            agency_id="agency-2",
        )
        for warning in result.warnings:
            print(warning)
        view = service.dashboard(Period.MONTH)
    """

    def __init__(
        self,
        store: AppStore,
        validator: Optional[FormValidator] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._store = store
        self._validator = validator or FormValidator()
        self._audit_logger = audit_logger
        self._report_settings = get_settings().reports
        self._logger = structlog.get_logger(__name__)

    @classmethod
    async def open(
        cls,
        storage: Optional[StorageInterface] = None,
        audit_logger: Optional[AuditLogger] = None,
    ) -> "GuideTrackService":
        """Build a service on the given storage (JSON files by default) and load it."""
        storage = storage or JsonFileStorage()
        audit_logger = audit_logger or AuditLogger()
        store = AppStore(storage, audit_logger=audit_logger)
        await store.load()
        return cls(store, audit_logger=audit_logger)

    @property
    def store(self) -> AppStore:
        return self._store

    # =========================================================================
    # Reads
    # =========================================================================

    def dashboard(self, period: Period = Period.MONTH, today: Optional[date] = None) -> DashboardView:
        """Summary for the selected period plus the next upcoming tours."""
        state = self._store.state
        tours = filter_by_period(state.tours, period, today)
        expenses = filter_by_period(state.expenses, period, today)

        return DashboardView(
            period=period,
            summary=calculate_financial_summary(tours, expenses),
            upcoming_tours=get_upcoming_tours(
                state.tours,
                limit=self._report_settings.upcoming_limit,
                today=today,
            ),
            tour_count=len(tours),
            expense_count=len(expenses),
        )

    def monthly_reports(
        self,
        month_count: Optional[int] = None,
        today: Optional[date] = None,
    ) -> list[MonthlyReport]:
        state = self._store.state
        return build_monthly_reports(
            state.tours,
            state.expenses,
            month_count=month_count or self._report_settings.monthly_window,
            today=today,
        )

    def agency_reports(self) -> list[AgencyReport]:
        """Agencies that have tours, highest income first."""
        state = self._store.state
        return rank_agency_reports(build_agency_reports(state.tours, state.agencies))

    def format_amount(self, amount: Decimal) -> str:
        """Display an amount with the configured currency symbol."""
        return format_currency(amount, symbol=self._report_settings.currency_symbol)

    def _require_tour(self, tour_id: str) -> TourEntry:
        tour = self._store.state.find_tour(tour_id)
        if tour is None:
            raise TourNotFoundError(f"Tour not found: {tour_id}")
        return tour

    # =========================================================================
    # Tours
    # =========================================================================

    async def save_tour(
        self,
        title: str,
        tour_type: TourType,
        start_date: date,
        agency_id: str,
        end_date: Optional[date] = None,
        daily_rate: Optional[Decimal] = None,
        notes: str = "",
        tour_id: Optional[str] = None,
    ) -> tuple[TourEntry, ValidationResult]:
        """
        Create a tour, or update the tour with id tour_id.

        HALF and FULL tours always end on their start date. A missing
        daily rate is taken from the agency's default rate. Editing keeps
        the tour's tips, commissions and payment state.

        Returns:
            (saved tour, validation result carrying any warnings)

        Raises:
            ValidationFailedError: If the form has errors
            TourNotFoundError: If tour_id names no existing tour
        """
        state = self._store.state
        existing = self._require_tour(tour_id) if tour_id else None

        if tour_type != TourType.PACKAGE or end_date is None:
            end_date = start_date

        if daily_rate is None:
            agency = state.find_agency(agency_id)
            daily_rate = agency.default_daily_rate if agency else state.settings.default_daily_rate

        result = self._validator.validate_tour(
            title=title,
            tour_type=tour_type,
            start_date=start_date,
            end_date=end_date,
            agency_id=agency_id,
            daily_rate=daily_rate,
            paid_amount=existing.paid_amount if existing else Decimal("0"),
            existing_tours=state.tours,
            tour_id=tour_id,
        )
        if result.has_errors:
            raise ValidationFailedError(result)

        fields = {
            "title": title.strip(),
            "type": tour_type,
            "start_date": start_date,
            "end_date": end_date,
            "agency_id": agency_id,
            "daily_rate": daily_rate,
            "notes": notes.strip(),
        }

        if existing is not None:
            tour = existing.model_copy(update={**fields, "updated_at": utc_now()})
            await self._store.dispatch(UpdateTour(tour=tour))
        else:
            tour = TourEntry(**fields)
            await self._store.dispatch(AddTour(tour=tour))

        if result.warnings:
            self._logger.info("tour_saved_with_warnings", tour_id=tour.id, warnings=result.warnings)

        return tour, result

    async def delete_tour(self, tour_id: str) -> None:
        self._require_tour(tour_id)
        await self._store.dispatch(DeleteTour(tour_id=tour_id))

    async def add_tip(self, tour_id: str, amount: Decimal, note: Optional[str] = None) -> Tip:
        self._require_tour(tour_id)
        tip = Tip(amount=amount, note=(note or "").strip() or None)
        await self._store.dispatch(AddTip(tour_id=tour_id, tip=tip))
        return tip

    async def add_commission(self, tour_id: str, category: str, amount: Decimal) -> Commission:
        self._require_tour(tour_id)
        commission = Commission(category=category, amount=amount)
        await self._store.dispatch(AddCommission(tour_id=tour_id, commission=commission))
        return commission

    async def record_payment(
        self,
        tour_id: str,
        status: PaymentStatus,
        paid_amount: Optional[Decimal] = None,
    ) -> TourEntry:
        """
        Set the payment status of a tour.

        Without an explicit amount, PAID records the full base income,
        PARTIAL half of it and UNPAID nothing.
        """
        tour = self._require_tour(tour_id)

        if paid_amount is None:
            base_income = get_tour_base_income(tour)
            if status == PaymentStatus.PAID:
                paid_amount = base_income
            elif status == PaymentStatus.PARTIAL:
                paid_amount = base_income / 2
            else:
                paid_amount = Decimal("0")

        await self._store.dispatch(UpdatePaymentStatus(
            tour_id=tour_id,
            status=status,
            paid_amount=paid_amount,
        ))
        return self._store.state.find_tour(tour_id)

    # =========================================================================
    # Expenses
    # =========================================================================

    async def save_expense(
        self,
        title: str,
        amount: Decimal,
        category: str,
        expense_date: date,
        is_recurring: bool = False,
        recurrence_months: Optional[int] = None,
        notes: Optional[str] = None,
    ) -> list[Expense]:
        """
        Record a new expense.

        A recurring expense is stored as one independent expense per
        month, all dispatched under one correlation id.

        Raises:
            ValidationFailedError: If the form has errors
        """
        result = self._validator.validate_expense(
            title=title,
            amount=amount,
            category=category,
            is_recurring=is_recurring,
            recurrence_months=recurrence_months,
        )
        if result.has_errors:
            raise ValidationFailedError(result)

        expenses = expand_recurring_expense(
            title=title,
            amount=amount,
            category=category,
            start=expense_date,
            is_recurring=is_recurring,
            recurrence_months=recurrence_months,
            notes=notes,
            max_months=self._report_settings.max_recurrence_months,
        )

        correlation_id = create_correlation_id() if len(expenses) > 1 else None
        for expense in expenses:
            await self._store.dispatch(AddExpense(expense=expense, correlation_id=correlation_id))

        return expenses

    async def update_expense(
        self,
        expense_id: str,
        title: str,
        amount: Decimal,
        category: str,
        expense_date: date,
        notes: Optional[str] = None,
    ) -> Expense:
        """Edit a single expense; other months of its series are untouched."""
        existing = self._store.state.find_expense(expense_id)
        if existing is None:
            raise ExpenseNotFoundError(f"Expense not found: {expense_id}")

        result = self._validator.validate_expense(
            title=title,
            amount=amount,
            category=category,
            expense_id=expense_id,
        )
        if result.has_errors:
            raise ValidationFailedError(result)

        expense = existing.model_copy(update={
            "title": title.strip(),
            "amount": amount,
            "category": category,
            "date": expense_date,
            "notes": (notes or "").strip() or None,
        })
        await self._store.dispatch(UpdateExpense(expense=expense))
        return expense

    async def delete_expense(self, expense_id: str) -> None:
        if self._store.state.find_expense(expense_id) is None:
            raise ExpenseNotFoundError(f"Expense not found: {expense_id}")
        await self._store.dispatch(DeleteExpense(expense_id=expense_id))

    async def add_expense_category(self, category: str) -> list[str]:
        """Add a custom category; an existing one is left as is."""
        category = category.strip()
        if not category:
            raise ValueError("Category name is empty")
        await self._store.dispatch(AddExpenseCategory(category=category))
        return self._store.state.expense_categories

    # =========================================================================
    # Agencies
    # =========================================================================

    async def save_agency(
        self,
        name: str,
        default_daily_rate: Decimal,
        contact_person: Optional[str] = None,
        phone: Optional[str] = None,
        email: Optional[str] = None,
        notes: Optional[str] = None,
        agency_id: Optional[str] = None,
    ) -> Agency:
        """
        Create an agency, or update the agency with id agency_id.

        Changing the default rate never touches existing tours.
        """
        result = self._validator.validate_agency(name, default_daily_rate, agency_id)
        if result.has_errors:
            raise ValidationFailedError(result)

        fields = {
            "name": name.strip(),
            "default_daily_rate": default_daily_rate,
            "contact_person": (contact_person or "").strip() or None,
            "phone": (phone or "").strip() or None,
            "email": (email or "").strip() or None,
            "notes": (notes or "").strip() or None,
        }

        existing = self._store.state.find_agency(agency_id) if agency_id else None
        if existing is not None:
            agency = existing.model_copy(update=fields)
            await self._store.dispatch(UpdateAgency(agency=agency))
        else:
            agency = Agency(**fields) if agency_id is None else Agency(id=agency_id, **fields)
            await self._store.dispatch(AddAgency(agency=agency))
        return agency

    async def delete_agency(self, agency_id: str) -> None:
        """
        Raises:
            AgencyInUseError: While any tour still references the agency
        """
        if agency_in_use(agency_id, self._store.state.tours):
            raise AgencyInUseError(
                "Bu ajansa ait turlar var. Önce turları silin veya başka ajansa taşıyın."
            )
        await self._store.dispatch(DeleteAgency(agency_id=agency_id))

    # =========================================================================
    # User and settings
    # =========================================================================

    async def set_user(self, name: str, email: Optional[str] = None) -> UserProfile:
        """Create the local profile (onboarding)."""
        if not name or not name.strip():
            raise ValueError("User name is empty")
        user = UserProfile(name=name.strip(), email=(email or "").strip() or None)
        await self._store.dispatch(SetUser(user=user))
        return user

    async def sign_out(self) -> None:
        await self._store.dispatch(SetUser(user=None))

    async def update_settings(
        self,
        default_daily_rate: Optional[Decimal] = None,
        notifications_enabled: Optional[bool] = None,
        first_day_of_week: Optional[int] = None,
    ) -> AppSettings:
        await self._store.dispatch(UpdateSettings(
            default_daily_rate=default_daily_rate,
            notifications_enabled=notifications_enabled,
            first_day_of_week=first_day_of_week,
        ))
        return self._store.state.settings

    # =========================================================================
    # Export and backup
    # =========================================================================

    def export_csv(self, kind: str = "all") -> str:
        """
        CSV text for 'tours', 'expenses' or 'all'.

        Raises:
            ValueError: For an unknown kind
        """
        state = self._store.state
        if kind == "tours":
            return build_tours_csv(state.tours, state.agencies)
        if kind == "expenses":
            return build_expenses_csv(state.expenses)
        if kind == "all":
            return build_combined_csv(state.tours, state.expenses, state.agencies)
        raise ValueError(f"Unknown export kind: {kind}")

    async def write_csv_export(
        self,
        directory: Path,
        kind: str = "all",
        today: Optional[date] = None,
    ) -> Path:
        """Write a CSV export into directory and return its path."""
        content = self.export_csv(kind)
        filename = export_filename(kind, today)
        path = write_export(content, directory, filename)

        state = self._store.state
        row_count = {
            "tours": len(state.tours),
            "expenses": len(state.expenses),
            "all": len(state.tours) + len(state.expenses),
        }[kind]
        if self._audit_logger:
            await self._audit_logger.log_export_created(kind, filename, row_count)
        return path

    async def export_backup(self) -> str:
        """Full JSON backup of everything in storage."""
        return await self._store.storage.export_all_data()

    async def import_backup(self, json_string: str) -> list[str]:
        """
        Restore a JSON backup and reload state from storage.

        Raises:
            CorruptDataError: If the backup is unreadable; nothing is written
        """
        imported = await self._store.storage.import_data(json_string)
        if self._audit_logger:
            await self._audit_logger.log_data_imported(imported)
        await self._store.load()
        return imported

    async def clear_all_data(self) -> None:
        """Remove every stored collection and reload defaults."""
        await self._store.storage.clear_all()
        if self._audit_logger:
            await self._audit_logger.log_data_cleared()
        await self._store.load()
