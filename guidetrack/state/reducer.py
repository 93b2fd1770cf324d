"""
Application state and its reducer.

DESIGN DECISION: There is no process-wide mutable state. AppState is an
immutable snapshot owned by whoever holds it (normally an AppStore), and
app_reducer maps (state, action) to a NEW state. Collections that an
action does not touch are carried over by reference, which lets
observers tell cheaply which collections changed.

Persistence is NOT done here - see guidetrack.state.store.
"""

from typing import Optional

from pydantic import Field

from guidetrack.models.base import RecordModel
from guidetrack.models.records import (
    DEFAULT_EXPENSE_CATEGORIES,
    Agency,
    AppSettings,
    Expense,
    UserProfile,
)
from guidetrack.models.tour import PaymentStatus, TourEntry
from guidetrack.state.actions import (
    AddAgency,
    AddCommission,
    AddExpense,
    AddExpenseCategory,
    AddTip,
    AddTour,
    BaseAction,
    DeleteAgency,
    DeleteExpense,
    DeleteTour,
    Init,
    SetLoading,
    SetUser,
    UpdateAgency,
    UpdateExpense,
    UpdatePaymentStatus,
    UpdateSettings,
    UpdateTour,
)


# Top-level collections that are persisted one key each
PERSISTED_COLLECTIONS = (
    "tours",
    "expenses",
    "agencies",
    "settings",
    "user",
    "expense_categories",
)


class AppState(RecordModel):
    """Everything the UI works from."""

    tours: list[TourEntry] = Field(default_factory=list)
    expenses: list[Expense] = Field(default_factory=list)
    agencies: list[Agency] = Field(default_factory=list)
    user: Optional[UserProfile] = None
    settings: AppSettings = Field(default_factory=AppSettings)
    expense_categories: list[str] = Field(
        default_factory=lambda: list(DEFAULT_EXPENSE_CATEGORIES)
    )
    is_loading: bool = True

    def find_tour(self, tour_id: str) -> Optional[TourEntry]:
        return next((tour for tour in self.tours if tour.id == tour_id), None)

    def find_expense(self, expense_id: str) -> Optional[Expense]:
        return next((expense for expense in self.expenses if expense.id == expense_id), None)

    def find_agency(self, agency_id: str) -> Optional[Agency]:
        return next((agency for agency in self.agencies if agency.id == agency_id), None)


def _replace_by_id(items: list, replacement) -> list:
    return [replacement if item.id == replacement.id else item for item in items]


def _without_id(items: list, item_id: str) -> list:
    return [item for item in items if item.id != item_id]


def _update_tour(state: AppState, tour_id: str, **changes) -> AppState:
    tours = [
        tour.model_copy(update=changes) if tour.id == tour_id else tour
        for tour in state.tours
    ]
    return state.model_copy(update={"tours": tours})


def app_reducer(state: AppState, action: BaseAction) -> AppState:
    """
    Apply one action and return the resulting state.

    Pure: the input state is never modified and the clock is never read.
    Unknown actions return the state unchanged.
    """
    if isinstance(action, Init):
        update = {
            name: getattr(action, name)
            for name in ("tours", "expenses", "agencies", "settings", "user", "expense_categories")
            if name in action.model_fields_set
        }
        update["is_loading"] = False
        return state.model_copy(update=update)

    if isinstance(action, SetLoading):
        return state.model_copy(update={"is_loading": action.is_loading})

    if isinstance(action, SetUser):
        return state.model_copy(update={"user": action.user})

    # ── Tours ──
    if isinstance(action, AddTour):
        return state.model_copy(update={"tours": [action.tour, *state.tours]})

    if isinstance(action, UpdateTour):
        return state.model_copy(update={"tours": _replace_by_id(state.tours, action.tour)})

    if isinstance(action, DeleteTour):
        return state.model_copy(update={"tours": _without_id(state.tours, action.tour_id)})

    if isinstance(action, AddTip):
        tour = state.find_tour(action.tour_id)
        if tour is None:
            return state
        return _update_tour(
            state,
            action.tour_id,
            tips=[*tour.tips, action.tip],
            updated_at=action.timestamp,
        )

    if isinstance(action, AddCommission):
        tour = state.find_tour(action.tour_id)
        if tour is None:
            return state
        return _update_tour(
            state,
            action.tour_id,
            commissions=[*tour.commissions, action.commission],
            updated_at=action.timestamp,
        )

    if isinstance(action, UpdatePaymentStatus):
        tour = state.find_tour(action.tour_id)
        if tour is None:
            return state
        return _update_tour(
            state,
            action.tour_id,
            payment_status=action.status,
            paid_amount=action.paid_amount,
            paid_date=action.timestamp if action.status == PaymentStatus.PAID else tour.paid_date,
            updated_at=action.timestamp,
        )

    # ── Expenses ──
    if isinstance(action, AddExpense):
        return state.model_copy(update={"expenses": [action.expense, *state.expenses]})

    if isinstance(action, UpdateExpense):
        return state.model_copy(update={"expenses": _replace_by_id(state.expenses, action.expense)})

    if isinstance(action, DeleteExpense):
        return state.model_copy(update={"expenses": _without_id(state.expenses, action.expense_id)})

    if isinstance(action, AddExpenseCategory):
        if action.category in state.expense_categories:
            return state
        return state.model_copy(
            update={"expense_categories": [*state.expense_categories, action.category]}
        )

    # ── Agencies ──
    if isinstance(action, AddAgency):
        return state.model_copy(update={"agencies": [*state.agencies, action.agency]})

    if isinstance(action, UpdateAgency):
        return state.model_copy(update={"agencies": _replace_by_id(state.agencies, action.agency)})

    if isinstance(action, DeleteAgency):
        return state.model_copy(update={"agencies": _without_id(state.agencies, action.agency_id)})

    # ── Settings ──
    if isinstance(action, UpdateSettings):
        changes = action.changes()
        if not changes:
            return state
        settings = AppSettings.model_validate({**state.settings.model_dump(), **changes})
        return state.model_copy(update={"settings": settings})

    return state
