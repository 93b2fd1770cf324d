"""
State actions.

Every change to the application state is described by one of these
actions and applied by guidetrack.state.reducer.app_reducer.

Actions carry their own timestamp so the reducer never reads the clock.
"""

from datetime import datetime
from decimal import Decimal
from typing import Literal, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from guidetrack.models.base import utc_now
from guidetrack.models.records import Agency, AppSettings, Expense, UserProfile
from guidetrack.models.tour import Commission, PaymentStatus, Tip, TourEntry


class BaseAction(BaseModel):
    model_config = ConfigDict(frozen=True)

    timestamp: datetime = Field(default_factory=utc_now)
    correlation_id: Optional[UUID] = None


# ── Lifecycle ──

class Init(BaseAction):
    """
    Replace state with what was loaded from storage and stop loading.

    Only the fields passed explicitly are replaced; user=None clears the user.
    """
    type: Literal["INIT"] = "INIT"
    tours: Optional[list[TourEntry]] = None
    expenses: Optional[list[Expense]] = None
    agencies: Optional[list[Agency]] = None
    settings: Optional[AppSettings] = None
    user: Optional[UserProfile] = None
    expense_categories: Optional[list[str]] = None


class SetLoading(BaseAction):
    type: Literal["SET_LOADING"] = "SET_LOADING"
    is_loading: bool


class SetUser(BaseAction):
    type: Literal["SET_USER"] = "SET_USER"
    user: Optional[UserProfile]


# ── Tours ──

class AddTour(BaseAction):
    type: Literal["ADD_TOUR"] = "ADD_TOUR"
    tour: TourEntry


class UpdateTour(BaseAction):
    type: Literal["UPDATE_TOUR"] = "UPDATE_TOUR"
    tour: TourEntry


class DeleteTour(BaseAction):
    type: Literal["DELETE_TOUR"] = "DELETE_TOUR"
    tour_id: str


class AddTip(BaseAction):
    type: Literal["ADD_TIP"] = "ADD_TIP"
    tour_id: str
    tip: Tip


class AddCommission(BaseAction):
    type: Literal["ADD_COMMISSION"] = "ADD_COMMISSION"
    tour_id: str
    commission: Commission


class UpdatePaymentStatus(BaseAction):
    type: Literal["UPDATE_PAYMENT_STATUS"] = "UPDATE_PAYMENT_STATUS"
    tour_id: str
    status: PaymentStatus
    paid_amount: Decimal


# ── Expenses ──

class AddExpense(BaseAction):
    type: Literal["ADD_EXPENSE"] = "ADD_EXPENSE"
    expense: Expense


class UpdateExpense(BaseAction):
    type: Literal["UPDATE_EXPENSE"] = "UPDATE_EXPENSE"
    expense: Expense


class DeleteExpense(BaseAction):
    type: Literal["DELETE_EXPENSE"] = "DELETE_EXPENSE"
    expense_id: str


class AddExpenseCategory(BaseAction):
    type: Literal["ADD_EXPENSE_CATEGORY"] = "ADD_EXPENSE_CATEGORY"
    category: str = Field(..., min_length=1)


# ── Agencies ──

class AddAgency(BaseAction):
    type: Literal["ADD_AGENCY"] = "ADD_AGENCY"
    agency: Agency


class UpdateAgency(BaseAction):
    type: Literal["UPDATE_AGENCY"] = "UPDATE_AGENCY"
    agency: Agency


class DeleteAgency(BaseAction):
    type: Literal["DELETE_AGENCY"] = "DELETE_AGENCY"
    agency_id: str


# ── Settings ──

class UpdateSettings(BaseAction):
    """Partial settings change; None fields keep their current value."""
    type: Literal["UPDATE_SETTINGS"] = "UPDATE_SETTINGS"
    default_daily_rate: Optional[Decimal] = None
    notifications_enabled: Optional[bool] = None
    first_day_of_week: Optional[Literal[0, 1]] = None

    def changes(self) -> dict:
        return {
            name: value
            for name, value in (
                ("default_daily_rate", self.default_daily_rate),
                ("notifications_enabled", self.notifications_enabled),
                ("first_day_of_week", self.first_day_of_week),
            )
            if value is not None
        }

