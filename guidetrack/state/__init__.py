"""
Application state package.

Actions describe changes, app_reducer applies them purely, and AppStore
owns the current state and runs persistence as an observer.
"""

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
from guidetrack.state.reducer import PERSISTED_COLLECTIONS, AppState, app_reducer
from guidetrack.state.store import (
    AppStore,
    PersistenceObserver,
    changed_collections,
    merge_expense_categories,
)

__all__ = [
    # Actions
    "AddAgency",
    "AddCommission",
    "AddExpense",
    "AddExpenseCategory",
    "AddTip",
    "AddTour",
    "BaseAction",
    "DeleteAgency",
    "DeleteExpense",
    "DeleteTour",
    "Init",
    "SetLoading",
    "SetUser",
    "UpdateAgency",
    "UpdateExpense",
    "UpdatePaymentStatus",
    "UpdateSettings",
    "UpdateTour",
    # State
    "PERSISTED_COLLECTIONS",
    "AppState",
    "app_reducer",
    # Store
    "AppStore",
    "PersistenceObserver",
    "changed_collections",
    "merge_expense_categories",
]
