"""
Application Store

DESIGN DECISION: The store is the single owner of the current AppState.
- dispatch() runs the pure reducer, swaps in the new state, then notifies
  observers with (previous, current, action).
- Persistence is an observer, not part of the reducer: after each change
  it saves exactly the top-level collections that changed, one storage
  key per collection.
- Nothing is persisted while the state is still loading, and the INIT
  action (which only mirrors what storage already holds) writes nothing.
"""

import asyncio
from typing import Awaitable, Callable, Optional

import structlog

from guidetrack.models.records import DEFAULT_EXPENSE_CATEGORIES
from guidetrack.services.storage import StorageError, StorageInterface
from guidetrack.state.actions import BaseAction, Init
from guidetrack.state.reducer import PERSISTED_COLLECTIONS, AppState, app_reducer


StateObserver = Callable[[AppState, AppState, BaseAction], Awaitable[None]]


def merge_expense_categories(stored: list[str]) -> list[str]:
    """Default categories first, then stored extras not already among them."""
    extras = [c for c in stored if c not in DEFAULT_EXPENSE_CATEGORIES]
    return [*DEFAULT_EXPENSE_CATEGORIES, *dict.fromkeys(extras)]


def changed_collections(previous: AppState, current: AppState) -> list[str]:
    """Names of persisted collections that differ between two states."""
    return [
        name
        for name in PERSISTED_COLLECTIONS
        if getattr(previous, name) is not getattr(current, name)
        and getattr(previous, name) != getattr(current, name)
    ]


class PersistenceObserver:
    """
    Saves changed collections after every dispatched action.

    Storage failures are audited as failed writes, any other exception as a
    system error (when an audit logger is attached). Both are re-raised to
    the caller of dispatch.
    """

    def __init__(self, storage: StorageInterface, audit_logger=None):
        self._storage = storage
        self._audit_logger = audit_logger
        self._logger = structlog.get_logger(__name__)

    async def _save(self, name: str, state: AppState) -> Optional[int]:
        if name == "tours":
            await self._storage.set_tours(state.tours)
            return len(state.tours)
        if name == "expenses":
            await self._storage.set_expenses(state.expenses)
            return len(state.expenses)
        if name == "agencies":
            await self._storage.set_agencies(state.agencies)
            return len(state.agencies)
        if name == "settings":
            await self._storage.set_settings(state.settings)
            return None
        if name == "user":
            if state.user is None:
                await self._storage.remove_user()
            else:
                await self._storage.set_user(state.user)
            return None
        if name == "expense_categories":
            await self._storage.set_expense_categories(state.expense_categories)
            return len(state.expense_categories)
        raise ValueError(f"Unknown collection: {name}")

    async def __call__(
        self,
        previous: AppState,
        current: AppState,
        action: BaseAction,
    ) -> None:
        if current.is_loading or isinstance(action, Init):
            return

        for name in changed_collections(previous, current):
            try:
                item_count = await self._save(name, current)
            except StorageError as e:
                self._logger.error("persist_failed", collection=name, error=str(e))
                if self._audit_logger:
                    await self._audit_logger.log_persist_failed(name, str(e))
                raise
            except Exception as e:
                self._logger.exception("persist_crashed", collection=name)
                if self._audit_logger:
                    await self._audit_logger.log_error(
                        error_type=type(e).__name__,
                        error_message=str(e),
                        details={"collection": name, "action": type(action).__name__},
                        correlation_id=action.correlation_id,
                    )
                raise
            if self._audit_logger:
                await self._audit_logger.log_collection_persisted(name, item_count)


class AppStore:
    """
    Owns the application state.

    Usage:
        store = AppStore(storage, audit_logger=AuditLogger())
        await store.load()
        await store.dispatch(AddTour(tour=tour))
        summary = calculate_financial_summary(store.state.tours, store.state.expenses)
    """

    def __init__(
        self,
        storage: StorageInterface,
        audit_logger=None,
        initial_state: Optional[AppState] = None,
    ):
        self._storage = storage
        self._state = initial_state or AppState()
        self._observers: list[StateObserver] = []
        self._logger = structlog.get_logger(__name__)

        if audit_logger is not None:
            self.subscribe(audit_logger.on_state_change)
        self.subscribe(PersistenceObserver(storage, audit_logger))

    @property
    def state(self) -> AppState:
        return self._state

    @property
    def storage(self) -> StorageInterface:
        return self._storage

    def subscribe(self, observer: StateObserver) -> Callable[[], None]:
        """Register an observer; returns a function that unregisters it."""
        self._observers.append(observer)

        def unsubscribe() -> None:
            if observer in self._observers:
                self._observers.remove(observer)

        return unsubscribe

    async def dispatch(self, action: BaseAction) -> AppState:
        """
        Apply an action and notify observers.

        The new state is in place before observers run, so a persistence
        failure surfaces as an exception without rolling the state back.
        """
        previous = self._state
        self._state = app_reducer(previous, action)

        for observer in list(self._observers):
            await observer(previous, self._state, action)

        return self._state

    async def load(self) -> AppState:
        """Read every collection from storage and dispatch INIT."""
        tours, expenses, agencies, settings, user, extra_categories = await asyncio.gather(
            self._storage.get_tours(),
            self._storage.get_expenses(),
            self._storage.get_agencies(),
            self._storage.get_settings(),
            self._storage.get_user(),
            self._storage.get_expense_categories(),
        )

        self._logger.info(
            "state_loading",
            tours=len(tours),
            expenses=len(expenses),
            agencies=len(agencies),
        )

        return await self.dispatch(Init(
            tours=tours,
            expenses=expenses,
            agencies=agencies,
            settings=settings,
            user=user,
            expense_categories=merge_expense_categories(extra_categories),
        ))
