"""Tests for the application store, its persistence observer and audit logging."""

import asyncio
import json
from uuid import uuid4

import pytest

from guidetrack.audit import AuditLogger, event_for_action
from guidetrack.models import AuditEventType, UserProfile
from guidetrack.models.records import DEFAULT_EXPENSE_CATEGORIES
from guidetrack.services.storage import InMemoryStorage, StorageError, StorageKeys
from guidetrack.state import (
    AddExpenseCategory,
    AddTour,
    AppState,
    AppStore,
    DeleteTour,
    SetUser,
    UpdateSettings,
    changed_collections,
    merge_expense_categories,
)


class FailingStorage(InMemoryStorage):
    """Reads work, every write fails."""

    async def write_raw(self, key: str, value: str) -> None:
        raise StorageError(f"disk full while writing {key}")


class BrokenStorage(InMemoryStorage):
    """Tour writes fail with an unexpected error."""

    async def set_tours(self, tours) -> None:
        raise TypeError("tours are not serializable")


def run(coro):
    return asyncio.run(coro)


class TestHelpers:
    """Tests for category merging and change detection."""

    def test_merge_expense_categories(self):
        merged = merge_expense_categories(["Ekipman", "Kira", "Ekipman", "Vize"])
        assert merged == [*DEFAULT_EXPENSE_CATEGORIES, "Ekipman", "Vize"]

    def test_changed_collections(self, make_tour):
        previous = AppState()
        current = previous.model_copy(update={"tours": [make_tour()]})
        assert changed_collections(previous, current) == ["tours"]
        assert changed_collections(previous, previous) == []


class TestStoreLoading:
    """Tests for AppStore.load."""

    def test_load_empty_storage(self):
        storage = InMemoryStorage()
        store = AppStore(storage)

        state = run(store.load())

        assert state.is_loading is False
        assert [a.id for a in state.agencies] == ["agency-1", "agency-2", "agency-3", "agency-4"]
        assert state.expense_categories == list(DEFAULT_EXPENSE_CATEGORIES)
        # seeding the default agencies is the only write
        assert storage.keys() == [StorageKeys.AGENCIES]

    def test_load_merges_stored_categories(self):
        storage = InMemoryStorage({StorageKeys.EXPENSE_CATEGORIES: json.dumps(["Ekipman"])})
        state = run(AppStore(storage).load())
        assert state.expense_categories[-1] == "Ekipman"

    def test_load_reads_tours(self, make_tour):
        tour = make_tour()
        storage = InMemoryStorage()
        run(storage.set_tours([tour]))

        state = run(AppStore(storage).load())

        assert state.tours == [tour]


class TestPersistence:
    """Tests for the persistence observer."""

    def test_nothing_persisted_while_loading(self, make_tour):
        storage = InMemoryStorage()
        store = AppStore(storage)

        run(store.dispatch(AddTour(tour=make_tour())))

        assert storage.write_count == 0

    def test_changed_collection_is_saved(self, make_tour):
        storage = InMemoryStorage()
        store = AppStore(storage)

        async def scenario():
            await store.load()
            writes_after_load = storage.write_count
            await store.dispatch(AddTour(tour=make_tour(title="Efes")))
            return writes_after_load

        writes_after_load = run(scenario())

        assert storage.write_count == writes_after_load + 1
        stored = run(storage.get_tours())
        assert [t.title for t in stored] == ["Efes"]

    def test_only_changed_collections_are_saved(self, make_tour):
        storage = InMemoryStorage()
        store = AppStore(storage)

        async def scenario():
            await store.load()
            await store.dispatch(UpdateSettings(default_daily_rate=1800))

        run(scenario())

        assert StorageKeys.SETTINGS in storage.keys()
        assert StorageKeys.TOURS not in storage.keys()

    def test_noop_action_writes_nothing(self):
        storage = InMemoryStorage()
        store = AppStore(storage)

        async def scenario():
            await store.load()
            before = storage.write_count
            await store.dispatch(AddExpenseCategory(category="Kira"))
            return before

        before = run(scenario())
        assert storage.write_count == before

    def test_user_removed_from_storage(self):
        storage = InMemoryStorage()
        store = AppStore(storage)

        async def scenario():
            await store.load()
            await store.dispatch(SetUser(user=UserProfile(name="Ayşe")))
            saved = await storage.get_user()
            await store.dispatch(SetUser(user=None))
            return saved

        saved = run(scenario())

        assert saved.name == "Ayşe"
        assert StorageKeys.USER not in storage.keys()

    def test_write_failure_propagates_and_is_audited(self, make_tour):
        audit_logger = AuditLogger()
        store = AppStore(FailingStorage(), audit_logger=audit_logger, initial_state=AppState(is_loading=False))

        with pytest.raises(StorageError):
            run(store.dispatch(AddTour(tour=make_tour())))

        # state is not rolled back
        assert len(store.state.tours) == 1
        assert audit_logger.recent_events()[0].event_type == AuditEventType.PERSIST_FAILED

    def test_unexpected_failure_is_audited_as_system_error(self, make_tour):
        audit_logger = AuditLogger()
        store = AppStore(BrokenStorage(), audit_logger=audit_logger, initial_state=AppState(is_loading=False))
        action = AddTour(tour=make_tour(), correlation_id=uuid4())

        with pytest.raises(TypeError):
            run(store.dispatch(action))

        event = audit_logger.recent_events()[0]
        assert event.event_type == AuditEventType.SYSTEM_ERROR
        assert event.error_message == "tours are not serializable"
        assert event.details == {"collection": "tours", "action": "AddTour"}
        assert event.correlation_id == action.correlation_id

    def test_unsubscribe(self, make_tour):
        store = AppStore(InMemoryStorage(), initial_state=AppState(is_loading=False))
        seen = []

        async def observer(previous, current, action):
            seen.append(action)

        unsubscribe = store.subscribe(observer)
        run(store.dispatch(AddTour(tour=make_tour())))
        unsubscribe()
        run(store.dispatch(DeleteTour(tour_id=store.state.tours[0].id)))

        assert len(seen) == 1


class TestAuditTrail:
    """Tests for the audit logger as a store observer."""

    def test_actions_are_audited(self, make_tour):
        audit_logger = AuditLogger()
        store = AppStore(InMemoryStorage(), audit_logger=audit_logger)

        async def scenario():
            await store.load()
            await store.dispatch(AddTour(tour=make_tour(title="Efes")))

        run(scenario())

        event_types = [e.event_type for e in audit_logger.recent_events()]
        assert event_types[:2] == [AuditEventType.COLLECTION_PERSISTED, AuditEventType.TOUR_ADDED]
        assert AuditEventType.STATE_LOADED in event_types

    def test_noop_action_is_not_audited(self):
        audit_logger = AuditLogger()
        store = AppStore(InMemoryStorage(), audit_logger=audit_logger, initial_state=AppState(is_loading=False))

        run(store.dispatch(AddExpenseCategory(category="Kira")))

        assert audit_logger.recent_events() == []

    def test_correlation_id_is_carried(self, make_tour):
        audit_logger = AuditLogger()
        correlation_id = uuid4()
        tour = make_tour()

        run(audit_logger.on_state_change(
            AppState(),
            AppState(tours=[tour]),
            AddTour(tour=tour, correlation_id=correlation_id),
        ))

        assert audit_logger.recent_events()[0].correlation_id == correlation_id

    def test_event_for_action(self, make_tour):
        tour = make_tour(title="Efes")
        event = event_for_action(AddTour(tour=tour))

        assert event.event_type == AuditEventType.TOUR_ADDED
        assert event.entity_id == tour.id
        assert event.details["start_date"] == tour.start_date.isoformat()

    def test_recent_events_limit(self):
        audit_logger = AuditLogger(history_size=3)

        async def scenario():
            for name in ("a", "b", "c", "d"):
                await audit_logger.log_collection_persisted(name, 1)

        run(scenario())

        events = audit_logger.recent_events()
        assert [e.entity_id for e in events] == ["d", "c", "b"]
        assert [e.entity_id for e in audit_logger.recent_events(limit=1)] == ["d"]
