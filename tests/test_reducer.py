"""Tests for the pure application reducer."""

from datetime import datetime, timezone
from decimal import Decimal

from guidetrack.models import Agency, AppSettings, PaymentStatus, UserProfile
from guidetrack.models.records import DEFAULT_EXPENSE_CATEGORIES
from guidetrack.state import (
    AddAgency,
    AddCommission,
    AddExpense,
    AddExpenseCategory,
    AddTip,
    AddTour,
    AppState,
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
    app_reducer,
)
from guidetrack.state.actions import BaseAction


STAMP = datetime(2024, 3, 15, 9, 30, tzinfo=timezone.utc)


class TestLifecycle:
    """Tests for INIT, loading and user actions."""

    def test_initial_state(self):
        state = AppState()
        assert state.is_loading is True
        assert state.expense_categories == list(DEFAULT_EXPENSE_CATEGORIES)
        assert state.user is None

    def test_init_replaces_given_collections(self, make_tour):
        tour = make_tour()
        state = app_reducer(AppState(), Init(tours=[tour]))

        assert state.tours == [tour]
        assert state.is_loading is False
        assert state.expenses == []

    def test_init_keeps_omitted_collections(self, make_expense):
        expense = make_expense()
        state = AppState(expenses=[expense])
        new_state = app_reducer(state, Init())

        assert new_state.expenses is state.expenses

    def test_init_with_explicit_none_user_clears_it(self):
        state = AppState(user=UserProfile(name="Ayşe"))
        assert app_reducer(state, Init(user=None)).user is None
        assert app_reducer(state, Init()).user is not None

    def test_set_loading(self):
        state = app_reducer(AppState(is_loading=False), SetLoading(is_loading=True))
        assert state.is_loading is True

    def test_set_user_and_clear(self):
        user = UserProfile(name="Ayşe")
        state = app_reducer(AppState(), SetUser(user=user))
        assert state.user == user
        assert app_reducer(state, SetUser(user=None)).user is None

    def test_unknown_action_returns_same_state(self):
        state = AppState()
        assert app_reducer(state, BaseAction()) is state


class TestTourActions:
    """Tests for tour-related actions."""

    def test_add_tour_prepends(self, make_tour):
        first = make_tour(title="first")
        second = make_tour(title="second")
        state = app_reducer(AppState(tours=[first]), AddTour(tour=second))

        assert [t.title for t in state.tours] == ["second", "first"]

    def test_update_tour_replaces_by_id(self, make_tour):
        tour = make_tour(title="old")
        other = make_tour(title="other")
        edited = tour.model_copy(update={"title": "new"})
        state = app_reducer(AppState(tours=[tour, other]), UpdateTour(tour=edited))

        assert [t.title for t in state.tours] == ["new", "other"]

    def test_update_unknown_tour_changes_nothing(self, make_tour):
        tour = make_tour()
        state = app_reducer(AppState(tours=[tour]), UpdateTour(tour=make_tour(title="ghost")))
        assert state.tours == [tour]

    def test_delete_tour(self, make_tour):
        tour = make_tour()
        state = app_reducer(AppState(tours=[tour]), DeleteTour(tour_id=tour.id))
        assert state.tours == []

    def test_add_tip_appends_and_stamps(self, make_tour, tip):
        tour = make_tour(tips=[tip("50")])
        new_tip = tip("200")
        state = app_reducer(
            AppState(tours=[tour]),
            AddTip(tour_id=tour.id, tip=new_tip, timestamp=STAMP),
        )

        updated = state.tours[0]
        assert [t.amount for t in updated.tips] == [Decimal("50"), Decimal("200")]
        assert updated.updated_at == STAMP
        # the original snapshot is untouched
        assert len(tour.tips) == 1

    def test_add_commission(self, make_tour, commission):
        tour = make_tour()
        state = app_reducer(
            AppState(tours=[tour]),
            AddCommission(tour_id=tour.id, commission=commission("300", "Seramik")),
        )
        assert state.tours[0].commissions[0].category == "Seramik"

    def test_add_tip_to_unknown_tour_is_noop(self, make_tour, tip):
        state = AppState(tours=[make_tour()])
        assert app_reducer(state, AddTip(tour_id="missing", tip=tip("10"))) is state

    def test_payment_paid_sets_paid_date(self, make_tour):
        tour = make_tour()
        state = app_reducer(
            AppState(tours=[tour]),
            UpdatePaymentStatus(
                tour_id=tour.id,
                status=PaymentStatus.PAID,
                paid_amount=Decimal("1500"),
                timestamp=STAMP,
            ),
        )
        updated = state.tours[0]
        assert updated.payment_status == PaymentStatus.PAID
        assert updated.paid_amount == Decimal("1500")
        assert updated.paid_date == STAMP

    def test_payment_partial_keeps_paid_date(self, make_tour):
        tour = make_tour()
        state = app_reducer(
            AppState(tours=[tour]),
            UpdatePaymentStatus(tour_id=tour.id, status=PaymentStatus.PARTIAL, paid_amount=Decimal("700")),
        )
        assert state.tours[0].paid_date is None
        assert state.tours[0].paid_amount == Decimal("700")

    def test_untouched_collections_are_shared(self, make_tour, make_expense):
        state = AppState(tours=[make_tour()], expenses=[make_expense()])
        new_state = app_reducer(state, DeleteTour(tour_id=state.tours[0].id))

        assert new_state.expenses is state.expenses
        assert new_state.agencies is state.agencies


class TestExpenseActions:
    """Tests for expense-related actions."""

    def test_add_expense_prepends(self, make_expense):
        old = make_expense(title="old")
        new = make_expense(title="new")
        state = app_reducer(AppState(expenses=[old]), AddExpense(expense=new))
        assert [e.title for e in state.expenses] == ["new", "old"]

    def test_update_and_delete_expense(self, make_expense):
        expense = make_expense()
        edited = expense.model_copy(update={"amount": Decimal("900")})
        state = app_reducer(AppState(expenses=[expense]), UpdateExpense(expense=edited))
        assert state.expenses[0].amount == Decimal("900")

        state = app_reducer(state, DeleteExpense(expense_id=expense.id))
        assert state.expenses == []

    def test_add_expense_category(self):
        state = app_reducer(AppState(), AddExpenseCategory(category="Ekipman"))
        assert state.expense_categories[-1] == "Ekipman"

    def test_duplicate_expense_category_is_noop(self):
        state = AppState()
        assert app_reducer(state, AddExpenseCategory(category="Kira")) is state


class TestAgencyAndSettingsActions:
    """Tests for agency and settings actions."""

    def test_add_agency_appends(self, agencies):
        new = Agency(name="Jolly")
        state = app_reducer(AppState(agencies=agencies), AddAgency(agency=new))
        assert state.agencies[-1] == new

    def test_update_agency(self, agencies):
        edited = agencies[0].model_copy(update={"default_daily_rate": Decimal("1700")})
        state = app_reducer(AppState(agencies=agencies), UpdateAgency(agency=edited))
        assert state.agencies[0].default_daily_rate == Decimal("1700")

    def test_delete_agency(self, agencies):
        state = app_reducer(AppState(agencies=agencies), DeleteAgency(agency_id="agency-1"))
        assert [a.id for a in state.agencies] == ["agency-2"]

    def test_update_settings_merges(self):
        state = AppState(settings=AppSettings(first_day_of_week=0))
        new_state = app_reducer(state, UpdateSettings(default_daily_rate=Decimal("1800")))

        assert new_state.settings.default_daily_rate == Decimal("1800")
        assert new_state.settings.first_day_of_week == 0
        assert new_state.settings.notifications_enabled is True

    def test_update_settings_false_is_a_change(self):
        state = app_reducer(AppState(), UpdateSettings(notifications_enabled=False))
        assert state.settings.notifications_enabled is False

    def test_empty_settings_update_is_noop(self):
        state = AppState()
        assert app_reducer(state, UpdateSettings()) is state
