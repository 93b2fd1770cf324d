"""
Audit Logger

DESIGN DECISION: Every state change in the system is logged.
This provides:
1. Traceability of edits to tours, expenses and agencies
2. Debugging capability when a persisted collection looks wrong
3. A visible record of failed writes

The audit logger:
- Is async to match the store's observer protocol
- Never raises on the audit path (a logging failure must not undo a change)
- Supports correlation IDs to trace related events
"""

import logging
from collections import deque
from typing import Optional
from uuid import UUID, uuid4

import structlog

from guidetrack.config import LoggingSettings, get_settings
from guidetrack.models.audit import AuditEvent, AuditEventBuilder, AuditEventType
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
from guidetrack.state.reducer import AppState


def configure_logging(settings: Optional[LoggingSettings] = None) -> None:
    """Configure structlog on top of stdlib logging."""
    settings = settings or get_settings().logging

    logging.basicConfig(format="%(message)s", level=settings.level)
    logging.getLogger().setLevel(settings.level)

    renderer = (
        structlog.processors.JSONRenderer()
        if settings.json_output
        else structlog.dev.ConsoleRenderer()
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


configure_logging()


def event_for_action(action: BaseAction) -> Optional[AuditEvent]:
    """Translate a dispatched action into its audit event."""
    if isinstance(action, Init):
        return AuditEventBuilder.entity_changed(
            AuditEventType.STATE_LOADED, None, None,
            "State loaded from storage",
            details={
                "tours": len(action.tours or []),
                "expenses": len(action.expenses or []),
                "agencies": len(action.agencies or []),
            },
        )
    if isinstance(action, SetLoading):
        return AuditEventBuilder.entity_changed(
            AuditEventType.LOADING_CHANGED, None, None,
            f"Loading flag set to {action.is_loading}",
        )
    if isinstance(action, SetUser):
        return AuditEventBuilder.entity_changed(
            AuditEventType.USER_SET, "user", action.user.id if action.user else None,
            "User signed in" if action.user else "User removed",
        )
    if isinstance(action, (AddTour, UpdateTour)):
        event_type = AuditEventType.TOUR_ADDED if isinstance(action, AddTour) else AuditEventType.TOUR_UPDATED
        return AuditEventBuilder.entity_changed(
            event_type, "tour", action.tour.id,
            f"Tour {'added' if isinstance(action, AddTour) else 'updated'}: {action.tour.title}",
            details={
                "type": action.tour.type.value,
                "start_date": action.tour.start_date.isoformat(),
                "end_date": action.tour.end_date.isoformat(),
                "agency_id": action.tour.agency_id,
            },
        )
    if isinstance(action, DeleteTour):
        return AuditEventBuilder.entity_changed(
            AuditEventType.TOUR_DELETED, "tour", action.tour_id, "Tour deleted",
        )
    if isinstance(action, AddTip):
        return AuditEventBuilder.entity_changed(
            AuditEventType.TIP_ADDED, "tour", action.tour_id,
            "Tip added",
            details={"amount": str(action.tip.amount)},
        )
    if isinstance(action, AddCommission):
        return AuditEventBuilder.entity_changed(
            AuditEventType.COMMISSION_ADDED, "tour", action.tour_id,
            f"Commission added: {action.commission.category}",
            details={"amount": str(action.commission.amount)},
        )
    if isinstance(action, UpdatePaymentStatus):
        return AuditEventBuilder.entity_changed(
            AuditEventType.PAYMENT_STATUS_UPDATED, "tour", action.tour_id,
            f"Payment status set to {action.status.value}",
            details={"paid_amount": str(action.paid_amount)},
        )
    if isinstance(action, (AddExpense, UpdateExpense)):
        added = isinstance(action, AddExpense)
        return AuditEventBuilder.entity_changed(
            AuditEventType.EXPENSE_ADDED if added else AuditEventType.EXPENSE_UPDATED,
            "expense", action.expense.id,
            f"Expense {'added' if added else 'updated'}: {action.expense.title}",
            details={
                "amount": str(action.expense.amount),
                "category": action.expense.category,
                "date": action.expense.date.isoformat(),
            },
        )
    if isinstance(action, DeleteExpense):
        return AuditEventBuilder.entity_changed(
            AuditEventType.EXPENSE_DELETED, "expense", action.expense_id, "Expense deleted",
        )
    if isinstance(action, AddExpenseCategory):
        return AuditEventBuilder.entity_changed(
            AuditEventType.EXPENSE_CATEGORY_ADDED, "expense_category", action.category,
            f"Expense category added: {action.category}",
        )
    if isinstance(action, (AddAgency, UpdateAgency)):
        added = isinstance(action, AddAgency)
        return AuditEventBuilder.entity_changed(
            AuditEventType.AGENCY_ADDED if added else AuditEventType.AGENCY_UPDATED,
            "agency", action.agency.id,
            f"Agency {'added' if added else 'updated'}: {action.agency.name}",
        )
    if isinstance(action, DeleteAgency):
        return AuditEventBuilder.entity_changed(
            AuditEventType.AGENCY_DELETED, "agency", action.agency_id, "Agency deleted",
        )
    if isinstance(action, UpdateSettings):
        return AuditEventBuilder.entity_changed(
            AuditEventType.SETTINGS_UPDATED, "settings", None,
            "Settings updated",
            details={name: str(value) for name, value in action.changes().items()},
        )
    return None


class AuditLogger:
    """
    Central audit logging service.

    Logs events to the structured local log and keeps the most recent
    ones in memory for display.
    """

    def __init__(self, history_size: int = 200):
        """
        Initialize audit logger.

        Args:
            history_size: How many recent events to keep in memory.
        """
        self._logger = structlog.get_logger(__name__)
        self._history: deque[AuditEvent] = deque(maxlen=history_size)

    async def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        The event is always kept in history. Returns True if the
        structured log write succeeded.
        """
        log_dict = event.to_log_dict()

        try:
            if event.severity.value in ("error", "critical"):
                self._logger.error("audit_event", **log_dict)
            elif event.severity.value == "warning":
                self._logger.warning("audit_event", **log_dict)
            elif event.severity.value == "debug":
                self._logger.debug("audit_event", **log_dict)
            else:
                self._logger.info("audit_event", **log_dict)
        except (TypeError, ValueError) as e:
            # Unserializable details - keep the event in history regardless
            self._logger.error(
                "audit_log_failed",
                error=str(e),
                event_id=str(event.event_id),
            )
            self._history.append(event)
            return False

        self._history.append(event)
        return True

    async def on_state_change(
        self,
        previous: AppState,
        current: AppState,
        action: BaseAction,
    ) -> None:
        """Store observer: audit every action that changed the state."""
        if current is previous:
            return
        event = event_for_action(action)
        if event is None:
            return
        if action.correlation_id is not None:
            event = event.model_copy(update={"correlation_id": action.correlation_id})
        await self.log(event)

    async def log_persist_failed(self, collection: str, error_message: str) -> None:
        await self.log(AuditEventBuilder.persist_failed(collection, error_message))

    async def log_collection_persisted(self, collection: str, item_count: Optional[int]) -> None:
        await self.log(AuditEventBuilder.collection_persisted(collection, item_count))

    async def log_data_imported(self, collections: list[str]) -> None:
        await self.log(AuditEventBuilder.data_imported(collections))

    async def log_data_cleared(self) -> None:
        await self.log(AuditEventBuilder.data_cleared())

    async def log_export_created(self, kind: str, filename: str, row_count: int) -> None:
        await self.log(AuditEventBuilder.export_created(kind, filename, row_count))

    async def log_error(
        self,
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log an error."""
        await self.log(AuditEventBuilder.system_error(
            error_type=error_type,
            error_message=error_message,
            details=details,
            correlation_id=correlation_id,
        ))

    def recent_events(self, limit: int = 50) -> list[AuditEvent]:
        """Most recent events, newest first."""
        return list(reversed(self._history))[:limit]


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Use this when one user action produces several state changes
    (e.g. a recurring expense series).
    """
    return uuid4()
