"""
Audit Models for GuideTrack

Every dispatched state change is turned into an audit event and logged.
This provides:
1. Traceability of what changed in the data and when
2. Debugging information when a persisted collection looks wrong
3. A record of failed persistence attempts

DESIGN DECISION: Audit events are append-only. We never delete or modify them.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field

from guidetrack.models.base import utc_now


class AuditEventType(str, Enum):
    """
    Types of events we audit.

    One event type per state action, plus persistence and system events.
    """
    # Lifecycle
    STATE_LOADED = "state_loaded"
    LOADING_CHANGED = "loading_changed"
    USER_SET = "user_set"

    # Tours
    TOUR_ADDED = "tour_added"
    TOUR_UPDATED = "tour_updated"
    TOUR_DELETED = "tour_deleted"
    TIP_ADDED = "tip_added"
    COMMISSION_ADDED = "commission_added"
    PAYMENT_STATUS_UPDATED = "payment_status_updated"

    # Expenses
    EXPENSE_ADDED = "expense_added"
    EXPENSE_UPDATED = "expense_updated"
    EXPENSE_DELETED = "expense_deleted"
    EXPENSE_CATEGORY_ADDED = "expense_category_added"

    # Agencies
    AGENCY_ADDED = "agency_added"
    AGENCY_UPDATED = "agency_updated"
    AGENCY_DELETED = "agency_deleted"

    # Settings
    SETTINGS_UPDATED = "settings_updated"

    # Persistence
    COLLECTION_PERSISTED = "collection_persisted"
    PERSIST_FAILED = "persist_failed"
    DATA_IMPORTED = "data_imported"
    DATA_CLEARED = "data_cleared"
    EXPORT_CREATED = "export_created"

    # System events
    SYSTEM_ERROR = "system_error"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class AuditEvent(BaseModel):
    """
    A single audit event.

    One entry in the trail of changes to tours, expenses, agencies and settings.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Event identifier"
    )
    timestamp: datetime = Field(
        default_factory=utc_now,
        description="UTC time the change was applied"
    )

    # Event classification
    event_type: AuditEventType = Field(
        ...,
        description="Which action or persistence step produced the event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Log level the event is written at"
    )

    # Which record changed
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'tour', 'expense', 'agency')"
    )
    entity_id: Optional[str] = Field(
        default=None,
        description="Record id, collection name or export file name"
    )

    # Shared by events from one user action
    correlation_id: Optional[UUID] = Field(
        default=None,
        description="ID to correlate related events (e.g., one recurring expense series)"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="Short text shown in the activity history"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Amounts, dates and counts relevant to the change"
    )

    error_message: Optional[str] = None

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.entity_changed(AuditEventType.TOUR_ADDED, "tour", tour.id, "...")
        event = AuditEventBuilder.persist_failed("tours", str(error))
    """

    @staticmethod
    def entity_changed(
        event_type: AuditEventType,
        entity_type: Optional[str],
        entity_id: Optional[str],
        description: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=event_type,
            entity_type=entity_type,
            entity_id=entity_id,
            correlation_id=correlation_id,
            description=description,
            details=details or {},
        )

    @staticmethod
    def collection_persisted(
        collection: str,
        item_count: Optional[int],
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.COLLECTION_PERSISTED,
            severity=AuditSeverity.DEBUG,
            entity_type="collection",
            entity_id=collection,
            description=f"Collection persisted: {collection}",
            details={"item_count": item_count},
        )

    @staticmethod
    def persist_failed(
        collection: str,
        error_message: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.PERSIST_FAILED,
            severity=AuditSeverity.ERROR,
            entity_type="collection",
            entity_id=collection,
            description=f"Failed to persist collection: {collection}",
            error_message=error_message,
        )

    @staticmethod
    def data_imported(collections: list[str]) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.DATA_IMPORTED,
            severity=AuditSeverity.WARNING,
            description=f"Backup imported ({len(collections)} collections replaced)",
            details={"collections": collections},
        )

    @staticmethod
    def data_cleared() -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.DATA_CLEARED,
            severity=AuditSeverity.WARNING,
            description="All stored data cleared",
        )

    @staticmethod
    def export_created(
        kind: str,
        filename: str,
        row_count: int,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPORT_CREATED,
            entity_type="export",
            entity_id=filename,
            description=f"CSV export created: {filename}",
            details={"kind": kind, "row_count": row_count},
        )

    @staticmethod
    def system_error(
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SYSTEM_ERROR,
            severity=AuditSeverity.ERROR,
            description=f"System error: {error_type}",
            error_message=error_message,
            details=details or {},
            correlation_id=correlation_id,
        )
