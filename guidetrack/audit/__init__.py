"""Audit logging package."""

from guidetrack.audit.logger import (
    AuditLogger,
    configure_logging,
    create_correlation_id,
    event_for_action,
)

__all__ = ["AuditLogger", "configure_logging", "create_correlation_id", "event_for_action"]
