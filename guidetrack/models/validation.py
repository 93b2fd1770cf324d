"""
Form Validation Models

The calculation core never rejects data. Rejection happens one layer up,
in guidetrack.validation, and is reported with these models.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from guidetrack.models.base import utc_now


class ValidationIssue(BaseModel):
    """A single validation issue found."""

    field: str = Field(
        ...,
        description="Field with the issue"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'missing', 'invalid_value', 'conflict')"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )
    severity: str = Field(
        ...,
        pattern="^(error|warning|info)$",
        description="Issue severity"
    )
    suggested_fix: Optional[str] = Field(
        default=None,
        description="Suggested fix if available"
    )


class ValidationResult(BaseModel):
    """
    Result of validating one form submission.

    Errors block the save. Warnings (e.g. an overlapping tour) are shown
    to the user but never block it.
    """

    entity_type: str = Field(
        ...,
        description="What was validated ('tour', 'expense', 'agency')"
    )
    entity_id: Optional[str] = None
    validated_at: datetime = Field(default_factory=utc_now)

    issues: list[ValidationIssue] = Field(default_factory=list)

    @property
    def warnings(self) -> list[str]:
        return [issue.message for issue in self.issues if issue.severity == "warning"]

    @property
    def has_errors(self) -> bool:
        """Check if there are any error-level issues."""
        return any(issue.severity == "error" for issue in self.issues)

    @property
    def error_count(self) -> int:
        """Count error-level issues."""
        return sum(1 for issue in self.issues if issue.severity == "error")

    @property
    def is_valid(self) -> bool:
        return not self.has_errors

    def errors_by_field(self) -> dict[str, str]:
        """First error message per field, the shape forms display."""
        errors: dict[str, str] = {}
        for issue in self.issues:
            if issue.severity == "error" and issue.field not in errors:
                errors[issue.field] = issue.message
        return errors
