"""
Shared building blocks for GuideTrack models.

DESIGN DECISION: Money is Decimal everywhere inside the system.
It is written to JSON as a plain number so stored collections keep the
shape the storage collaborator expects ({"dailyRate": 1500, ...}).
"""

from datetime import datetime, timezone
from decimal import Decimal
from typing import Annotated, Union
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, PlainSerializer
from pydantic.alias_generators import to_camel


def _money_to_json(value: Decimal) -> Union[int, float]:
    if value == value.to_integral_value():
        return int(value)
    return float(value)


Money = Annotated[Decimal, PlainSerializer(_money_to_json, when_used="json")]


def generate_id() -> str:
    """Create a new opaque record identifier."""
    return uuid4().hex


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class RecordModel(BaseModel):
    """
    Base for every persisted or derived record.

    Records are immutable snapshots: changes are made by building a new
    record (model_copy(update=...)), never by assignment.
    Field names are snake_case in Python and camelCase on the wire.
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )

    def to_storage_dict(self) -> dict:
        """Convert to a JSON-ready dict with camelCase keys."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
