"""
Abstract Storage Interface

DESIGN DECISION: Storage is a whole-collection key-value store.
Every save replaces an entire collection under a fixed key; there is no
partial-update API. This allows us to:
1. Keep backends trivial (a backend only moves strings in and out)
2. Use in-memory storage for testing
3. Share JSON (de)serialisation and defaults across all backends

Concrete backends implement read_raw / write_raw / remove_raw.
Everything typed lives here.
"""

import json
from abc import ABC, abstractmethod
from typing import Any, Optional

import structlog
from pydantic import TypeAdapter, ValidationError

from guidetrack.models.base import utc_now
from guidetrack.models.records import (
    DEFAULT_SETTINGS,
    Agency,
    AppSettings,
    Expense,
    UserProfile,
    default_agencies,
)
from guidetrack.models.tour import TourEntry


class StorageKeys:
    """Fixed keys, one per persisted collection."""
    USER = "gt_user"
    TOURS = "gt_tours"
    EXPENSES = "gt_expenses"
    AGENCIES = "gt_agencies"
    SETTINGS = "gt_settings"
    EXPENSE_CATEGORIES = "gt_expense_categories"

    ALL = (USER, TOURS, EXPENSES, AGENCIES, SETTINGS, EXPENSE_CATEGORIES)


_TOURS = TypeAdapter(list[TourEntry])
_EXPENSES = TypeAdapter(list[Expense])
_AGENCIES = TypeAdapter(list[Agency])
_CATEGORIES = TypeAdapter(list[str])


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class CorruptDataError(StorageError):
    """Stored or imported data does not match the expected schema."""
    pass


class StorageInterface(ABC):
    """
    Abstract interface for GuideTrack storage.

    Absent keys read as documented defaults: empty lists, default
    settings, no user. An empty agency list is seeded with the default
    agencies.
    """

    def __init__(self):
        self._logger = structlog.get_logger(__name__)

    # ── Backend primitives ──

    @abstractmethod
    async def read_raw(self, key: str) -> Optional[str]:
        """
        Read the serialized value stored under key.

        Returns:
            The stored text, or None if the key is absent
        """
        pass

    @abstractmethod
    async def write_raw(self, key: str, value: str) -> None:
        """
        Replace the value stored under key.

        Raises:
            StorageError: If the write fails
        """
        pass

    @abstractmethod
    async def remove_raw(self, key: str) -> None:
        """Delete key. Removing an absent key is not an error."""
        pass

    # ── Generic JSON helpers ──

    async def _get_item(self, key: str) -> Any:
        raw = await self.read_raw(key)
        if not raw:
            return None
        try:
            return json.loads(raw)
        except json.JSONDecodeError as e:
            # Unreadable JSON behaves like a missing key
            self._logger.warning("storage_read_unparsable", key=key, error=str(e))
            return None

    async def _set_item(self, key: str, value: Any) -> None:
        await self.write_raw(key, json.dumps(value, ensure_ascii=False))

    @staticmethod
    def _validate(adapter_or_model, data: Any, key: str):
        try:
            if isinstance(adapter_or_model, TypeAdapter):
                return adapter_or_model.validate_python(data)
            return adapter_or_model.model_validate(data)
        except ValidationError as e:
            raise CorruptDataError(f"Stored value for {key} is invalid: {e}") from e

    # ── User ──

    async def get_user(self) -> Optional[UserProfile]:
        data = await self._get_item(StorageKeys.USER)
        if data is None:
            return None
        return self._validate(UserProfile, data, StorageKeys.USER)

    async def set_user(self, user: UserProfile) -> None:
        await self._set_item(StorageKeys.USER, user.to_storage_dict())

    async def remove_user(self) -> None:
        await self.remove_raw(StorageKeys.USER)

    # ── Tours ──

    async def get_tours(self) -> list[TourEntry]:
        data = await self._get_item(StorageKeys.TOURS)
        if data is None:
            return []
        return self._validate(_TOURS, data, StorageKeys.TOURS)

    async def set_tours(self, tours: list[TourEntry]) -> None:
        await self._set_item(StorageKeys.TOURS, [t.to_storage_dict() for t in tours])

    # ── Expenses ──

    async def get_expenses(self) -> list[Expense]:
        data = await self._get_item(StorageKeys.EXPENSES)
        if data is None:
            return []
        return self._validate(_EXPENSES, data, StorageKeys.EXPENSES)

    async def set_expenses(self, expenses: list[Expense]) -> None:
        await self._set_item(StorageKeys.EXPENSES, [e.to_storage_dict() for e in expenses])

    # ── Agencies ──

    async def get_agencies(self) -> list[Agency]:
        data = await self._get_item(StorageKeys.AGENCIES)
        if not data:
            agencies = default_agencies()
            await self.set_agencies(agencies)
            self._logger.info("storage_agencies_seeded", count=len(agencies))
            return agencies
        return self._validate(_AGENCIES, data, StorageKeys.AGENCIES)

    async def set_agencies(self, agencies: list[Agency]) -> None:
        await self._set_item(StorageKeys.AGENCIES, [a.to_storage_dict() for a in agencies])

    # ── Settings ──

    async def get_settings(self) -> AppSettings:
        data = await self._get_item(StorageKeys.SETTINGS)
        if data is None:
            return DEFAULT_SETTINGS
        return self._validate(AppSettings, data, StorageKeys.SETTINGS)

    async def set_settings(self, settings: AppSettings) -> None:
        await self._set_item(StorageKeys.SETTINGS, settings.to_storage_dict())

    # ── Expense categories ──

    async def get_expense_categories(self) -> list[str]:
        data = await self._get_item(StorageKeys.EXPENSE_CATEGORIES)
        if data is None:
            return []
        return self._validate(_CATEGORIES, data, StorageKeys.EXPENSE_CATEGORIES)

    async def set_expense_categories(self, categories: list[str]) -> None:
        await self._set_item(StorageKeys.EXPENSE_CATEGORIES, list(categories))

    # ── Backup ──

    async def export_all_data(self) -> str:
        """
        Serialize every collection into one pretty-printed JSON document.

        The document can be fed back to import_data.
        """
        tours = await self.get_tours()
        expenses = await self.get_expenses()
        agencies = await self.get_agencies()
        settings = await self.get_settings()
        user = await self.get_user()

        return json.dumps(
            {
                "tours": [t.to_storage_dict() for t in tours],
                "expenses": [e.to_storage_dict() for e in expenses],
                "agencies": [a.to_storage_dict() for a in agencies],
                "settings": settings.to_storage_dict(),
                "user": user.to_storage_dict() if user else None,
                "exportedAt": utc_now().isoformat(),
            },
            ensure_ascii=False,
            indent=2,
        )

    async def import_data(self, json_string: str) -> list[str]:
        """
        Restore collections from an export_all_data document.

        Only the collections present in the document are replaced, even when
        they are empty. Keys that are missing or null are left alone. Everything is validated before anything is written.

        Returns:
            Names of the collections that were replaced

        Raises:
            CorruptDataError: If the document is not valid JSON or fails validation
        """
        try:
            data = json.loads(json_string)
        except json.JSONDecodeError as e:
            raise CorruptDataError(f"Backup is not valid JSON: {e}") from e
        if not isinstance(data, dict):
            raise CorruptDataError("Backup must be a JSON object")

        pending = []
        if data.get("tours") is not None:
            pending.append(("tours", self.set_tours, self._validate(_TOURS, data["tours"], "tours")))
        if data.get("expenses") is not None:
            pending.append(
                ("expenses", self.set_expenses, self._validate(_EXPENSES, data["expenses"], "expenses"))
            )
        if data.get("agencies") is not None:
            pending.append(
                ("agencies", self.set_agencies, self._validate(_AGENCIES, data["agencies"], "agencies"))
            )
        if data.get("settings") is not None:
            pending.append(
                ("settings", self.set_settings, self._validate(AppSettings, data["settings"], "settings"))
            )

        for _, setter, value in pending:
            await setter(value)

        imported = [name for name, _, _ in pending]
        self._logger.info("storage_data_imported", collections=imported)
        return imported

    async def clear_all(self) -> None:
        for key in StorageKeys.ALL:
            await self.remove_raw(key)
        self._logger.warning("storage_cleared")
