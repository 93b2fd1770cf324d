"""In-memory storage backend, used by tests and throwaway sessions."""

from typing import Optional

from guidetrack.services.storage.interface import StorageInterface


class InMemoryStorage(StorageInterface):
    """Keeps serialized values in a dict, exactly as a file backend would write them."""

    def __init__(self, initial: Optional[dict[str, str]] = None):
        super().__init__()
        self._data: dict[str, str] = dict(initial or {})
        self.write_count = 0

    async def read_raw(self, key: str) -> Optional[str]:
        return self._data.get(key)

    async def write_raw(self, key: str, value: str) -> None:
        self._data[key] = value
        self.write_count += 1

    async def remove_raw(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> list[str]:
        return sorted(self._data)
