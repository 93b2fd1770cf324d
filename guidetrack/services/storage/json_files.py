"""
JSON File Storage Implementation

DESIGN DECISION: One JSON file per storage key inside a data directory.
1. The user can read and back up their data with any text editor
2. No database setup required
3. Each collection save is a single atomic file replace

TRADEOFFS:
- Whole-collection writes (fine for personal-scale data)
- No cross-collection transactions (callers persist collections independently)
"""

import os
import tempfile
from pathlib import Path
from typing import Optional

from tenacity import (
    RetryError,
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from guidetrack.config import get_settings
from guidetrack.services.storage.interface import StorageError, StorageInterface


class JsonFileStorage(StorageInterface):
    """
    Stores each key as <data_dir>/<key>.json.

    Writes go to a temporary file first and are moved into place, and
    are retried on transient OS errors.
    """

    def __init__(
        self,
        data_dir: Optional[Path] = None,
        write_retries: Optional[int] = None,
    ):
        """
        Initialize file storage.

        Args:
            data_dir: Directory for the JSON files.
                      Defaults to the configured storage data_dir.
            write_retries: Attempts per write. Defaults to configuration.
        """
        super().__init__()
        settings = get_settings().storage
        self._data_dir = Path(data_dir) if data_dir is not None else settings.data_path
        self._write_retries = write_retries or settings.write_retries

    @property
    def data_dir(self) -> Path:
        return self._data_dir

    def _path(self, key: str) -> Path:
        return self._data_dir / f"{key}.json"

    async def read_raw(self, key: str) -> Optional[str]:
        path = self._path(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as e:
            raise StorageError(f"Could not read {path}: {e}") from e

    def _write_file(self, path: Path, value: str) -> None:
        self._data_dir.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=self._data_dir, prefix=f".{path.stem}-", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(value)
            os.replace(tmp_name, path)
        except OSError:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise

    async def write_raw(self, key: str, value: str) -> None:
        path = self._path(key)
        try:
            for attempt in Retrying(
                stop=stop_after_attempt(self._write_retries),
                wait=wait_exponential(multiplier=0.1, max=1),
                retry=retry_if_exception_type(OSError),
                reraise=True,
            ):
                with attempt:
                    self._write_file(path, value)
        except (OSError, RetryError) as e:
            self._logger.error("storage_write_failed", key=key, path=str(path), error=str(e))
            raise StorageError(f"Could not write {path}: {e}") from e

    async def remove_raw(self, key: str) -> None:
        try:
            self._path(key).unlink(missing_ok=True)
        except OSError as e:
            raise StorageError(f"Could not remove {key}: {e}") from e
