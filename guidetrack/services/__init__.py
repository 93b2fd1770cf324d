"""Services package."""

from guidetrack.services.export import (
    build_combined_csv,
    build_expenses_csv,
    build_tours_csv,
    export_filename,
    write_export,
)
from guidetrack.services.storage import (
    CorruptDataError,
    InMemoryStorage,
    JsonFileStorage,
    StorageError,
    StorageInterface,
    StorageKeys,
)

__all__ = [
    # Export
    "build_combined_csv",
    "build_expenses_csv",
    "build_tours_csv",
    "export_filename",
    "write_export",
    # Storage services
    "CorruptDataError",
    "InMemoryStorage",
    "JsonFileStorage",
    "StorageError",
    "StorageInterface",
    "StorageKeys",
]
