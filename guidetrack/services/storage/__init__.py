"""
Storage Services Package

Provides the abstract whole-collection storage interface and its backends.
JSON files are the default backend; the in-memory backend serves tests.
"""

from guidetrack.services.storage.interface import (
    CorruptDataError,
    StorageError,
    StorageInterface,
    StorageKeys,
)
from guidetrack.services.storage.json_files import JsonFileStorage
from guidetrack.services.storage.memory import InMemoryStorage

__all__ = [
    # Interface
    "StorageInterface",
    "StorageKeys",
    # Exceptions
    "CorruptDataError",
    "StorageError",
    # Backends
    "InMemoryStorage",
    "JsonFileStorage",
]
