"""Data layer utilities for loading definitions and persisting progress."""

from .errors import (
    DataError,
    DataLoadError,
    DataValidationError,
    StateStoreError,
)
from .paths import get_definitions_path, get_package_root
from .state_store import InMemoryStateStore, JsonFileStateStore, StateStore

__all__ = [
    "DataError",
    "DataLoadError",
    "DataValidationError",
    "InMemoryStateStore",
    "JsonFileStateStore",
    "StateStore",
    "StateStoreError",
    "get_definitions_path",
    "get_package_root",
]
