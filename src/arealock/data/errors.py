"""Custom exceptions for data loading and validation."""


class DataError(Exception):
    """Base exception for the data layer."""


class DataLoadError(DataError):
    """Raised when JSON files are missing or invalid."""


class DataValidationError(DataError):
    """Raised when JSON content or an import payload fails structural validation."""


class StateStoreError(DataError):
    """Raised when persisted progress cannot be written."""
