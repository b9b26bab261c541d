"""Low-level JSON helpers for repositories and import payloads."""
from __future__ import annotations

import json
from pathlib import Path

from .errors import DataLoadError, DataValidationError


def load_json(path: Path) -> object:
    """Load JSON from disk and raise DataLoadError on failure."""
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise DataLoadError(f"Definition file not found: {path}") from exc
    except OSError as exc:
        raise DataLoadError(f"Unable to read definition file: {path}") from exc

    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise DataLoadError(f"Invalid JSON in {path}: {exc}") from exc


def parse_json_text(text: str, context: str) -> object:
    """Parse a user supplied JSON document, raising DataValidationError on failure."""
    if not isinstance(text, str) or not text.strip():
        raise DataValidationError(f"{context}: JSON is empty.")
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise DataValidationError(f"{context}: invalid JSON ({exc.msg}).") from exc
