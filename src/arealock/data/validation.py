"""Structural checks shared by repositories and import codecs."""
from __future__ import annotations

from typing import List

from .errors import DataValidationError


def require_mapping(value: object, context: str) -> dict[str, object]:
    if not isinstance(value, dict):
        raise DataValidationError(f"{context} must be an object/dict.")
    return value


def require_list(value: object, context: str) -> list[object]:
    if not isinstance(value, list):
        raise DataValidationError(f"{context} must be a list.")
    return value


def require_str(value: object, context: str) -> str:
    if not isinstance(value, str):
        raise DataValidationError(f"{context} must be a string.")
    return value


def require_int(value: object, context: str, *, minimum: int | None = None) -> int:
    # bool is an int subclass but never a valid count or coordinate
    if isinstance(value, bool) or not isinstance(value, int):
        raise DataValidationError(f"{context} must be an integer.")
    if minimum is not None and value < minimum:
        raise DataValidationError(f"{context} must be >= {minimum}.")
    return value


def require_bool(value: object, context: str) -> bool:
    if not isinstance(value, bool):
        raise DataValidationError(f"{context} must be a boolean.")
    return value


def require_str_list(value: object, context: str) -> List[str]:
    result: List[str] = []
    for index, entry in enumerate(require_list(value, context)):
        text = require_str(entry, f"{context}[{index}]").strip()
        if not text:
            raise DataValidationError(f"{context}[{index}] must not be empty.")
        result.append(text)
    return result
