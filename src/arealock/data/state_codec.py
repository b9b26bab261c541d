"""Encoders for the delimiter-joined strings kept in the state store.

Every decoder is tolerant: malformed fragments are dropped rather than raised,
so a corrupt value degrades to empty progress instead of blocking startup.
"""
from __future__ import annotations

import logging
from typing import Dict, Iterable, Mapping, Set

logger = logging.getLogger(__name__)

AREA_LIST_SEPARATOR = ","
TILE_LIST_SEPARATOR = "|"
POINTS_PAIR_SEPARATOR = ":"


def join_ids(ids: Iterable[str], separator: str = AREA_LIST_SEPARATOR) -> str:
    """Join ids in sorted order so the stored value is stable."""
    return separator.join(sorted(ids))


def split_ids(raw: str | None, separator: str = AREA_LIST_SEPARATOR) -> Set[str]:
    if not raw:
        return set()
    return {part.strip() for part in raw.split(separator) if part.strip()}


def parse_int(raw: str | None, default: int = 0) -> int:
    """Parse a stored integer, returning ``default`` for missing or garbled values."""
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw.strip())
    except ValueError:
        logger.warning("Ignoring unparsable integer value %r", raw)
        return default


def encode_points_map(points: Mapping[str, int]) -> str:
    """Serialise ``{area_id: points}`` as ``id:points`` pairs; non-positive entries are skipped."""
    return AREA_LIST_SEPARATOR.join(
        f"{area_id}{POINTS_PAIR_SEPARATOR}{value}"
        for area_id, value in sorted(points.items())
        if value > 0
    )


def decode_points_map(raw: str | None) -> Dict[str, int]:
    result: Dict[str, int] = {}
    if not raw:
        return result
    for part in raw.split(AREA_LIST_SEPARATOR):
        area_id, sep, value = part.partition(POINTS_PAIR_SEPARATOR)
        area_id = area_id.strip()
        if not sep or not area_id:
            continue
        try:
            points = int(value.strip())
        except ValueError:
            logger.warning("Ignoring malformed per-area points entry %r", part)
            continue
        if points > 0:
            result[area_id] = points
    return result


__all__ = [
    "AREA_LIST_SEPARATOR",
    "POINTS_PAIR_SEPARATOR",
    "TILE_LIST_SEPARATOR",
    "decode_points_map",
    "encode_points_map",
    "join_ids",
    "parse_int",
    "split_ids",
]
