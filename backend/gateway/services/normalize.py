"""
Notes Gateway — Argument Normalizer & Time-Range Translator
============================================================

What:  Converts optional operation arguments into the fixed, non-optional
       values the backends expect.
How:   Small pure functions, one per argument shape.
Who:   Called by RecordGateway and SearchGateway while building backend
       queries and records.

Normalization rules:
    optional string            → str, absent = ""
    optional list of optional  → list without None entries, absent stays None
    optional float timestamp   → datetime, absent = EPOCH (the zero instant)
    optional float range bound → datetime or None (None = unbounded)
    optional image string      → bytes, absent = b""

Timestamps are truncated toward zero to whole seconds; fractional seconds
are discarded, never rounded.
"""

from datetime import datetime, timedelta
from typing import List, Optional, Sequence, Tuple

from gateway.models.note import EPOCH


def to_string(value: Optional[str]) -> str:
    if value is None:
        return ""
    return value


def to_string_list(values: Optional[Sequence[Optional[str]]]) -> Optional[List[str]]:
    """
    Drops None entries from a list argument.

    An absent list stays None ("not given"), which is different from a
    given list that turns out empty after filtering.
    """
    if values is None:
        return None
    return [value for value in values if value is not None]


def _instant(seconds: float) -> datetime:
    # int() truncates toward zero, matching the backend's whole-second clock.
    # Offsetting EPOCH keeps negative and far-future values representable.
    return EPOCH + timedelta(seconds=int(seconds))


def to_timestamp(value: Optional[float]) -> datetime:
    """Absent timestamps become the zero instant, not "unspecified"."""
    if value is None:
        return EPOCH
    return _instant(value)


def to_range(
    fromdate: Optional[float], todate: Optional[float]
) -> Tuple[Optional[datetime], Optional[datetime]]:
    """
    Translates a pair of optional numeric bounds into backend range bounds.

    Each side is independent. No check that fromdate <= todate; the record
    service handles inverted ranges.
    """
    from_time = _instant(fromdate) if fromdate is not None else None
    to_time = _instant(todate) if todate is not None else None
    return from_time, to_time


def to_bytes(value: Optional[str]) -> bytes:
    # surrogateescape reverses NoteResolver.image(), so a payload read from the
    # gateway and written back arrives at the backend byte-for-byte.
    if value is None:
        return b""
    return value.encode("utf-8", errors="surrogateescape")
