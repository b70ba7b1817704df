"""Conversions between stored datetimes and the timestamp shapes seen on the wire.

Timestamps leave the API as ``{"seconds": ..., "nanoseconds": ...}``. Consumers
may also receive the underscore-prefixed variant emitted by some document
stores, ISO-8601 strings or epoch milliseconds, so ``parse_timestamp`` accepts
all of them and returns ``None`` for anything it cannot interpret.
"""

from collections.abc import Mapping
from datetime import datetime, timedelta, timezone
from typing import Any
from typing_extensions import TypedDict

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


class TimestampDict(TypedDict):
    seconds: int
    nanoseconds: int


def _ensure_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _from_seconds_pair(seconds: Any, nanoseconds: Any) -> datetime | None:
    if not _is_number(seconds):
        return None
    try:
        micros = nanoseconds // 1000 if _is_number(nanoseconds) else 0
        return EPOCH + timedelta(seconds=seconds, microseconds=micros)
    except (OverflowError, ValueError):
        return None


def parse_timestamp(value: Any) -> datetime | None:
    if not value or isinstance(value, bool):
        return None

    if isinstance(value, datetime):
        return _ensure_utc(value)

    if isinstance(value, Mapping):
        if "seconds" in value:
            return _from_seconds_pair(value["seconds"], value.get("nanoseconds"))
        if "_seconds" in value:
            return _from_seconds_pair(value["_seconds"], value.get("_nanoseconds"))
        return None

    if isinstance(value, str):
        try:
            return _ensure_utc(datetime.fromisoformat(value.strip()))
        except ValueError:
            return None

    if _is_number(value):
        try:
            return EPOCH + timedelta(milliseconds=value)
        except (OverflowError, ValueError):
            return None

    return None


def to_timestamp_dict(value: datetime) -> TimestampDict:
    delta = _ensure_utc(value) - EPOCH
    return {
        "seconds": delta.days * 86400 + delta.seconds,
        "nanoseconds": delta.microseconds * 1000,
    }
