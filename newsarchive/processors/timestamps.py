"""Publish-time parsing for structured-data ``datePublished`` values."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Callable, Optional, Tuple

from ..utils.logging import get_logger

logger = get_logger("newsarchive.processors.timestamps")


def _iso_offset(value: str) -> Optional[datetime]:
    dt = datetime.fromisoformat(value)
    return dt if dt.tzinfo is not None else None


def _strptime(fmt: str) -> Callable[[str], Optional[datetime]]:
    def parse(value: str) -> Optional[datetime]:
        return datetime.strptime(value, fmt)

    return parse


# Tried in order. Only the last one accepts values without an offset; those
# are pinned to the publisher's default offset by the caller.
_GRAMMARS: Tuple[Tuple[str, Callable[[str], Optional[datetime]]], ...] = (
    ("iso-offset", _iso_offset),
    ("offset-no-fraction", _strptime("%Y-%m-%dT%H:%M:%S%z")),
    ("offset-fraction", _strptime("%Y-%m-%dT%H:%M:%S.%f%z")),
    ("no-offset", _strptime("%Y-%m-%dT%H:%M:%S")),
)


def parse_offset(offset: str) -> timezone:
    """Turn ``+07:00`` / ``+0700`` / ``Z`` into a fixed ``timezone``."""
    offset = offset.strip()
    if offset in ("Z", "z"):
        return timezone.utc
    sign = -1 if offset.startswith("-") else 1
    digits = offset.lstrip("+-").replace(":", "")
    if len(digits) != 4 or not digits.isdigit():
        raise ValueError(f"Invalid UTC offset: {offset!r}")
    return timezone(sign * timedelta(hours=int(digits[:2]), minutes=int(digits[2:])))


def _try_grammars(value: str, default_tz: timezone) -> Optional[datetime]:
    for name, grammar in _GRAMMARS:
        try:
            dt = grammar(value)
        except ValueError:
            continue
        if dt is None:
            continue
        if dt.tzinfo is None:
            dt = dt.replace(tzinfo=default_tz)
        logger.debug("Parsed %r with grammar %s", value, name)
        return dt
    return None


def parse_publish_time(value: object, default_offset: str = "+00:00") -> Optional[datetime]:
    """Parse a publish timestamp into a timezone-aware ``datetime``.

    Every grammar is tried first on the raw value, then again with
    ``default_offset`` appended. Returns ``None`` when nothing matches; the
    caller must treat that as an extraction failure.
    """
    if not isinstance(value, str) or not value.strip():
        return None
    raw = value.strip()
    default_tz = parse_offset(default_offset)

    dt = _try_grammars(raw, default_tz)
    if dt is None:
        dt = _try_grammars(raw + default_offset.strip(), default_tz)
    if dt is None:
        logger.warning("Unparseable publish time: %r", value)
        return None
    try:
        dt.astimezone(timezone.utc)
    except OverflowError:
        logger.warning("Publish time out of range: %r", value)
        return None
    return dt
