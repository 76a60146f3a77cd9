# wotd/selector.py
"""
Deterministic word-of-the-day selection.

Positions are 1-based. Anything past the end of the collection wraps
around, and an exact multiple of the length lands on the last entry:
with [A, B, C], positions 1..7 give A B C A B C A.
"""
from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence, TypeVar

import pytz

from .errors import EmptyCollectionError, InvalidPositionError

T = TypeVar("T")


def offset_for_position(length: int, position: int) -> int:
    """0-based offset for a 1-based position in a collection of `length` items."""
    if position <= length:
        return position - 1
    remainder = position % length
    if remainder == 0:
        return length - 1
    return remainder - 1


def select_by_position(entries: Sequence[T], position: int) -> T:
    if len(entries) == 0:
        raise EmptyCollectionError().with_context("requested_index", position)
    if position <= 0:
        raise InvalidPositionError(position).with_context("word_count", len(entries))
    return entries[offset_for_position(len(entries), position)]


def select_by_day_of_year(entries: Sequence[T], day_of_year: int) -> T:
    if len(entries) == 0:
        raise EmptyCollectionError().with_context("day_of_year", day_of_year)
    if day_of_year <= 0:
        raise InvalidPositionError(day_of_year, message="Invalid day of year: must be greater than 0")
    return entries[offset_for_position(len(entries), day_of_year)]


def current_day_of_year(tz: str, now: Optional[datetime] = None) -> int:
    """Day of year (1..366) in timezone `tz`. `now` may be naive UTC or aware."""
    zone = pytz.timezone(tz)
    if now is None:
        local = datetime.now(zone)
    elif now.tzinfo is None:
        local = pytz.utc.localize(now).astimezone(zone)
    else:
        local = now.astimezone(zone)
    return local.timetuple().tm_yday
