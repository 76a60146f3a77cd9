# wotd/validator.py
"""Completeness check for the scheduled dictionary: every day 1..366 exactly once."""
from __future__ import annotations

from typing import Dict, Iterable, List, Mapping, Tuple, TypeVar

from .schema import DictionaryEntry, ValidationReport

REQUIRED_WORD_COUNT = 366

T = TypeVar("T")


def validate(scheduled: Mapping[int, T], duplicate_indexes: Iterable[int] = ()) -> ValidationReport:
    total = len(scheduled)
    errors: List[str] = []

    if total != REQUIRED_WORD_COUNT:
        errors.append(f"Expected {REQUIRED_WORD_COUNT} words with day_index, but found {total}")

    missing = [i for i in range(1, REQUIRED_WORD_COUNT + 1) if i not in scheduled]
    if missing:
        errors.append(f"Missing day indexes: {missing}")

    duplicates = sorted(set(duplicate_indexes))
    if duplicates:
        errors.append(f"Duplicate day indexes found: {duplicates}")

    return ValidationReport(
        is_valid=not errors,
        total_words=total,
        missing_indexes=missing,
        duplicate_indexes=duplicates,
        errors=errors,
    )


def index_by_day(entries: Iterable[DictionaryEntry]) -> Tuple[Dict[int, DictionaryEntry], List[int]]:
    """
    Map scheduled entries by day index.

    Unscheduled entries are skipped. When a day repeats, the first entry
    wins and the day is reported once in the returned duplicate list.
    """
    by_day: Dict[int, DictionaryEntry] = {}
    duplicates: List[int] = []
    for entry in entries:
        if entry.day_index is None:
            continue
        if entry.day_index in by_day:
            if entry.day_index not in duplicates:
                duplicates.append(entry.day_index)
            continue
        by_day[entry.day_index] = entry
    return by_day, sorted(duplicates)
