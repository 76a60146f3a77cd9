# wotd/schema.py
from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_serializer, field_validator

MIN_DAY_INDEX, MAX_DAY_INDEX = 1, 366

# validation context key: rows of a served artifact are kept as they are
SERVING = "serving"


def _serving(info: ValidationInfo) -> bool:
    return bool(info.context and info.context.get(SERVING))


class DictionaryEntry(BaseModel):
    """
    One word as it appears in dictionary.json.

    Index range and non-empty text are checked on the write side (migration,
    generation). Validating with ``context={SERVING: True}`` skips those checks
    so one irregular row does not take down the whole served artifact.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    # index 0 in an artifact means "not scheduled"
    day_index: Optional[int] = Field(default=None, alias="index")
    word: str
    meaning: str
    link: str = ""
    photo: str = ""
    photo_attribution: str = ""

    @field_validator("day_index", mode="before")
    @classmethod
    def _unscheduled_zero(cls, v):
        if v == 0:
            return None
        return v

    @field_validator("day_index")
    @classmethod
    def _day_in_range(cls, v: Optional[int], info: ValidationInfo) -> Optional[int]:
        if v is not None and not _serving(info) and not (MIN_DAY_INDEX <= v <= MAX_DAY_INDEX):
            raise ValueError(f"day index must be between {MIN_DAY_INDEX} and {MAX_DAY_INDEX}, got {v}")
        return v

    @field_validator("word", "meaning")
    @classmethod
    def _not_empty(cls, v: str, info: ValidationInfo) -> str:
        if not v and not _serving(info):
            raise ValueError("must not be empty")
        return v

    @field_validator("link", "photo", "photo_attribution", mode="before")
    @classmethod
    def _none_as_empty(cls, v):
        return "" if v is None else v

    @field_serializer("day_index")
    def _dump_index(self, v: Optional[int]) -> int:
        return 0 if v is None else v

    @property
    def has_media(self) -> bool:
        return len(self.photo) > 0

    @property
    def is_well_formed(self) -> bool:
        in_range = self.day_index is None or MIN_DAY_INDEX <= self.day_index <= MAX_DAY_INDEX
        return in_range and bool(self.word) and bool(self.meaning)


class Dictionary(BaseModel):
    """Root of dictionary.json."""

    words: List[DictionaryEntry] = Field(default_factory=list, alias="dictionary")

    model_config = ConfigDict(populate_by_name=True)


class ValidationReport(BaseModel):
    is_valid: bool
    total_words: int
    missing_indexes: List[int] = Field(default_factory=list)
    duplicate_indexes: List[int] = Field(default_factory=list)
    errors: List[str] = Field(default_factory=list)

    def missing_ranges(self) -> List[str]:
        """Collapse missing indexes into ranges, e.g. [1, 2, 3, 7] -> ["1-3", "7"]."""
        if not self.missing_indexes:
            return []

        ordered = sorted(self.missing_indexes)
        ranges: List[str] = []
        start = end = ordered[0]
        for i in ordered[1:]:
            if i == end + 1:
                end = i
                continue
            ranges.append(str(start) if start == end else f"{start}-{end}")
            start = end = i
        ranges.append(str(start) if start == end else f"{start}-{end}")
        return ranges


# ───────── HTTP responses ─────────
class DailyWord(BaseModel):
    date: str
    day_of_year: int
    index: int
    word: str
    meaning: str
    link: str = ""
    photo: str = ""
    photo_attribution: str = ""


class PostResponse(BaseModel):
    tweetId: str = ""
    tootId: str = ""
    message: str = ""


class FriendlyError(BaseModel):
    message: str
