# wotd/models.py
from __future__ import annotations

from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from .db import Base
from .schema import DictionaryEntry


class Word(Base):
    __tablename__ = "words"
    __table_args__ = (
        CheckConstraint("day_index IS NULL OR (day_index >= 1 AND day_index <= 366)", name="ck_words_day_index"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    # NULL = in the pool but not scheduled for any day
    day_index: Mapped[int | None] = mapped_column(Integer, unique=True, nullable=True, index=True)

    word: Mapped[str] = mapped_column(String(256), nullable=False)
    meaning: Mapped[str] = mapped_column(Text, nullable=False)
    link: Mapped[str] = mapped_column(Text, nullable=False, default="")
    photo: Mapped[str] = mapped_column(Text, nullable=False, default="")
    photo_attribution: Mapped[str] = mapped_column(Text, nullable=False, default="")

    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now(), onupdate=func.now())

    def to_entry(self) -> DictionaryEntry:
        return DictionaryEntry(
            day_index=self.day_index,
            word=self.word,
            meaning=self.meaning,
            link=self.link or "",
            photo=self.photo or "",
            photo_attribution=self.photo_attribution or "",
        )

    @classmethod
    def from_entry(cls, entry: DictionaryEntry) -> "Word":
        return cls(
            day_index=entry.day_index,
            word=entry.word,
            meaning=entry.meaning,
            link=entry.link,
            photo=entry.photo,
            photo_attribution=entry.photo_attribution,
        )
