# wotd/repository.py
"""Data access for the words table. Callers own the transaction (session.begin())."""
from __future__ import annotations

from contextlib import contextmanager
from typing import Dict, List, Optional

from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from .errors import RepositoryError
from .models import Word


class WordRepository:
    def __init__(self, session: AsyncSession, logger):
        self.session = session
        self.logger = logger

    @contextmanager
    def _guard(self, operation: str, message: str, **context):
        try:
            yield
        except SQLAlchemyError as e:
            self.logger.error("repository_query_failed", operation=operation, table="words", error=str(e), **context)
            err = RepositoryError(message, cause=e).with_context("operation", operation).with_context("table", "words")
            for k, v in context.items():
                err.with_context(k, v)
            raise err from e

    # ───────── reads ─────────
    async def get_all_words(self) -> List[Word]:
        with self._guard("get_all_words", "Failed to query all words"):
            res = await self.session.execute(
                select(Word).order_by(Word.day_index.is_(None), Word.day_index, Word.id)
            )
            return list(res.scalars().all())

    async def get_words_by_day_index(self) -> Dict[int, Word]:
        """Scheduled words keyed by day index; unscheduled words are left out."""
        with self._guard("get_words_by_day_index", "Failed to query words by day index"):
            res = await self.session.execute(
                select(Word).where(Word.day_index.is_not(None)).order_by(Word.day_index)
            )
            return {w.day_index: w for w in res.scalars().all()}

    async def get_word_by_text(self, text: str) -> Optional[Word]:
        with self._guard("get_word_by_text", "Failed to get word by text", word=text):
            res = await self.session.execute(select(Word).where(Word.word == text).order_by(Word.id).limit(1))
            return res.scalar_one_or_none()

    async def count_words(self) -> int:
        with self._guard("count_words", "Failed to count words"):
            res = await self.session.execute(select(func.count()).select_from(Word))
            return int(res.scalar_one())

    async def count_scheduled_words(self) -> int:
        with self._guard("count_scheduled_words", "Failed to count scheduled words"):
            res = await self.session.execute(
                select(func.count()).select_from(Word).where(Word.day_index.is_not(None))
            )
            return int(res.scalar_one())

    # ───────── writes ─────────
    async def add_word(self, word: Word) -> Word:
        self.logger.debug("word_insert", word=word.word, day_index=word.day_index)
        with self._guard("insert_word", "Failed to insert word", word=word.word, day_index=word.day_index):
            self.session.add(word)
            await self.session.flush()
            return word

    async def update_word_day_index(self, text: str, day_index: Optional[int]) -> int:
        with self._guard("update_word_day_index", "Failed to update word day_index", word=text, day_index=day_index):
            res = await self.session.execute(
                update(Word).where(Word.word == text).values(day_index=day_index)
            )
            return res.rowcount

    async def unset_all_day_indexes(self) -> int:
        with self._guard("unset_all_day_indexes", "Failed to unset day_index assignments"):
            res = await self.session.execute(
                update(Word).where(Word.day_index.is_not(None)).values(day_index=None)
            )
            return res.rowcount

    async def deduplicate_words(self) -> int:
        """Delete repeated word texts, keeping the lowest id of each. Returns rows removed."""
        with self._guard("deduplicate_words", "Failed to deduplicate words"):
            keep = select(func.min(Word.id)).group_by(Word.word)
            res = await self.session.execute(
                delete(Word).where(Word.id.not_in(keep)).execution_options(synchronize_session=False)
            )
            return res.rowcount
