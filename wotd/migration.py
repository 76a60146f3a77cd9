# wotd/migration.py
"""
Import a dictionary.json into the words table.

Existing words are kept: every schedule is cleared, then each word in the
file either updates the day index of the stored word with the same text or
is inserted. Words only present in the store stay in the unscheduled pool.
Everything runs in one transaction.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Set, Tuple, Union

from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from .errors import MigrationError, WotdError
from .models import Word
from .repository import WordRepository
from .schema import Dictionary, DictionaryEntry

PROGRESS_EVERY = 50


@dataclass
class MigrationResult:
    updated: int = 0
    inserted: int = 0
    preserved: int = 0
    duplicates_removed: int = 0   # repeated texts already in the store
    duplicates_skipped: int = 0   # repeated texts in the input file
    conflicts_skipped: int = 0    # input words whose day was already taken in this run

    @property
    def total_words(self) -> int:
        return self.updated + self.inserted + self.preserved


def parse_dictionary_json(data: Union[str, bytes]) -> Dictionary:
    try:
        return Dictionary.model_validate_json(data)
    except ValidationError as e:
        raise MigrationError("Failed to parse dictionary JSON", cause=e).with_context("operation", "migrate_parse_json")


def deduplicate_entries(entries: List[DictionaryEntry]) -> Tuple[List[DictionaryEntry], int]:
    """First occurrence of each word text wins."""
    seen: Set[str] = set()
    unique: List[DictionaryEntry] = []
    for e in entries:
        if e.word in seen:
            continue
        seen.add(e.word)
        unique.append(e)
    return unique, len(entries) - len(unique)


class Migrator:
    def __init__(self, session: AsyncSession, logger):
        self.session = session
        self.logger = logger
        self.repo = WordRepository(session, logger)

    async def migrate_words(self, dictionary: Dictionary) -> MigrationResult:
        word_count = len(dictionary.words)
        self.logger.info("migration_started", word_count=word_count)
        result = MigrationResult()

        try:
            async with self.session.begin():
                existing = await self.repo.count_scheduled_words()
                self.logger.info("migration_existing_schedule", existing_count=existing)

                result.duplicates_removed = await self.repo.deduplicate_words()
                if result.duplicates_removed:
                    self.logger.info("migration_db_duplicates_removed", count=result.duplicates_removed)

                if existing:
                    await self.repo.unset_all_day_indexes()

                unique, result.duplicates_skipped = deduplicate_entries(dictionary.words)
                if result.duplicates_skipped:
                    self.logger.info("migration_input_duplicates_skipped", count=result.duplicates_skipped)

                taken: Set[int] = set()
                for i, entry in enumerate(unique, start=1):
                    if i % PROGRESS_EVERY == 0:
                        self.logger.debug("migration_progress", processed=i, total=len(unique))

                    day = entry.day_index
                    if day is not None and day in taken:
                        self.logger.warning("migration_day_conflict", word=entry.word, day_index=day)
                        result.conflicts_skipped += 1
                        continue
                    if day is not None:
                        taken.add(day)

                    stored = await self.repo.get_word_by_text(entry.word)
                    if stored is not None:
                        await self.repo.update_word_day_index(entry.word, day)
                        result.updated += 1
                    else:
                        await self.repo.add_word(Word.from_entry(entry))
                        result.inserted += 1

                total = await self.repo.count_words()
                result.preserved = total - result.updated - result.inserted
        except WotdError as e:
            self.logger.error("migration_failed", error=str(e), context=e.context)
            raise MigrationError("Migration failed, transaction rolled back", cause=e).with_context(
                "word_count", word_count
            ) from e

        self.logger.info(
            "migration_completed",
            duplicates_removed=result.duplicates_removed,
            duplicates_skipped=result.duplicates_skipped,
            conflicts_skipped=result.conflicts_skipped,
            updated=result.updated,
            inserted=result.inserted,
            preserved=result.preserved,
            total_words=result.total_words,
        )
        return result
