# wotd/dictionary.py
from __future__ import annotations

from pathlib import Path
from typing import List, Union

from pydantic import ValidationError

from .errors import DictionaryLoadError
from .schema import SERVING, Dictionary, DictionaryEntry


class DictionaryLoader:
    """Reads and parses dictionary.json for the server. Irregular rows are kept and logged."""

    def __init__(self, logger):
        self.logger = logger

    def read_file(self, path: Union[str, Path]) -> bytes:
        try:
            data = Path(path).read_bytes()
        except OSError as e:
            self.logger.error("dictionary_read_failed", file_path=str(path), error=str(e))
            raise DictionaryLoadError("Failed to read dictionary file", cause=e).with_context("file_path", str(path)) from e
        self.logger.debug("dictionary_read", file_path=str(path), file_size=len(data))
        return data

    def parse(self, data: bytes, path: Union[str, Path] = "<memory>") -> Dictionary:
        try:
            dictionary = Dictionary.model_validate_json(data, context={SERVING: True})
        except ValidationError as e:
            self.logger.error("dictionary_parse_failed", file_path=str(path), file_size=len(data), error=str(e))
            raise (
                DictionaryLoadError("Failed to parse dictionary file", cause=e)
                .with_context("file_path", str(path))
                .with_context("file_size", len(data))
            ) from e

        irregular = [i for i, w in enumerate(dictionary.words, start=1) if not w.is_well_formed]
        if irregular:
            self.logger.warning("dictionary_irregular_entries", file_path=str(path), positions=irregular)
        self.logger.info("dictionary_parsed", file_path=str(path), word_count=len(dictionary.words))
        return dictionary

    def load(self, path: Union[str, Path]) -> List[DictionaryEntry]:
        return self.parse(self.read_file(path), path).words
