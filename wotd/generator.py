# wotd/generator.py
from __future__ import annotations

import os
from pathlib import Path
from typing import Iterable, Mapping, Union

from .errors import ValidationFailedError
from .schema import Dictionary, DictionaryEntry, ValidationReport

PRETTY_INDENT = 4


def build_dictionary(scheduled: Mapping[int, DictionaryEntry]) -> Dictionary:
    """Artifact root with entries in ascending day order."""
    words = []
    for day in sorted(scheduled):
        entry = scheduled[day]
        # the mapping key is authoritative for the emitted index
        if entry.day_index != day:
            entry = entry.model_copy(update={"day_index": day})
        words.append(entry)
    return Dictionary(words=words)


def _render(dictionary: Dictionary, pretty: bool) -> str:
    return dictionary.model_dump_json(by_alias=True, indent=PRETTY_INDENT if pretty else None)


def render_json(scheduled: Mapping[int, DictionaryEntry], pretty: bool = True) -> str:
    return _render(build_dictionary(scheduled), pretty)


def render_all_json(entries: Iterable[DictionaryEntry], pretty: bool = True) -> str:
    """Every word, scheduled ones first by day, then unscheduled ones (index 0) in input order."""
    entries = list(entries)
    scheduled = sorted((e for e in entries if e.day_index is not None), key=lambda e: e.day_index)
    unscheduled = [e for e in entries if e.day_index is None]
    return _render(Dictionary(words=scheduled + unscheduled), pretty)


def parse_json(data: Union[str, bytes]) -> Dictionary:
    return Dictionary.model_validate_json(data)


def write_atomic(path: Union[str, Path], content: str) -> None:
    """Write to `<path>.tmp` and rename over `path`."""
    path = Path(path)
    tmp = path.with_name(path.name + ".tmp")
    try:
        tmp.write_text(content, encoding="utf-8")
        os.replace(tmp, path)
    except OSError:
        tmp.unlink(missing_ok=True)
        raise


class Generator:
    def __init__(self, logger, pretty: bool = True):
        self.logger = logger
        self.pretty = pretty

    def generate_to_file(
        self,
        scheduled: Mapping[int, DictionaryEntry],
        path: Union[str, Path],
        report: ValidationReport,
    ) -> int:
        """Write the artifact; refuses when `report` is invalid. Returns bytes written."""
        if not report.is_valid:
            self.logger.error("generate_refused", path=str(path), errors=report.errors)
            raise ValidationFailedError(report).with_context("path", str(path))

        content = render_json(scheduled, pretty=self.pretty)
        write_atomic(path, content)
        size = len(content.encode("utf-8"))
        self.logger.info("dictionary_generated", path=str(path), words=len(scheduled), size=size, pretty=self.pretty)
        return size

    def generate_all_to_file(self, entries: Iterable[DictionaryEntry], path: Union[str, Path]) -> int:
        content = render_all_json(entries, pretty=self.pretty)
        write_atomic(path, content)
        size = len(content.encode("utf-8"))
        self.logger.info("dictionary_generated_all", path=str(path), size=size, pretty=self.pretty)
        return size
