# wotd/errors.py
from __future__ import annotations

from typing import Any, Dict, Optional


class WotdError(Exception):
    """Application error with an HTTP-ish status code and structured context."""

    status_code: int = 500

    def __init__(self, message: str, *, status_code: Optional[int] = None, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.cause = cause
        self.context: Dict[str, Any] = {}

    def with_context(self, key: str, value: Any) -> "WotdError":
        self.context[key] = value
        return self

    def __str__(self) -> str:
        if self.cause is not None:
            return f"{self.message}: {self.cause}"
        return self.message


class EmptyCollectionError(WotdError):
    status_code = 500

    def __init__(self, message: str = "Cannot select word from empty dictionary", **kw):
        super().__init__(message, **kw)


class InvalidPositionError(WotdError):
    status_code = 400

    def __init__(self, position: int, message: str = "Invalid word index: must be greater than 0", **kw):
        super().__init__(message, **kw)
        self.position = position
        self.with_context("requested_index", position)


class DictionaryLoadError(WotdError):
    status_code = 500


class ValidationFailedError(WotdError):
    status_code = 422

    def __init__(self, report, message: str = "Dictionary validation failed", **kw):
        super().__init__(message, **kw)
        self.report = report
        self.with_context("total_words", report.total_words)
        self.with_context("missing_count", len(report.missing_indexes))


class RepositoryError(WotdError):
    status_code = 500


class MigrationError(WotdError):
    status_code = 500


class PostingError(WotdError):
    status_code = 502


class ImageFetchError(WotdError):
    status_code = 502
