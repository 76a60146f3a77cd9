# wotd/log.py
"""
structlog setup.

Call configure_logging() once at process start (server or CLI), then build
loggers with get_logger() and hand them to the components that log.
"""
from __future__ import annotations

import logging
import sys

import structlog


def _stderr_logger(*args):
    # resolve sys.stderr per logger, it can be swapped after configuration
    return structlog.PrintLogger(sys.stderr)


def _level_number(level: str) -> int:
    # getLevelName returns "Level X" for names it does not know
    number = logging.getLevelName(level.strip().upper())
    return number if isinstance(number, int) else logging.INFO


def configure_logging(level: str = "INFO", fmt: str = "json") -> None:
    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if fmt == "json":
        processors.append(structlog.processors.JSONRenderer(ensure_ascii=False))
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(_level_number(level)),
        logger_factory=_stderr_logger,
        cache_logger_on_first_use=True,
    )


def get_logger(name: str, **initial_values):
    return structlog.get_logger(name, **initial_values)
