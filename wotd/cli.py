# wotd/cli.py
"""
dict-gen: maintain the word store and build dictionary.json from it.

    dict-gen [--verbose | --quiet] <command> [flags]

Commands: migrate, validate, generate, help.
"""
from __future__ import annotations

import argparse
import asyncio
import os
import sys
from pathlib import Path
from typing import List, Optional

from .backup import backup_file, cleanup_old_backups
from .db import init_db, make_engine, make_sessionmaker
from .errors import WotdError
from .generator import Generator
from .log import configure_logging, get_logger
from .migration import Migrator, parse_dictionary_json
from .repository import WordRepository
from .schema import ValidationReport
from .validator import REQUIRED_WORD_COUNT, index_by_day, validate

DEFAULT_DB_PATH = "./data/words.db"
DEFAULT_OUTPUT_PATH = "./dictionary.json"
MAX_FILE_SIZE = 100 * 1024 * 1024   # 100MB
BACKUP_KEEP_DAYS = 7
SHOW_AT_MOST = 20

USAGE = """dict-gen - Word of the Day Dictionary Generator

Usage:
  dict-gen [--verbose | --quiet] <command> [flags]

Global Flags:
  --verbose, -v  Enable verbose output
  --quiet, -q    Suppress all output except errors

Commands:
  migrate   Import dictionary.json into the SQLite database
  generate  Generate dictionary.json from the SQLite database
  validate  Validate database integrity (366 unique indexes)
  help      Show this help message

Examples:
  # Preview migration without making changes
  dict-gen migrate --input=./dictionary.json --dry-run

  # Migrate existing dictionary.json
  dict-gen migrate --input=./dictionary.json

  # Validate database
  dict-gen validate

  # Generate dictionary.json (only the 366 scheduled words)
  dict-gen generate --output=./dictionary.json

  # Generate with ALL words (including unscheduled ones)
  dict-gen generate --all --output=./backup-all-words.json
"""


class Output:
    def __init__(self, verbose: bool = False, quiet: bool = False):
        self.verbose_mode = verbose
        self.quiet_mode = quiet

    def info(self, msg: str = "") -> None:
        if not self.quiet_mode:
            print(msg)

    def verbose(self, msg: str) -> None:
        if self.verbose_mode:
            print(f"[VERBOSE] {msg}")

    def error(self, msg: str) -> None:
        print(msg, file=sys.stderr)


class CliError(Exception):
    pass


# ───────── path checks ─────────
def validate_path(path: str) -> None:
    if not os.path.exists(path):
        raise CliError(f"file does not exist: {path}")
    if not os.access(path, os.R_OK):
        raise CliError(f"permission denied for file: {path}")


def validate_path_traversal(path: str) -> None:
    cleaned = os.path.normpath(path)
    if ".." in Path(cleaned).parts:
        raise CliError(f"path traversal not allowed: {path}")
    if os.path.isabs(cleaned):
        raise CliError(f"absolute paths not allowed: {path}")


def validate_file_size(path: str, max_size: int = MAX_FILE_SIZE) -> None:
    if os.path.getsize(path) > max_size:
        raise CliError(f"Input file is too large (over {max_size // (1024 * 1024)}MB): {path}")


def database_url(db_path: str) -> str:
    return f"sqlite+aiosqlite:///{db_path}"


def print_missing(out: Output, report: ValidationReport) -> None:
    if report.missing_indexes:
        out.info(f"   - Missing indexes: {len(report.missing_indexes)}")
        if len(report.missing_indexes) <= SHOW_AT_MOST:
            out.info(f"     {report.missing_indexes}")
        else:
            out.info(f"     First {SHOW_AT_MOST}: {report.missing_indexes[:SHOW_AT_MOST]}")
            out.info(f"     Ranges: {', '.join(report.missing_ranges())}")


# ───────── commands ─────────
async def _migrate(args, out: Output, logger) -> int:
    if args.dry_run:
        out.info("DRY RUN MODE - No changes will be made")
    out.info("Starting migration...")
    out.info(f"   Input: {args.input}")
    out.info(f"   Database: {args.db}")

    out.verbose(f"Validating input file path: {args.input}")
    validate_path(args.input)
    out.verbose("Checking for path traversal...")
    validate_path_traversal(args.input)
    out.verbose("Validating file size...")
    validate_file_size(args.input)

    out.verbose("Parsing JSON...")
    dictionary = parse_dictionary_json(Path(args.input).read_bytes())

    if args.dry_run:
        out.info("\nMigration Preview:")
        out.info(f"   Words to import: {len(dictionary.words)}")
        out.info("\n   Sample words:")
        for w in dictionary.words[:5]:
            out.info(f"      [{w.day_index or 0}] {w.word} - {w.meaning}")

        by_day, duplicates = index_by_day(dictionary.words)
        report = validate(by_day, duplicates)
        if report.duplicate_indexes:
            out.info(f"\n   WARNING: Duplicate day indexes: {report.duplicate_indexes}")
        if report.missing_indexes:
            out.info(f"\n   WARNING: Missing day indexes: {len(report.missing_indexes)}")
            if len(report.missing_indexes) <= SHOW_AT_MOST:
                out.info(f"      Missing: {report.missing_indexes}")
            else:
                out.info(f"      First {SHOW_AT_MOST} missing: {report.missing_indexes[:SHOW_AT_MOST]}")
        if report.is_valid:
            out.info(f"\n   Validation: All {REQUIRED_WORD_COUNT} day indexes present and unique")
        out.info("\n Dry-run complete. Run without --dry-run to apply changes.")
        return 0

    if os.path.exists(args.db):
        out.info("\nBacking up existing database...")
        backup_path = backup_file(args.db, logger)
        if backup_path is not None:
            out.info(f"   Backup created: {backup_path}")
            out.verbose("Cleaning up old backups...")
            try:
                cleanup_old_backups(args.db, BACKUP_KEEP_DAYS, logger)
            except OSError as e:
                out.error(f"Warning: failed to cleanup old backups: {e}")

    db_dir = os.path.dirname(args.db)
    if db_dir:
        out.verbose(f"Ensuring database directory exists: {db_dir}")
        os.makedirs(db_dir, exist_ok=True)

    engine = make_engine(database_url(args.db))
    try:
        out.verbose("Initializing database schema...")
        await init_db(engine)

        sessions = make_sessionmaker(engine)
        async with sessions() as session:
            out.verbose("Starting migration transaction...")
            await Migrator(session, logger).migrate_words(dictionary)
            out.verbose("Migration transaction committed")
        async with sessions() as session:
            count = await WordRepository(session, logger).count_scheduled_words()
    finally:
        await engine.dispose()

    out.info("Migration complete!")
    out.info(f"   - {count} words migrated")
    out.info(f"   - Database: {args.db}")
    out.info("\n Next steps:")
    out.info("   1. Run: dict-gen validate")
    out.info("   2. Run: dict-gen generate")
    return 0


async def _validate(args, out: Output, logger) -> int:
    out.info(" Validating database...")
    out.info(f"   Database: {args.db}")
    validate_path(args.db)

    engine = make_engine(database_url(args.db))
    try:
        async with make_sessionmaker(engine)() as session:
            by_day = await WordRepository(session, logger).get_words_by_day_index()
    finally:
        await engine.dispose()

    report = validate(by_day)
    out.info()
    if report.is_valid:
        out.info("Validation passed!")
        out.info(f"   - Total words: {report.total_words}")
        out.info(f"   - Day index range: 1-{REQUIRED_WORD_COUNT}")
        out.info("   - All indexes unique: Checked")
        return 0

    out.info("Validation failed!")
    out.info(f"   - Total words: {report.total_words} (expected {REQUIRED_WORD_COUNT})")
    print_missing(out, report)
    if report.duplicate_indexes:
        out.info(f"   - Duplicate indexes: {report.duplicate_indexes}")
    out.info(f"\n Fix: Ensure all days 1-{REQUIRED_WORD_COUNT} have exactly one word assigned")
    return 1


async def _generate(args, out: Output, logger) -> int:
    validate_path(args.db)

    out.info("Generating dictionary.json...")
    out.info(f"   Database: {args.db}")
    out.info(f"   Output: {args.output}")
    if args.all:
        out.info("   Mode: Export ALL words (including those without day_index)")
    else:
        out.info(f"   Mode: Export only words with day_index (1-{REQUIRED_WORD_COUNT})")

    engine = make_engine(database_url(args.db))
    try:
        async with make_sessionmaker(engine)() as session:
            repo = WordRepository(session, logger)
            if args.all:
                entries = [w.to_entry() for w in await repo.get_all_words()]
            else:
                scheduled = {day: w.to_entry() for day, w in (await repo.get_words_by_day_index()).items()}
    finally:
        await engine.dispose()

    report: Optional[ValidationReport] = None
    if not args.all:
        out.info("\n Validating data...")
        report = validate(scheduled)
        if not report.is_valid:
            out.info("Validation failed!")
            out.info(f"   - Total words: {report.total_words} (expected {REQUIRED_WORD_COUNT})")
            print_missing(out, report)
            out.info(f"\n Fix: Ensure all days 1-{REQUIRED_WORD_COUNT} have exactly one word assigned")
            return 1
        out.info("Validation passed")

    if os.path.exists(args.output):
        out.info("\nBacking up existing dictionary.json...")
        backup_path = backup_file(args.output, logger)
        if backup_path is not None:
            out.info(f"   Backup created: {backup_path}")

    out.info("\n Generating JSON...")
    output_dir = os.path.dirname(args.output)
    if output_dir:
        os.makedirs(output_dir, exist_ok=True)

    gen = Generator(logger, pretty=not args.compact)
    if args.all:
        size = gen.generate_all_to_file(entries, args.output)
        word_count = len(entries)
    else:
        size = gen.generate_to_file(scheduled, args.output, report)
        word_count = report.total_words

    out.info("Dictionary generated successfully!")
    out.info(f"   - Output: {args.output}")
    out.info(f"   - Words: {word_count}")
    out.info(f"   - Size: {size / 1024:.1f} KB")
    out.info(f"   - Format: {'compact' if args.compact else 'pretty (indented)'}")
    out.info("\n Next steps:")
    out.info(f"   1. Review changes: git diff {args.output}")
    out.info("   2. Test server: wotd-server")
    out.info(f"   3. Commit: git add {args.output}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="dict-gen", add_help=False)
    sub = parser.add_subparsers(dest="command")

    m = sub.add_parser("migrate", help="Import dictionary.json into the database")
    m.add_argument("--input", default=DEFAULT_OUTPUT_PATH, help="Path to input dictionary.json file")
    m.add_argument("--db", default=DEFAULT_DB_PATH, help="Path to SQLite database file")
    m.add_argument("--dry-run", action="store_true", help="Preview migration without modifying database")

    g = sub.add_parser("generate", help="Generate dictionary.json from the database")
    g.add_argument("--db", default=DEFAULT_DB_PATH, help="Path to SQLite database file")
    g.add_argument("--output", default=DEFAULT_OUTPUT_PATH, help="Path to output dictionary.json file")
    g.add_argument("--compact", action="store_true", help="Generate compact JSON (no indentation)")
    g.add_argument("--all", action="store_true", help="Export ALL words (unscheduled ones get index 0)")

    v = sub.add_parser("validate", help="Validate database integrity")
    v.add_argument("--db", default=DEFAULT_DB_PATH, help="Path to SQLite database file")

    sub.add_parser("help")
    return parser


COMMANDS = {"migrate": _migrate, "validate": _validate, "generate": _generate}


def main(argv: Optional[List[str]] = None) -> int:
    argv = list(sys.argv[1:] if argv is None else argv)

    # global flags may appear anywhere on the line
    verbose = quiet = False
    rest: List[str] = []
    for arg in argv:
        if arg in ("--verbose", "-v"):
            verbose = True
        elif arg in ("--quiet", "-q"):
            quiet = True
        else:
            rest.append(arg)

    out = Output(verbose=verbose, quiet=quiet)
    if verbose and quiet:
        out.error("Error: cannot use --verbose and --quiet together")
        return 1

    if not rest:
        print(USAGE)
        return 1
    if rest[0] in ("help", "--help", "-h"):
        print(USAGE)
        return 0
    if rest[0] not in COMMANDS:
        out.error(f"Unknown command: {rest[0]}\n")
        print(USAGE)
        return 1

    args = build_parser().parse_args(rest)
    configure_logging("DEBUG" if verbose else "WARNING", fmt="console")
    logger = get_logger("wotd.cli", command=args.command)

    try:
        return asyncio.run(COMMANDS[args.command](args, out, logger))
    except CliError as e:
        out.error(f"Invalid input: {e}")
        return 1
    except WotdError as e:
        out.error(f"{args.command} failed: {e}")
        return 1


def run() -> None:
    sys.exit(main())


if __name__ == "__main__":
    run()
