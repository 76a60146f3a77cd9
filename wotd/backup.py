# wotd/backup.py
from __future__ import annotations

import shutil
import time
from datetime import datetime
from pathlib import Path
from typing import Optional, Union

from .errors import WotdError

TIMESTAMP_FORMAT = "%Y%m%d-%H%M%S"


def backup_file(path: Union[str, Path], logger, now: Optional[datetime] = None) -> Optional[Path]:
    """
    Copy `path` to `<path>.backup.YYYYMMDD-HHMMSS`.

    Returns the backup path, or None when there is nothing to back up.
    """
    path = Path(path)
    if not path.exists():
        logger.debug("backup_skipped_missing_source", file_path=str(path))
        return None

    stamp = (now or datetime.now()).strftime(TIMESTAMP_FORMAT)
    dest = path.with_name(f"{path.name}.backup.{stamp}")
    try:
        shutil.copy2(path, dest)
    except OSError as e:
        dest.unlink(missing_ok=True)
        logger.error("backup_copy_failed", file_path=str(path), backup_path=str(dest), error=str(e))
        raise (
            WotdError("Failed to copy file for backup", cause=e)
            .with_context("operation", "backup_copy")
            .with_context("backup_path", str(dest))
        ) from e

    logger.info("backup_created", backup_path=str(dest))
    return dest


def cleanup_old_backups(path: Union[str, Path], keep_days: int, logger) -> int:
    """Remove backups of `path` last modified more than `keep_days` ago. Returns how many were removed."""
    path = Path(path)
    cutoff = time.time() - keep_days * 86400
    deleted = 0

    for candidate in path.parent.glob(f"{path.name}.backup.*"):
        try:
            if candidate.stat().st_mtime >= cutoff:
                continue
            candidate.unlink()
        except OSError as e:
            logger.warning("backup_cleanup_skipped", file=str(candidate), error=str(e))
            continue
        deleted += 1

    logger.info("backup_cleanup_completed", base_path=str(path), deleted_count=deleted)
    return deleted
