"""
File Cleanup Service — keeps the conversion temp directory from filling up.

Artifacts are normally deleted as soon as their request finishes. This sweep
catches what is left behind when a process dies mid-request or when
CONVERSION_KEEP_ARTIFACTS is on.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import List

logger = logging.getLogger(__name__)


@dataclass
class CleanupResult:
    """Summary of a cleanup run."""
    temp_files_removed: int = 0
    bytes_freed: int = 0
    errors: List[str] = field(default_factory=list)
    dry_run: bool = False

    def __str__(self) -> str:
        mb = self.bytes_freed / (1024 * 1024)
        mode = " (DRY RUN)" if self.dry_run else ""
        return (
            f"Cleanup{mode}: temp={self.temp_files_removed}, "
            f"freed={mb:.1f}MB"
        )


class FileCleanupService:
    """Removes stale conversion artifacts."""

    def __init__(
        self,
        temp_dir: Path | None = None,
        temp_max_age_hours: int | None = None,
    ):
        from config.settings import settings

        self.temp_dir = Path(temp_dir) if temp_dir else settings.temp_dir
        self.temp_max_age_hours = (
            temp_max_age_hours if temp_max_age_hours is not None
            else settings.cleanup_temp_max_age_hours
        )

    def run_cleanup(self, dry_run: bool = False) -> CleanupResult:
        """Execute full cleanup sweep."""
        result = CleanupResult(dry_run=dry_run)

        self._clean_temp_files(result, dry_run)

        logger.info(str(result))
        return result

    def _clean_temp_files(self, result: CleanupResult, dry_run: bool) -> None:
        """Remove temp files older than max_age_hours."""
        if not self.temp_dir.exists():
            return
        cutoff = time.time() - (self.temp_max_age_hours * 3600)
        self._remove_old_files(self.temp_dir, cutoff, result, dry_run)

    def _remove_old_files(
        self,
        directory: Path,
        cutoff_ts: float,
        result: CleanupResult,
        dry_run: bool,
    ) -> None:
        """Remove files older than cutoff timestamp from a directory."""
        for path in directory.rglob("*"):
            if not path.is_file():
                continue
            try:
                stat = path.stat()
                if stat.st_mtime < cutoff_ts:
                    if not dry_run:
                        path.unlink()
                    result.bytes_freed += stat.st_size
                    result.temp_files_removed += 1
            except OSError as e:
                result.errors.append(f"{path}: {e}")
