"""Tests for FileCleanupService."""

import os
import time
import pytest
from pathlib import Path

from core.services.file_cleanup import FileCleanupService, CleanupResult


@pytest.fixture
def temp_dir(tmp_path):
    d = tmp_path / "temp"
    d.mkdir()
    return d


def _create_old_file(directory: Path, name: str, age_hours: int) -> Path:
    """Create a file with a modified time in the past."""
    f = directory / name
    f.write_text("test content")
    old_time = time.time() - (age_hours * 3600)
    os.utime(f, (old_time, old_time))
    return f


class TestFileCleanupService:

    def test_removes_stale_artifacts(self, temp_dir):
        """Artifacts older than the max age are removed."""
        _create_old_file(temp_dir, "html-source-abc.html", age_hours=48)
        new_file = temp_dir / "rtf-target-def.rtf"
        new_file.write_text("recent")

        result = FileCleanupService(temp_dir=temp_dir, temp_max_age_hours=24).run_cleanup()

        assert result.temp_files_removed == 1
        assert result.bytes_freed == len("test content")
        assert not (temp_dir / "html-source-abc.html").exists()
        assert new_file.exists()

    def test_dry_run_does_not_delete(self, temp_dir):
        """Dry run counts files but leaves them in place."""
        old = _create_old_file(temp_dir, "old.rtf", age_hours=48)

        result = FileCleanupService(temp_dir=temp_dir, temp_max_age_hours=24).run_cleanup(dry_run=True)

        assert result.dry_run is True
        assert result.temp_files_removed == 1
        assert old.exists()

    def test_nested_directories(self, temp_dir):
        nested = temp_dir / "leftover"
        nested.mkdir()
        _create_old_file(nested, "old.html", age_hours=72)

        result = FileCleanupService(temp_dir=temp_dir, temp_max_age_hours=24).run_cleanup()

        assert result.temp_files_removed == 1
        assert nested.exists()

    def test_missing_directory(self, tmp_path):
        result = FileCleanupService(temp_dir=tmp_path / "gone", temp_max_age_hours=1).run_cleanup()
        assert result.temp_files_removed == 0
        assert result.errors == []

    def test_zero_max_age_is_honoured(self, temp_dir):
        _create_old_file(temp_dir, "recent.rtf", age_hours=1)

        svc = FileCleanupService(temp_dir=temp_dir, temp_max_age_hours=0)
        result = svc.run_cleanup()

        assert svc.temp_max_age_hours == 0
        assert result.temp_files_removed == 1

    def test_defaults_from_settings(self):
        from config.settings import settings

        svc = FileCleanupService()
        assert svc.temp_dir == settings.temp_dir
        assert svc.temp_max_age_hours == settings.cleanup_temp_max_age_hours


class TestCleanupResult:

    def test_str(self):
        result = CleanupResult(temp_files_removed=3, bytes_freed=2 * 1024 * 1024)
        assert str(result) == "Cleanup: temp=3, freed=2.0MB"

    def test_str_dry_run(self):
        assert "(DRY RUN)" in str(CleanupResult(dry_run=True))


class TestCleanupScript:

    def test_dry_run_cli(self, temp_dir, monkeypatch, capsys):
        from scripts import cleanup

        old = _create_old_file(temp_dir, "old.rtf", age_hours=48)
        monkeypatch.setattr("config.settings.settings.temp_dir", temp_dir)
        monkeypatch.setattr("sys.argv", ["cleanup", "--dry-run", "--max-age-hours", "1"])

        cleanup.main()

        assert "Cleanup (DRY RUN): temp=1" in capsys.readouterr().out
        assert old.exists()
