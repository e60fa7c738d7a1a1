"""
Temporary artifacts for the conversion pipeline.

Each request gets an ``ArtifactScope``; everything allocated or opened through
the scope is closed and deleted when the scope is released.
"""

import uuid
from pathlib import Path
from typing import IO, List, Union

from config.logging_config import get_logger

from .exceptions import ArtifactIOError

logger = get_logger(__name__)


class TempFileManager:
    """Allocates uniquely named scratch files in a single directory."""

    def __init__(self, temp_dir: Union[str, Path]):
        self.temp_dir = Path(temp_dir)
        self.temp_dir.mkdir(parents=True, exist_ok=True)

    def allocate_name(self, category: str, extension: str = "") -> Path:
        """Return a fresh path; the file itself is not created."""
        suffix = f".{extension.lstrip('.')}" if extension else ""
        return self.temp_dir / f"{category}-{uuid.uuid4().hex}{suffix}"

    def open_for_read_write(self, path: Path) -> IO[bytes]:
        try:
            return open(path, "w+b")
        except OSError as e:
            raise ArtifactIOError(path, "open for writing", e) from e

    def open_for_reading(self, path: Path) -> IO[bytes]:
        try:
            return open(path, "rb")
        except OSError as e:
            raise ArtifactIOError(path, "open for reading", e) from e

    def scope(self, keep: bool = False) -> "ArtifactScope":
        return ArtifactScope(self, keep=keep)


class ArtifactScope:
    """Owns the artifacts of one request.

    Usage:
        with temp_files.scope() as scope:
            path = scope.allocate("html-source", "html")
            ...
            response = ArtifactStreamingResponse(body, scope)  # releases when sent
            scope.hand_off()
    """

    def __init__(self, manager: TempFileManager, keep: bool = False):
        self.manager = manager
        self.keep = keep
        self.paths: List[Path] = []
        self.handles: List[IO[bytes]] = []
        self._handed_off = False
        self._released = False

    def __enter__(self) -> "ArtifactScope":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if not self._handed_off:
            self.release()

    def allocate(self, category: str, extension: str = "") -> Path:
        path = self.manager.allocate_name(category, extension)
        self.paths.append(path)
        return path

    def open_for_read_write(self, path: Path) -> IO[bytes]:
        handle = self.manager.open_for_read_write(path)
        self.handles.append(handle)
        return handle

    def open_for_reading(self, path: Path) -> IO[bytes]:
        handle = self.manager.open_for_reading(path)
        self.handles.append(handle)
        return handle

    def hand_off(self) -> None:
        """Leave releasing to whoever holds the scope after the ``with`` block."""
        self._handed_off = True

    def release(self) -> None:
        """Close all handles and delete all artifacts. Idempotent."""
        if self._released:
            return
        self._released = True

        for handle in self.handles:
            try:
                handle.close()
            except OSError as e:
                logger.warning("Failed to close %s: %s", getattr(handle, "name", handle), e)

        if self.keep:
            logger.debug("Keeping conversion artifacts: %s", ", ".join(map(str, self.paths)))
            return

        for path in self.paths:
            try:
                path.unlink(missing_ok=True)
            except OSError as e:
                logger.warning("Failed to remove artifact %s: %s", path, e)
            else:
                logger.debug("Removed artifact %s", path)
