"""
Local File Storage

Uploaded PDFs and generated archives live on the local filesystem under a
root directory. Stored paths are relative to that root so the root can move
without rewriting database rows.

Blocking filesystem calls run in a worker thread (asyncio.to_thread), the
same way the email client keeps the event loop free.
"""

import asyncio
import logging
import re
import secrets
import time
from pathlib import Path

from hr_portal.core.errors import NotFoundError, ValidationError

logger = logging.getLogger(__name__)

_UNSAFE_CHARS = re.compile(r"[^a-zA-Z0-9]")


def sanitize_name(name: str) -> str:
    """Replace every non-alphanumeric character with ``_`` and lowercase."""
    return _UNSAFE_CHARS.sub("_", name).lower()


def unique_suffix() -> str:
    """``<epoch millis>-<random>`` suffix used for stored file names."""
    return f"{int(time.time() * 1000)}-{secrets.randbelow(10**9)}"


class LocalFileStore:
    """Filesystem-backed store rooted at ``root``."""

    def __init__(self, root: str | Path):
        self.root = Path(root).resolve()

    def resolve(self, relative_path: str) -> Path:
        """
        Map a stored relative path to an absolute path inside the root.

        Raises:
            ValidationError: If the path escapes the root directory
        """
        candidate = (self.root / relative_path).resolve()
        if candidate != self.root and self.root not in candidate.parents:
            raise ValidationError("Invalid file path.", error_code="INVALID_PATH")
        return candidate

    def _write(self, relative_path: str, data: bytes) -> None:
        target = self.resolve(relative_path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(data)

    def read_bytes(self, relative_path: str) -> bytes:
        """Blocking read, for callers already running in a worker thread."""
        target = self.resolve(relative_path)
        if not target.is_file():
            raise NotFoundError("File not found.", error_code="FILE_NOT_FOUND")
        return target.read_bytes()

    def _delete(self, relative_path: str) -> bool:
        target = self.resolve(relative_path)
        if not target.is_file():
            return False
        target.unlink()
        return True

    async def save(self, relative_path: str, data: bytes) -> str:
        """Write ``data`` and return the stored relative path."""
        await asyncio.to_thread(self._write, relative_path, data)
        logger.debug(f"Stored file {relative_path} ({len(data)} bytes)")
        return relative_path

    async def read(self, relative_path: str) -> bytes:
        return await asyncio.to_thread(self.read_bytes, relative_path)

    async def exists(self, relative_path: str) -> bool:
        try:
            target = self.resolve(relative_path)
        except ValidationError:
            return False
        return await asyncio.to_thread(target.is_file)

    async def delete(self, relative_path: str) -> bool:
        """Remove a stored file. Returns False if it was already gone."""
        try:
            deleted = await asyncio.to_thread(self._delete, relative_path)
        except OSError as e:
            logger.warning(f"Failed to delete stored file {relative_path}: {e}")
            return False
        if deleted:
            logger.info(f"Deleted stored file {relative_path}")
        return deleted


def get_file_store() -> LocalFileStore:
    """FastAPI dependency for uploaded documents (applicant files and TDRs)."""
    from hr_portal.core.config import settings

    return LocalFileStore(settings.files_dir)


def get_archive_store() -> LocalFileStore:
    """FastAPI dependency for generated application archives."""
    from hr_portal.core.config import settings

    return LocalFileStore(settings.archives_dir)
