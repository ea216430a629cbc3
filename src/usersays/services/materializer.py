"""Archive materialization into upload slots.

Writes uploaded archive bytes to a staging file and expands them into
an extraction directory. Each upload runs in its own slot, allocated by
``workspace()`` and removed when the request finishes.
"""

import asyncio
import shutil
import tempfile
import zipfile
import zlib
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

from loguru import logger

from usersays.config.models import UploadConfig
from usersays.errors import ArchiveCorruptError, StorageError, UnsafeArchiveError

STAGING_FILENAME = "upload.zip"
EXTRACT_DIRNAME = "extracted"

_SYMLINK_MODE = 0o120000
_FILE_TYPE_MASK = 0o170000

# Raised by zipfile on damaged members in addition to BadZipFile;
# RuntimeError signals an encrypted member with no password
_CORRUPT_ARCHIVE_ERRORS = (
    zipfile.BadZipFile,
    zlib.error,
    EOFError,
    NotImplementedError,
    RuntimeError,
)


def validate_entry_name(name: str) -> None:
    """Reject entry names that are absolute or climb out of the target.

    Raises:
        UnsafeArchiveError: If the name is not a safe relative path.
    """
    if "\x00" in name:
        raise UnsafeArchiveError(f"Null byte in archive entry: {name!r}", name)

    normalized = name.replace("\\", "/")
    if normalized.startswith("/") or (len(normalized) > 1 and normalized[1] == ":"):
        raise UnsafeArchiveError(f"Absolute path in archive entry: {name}", name)

    if ".." in normalized.split("/"):
        raise UnsafeArchiveError(f"Directory traversal in archive entry: {name}", name)


def is_symlink(info: zipfile.ZipInfo) -> bool:
    """Check the Unix mode bits stored in the entry's external attributes."""
    unix_mode = (info.external_attr >> 16) & 0xFFFF
    return (unix_mode & _FILE_TYPE_MASK) == _SYMLINK_MODE


class ArchiveMaterializer:
    """Expands uploaded ZIP archives into upload slots.

    Attributes:
        config: Upload configuration (work directory and archive limits)
    """

    def __init__(self, config: UploadConfig) -> None:
        self.config = config
        self._in_flight: dict[Path, set[asyncio.Future[Path]]] = {}

    @asynccontextmanager
    async def workspace(self) -> AsyncIterator[Path]:
        """Allocate a request-scoped upload slot.

        The slot is removed on every exit path. Materializations still
        running in a worker thread (e.g. after a cancelled request) are
        waited for first so they cannot recreate files in a removed slot.

        Yields:
            Path of the freshly created slot directory.

        Raises:
            StorageError: If the slot cannot be created.
        """
        slot = await asyncio.to_thread(self._create_slot)
        logger.debug("Allocated upload slot {}", slot)
        try:
            yield slot
        finally:
            await self._drain(slot)
            await asyncio.to_thread(self._remove_slot, slot)

    async def materialize(self, data: bytes, slot: Path) -> Path:
        """Write archive bytes into ``slot`` and expand them.

        Any previous extraction in the slot is removed first, so
        materializing the same bytes twice yields the same tree.

        Args:
            data: Raw archive bytes.
            slot: Upload slot directory.

        Returns:
            Path of the extraction root.

        Raises:
            ArchiveCorruptError: If the bytes are not a valid ZIP archive.
            UnsafeArchiveError: If an entry would land outside the extraction root.
            StorageError: If writing the staging file or cleanup fails.
        """
        work = asyncio.ensure_future(asyncio.to_thread(self._materialize_sync, data, slot))
        pending = self._in_flight.setdefault(slot, set())
        pending.add(work)
        work.add_done_callback(lambda done: self._forget(slot, done))
        # The thread cannot be interrupted; cancelling the caller leaves it to _drain
        return await asyncio.shield(work)

    def _forget(self, slot: Path, work: asyncio.Future[Path]) -> None:
        pending = self._in_flight.get(slot)
        if pending is not None:
            pending.discard(work)
            if not pending:
                del self._in_flight[slot]

    async def _drain(self, slot: Path) -> None:
        pending = self._in_flight.pop(slot, set())
        if not pending:
            return
        logger.debug("Waiting for {} in-flight materializations in {}", len(pending), slot)
        results = await asyncio.gather(*pending, return_exceptions=True)
        for result in results:
            if isinstance(result, BaseException):
                logger.debug("Abandoned materialization in {} ended with: {}", slot, result)

    def _materialize_sync(self, data: bytes, slot: Path) -> Path:
        staging = slot / STAGING_FILENAME
        target = slot / EXTRACT_DIRNAME

        try:
            slot.mkdir(parents=True, exist_ok=True)
            staging.write_bytes(data)
        except OSError as e:
            raise StorageError(f"Cannot write staging file {staging}: {e}") from e

        self._remove_tree(target)

        try:
            with zipfile.ZipFile(staging) as archive:
                self._validate_archive(archive, target)
                archive.extractall(target)
        except _CORRUPT_ARCHIVE_ERRORS as e:
            # Drop whatever a partially failed expansion left behind
            self._remove_tree(target)
            raise ArchiveCorruptError(f"Invalid zip archive: {e}") from e
        except OSError as e:
            raise StorageError(f"Cannot expand archive into {target}: {e}") from e

        logger.info("Expanded {} bytes into {}", len(data), target)
        return target

    def _validate_archive(self, archive: zipfile.ZipFile, target: Path) -> None:
        entries = archive.infolist()
        if len(entries) > self.config.max_archive_entries:
            raise UnsafeArchiveError(
                f"Too many entries in archive: {len(entries)} "
                f"(max: {self.config.max_archive_entries})"
            )

        root = target.resolve()
        max_bytes = self.config.max_uncompressed_mb * 1024 * 1024
        total_size = 0
        for info in entries:
            validate_entry_name(info.filename)

            if is_symlink(info):
                raise UnsafeArchiveError(
                    f"Symlinks not allowed in archive: {info.filename}", info.filename
                )

            resolved = (root / info.filename).resolve()
            if not resolved.is_relative_to(root):
                raise UnsafeArchiveError(
                    f"Archive entry escapes extraction directory: {info.filename}",
                    info.filename,
                )

            total_size += info.file_size
            if total_size > max_bytes:
                raise UnsafeArchiveError(
                    f"Archive uncompressed size exceeds {self.config.max_uncompressed_mb} MB"
                )

    @staticmethod
    def _remove_tree(path: Path) -> None:
        try:
            shutil.rmtree(path)
        except FileNotFoundError:
            pass
        except OSError as e:
            raise StorageError(f"Cannot remove previous extraction {path}: {e}") from e

    def _create_slot(self) -> Path:
        base = self.config.work_directory
        try:
            if base is not None:
                base.mkdir(parents=True, exist_ok=True)
            return Path(tempfile.mkdtemp(prefix="upload-", dir=base))
        except OSError as e:
            raise StorageError(f"Cannot create upload workspace: {e}") from e

    @staticmethod
    def _remove_slot(slot: Path) -> None:
        try:
            shutil.rmtree(slot)
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.warning("Cannot remove upload slot {}: {}", slot, e)
