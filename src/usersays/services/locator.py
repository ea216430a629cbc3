"""Intent file discovery within an extraction root.

Only the conventional layout is recognized: ``<root>/intents/*_usersays_en.json``.
Nothing deeper than the ``intents`` directory's immediate children is visited.
"""

import asyncio
import os
from pathlib import Path

from loguru import logger

from usersays.config.models import UploadConfig
from usersays.errors import FilesystemError
from usersays.models.intents import IntentFile


class IntentFileLocator:
    """Locates intent files under an extraction root.

    Results follow directory-listing order; they are not sorted.

    Attributes:
        intents_directory: Name of the directory holding intent files
        file_suffix: Suffix an intent file name must end with
    """

    def __init__(self, config: UploadConfig | None = None) -> None:
        config = config or UploadConfig()
        self.intents_directory = config.intents_directory
        self.file_suffix = config.file_suffix

    async def locate(self, root: Path) -> list[IntentFile]:
        """Find intent files without blocking the event loop."""
        return await asyncio.to_thread(self.locate_sync, root)

    def locate_sync(self, root: Path) -> list[IntentFile]:
        """Find intent files under ``root``.

        Args:
            root: Extraction root directory.

        Returns:
            Located intent files. Empty if there is no ``intents`` directory.

        Raises:
            FilesystemError: If a directory cannot be listed for a reason
                other than absence.
        """
        found: list[IntentFile] = []
        for entry in self._scan(root):
            if entry.name != self.intents_directory:
                continue
            if not self._is_dir(entry):
                logger.debug("Ignoring non-directory {}", entry.path)
                continue

            intents_path = Path(entry.path)
            for child in self._scan(intents_path):
                if not child.name.endswith(self.file_suffix):
                    continue
                if not self._is_file(child):
                    continue
                found.append(
                    IntentFile(
                        name=child.name,
                        path=Path(self.intents_directory) / child.name,
                    )
                )

        logger.info("Located {} intent files under {}", len(found), root)
        return found

    @staticmethod
    def _scan(directory: Path) -> list[os.DirEntry[str]]:
        try:
            with os.scandir(directory) as it:
                return list(it)
        except (FileNotFoundError, NotADirectoryError):
            return []
        except OSError as e:
            raise FilesystemError(f"Cannot read directory {directory}: {e}", str(directory)) from e

    @staticmethod
    def _is_dir(entry: os.DirEntry[str]) -> bool:
        try:
            return entry.is_dir(follow_symlinks=False)
        except OSError as e:
            raise FilesystemError(f"Cannot stat {entry.path}: {e}", entry.path) from e

    @staticmethod
    def _is_file(entry: os.DirEntry[str]) -> bool:
        try:
            return entry.is_file(follow_symlinks=False)
        except OSError as e:
            raise FilesystemError(f"Cannot stat {entry.path}: {e}", entry.path) from e
