"""Upload orchestration.

Chains the pipeline stages for one uploaded archive:
materialize → locate → aggregate → format.
"""

import asyncio
from pathlib import Path

from loguru import logger

from usersays.config.models import UploadConfig
from usersays.errors import UsersaysError
from usersays.models.intents import PhraseReport
from usersays.services.aggregator import PhraseAggregator
from usersays.services.formatter import ReportFormatter
from usersays.services.locator import IntentFileLocator
from usersays.services.materializer import ArchiveMaterializer


class UploadOrchestrator:
    """Public entry point turning archive bytes into a text report.

    ``handle_upload`` never raises: fatal stage errors, timeouts and
    unexpected failures are all returned as message text.
    """

    def __init__(
        self,
        config: UploadConfig | None = None,
        *,
        materializer: ArchiveMaterializer | None = None,
        locator: IntentFileLocator | None = None,
        aggregator: PhraseAggregator | None = None,
        formatter: ReportFormatter | None = None,
    ) -> None:
        """Initialize orchestrator with its stages.

        Args:
            config: Upload configuration shared by the default stages.
            materializer: Archive materializer override.
            locator: Intent file locator override.
            aggregator: Phrase aggregator override.
            formatter: Report formatter override.
        """
        self.config = config or UploadConfig()
        self.materializer = materializer or ArchiveMaterializer(self.config)
        self.locator = locator or IntentFileLocator(self.config)
        self.aggregator = aggregator or PhraseAggregator(config=self.config)
        self.formatter = formatter or ReportFormatter(
            include_failures=self.config.report_failures
        )

    async def handle_upload(self, data: bytes) -> str:
        """Process one uploaded archive.

        Args:
            data: Raw archive bytes.

        Returns:
            Formatted report, or an error message.
        """
        try:
            report = await asyncio.wait_for(
                self._run(data), timeout=self.config.request_timeout_seconds
            )
        except UsersaysError as e:
            logger.error("Upload failed: {}", e)
            return str(e)
        except TimeoutError:
            message = (
                f"Upload processing timed out after {self.config.request_timeout_seconds}s"
            )
            logger.error(message)
            return message
        except Exception as e:
            logger.exception("Unexpected error while processing upload")
            return str(e) or type(e).__name__

        return self.formatter.format(report)

    async def process_archive(self, data: bytes, slot: Path) -> PhraseReport:
        """Run materialize → locate → aggregate inside an existing slot.

        Raises:
            ArchiveCorruptError: If the archive cannot be expanded.
            StorageError: If the slot cannot be written or cleaned.
            FilesystemError: If the extraction root cannot be read.
        """
        root = await self.materializer.materialize(data, slot)
        files = await self.locator.locate(root)
        return await self.aggregator.aggregate(root, files)

    async def _run(self, data: bytes) -> PhraseReport:
        async with self.materializer.workspace() as slot:
            return await self.process_archive(data, slot)
