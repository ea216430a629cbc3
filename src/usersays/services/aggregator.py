"""Concurrent phrase aggregation over located intent files.

Reads and extracts every intent file concurrently, bounded by a
semaphore, and collects per-file outcomes into a PhraseReport.
A failing file never aborts its siblings.
"""

import asyncio
from pathlib import Path

from loguru import logger

from usersays.config.models import UploadConfig
from usersays.errors import FilesystemError, ParseError
from usersays.models.intents import FileOutcome, IntentFile, PhraseReport
from usersays.services.extractor import PhraseExtractor


class PhraseAggregator:
    """Fans out read+extract per file and joins the results.

    Report order always matches the input order, whatever order the
    individual files complete in.
    """

    def __init__(
        self,
        extractor: PhraseExtractor | None = None,
        config: UploadConfig | None = None,
    ) -> None:
        """Initialize aggregator.

        Args:
            extractor: Phrase extractor (defaults to PhraseExtractor()).
            config: Upload configuration for concurrency and timeouts.
        """
        config = config or UploadConfig()
        self.extractor = extractor or PhraseExtractor()
        self.max_concurrency = config.max_concurrency
        self.file_timeout_seconds = config.file_timeout_seconds

    async def aggregate(self, root: Path, files: list[IntentFile]) -> PhraseReport:
        """Extract phrases from every file under ``root``.

        Args:
            root: Extraction root the files' paths are relative to.
            files: Located intent files, in discovery order.

        Returns:
            PhraseReport with successes and per-file failures.
        """
        semaphore = asyncio.Semaphore(self.max_concurrency)
        outcomes = await asyncio.gather(
            *(self._process(root, intent_file, semaphore) for intent_file in files)
        )

        report = PhraseReport.from_outcomes(list(outcomes))
        logger.info(
            "Aggregated intent files: ok={} failed={}",
            len(report.phrases),
            len(report.failures),
        )
        return report

    async def _process(
        self, root: Path, intent_file: IntentFile, semaphore: asyncio.Semaphore
    ) -> FileOutcome:
        # The permit is returned when the read finishes, even after a timeout
        await semaphore.acquire()
        read = asyncio.ensure_future(self._read(root / intent_file.path))
        read.add_done_callback(lambda done: _release(semaphore, done))

        try:
            data = await asyncio.wait_for(
                asyncio.shield(read), timeout=self.file_timeout_seconds
            )
            phrases = self.extractor.extract(data, intent_file.name)
        except (ParseError, FilesystemError) as e:
            logger.warning("Skipping {}: {}", intent_file.name, e)
            return FileOutcome(name=intent_file.name, error=str(e))
        except TimeoutError:
            message = f"read timed out after {self.file_timeout_seconds}s"
            logger.warning("Skipping {}: {}", intent_file.name, message)
            return FileOutcome(name=intent_file.name, error=message)

        logger.debug("Extracted {} phrases from {}", len(phrases), intent_file.name)
        return FileOutcome(name=intent_file.name, phrases=phrases)

    @staticmethod
    async def _read(path: Path) -> bytes:
        try:
            return await asyncio.to_thread(path.read_bytes)
        except OSError as e:
            raise FilesystemError(f"Cannot read {path.name}: {e}", str(path)) from e


def _release(semaphore: asyncio.Semaphore, read: asyncio.Future[bytes]) -> None:
    semaphore.release()
    # Consume the result of reads nobody waits for anymore
    if not read.cancelled():
        read.exception()
