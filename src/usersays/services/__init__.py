"""usersays services layer.

Each service is one stage of the upload pipeline; UploadOrchestrator
chains them together.
"""

from usersays.services.aggregator import PhraseAggregator
from usersays.services.extractor import PhraseExtractor
from usersays.services.formatter import ReportFormatter
from usersays.services.locator import IntentFileLocator
from usersays.services.materializer import ArchiveMaterializer
from usersays.services.orchestrator import UploadOrchestrator

__all__ = [
    "ArchiveMaterializer",
    "IntentFileLocator",
    "PhraseAggregator",
    "PhraseExtractor",
    "ReportFormatter",
    "UploadOrchestrator",
]
