"""Domain models for usersays."""

from usersays.models.intents import (
    FileOutcome,
    IntentDocument,
    IntentFile,
    PhraseRecord,
    PhraseReport,
    TextFragment,
)

__all__ = [
    "FileOutcome",
    "IntentDocument",
    "IntentFile",
    "PhraseRecord",
    "PhraseReport",
    "TextFragment",
]
