"""Intent file and phrase report models.

IntentDocument mirrors the shape of a Dialogflow ``*_usersays_<lang>.json``
export: a list of phrase records, each holding ordered text fragments.
Unknown keys (``id``, ``isTemplate``, ``alias``, ``meta``, ...) are ignored.
"""

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, RootModel, StrictStr


class TextFragment(BaseModel):
    """One piece of a phrase; annotated entity spans are separate fragments."""

    model_config = ConfigDict(extra="ignore")

    text: StrictStr


class PhraseRecord(BaseModel):
    """A single training phrase made of ordered fragments."""

    model_config = ConfigDict(extra="ignore")

    data: list[TextFragment]

    def to_phrase(self) -> str:
        """Concatenate fragment texts with no separator."""
        return "".join(fragment.text for fragment in self.data)


class IntentDocument(RootModel[list[PhraseRecord]]):
    """Parsed contents of one intent file."""

    def phrases(self) -> list[str]:
        """Return one phrase per record, in document order."""
        return [record.to_phrase() for record in self.root]


class IntentFile(BaseModel):
    """A located intent file.

    Attributes:
        name: File name, unique within one extraction.
        path: Location relative to the extraction root.
    """

    name: str
    path: Path


class FileOutcome(BaseModel):
    """Result of reading and extracting one intent file."""

    name: str
    phrases: list[str] | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class PhraseReport(BaseModel):
    """Phrases grouped by intent file name.

    Both mappings keep discovery order. A file appears in exactly one
    of them: ``phrases`` for successes, ``failures`` for files whose
    read or parse failed.
    """

    phrases: dict[str, list[str]] = Field(default_factory=dict)
    failures: dict[str, str] = Field(default_factory=dict)

    @classmethod
    def from_outcomes(cls, outcomes: list[FileOutcome]) -> "PhraseReport":
        report = cls()
        for outcome in outcomes:
            if outcome.ok:
                report.phrases[outcome.name] = list(outcome.phrases or [])
            else:
                report.failures[outcome.name] = outcome.error or "unknown error"
        return report

    def is_empty(self) -> bool:
        return not self.phrases and not self.failures
