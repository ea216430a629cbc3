"""Phrase extraction from intent file contents."""

import json

from pydantic import ValidationError

from usersays.errors import ParseError
from usersays.models.intents import IntentDocument


class PhraseExtractor:
    """Flattens a ``*_usersays_*.json`` document into phrase strings.

    Each phrase record becomes one phrase: its fragments' ``text``
    values joined with no separator, in fragment order.
    """

    def extract(self, data: bytes, file_name: str | None = None) -> list[str]:
        """Parse intent file bytes into phrases.

        Args:
            data: Raw file contents, UTF-8 encoded. A leading BOM is ignored.
            file_name: Optional name used in error messages.

        Returns:
            One phrase per record, in record order.

        Raises:
            ParseError: If the bytes are not UTF-8 JSON of the expected shape.
        """
        label = file_name or "<intent file>"

        try:
            text = data.decode("utf-8-sig")
        except UnicodeDecodeError as e:
            raise ParseError(f"{label}: invalid UTF-8: {e}", file_name) from e

        try:
            raw = json.loads(text)
        except json.JSONDecodeError as e:
            raise ParseError(f"{label}: JSON parse error: {e}", file_name) from e

        try:
            document = IntentDocument.model_validate(raw)
        except ValidationError as e:
            raise ParseError(
                f"{label}: unexpected structure: {_summarize(e)}", file_name
            ) from e

        return document.phrases()


def _summarize(error: ValidationError) -> str:
    """Describe the first validation problem as ``location: message``."""
    first = error.errors()[0]
    location = ".".join(str(part) for part in first["loc"]) or "<root>"
    extra = error.error_count() - 1
    suffix = f" (+{extra} more)" if extra else ""
    return f"{location}: {first['msg']}{suffix}"
