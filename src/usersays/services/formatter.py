"""Plain-text rendering of phrase reports."""

from usersays.models.intents import PhraseReport

HEADER_PREFIX = "----> "
ERRORS_HEADER = f"{HEADER_PREFIX}errors"


class ReportFormatter:
    """Renders a PhraseReport as a text block.

    Output per file::

        ----> greet_usersays_en.json
        "hello there" "hi"

    Failed files are omitted unless ``include_failures`` is set, in which
    case an ``----> errors`` section lists them after the phrases.
    """

    def __init__(self, include_failures: bool = False) -> None:
        self.include_failures = include_failures

    def format(self, report: PhraseReport) -> str:
        lines: list[str] = []
        for filename, phrases in report.phrases.items():
            lines.append(f"{HEADER_PREFIX}{filename}")
            lines.append(self.format_phrases(phrases))

        if self.include_failures and report.failures:
            lines.append(ERRORS_HEADER)
            lines.extend(f"{filename}: {reason}" for filename, reason in report.failures.items())

        return "\n".join(lines)

    @staticmethod
    def format_phrases(phrases: list[str]) -> str:
        # Zero phrases still renders a pair of quotes
        return '"' + '" "'.join(phrases) + '"'
