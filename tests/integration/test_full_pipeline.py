"""Integration tests for the full upload pipeline.

Build real ZIP archives, run materialize → locate → aggregate → format
and check the rendered report.
"""

import json

import pytest

from usersays.services.aggregator import PhraseAggregator
from usersays.services.formatter import ReportFormatter
from usersays.services.locator import IntentFileLocator
from usersays.services.materializer import ArchiveMaterializer
from usersays.services.orchestrator import UploadOrchestrator

pytestmark = pytest.mark.integration


@pytest.fixture
def stages(upload_config):
    """Provide the pipeline stages sharing one configuration."""
    return (
        ArchiveMaterializer(upload_config),
        IntentFileLocator(upload_config),
        PhraseAggregator(config=upload_config),
        ReportFormatter(),
    )


class TestFullPipeline:
    """End-to-end pipeline behaviour on real archives."""

    @pytest.mark.asyncio
    async def test_round_trip_literal(self, stages, sample_archive, tmp_path) -> None:
        """One intent file with two records renders the expected block."""
        materializer, locator, aggregator, formatter = stages

        root = await materializer.materialize(sample_archive, tmp_path / "slot")
        report = await aggregator.aggregate(root, await locator.locate(root))

        assert formatter.format(report) == (
            '----> sample_usersays_en.json\n"phrase one" "phrase two"'
        )

    @pytest.mark.asyncio
    async def test_archive_without_intents(self, stages, make_archive, tmp_path) -> None:
        """No intents directory gives an empty report and empty text."""
        materializer, locator, aggregator, formatter = stages
        data = make_archive({"agent.json": "{}", "entities/city.json": "{}"})

        root = await materializer.materialize(data, tmp_path / "slot")
        report = await aggregator.aggregate(root, await locator.locate(root))

        assert report.is_empty()
        assert formatter.format(report) == ""

    @pytest.mark.asyncio
    async def test_intents_as_regular_file(self, stages, make_archive, tmp_path) -> None:
        """An archive whose intents entry is a file has no intent files."""
        materializer, locator, _, _ = stages
        data = make_archive({"intents": "just a file"})

        root = await materializer.materialize(data, tmp_path / "slot")

        assert await locator.locate(root) == []

    @pytest.mark.asyncio
    async def test_invalid_sibling_does_not_abort_batch(
        self, stages, make_archive, usersays_doc, tmp_path
    ) -> None:
        """Valid files are reported even when a sibling is broken."""
        materializer, locator, aggregator, formatter = stages
        data = make_archive(
            {
                "intents/a_usersays_en.json": usersays_doc(["alpha"]),
                "intents/broken_usersays_en.json": '{"data": "wrong shape"}',
                "intents/b_usersays_en.json": usersays_doc(["be", "ta"]),
            }
        )

        root = await materializer.materialize(data, tmp_path / "slot")
        report = await aggregator.aggregate(root, await locator.locate(root))

        assert set(report.phrases) == {"a_usersays_en.json", "b_usersays_en.json"}
        assert report.phrases["b_usersays_en.json"] == ["beta"]
        assert "broken_usersays_en.json" in report.failures

    @pytest.mark.asyncio
    async def test_report_order_matches_locate_order(
        self, stages, make_archive, usersays_doc, tmp_path
    ) -> None:
        """Report keys follow the order the locator produced."""
        materializer, locator, aggregator, _ = stages
        names = [f"intent{i}_usersays_en.json" for i in range(20)]
        data = make_archive({f"intents/{name}": usersays_doc([name]) for name in names})

        root = await materializer.materialize(data, tmp_path / "slot")
        files = await locator.locate(root)
        report = await aggregator.aggregate(root, files)

        assert list(report.phrases) == [f.name for f in files]
        assert sorted(report.phrases) == sorted(names)

    @pytest.mark.asyncio
    async def test_dialogflow_export(self, upload_config, make_archive) -> None:
        """A realistic agent export with annotated phrases."""
        usersays = [
            {
                "id": "3f1c",
                "data": [
                    {"text": "book a table for ", "userDefined": False},
                    {
                        "text": "tomorrow",
                        "alias": "date",
                        "meta": "@sys.date",
                        "userDefined": False,
                    },
                ],
                "isTemplate": False,
                "count": 0,
                "updated": 0,
            },
            {"id": "9a2b", "data": [{"text": "reserve please"}], "isTemplate": False},
        ]
        data = make_archive(
            {
                "agent.json": json.dumps({"language": "en"}),
                "package.json": json.dumps({"version": "1.0.0"}),
                "intents/book.json": json.dumps({"name": "book"}),
                "intents/book_usersays_en.json": json.dumps(usersays),
                "intents/book_usersays_de.json": json.dumps(usersays),
            }
        )

        result = await UploadOrchestrator(upload_config).handle_upload(data)

        assert result == '----> book_usersays_en.json\n"book a table for tomorrow" "reserve please"'
