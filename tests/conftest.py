"""Shared pytest fixtures for usersays tests."""

import io
import json
import zipfile
from collections.abc import Callable
from pathlib import Path

import pytest

from usersays.config.models import UploadConfig


def _usersays_json(*phrases: list[str]) -> str:
    records = [
        {
            "id": f"record-{index}",
            "data": [{"text": text, "userDefined": False} for text in fragments],
            "isTemplate": False,
            "count": 0,
        }
        for index, fragments in enumerate(phrases)
    ]
    return json.dumps(records)


@pytest.fixture
def make_archive() -> Callable[[dict[str, str | bytes]], bytes]:
    """Factory fixture building ZIP archive bytes from ``{name: content}``."""

    def _make(entries: dict[str, str | bytes]) -> bytes:
        buffer = io.BytesIO()
        with zipfile.ZipFile(buffer, "w", zipfile.ZIP_DEFLATED) as archive:
            for name, content in entries.items():
                archive.writestr(name, content)
        return buffer.getvalue()

    return _make


@pytest.fixture
def upload_config(tmp_path: Path) -> UploadConfig:
    """Upload configuration rooted in a temporary work directory."""
    return UploadConfig(work_directory=tmp_path / "work")


@pytest.fixture
def sample_archive(make_archive) -> bytes:
    """Agent export with one intent file holding two phrases."""
    return make_archive(
        {
            "agent.json": "{}",
            "intents/sample.json": '{"name": "sample"}',
            "intents/sample_usersays_en.json": _usersays_json(["phrase one"], ["phrase ", "two"]),
        }
    )


@pytest.fixture
def usersays_doc() -> Callable[..., str]:
    """Build a usersays document with one record per fragment list."""
    return _usersays_json
