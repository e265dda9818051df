"""Tests for container wiring."""

import asyncio
from pathlib import Path

import pytest

from drink_journal.adapters.json_file_record_repository import (
    JsonFileRecordRepository,
)
from drink_journal.config import Settings
from drink_journal.containers import build_container, build_repository


def test_build_container_creates_services(settings: Settings, tmp_path: Path) -> None:
    settings.local_store_path = str(tmp_path / "records.json")

    container = build_container(settings)

    assert container.record_store.all() == ()
    assert container.suggestion_service.client is not None
    assert container.debouncer.delay_seconds == 0
    asyncio.run(container.close_resources())


def test_build_container_without_openai_key(
    settings: Settings, tmp_path: Path
) -> None:
    settings.local_store_path = str(tmp_path / "records.json")
    settings.openai_api_key = None
    settings.timezone = "Mars/Olympus"

    container = build_container(settings)

    assert container.suggestion_service.client is None
    assert container.stats_service.timezone_name == "UTC"
    asyncio.run(container.close_resources())


def test_build_repository_defaults_to_json_file(settings: Settings) -> None:
    assert isinstance(build_repository(settings), JsonFileRecordRepository)


def test_supabase_backend_requires_credentials(settings: Settings) -> None:
    settings.storage_backend = "supabase"

    with pytest.raises(ValueError):
        build_repository(settings)
