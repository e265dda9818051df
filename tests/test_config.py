"""Tests for configuration helpers."""

from drink_journal.config import Settings, parse_timezone


def test_parse_timezone() -> None:
    assert parse_timezone("Asia/Taipei") == "Asia/Taipei"
    assert parse_timezone(" Europe/Berlin ") == "Europe/Berlin"
    assert parse_timezone("Mars/Olympus") == "UTC"
    assert parse_timezone(None) == "UTC"
    assert parse_timezone("") == "UTC"


def test_settings_defaults(monkeypatch) -> None:  # type: ignore[no-untyped-def]
    for name in ("STORAGE_BACKEND", "TIMEZONE", "OPENAI_MODEL", "API_TOKEN"):
        monkeypatch.delenv(name, raising=False)

    settings = Settings(_env_file=None)

    assert settings.storage_backend == "local"
    assert settings.timezone == "UTC"
    assert settings.api_token is None
    assert settings.suggestion_debounce_seconds == 0.4
