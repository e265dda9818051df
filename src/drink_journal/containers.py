"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from pathlib import Path

from supabase import create_client

from drink_journal.adapters.json_file_record_repository import (
    JsonFileRecordRepository,
)
from drink_journal.adapters.openai_suggestion_client import OpenAISuggestionClient
from drink_journal.adapters.supabase_record_repository import (
    SupabaseRecordRepository,
)
from drink_journal.config import Settings, parse_timezone
from drink_journal.services.cache import InMemoryCache
from drink_journal.services.records import RecordRepository, RecordStore
from drink_journal.services.stats import StatsService
from drink_journal.services.suggestions import SuggestionDebouncer, SuggestionService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    record_store: RecordStore
    stats_service: StatsService
    suggestion_service: SuggestionService
    debouncer: SuggestionDebouncer
    close_resources: Callable[[], Awaitable[None]]


def build_repository(settings: Settings) -> RecordRepository:
    """Create the record repository for the configured backend."""
    if settings.storage_backend == "supabase":
        if not settings.supabase_url or not settings.supabase_key:
            raise ValueError("supabase storage requires SUPABASE_URL and SUPABASE_KEY")
        client = create_client(settings.supabase_url, settings.supabase_key)
        return SupabaseRecordRepository(
            client=client,
            table=settings.supabase_table,
            user_id=settings.supabase_user_id,
        )
    return JsonFileRecordRepository(Path(settings.local_store_path))


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    record_store = RecordStore(build_repository(resolved_settings))
    stats_service = StatsService(
        store=record_store,
        timezone_name=parse_timezone(resolved_settings.timezone),
    )
    openai_client = (
        OpenAISuggestionClient.create(resolved_settings.openai_api_key)
        if resolved_settings.openai_api_key
        else None
    )
    suggestion_service = SuggestionService(
        client=openai_client,
        cache=InMemoryCache(),
        model=resolved_settings.openai_model,
        store=resolved_settings.openai_store,
        cache_ttl_seconds=resolved_settings.suggestion_cache_ttl_seconds,
    )
    debouncer = SuggestionDebouncer(
        delay_seconds=resolved_settings.suggestion_debounce_seconds
    )

    async def close_resources() -> None:
        if openai_client is not None:
            await openai_client.close()

    return AppContainer(
        settings=resolved_settings,
        record_store=record_store,
        stats_service=stats_service,
        suggestion_service=suggestion_service,
        debouncer=debouncer,
        close_resources=close_resources,
    )
