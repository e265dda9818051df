"""Shared test fixtures."""

from dataclasses import dataclass, field
from datetime import UTC, datetime

import pytest

from drink_journal.config import Settings
from drink_journal.containers import AppContainer
from drink_journal.domain.records import (
    DrinkRecord,
    DrinkSize,
    IceLevel,
    NamedSugar,
    SugarLevel,
)
from drink_journal.services.cache import InMemoryCache
from drink_journal.services.records import RecordRepository, RecordStore
from drink_journal.services.stats import StatsService
from drink_journal.services.suggestions import (
    SuggestionClient,
    SuggestionDebouncer,
    SuggestionService,
)

BASE_TIME = datetime(2024, 5, 1, 10, 30, tzinfo=UTC)
BASE_MILLIS = int(BASE_TIME.timestamp() * 1000)


def make_record(  # noqa: PLR0913
    record_id: str = "1",
    *,
    timestamp_millis: int = BASE_MILLIS,
    brand: str = "A",
    item_name: str = "Milk Tea",
    mood_score: int = 5,
    price: int | float = 50,
    toppings: tuple[str, ...] = (),
) -> DrinkRecord:
    return DrinkRecord(
        id=record_id,
        timestamp_millis=timestamp_millis,
        brand=brand,
        item_name=item_name,
        size=DrinkSize.LARGE,
        sugar=NamedSugar(SugarLevel.HALF),
        ice=IceLevel.MICRO,
        toppings=toppings,
        mood_score=mood_score,
        price=price,
    )


def millis(*args: int) -> int:
    """Return epoch milliseconds for a UTC datetime."""
    return int(datetime(*args, tzinfo=UTC).timestamp() * 1000)


@dataclass
class InMemoryRecordRepository(RecordRepository):
    """In-memory record repository for tests."""

    records: list[DrinkRecord] = field(default_factory=list)
    calls: list[tuple[str, object]] = field(default_factory=list)
    fail_load: bool = False
    fail_writes: bool = False

    def load_all(self) -> list[DrinkRecord]:
        if self.fail_load:
            raise ConnectionError("storage offline")
        return list(self.records)

    def save_all(self, records: list[DrinkRecord]) -> None:
        self._check_writes()
        self.calls.append(("save_all", len(records)))
        self.records = list(records)

    def insert(self, record: DrinkRecord) -> None:
        self._check_writes()
        self.calls.append(("insert", record.id))
        self.records.insert(0, record)

    def update(self, record: DrinkRecord) -> None:
        self._check_writes()
        self.calls.append(("update", record.id))
        self.records = [
            record if item.id == record.id else item for item in self.records
        ]

    def delete(self, record_id: str) -> None:
        self._check_writes()
        self.calls.append(("delete", record_id))
        self.records = [item for item in self.records if item.id != record_id]

    def _check_writes(self) -> None:
        if self.fail_writes:
            raise ConnectionError("storage offline")


@dataclass
class FakeSuggestionClient(SuggestionClient):
    """Fake LLM client returning canned payloads by schema name."""

    payloads: dict[str, dict[str, object]] = field(
        default_factory=lambda: {
            "item_suggestions": {"items": ["珍珠奶茶", "四季春青茶", "珍珠奶茶"]},
            "calorie_estimate": {"calories": 420, "notes": None},
        }
    )
    error: Exception | None = None
    prompts: list[str] = field(default_factory=list)

    async def complete_json(
        self,
        *,
        model: str,
        store: bool,
        prompt: str,
        schema_name: str,
        schema: dict[str, object],
    ) -> dict[str, object]:
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.payloads[schema_name]


@pytest.fixture
def settings() -> Settings:
    return Settings(
        storage_backend="local",
        local_store_path="unused.json",
        openai_api_key="openai-key",
        timezone="UTC",
        suggestion_debounce_seconds=0,
        environment="test",
    )


@pytest.fixture
def repository() -> InMemoryRecordRepository:
    return InMemoryRecordRepository()


@pytest.fixture
def store(repository: InMemoryRecordRepository) -> RecordStore:
    return RecordStore(repository)


@pytest.fixture
def suggestion_client() -> FakeSuggestionClient:
    return FakeSuggestionClient()


@pytest.fixture
def container(
    settings: Settings,
    store: RecordStore,
    suggestion_client: FakeSuggestionClient,
) -> AppContainer:
    stats_service = StatsService(
        store=store,
        timezone_name=settings.timezone,
        clock=lambda tz: datetime(2024, 6, 15, tzinfo=tz),
    )
    suggestion_service = SuggestionService(
        client=suggestion_client,
        cache=InMemoryCache(),
        model=settings.openai_model,
    )

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        record_store=store,
        stats_service=stats_service,
        suggestion_service=suggestion_service,
        debouncer=SuggestionDebouncer(delay_seconds=0),
        close_resources=close_resources,
    )
