"""Best-effort menu suggestions and calorie estimates using LLMs."""

import asyncio
import logging
from collections.abc import Awaitable, Callable, Iterable, Sequence
from dataclasses import dataclass, field
from typing import Protocol, TypeVar

from drink_journal.domain.records import DrinkSize, Sugar, sugar_label
from drink_journal.domain.suggestions import CalorieEstimate, ItemSuggestions
from drink_journal.services.cache import Cache

_logger = logging.getLogger(__name__)

T = TypeVar("T")

MAX_ITEM_SUGGESTIONS = 5
MAX_BRAND_SUGGESTIONS = 6

POPULAR_BRANDS = (
    "50嵐",
    "清心福全",
    "可不可熟成紅茶",
    "CoCo都可",
    "迷客夏",
    "大苑子",
    "麻古茶坊",
    "鶴茶樓",
    "五桐號",
    "得正",
    "珍煮丹",
    "茶湯會",
    "春水堂",
    "老虎堂",
    "Comebuy",
    "一沐日",
    "龜記茗品",
    "星巴克",
    "路易莎",
    "cama café",
    "85度C",
)

ITEM_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {
        "items": {"type": "array", "items": {"type": "string"}},
    },
    "required": ["items"],
    "additionalProperties": False,
}

CALORIE_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {
        "calories": {"type": "integer", "minimum": 0},
        "notes": {"anyOf": [{"type": "string"}, {"type": "null"}]},
    },
    "required": ["calories", "notes"],
    "additionalProperties": False,
}


class SuggestionClient(Protocol):
    """Interface for structured LLM completions."""

    async def complete_json(
        self,
        *,
        model: str,
        store: bool,
        prompt: str,
        schema_name: str,
        schema: dict[str, object],
    ) -> dict[str, object]:
        """Return a JSON object matching the schema."""


@dataclass
class SuggestionService:
    """Advisory lookups that degrade to empty results on any failure."""

    client: SuggestionClient | None
    cache: Cache
    model: str
    store: bool = False
    cache_ttl_seconds: int = 3600

    def suggest_brands(self, query: str) -> list[str]:
        """Return popular brands containing the query, case-insensitively."""
        needle = query.strip().lower()
        if not needle:
            return []
        matches = [brand for brand in POPULAR_BRANDS if needle in brand.lower()]
        return matches[:MAX_BRAND_SUGGESTIONS]

    async def suggest_items(self, brand: str, partial_name: str) -> list[str]:
        """Return up to five menu items of a brand matching a partial name."""
        brand = brand.strip()
        partial_name = partial_name.strip()
        if self.client is None or not brand or not partial_name:
            return []
        cache_key = f"items:{brand.lower()}:{partial_name.lower()}"
        cached = self.cache.get(cache_key)
        if isinstance(cached, list):
            return cached

        prompt = (
            "You are an expert on Taiwanese drink shops. "
            f"List {MAX_ITEM_SUGGESTIONS} real, popular or classic menu items "
            f'from "{brand}" '
            f'whose name contains "{partial_name}". '
            "For coffee chains such as Starbucks or Louisa, prefer their signature "
            "coffee or light drinks. Use the names as printed on the menu."
        )
        try:
            raw = await self.client.complete_json(
                model=self.model,
                store=self.store,
                prompt=prompt,
                schema_name="item_suggestions",
                schema=ITEM_SCHEMA,
            )
            result = ItemSuggestions.model_validate(raw)
        except Exception as exc:
            _logger.warning("Item suggestions failed for %s: %s", brand, exc)
            return []

        items = _unique(
            item.strip()
            for item in result.items
            if item.strip() and item.strip() != partial_name
        )[:MAX_ITEM_SUGGESTIONS]
        self.cache.set(cache_key, items, ttl_seconds=self.cache_ttl_seconds)
        return items

    async def estimate_calories(  # noqa: PLR0913
        self,
        brand: str,
        item: str,
        size: DrinkSize,
        sugar: Sugar,
        toppings: Sequence[str],
    ) -> int:
        """Return an estimated kcal for a drink, or 0 when unavailable."""
        if self.client is None or not brand.strip() or not item.strip():
            return 0
        topping_text = ", ".join(toppings) if toppings else "none"
        cache_key = (
            f"kcal:{brand.lower()}:{item.lower()}:{size.value}:"
            f"{sugar_label(sugar)}:{topping_text.lower()}"
        )
        cached = self.cache.get(cache_key)
        if isinstance(cached, int):
            return cached

        prompt = (
            "Estimate the calories (kcal) of this drink. "
            f"Shop: {brand}. Item: {item}. Size: {size.label}. "
            f"Sugar: {sugar_label(sugar)}. Toppings: {topping_text}. "
            "Answer with a single integer estimate."
        )
        try:
            raw = await self.client.complete_json(
                model=self.model,
                store=self.store,
                prompt=prompt,
                schema_name="calorie_estimate",
                schema=CALORIE_SCHEMA,
            )
            estimate = CalorieEstimate.model_validate(raw)
        except Exception as exc:
            _logger.warning("Calorie estimate failed for %s %s: %s", brand, item, exc)
            return 0
        self.cache.set(cache_key, estimate.calories, ttl_seconds=self.cache_ttl_seconds)
        return estimate.calories


@dataclass
class SuggestionDebouncer:
    """Keeps only the latest lookup per field.

    Each call takes a new token for its field, waits out the debounce delay
    and returns None when a newer call for the same field was issued before
    or during the lookup.
    """

    delay_seconds: float = 0.4
    _tokens: dict[str, int] = field(default_factory=dict, init=False)

    def issue(self, key: str) -> int:
        """Return a new token for a field, superseding older ones."""
        token = self._tokens.get(key, 0) + 1
        self._tokens[key] = token
        return token

    def is_current(self, key: str, token: int) -> bool:
        """Return True when the token is the latest issued for the field."""
        return self._tokens.get(key) == token

    async def run(self, key: str, call: Callable[[], Awaitable[T]]) -> T | None:
        """Run a lookup unless a newer one supersedes it."""
        token = self.issue(key)
        if self.delay_seconds > 0:
            await asyncio.sleep(self.delay_seconds)
        if not self.is_current(key, token):
            return None
        result = await call()
        if not self.is_current(key, token):
            _logger.debug("Discarding stale %s suggestion (token %s)", key, token)
            return None
        return result


def _unique(values: Iterable[str]) -> list[str]:
    return list(dict.fromkeys(values))
