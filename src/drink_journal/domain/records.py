"""Domain models for drink purchase records."""

import secrets
import time
from dataclasses import dataclass, fields
from datetime import UTC, datetime, tzinfo
from enum import Enum
from typing import TypeVar

from drink_journal.errors import ValidationError

MIN_MOOD = 1
MAX_MOOD = 5
MAX_SUGAR_PERCENT = 100


class DrinkSize(Enum):
    """Cup size of a purchase."""

    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"
    BOTTLE = "bottle"

    @property
    def label(self) -> str:
        """Return the display label."""
        return _SIZE_LABELS[self]


class SugarLevel(Enum):
    """Named sweetness levels offered by drink shops."""

    FULL = "full"
    LESS = "less"
    HALF = "half"
    MICRO = "micro"
    ONE_PERCENT = "one_percent"
    NONE = "none"

    @property
    def label(self) -> str:
        """Return the display label."""
        return _SUGAR_LABELS[self]

    @property
    def percent(self) -> int:
        """Return the sweetness percentage this level stands for."""
        return _SUGAR_PERCENTS[self]


class IceLevel(Enum):
    """Ice or temperature option."""

    REGULAR = "regular"
    LESS = "less"
    MICRO = "micro"
    NONE = "none"
    TOTAL_NONE = "total_none"
    WARM = "warm"
    HOT = "hot"

    @property
    def label(self) -> str:
        """Return the display label."""
        return _ICE_LABELS[self]


_SIZE_LABELS = {
    DrinkSize.SMALL: "小杯 (S)",
    DrinkSize.MEDIUM: "中杯 (M)",
    DrinkSize.LARGE: "大杯 (L)",
    DrinkSize.BOTTLE: "瓶裝 (XL)",
}

_SUGAR_LABELS = {
    SugarLevel.FULL: "正常甜 (100%)",
    SugarLevel.LESS: "少糖 (70%)",
    SugarLevel.HALF: "半糖 (50%)",
    SugarLevel.MICRO: "微糖 (30%)",
    SugarLevel.ONE_PERCENT: "一分糖 (10%)",
    SugarLevel.NONE: "無糖 (0%)",
}

_SUGAR_PERCENTS = {
    SugarLevel.FULL: 100,
    SugarLevel.LESS: 70,
    SugarLevel.HALF: 50,
    SugarLevel.MICRO: 30,
    SugarLevel.ONE_PERCENT: 10,
    SugarLevel.NONE: 0,
}

_ICE_LABELS = {
    IceLevel.REGULAR: "正常冰",
    IceLevel.LESS: "少冰",
    IceLevel.MICRO: "微冰",
    IceLevel.NONE: "去冰",
    IceLevel.TOTAL_NONE: "完全去冰",
    IceLevel.WARM: "溫",
    IceLevel.HOT: "熱",
}


@dataclass(frozen=True)
class NamedSugar:
    """Sweetness picked from the shop's named levels."""

    level: SugarLevel


@dataclass(frozen=True)
class CustomSugar:
    """Sweetness given as an explicit percentage."""

    percent: int


Sugar = NamedSugar | CustomSugar


@dataclass(frozen=True)
class DrinkRecord:
    """A single logged drink purchase."""

    id: str
    timestamp_millis: int
    brand: str
    item_name: str
    size: DrinkSize = DrinkSize.LARGE
    sugar: Sugar = NamedSugar(SugarLevel.HALF)
    ice: IceLevel = IceLevel.MICRO
    toppings: tuple[str, ...] = ()
    mood_score: int = MAX_MOOD
    price: int | float = 0
    notes: str | None = None
    estimated_calories: int | None = None

    def purchased_at(self, tz: tzinfo = UTC) -> datetime:
        """Return the purchase time in the given timezone."""
        return datetime.fromtimestamp(self.timestamp_millis / 1000, tz=tz)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DrinkRecord):
            return NotImplemented
        return self._comparison_key() == other._comparison_key()

    def __hash__(self) -> int:
        return hash(self._comparison_key())

    def _comparison_key(self) -> tuple[object, ...]:
        # Toppings compare as a set; display order is kept in the tuple.
        return tuple(
            frozenset(self.toppings)
            if item.name == "toppings"
            else getattr(self, item.name)
            for item in fields(self)
        )


def new_record_id() -> str:
    """Return a fresh time-based record id."""
    return f"{int(time.time() * 1000)}-{secrets.token_hex(4)}"


def sugar_label(sugar: Sugar) -> str:
    """Return the display text for a sugar choice."""
    if isinstance(sugar, CustomSugar):
        return f"{sugar.percent}%"
    return sugar.level.label


def validate_record(record: DrinkRecord) -> None:
    """Raise ValidationError when a record breaks a data model invariant."""
    if not isinstance(record.id, str) or not record.id.strip():
        raise ValidationError("id", "must not be empty")
    if not isinstance(record.brand, str) or not record.brand.strip():
        raise ValidationError("brand", "must not be empty")
    if not isinstance(record.item_name, str) or not record.item_name.strip():
        raise ValidationError("item_name", "must not be empty")
    if isinstance(record.timestamp_millis, bool) or not isinstance(
        record.timestamp_millis, int
    ):
        raise ValidationError("timestamp_millis", "must be epoch milliseconds")
    if not isinstance(record.size, DrinkSize):
        raise ValidationError("size", f"unknown size {record.size!r}")
    if not isinstance(record.ice, IceLevel):
        raise ValidationError("ice", f"unknown ice level {record.ice!r}")
    _validate_sugar(record.sugar)
    if not _is_mood(record.mood_score):
        raise ValidationError("mood_score", f"must be {MIN_MOOD}-{MAX_MOOD}")
    if (
        isinstance(record.price, bool)
        or not isinstance(record.price, int | float)
        or record.price < 0
    ):
        raise ValidationError("price", "must be a non-negative amount")
    if len(set(record.toppings)) != len(record.toppings):
        raise ValidationError("toppings", "must not contain duplicates")


def _validate_sugar(sugar: object) -> None:
    if isinstance(sugar, NamedSugar):
        if not isinstance(sugar.level, SugarLevel):
            raise ValidationError("sugar", f"unknown sugar level {sugar.level!r}")
        return
    if isinstance(sugar, CustomSugar):
        percent = sugar.percent
        if (
            isinstance(percent, bool)
            or not isinstance(percent, int)
            or not 0 <= percent <= MAX_SUGAR_PERCENT
        ):
            raise ValidationError("sugar", "custom percent must be 0-100")
        return
    raise ValidationError("sugar", f"unsupported sugar value {sugar!r}")


def _is_mood(value: object) -> bool:
    return (
        isinstance(value, int)
        and not isinstance(value, bool)
        and MIN_MOOD <= value <= MAX_MOOD
    )


def record_to_row(record: DrinkRecord) -> dict[str, object]:
    """Serialize a record into a storage row."""
    custom_percent = (
        record.sugar.percent if isinstance(record.sugar, CustomSugar) else None
    )
    return {
        "id": record.id,
        "timestamp": record.timestamp_millis,
        "brand": record.brand,
        "item_name": record.item_name,
        "size": record.size.value,
        "sugar": (
            f"{custom_percent}%"
            if custom_percent is not None
            else record.sugar.level.value
        ),
        "custom_sugar_percent": custom_percent,
        "ice": record.ice.value,
        "toppings": list(record.toppings),
        "mood_score": record.mood_score,
        "price": record.price,
        "notes": record.notes,
        "estimated_calories": record.estimated_calories,
    }


def record_from_row(row: dict[str, object]) -> DrinkRecord:
    """Parse a storage row, accepting snake_case and camelCase columns."""
    if not isinstance(row, dict):
        raise ValidationError("row", f"expected an object, got {type(row).__name__}")
    raw_id = row.get("id")
    if raw_id is None or not str(raw_id).strip():
        raise ValidationError("id", "must not be empty")
    brand = str(row.get("brand") or "").strip()
    if not brand:
        raise ValidationError("brand", "must not be empty")
    item_name = str(_pick(row, "item_name", "itemName") or "").strip()
    if not item_name:
        raise ValidationError("item_name", "must not be empty")
    mood = _parse_mood(_pick(row, "mood_score", "moodScore"))
    price = _parse_price(row.get("price"))
    return DrinkRecord(
        id=str(raw_id),
        timestamp_millis=_parse_timestamp(_pick(row, "timestamp", "timestamp_millis")),
        brand=brand,
        item_name=item_name,
        size=_parse_optional_enum(DrinkSize, row.get("size"), "size", DrinkSize.LARGE),
        sugar=parse_sugar(
            row.get("sugar"),
            _pick(row, "custom_sugar_percent", "customSugarPercent"),
        ),
        ice=_parse_optional_enum(IceLevel, row.get("ice"), "ice", IceLevel.MICRO),
        toppings=_parse_toppings(row.get("toppings")),
        mood_score=mood,
        price=price,
        notes=_optional_text(row.get("notes")),
        estimated_calories=_optional_int(
            _pick(row, "estimated_calories", "estimatedCalories")
        ),
    )


E = TypeVar("E", DrinkSize, SugarLevel, IceLevel)


def parse_enum(enum_cls: type[E], raw: object, field_name: str) -> E:
    """Resolve an enum member from its value, name or display label."""
    if isinstance(raw, enum_cls):
        return raw
    if isinstance(raw, str):
        text = raw.strip()
        for member in enum_cls:
            if text.lower() == member.value or text in {member.name, member.label}:
                return member
    raise ValidationError(field_name, f"unknown value {raw!r}")


def parse_sugar(raw: object, custom_percent: object = None) -> Sugar:
    """Parse a sugar column into the tagged variant."""
    if isinstance(raw, NamedSugar | CustomSugar):
        return raw
    if custom_percent is not None:
        return CustomSugar(_parse_percent(custom_percent))
    if raw is None or raw == "":
        return NamedSugar(SugarLevel.HALF)
    if isinstance(raw, int) and not isinstance(raw, bool):
        return CustomSugar(_parse_percent(raw))
    if isinstance(raw, str) and raw.strip().endswith("%"):
        number = raw.strip()[:-1].strip()
        if number.isdigit():
            return CustomSugar(_parse_percent(number))
    return NamedSugar(parse_enum(SugarLevel, raw, "sugar"))


def _parse_optional_enum(
    enum_cls: type[E], raw: object, field_name: str, default: E
) -> E:
    if raw is None or raw == "":
        return default
    return parse_enum(enum_cls, raw, field_name)


def _parse_percent(value: object) -> int:
    try:
        percent = int(value)  # type: ignore[arg-type]
    except (TypeError, ValueError) as exc:
        raise ValidationError("sugar", f"invalid percent {value!r}") from exc
    if not 0 <= percent <= MAX_SUGAR_PERCENT:
        raise ValidationError("sugar", "custom percent must be 0-100")
    return percent


def _parse_timestamp(value: object) -> int:
    if isinstance(value, int | float) and not isinstance(value, bool):
        return int(value)
    if isinstance(value, str) and value.strip():
        text = value.strip()
        if text.lstrip("-").isdigit():
            return int(text)
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError as exc:
            raise ValidationError("timestamp", f"invalid timestamp {text!r}") from exc
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=UTC)
        return int(parsed.timestamp() * 1000)
    raise ValidationError("timestamp", "missing purchase time")


def _parse_mood(value: object) -> int:
    if isinstance(value, str) and value.strip().isdigit():
        value = int(value.strip())
    if not _is_mood(value):
        raise ValidationError("mood_score", f"must be {MIN_MOOD}-{MAX_MOOD}")
    return value  # type: ignore[return-value]


def _parse_price(value: object) -> int | float:
    if isinstance(value, bool) or value is None:
        return 0
    if isinstance(value, int | float):
        price: int | float = value
    elif isinstance(value, str):
        try:
            price = float(value)
        except ValueError:
            return 0
        if price.is_integer():
            price = int(price)
    else:
        return 0
    if price != price:  # NaN
        return 0
    if price < 0:
        raise ValidationError("price", "must be a non-negative amount")
    return price


def _parse_toppings(value: object) -> tuple[str, ...]:
    if not isinstance(value, list | tuple):
        return ()
    seen: dict[str, None] = {}
    for item in value:
        label = str(item).strip()
        if label:
            seen.setdefault(label, None)
    return tuple(seen)


def _optional_text(value: object) -> str | None:
    if value is None:
        return None
    text = str(value)
    return text or None


def _optional_int(value: object) -> int | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)  # type: ignore[call-overload]
    except (TypeError, ValueError):
        return None


def _pick(row: dict[str, object], *keys: str) -> object:
    for key in keys:
        if row.get(key) is not None:
            return row[key]
    return None
