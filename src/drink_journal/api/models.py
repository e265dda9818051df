"""Pydantic models for the HTTP API."""

import time

from pydantic import BaseModel, Field

from drink_journal.domain.records import (
    CustomSugar,
    DrinkRecord,
    DrinkSize,
    Sugar,
    parse_enum,
    parse_sugar,
    record_from_row,
    record_to_row,
    sugar_label,
)


class RecordIn(BaseModel):
    """Drink record fields submitted by the form.

    Enum fields accept the stored value, the enum name or the display label
    and are checked by the record parser so that errors surface as
    ValidationError from the store boundary.
    """

    timestamp_millis: int | None = None
    brand: str = ""
    item_name: str = ""
    size: str | None = None
    sugar: str | None = None
    custom_sugar_percent: int | None = None
    ice: str | None = None
    toppings: list[str] = Field(default_factory=list)
    mood_score: int = 5
    price: float | int | str | None = None
    notes: str | None = None
    estimated_calories: int | None = None

    def to_record(
        self, record_id: str, existing: DrinkRecord | None = None
    ) -> DrinkRecord:
        """Build a domain record with the given id.

        With an existing record only the fields the client sent are changed;
        everything else, including the purchase time, is kept.
        """
        if existing is None:
            row: dict[str, object] = {}
            submitted = self.model_dump()
        else:
            row = record_to_row(existing)
            submitted = self.model_dump(exclude_unset=True)
            if "sugar" in submitted and "custom_sugar_percent" not in submitted:
                row["custom_sugar_percent"] = None
        if "timestamp_millis" in submitted:
            submitted["timestamp"] = submitted.pop("timestamp_millis")
        row.update(submitted)
        row["id"] = record_id
        if row.get("timestamp") is None:
            row["timestamp"] = int(time.time() * 1000)
        return record_from_row(row)


class RecordOut(BaseModel):
    """Drink record as returned to clients."""

    id: str
    timestamp_millis: int
    brand: str
    item_name: str
    size: str
    size_label: str
    sugar: str
    sugar_label: str
    custom_sugar_percent: int | None
    ice: str
    ice_label: str
    toppings: list[str]
    mood_score: int
    price: float | int
    notes: str | None
    estimated_calories: int | None

    @classmethod
    def from_record(cls, record: DrinkRecord) -> "RecordOut":
        """Convert a domain record."""
        custom = record.sugar if isinstance(record.sugar, CustomSugar) else None
        return cls(
            id=record.id,
            timestamp_millis=record.timestamp_millis,
            brand=record.brand,
            item_name=record.item_name,
            size=record.size.value,
            size_label=record.size.label,
            sugar=f"{custom.percent}%" if custom else record.sugar.level.value,
            sugar_label=sugar_label(record.sugar),
            custom_sugar_percent=custom.percent if custom else None,
            ice=record.ice.value,
            ice_label=record.ice.label,
            toppings=list(record.toppings),
            mood_score=record.mood_score,
            price=record.price,
            notes=record.notes,
            estimated_calories=record.estimated_calories,
        )


class CalorieRequest(BaseModel):
    """Drink description for a calorie estimate."""

    brand: str
    item_name: str
    size: str | None = None
    sugar: str | None = None
    custom_sugar_percent: int | None = None
    toppings: list[str] = Field(default_factory=list)

    def size_value(self) -> DrinkSize:
        """Return the parsed size, defaulting to large."""
        if not self.size:
            return DrinkSize.LARGE
        return parse_enum(DrinkSize, self.size, "size")

    def sugar_value(self) -> Sugar:
        """Return the parsed sugar choice."""
        return parse_sugar(self.sugar, self.custom_sugar_percent)
