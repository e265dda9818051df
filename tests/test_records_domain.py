"""Tests for record parsing and serialization."""

from dataclasses import replace

import pytest

from drink_journal.domain.records import (
    CustomSugar,
    DrinkSize,
    IceLevel,
    NamedSugar,
    SugarLevel,
    new_record_id,
    parse_sugar,
    record_from_row,
    record_to_row,
    sugar_label,
)
from drink_journal.errors import ValidationError
from tests.conftest import BASE_MILLIS, make_record


def test_record_row_roundtrip_with_custom_sugar() -> None:
    record = replace(
        make_record("1", toppings=("boba", "pudding")),
        sugar=CustomSugar(25),
        notes="rainy day",
    )

    row = record_to_row(record)

    assert row["sugar"] == "25%"
    assert row["custom_sugar_percent"] == 25
    assert record_from_row(row) == record


def test_record_from_row_accepts_camel_case_label_columns() -> None:
    row = {
        "id": "abc",
        "timestamp": "2024-05-01T10:30:00+00:00",
        "brand": "50嵐",
        "itemName": "四季春",
        "moodScore": 4,
        "price": "45",
        "sugar": "微糖 (30%)",
        "ice": "去冰",
        "size": "中杯 (M)",
        "estimatedCalories": 210,
    }

    record = record_from_row(row)

    assert record.timestamp_millis == BASE_MILLIS
    assert record.item_name == "四季春"
    assert record.sugar == NamedSugar(SugarLevel.MICRO)
    assert record.ice is IceLevel.NONE
    assert record.size is DrinkSize.MEDIUM
    assert record.price == 45
    assert record.estimated_calories == 210


def test_record_from_row_applies_form_defaults() -> None:
    record = record_from_row(
        {
            "id": "1",
            "timestamp": BASE_MILLIS,
            "brand": "A",
            "itemName": "Tea",
            "moodScore": 5,
        }
    )

    assert record.size is DrinkSize.LARGE
    assert record.sugar == NamedSugar(SugarLevel.HALF)
    assert record.ice is IceLevel.MICRO
    assert record.price == 0
    assert record.toppings == ()


def test_record_from_row_defaults_unparseable_price_to_zero() -> None:
    record = record_from_row(
        {
            "id": "1",
            "timestamp": BASE_MILLIS,
            "brand": "A",
            "item_name": "Tea",
            "mood_score": 3,
            "price": "free",
        }
    )

    assert record.price == 0


@pytest.mark.parametrize(
    ("changes", "field"),
    [
        ({"brand": ""}, "brand"),
        ({"item_name": "   "}, "item_name"),
        ({"mood_score": 0}, "mood_score"),
        ({"price": -5}, "price"),
        ({"ice": "lukewarm"}, "ice"),
        ({"timestamp": None}, "timestamp"),
    ],
)
def test_record_from_row_rejects_invalid_rows(
    changes: dict[str, object], field: str
) -> None:
    row = {**record_to_row(make_record("1")), **changes}

    with pytest.raises(ValidationError) as excinfo:
        record_from_row(row)

    assert excinfo.value.field == field


@pytest.mark.parametrize("row", [None, "1", ["id", "1"]])
def test_record_from_row_rejects_non_object_rows(row: object) -> None:
    with pytest.raises(ValidationError) as excinfo:
        record_from_row(row)  # type: ignore[arg-type]

    assert excinfo.value.field == "row"


def test_toppings_compare_as_a_set_but_keep_order() -> None:
    first = make_record("1", toppings=("boba", "pudding"))
    second = make_record("1", toppings=("pudding", "boba"))

    assert first == second
    assert hash(first) == hash(second)
    assert second.toppings == ("pudding", "boba")


def test_record_from_row_drops_duplicate_toppings() -> None:
    row = {**record_to_row(make_record("1")), "toppings": ["boba", "boba", "jelly"]}

    assert record_from_row(row).toppings == ("boba", "jelly")


def test_parse_sugar_variants() -> None:
    assert parse_sugar("half") == NamedSugar(SugarLevel.HALF)
    assert parse_sugar("ONE_PERCENT") == NamedSugar(SugarLevel.ONE_PERCENT)
    assert parse_sugar("40%") == CustomSugar(40)
    assert parse_sugar("half", custom_percent=15) == CustomSugar(15)
    with pytest.raises(ValidationError):
        parse_sugar("150%")
    with pytest.raises(ValidationError):
        parse_sugar("extra sweet")


def test_sugar_label() -> None:
    assert sugar_label(CustomSugar(35)) == "35%"
    assert sugar_label(NamedSugar(SugarLevel.NONE)) == "無糖 (0%)"
    assert SugarLevel.LESS.percent == 70


def test_new_record_id_is_unique() -> None:
    ids = {new_record_id() for _ in range(50)}

    assert len(ids) == 50
