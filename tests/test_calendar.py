"""Tests for calendar and history selection."""

from datetime import date
from zoneinfo import ZoneInfo

from drink_journal.services.calendar import (
    has_record_on_day,
    marked_days,
    records_in_month,
    records_in_year,
    records_on_date,
    sort_newest_first,
)
from tests.conftest import make_record, millis


def test_records_on_date_returns_matching_day_in_order() -> None:
    first = make_record("1", timestamp_millis=millis(2024, 5, 1, 9))
    other_day = make_record("2", timestamp_millis=millis(2024, 5, 2, 9))
    same_day = make_record("3", timestamp_millis=millis(2024, 5, 1, 22))

    assert records_on_date([first, other_day], date(2024, 5, 1)) == [first]
    assert records_on_date([same_day, other_day, first], date(2024, 5, 1)) == [
        same_day,
        first,
    ]


def test_records_on_date_uses_viewing_timezone() -> None:
    late_evening_utc = make_record("1", timestamp_millis=millis(2024, 5, 1, 18))
    taipei = ZoneInfo("Asia/Taipei")

    assert records_on_date([late_evening_utc], date(2024, 5, 2), taipei) == [
        late_evening_utc
    ]
    assert records_on_date([late_evening_utc], date(2024, 5, 1), taipei) == []


def test_records_in_month_and_year() -> None:
    may = make_record("1", timestamp_millis=millis(2024, 5, 3))
    june = make_record("2", timestamp_millis=millis(2024, 6, 3))
    last_year = make_record("3", timestamp_millis=millis(2023, 5, 3))
    records = [may, june, last_year]

    assert records_in_month(records, 2024, 5) == [may]
    assert records_in_year(records, 2024) == [may, june]


def test_has_record_on_day_and_marked_days() -> None:
    records = [
        make_record("1", timestamp_millis=millis(2024, 5, 3)),
        make_record("2", timestamp_millis=millis(2024, 5, 17)),
        make_record("3", timestamp_millis=millis(2024, 5, 17, 20)),
        make_record("4", timestamp_millis=millis(2024, 4, 9)),
    ]

    assert has_record_on_day(records, 2024, 5, 17)
    assert not has_record_on_day(records, 2024, 5, 9)
    assert not has_record_on_day([], 2024, 5, 17)
    assert marked_days(records, 2024, 5) == {3, 17}


def test_sort_newest_first_orders_by_purchase_time() -> None:
    old = make_record("1", timestamp_millis=millis(2024, 1, 1))
    new = make_record("2", timestamp_millis=millis(2024, 3, 1))
    middle = make_record("3", timestamp_millis=millis(2024, 2, 1))

    assert [record.id for record in sort_newest_first([old, new, middle])] == [
        "2",
        "3",
        "1",
    ]
