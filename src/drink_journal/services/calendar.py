"""Calendar and history view selection over drink records."""

from collections.abc import Iterable
from datetime import UTC, date, tzinfo

from drink_journal.domain.records import DrinkRecord


def records_on_date(
    records: Iterable[DrinkRecord], day: date, tz: tzinfo = UTC
) -> list[DrinkRecord]:
    """Return records purchased on the given calendar day, in input order."""
    return [record for record in records if record.purchased_at(tz).date() == day]


def records_in_month(
    records: Iterable[DrinkRecord], year: int, month: int, tz: tzinfo = UTC
) -> list[DrinkRecord]:
    """Return records purchased in the given year and month."""
    selected = []
    for record in records:
        purchased = record.purchased_at(tz)
        if purchased.year == year and purchased.month == month:
            selected.append(record)
    return selected


def records_in_year(
    records: Iterable[DrinkRecord], year: int, tz: tzinfo = UTC
) -> list[DrinkRecord]:
    """Return records purchased in the given year."""
    return [record for record in records if record.purchased_at(tz).year == year]


def has_record_on_day(
    records: Iterable[DrinkRecord],
    year: int,
    month: int,
    day: int,
    tz: tzinfo = UTC,
) -> bool:
    """Return True when any record falls on the given day."""
    for record in records:
        purchased = record.purchased_at(tz)
        if (purchased.year, purchased.month, purchased.day) == (year, month, day):
            return True
    return False


def marked_days(
    records: Iterable[DrinkRecord], year: int, month: int, tz: tzinfo = UTC
) -> set[int]:
    """Return the days of a month that have at least one record."""
    return {
        record.purchased_at(tz).day
        for record in records_in_month(records, year, month, tz)
    }


def sort_newest_first(records: Iterable[DrinkRecord]) -> list[DrinkRecord]:
    """Order records by purchase time, newest first."""
    return sorted(records, key=lambda record: record.timestamp_millis, reverse=True)
