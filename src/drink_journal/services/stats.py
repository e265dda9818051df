"""Statistics over drink records for the dashboard."""

from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from datetime import UTC, datetime, tzinfo
from decimal import ROUND_HALF_UP, Decimal
from zoneinfo import ZoneInfo

from drink_journal.domain.records import MAX_MOOD, MIN_MOOD, DrinkRecord
from drink_journal.domain.stats import (
    NOT_YET_RECORDED,
    MonthlySpending,
    MonthlySummary,
    MoodBucket,
    YearlySummary,
)
from drink_journal.services.calendar import records_in_month, records_in_year
from drink_journal.services.records import RecordStore

MONTH_LABELS = (
    "Jan",
    "Feb",
    "Mar",
    "Apr",
    "May",
    "Jun",
    "Jul",
    "Aug",
    "Sep",
    "Oct",
    "Nov",
    "Dec",
)

MOOD_LABELS = {
    5: "Deeply soothing",
    4: "Very satisfied",
    3: "Pretty good",
    2: "Just okay",
    1: "Disappointing",
}


def total_spent(records: Iterable[DrinkRecord]) -> int | float:
    """Return the sum of prices."""
    return sum((record.price for record in records), 0)


def yearly_summary(
    records: Iterable[DrinkRecord], year: int, tz: tzinfo = UTC
) -> YearlySummary:
    """Return count, spending and favorites for a year."""
    selected = records_in_year(records, year, tz)
    count = len(selected)
    spent = total_spent(selected)
    return YearlySummary(
        year=year,
        count=count,
        total_spent=spent,
        average_price=_round_half_up(spent / count) if count else 0,
        favorite_brand=_most_frequent(record.brand for record in selected),
        favorite_item=_most_frequent(record.item_name for record in selected),
    )


def monthly_summary(
    records: Iterable[DrinkRecord], year: int, month: int, tz: tzinfo = UTC
) -> MonthlySummary:
    """Return spending, cup count and average mood for a month."""
    selected = records_in_month(records, year, month, tz)
    cups = len(selected)
    if cups:
        mood_total = sum(record.mood_score for record in selected)
        average_mood = _one_decimal(mood_total / cups)
    else:
        average_mood = "0.0"
    return MonthlySummary(
        year=year,
        month=month,
        total_spent=total_spent(selected),
        cup_count=cups,
        average_mood=average_mood,
    )


def monthly_spending_series(
    records: Iterable[DrinkRecord], year: int, tz: tzinfo = UTC
) -> list[MonthlySpending]:
    """Return spending for each month of a year, January first."""
    amounts: dict[int, int | float] = dict.fromkeys(range(1, 13), 0)
    for record in records_in_year(records, year, tz):
        month = record.purchased_at(tz).month
        amounts[month] += record.price
    return [
        MonthlySpending(month=month, label=MONTH_LABELS[month - 1], amount=amount)
        for month, amount in amounts.items()
    ]


def mood_distribution(records: Iterable[DrinkRecord]) -> list[MoodBucket]:
    """Count records per mood score, highest score first, skipping empty tiers."""
    counts = dict.fromkeys(range(MAX_MOOD, MIN_MOOD - 1, -1), 0)
    for record in records:
        if record.mood_score in counts:
            counts[record.mood_score] += 1
    return [
        MoodBucket(score=score, label=MOOD_LABELS[score], value=value)
        for score, value in counts.items()
        if value > 0
    ]


def available_years(
    records: Iterable[DrinkRecord], current_year: int, tz: tzinfo = UTC
) -> list[int]:
    """Return years with records plus the current year, newest first."""
    years = {current_year}
    years.update(record.purchased_at(tz).year for record in records)
    return sorted(years, reverse=True)


def _most_frequent(values: Iterable[str]) -> str:
    # dicts keep insertion order, so max() keeps the first value seen on ties.
    counts: dict[str, int] = {}
    for value in values:
        counts[value] = counts.get(value, 0) + 1
    if not counts:
        return NOT_YET_RECORDED
    return max(counts, key=lambda value: counts[value])


def _round_half_up(value: float) -> int:
    return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def _one_decimal(value: float) -> str:
    rounded = Decimal(str(value)).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)
    return f"{rounded:.1f}"


@dataclass
class Dashboard:
    """Everything the dashboard view shows for a selected year and month."""

    years: list[int]
    yearly: YearlySummary
    monthly: MonthlySummary
    spending: list[MonthlySpending]
    moods: list[MoodBucket]
    lifetime_spent: int | float


@dataclass
class StatsService:
    """Service computing statistics from the current store snapshot."""

    store: RecordStore
    timezone_name: str = "UTC"
    clock: Callable[[tzinfo], datetime] = lambda tz: datetime.now(tz=tz)

    @property
    def tz(self) -> ZoneInfo:
        """Return the viewing timezone."""
        return ZoneInfo(self.timezone_name)

    def current_year(self) -> int:
        """Return the current year in the viewing timezone."""
        return self.clock(self.tz).year

    def lifetime_spent(self) -> int | float:
        """Return the total spent across all records."""
        return total_spent(self.store.all())

    def years(self) -> list[int]:
        """Return the selectable years."""
        return available_years(self.store.all(), self.current_year(), self.tz)

    def yearly(self, year: int) -> YearlySummary:
        """Return the yearly review for a year."""
        return yearly_summary(self.store.all(), year, self.tz)

    def monthly(self, year: int, month: int) -> MonthlySummary:
        """Return the monthly stamp summary."""
        return monthly_summary(self.store.all(), year, month, self.tz)

    def spending(self, year: int) -> list[MonthlySpending]:
        """Return the month-by-month spending series for a year."""
        return monthly_spending_series(self.store.all(), year, self.tz)

    def moods(self, year: int) -> list[MoodBucket]:
        """Return the mood distribution of a year's records."""
        return mood_distribution(records_in_year(self.store.all(), year, self.tz))

    def dashboard(self, year: int, month: int) -> Dashboard:
        """Return all dashboard figures from a single snapshot."""
        records: Sequence[DrinkRecord] = self.store.all()
        tz = self.tz
        return Dashboard(
            years=available_years(records, self.current_year(), tz),
            yearly=yearly_summary(records, year, tz),
            monthly=monthly_summary(records, year, month, tz),
            spending=monthly_spending_series(records, year, tz),
            moods=mood_distribution(records_in_year(records, year, tz)),
            lifetime_spent=total_spent(records),
        )
