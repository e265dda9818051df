"""Domain models for dashboard statistics."""

from dataclasses import dataclass

NOT_YET_RECORDED = "not yet recorded"


@dataclass(frozen=True)
class YearlySummary:
    """Totals and favorites for a calendar year."""

    year: int
    count: int
    total_spent: int | float
    average_price: int
    favorite_brand: str
    favorite_item: str


@dataclass(frozen=True)
class MonthlySummary:
    """Totals for a calendar month."""

    year: int
    month: int
    total_spent: int | float
    cup_count: int
    average_mood: str


@dataclass(frozen=True)
class MonthlySpending:
    """Spending for one month of a year series."""

    month: int
    label: str
    amount: int | float


@dataclass(frozen=True)
class MoodBucket:
    """Number of records with a given mood score."""

    score: int
    label: str
    value: int
