"""Models for structured suggestion results."""

from pydantic import BaseModel, Field


class ItemSuggestions(BaseModel):
    """Menu items suggested for a brand and partial name."""

    items: list[str]


class CalorieEstimate(BaseModel):
    """Estimated energy of a single drink."""

    calories: int = Field(ge=0)
    notes: str | None = None
