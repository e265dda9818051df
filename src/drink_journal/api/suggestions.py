"""Advisory suggestion endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, Request

from drink_journal.api.auth import require_token
from drink_journal.api.models import CalorieRequest

if TYPE_CHECKING:
    from drink_journal.containers import AppContainer

router = APIRouter(
    prefix="/suggestions",
    tags=["suggestions"],
    dependencies=[Depends(require_token)],
)


@router.get("/brands")
async def brands(request: Request, q: str = "") -> dict[str, list[str]]:
    """Return popular brands matching the typed text."""
    container: AppContainer = request.app.state.container
    return {"brands": container.suggestion_service.suggest_brands(q)}


@router.get("/items")
async def items(request: Request, brand: str, q: str = "") -> dict[str, object]:
    """Return menu items for a brand; superseded lookups come back stale."""
    container: AppContainer = request.app.state.container
    result = await container.debouncer.run(
        "item_name",
        lambda: container.suggestion_service.suggest_items(brand, q),
    )
    return {"items": result or [], "stale": result is None}


@router.post("/calories")
async def calories(payload: CalorieRequest, request: Request) -> dict[str, int]:
    """Return a calorie estimate, 0 when none is available."""
    container: AppContainer = request.app.state.container
    estimate = await container.suggestion_service.estimate_calories(
        brand=payload.brand,
        item=payload.item_name,
        size=payload.size_value(),
        sugar=payload.sugar_value(),
        toppings=payload.toppings,
    )
    return {"calories": estimate}
