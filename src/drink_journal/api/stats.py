"""Dashboard statistics endpoints."""

from __future__ import annotations

from dataclasses import asdict
from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, Query, Request

from drink_journal.api.auth import require_token

if TYPE_CHECKING:
    from drink_journal.containers import AppContainer

router = APIRouter(
    prefix="/stats", tags=["stats"], dependencies=[Depends(require_token)]
)


@router.get("/total")
async def lifetime_total(request: Request) -> dict[str, object]:
    """Return the total spent across the whole journal."""
    container: AppContainer = request.app.state.container
    return {"total_spent": container.stats_service.lifetime_spent()}


@router.get("/years")
async def years(request: Request) -> dict[str, object]:
    """Return the years that can be selected on the dashboard."""
    container: AppContainer = request.app.state.container
    return {"years": container.stats_service.years()}


@router.get("/yearly")
async def yearly(request: Request, year: int | None = None) -> dict[str, object]:
    """Return the yearly review, defaulting to the current year."""
    container: AppContainer = request.app.state.container
    stats = container.stats_service
    return asdict(stats.yearly(year or stats.current_year()))


@router.get("/monthly")
async def monthly(
    request: Request, year: int, month: int = Query(ge=1, le=12)
) -> dict[str, object]:
    """Return spending, cups and average mood for a month."""
    container: AppContainer = request.app.state.container
    return asdict(container.stats_service.monthly(year, month))


@router.get("/spending")
async def spending(request: Request, year: int | None = None) -> dict[str, object]:
    """Return the month-by-month spending series for a year."""
    container: AppContainer = request.app.state.container
    stats = container.stats_service
    resolved_year = year or stats.current_year()
    return {
        "year": resolved_year,
        "months": [asdict(entry) for entry in stats.spending(resolved_year)],
    }


@router.get("/moods")
async def moods(request: Request, year: int | None = None) -> dict[str, object]:
    """Return the mood distribution for a year."""
    container: AppContainer = request.app.state.container
    stats = container.stats_service
    resolved_year = year or stats.current_year()
    return {
        "year": resolved_year,
        "moods": [asdict(bucket) for bucket in stats.moods(resolved_year)],
    }


@router.get("/dashboard")
async def dashboard(
    request: Request, year: int, month: int = Query(ge=1, le=12)
) -> dict[str, object]:
    """Return every dashboard figure computed from one snapshot."""
    container: AppContainer = request.app.state.container
    return asdict(container.stats_service.dashboard(year, month))
