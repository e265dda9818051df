"""Record and calendar endpoints."""

from __future__ import annotations

import logging
from dataclasses import asdict, replace
from datetime import date  # noqa: TC003
from typing import TYPE_CHECKING, Literal

from fastapi import APIRouter, BackgroundTasks, Depends, Query, Request

from drink_journal.api.auth import require_token
from drink_journal.api.models import RecordIn, RecordOut
from drink_journal.domain.records import new_record_id
from drink_journal.errors import PersistenceFailure
from drink_journal.services.calendar import (
    marked_days,
    records_in_month,
    records_on_date,
    sort_newest_first,
)

if TYPE_CHECKING:
    from drink_journal.containers import AppContainer
    from drink_journal.domain.records import DrinkRecord

_logger = logging.getLogger(__name__)

router = APIRouter(tags=["records"], dependencies=[Depends(require_token)])


@router.get("/records")
async def list_records(
    request: Request, sort: Literal["added", "timestamp"] = "added"
) -> dict[str, object]:
    """Return all records, most recently added first or by purchase time."""
    container: AppContainer = request.app.state.container
    records = container.record_store.all()
    if sort == "timestamp":
        records = sort_newest_first(records)
    return {"records": [RecordOut.from_record(record) for record in records]}


@router.post("/records", status_code=201)
async def create_record(
    payload: RecordIn, request: Request, background_tasks: BackgroundTasks
) -> dict[str, object]:
    """Add a record and estimate its calories in the background."""
    container: AppContainer = request.app.state.container
    record = payload.to_record(new_record_id())
    container.record_store.add(record)
    if record.estimated_calories is None:
        background_tasks.add_task(_estimate_calories, container, record)
    return {"record": RecordOut.from_record(record)}


@router.put("/records/{record_id}")
async def update_record(
    record_id: str,
    payload: RecordIn,
    request: Request,
    background_tasks: BackgroundTasks,
) -> dict[str, object]:
    """Apply the sent fields to a record; a missing record is left alone."""
    container: AppContainer = request.app.state.container
    existing = container.record_store.get(record_id)
    if existing is None:
        return {"updated": False, "record": None}
    record = payload.to_record(record_id, existing)
    updated = container.record_store.update(record)
    stale_estimate = (
        "estimated_calories" not in payload.model_fields_set
        and _drink_key(record) != _drink_key(existing)
    )
    if updated and (record.estimated_calories is None or stale_estimate):
        background_tasks.add_task(_estimate_calories, container, record)
    return {
        "updated": updated,
        "record": RecordOut.from_record(record) if updated else None,
    }


@router.delete("/records/{record_id}")
async def delete_record(record_id: str, request: Request) -> dict[str, bool]:
    """Delete a record if it exists."""
    container: AppContainer = request.app.state.container
    return {"deleted": container.record_store.remove(record_id)}


@router.post("/records/refresh")
async def refresh_records(request: Request) -> dict[str, object]:
    """Reload the journal from storage."""
    container: AppContainer = request.app.state.container
    records = container.record_store.refresh()
    return {"count": len(records)}


@router.post("/records/sync")
async def sync_records(request: Request) -> dict[str, object]:
    """Write the in-memory journal back to storage after a failed save."""
    container: AppContainer = request.app.state.container
    container.record_store.sync()
    return {"count": len(container.record_store.all())}


@router.get("/calendar/day")
async def calendar_day(
    request: Request, day: date = Query(alias="date")
) -> dict[str, object]:
    """Return the records purchased on a calendar day."""
    container: AppContainer = request.app.state.container
    records = records_on_date(
        container.record_store.all(), day, container.stats_service.tz
    )
    return {
        "date": day.isoformat(),
        "records": [RecordOut.from_record(record) for record in records],
    }


@router.get("/calendar/month")
async def calendar_month(
    request: Request,
    year: int,
    month: int = Query(ge=1, le=12),
) -> dict[str, object]:
    """Return marked days, records and the monthly summary for a month."""
    container: AppContainer = request.app.state.container
    snapshot = container.record_store.all()
    tz = container.stats_service.tz
    return {
        "year": year,
        "month": month,
        "marked_days": sorted(marked_days(snapshot, year, month, tz)),
        "summary": asdict(container.stats_service.monthly(year, month)),
        "records": [
            RecordOut.from_record(record)
            for record in records_in_month(snapshot, year, month, tz)
        ],
    }


async def _estimate_calories(container: AppContainer, record: DrinkRecord) -> None:
    calories = await container.suggestion_service.estimate_calories(
        brand=record.brand,
        item=record.item_name,
        size=record.size,
        sugar=record.sugar,
        toppings=record.toppings,
    )
    if calories <= 0:
        return
    current = container.record_store.get(record.id)
    if current is None or _drink_key(current) != _drink_key(record):
        # Deleted or edited while the estimate was running.
        return
    try:
        container.record_store.update(replace(current, estimated_calories=calories))
    except PersistenceFailure:
        _logger.warning("Calorie estimate for %s was not persisted", record.id)


def _drink_key(record: DrinkRecord) -> tuple[object, ...]:
    return (
        record.brand,
        record.item_name,
        record.size,
        record.sugar,
        frozenset(record.toppings),
    )
