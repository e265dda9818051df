"""Supabase repository for drink records."""

import logging
from dataclasses import dataclass
from datetime import UTC, datetime

from supabase import Client

from drink_journal.domain.records import DrinkRecord, record_from_row, record_to_row
from drink_journal.errors import ValidationError
from drink_journal.services.records import RecordRepository

_logger = logging.getLogger(__name__)


@dataclass
class SupabaseRecordRepository(RecordRepository):
    """Supabase implementation storing one row per drink record.

    Expected columns: id (text, primary key), timestamp (timestamptz), brand,
    item_name, size, sugar, ice (text), custom_sugar_percent, mood_score,
    estimated_calories (int), toppings (jsonb), price (numeric), notes (text)
    and user_id (text) when rows are scoped to an owner. Reads also accept
    the camelCase columns itemName, moodScore, customSugarPercent and
    estimatedCalories; writes always use the snake_case names.
    """

    client: Client
    table: str = "drink_records"
    user_id: str | None = None

    def load_all(self) -> list[DrinkRecord]:
        """Return records ordered by purchase time, newest first."""
        query = self.client.table(self.table).select("*")
        if self.user_id:
            query = query.eq("user_id", self.user_id)
        response = query.order("timestamp", desc=True).execute()
        records = []
        for row in response.data or []:
            try:
                records.append(record_from_row(row))
            except ValidationError as exc:
                _logger.warning("Skipping malformed row %s: %s", row.get("id"), exc)
        return records

    def save_all(self, records: list[DrinkRecord]) -> None:
        """Upsert every record and delete rows that are no longer present."""
        if records:
            self.client.table(self.table).upsert(
                [self._to_row(record) for record in records]
            ).execute()
        query = self.client.table(self.table).select("*")
        if self.user_id:
            query = query.eq("user_id", self.user_id)
        response = query.execute()
        keep = {record.id for record in records}
        # Rows that do not parse were never loaded, so they are not stale.
        stale = [
            str(row["id"])
            for row in response.data or []
            if str(row["id"]) not in keep and _is_readable(row)
        ]
        if stale:
            self.client.table(self.table).delete().in_("id", stale).execute()

    def insert(self, record: DrinkRecord) -> None:
        """Insert a record row."""
        response = self.client.table(self.table).insert(self._to_row(record)).execute()
        if not response.data:
            raise RuntimeError("Failed to insert drink record")

    def update(self, record: DrinkRecord) -> None:
        """Update the row with the record's id."""
        row = self._to_row(record)
        row.pop("id")
        self.client.table(self.table).update(row).eq("id", record.id).execute()

    def delete(self, record_id: str) -> None:
        """Delete the row with the given id."""
        self.client.table(self.table).delete().eq("id", record_id).execute()

    def _to_row(self, record: DrinkRecord) -> dict[str, object]:
        row = record_to_row(record)
        row["timestamp"] = datetime.fromtimestamp(
            record.timestamp_millis / 1000, tz=UTC
        ).isoformat()
        if self.user_id:
            row["user_id"] = self.user_id
        return row


def _is_readable(row: dict[str, object]) -> bool:
    try:
        record_from_row(row)
    except ValidationError:
        return False
    return True
