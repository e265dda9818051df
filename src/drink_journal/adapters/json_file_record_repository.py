"""Local JSON file storage for drink records."""

import json
import logging
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path

from drink_journal.domain.records import DrinkRecord, record_from_row, record_to_row
from drink_journal.errors import ValidationError
from drink_journal.services.records import RecordRepository

_logger = logging.getLogger(__name__)


@dataclass
class JsonFileRecordRepository(RecordRepository):
    """Stores the whole journal as a newest-first JSON array on disk.

    Writes work on the raw rows, so rows that fail to parse are skipped on
    load but never dropped from the file.
    """

    path: Path

    def load_all(self) -> list[DrinkRecord]:
        """Return stored records; a missing file is an empty journal."""
        records = []
        for row in self._read_rows():
            try:
                records.append(record_from_row(row))
            except ValidationError as exc:
                _logger.warning("Skipping malformed record in %s: %s", self.path, exc)
        return records

    def save_all(self, records: list[DrinkRecord]) -> None:
        """Rewrite the file with the given records, keeping unreadable rows."""
        written = {record.id for record in records}
        unreadable = [
            row
            for row in self._read_rows()
            if not _is_readable(row) and _row_id(row) not in written
        ]
        self._write_rows([record_to_row(record) for record in records] + unreadable)

    def insert(self, record: DrinkRecord) -> None:
        """Prepend a record."""
        rows = [row for row in self._read_rows() if _row_id(row) != record.id]
        self._write_rows([record_to_row(record), *rows])

    def update(self, record: DrinkRecord) -> None:
        """Replace the stored row with the same id, if any."""
        self._write_rows(
            [
                record_to_row(record) if _row_id(row) == record.id else row
                for row in self._read_rows()
            ]
        )

    def delete(self, record_id: str) -> None:
        """Remove the stored row with the given id."""
        self._write_rows(
            [row for row in self._read_rows() if _row_id(row) != record_id]
        )

    def _read_rows(self) -> list[object]:
        if not self.path.exists():
            return []
        rows = json.loads(self.path.read_text(encoding="utf-8") or "[]")
        if not isinstance(rows, list):
            raise ValueError(f"{self.path} does not contain a list of records")
        return rows

    def _write_rows(self, rows: list[object]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = json.dumps(rows, ensure_ascii=False, indent=2)
        fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(payload)
            os.replace(tmp_name, self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise


def _row_id(row: object) -> str | None:
    if isinstance(row, dict) and row.get("id") is not None:
        return str(row["id"])
    return None


def _is_readable(row: object) -> bool:
    try:
        record_from_row(row)  # type: ignore[arg-type]
    except ValidationError:
        return False
    return True
