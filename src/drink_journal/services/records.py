"""Record store holding the drink journal in memory."""

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from typing import Protocol

from drink_journal.domain.records import DrinkRecord, validate_record
from drink_journal.errors import PersistenceFailure, ValidationError

_logger = logging.getLogger(__name__)

Subscriber = Callable[[tuple[DrinkRecord, ...]], None]


class RecordRepository(Protocol):
    """Persistence interface for drink records."""

    def load_all(self) -> list[DrinkRecord]:
        """Return every stored record, newest first."""

    def save_all(self, records: list[DrinkRecord]) -> None:
        """Replace the stored collection."""

    def insert(self, record: DrinkRecord) -> None:
        """Store a new record."""

    def update(self, record: DrinkRecord) -> None:
        """Overwrite the stored record with the same id."""

    def delete(self, record_id: str) -> None:
        """Delete the stored record with the given id."""


@dataclass
class RecordStore:
    """Ordered, newest-first collection of drink records.

    Mutations are applied in memory first, then subscribers are notified and
    the change is written through to the repository. A failed write raises
    PersistenceFailure but keeps the in-memory change so the caller can retry
    with ``sync``.
    """

    repository: RecordRepository
    _records: list[DrinkRecord] = field(default_factory=list, init=False)
    _subscribers: list[Subscriber] = field(default_factory=list, init=False)

    def load(self, records: Iterable[DrinkRecord]) -> None:
        """Replace the whole collection without writing it back."""
        self._records = list(records)
        self._notify()

    def refresh(self) -> tuple[DrinkRecord, ...]:
        """Reload from the repository, keeping the current state on failure."""
        try:
            loaded = self.repository.load_all()
        except Exception as exc:
            _logger.warning("Failed to load drink records: %s", exc)
            raise PersistenceFailure("load", str(exc)) from exc
        self.load(loaded)
        _logger.info("Loaded %s drink records", len(self._records))
        return self.all()

    def add(self, record: DrinkRecord) -> None:
        """Insert a record at the front of the collection."""
        validate_record(record)
        if self._index_of(record.id) is not None:
            raise ValidationError("id", f"record {record.id} already exists")
        self._records.insert(0, record)
        self._notify()
        self._flush("insert", lambda: self.repository.insert(record))

    def update(self, record: DrinkRecord) -> bool:
        """Replace the record with the same id; return False when it is gone."""
        validate_record(record)
        index = self._index_of(record.id)
        if index is None:
            _logger.info("Skipping update for missing record %s", record.id)
            return False
        self._records[index] = record
        self._notify()
        self._flush("update", lambda: self.repository.update(record))
        return True

    def remove(self, record_id: str) -> bool:
        """Delete the record with the given id; return False when absent."""
        index = self._index_of(record_id)
        if index is None:
            return False
        del self._records[index]
        self._notify()
        self._flush("delete", lambda: self.repository.delete(record_id))
        return True

    def sync(self) -> None:
        """Write the full in-memory collection to the repository."""
        snapshot = list(self._records)
        self._flush("save", lambda: self.repository.save_all(snapshot))

    def all(self) -> tuple[DrinkRecord, ...]:
        """Return a read-only snapshot of the records, most recently added first."""
        return tuple(self._records)

    def get(self, record_id: str) -> DrinkRecord | None:
        """Return a record by id, if present."""
        index = self._index_of(record_id)
        return None if index is None else self._records[index]

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register a change listener and return a function that removes it."""
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def _index_of(self, record_id: str) -> int | None:
        for index, record in enumerate(self._records):
            if record.id == record_id:
                return index
        return None

    def _notify(self) -> None:
        snapshot = self.all()
        for callback in list(self._subscribers):
            try:
                callback(snapshot)
            except Exception:
                _logger.exception("Record store subscriber failed")

    def _flush(self, action: str, write: Callable[[], None]) -> None:
        try:
            write()
        except Exception as exc:
            _logger.warning("Failed to %s drink record: %s", action, exc)
            raise PersistenceFailure(action, str(exc)) from exc
