from __future__ import annotations

from datetime import datetime, timezone
from functools import lru_cache
from itertools import count
from threading import Lock
from typing import Dict, Optional

from app.schemas import SensorPayload, SensorRecord


class ReadingStore:
    """In-memory table of received readings keyed by a sequential id."""

    def __init__(self) -> None:
        self._items: Dict[int, SensorRecord] = {}
        self._ids = count(1)
        self._lock = Lock()

    def create(self, payload: SensorPayload) -> SensorRecord:
        now = datetime.now(timezone.utc)
        with self._lock:
            record = SensorRecord(
                id=next(self._ids),
                measurement_time=now,
                created_at=now,
                **payload.model_dump(),
            )
            self._items[record.id] = record
            return record.model_copy(deep=True)

    def get(self, reading_id: int) -> Optional[SensorRecord]:
        with self._lock:
            item = self._items.get(reading_id)
            if item is None:
                return None
            return item.model_copy(deep=True)

    def update(self, reading_id: int, payload: SensorPayload) -> Optional[SensorRecord]:
        with self._lock:
            existing = self._items.get(reading_id)
            if existing is None:
                return None
            updated = existing.model_copy(
                update={**payload.model_dump(), "updated_at": datetime.now(timezone.utc)}
            )
            self._items[reading_id] = updated
            return updated.model_copy(deep=True)

    def delete(self, reading_id: int) -> bool:
        with self._lock:
            return self._items.pop(reading_id, None) is not None

    def scan(self) -> list[SensorRecord]:
        """Return deep copies of all stored readings, oldest first."""

        with self._lock:
            return [item.model_copy(deep=True) for item in self._items.values()]

    def find_by_location(self, location: str) -> list[SensorRecord]:
        return [item for item in self.scan() if item.location == location]

    def find_by_name(self, name: str) -> list[SensorRecord]:
        return [item for item in self.scan() if item.name == name]


@lru_cache
def build_default_store() -> ReadingStore:
    return ReadingStore()
