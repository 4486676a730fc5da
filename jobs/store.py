"""
Purpose: Persistence boundary for JobRecords.
What it does:
- JobStore: the interface the Job Service and the Ingestion Pipeline talk to
- InMemoryJobStore: dict-backed store used by tests, scripts and local runs

The store, not the service, owns the reference-number uniqueness rule. It must
reject a colliding write atomically (no read-then-write race in callers), and
insert_many is all-or-nothing.

The Django ORM implementation lives in backend/logistics/store.py.
"""
from __future__ import annotations

import threading
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional

from .models import JobRecord, record_field_names


class DuplicateKeyError(Exception):
    """Storage level uniqueness violation on reference_number."""

    def __init__(self, reference_numbers: Iterable[str]):
        self.reference_numbers = sorted(set(reference_numbers))
        super().__init__(f"Duplicate reference number(s): {', '.join(self.reference_numbers)}")


# fields a patch may never touch
_STORE_OWNED_FIELDS = frozenset({"id", "created_at", "updated_at"})


class JobStore:
    """
    Interface every JobRecord store implements.
    """

    def insert(self, record: JobRecord) -> JobRecord:
        raise NotImplementedError

    def find_by_id(self, job_id: str) -> Optional[JobRecord]:
        raise NotImplementedError

    def find_all(self, sort: str = "collection_time") -> List[JobRecord]:
        """All records ordered ascending by `sort`."""
        raise NotImplementedError

    def update_by_id(self, job_id: str, patch: Dict[str, Any]) -> Optional[JobRecord]:
        """Apply `patch` and return the updated record, or None for an unknown id."""
        raise NotImplementedError

    def delete_all(self) -> int:
        raise NotImplementedError

    def insert_many(self, records: List[JobRecord]) -> int:
        raise NotImplementedError


def _now() -> datetime:
    return datetime.now(timezone.utc)


def check_patch(patch: Dict[str, Any]) -> None:
    allowed = set(record_field_names()) - _STORE_OWNED_FIELDS
    unknown = set(patch) - allowed
    if unknown:
        raise ValueError(f"Cannot patch field(s): {', '.join(sorted(unknown))}")


class InMemoryJobStore(JobStore):
    """
    Thread-safe in-memory store.

    A single lock guards both the records and the reference index so a
    uniqueness check and the write it protects happen as one step.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._records: Dict[str, JobRecord] = {}
        self._ids_by_reference: Dict[str, str] = {}

    def _stamp_new(self, record: JobRecord) -> JobRecord:
        now = _now()
        return record.with_changes(id=str(uuid.uuid4()), created_at=now, updated_at=now)

    def insert(self, record: JobRecord) -> JobRecord:
        with self._lock:
            if record.reference_number in self._ids_by_reference:
                raise DuplicateKeyError([record.reference_number])
            stored = self._stamp_new(record)
            self._records[stored.id] = stored
            self._ids_by_reference[stored.reference_number] = stored.id
            return stored.with_changes()

    def find_by_id(self, job_id: str) -> Optional[JobRecord]:
        with self._lock:
            record = self._records.get(job_id)
            return record.with_changes() if record else None

    def find_all(self, sort: str = "collection_time") -> List[JobRecord]:
        with self._lock:
            snapshot = [record.with_changes() for record in self._records.values()]
        return sorted(snapshot, key=lambda record: getattr(record, sort))

    def update_by_id(self, job_id: str, patch: Dict[str, Any]) -> Optional[JobRecord]:
        check_patch(patch)
        with self._lock:
            record = self._records.get(job_id)
            if record is None:
                return None

            new_reference = patch.get("reference_number", record.reference_number)
            if new_reference != record.reference_number:
                if new_reference in self._ids_by_reference:
                    raise DuplicateKeyError([new_reference])
                del self._ids_by_reference[record.reference_number]
                self._ids_by_reference[new_reference] = job_id

            updated = record.with_changes(**patch, updated_at=_now())
            self._records[job_id] = updated
            return updated.with_changes()

    def delete_all(self) -> int:
        with self._lock:
            count = len(self._records)
            self._records.clear()
            self._ids_by_reference.clear()
            return count

    def insert_many(self, records: List[JobRecord]) -> int:
        with self._lock:
            # collisions with stored jobs and inside the batch itself
            seen = set()
            duplicates = []
            for record in records:
                reference = record.reference_number
                if reference in self._ids_by_reference or reference in seen:
                    duplicates.append(reference)
                seen.add(reference)
            if duplicates:
                raise DuplicateKeyError(duplicates)

            for record in records:
                stored = self._stamp_new(record)
                self._records[stored.id] = stored
                self._ids_by_reference[stored.reference_number] = stored.id
            return len(records)
