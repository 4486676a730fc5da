"""
Purpose: Orchestrator for the job tracker (the "glue").
What it does:
Composes the store, the lifecycle engine, the ETA resolver and the ingestion
pipeline into the operations the transport layer binds to:

create, list_jobs, update_status, update_notes, update_timestamp,
refresh_eta, ingest

Every failure is raised as a classified JobError or EtaError, never a bare
storage error.

ETA failures are handled two ways on purpose:
- Loaded transition: tolerant. The status change still goes through and
  estimated_duration keeps its previous value.
- refresh_eta: strict. The error propagates and the record is untouched.
"""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional

from routing.eta_service import EtaError, EtaResolver

from .errors import (
    DuplicateReferenceError,
    InvalidFieldError,
    JobNotFoundError,
    JobValidationError,
)
from .ingestion import IngestionPipeline, IngestResult
from .lifecycle import build_transition_patch, compute_transition_effects
from .models import EDITABLE_TIMESTAMP_FIELDS, JobRecord, JobStatus
from .store import DuplicateKeyError, JobStore
from .validation import clean_job_fields, parse_instant

logger = logging.getLogger(__name__)

TransitionGuard = Callable[[JobStatus, JobStatus], None]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class JobService:
    """
    Job tracker operations. The store and the ETA resolver are injected so
    tests can swap in doubles.
    """
    def __init__(self, store: JobStore, eta_resolver: EtaResolver, *,
                 transition_guard: Optional[TransitionGuard] = None,
                 clock: Callable[[], datetime] = utc_now):
        self.store = store
        self.eta_resolver = eta_resolver
        self.transition_guard = transition_guard
        self.clock = clock
        self.ingestion = IngestionPipeline(store)

    def _get(self, job_id: str) -> JobRecord:
        record = self.store.find_by_id(job_id)
        if record is None:
            raise JobNotFoundError(f"Job {job_id} not found")
        return record

    def _update(self, job_id: str, patch: Dict[str, Any]) -> JobRecord:
        updated = self.store.update_by_id(job_id, patch)
        if updated is None:
            raise JobNotFoundError(f"Job {job_id} not found")
        return updated

    def create(self, job_input: Mapping[str, Any]) -> JobRecord:
        """
        Store a new job. Any caller supplied status is ignored: new jobs are
        always Scheduled.
        """
        if not isinstance(job_input, Mapping):
            raise JobValidationError("Job input must be an object of field values")

        cleaned, problems = clean_job_fields(job_input)
        if problems:
            raise JobValidationError(f"Missing or invalid field(s): {', '.join(problems)}")

        record = JobRecord(status=JobStatus.SCHEDULED, **cleaned)
        try:
            return self.store.insert(record)
        except DuplicateKeyError as e:
            raise DuplicateReferenceError("This Reference Number already exists.") from e

    def list_jobs(self) -> List[JobRecord]:
        return self.store.find_all(sort="collection_time")

    def update_status(self, job_id: str, target_status: str) -> JobRecord:
        # an unknown status must fail before anything is read or written
        effect = compute_transition_effects(target_status)
        record = self._get(job_id)

        if self.transition_guard is not None:
            self.transition_guard(record.status, effect.status)

        patch = build_transition_patch(effect, self.clock())

        if effect.triggers_eta:
            try:
                patch["estimated_duration"] = self.eta_resolver.resolve_eta(
                    record.collection_address, record.delivery_address
                )
            except EtaError as e:
                logger.warning(f"ETA unavailable while loading job {job_id} ({e.kind}): {e}")

        return self._update(job_id, patch)

    def update_notes(self, job_id: str, notes: Optional[str]) -> JobRecord:
        return self._update(job_id, {"notes": notes or ""})

    def update_timestamp(self, job_id: str, field: str, new_instant: Any) -> JobRecord:
        """
        Manual correction of one time field. Bypasses the lifecycle engine and
        leaves status alone.
        """
        if field not in EDITABLE_TIMESTAMP_FIELDS:
            raise InvalidFieldError("Invalid field specified for editing.")

        instant = parse_instant(new_instant)
        if instant is None:
            raise JobValidationError(f"'{new_instant}' is not a valid date-time")

        return self._update(job_id, {field: instant})

    def refresh_eta(self, job_id: str) -> JobRecord:
        record = self._get(job_id)
        minutes = self.eta_resolver.resolve_eta(record.collection_address, record.delivery_address)
        return self._update(job_id, {"estimated_duration": minutes})

    def ingest(self, raw_rows: Iterable[Mapping[str, Any]], replace_existing: bool = False) -> IngestResult:
        return self.ingestion.ingest(raw_rows, replace_existing=replace_existing)
