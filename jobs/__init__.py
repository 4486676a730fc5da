"""
Purpose: Package entry + stable exports for the Jobs capability.
What it does:

Marks jobs as a Python package and re-exports the public API so other
modules (the Django backend, scripts, tests) can do:

from jobs import JobService, JobRecord, JobStatus

Should not contain business logic.
"""
from .models import JobRecord, JobStatus, EDITABLE_TIMESTAMP_FIELDS, LIFECYCLE_TIMESTAMP_FIELDS
from .errors import (
    JobError,
    JobValidationError,
    InvalidStatusError,
    InvalidFieldError,
    InvalidTransitionError,
    DuplicateReferenceError,
    JobNotFoundError,
    EmptyOrInvalidUploadError,
)
from .lifecycle import compute_transition_effects, forward_only_guard
from .store import JobStore, InMemoryJobStore, DuplicateKeyError
from .ingestion import IngestionPipeline, IngestResult, read_upload
from .service import JobService

__all__ = [
    "JobRecord",
    "JobStatus",
    "EDITABLE_TIMESTAMP_FIELDS",
    "LIFECYCLE_TIMESTAMP_FIELDS",
    "JobError",
    "JobValidationError",
    "InvalidStatusError",
    "InvalidFieldError",
    "InvalidTransitionError",
    "DuplicateReferenceError",
    "JobNotFoundError",
    "EmptyOrInvalidUploadError",
    "compute_transition_effects",
    "forward_only_guard",
    "JobStore",
    "InMemoryJobStore",
    "DuplicateKeyError",
    "IngestionPipeline",
    "IngestResult",
    "read_upload",
    "JobService",
]
