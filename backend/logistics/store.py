"""
Django ORM implementation of the JobRecord store.

Uniqueness of reference_number is enforced by the database constraint, so two
racing creates (or uploads) cannot both succeed. Bulk inserts run inside one
transaction and roll back as a whole on any collision.
"""
from collections import Counter
from typing import Any, Dict, List, Optional

from django.db import IntegrityError, transaction
from django.utils import timezone

from jobs.models import JobRecord, JobStatus, record_field_names
from jobs.store import DuplicateKeyError, JobStore, check_patch

from .models import Job


# JobRecord fields stored as model columns (id/created_at/updated_at are managed by Django)
_WRITABLE_FIELDS = [name for name in record_field_names() if name not in ("id", "created_at", "updated_at")]


def to_record(job: Job) -> JobRecord:
    values = {name: getattr(job, name) for name in record_field_names() if name != "id"}
    values["status"] = JobStatus(job.status)
    return JobRecord(id=str(job.pk), **values)


def to_columns(values: Dict[str, Any]) -> Dict[str, Any]:
    columns = dict(values)
    if isinstance(columns.get("status"), JobStatus):
        columns["status"] = columns["status"].value
    return columns


class DjangoJobStore(JobStore):

    def _query(self, job_id: str):
        try:
            return Job.objects.filter(pk=int(job_id))
        except (TypeError, ValueError):
            return Job.objects.none()

    def insert(self, record: JobRecord) -> JobRecord:
        columns = to_columns({name: getattr(record, name) for name in _WRITABLE_FIELDS})
        try:
            with transaction.atomic():
                job = Job.objects.create(**columns)
        except IntegrityError as e:
            raise DuplicateKeyError([record.reference_number]) from e
        return to_record(job)

    def find_by_id(self, job_id: str) -> Optional[JobRecord]:
        job = self._query(job_id).first()
        return to_record(job) if job else None

    def find_all(self, sort: str = "collection_time") -> List[JobRecord]:
        return [to_record(job) for job in Job.objects.order_by(sort, "pk")]

    def update_by_id(self, job_id: str, patch: Dict[str, Any]) -> Optional[JobRecord]:
        check_patch(patch)
        query = self._query(job_id)
        # single UPDATE touching only the patched columns, so concurrent edits
        # to other fields of the same job are not overwritten
        try:
            with transaction.atomic():
                updated = query.update(**to_columns(patch), updated_at=timezone.now())
        except IntegrityError as e:
            raise DuplicateKeyError([patch.get("reference_number", "")]) from e
        if not updated:
            return None
        return to_record(query.get())

    def delete_all(self) -> int:
        deleted, _ = Job.objects.all().delete()
        return deleted

    def insert_many(self, records: List[JobRecord]) -> int:
        jobs = [
            Job(**to_columns({name: getattr(record, name) for name in _WRITABLE_FIELDS}))
            for record in records
        ]
        try:
            with transaction.atomic():
                Job.objects.bulk_create(jobs)
        except IntegrityError as e:
            raise DuplicateKeyError(self._colliding_references(records)) from e
        return len(jobs)

    def _colliding_references(self, records: List[JobRecord]) -> List[str]:
        references = [record.reference_number for record in records]
        in_batch = [reference for reference, count in Counter(references).items() if count > 1]
        stored = Job.objects.filter(reference_number__in=references).values_list("reference_number", flat=True)
        return in_batch + list(stored)
