"""
Purpose: Bulk job upload (CSV) pipeline.
What it does:

- decode_upload / read_upload: CSV bytes -> list of raw rows (every cell kept as text)
- normalize_headers: map provider specific column names to record fields
- build_candidate: admit a row only if it is complete and its collection
  time parses (rows are never partially admitted)
- IngestionPipeline.ingest: optionally clear the store, then bulk insert the
  candidates all-or-nothing

Replace-existing runs in two steps (delete all, then insert all) and is not
transactional across them: a reader in between may see an empty job list.
The delete only happens once at least one row survived validation, so a bad
upload never wipes the board.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, IO, Iterable, List, Mapping, Optional, Union

import pandas as pd

from .errors import DuplicateReferenceError, EmptyOrInvalidUploadError
from .models import JobRecord, JobStatus
from .store import DuplicateKeyError, JobStore
from .validation import clean_job_fields

logger = logging.getLogger(__name__)

# lower-cased, trimmed header -> record field
HEADER_MAP: Dict[str, str] = {
    "reference number": "reference_number",
    "reference": "reference_number",
    "reference_number": "reference_number",
    "ref": "reference_number",
    "customer": "customer_name",
    "customer name": "customer_name",
    "driver": "driver_name",
    "driver name": "driver_name",
    "collection address": "collection_address",
    "pickup address": "collection_address",
    "delivery address": "delivery_address",
    "dropoff address": "delivery_address",
    "collection time": "collection_time",
    "pickup time": "collection_time",
    "notes": "notes",
}


@dataclass(frozen=True)
class IngestResult:
    """
    Outcome of a successful upload.
    """
    inserted_count: int
    skipped_count: int = 0


def decode_upload(raw: bytes) -> str:
    """
    Decode uploaded CSV bytes. utf-8-sig drops the BOM spreadsheet exports
    put in front of the header.
    """
    try:
        return raw.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise EmptyOrInvalidUploadError(f"Upload is not a UTF-8 CSV file: {e}") from e


def _skip_bad_line(bad_line: List[str]) -> None:
    logger.warning(f"Skipping malformed CSV line with {len(bad_line)} cells: {bad_line}")


def read_upload(source: Union[str, IO]) -> List[Dict[str, str]]:
    """
    Read a CSV upload into raw rows.

    Cells are kept as strings and blanks stay blank ("") so that the admission
    rule, not pandas, decides what counts as missing. Lines with more cells
    than the header (an unquoted comma in an address) are skipped and logged.
    """
    try:
        frame = pd.read_csv(
            source,
            dtype=str,
            keep_default_na=False,
            skipinitialspace=True,
            engine="python",
            on_bad_lines=_skip_bad_line,
        )
    except pd.errors.EmptyDataError:
        return []
    except pd.errors.ParserError as e:
        raise EmptyOrInvalidUploadError(f"Upload could not be read as CSV: {e}") from e
    # short lines are padded with NaN
    return frame.fillna("").to_dict(orient="records")


def normalize_headers(row: Mapping[str, Any]) -> Dict[str, Any]:
    normalized: Dict[str, Any] = {}
    for header, value in row.items():
        field_name = HEADER_MAP.get(str(header).strip().lower())
        if field_name is None:
            continue  # unrecognised column
        normalized[field_name] = value
    return normalized


def build_candidate(row: Mapping[str, Any]) -> Optional[JobRecord]:
    """
    Turn one normalized row into a Scheduled JobRecord, or None if the row
    is incomplete or its collection time does not parse.
    """
    cleaned, problems = clean_job_fields(row)
    if problems:
        reference = cleaned.get("reference_number") or "<no reference>"
        if problems == ["collection_time"] and str(row.get("collection_time") or "").strip():
            logger.warning(
                f"Skipping row with invalid date for Reference [{reference}]. "
                f"Invalid value: \"{row.get('collection_time')}\""
            )
        else:
            logger.warning(f"Skipping row for Reference [{reference}]: missing {', '.join(problems)}")
        return None

    return JobRecord(status=JobStatus.SCHEDULED, **cleaned)


class IngestionPipeline:
    """
    Admits many jobs at once under the reference-number uniqueness rule.
    """

    def __init__(self, store: JobStore):
        self.store = store

    def ingest(self, raw_rows: Iterable[Mapping[str, Any]], replace_existing: bool = False) -> IngestResult:
        candidates: List[JobRecord] = []
        skipped = 0
        for raw_row in raw_rows:
            candidate = build_candidate(normalize_headers(raw_row))
            if candidate is None:
                skipped += 1
                continue
            candidates.append(candidate)

        if not candidates:
            raise EmptyOrInvalidUploadError("Upload was empty or did not contain valid rows.")

        if replace_existing:
            deleted = self.store.delete_all()
            logger.info(f"Replace requested: deleted {deleted} existing jobs")

        try:
            inserted = self.store.insert_many(candidates)
        except DuplicateKeyError as e:
            raise DuplicateReferenceError(
                f"Upload failed. One or more Reference Numbers already exist: {', '.join(e.reference_numbers)}"
            ) from e

        logger.info(f"Uploaded {inserted} jobs ({skipped} rows skipped)")
        return IngestResult(inserted_count=inserted, skipped_count=skipped)
