"""
Purpose: Input cleaning shared by single create and bulk upload.
What it does:
- parse_instant: turn user supplied date-times into tz-aware UTC datetimes
- clean_job_fields: trim text fields and check the required set

Rule: Pure functions. The caller decides whether a bad row is an error
(single create) or a skipped row (bulk upload).
"""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

import pandas as pd

from .models import REQUIRED_FIELDS

# text fields that are copied from input to record
TEXT_FIELDS = (
    "reference_number",
    "customer_name",
    "driver_name",
    "collection_address",
    "delivery_address",
    "notes",
)


def parse_instant(value: Any) -> Optional[datetime]:
    """
    Parse a date-time into an aware UTC datetime.

    Accepts datetime objects, epoch milliseconds and anything pandas can read as a timestamp
    (ISO-8601, "2024-03-01 09:30", "03/01/2024 09:30", ...). Naive values are
    taken to be UTC. Returns None when the value is empty or unparsable.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)
    if isinstance(value, bool) or not isinstance(value, (str, int, float)):
        return None
    if isinstance(value, str) and not value.strip():
        return None

    # numbers are epoch milliseconds, as a JavaScript Date serializes them
    unit = "ms" if isinstance(value, (int, float)) else None
    try:
        stamp = pd.to_datetime(value, utc=True, unit=unit)
    except (ValueError, TypeError, OverflowError):
        return None
    if pd.isna(stamp):
        return None
    return stamp.to_pydatetime()


def clean_job_fields(data: Dict[str, Any]) -> Tuple[Dict[str, Any], List[str]]:
    """
    Trim the text fields of `data` and parse its collection time.

    Returns (cleaned, problems). `problems` lists the required fields that are
    missing, blank after trimming, or (for collection_time) unparsable.
    """
    cleaned: Dict[str, Any] = {}
    problems: List[str] = []

    for name in TEXT_FIELDS:
        value = data.get(name)
        if value is None:
            continue
        cleaned[name] = str(value).strip()

    collection_time = parse_instant(data.get("collection_time"))
    if collection_time is not None:
        cleaned["collection_time"] = collection_time

    for name in REQUIRED_FIELDS:
        if not cleaned.get(name):
            problems.append(name)

    return cleaned, problems
