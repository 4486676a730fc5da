"""
Purpose: Domain models for the Jobs capability.
What it does:
- Defines the JobRecord data structure (the only entity the tracker persists)
- Defines JobStatus = the eight dispatch states a job moves through
- Defines the field-name constants the lifecycle engine, the ingestion
  pipeline and the manual timestamp correction all share

Rule: No routing calls, no storage logic. Models only.
"""
from __future__ import annotations

from dataclasses import dataclass, fields, replace
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional, Tuple


class JobStatus(str, Enum):
    """
    The dispatch lifecycle of a delivery job.

    Scheduled -> En route to collection -> Onsite at collection -> Loaded
    -> En route to delivery -> Onsite at delivery -> Completed

    Cancelled is reachable from any state.
    """
    SCHEDULED = "Scheduled"
    EN_ROUTE_TO_COLLECTION = "En route to collection"
    ONSITE_AT_COLLECTION = "Onsite at collection"
    LOADED = "Loaded"
    EN_ROUTE_TO_DELIVERY = "En route to delivery"
    ONSITE_AT_DELIVERY = "Onsite at delivery"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"


# Fields every job must carry before it can be stored
REQUIRED_FIELDS: Tuple[str, ...] = (
    "reference_number",
    "customer_name",
    "driver_name",
    "collection_address",
    "delivery_address",
    "collection_time",
)

# Milestone timestamps, in lifecycle order
LIFECYCLE_TIMESTAMP_FIELDS: Tuple[str, ...] = (
    "time_en_route_to_collection",
    "time_arrived_at_collection",
    "time_loaded",
    "time_en_route_to_delivery",
    "time_arrived_at_delivery",
    "time_completed",
)

# Fields an operator may correct by hand
EDITABLE_TIMESTAMP_FIELDS: Tuple[str, ...] = ("collection_time",) + LIFECYCLE_TIMESTAMP_FIELDS


@dataclass
class JobRecord:
    """
    A delivery job as the store holds it.

    `id`, `created_at` and `updated_at` are owned by the store; everything else
    is written by the Job Service.
    """
    reference_number: str
    customer_name: str
    driver_name: str
    collection_address: str
    delivery_address: str
    collection_time: datetime

    id: Optional[str] = None
    status: JobStatus = JobStatus.SCHEDULED
    notes: str = ""

    # minutes, set only from a successful routing call
    estimated_duration: Optional[int] = None

    time_en_route_to_collection: Optional[datetime] = None
    time_arrived_at_collection: Optional[datetime] = None
    time_loaded: Optional[datetime] = None
    time_en_route_to_delivery: Optional[datetime] = None
    time_arrived_at_delivery: Optional[datetime] = None
    time_completed: Optional[datetime] = None

    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        data = {f.name: getattr(self, f.name) for f in fields(self)}
        data["status"] = self.status.value
        return data

    def with_changes(self, **changes: Any) -> JobRecord:
        return replace(self, **changes)


def record_field_names() -> Tuple[str, ...]:
    return tuple(f.name for f in fields(JobRecord))
