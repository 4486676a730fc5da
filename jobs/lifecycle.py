"""
Purpose: Job lifecycle engine (timestamp recorder).
What it does:
Maps a requested status to the milestone timestamp that must be stamped "now".

The engine is permissive on purpose: any status may be requested from any
status. It records when each milestone happened, it does not police the order
the driver app sends them in. If a stricter workflow is wanted, inject
`forward_only_guard` (or any callable with the same shape) into the Job
Service; it is kept apart from the stamping logic below.

Rule: Pure functions. No storage, no routing.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional, Union

from .errors import InvalidStatusError, InvalidTransitionError
from .models import JobStatus

# status -> milestone field stamped when that status is requested
_STAMPED_FIELD: Dict[JobStatus, Optional[str]] = {
    JobStatus.SCHEDULED: None,
    JobStatus.EN_ROUTE_TO_COLLECTION: "time_en_route_to_collection",
    JobStatus.ONSITE_AT_COLLECTION: "time_arrived_at_collection",
    JobStatus.LOADED: "time_loaded",
    JobStatus.EN_ROUTE_TO_DELIVERY: "time_en_route_to_delivery",
    JobStatus.ONSITE_AT_DELIVERY: "time_arrived_at_delivery",
    JobStatus.COMPLETED: "time_completed",
    JobStatus.CANCELLED: None,
}

# forward path used only by the optional guard
_FORWARD_ORDER = [
    JobStatus.SCHEDULED,
    JobStatus.EN_ROUTE_TO_COLLECTION,
    JobStatus.ONSITE_AT_COLLECTION,
    JobStatus.LOADED,
    JobStatus.EN_ROUTE_TO_DELIVERY,
    JobStatus.ONSITE_AT_DELIVERY,
    JobStatus.COMPLETED,
]

TERMINAL_STATUSES = frozenset({JobStatus.COMPLETED, JobStatus.CANCELLED})


@dataclass(frozen=True)
class TransitionEffect:
    """
    What a status request does to a job record.
    """
    status: JobStatus
    timestamp_field: Optional[str] = None
    triggers_eta: bool = False


def parse_status(value: Union[str, JobStatus]) -> JobStatus:
    if isinstance(value, JobStatus):
        return value
    try:
        return JobStatus(value)
    except ValueError:
        raise InvalidStatusError(f"'{value}' is not a valid job status") from None


def compute_transition_effects(target_status: Union[str, JobStatus]) -> TransitionEffect:
    """
    Decide the effect of moving a job to `target_status`.

    Raises InvalidStatusError for anything outside the eight job states.
    """
    status = parse_status(target_status)
    return TransitionEffect(
        status=status,
        timestamp_field=_STAMPED_FIELD[status],
        triggers_eta=status is JobStatus.LOADED,
    )


def build_transition_patch(effect: TransitionEffect, now: datetime) -> Dict[str, Any]:
    """
    Store patch for a transition: the new status plus at most one milestone.
    Fields stamped by earlier transitions are never part of the patch.
    """
    patch: Dict[str, Any] = {"status": effect.status}
    if effect.timestamp_field:
        patch[effect.timestamp_field] = now
    return patch


def forward_only_guard(current: JobStatus, target: JobStatus) -> None:
    """
    Optional hardening: allow only forward moves along the delivery path,
    re-requesting the current status, or cancelling a job that is not terminal.
    """
    if target is current:
        return
    if current in TERMINAL_STATUSES:
        raise InvalidTransitionError(f"Job is already {current.value}")
    if target is JobStatus.CANCELLED:
        return
    if _FORWARD_ORDER.index(target) < _FORWARD_ORDER.index(current):
        raise InvalidTransitionError(
            f"Cannot move a job back from '{current.value}' to '{target.value}'"
        )
