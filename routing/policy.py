"""
Purpose: Central configuration for routing provider calls.
What it does:

Stores the tunables used when asking the Distance Matrix API for a live ETA:

TIMEOUT_SECONDS = 10
DEPARTURE_TIME = "now"
TRAFFIC_MODEL = "best_guess"

Rule: No logic here, just parameters so you can tune without rewriting code.
"""

from __future__ import annotations
from dataclasses import dataclass


@dataclass(frozen=True)
class RoutingPolicy:
    """
    Central configuration for live ETA requests.
    """

    # --- Network ---
    # How long to wait for the provider before treating it as unavailable.
    # There is no retry: a timed out call is reported to the caller.
    timeout_seconds: float = 10.0

    # --- Request shape ---
    # "now" asks the provider for a traffic-aware duration from the current moment.
    departure_time: str = "now"
    traffic_model: str = "best_guess"
    mode: str = "driving"

    def validate(self) -> None:
        """
        Basic sanity checks.
        """
        if self.timeout_seconds <= 0:
            raise ValueError("timeout_seconds must be > 0")

        if self.traffic_model not in ("best_guess", "pessimistic", "optimistic"):
            raise ValueError(f"Unknown traffic_model '{self.traffic_model}'")

        if self.mode not in ("driving", "walking", "bicycling", "transit"):
            raise ValueError(f"Unknown travel mode '{self.mode}'")


def default_routing_policy() -> RoutingPolicy:
    """
    Convenience factory for the default policy.
    """
    p = RoutingPolicy()
    p.validate()
    return p
