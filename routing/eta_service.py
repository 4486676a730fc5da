#Purpose: ETA estimation policy.
#Converts routing outputs into the whole-minute ETA stored on a job:
#collection address -> delivery address, departing now, in current traffic
#Classifies provider failures so callers can decide what to do with them:
#RouteUnresolvableError: the provider answered but could not route the pair
#ProviderUnavailableError: the call itself failed (network, timeout, bad key, quota)
#Keeps ETA logic separate from the HTTP client. No retries here, retry policy belongs to the caller.

import logging
import math

import requests

from .distance_matrix_client import DistanceMatrixClient, DistanceMatrixError

logger = logging.getLogger(__name__)


class EtaError(Exception):
    """Base class for live ETA failures."""
    kind = "EtaError"


class RouteUnresolvableError(EtaError):
    """The provider returned a non-OK status for the address pair."""
    kind = "RouteUnresolvable"


class ProviderUnavailableError(EtaError):
    """The provider could not be reached or refused the request."""
    kind = "ProviderUnavailable"


def seconds_to_minutes(seconds: float) -> int:
    """Round to the nearest whole minute, halves rounding up."""
    return int(math.floor(seconds / 60 + 0.5))


class EtaResolver:
    """
    Resolves a traffic-aware travel duration in minutes between two free-text addresses.
    """
    def __init__(self, client: DistanceMatrixClient):
        self.client = client

    def resolve_eta(self, origin_address: str, destination_address: str) -> int:
        try:
            element = self.client.travel_time(origin_address, destination_address)
        except (requests.RequestException, DistanceMatrixError) as e:
            logger.error(f"Distance Matrix call failed: {e}")
            raise ProviderUnavailableError(f"Failed to get live ETA from the routing provider: {e}") from e

        if element.get("status") != "OK":
            raise RouteUnresolvableError(
                f"Could not calculate route ({element.get('status')}). Check if addresses are valid."
            )

        # duration_in_traffic is only present when the provider had traffic data for the pair
        seconds = element.get("duration_in_traffic_s")
        if seconds is None:
            seconds = element.get("duration_s")
        if seconds is None:
            raise ProviderUnavailableError("Routing provider returned OK without a duration")

        return seconds_to_minutes(seconds)
