#Purpose: The Distance Matrix "adapter/client".
#Sole responsibility: talk to the Google Distance Matrix API via HTTP and return normalized outputs.
#Encapsulates provider-specific details:
#query parameters (origins, destinations, departure_time, traffic_model, key)
#timeouts and HTTP error handling
#parsing response JSON into a single origin/destination element
#It should not contain ETA rounding or job rules (see eta_service.py).


from dotenv import load_dotenv
import os
from typing import Any, Dict, Optional
import requests

from .policy import RoutingPolicy, default_routing_policy

# Read provider settings from environment
# Example in .env:
# MAPS_API_KEY=AIza...
# DISTANCE_MATRIX_URL=https://maps.googleapis.com/maps/api/distancematrix/json
load_dotenv()
MAPS_API_KEY = os.getenv("MAPS_API_KEY")
DISTANCE_MATRIX_URL = os.getenv(
    "DISTANCE_MATRIX_URL", "https://maps.googleapis.com/maps/api/distancematrix/json"
)


class DistanceMatrixError(Exception):
    """Request level failure reported by the Distance Matrix API (bad key, quota, malformed reply)."""
    pass


class DistanceMatrixClient:
    """
    Distance Matrix Adapter / Client

    Sole responsibility:
    - Talk to the Distance Matrix API via HTTP
    - Ask for one origin -> one destination pair
    - Return the element for that pair, normalized

    Network failures (requests.RequestException, including timeouts) are not
    caught here; the ETA service classifies them.
    """
    def __init__(self, api_key: Optional[str] = None, base_url: Optional[str] = None,
                 policy: Optional[RoutingPolicy] = None):
        self.api_key = api_key or MAPS_API_KEY
        self.base_url = base_url or DISTANCE_MATRIX_URL
        self.policy = policy or default_routing_policy()

    def build_params(self, origin: str, destination: str) -> Dict[str, str]:
        """Query string for a single free-text origin/destination pair."""
        return {
            "origins": origin,
            "destinations": destination,
            "departure_time": self.policy.departure_time,
            "traffic_model": self.policy.traffic_model,
            "mode": self.policy.mode,
            "key": self.api_key,
        }

    def travel_time(self, origin: str, destination: str) -> Dict[str, Any]:
        """
        calls the /distancematrix endpoint for one address pair and
        returns the per-pair status with its durations

        Returns:
            {
                "status": str,                      # per-pair status, "OK" on success
                "duration_s": float | None,         # free-flow duration in seconds
                "duration_in_traffic_s": float | None,
            }
        """
        if not self.api_key:
            raise DistanceMatrixError("Maps API key not set. Please set MAPS_API_KEY in the .env file.")

        response = requests.get(
            self.base_url,
            params=self.build_params(origin, destination),
            timeout=self.policy.timeout_seconds,
        )
        response.raise_for_status()

        try:
            data = response.json()
        except ValueError as e:
            raise DistanceMatrixError(f"Distance Matrix returned a non-JSON body: {e}") from e

        #validating the request level status before looking at the element
        if data.get("status") != "OK":
            raise DistanceMatrixError(
                f"Distance Matrix error: {data.get('status')} {data.get('error_message', '')}".strip()
            )

        try:
            element = data["rows"][0]["elements"][0]
        except (KeyError, IndexError, TypeError) as e:
            raise DistanceMatrixError("Distance Matrix reply had no element for the requested pair") from e

        #Normalize output to internal format
        return {
            "status": element.get("status"),
            "duration_s": (element.get("duration") or {}).get("value"),
            "duration_in_traffic_s": (element.get("duration_in_traffic") or {}).get("value"),
        }
