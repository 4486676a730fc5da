#Marks routing as a package.
#Re-exports clean public APIs (DistanceMatrixClient, EtaResolver, the ETA errors)
#so other modules import from routing without knowing internal file names.
#No business logic.

from .distance_matrix_client import DistanceMatrixClient, DistanceMatrixError
from .eta_service import EtaResolver, EtaError, RouteUnresolvableError, ProviderUnavailableError
from .policy import RoutingPolicy, default_routing_policy

__all__ = [
    "DistanceMatrixClient",
    "DistanceMatrixError",
    "EtaResolver",
    "EtaError",
    "RouteUnresolvableError",
    "ProviderUnavailableError",
    "RoutingPolicy",
    "default_routing_policy",
]
