from .metrics import MetricsHistory
from .prober import ReachabilityProber
from .routing import RoutingSelector
from .service import HealthCheckService, UNPROBED_PROTOCOLS

# Global instances
health_service = HealthCheckService()
routing_selector = RoutingSelector(prober=health_service.prober)

__all__ = [
    "MetricsHistory",
    "ReachabilityProber",
    "RoutingSelector",
    "HealthCheckService",
    "UNPROBED_PROTOCOLS",
    "health_service",
    "routing_selector",
]
