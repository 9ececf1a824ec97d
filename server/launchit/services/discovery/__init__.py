from .manager import NetworkDiscoveryService, discovery_service
from .port_prober import BASIC_PORTS, DEEP_PORTS, probe_port, probe_ports, scan_ports

__all__ = [
    "NetworkDiscoveryService",
    "discovery_service",
    "BASIC_PORTS",
    "DEEP_PORTS",
    "probe_port",
    "probe_ports",
    "scan_ports",
]
