"""
LaunchIt Configuration
======================
Centralized settings for the network core.

Every value can be overridden from the environment with the ``LAUNCHIT_``
prefix, e.g. ``LAUNCHIT_MDNS_COMMAND=/usr/bin/dns-sd``.
"""
from __future__ import annotations

from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime settings with the defaults the launcher ships with."""

    # Server
    port: int = 8765

    # Discovery
    discovery_duration_ms: int = 5000
    port_probe_timeout_ms: int = 400
    port_probe_batch_size: int = 10
    mdns_command: str = "dns-sd"
    mdns_domain: str = "local"
    mdns_resolve_timeout_ms: int = 3000
    neighbor_command: List[str] = ["arp", "-a"]
    reverse_dns_timeout_ms: int = 2000

    # Health checks / routing
    health_check_timeout_ms: int = 10000
    route_probe_timeout_ms: int = 3000
    health_check_pacing_ms: int = 100
    metrics_history_size: int = 100
    verify_tls: bool = True

    model_config = SettingsConfigDict(env_prefix="LAUNCHIT_", extra="ignore")


# Singleton settings instance
settings = Settings()
