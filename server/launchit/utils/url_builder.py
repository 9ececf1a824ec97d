"""
URL building shared by health checks and routing.

    build_url(item, "tailscale")   # profile-qualified, with address fallback
    build_profile_url(item, "vpn") # that profile's own address only
"""
from typing import Optional

from launchit.models import BookmarkItem

DEFAULT_PROTOCOL = "https"

_DEFAULT_PORTS = {
    "http": 80,
    "https": 443,
}

# Which address slots to try, in order, when health-checking under a profile
_PROFILE_FALLBACKS = {
    "local": ("local", "tailscale", "vpn"),
    "tailscale": ("tailscale", "local"),
    "vpn": ("vpn", "local"),
    "custom": ("custom", "local"),
}


def resolve_host(item: BookmarkItem, profile: str) -> Optional[str]:
    addresses = item.network_addresses
    for slot in _PROFILE_FALLBACKS.get(profile, ("local",)):
        host = addresses.for_profile(slot)
        if host:
            return host
    return None


def format_url(
    host: str,
    protocol: Optional[str] = None,
    port: Optional[int] = None,
    path: Optional[str] = None,
) -> str:
    protocol = protocol or DEFAULT_PROTOCOL
    url = f"{protocol}://"

    # IPv6 literals must be bracketed
    if ":" in host and not host.startswith("["):
        url += f"[{host}]"
    else:
        url += host

    if port and _DEFAULT_PORTS.get(protocol) != port:
        url += f":{port}"

    if path:
        url += path if path.startswith("/") else f"/{path}"

    return url


def build_url(item: BookmarkItem, profile: str) -> Optional[str]:
    """URL for ``item`` under ``profile``, falling back across address slots."""
    host = resolve_host(item, profile)
    if not host:
        return None
    return format_url(host, item.protocol, item.port, item.path)


def build_profile_url(item: BookmarkItem, profile: str) -> Optional[str]:
    """URL using only the address configured for ``profile`` itself."""
    host = item.network_addresses.for_profile(profile)
    if not host:
        return None
    return format_url(host, item.protocol, item.port, item.path)
