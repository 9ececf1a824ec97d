from typing import Literal, Optional, List

from pydantic import Field

from . import CamelModel

NetworkProfile = Literal["local", "tailscale", "vpn", "custom"]

# Routing preference order
PROFILE_ORDER: List[str] = ["local", "tailscale", "vpn", "custom"]


class NetworkAddressSet(CamelModel):
    """The same endpoint as seen from each network context."""
    local: Optional[str] = None
    tailscale: Optional[str] = None
    vpn: Optional[str] = None
    custom: Optional[str] = None

    def for_profile(self, profile: str) -> Optional[str]:
        # Empty strings from the UI count as "not configured"
        return getattr(self, profile, None) or None


class BookmarkItem(CamelModel):
    """
    The slice of a launcher item the network core needs.

    Storage owns the full record; only addressing fields are read here.
    """
    id: str
    name: str = ""
    protocol: Optional[str] = None
    port: Optional[int] = None
    path: Optional[str] = None
    network_addresses: NetworkAddressSet = Field(default_factory=NetworkAddressSet)
