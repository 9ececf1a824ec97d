"""
In-session share registry.

Entries are keyed by ``(type, host)``. Two discovery paths write here:

- resolved services (mDNS): authoritative for ``name``/``host``, and they
  take over a sweep entry for the same host whatever type it was given
- the neighbor sweep: only backfills ``open_ports`` on hosts already known
"""
import logging
from typing import Dict, Iterable, List, Optional, Set, Tuple

from launchit.models import DiscoveredShare

logger = logging.getLogger(__name__)


class ShareRegistry:

    def __init__(self):
        self._shares: Dict[Tuple, DiscoveredShare] = {}
        self._swept: Set[Tuple] = set()

    def __len__(self) -> int:
        return len(self._shares)

    def values(self) -> List[DiscoveredShare]:
        return list(self._shares.values())

    def clear(self) -> None:
        self._shares.clear()
        self._swept.clear()

    def _find_same_host(
        self,
        address: Optional[str],
        host: str,
        keys: Optional[Iterable[Tuple]] = None,
    ) -> Optional[DiscoveredShare]:
        candidates = self._shares.values() if keys is None else [self._shares[k] for k in keys]
        for share in candidates:
            if (address and share.address == address) or share.host == host:
                return share
        return None

    def add_resolved(self, share: DiscoveredShare) -> DiscoveredShare:
        """Insert a service found via mDNS, absorbing any sweep entry for the same host."""
        existing = self._shares.get(share.key)
        if existing is None:
            # Sweep types come from open ports and may disagree with the mDNS type
            existing = self._find_same_host(share.address, share.host, self._swept)

        if existing is not None:
            del self._shares[existing.key]
            self._swept.discard(existing.key)
            share = share.model_copy(update={
                "address": share.address or existing.address,
                "open_ports": share.open_ports or existing.open_ports,
            })
            logger.debug(f"Merged {share.host} into existing {existing.type.value} entry")

        self._shares[share.key] = share
        return share

    def add_swept(self, share: DiscoveredShare) -> DiscoveredShare:
        """Insert a neighbor-sweep host unless another path already knows it."""
        existing = self._find_same_host(share.address, share.host)
        if existing is not None:
            if not existing.open_ports:
                existing.open_ports = share.open_ports
            return existing

        self._shares[share.key] = share
        self._swept.add(share.key)
        return share
