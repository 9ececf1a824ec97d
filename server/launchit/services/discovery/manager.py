import asyncio
import logging
import socket
import time
from typing import List, Optional, Set

from launchit.config import settings
from launchit.models import DiscoveredShare, ShareType
from launchit.services.discovery.neighbor_sweep import NeighborSweep
from launchit.services.discovery.port_prober import PortSelection, scan_ports
from launchit.services.discovery.process_handle import ScanSession
from launchit.services.discovery.service_browser import (
    SERVICE_TYPES,
    ServiceBrowser,
    ServiceResolver,
)

logger = logging.getLogger(__name__)


async def resolve_address(host: str) -> Optional[str]:
    """Forward-resolve ``host``, preferring IPv4 over IPv6. None on failure."""
    try:
        loop = asyncio.get_running_loop()
        infos = await asyncio.wait_for(
            loop.getaddrinfo(host, None, type=socket.SOCK_STREAM),
            timeout=settings.reverse_dns_timeout_ms / 1000,
        )
    except (OSError, UnicodeError, asyncio.TimeoutError) as e:
        logger.warning(f"⚠️ Failed to resolve {host}: {e}")
        return None
    if not infos:
        return None
    # The neighbor table is IPv4, so only an IPv4 answer can match a swept host
    for family, _, _, _, sockaddr in infos:
        if family == socket.AF_INET:
            return sockaddr[0]
    return infos[0][4][0]


class NetworkDiscoveryService:
    """
    Finds file shares and other services on the local network.

    One scan runs, concurrently and for a bounded window:
        1. a DNS-SD browse per service type (each hit resolved in the background)
        2. a sweep of the ARP neighbor table with a quick port probe per host

    Results from both are merged into one list without duplicates.
    Every scan gets its own ScanSession, so overlapping scans stay isolated.
    """

    def __init__(
        self,
        browser: Optional[ServiceBrowser] = None,
        resolver: Optional[ServiceResolver] = None,
        sweeper: Optional[NeighborSweep] = None,
    ):
        self.browser = browser or ServiceBrowser()
        self.resolver = resolver or ServiceResolver()
        self.sweeper = sweeper or NeighborSweep()
        self._sessions: Set[ScanSession] = set()

    async def scan_for_shares(self, duration_ms: Optional[int] = None) -> List[DiscoveredShare]:
        duration_ms = duration_ms if duration_ms is not None else settings.discovery_duration_ms
        session = ScanSession()
        self._sessions.add(session)
        started = time.monotonic()
        logger.info(f"🔍 Network scan started ({duration_ms}ms)")

        try:
            await asyncio.gather(
                self._scan_mdns(session, duration_ms),
                self._scan_neighbors(session, duration_ms),
            )
            # Resolutions kicked off near the end of the browse window
            await session.drain()
        finally:
            session.cancel()
            self._sessions.discard(session)

        shares = session.shares.values()
        elapsed_ms = int((time.monotonic() - started) * 1000)
        logger.info(f"✅ Network scan finished in {elapsed_ms}ms: {len(shares)} share(s)")
        return shares

    async def scan_ports(self, host: str, selection: PortSelection = "basic") -> List[int]:
        return await scan_ports(host, selection)

    def stop_scanning(self) -> None:
        """Kill every running discovery process and drop pending resolutions."""
        if self._sessions:
            logger.info(f"Stopping {len(self._sessions)} active scan(s)")
        for session in list(self._sessions):
            session.cancel()
        self._sessions.clear()

    async def _scan_mdns(self, session: ScanSession, duration_ms: int) -> None:
        await asyncio.gather(*(
            self.browser.browse(
                session,
                service_type,
                duration_ms,
                self._resolution_handler(session, service_type, share_type),
            )
            for service_type, share_type in SERVICE_TYPES
        ))

    async def _scan_neighbors(self, session: ScanSession, duration_ms: int) -> None:
        try:
            await asyncio.wait_for(self.sweeper.sweep(session), timeout=duration_ms / 1000)
        except asyncio.TimeoutError:
            logger.info("Neighbor sweep cut short by the scan window")
        except Exception as e:
            logger.error(f"❌ Neighbor sweep failed: {e}", exc_info=True)

    def _resolution_handler(self, session: ScanSession, service_type: str, share_type: ShareType):
        async def handle(instance_name: str) -> None:
            try:
                await self._resolve_instance(session, instance_name, service_type, share_type)
            except asyncio.CancelledError:
                raise
            except Exception as e:
                logger.error(f"❌ Error resolving service '{instance_name}': {e}")
        return handle

    async def _resolve_instance(
        self,
        session: ScanSession,
        instance_name: str,
        service_type: str,
        share_type: ShareType,
    ) -> None:
        resolved = await self.resolver.resolve(
            session, instance_name, service_type, self.browser.domain
        )
        if resolved is None:
            share = DiscoveredShare(
                name=instance_name,
                type=share_type,
                host=f"{instance_name}.local",
            )
        else:
            share = DiscoveredShare(
                name=instance_name,
                type=share_type,
                host=resolved.host,
                address=await resolve_address(resolved.host),
                open_ports=[resolved.port],
            )
        session.shares.add_resolved(share)


# Global instance
discovery_service = NetworkDiscoveryService()
