"""
ARP-table sweep.

Reads the neighbor table, probes each neighbor's common ports, guesses a
share type from what is open and names the host via reverse DNS.
"""
import asyncio
import logging
import re
import socket
from typing import Awaitable, Callable, List, Optional, Sequence

from launchit.config import settings
from launchit.models import DiscoveredShare, ShareType
from launchit.services.discovery.port_prober import scan_ports
from launchit.services.discovery.process_handle import ScanSession
from launchit.services.errors import ProcessSpawnError
from launchit.utils.async_utils import run_with_timeout

logger = logging.getLogger(__name__)

_NEIGHBOR_IP_RE = re.compile(r"\((\d{1,3}\.\d{1,3}\.\d{1,3}\.\d{1,3})\)")
_IPV4_LITERAL_RE = re.compile(r"^\d{1,3}\.\d{1,3}\.\d{1,3}\.\d{1,3}$")


def parse_neighbor_table(output_lines: Sequence[str]) -> List[str]:
    """Unicast IPv4 neighbors in table order, each listed once."""
    ips: List[str] = []
    for line in output_lines:
        match = _NEIGHBOR_IP_RE.search(line)
        if not match:
            continue
        ip = match.group(1)
        # Multicast / broadcast
        if ip.startswith("224.") or ip.startswith("239.") or ip.endswith(".255"):
            continue
        if ip not in ips:
            ips.append(ip)
    return ips


def classify_ports(open_ports: Sequence[int]) -> ShareType:
    if 445 in open_ports or 139 in open_ports:
        return ShareType.SMB
    if 548 in open_ports:
        return ShareType.AFP
    if 2049 in open_ports:
        return ShareType.NFS
    return ShareType.OTHER


def display_name(hostname: str) -> str:
    if _IPV4_LITERAL_RE.match(hostname):
        return hostname
    return hostname.split(".")[0]


async def reverse_lookup(ip: str) -> str:
    """Hostname for ``ip``; the IP itself if the lookup fails."""
    try:
        hostname, _aliases, _addrs = await run_with_timeout(
            socket.gethostbyaddr, settings.reverse_dns_timeout_ms / 1000, ip
        )
        return hostname or ip
    except (OSError, asyncio.TimeoutError) as e:
        logger.debug(f"Reverse DNS failed for {ip}: {e}")
        return ip


class NeighborSweep:

    def __init__(
        self,
        command: Optional[Sequence[str]] = None,
        port_scanner: Callable[..., Awaitable[List[int]]] = scan_ports,
        resolver: Callable[[str], Awaitable[str]] = reverse_lookup,
    ):
        self.command = list(command or settings.neighbor_command)
        self.port_scanner = port_scanner
        self.resolver = resolver

    async def read_neighbors(self, session: ScanSession) -> List[str]:
        try:
            proc = await session.spawn(*self.command)
        except ProcessSpawnError as e:
            logger.warning(f"⚠️ Neighbor table unavailable: {e}")
            return []

        try:
            lines = [line async for line in proc.lines()]
        finally:
            session.release(proc)
        return parse_neighbor_table(lines)

    async def sweep(self, session: ScanSession) -> None:
        ips = await self.read_neighbors(session)
        logger.info(f"Neighbor sweep: probing {len(ips)} host(s)")
        await asyncio.gather(*(self._probe_neighbor(session, ip) for ip in ips))

    async def _probe_neighbor(self, session: ScanSession, ip: str) -> None:
        open_ports = await self.port_scanner(ip, "basic")
        if not open_ports:
            return

        hostname = await self.resolver(ip)
        session.shares.add_swept(DiscoveredShare(
            name=display_name(hostname),
            type=classify_ports(open_ports),
            host=hostname,
            address=ip,
            open_ports=open_ports,
        ))
