"""
TCP port probing.

probe_port() answers "does host:port accept a connection right now?";
probe_ports() fans that out over a port list in fixed-size batches.
"""
import asyncio
import logging
from typing import Iterable, List, Optional, Sequence, Union

from launchit.config import settings

logger = logging.getLogger(__name__)

BASIC_PORTS: List[int] = [
    21,    # FTP
    22,    # SSH
    80,    # HTTP
    443,   # HTTPS
    445,   # SMB
    548,   # AFP
    3389,  # RDP
    5900,  # VNC
    8080,  # Web alt
]

DEEP_PORTS: List[int] = BASIC_PORTS + [
    3000, 3001, 5000, 8000, 8008, 8081, 8443,  # Web dev servers
    23,     # Telnet
    25,     # SMTP
    53,     # DNS
    110,    # POP3
    143,    # IMAP
    139,    # SMB (NetBIOS)
    3306,   # MySQL
    5432,   # PostgreSQL
    6379,   # Redis
    27017,  # MongoDB
]

PortSelection = Union[str, Sequence[int]]


async def probe_port(host: str, port: int, timeout_ms: Optional[int] = None) -> bool:
    """True if a TCP connection to host:port succeeds within the deadline."""
    timeout_ms = timeout_ms if timeout_ms is not None else settings.port_probe_timeout_ms
    writer = None
    try:
        _reader, writer = await asyncio.wait_for(
            asyncio.open_connection(host, port),
            timeout=timeout_ms / 1000,
        )
        return True
    except Exception:
        return False
    finally:
        if writer is not None:
            writer.close()
            try:
                await writer.wait_closed()
            except OSError:
                pass


def select_ports(selection: PortSelection) -> List[int]:
    if isinstance(selection, str):
        if selection == "basic":
            return list(BASIC_PORTS)
        if selection == "deep":
            return list(DEEP_PORTS)
        raise ValueError(f"Unknown port set: {selection!r}")
    return [int(p) for p in selection]


async def probe_ports(
    host: str,
    ports: Iterable[int],
    concurrency_limit: Optional[int] = None,
    timeout_ms: Optional[int] = None,
) -> List[int]:
    """Probe ``ports`` in batches of ``concurrency_limit``; return open ones ascending."""
    batch_size = concurrency_limit or settings.port_probe_batch_size
    ports = list(ports)
    open_ports: List[int] = []

    for start in range(0, len(ports), batch_size):
        batch = ports[start:start + batch_size]
        results = await asyncio.gather(*(probe_port(host, p, timeout_ms) for p in batch))
        open_ports.extend(p for p, is_open in zip(batch, results) if is_open)

    return sorted(open_ports)


async def scan_ports(host: str, selection: PortSelection = "basic") -> List[int]:
    """Scan a canned port set ('basic' / 'deep') or an explicit port list."""
    ports = select_ports(selection)
    open_ports = await probe_ports(host, ports)
    logger.debug(f"{host}: {len(open_ports)}/{len(ports)} ports open {open_ports}")
    return open_ports
