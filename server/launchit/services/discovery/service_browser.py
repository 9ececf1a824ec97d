"""
mDNS / DNS-SD browsing and resolution through the ``dns-sd`` command.

Browse output (``dns-sd -B _smb._tcp local``)::

    Timestamp     A/R    Flags  if Domain   Service Type   Instance Name
    10:41:02.114  Add        3   4 local.   _smb._tcp.     Office NAS

Resolve output (``dns-sd -L "Office NAS" _smb._tcp local``), either::

    Office\\032NAS._smb._tcp.local. can be reached at nas.local.:445 (interface 4)

or the columnar form ending in ``<priority> <weight> <port> <target>``.
"""
import asyncio
import logging
import re
from typing import Awaitable, Callable, NamedTuple, Optional, Set

from launchit.config import settings
from launchit.models import ShareType
from launchit.services.discovery.process_handle import ManagedProcess, ScanSession
from launchit.services.errors import ProcessSpawnError

logger = logging.getLogger(__name__)

# (service type, share type) pairs browsed on every scan
SERVICE_TYPES = [
    ("_smb._tcp", ShareType.SMB),
    ("_afpovertcp._tcp", ShareType.AFP),
    ("_nfs._tcp", ShareType.NFS),
    ("_device-info._tcp", ShareType.OTHER),
]

_ADD_EVENT_RE = re.compile(r"\bAdd\b")
_REACHED_AT_RE = re.compile(r"can be reached at\s+([^:\s]+):(\d+)")


class ResolvedService(NamedTuple):
    host: str
    port: int


def _strip_root(host: str) -> str:
    return host[:-1] if host.endswith(".") else host


def parse_browse_line(line: str, service_type: str) -> Optional[str]:
    """Instance name from an 'Add' event line, or None."""
    if service_type not in line or not _ADD_EVENT_RE.search(line):
        return None
    parts = line.split(service_type + ".", 1)
    if len(parts) < 2:
        return None
    return parts[1].strip() or None


def parse_resolve_line(line: str, instance_name: str) -> Optional[ResolvedService]:
    match = _REACHED_AT_RE.search(line)
    if match:
        return ResolvedService(_strip_root(match.group(1)), int(match.group(2)))

    # Columnar fallback: ... <priority> <weight> <port> <target>
    if instance_name in line:
        parts = line.split()
        if len(parts) >= 4:
            target, port = parts[-1], parts[-2]
            if port.isdigit() and "." in target:
                return ResolvedService(_strip_root(target), int(port))
    return None


class ServiceResolver:
    """Resolves one DNS-SD instance to host:port."""

    def __init__(self, command: Optional[str] = None, timeout_ms: Optional[int] = None):
        self.command = command or settings.mdns_command
        self.timeout_ms = timeout_ms if timeout_ms is not None else settings.mdns_resolve_timeout_ms

    async def resolve(
        self,
        session: ScanSession,
        instance_name: str,
        service_type: str,
        domain: str,
    ) -> Optional[ResolvedService]:
        try:
            proc = await session.spawn(self.command, "-L", instance_name, service_type, domain)
        except ProcessSpawnError as e:
            logger.warning(f"⚠️ Could not resolve '{instance_name}': {e}")
            return None

        try:
            return await asyncio.wait_for(
                self._first_match(proc, instance_name),
                timeout=self.timeout_ms / 1000,
            )
        except asyncio.TimeoutError:
            logger.debug(f"Resolve timed out for '{instance_name}' ({service_type})")
            return None
        finally:
            session.release(proc)

    async def _first_match(self, proc: ManagedProcess, instance_name: str) -> Optional[ResolvedService]:
        async for line in proc.lines():
            resolved = parse_resolve_line(line, instance_name)
            if resolved:
                return resolved
        return None


class ServiceBrowser:
    """
    Runs ``dns-sd -B`` for one service type for a fixed window.

    Each new instance name is handed to ``on_instance`` as a background task
    tracked by the session; browsing does not wait for those to finish.
    """

    def __init__(self, command: Optional[str] = None, domain: Optional[str] = None):
        self.command = command or settings.mdns_command
        self.domain = domain or settings.mdns_domain

    async def browse(
        self,
        session: ScanSession,
        service_type: str,
        duration_ms: int,
        on_instance: Callable[[str], Awaitable[None]],
    ) -> None:
        try:
            proc = await session.spawn(self.command, "-B", service_type, self.domain)
        except ProcessSpawnError as e:
            logger.warning(f"⚠️ mDNS browse for {service_type} unavailable: {e}")
            return

        seen: Set[str] = set()

        async def consume():
            async for line in proc.lines():
                name = parse_browse_line(line, service_type)
                if name is None or name in seen:
                    continue
                seen.add(name)
                logger.debug(f"mDNS: found '{name}' ({service_type})")
                session.track(asyncio.create_task(on_instance(name)))

        try:
            await asyncio.wait_for(consume(), timeout=duration_ms / 1000)
        except asyncio.TimeoutError:
            pass
        finally:
            session.release(proc)

        logger.info(f"mDNS browse {service_type}: {len(seen)} instance(s)")
