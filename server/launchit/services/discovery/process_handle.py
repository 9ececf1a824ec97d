"""
Cancellable external processes and the scan session that owns them.

    proc = await ManagedProcess.spawn("dns-sd", "-B", "_smb._tcp", "local")
    async for line in proc.lines():
        ...
    proc.kill()
"""
import asyncio
import logging
from typing import AsyncIterator, Set

from launchit.services.discovery.registry import ShareRegistry
from launchit.services.errors import ProcessSpawnError

logger = logging.getLogger(__name__)


class ManagedProcess:
    """A child process exposing its stdout line by line and a ``kill()``."""

    def __init__(self, process: asyncio.subprocess.Process, label: str):
        self._process = process
        self.label = label

    @classmethod
    async def spawn(cls, *args: str) -> "ManagedProcess":
        try:
            process = await asyncio.create_subprocess_exec(
                *args,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.DEVNULL,
            )
        except OSError as e:
            raise ProcessSpawnError(f"{args[0]}: {e}") from e
        return cls(process, " ".join(args))

    async def lines(self) -> AsyncIterator[str]:
        stream = self._process.stdout
        if stream is None:
            return
        while True:
            raw = await stream.readline()
            if not raw:
                return
            yield raw.decode("utf-8", errors="replace").rstrip("\r\n")

    @property
    def running(self) -> bool:
        return self._process.returncode is None

    def kill(self) -> None:
        if not self.running:
            return
        try:
            self._process.kill()
        except ProcessLookupError:
            # Exited between the check and the kill
            pass


class ScanSession:
    """
    State of one discovery run.

    Owns the share registry, every process it spawned and every pending
    resolution task, so ``cancel()`` can tear all of it down at once.
    """

    def __init__(self):
        self.shares = ShareRegistry()
        self.processes: Set[ManagedProcess] = set()
        self.pending: Set[asyncio.Task] = set()
        self.cancelled = False

    async def spawn(self, *args: str) -> ManagedProcess:
        if self.cancelled:
            raise ProcessSpawnError("scan session was cancelled")
        proc = await ManagedProcess.spawn(*args)
        self.processes.add(proc)
        return proc

    def release(self, proc: ManagedProcess) -> None:
        proc.kill()
        self.processes.discard(proc)

    def track(self, task: asyncio.Task) -> None:
        self.pending.add(task)
        task.add_done_callback(self.pending.discard)

    async def drain(self) -> None:
        """Wait for resolutions that were still in flight when browsing ended."""
        while self.pending:
            await asyncio.gather(*list(self.pending), return_exceptions=True)

    def cancel(self) -> None:
        self.cancelled = True
        for proc in list(self.processes):
            proc.kill()
        self.processes.clear()
        for task in list(self.pending):
            task.cancel()
        self.pending.clear()
