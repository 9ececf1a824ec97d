import asyncio
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, TypeVar

logger = logging.getLogger(__name__)

# Shared pool for blocking resolver calls (reverse DNS has no asyncio API)
_executor = ThreadPoolExecutor(
    max_workers=8,
    thread_name_prefix="launchit_dns"
)

T = TypeVar('T')


async def run_in_executor(func: Callable[..., T], *args) -> T:
    """
    Run a blocking function in the shared thread pool.

    Usage:
        hostname, _, _ = await run_in_executor(socket.gethostbyaddr, ip)
    """
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(_executor, func, *args)


async def run_with_timeout(func: Callable[..., T], timeout_s: float, *args) -> T:
    """Like ``run_in_executor`` but gives up waiting after ``timeout_s``.

    The worker thread itself cannot be interrupted; only the await is bounded.
    """
    return await asyncio.wait_for(run_in_executor(func, *args), timeout=timeout_s)


def cleanup_executor():
    """
    Cleanup the thread pool executor.
    Call this when shutting down the application.
    """
    logger.info("Shutting down resolver executor...")
    _executor.shutdown(wait=False, cancel_futures=True)
    logger.info("Executor shutdown complete")
