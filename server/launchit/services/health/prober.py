"""
Reachability probing over HTTP.

A HEAD request that only tells us whether something answers and with what
status. Redirects are not followed: a 3xx is itself the answer.
"""
import asyncio
import logging
from typing import Optional

import httpx

from launchit.config import settings
from launchit.services.errors import ProbeError

logger = logging.getLogger(__name__)

_HEADERS = {
    "User-Agent": "LaunchIt-HealthCheck/1.0",
}


class ReachabilityProber:

    def __init__(
        self,
        verify_tls: Optional[bool] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.verify_tls = settings.verify_tls if verify_tls is None else verify_tls
        self._transport = transport

    async def head(self, url: str, timeout_ms: int) -> int:
        """Status code of a HEAD to ``url``; raises ProbeError if nothing answered."""
        try:
            async with httpx.AsyncClient(
                headers=_HEADERS,
                timeout=timeout_ms / 1000,
                follow_redirects=False,
                verify=self.verify_tls,
                transport=self._transport,
            ) as client:
                response = await asyncio.wait_for(client.head(url), timeout=timeout_ms / 1000)
        except (httpx.TimeoutException, asyncio.TimeoutError) as e:
            raise ProbeError("Request timeout") from e
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise ProbeError(str(e) or "Connection failed") from e

        logger.debug(f"HEAD {url} -> {response.status_code}")
        return response.status_code
