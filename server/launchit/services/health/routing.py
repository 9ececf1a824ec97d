"""
Launch-time routing: pick which of an item's addresses to use.

All candidate addresses are probed at once, but the answer is the first
profile in PROFILE_ORDER that succeeded, not the first to respond.
"""
import asyncio
import logging
from typing import List, Optional, Tuple

from launchit.config import settings
from launchit.models import PROFILE_ORDER, BookmarkItem, LaunchRoute, RoutedAddress
from launchit.services.health.prober import ReachabilityProber
from launchit.utils.url_builder import build_profile_url, build_url

logger = logging.getLogger(__name__)


class RoutingSelector:

    def __init__(
        self,
        prober: Optional[ReachabilityProber] = None,
        timeout_ms: Optional[int] = None,
    ):
        self.prober = prober or ReachabilityProber()
        self.timeout_ms = timeout_ms if timeout_ms is not None else settings.route_probe_timeout_ms

    def candidates(self, item: BookmarkItem) -> List[Tuple[str, str]]:
        """(profile, url) for every profile with its own address, in preference order."""
        pairs = []
        for profile in PROFILE_ORDER:
            url = build_profile_url(item, profile)
            if url:
                pairs.append((profile, url))
        return pairs

    async def find_first_reachable_address(self, item: BookmarkItem) -> Optional[RoutedAddress]:
        candidates = self.candidates(item)
        if not candidates:
            return None

        outcomes = await asyncio.gather(
            *(self.prober.head(url, self.timeout_ms) for _, url in candidates),
            return_exceptions=True,
        )

        for (profile, url), outcome in zip(candidates, outcomes):
            if isinstance(outcome, BaseException):
                logger.debug(f"Route {profile} ({url}) failed: {outcome}")
                continue
            if outcome < 400:
                return RoutedAddress(url=url, profile=profile)

        logger.info(f"No reachable address for {item.name or item.id}")
        return None

    async def resolve_launch_profile(
        self,
        item: BookmarkItem,
        profile: str,
        auto_route: bool = False,
    ) -> LaunchRoute:
        """Profile (and URL) a launch should use, switching only if auto-routing finds another."""
        if auto_route:
            routed = await self.find_first_reachable_address(item)
            if routed is not None and routed.profile != profile:
                logger.info(f"🔀 Routing {item.name or item.id}: {profile} -> {routed.profile}")
                return LaunchRoute(profile_used=routed.profile, routed=True, url=routed.url)
        return LaunchRoute(profile_used=profile, routed=False, url=build_url(item, profile))
