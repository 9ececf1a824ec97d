import asyncio
import inspect
import logging
import time
from typing import Callable, Dict, List, Optional, Sequence

from launchit.config import settings
from launchit.models import (
    BookmarkItem,
    HealthCheckResult,
    HealthStatus,
    MetricDataPoint,
    ServiceMetrics,
)
from launchit.services.errors import ProbeError
from launchit.services.health.metrics import MetricsHistory
from launchit.services.health.prober import ReachabilityProber
from launchit.utils.url_builder import DEFAULT_PROTOCOL, build_url

logger = logging.getLogger(__name__)

# Schemes with nothing to HEAD: always reported healthy without a request
UNPROBED_PROTOCOLS = frozenset({
    "chrome", "edge", "brave", "opera", "chatgpt", "about", "mailto", "app",
    "ftp", "sftp", "ftps",
    "smb", "afp", "nfs", "file",
    "postgres", "mysql", "mongodb", "redis",
    "vscode", "cursor", "jetbrains", "git",
    "slack", "discord", "zoommtg", "tg",
})

_DASHBOARD_STATUS = {
    HealthStatus.HEALTHY: "up",
    HealthStatus.WARNING: "degraded",
}

ProgressCallback = Callable[[int, int, HealthCheckResult], object]


class HealthCheckService:
    """
    Checks whether bookmarks answer on the address for a network profile.

    Keeps the last result per item and a bounded history of outcomes used
    for uptime. Both live in memory until clear_results()/clear_metrics().
    """

    def __init__(
        self,
        prober: Optional[ReachabilityProber] = None,
        metrics: Optional[MetricsHistory] = None,
        timeout_ms: Optional[int] = None,
        pacing_ms: Optional[int] = None,
    ):
        self.prober = prober or ReachabilityProber()
        self.metrics = metrics or MetricsHistory()
        self.timeout_ms = timeout_ms if timeout_ms is not None else settings.health_check_timeout_ms
        self.pacing_ms = pacing_ms if pacing_ms is not None else settings.health_check_pacing_ms
        self._results: Dict[str, HealthCheckResult] = {}

    async def check_bookmark(self, item: BookmarkItem, profile: str) -> HealthCheckResult:
        url = build_url(item, profile)
        result = HealthCheckResult(item_id=item.id, url=url)

        if not url:
            result.status = HealthStatus.ERROR
            result.error = "No URL configured for this profile"
            self._results[item.id] = result
            return result

        protocol = item.protocol or DEFAULT_PROTOCOL
        if protocol in UNPROBED_PROTOCOLS or url.startswith("file://"):
            result.status = HealthStatus.HEALTHY
            result.response_time = 0
            return self._store(result)

        started = time.monotonic()
        try:
            status_code = await self.prober.head(url, self.timeout_ms)
        except ProbeError as e:
            result.status = HealthStatus.ERROR
            result.error = str(e)
        else:
            result.status_code = status_code
            if 200 <= status_code < 300:
                result.status = HealthStatus.HEALTHY
            elif 300 <= status_code < 400:
                # Redirects
                result.status = HealthStatus.WARNING
            else:
                result.status = HealthStatus.ERROR
                result.error = f"HTTP {status_code}"
        result.response_time = int((time.monotonic() - started) * 1000)

        if result.status == HealthStatus.ERROR:
            logger.warning(f"⚠️ {item.name or item.id} unreachable at {url}: {result.error}")
        return self._store(result)

    async def check_multiple_bookmarks(
        self,
        items: Sequence[BookmarkItem],
        profile: str,
        on_progress: Optional[ProgressCallback] = None,
    ) -> List[HealthCheckResult]:
        """Check items one after another, pausing briefly between them."""
        results: List[HealthCheckResult] = []
        total = len(items)

        for index, item in enumerate(items):
            result = await self.check_bookmark(item, profile)
            results.append(result)

            if on_progress is not None:
                outcome = on_progress(index + 1, total, result)
                if inspect.isawaitable(outcome):
                    await outcome

            if index < total - 1:
                await asyncio.sleep(self.pacing_ms / 1000)

        healthy = sum(1 for r in results if r.status == HealthStatus.HEALTHY)
        logger.info(f"Health check complete: {healthy}/{total} healthy ({profile})")
        return results

    def _store(self, result: HealthCheckResult) -> HealthCheckResult:
        self._results[result.item_id] = result
        self.metrics.record_result(result)
        return result

    # ------------------------------------------------------------------
    # Results & metrics
    # ------------------------------------------------------------------

    def get_result(self, item_id: str) -> Optional[HealthCheckResult]:
        return self._results.get(item_id)

    def get_all_results(self) -> List[HealthCheckResult]:
        return list(self._results.values())

    def clear_results(self) -> None:
        self._results.clear()

    def clear_metrics(self, item_id: Optional[str] = None) -> None:
        self.metrics.clear(item_id)

    def get_metrics_history(self, item_id: str) -> List[MetricDataPoint]:
        return self.metrics.get(item_id)

    def calculate_uptime(self, item_id: str) -> float:
        return self.metrics.uptime(item_id)

    def get_service_metrics(self, items: Sequence[BookmarkItem]) -> List[ServiceMetrics]:
        """Dashboard rows for every item that has been checked at least once."""
        rows: List[ServiceMetrics] = []
        for item in items:
            last = self._results.get(item.id)
            if last is None:
                continue
            rows.append(ServiceMetrics(
                item_id=item.id,
                item_name=item.name,
                current_status=_DASHBOARD_STATUS.get(last.status, "down"),
                response_time=last.response_time or 0,
                uptime=self.calculate_uptime(item.id),
                last_checked=last.checked_at,
                history=self.get_metrics_history(item.id),
            ))
        return rows
