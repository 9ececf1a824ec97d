from collections import deque
from typing import Deque, Dict, List, Optional

from launchit.config import settings
from launchit.models import HealthCheckResult, HealthStatus, MetricDataPoint


class MetricsHistory:
    """Per-item ring buffer of past check outcomes (oldest evicted first)."""

    def __init__(self, max_history: Optional[int] = None):
        self.max_history = max_history or settings.metrics_history_size
        self._history: Dict[str, Deque[MetricDataPoint]] = {}

    def record(self, item_id: str, point: MetricDataPoint) -> None:
        history = self._history.get(item_id)
        if history is None:
            history = self._history[item_id] = deque(maxlen=self.max_history)
        history.append(point)

    def record_result(self, result: HealthCheckResult) -> MetricDataPoint:
        point = MetricDataPoint(
            timestamp=result.checked_at,
            response_time=result.response_time or 0,
            success=result.status == HealthStatus.HEALTHY,
        )
        self.record(result.item_id, point)
        return point

    def get(self, item_id: str) -> List[MetricDataPoint]:
        return list(self._history.get(item_id, ()))

    def uptime(self, item_id: str) -> float:
        history = self._history.get(item_id)
        if not history:
            # No evidence yet: assume up
            return 100.0
        successes = sum(1 for point in history if point.success)
        return successes / len(history) * 100

    def clear(self, item_id: Optional[str] = None) -> None:
        if item_id is None:
            self._history.clear()
        else:
            self._history.pop(item_id, None)
