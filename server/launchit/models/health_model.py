from datetime import datetime, timezone
from enum import Enum
from typing import Optional, List, Literal

from pydantic import Field

from . import CamelModel


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


class HealthStatus(str, Enum):
    HEALTHY = "healthy"
    WARNING = "warning"
    ERROR = "error"
    UNKNOWN = "unknown"


class HealthCheckResult(CamelModel):
    item_id: str
    url: Optional[str] = None
    status: HealthStatus = HealthStatus.UNKNOWN
    status_code: Optional[int] = None
    response_time: Optional[int] = None  # ms
    error: Optional[str] = None
    checked_at: str = Field(default_factory=utc_now_iso)


class MetricDataPoint(CamelModel):
    timestamp: str
    response_time: int  # ms
    success: bool


class RoutedAddress(CamelModel):
    """First reachable address for an item and the profile it belongs to."""
    url: str
    profile: str


class LaunchRoute(CamelModel):
    profile_used: str
    routed: bool = False
    url: Optional[str] = None


class ServiceMetrics(CamelModel):
    item_id: str
    item_name: str
    current_status: Literal["up", "down", "degraded"]
    response_time: int
    uptime: float
    last_checked: str
    history: List[MetricDataPoint] = Field(default_factory=list)
