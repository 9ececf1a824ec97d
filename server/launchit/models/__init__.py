from pydantic import BaseModel, ConfigDict


def to_camel(string: str) -> str:
    parts = string.split("_")
    return parts[0] + "".join(word.capitalize() for word in parts[1:])


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        validate_by_name=True
    )

from .item_model import NetworkAddressSet, NetworkProfile, BookmarkItem, PROFILE_ORDER
from .share_model import ShareType, DiscoveredShare
from .health_model import (
    HealthStatus,
    HealthCheckResult,
    MetricDataPoint,
    RoutedAddress,
    LaunchRoute,
    ServiceMetrics,
)
