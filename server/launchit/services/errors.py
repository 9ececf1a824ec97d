"""Exceptions raised inside the network core.

Neither escapes the public discovery/health operations; callers get
empty results or a ``status=error`` HealthCheckResult instead.
"""


class ProcessSpawnError(Exception):
    """Raised when an external discovery command cannot be started."""
    pass


class ProbeError(Exception):
    """Raised when a reachability probe gets no HTTP response."""
    pass
