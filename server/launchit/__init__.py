"""LaunchIt network core: service discovery, reachability and routing."""

__version__ = "0.1.0"
