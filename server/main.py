"""
LaunchIt Network Service Entry Point
====================================
Serves the discovery / health / routing API to the launcher UI.

Settings (port, timeouts, discovery commands) come from launchit.config.
"""
import sys

import uvicorn

from launchit.config import settings


def serve():
    """Start the uvicorn server."""
    uvicorn.run(
        "launchit.main:app",
        host="127.0.0.1",
        port=settings.port,
        reload=False
    )


if __name__ == "__main__":
    try:
        serve()
    except KeyboardInterrupt:
        sys.exit(0)
