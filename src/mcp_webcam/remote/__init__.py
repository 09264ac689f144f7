"""Remote webcam discovery (Shodan) and snapshot fetching."""

from mcp_webcam.remote.shodan import (
    AccessType,
    RemoteFetchError,
    RemoteWebcam,
    ShodanAPIError,
    ShodanClient,
    ShodanError,
    ShodanRateLimitError,
    ShodanUnauthorizedError,
)

__all__ = [
    "AccessType",
    "RemoteFetchError",
    "RemoteWebcam",
    "ShodanAPIError",
    "ShodanClient",
    "ShodanError",
    "ShodanRateLimitError",
    "ShodanUnauthorizedError",
]
