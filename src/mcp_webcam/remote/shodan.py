"""ShodanClient — remote webcam discovery and snapshot fetching.

Discovery runs a handful of well-known webcam banner queries against the
Shodan host search API and normalizes the matches into
:class:`RemoteWebcam` records.  Fetching pulls a single still image from a
camera URL; MJPEG streams are cut at the first complete JPEG frame.

Only access webcams you own or have permission to use.
"""

from __future__ import annotations

import asyncio
import logging
from enum import Enum
from typing import Any

import httpx
from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.shodan.io"

WEBCAM_QUERIES: tuple[str, ...] = (
    "Server: SQ-WEBCAM",
    "Server: yawcam",
    "Server: webcamXP",
    '"Server: IP Webcam Server"',
    '"200 OK" "Content-Type: multipart/x-mixed-replace"',
    'port:8080 "mjpeg"',
    'port:8081 "mjpeg"',
    'port:554 "rtsp"',
    '"axis video server"',
    '"live view axis"',
    'inurl:"view/view.shtml"',
    'inurl:"ViewerFrame?Mode="',
    'inurl:"MultiCameraFrame?Mode="',
)

# Only the first few queries run per search to stay inside API rate limits.
MAX_QUERIES_PER_SEARCH = 3

_MJPEG_ENDPOINTS = (
    "/mjpeg",
    "/video.mjpg",
    "/video.cgi",
    "/snapshot.jpg",
    "/image.jpg",
    "/cam.jpg",
)

_JPEG_START = b"\xff\xd8"
_JPEG_END = b"\xff\xd9"
MAX_IMAGE_BYTES = 5 * 1024 * 1024


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


class ShodanError(Exception):
    """Base error for remote discovery and fetch failures."""


class ShodanUnauthorizedError(ShodanError):
    """The API key was rejected."""

    def __init__(self) -> None:
        super().__init__("Unauthorized: check SHODAN_API_KEY")


class ShodanRateLimitError(ShodanError):
    """The API rate limit was exceeded."""

    def __init__(self) -> None:
        super().__init__("Rate limit exceeded")


class ShodanAPIError(ShodanError):
    """Any other API or network failure during search."""


class RemoteFetchError(ShodanError):
    """A remote camera did not yield an image."""

    def __init__(self, url: str, detail: str) -> None:
        self.url = url
        self.detail = detail
        super().__init__(f"Failed to fetch {url}: {detail}")


# ---------------------------------------------------------------------------
# Models
# ---------------------------------------------------------------------------


class AccessType(str, Enum):
    """How a remote webcam serves its images."""

    MJPEG = "mjpeg"
    RTSP = "rtsp"
    HTTP = "http"
    UNKNOWN = "unknown"


class ShodanLocation(BaseModel):
    """Geolocation attached to a Shodan match."""

    country_name: str | None = None
    city: str | None = None
    region_code: str | None = None
    latitude: float | None = None
    longitude: float | None = None


class ShodanMatch(BaseModel):
    """One banner returned by ``/shodan/host/search``."""

    ip_str: str
    port: int
    hostnames: list[str] = Field(default_factory=list)
    location: ShodanLocation | None = None
    org: str | None = None
    data: str = ""
    timestamp: str = ""
    transport: str = "tcp"
    product: str | None = None


class ShodanSearchResponse(BaseModel):
    matches: list[ShodanMatch] = Field(default_factory=list)
    total: int = 0


class RemoteWebcam(BaseModel):
    """A discovered remote webcam endpoint."""

    ip: str
    port: int
    url: str
    hostname: str | None = None
    location: ShodanLocation | None = None
    org: str | None = None
    product: str | None = None
    last_seen: str = ""
    access_type: AccessType = AccessType.UNKNOWN


# ---------------------------------------------------------------------------
# Banner interpretation
# ---------------------------------------------------------------------------


def determine_access_type(match: ShodanMatch) -> AccessType:
    """Classify a banner by streaming protocol."""
    banner = match.data.lower()
    if "mjpeg" in banner or "multipart/x-mixed-replace" in banner:
        return AccessType.MJPEG
    if match.port == 554 or "rtsp" in banner:
        return AccessType.RTSP
    if match.port in (80, 8080, 8081):
        return AccessType.HTTP
    return AccessType.UNKNOWN


def build_webcam_url(match: ShodanMatch, access_type: AccessType) -> str:
    """Best-guess URL for a banner's video or snapshot endpoint."""
    host = f"{match.ip_str}:{match.port}"
    if access_type is AccessType.MJPEG:
        for endpoint in _MJPEG_ENDPOINTS:
            if endpoint in match.data:
                return f"http://{host}{endpoint}"
        return f"http://{host}/mjpeg"
    if access_type is AccessType.RTSP:
        return f"rtsp://{host}/"
    return f"http://{host}/"


def to_remote_webcam(match: ShodanMatch) -> RemoteWebcam:
    access_type = determine_access_type(match)
    return RemoteWebcam(
        ip=match.ip_str,
        port=match.port,
        url=build_webcam_url(match, access_type),
        hostname=match.hostnames[0] if match.hostnames else None,
        location=match.location,
        org=match.org,
        product=match.product,
        last_seen=match.timestamp,
        access_type=access_type,
    )


# ---------------------------------------------------------------------------
# Client
# ---------------------------------------------------------------------------


class ShodanClient:
    """Async client for the Shodan search API and remote snapshots.

    Usage::

        async with ShodanClient(api_key) as shodan:
            webcams = await shodan.search_webcams(limit=10)
            image, mime_type = await shodan.fetch_image(webcams[0].url)
    """

    def __init__(
        self,
        api_key: str,
        *,
        base_url: str = DEFAULT_BASE_URL,
        fetch_timeout: float = 10.0,
        query_delay: float = 0.5,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        if not api_key:
            msg = "ShodanClient requires a non-empty API key"
            raise ValueError(msg)
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._fetch_timeout = fetch_timeout
        self._query_delay = query_delay
        self._client = client
        self._owns_client = client is None

    async def __aenter__(self) -> ShodanClient:
        return self

    async def __aexit__(self, *_: object) -> None:
        await self.aclose()

    def _http(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient()
        return self._client

    async def aclose(self) -> None:
        """Close the underlying HTTP client if this instance created it."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def search(self, query: str, limit: int | None = None) -> ShodanSearchResponse:
        """Run one host search query."""
        logger.debug("Executing Shodan search: %s", query)
        params: dict[str, Any] = {"key": self._api_key, "query": query}
        if limit is not None:
            params["limit"] = limit

        try:
            response = await self._http().get(f"{self._base_url}/shodan/host/search", params=params)
        except httpx.HTTPError as exc:
            raise ShodanAPIError(f"{type(exc).__name__}: {exc}") from exc

        if response.status_code == httpx.codes.UNAUTHORIZED:
            raise ShodanUnauthorizedError()
        if response.status_code == httpx.codes.TOO_MANY_REQUESTS:
            raise ShodanRateLimitError()
        if response.status_code != httpx.codes.OK:
            logger.error("Shodan API error %d: %s", response.status_code, response.text)
            raise ShodanAPIError(f"HTTP {response.status_code}: {response.text}")

        try:
            result = ShodanSearchResponse.model_validate(response.json())
        except ValueError as exc:
            raise ShodanAPIError(f"Malformed search response: {exc}") from exc
        logger.debug("Search returned %d results", len(result.matches))
        return result

    async def search_webcams(self, limit: int = 20) -> list[RemoteWebcam]:
        """Search for webcams across the built-in banner queries.

        Results are de-duplicated by IP and sorted by IP.  A failing query is
        skipped; the search fails only when every query fails or the key is
        rejected.
        """
        queries = WEBCAM_QUERIES[:MAX_QUERIES_PER_SEARCH]
        per_query = max(1, limit // len(queries))
        by_ip: dict[str, RemoteWebcam] = {}
        last_error: ShodanError | None = None
        succeeded = 0

        for position, query in enumerate(queries):
            if position and self._query_delay:
                await asyncio.sleep(self._query_delay)
            try:
                response = await self.search(query, per_query)
            except ShodanUnauthorizedError:
                raise
            except ShodanError as exc:
                logger.warning("Failed to search with query %r: %s", query, exc)
                last_error = exc
                continue
            succeeded += 1
            for match in response.matches:
                by_ip.setdefault(match.ip_str, to_remote_webcam(match))

        if not succeeded and last_error is not None:
            raise last_error

        webcams = [by_ip[ip] for ip in sorted(by_ip)][:limit]
        logger.info("Found %d unique webcams", len(webcams))
        return webcams

    async def fetch_image(self, url: str) -> tuple[bytes, str]:
        """Fetch one still image from *url*; returns ``(bytes, mime_type)``."""
        try:
            scheme = httpx.URL(url).scheme
        except httpx.InvalidURL as exc:
            raise RemoteFetchError(url, f"invalid URL: {exc}") from exc
        if scheme not in ("http", "https"):
            raise RemoteFetchError(url, f"unsupported URL scheme: {scheme or '(none)'}")

        logger.debug("Fetching image from webcam: %s", url)
        try:
            async with self._http().stream(
                "GET", url, timeout=self._fetch_timeout, follow_redirects=True
            ) as response:
                if not response.is_success:
                    raise RemoteFetchError(url, f"HTTP {response.status_code}")
                content_type = response.headers.get("content-type", "")
                mime_type = content_type.split(";", 1)[0].strip().lower()

                if mime_type.startswith("multipart/"):
                    image = await self._first_jpeg_frame(url, response)
                    mime_type = "image/jpeg"
                elif not mime_type or mime_type.startswith("image/"):
                    image = await self._read_limited(url, response)
                    mime_type = mime_type or "image/jpeg"
                else:
                    raise RemoteFetchError(url, f"unexpected content type: {mime_type}")
        except httpx.HTTPError as exc:
            raise RemoteFetchError(url, f"{type(exc).__name__}: {exc}") from exc

        logger.info("Fetched %d bytes from %s", len(image), url)
        return image, mime_type

    @staticmethod
    async def _read_limited(url: str, response: httpx.Response) -> bytes:
        buffer = bytearray()
        async for chunk in response.aiter_bytes():
            buffer += chunk
            if len(buffer) > MAX_IMAGE_BYTES:
                raise RemoteFetchError(url, f"image larger than {MAX_IMAGE_BYTES} bytes")
        if not buffer:
            raise RemoteFetchError(url, "empty response body")
        return bytes(buffer)

    @staticmethod
    async def _first_jpeg_frame(url: str, response: httpx.Response) -> bytes:
        buffer = bytearray()
        async for chunk in response.aiter_bytes():
            buffer += chunk
            start = buffer.find(_JPEG_START)
            if start != -1:
                end = buffer.find(_JPEG_END, start + len(_JPEG_START))
                if end != -1:
                    return bytes(buffer[start : end + len(_JPEG_END)])
            if len(buffer) > MAX_IMAGE_BYTES:
                break
        raise RemoteFetchError(url, "no JPEG frame found in stream")
