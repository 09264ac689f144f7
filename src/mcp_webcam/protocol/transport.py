"""Server-side transports — newline-delimited message framing.

Each transport satisfies the :class:`Transport` protocol, providing
``receive``, ``send``, and ``close`` methods.  Transports move lines of
text; encoding and decoding JSON is the serializer's job.
"""

from __future__ import annotations

import asyncio
import logging
import sys
from typing import BinaryIO, Protocol, runtime_checkable

from mcp_webcam.protocol.errors import TransportError

logger = logging.getLogger(__name__)


@runtime_checkable
class Transport(Protocol):
    """Abstract line transport for JSON-RPC communication."""

    async def receive(self) -> str | None: ...
    async def send(self, line: str) -> None: ...
    async def close(self) -> None: ...


class StdioTransport:
    """Reads requests from stdin and writes responses to stdout.

    One message per line.  Reads happen on an executor thread so a quiet
    stdin never blocks the event loop; writes are serialized so concurrent
    responses cannot interleave.
    """

    def __init__(self, reader: BinaryIO | None = None, writer: BinaryIO | None = None) -> None:
        self._reader = reader if reader is not None else sys.stdin.buffer
        self._writer = writer if writer is not None else sys.stdout.buffer
        self._write_lock = asyncio.Lock()
        self._closed = False

    async def receive(self) -> str | None:
        """Return the next non-blank line, or ``None`` once the stream closes.

        Raises
        ------
        TransportError
            If the bytes are not valid UTF-8 or the final line is truncated.
        """
        loop = asyncio.get_running_loop()
        while True:
            try:
                raw: bytes = await loop.run_in_executor(None, self._reader.readline)
            except (OSError, ValueError) as exc:
                raise TransportError(f"Failed to read from stream: {exc}") from exc

            if not raw:
                self._closed = True
                return None
            if not raw.endswith(b"\n"):
                raise TransportError("Stream ended in the middle of a message")
            try:
                line = raw.decode("utf-8").rstrip("\r\n")
            except UnicodeDecodeError as exc:
                raise TransportError(f"Message is not valid UTF-8: {exc}") from exc
            if line.strip():
                return line

    async def send(self, line: str) -> None:
        """Write one line and flush immediately."""
        data = line.encode("utf-8") + b"\n"
        async with self._write_lock:
            try:
                self._writer.write(data)
                self._writer.flush()
            except (OSError, ValueError) as exc:
                raise TransportError(f"Failed to write to stream: {exc}") from exc

    async def close(self) -> None:
        """Flush pending output. The process owns stdin/stdout, so they stay open."""
        self._closed = True
        async with self._write_lock:
            try:
                self._writer.flush()
            except (OSError, ValueError) as exc:
                logger.debug("Flush on close failed: %s", exc)

    @property
    def closed(self) -> bool:
        return self._closed
