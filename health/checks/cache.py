# ============================================================================
# CACHE READINESS PROBE
# ============================================================================
# EPOCH: 1 - READINESS GATE
# STATUS: Infrastructure - Redis PING handshake over raw TCP
# PURPOSE: Prove Redis is listening AND speaking RESP before boot continues
# CREATED: 18 OCT 2026
# ============================================================================
"""
Cache Readiness Probe

Two-phase check against Redis without a client library:

1. Connect: open a TCP connection to (host, port) and close it again.
   Refused or unroutable targets fail fast here.
2. Handshake: open a second connection, send PING\\r\\n, and read until
   the accumulated reply contains PONG.

A bare connect can succeed against a listener that is not Redis or is not
answering yet, so phase 2 is what proves liveness.

Reply matching is a substring test on everything received so far (not
line parsing), so a PONG split across reads or sent without a trailing
CRLF still counts. An error reply that happens to contain "PONG" would
also match.

The reply wait is bounded twice: one deadline of timeout_seconds for the
whole phase, and MAX_REPLY_BYTES of reply without a PONG.
"""

import asyncio
from typing import Optional, Tuple

from core.config import CacheDefaults
from core.errors import ProbeError
from core.logging import get_logger
from health.core import Probe

logger = get_logger(__name__)

PING_COMMAND = b"PING\r\n"
PONG_TOKEN = "PONG"
READ_CHUNK_BYTES = 1024
MAX_REPLY_BYTES = 64 * 1024


class PongReplyBuffer:
    """
    Incremental reply buffer: append bytes, scan for the PONG token.

    Only the last len(token) - 1 bytes are kept between feeds for the
    scan, so a token split across reads still matches and each feed costs
    the size of its chunk. At most `limit` bytes are kept for error text;
    overflowed turns True once more than that has been received.
    """

    def __init__(self, token: str = PONG_TOKEN, limit: int = MAX_REPLY_BYTES):
        self.token = token
        self.limit = limit
        self._token_bytes = token.encode("utf-8")
        self._tail = b""
        self._data = bytearray()
        self._received = 0
        self._matched = False

    def feed(self, chunk: bytes) -> bool:
        """Append a chunk; True once the token has been seen."""
        window = self._tail + chunk
        if self._token_bytes in window:
            self._matched = True
        keep = len(self._token_bytes) - 1
        self._tail = window[-keep:] if keep else b""

        self._received += len(chunk)
        room = self.limit - len(self._data)
        if room > 0:
            self._data.extend(chunk[:room])
        return self._matched

    @property
    def matched(self) -> bool:
        return self._matched

    @property
    def overflowed(self) -> bool:
        return self._received > self.limit

    @property
    def text(self) -> str:
        """Decoded reply, truncated to `limit` bytes."""
        return self._data.decode("utf-8", errors="replace")

    def __len__(self) -> int:
        return self._received


async def _close(writer: asyncio.StreamWriter) -> None:
    """Close a stream, ignoring errors from an already-broken transport."""
    writer.close()
    try:
        await writer.wait_closed()
    except (ConnectionError, OSError) as e:
        logger.debug(f"Ignoring error while closing socket: {e}")


class RedisPingProbe(Probe):
    """
    Redis liveness via raw PING.

    Every socket opened by an attempt is closed before attempt() returns,
    on success, timeout and error alike.
    """

    name = "Redis"

    def __init__(
        self,
        host: str = "localhost",
        port: int = 6379,
        timeout_seconds: Optional[float] = None,
    ):
        super().__init__(timeout_seconds)
        self.host = host
        self.port = port

    @classmethod
    def from_config(
        cls, cache: CacheDefaults, timeout_seconds: Optional[float] = None
    ) -> "RedisPingProbe":
        return cls(host=cache.host, port=cache.port, timeout_seconds=timeout_seconds)

    @property
    def target(self) -> str:
        return f"{self.host}:{self.port}"

    async def _open(self) -> Tuple[asyncio.StreamReader, asyncio.StreamWriter]:
        try:
            return await asyncio.wait_for(
                asyncio.open_connection(self.host, self.port),
                timeout=self.timeout_seconds,
            )
        except asyncio.TimeoutError:
            raise ProbeError(
                f"Connection timeout ({self.target})", dependency=self.name
            )

    async def check(self) -> None:
        await self.check_connect()
        await self.check_ping()

    async def check_connect(self) -> None:
        """Phase 1: bare TCP connect."""
        _, writer = await self._open()
        await _close(writer)
        logger.debug(f"TCP connect to {self.target} succeeded")

    async def check_ping(self) -> None:
        """
        Phase 2: PING, wait for PONG.

        timeout_seconds bounds the whole reply wait, not each read, so a
        listener that keeps talking without ever sending PONG still fails.
        """
        reader, writer = await self._open()
        try:
            writer.write(PING_COMMAND)
            await writer.drain()

            loop = asyncio.get_running_loop()
            deadline = loop.time() + self.timeout_seconds
            reply = PongReplyBuffer()
            while True:
                remaining = deadline - loop.time()
                if remaining <= 0:
                    raise ProbeError("Redis PING timeout", dependency=self.name)
                try:
                    chunk = await asyncio.wait_for(
                        reader.read(READ_CHUNK_BYTES),
                        timeout=remaining,
                    )
                except asyncio.TimeoutError:
                    raise ProbeError("Redis PING timeout", dependency=self.name)

                if not chunk:
                    received = reply.text.strip()
                    detail = f" (received {received!r})" if received else ""
                    raise ProbeError(
                        f"Redis did not respond with PONG{detail}", dependency=self.name
                    )

                if reply.feed(chunk):
                    logger.debug(f"PONG received from {self.target}")
                    return

                if reply.overflowed:
                    raise ProbeError(
                        f"Redis did not respond with PONG (reply exceeded {reply.limit} bytes)",
                        dependency=self.name,
                    )
        finally:
            await _close(writer)


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "PING_COMMAND",
    "PONG_TOKEN",
    "MAX_REPLY_BYTES",
    "PongReplyBuffer",
    "RedisPingProbe",
]
