"""
=============================================================================
CONNECTION MANAGEMENT
=============================================================================

Wraps a client socket with the three operations the server needs:
read one line, send one response, close.

=============================================================================
TCP IS A BYTE STREAM, NOT A MESSAGE PROTOCOL!
=============================================================================

A request line sent in one go can still arrive in pieces:

    Client sends:   "GET /index.html HTTP/1.1\r\n"

    Server might receive:
        recv() → "GET /ind"
        recv() → "ex.html HTTP/1.1\r\nHost: loc"

So read_line() keeps calling recv() and appending to a buffer until it
sees a newline. Anything after the newline (request headers, a body) is
never looked at.

=============================================================================
WHEN NO LINE ARRIVES
=============================================================================

    ┌──────────────────────────────┬───────────────────────────────────┐
    │ Client behaviour             │ read_line() result                │
    ├──────────────────────────────┼───────────────────────────────────┤
    │ Sends "...\r\n"              │ the line, terminator stripped     │
    │ Sends text, then closes      │ the text (end of stream ends it)  │
    │ Closes without sending       │ None                              │
    │ Sends nothing until timeout  │ None                              │
    │ Sends text, then times out   │ None                              │
    │ Sends more than the limit    │ raises RequestLineTooLong         │
    └──────────────────────────────┴───────────────────────────────────┘

A None is a per-connection event: the server logs it, closes this
connection and goes back to accept().

close() drains what the client sent after its request line for at most
DRAIN_TIMEOUT seconds in total, however often new bytes arrive.

=============================================================================
"""

import logging
import socket
import time
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


logger = logging.getLogger(__name__)


DRAIN_TIMEOUT = 0.5


class RequestLineTooLong(Exception):
    """Raised when a client sends more than max_line_size bytes without a newline."""


class ConnectionState(Enum):
    """
    Connection lifecycle states.

    Tracked for logging and so close() is safe to call twice.
    """
    NEW = "new"                # Just accepted, nothing read yet
    READING = "reading"        # Waiting for the request line
    PROCESSING = "processing"  # Handler is running
    WRITING = "writing"        # Sending the response
    CLOSING = "closing"        # Shutdown sequence started
    CLOSED = "closed"          # Socket released


@dataclass
class Connection:
    """
    A single accepted client connection.

    Attributes:
        socket: The client socket.
        address: Client's (ip, port) tuple.
        id: Short identifier used in log lines.
        state: Current connection state.
        created_at: Timestamp when the connection was accepted.
    """

    socket: socket.socket
    address: tuple

    id: str = field(default_factory=lambda: str(uuid.uuid4())[:8])
    state: ConnectionState = ConnectionState.NEW
    created_at: float = field(default_factory=time.time)

    # Configuration (passed from ServerConfig)
    buffer_size: int = 4096
    timeout: Optional[float] = 10.0
    max_line_size: int = 8192

    _buffer: bytes = field(default=b"", repr=False)

    def __post_init__(self):
        # Blocking socket with a timeout: recv() waits at most `timeout` seconds.
        self.socket.setblocking(True)
        if self.timeout:
            self.socket.settimeout(self.timeout)

    @property
    def client_ip(self) -> str:
        """Get the client IP address."""
        return self.address[0]

    @property
    def age(self) -> float:
        """Get connection age in seconds."""
        return time.time() - self.created_at

    # =========================================================================
    # READING
    # =========================================================================

    def read_line(self) -> Optional[str]:
        """
        Read the request line.

        Returns:
            The first line sent by the client without its line
            terminator. None if the client closed without sending
            anything, or if the read timed out before a newline arrived.

        Raises:
            RequestLineTooLong: If no newline arrives within max_line_size bytes.
        """
        self.state = ConnectionState.READING

        while b"\n" not in self._buffer:
            # One extra byte for a trailing \r
            if len(self._buffer) > self.max_line_size + 1:
                raise RequestLineTooLong(
                    f"No line terminator within {self.max_line_size} bytes"
                )
            try:
                chunk = self._recv()
            except socket.timeout:
                logger.debug(f"[{self.id}] Timed out waiting for request line")
                return None
            if not chunk:
                # End of stream: whatever was buffered is the line
                break
            self._buffer += chunk

        if not self._buffer:
            return None

        raw, _, self._buffer = self._buffer.partition(b"\n")
        raw = raw.rstrip(b"\r")
        if len(raw) > self.max_line_size:
            raise RequestLineTooLong(
                f"Request line is {len(raw)} bytes, limit is {self.max_line_size}"
            )
        return raw.decode("utf-8", errors="replace")

    def _recv(self) -> bytes:
        """
        Receive data from the socket.

        Returns:
            Received bytes, or empty bytes if the client disconnected.
        """
        try:
            return self.socket.recv(self.buffer_size)
        except (ConnectionResetError, BrokenPipeError):
            return b""

    # =========================================================================
    # WRITING
    # =========================================================================

    def send_response(self, data: bytes) -> bool:
        """
        Send response bytes to the client.

        Uses sendall() so a large body is not cut short.

        Returns:
            True if the send succeeded, False if the connection was lost.
        """
        self.state = ConnectionState.WRITING
        try:
            self.socket.sendall(data)
            return True
        except OSError as e:
            logger.warning(f"[{self.id}] Send failed: {e}")
            return False

    # =========================================================================
    # CLOSING
    # =========================================================================

    def close(self):
        """
        Close the connection.

        1. shutdown(SHUT_WR) sends FIN so the client sees end of response
        2. drain whatever the client sent after its request line, for at
           most DRAIN_TIMEOUT seconds
        3. close() releases the file descriptor
        """
        if self.state == ConnectionState.CLOSED:
            return

        self.state = ConnectionState.CLOSING

        try:
            self.socket.shutdown(socket.SHUT_WR)
        except OSError:
            pass  # Already disconnected

        deadline = time.monotonic() + DRAIN_TIMEOUT
        try:
            while True:
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    break
                self.socket.settimeout(remaining)
                if not self.socket.recv(1024):
                    break
        except OSError:
            pass

        try:
            self.socket.close()
        except OSError:
            pass

        self.state = ConnectionState.CLOSED
        logger.debug(f"[{self.id}] Connection closed after {self.age:.3f}s")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
