"""
=============================================================================
TCP SOCKET SERVER (CONNECTION ACCEPTOR)
=============================================================================

Owns the listening socket and the accept loop.

SOCKET LIFECYCLE (Server Side):
────────────────────────────────

    1. socket()    Create a TCP socket
    2. bind()      Associate it with IP:PORT
    3. listen()    Start queueing incoming connections
    4. accept()    Take ONE connection off the queue
    5. close()     Release the listening socket on shutdown

=============================================================================
ONE CONNECTION AT A TIME
=============================================================================

There is no thread pool. The handler callback runs on the accepting
thread and must finish before the next accept():

    while running:
        accept()  ─────►  handler(conn)  ─────►  conn closed
          ▲                                          │
          └──────────────────────────────────────────┘

Other clients wait in the listen backlog meanwhile.

=============================================================================
STOPPING
=============================================================================

The loop ends when any of these happen:

    - shutdown() is called (from another thread, or a signal handler)
    - SIGINT / SIGTERM arrives (only when started on the main thread)
    - max_connections connections have been accepted

accept() uses a 1 second timeout so the running flag is checked
regularly even when nobody connects.

=============================================================================
"""

import logging
import signal
import socket
import threading
from typing import Callable, Optional, Tuple

from ..config import ServerConfig
from .connection import Connection


logger = logging.getLogger(__name__)


class SocketServer:
    """
    Low-level TCP server that accepts connections sequentially.

    Usage:
        def handle_connection(conn: Connection):
            ...

        server = SocketServer(config)
        server.start(handle_connection)  # Blocks until shutdown
    """

    def __init__(self, config: ServerConfig):
        self.config = config
        self._socket: Optional[socket.socket] = None
        self._running = False
        self._ready_event = threading.Event()
        self._original_handlers: dict = {}
        self._bound_address: Optional[Tuple[str, int]] = None
        self.connections_accepted = 0

    @property
    def is_running(self) -> bool:
        """Check if server is running."""
        return self._running

    @property
    def address(self) -> Tuple[str, int]:
        """
        The address the server is bound to.

        With port 0 this reports the port the OS actually picked.
        """
        if self._bound_address is not None:
            return self._bound_address
        return (self.config.host, self.config.port)

    def _create_socket(self) -> socket.socket:
        """Create and configure the listening socket."""
        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)

        # Allow immediate restart without "Address already in use"
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)

        # Periodic wake-up so shutdown() is noticed
        sock.settimeout(1.0)
        return sock

    def _setup_signals(self):
        """
        Install SIGTERM/SIGINT handlers for graceful shutdown.

        signal.signal() only works on the main thread, so servers started
        from a worker thread (tests, embedding) rely on shutdown() instead.
        """
        if threading.current_thread() is not threading.main_thread():
            return

        def shutdown_handler(signum, frame):
            signal_name = signal.Signals(signum).name
            logger.info(f"Received {signal_name}, initiating shutdown...")
            self.shutdown()

        self._original_handlers[signal.SIGTERM] = signal.signal(signal.SIGTERM, shutdown_handler)
        self._original_handlers[signal.SIGINT] = signal.signal(signal.SIGINT, shutdown_handler)

    def _restore_signals(self):
        """Restore original signal handlers."""
        for sig, handler in self._original_handlers.items():
            signal.signal(sig, handler)
        self._original_handlers.clear()

    def start(self, connection_handler: Callable[[Connection], None]):
        """
        Bind, listen and run the accept loop.

        This method BLOCKS until the server stops.

        Args:
            connection_handler: Called once per accepted connection, on
                this thread. It owns the connection and must close it.

        Raises:
            OSError: If the address cannot be bound.
        """
        self._socket = self._create_socket()

        try:
            self._socket.bind((self.config.host, self.config.port))
        except OSError as e:
            logger.error(f"Failed to bind to {self.config.host}:{self.config.port}: {e}")
            self._socket.close()
            self._socket = None
            raise

        self._socket.listen(self.config.backlog)
        self._bound_address = self._socket.getsockname()[:2]

        self._running = True
        self.connections_accepted = 0
        self._setup_signals()

        host, port = self.address
        logger.info(f"Server listening on {host}:{port}")
        self._ready_event.set()

        try:
            self._accept_loop(connection_handler)
        finally:
            self._cleanup()

    def _limit_reached(self) -> bool:
        limit = self.config.max_connections
        return limit is not None and self.connections_accepted >= limit

    def _accept_loop(self, connection_handler: Callable[[Connection], None]):
        """Accept and hand off connections until stopped."""
        while self._running:
            try:
                client_socket, client_address = self._socket.accept()
            except socket.timeout:
                continue
            except OSError as e:
                if self._running:
                    logger.error(f"Accept error: {e}")
                break

            self.connections_accepted += 1
            logger.debug(
                f"Accepted connection #{self.connections_accepted} "
                f"from {client_address[0]}:{client_address[1]}"
            )

            conn = Connection(
                socket=client_socket,
                address=client_address,
                buffer_size=self.config.buffer_size,
                timeout=self.config.timeout,
                max_line_size=self.config.max_line_size,
            )
            connection_handler(conn)

            if self._limit_reached():
                logger.info(f"Handled {self.connections_accepted} connections, stopping")
                self._running = False

    def shutdown(self):
        """
        Ask the accept loop to stop.

        Safe to call from any thread and more than once. The connection
        currently being handled, if any, is finished first.
        """
        logger.info("Shutting down socket server...")
        self._running = False

    def _cleanup(self):
        """Release the listening socket and restore signal handlers."""
        self._restore_signals()

        if self._socket:
            try:
                self._socket.close()
            except OSError:
                pass
            self._socket = None

        self._running = False
        self._ready_event.clear()
        logger.info("Socket server stopped")

    def wait_until_ready(self, timeout: Optional[float] = None) -> bool:
        """
        Wait until the server is listening.

        Returns:
            True if the server is listening, False on timeout.
        """
        return self._ready_event.wait(timeout)
