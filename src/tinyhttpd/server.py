"""
=============================================================================
HTTP SERVER
=============================================================================

Ties the pieces together:

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                      │
    │   SocketServer          accepts one connection at a time             │
    │        │                                                             │
    │        ▼                                                             │
    │   Connection.read_line()   the request line, or None                │
    │        │                                                             │
    │        ▼                                                             │
    │   StaticFileHandler.handle(line)  →  HTTPResponse                    │
    │        │                                                             │
    │        ▼                                                             │
    │   ResponseWriter.write(conn, response)   (fault injection here)     │
    │        │                                                             │
    │        ▼                                                             │
    │   Connection.close()                                                 │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

One request per connection. The response never carries a Connection
header; the socket is closed after every exchange.

=============================================================================
ERROR POLICY
=============================================================================

Nothing that happens on one connection stops the server:

    - no request line (client closed or timed out)  → log, close
    - request line too long                         → 400, close
    - handler raised unexpectedly                   → log, 500, close
    - client disconnected mid-send                  → log, close

The loop only ends on shutdown(), a signal, or the connection cap.

=============================================================================
"""

import dataclasses
import logging
from typing import Optional

from .config import ServerConfig
from .core import Connection, ConnectionState, RequestLineTooLong, SocketServer
from .faults import FaultInjector, build_fault_injector
from .handlers import StaticFileHandler
from .http.mime_types import get_content_type_map
from .http.response import HTTPResponse, bad_request, internal_error
from .http.writer import ResponseWriter


logger = logging.getLogger(__name__)


class HTTPServer:
    """
    Single-threaded static file server.

    Usage:
        server = HTTPServer(ServerConfig(content_root="./content"))
        server.run()   # Blocks until Ctrl+C or the connection cap

    Args:
        config: Server configuration. Defaults are used if omitted.
        faults: Fault injector for the response writer. Built from the
            config's fault_* settings if omitted.
    """

    def __init__(
        self,
        config: Optional[ServerConfig] = None,
        faults: Optional[FaultInjector] = None,
    ):
        self.config = config or ServerConfig()
        self.config.validate()  # Fail-fast on invalid config

        self._socket_server = SocketServer(self.config)

        self.handler = StaticFileHandler(
            root_dir=self.config.content_root,
            content_types=get_content_type_map(self.config.content_types),
            index_file=self.config.index_file,
            strict_errors=self.config.strict_errors,
        )

        self.writer = ResponseWriter(faults or build_fault_injector(self.config))

        self._running = False

    @property
    def address(self):
        """Bound (host, port) once running; configured address before."""
        return self._socket_server.address

    @property
    def is_running(self) -> bool:
        return self._running

    # =========================================================================
    # SERVER LIFECYCLE
    # =========================================================================

    def run(self, host: Optional[str] = None, port: Optional[int] = None, setup_logging: bool = True):
        """
        Start the server (blocking).

        Args:
            host: Override config host.
            port: Override config port.
            setup_logging: Configure the root logger from config.log_level.
        """
        if host:
            self.config.host = host
        if port is not None:
            self.config.port = port

        if setup_logging:
            self._setup_logging()

        self._running = True
        logger.info(f"Starting HTTP server on {self.config.host}:{self.config.port}")
        logger.info(f"Serving {self.handler.root_dir} ({self.handler.content_types.name} content types)")

        try:
            self._socket_server.start(self._handle_connection)
        except KeyboardInterrupt:
            logger.info("Received keyboard interrupt")
        finally:
            self._running = False
            logger.info(f"Server stopped after {self._socket_server.connections_accepted} connections")

    def shutdown(self):
        """Stop accepting connections. Safe to call from another thread."""
        self._socket_server.shutdown()

    def wait_until_ready(self, timeout: Optional[float] = None) -> bool:
        """Block until the listening socket is bound."""
        return self._socket_server.wait_until_ready(timeout)

    def print_startup_banner(self):
        """Print server startup information."""
        host, port = self.address
        limit = self.config.max_connections
        print()
        print("╔══════════════════════════════════════════════════════════════╗")
        print(f"║  {self.config.server_name} running")
        print(f"║  http://{host}:{port}")
        print(f"║  Content root: {self.handler.root_dir}")
        print(f"║  Connections: {limit if limit is not None else 'unlimited'}")
        print("║  Press Ctrl+C to stop")
        print("╚══════════════════════════════════════════════════════════════╝")
        print()

    def _setup_logging(self):
        """Configure logging based on config."""
        level = getattr(logging, self.config.log_level.upper(), logging.INFO)

        logging.basicConfig(
            level=level,
            format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

        logging.getLogger("tinyhttpd").setLevel(level)

    # =========================================================================
    # REQUEST HANDLING
    # =========================================================================

    def _handle_connection(self, conn: Connection):
        """
        Handle one connection start to finish.

        Runs on the accepting thread. The connection is always closed
        on return.
        """
        with conn:
            try:
                line = conn.read_line()
            except RequestLineTooLong as e:
                logger.warning(f"[{conn.id}] {e}")
                self.writer.write(conn, bad_request())
                return
            except OSError as e:
                logger.warning(f"[{conn.id}] Read failed: {e}")
                return

            if line is None:
                logger.warning(f"[{conn.id}] No request received from {conn.client_ip}")
                return

            logger.info(f"[{conn.id}] Processing request: {line!r}")
            conn.state = ConnectionState.PROCESSING
            response = self.process(line)

            if not self.writer.write(conn, response):
                logger.warning(f"[{conn.id}] Client went away before the response was sent")

    def process(self, line: str) -> HTTPResponse:
        """
        Run the handler, turning unexpected exceptions into a 500.
        """
        try:
            response = self.handler.handle(line)
        except Exception as e:
            logger.exception(f"Handler error: {e}")
            return internal_error()
        logger.debug(f"{line!r} -> {response.status.value} {response.status.phrase}")
        return response


def create_app(config: Optional[ServerConfig] = None, **overrides) -> HTTPServer:
    """
    Create a server, optionally overriding config fields.

        server = create_app(content_root="./public", max_connections=11)

    The overrides are applied to a copy; the caller's config is left
    as it was. Unknown field names raise TypeError.
    """
    config = dataclasses.replace(config or ServerConfig(), **overrides)
    return HTTPServer(config)
