"""
=============================================================================
SERVER CONFIGURATION
=============================================================================

Centralized configuration for the server.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                    CONFIGURATION HIERARCHY                          │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   Priority (highest to lowest):                                     │
    │                                                                      │
    │   1. Command-line arguments                                         │
    │      └── python -m tinyhttpd --port 3000                           │
    │                                                                      │
    │   2. Environment variables                                          │
    │      └── HTTP_PORT=3000 python -m tinyhttpd                        │
    │                                                                      │
    │   3. Default values (in this dataclass)                            │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

Configuration is validated once, when the server is constructed, so a bad
port or a missing content root fails at startup rather than on the first
request.

=============================================================================
"""

import os
from dataclasses import dataclass
from typing import Optional

from .http.mime_types import CONTENT_TYPE_TABLES
from .http.status_codes import HTTPStatus


_TRUE_VALUES = {"1", "true", "yes", "on"}


def _env_int(name: str, default: Optional[int]) -> Optional[int]:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    return int(value)


def _env_float(name: str, default: Optional[float]) -> Optional[float]:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    return float(value)


@dataclass
class ServerConfig:
    """
    Configuration for the HTTP server.

    =========================================================================
    CONFIGURATION GROUPS
    =========================================================================

    NETWORK SETTINGS
    - host, port, backlog, buffer_size, timeout, max_line_size

    CONTENT
    - content_root, content_types, index_file, strict_errors

    LIFECYCLE
    - max_connections

    FAULT INJECTION
    - fault_status, fault_every, fault_probability, fault_seed

    LOGGING
    - log_level

    =========================================================================
    """

    # ─────────────────────────────────────────────────────────────────────
    # NETWORK SETTINGS
    # ─────────────────────────────────────────────────────────────────────

    host: str = "127.0.0.1"
    """
    The IP address to bind to.
    - "127.0.0.1" - Localhost only (development)
    - "0.0.0.0" - All network interfaces
    """

    port: int = 8080
    """The port to listen on. 0 lets the OS pick a free port."""

    backlog: int = 16
    """
    Maximum number of queued connections.
    Connections wait here while the single handler is busy.
    """

    buffer_size: int = 4096
    """Bytes read per recv() call."""

    timeout: Optional[float] = 10.0
    """
    Seconds to wait for a client to send its request line.
    None = wait forever. A client that never sends a line then blocks
    the whole server, so leave this set.
    """

    max_line_size: int = 8192
    """Longest request line accepted, in bytes. Longer lines get 400."""

    # ─────────────────────────────────────────────────────────────────────
    # CONTENT
    # ─────────────────────────────────────────────────────────────────────

    content_root: str = "./content"
    """Directory that request paths are resolved against."""

    content_types: str = "extended"
    """
    Content type table: "extended" (html, css, txt, jpg, jpeg, png)
    or "basic" (html, txt).
    """

    index_file: str = "index.html"
    """File served when a directory is requested."""

    strict_errors: bool = False
    """
    How read failures and unsupported extensions are answered.
    False = bare 200 with no body (the long-standing behaviour).
    True  = 500 Internal Server Error.
    """

    # ─────────────────────────────────────────────────────────────────────
    # LIFECYCLE
    # ─────────────────────────────────────────────────────────────────────

    max_connections: Optional[int] = None
    """
    Stop after accepting this many connections.
    None = run until interrupted. 11 reproduces the demo mode.
    """

    # ─────────────────────────────────────────────────────────────────────
    # FAULT INJECTION
    # ─────────────────────────────────────────────────────────────────────

    fault_status: int = int(HTTPStatus.IM_A_TEAPOT)
    """Status sent when a fault fires."""

    fault_every: Optional[int] = None
    """Override every Nth response. None = off."""

    fault_probability: float = 0.0
    """Probability of overriding any single response. 0 = off."""

    fault_seed: Optional[int] = None
    """Seed for the probabilistic injector, for reproducible runs."""

    # ─────────────────────────────────────────────────────────────────────
    # LOGGING
    # ─────────────────────────────────────────────────────────────────────

    log_level: str = "INFO"
    """Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)."""

    server_name: str = "tinyhttpd/1.0"
    """Shown in the startup banner."""

    @classmethod
    def from_env(cls) -> "ServerConfig":
        """
        Create configuration from environment variables.

        =====================================================================
        ENVIRONMENT VARIABLES
        =====================================================================

        HTTP_HOST               Server host (default: 127.0.0.1)
        HTTP_PORT               Server port (default: 8080)
        HTTP_TIMEOUT            Request line timeout in seconds (default: 10)
        HTTP_CONTENT_ROOT       Content directory (default: ./content)
        HTTP_CONTENT_TYPES      "extended" or "basic" (default: extended)
        HTTP_MAX_CONNECTIONS    Stop after N connections (default: unlimited)
        HTTP_STRICT_ERRORS      "1"/"true" to answer failures with 500
        HTTP_FAULT_EVERY        Override every Nth response
        HTTP_FAULT_PROBABILITY  Override probability per response
        HTTP_LOG_LEVEL          Logging level (default: INFO)

        =====================================================================
        """
        defaults = cls()
        return cls(
            host=os.getenv("HTTP_HOST", defaults.host),
            port=_env_int("HTTP_PORT", defaults.port),
            timeout=_env_float("HTTP_TIMEOUT", defaults.timeout),
            content_root=os.getenv("HTTP_CONTENT_ROOT", defaults.content_root),
            content_types=os.getenv("HTTP_CONTENT_TYPES", defaults.content_types),
            max_connections=_env_int("HTTP_MAX_CONNECTIONS", defaults.max_connections),
            strict_errors=os.getenv("HTTP_STRICT_ERRORS", "").lower() in _TRUE_VALUES,
            fault_every=_env_int("HTTP_FAULT_EVERY", defaults.fault_every),
            fault_probability=_env_float("HTTP_FAULT_PROBABILITY", defaults.fault_probability),
            log_level=os.getenv("HTTP_LOG_LEVEL", defaults.log_level),
        )

    def validate(self) -> None:
        """
        Validate configuration values.

        Raises:
            ValueError: On the first invalid setting.
        """
        if not 0 <= self.port < 65536:
            raise ValueError(f"Invalid port: {self.port}. Must be 0-65535.")

        if self.backlog < 1:
            raise ValueError("backlog must be >= 1")

        if self.buffer_size < 1:
            raise ValueError("buffer_size must be >= 1")

        if self.max_line_size < 1:
            raise ValueError("max_line_size must be >= 1")

        if self.timeout is not None and self.timeout <= 0:
            raise ValueError("timeout must be > 0")

        if self.content_types not in CONTENT_TYPE_TABLES:
            raise ValueError(f"Unknown content_types: {self.content_types!r}")

        if not os.path.isdir(self.content_root):
            raise ValueError(f"Content root does not exist: {self.content_root}")

        if self.max_connections is not None and self.max_connections < 1:
            raise ValueError("max_connections must be >= 1")

        if self.fault_status not in [status.value for status in HTTPStatus]:
            raise ValueError(f"Unknown fault_status: {self.fault_status}")

        if self.fault_every is not None and self.fault_every < 1:
            raise ValueError("fault_every must be >= 1")

        if not 0.0 <= self.fault_probability <= 1.0:
            raise ValueError("fault_probability must be within [0, 1]")
