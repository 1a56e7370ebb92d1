"""
=============================================================================
TINYHTTPD CLI ENTRY POINT
=============================================================================

    # Serve ./content on localhost:8080
    python -m tinyhttpd

    # Different directory and port
    python -m tinyhttpd --root ./public --port 3000

    # Stop after 11 connections
    python -m tinyhttpd --max-connections 11

    # Answer every 100th response with 418 I'm a Teapot
    python -m tinyhttpd --teapot-every 100

    # Answer read failures with 500 instead of an empty 200
    python -m tinyhttpd --strict

Settings not given on the command line fall back to HTTP_* environment
variables (see ServerConfig.from_env), then to defaults.

=============================================================================
"""

import argparse
import sys

from . import __version__
from .config import ServerConfig
from .http.mime_types import CONTENT_TYPE_TABLES
from .server import HTTPServer


def build_parser() -> argparse.ArgumentParser:
    """Build the command-line argument parser."""
    parser = argparse.ArgumentParser(
        prog="tinyhttpd",
        description="Single-threaded HTTP/1.1 static file server",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m tinyhttpd                           # Serve ./content on :8080
  python -m tinyhttpd --root ./public -p 3000   # Custom root and port
  python -m tinyhttpd --max-connections 11      # Exit after 11 connections
  python -m tinyhttpd --teapot-every 100        # 418 on every 100th response
        """
    )

    # ─────────────────────────────────────────────────────────────────────
    # NETWORK ARGUMENTS
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--host", "-H",
        default=None,
        help="Host to bind to (default: 127.0.0.1)"
    )

    parser.add_argument(
        "--port", "-p",
        type=int,
        default=None,
        help="Port to listen on (default: 8080)"
    )

    parser.add_argument(
        "--timeout", "-t",
        type=float,
        default=None,
        help="Seconds to wait for a request line (default: 10)"
    )

    # ─────────────────────────────────────────────────────────────────────
    # CONTENT ARGUMENTS
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--root", "-r",
        default=None,
        help="Directory to serve files from (default: ./content)"
    )

    parser.add_argument(
        "--content-types",
        choices=sorted(CONTENT_TYPE_TABLES),
        default=None,
        help="Content type table (default: extended)"
    )

    parser.add_argument(
        "--strict",
        action="store_true",
        default=None,
        help="Answer read failures and unknown extensions with 500"
    )

    # ─────────────────────────────────────────────────────────────────────
    # LIFECYCLE ARGUMENTS
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--max-connections", "-n",
        type=int,
        default=None,
        help="Stop after this many connections (default: run forever)"
    )

    # ─────────────────────────────────────────────────────────────────────
    # FAULT INJECTION ARGUMENTS
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--teapot-every",
        type=int,
        default=None,
        metavar="N",
        help="Replace every Nth response with 418 I'm a Teapot"
    )

    parser.add_argument(
        "--teapot-probability",
        type=float,
        default=None,
        metavar="P",
        help="Replace each response with 418 with probability P"
    )

    parser.add_argument(
        "--fault-seed",
        type=int,
        default=None,
        help="Seed for --teapot-probability"
    )

    # ─────────────────────────────────────────────────────────────────────
    # META ARGUMENTS
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--log-level", "-l",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="Logging level (default: INFO)"
    )

    parser.add_argument(
        "--version", "-v",
        action="version",
        version=f"tinyhttpd {__version__}"
    )

    return parser


# CLI flag → ServerConfig field
_OVERRIDES = {
    "host": "host",
    "port": "port",
    "timeout": "timeout",
    "root": "content_root",
    "content_types": "content_types",
    "strict": "strict_errors",
    "max_connections": "max_connections",
    "teapot_every": "fault_every",
    "teapot_probability": "fault_probability",
    "fault_seed": "fault_seed",
    "log_level": "log_level",
}


def config_from_args(args: argparse.Namespace) -> ServerConfig:
    """Environment config with any CLI flags that were given applied on top."""
    config = ServerConfig.from_env()
    for arg_name, field_name in _OVERRIDES.items():
        value = getattr(args, arg_name)
        if value is not None:
            setattr(config, field_name, value)
    return config


def main(argv=None) -> int:
    """
    Main CLI entry point.

    Returns:
        Process exit status.
    """
    args = build_parser().parse_args(argv)
    config = config_from_args(args)

    try:
        server = HTTPServer(config)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    server.print_startup_banner()

    try:
        server.run()
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
