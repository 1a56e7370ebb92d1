"""
pytest configuration and fixtures.
"""

import socket
import threading
from pathlib import Path
from typing import Generator, List

import pytest

# Add src to path for imports
import sys
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from tinyhttpd import HTTPServer, ServerConfig


@pytest.fixture
def content_root(tmp_path: Path) -> Path:
    """
    A content directory laid out like a small site.

        content/
        ├── index.html        "hi"
        ├── notes.txt         "plain text"
        ├── style.css         "body {}"
        ├── style.weird       "???"
        ├── docs/
        │   └── index.html    "d"
        └── empty/
    """
    root = tmp_path / "content"
    root.mkdir()
    (root / "index.html").write_text("hi")
    (root / "notes.txt").write_text("plain text")
    (root / "style.css").write_text("body {}")
    (root / "style.weird").write_text("???")
    (root / "docs").mkdir()
    (root / "docs" / "index.html").write_text("d")
    (root / "empty").mkdir()
    (tmp_path / "secret.txt").write_text("top secret")
    return root


@pytest.fixture
def config(content_root: Path) -> ServerConfig:
    """Test server configuration on a free port."""
    return ServerConfig(
        host="127.0.0.1",
        port=0,  # Let OS pick a free port
        timeout=2.0,
        content_root=str(content_root),
        log_level="WARNING",
    )


class RecordingSink:
    """Stands in for a Connection, keeping whatever is sent."""

    def __init__(self, accept: bool = True):
        self.sent: List[bytes] = []
        self.accept = accept

    def send_response(self, data: bytes) -> bool:
        self.sent.append(data)
        return self.accept


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def failing_sink() -> RecordingSink:
    """A sink whose client has gone away."""
    return RecordingSink(accept=False)


class BackgroundServer:
    """Runs an HTTPServer in a background thread."""

    def __init__(self, server: HTTPServer):
        self.server = server
        self._thread: threading.Thread = None

    @property
    def port(self) -> int:
        return self.server.address[1]

    def start(self):
        self._thread = threading.Thread(
            target=self.server.run,
            kwargs={"setup_logging": False},
            daemon=True,
        )
        self._thread.start()
        if not self.server.wait_until_ready(timeout=5.0):
            raise RuntimeError("Server failed to start")

    def request(self, payload: bytes, close_write: bool = False) -> bytes:
        """Send raw bytes and read until the server closes the connection."""
        with socket.create_connection(("127.0.0.1", self.port), timeout=5.0) as s:
            if payload:
                s.sendall(payload)
            if close_write:
                s.shutdown(socket.SHUT_WR)
            chunks = []
            while True:
                chunk = s.recv(4096)
                if not chunk:
                    break
                chunks.append(chunk)
        return b"".join(chunks)

    def join(self, timeout: float = 5.0) -> bool:
        """Wait for the server thread to finish; True if it did."""
        self._thread.join(timeout=timeout)
        return not self._thread.is_alive()

    def stop(self):
        self.server.shutdown()
        if self._thread and self._thread.is_alive():
            self._thread.join(timeout=5.0)


@pytest.fixture
def test_server(config: ServerConfig) -> Generator[BackgroundServer, None, None]:
    """A running server over the content_root fixture."""
    srv = BackgroundServer(HTTPServer(config))
    srv.start()
    yield srv
    srv.stop()


@pytest.fixture
def start_server():
    """
    Factory for servers with custom settings.

        srv = start_server(HTTPServer(config))

    Every server started this way is stopped at teardown.
    """
    started = []

    def _start(server: HTTPServer) -> BackgroundServer:
        srv = BackgroundServer(server)
        srv.start()
        started.append(srv)
        return srv

    yield _start

    for srv in started:
        srv.stop()
