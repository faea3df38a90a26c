"""
Pytest configuration and shared fixtures for Gostman tests.
"""

import json
import socket
import tempfile
import threading
import time
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from pathlib import Path
from typing import Generator
from urllib.parse import parse_qsl, urlsplit

import pytest

from gostman.core.config import GostmanConfig
from gostman.core.models import RequestDefinition
from gostman.storage.json_store import JSONRequestStore


class EchoHandler(BaseHTTPRequestHandler):
    """
    Local HTTP peer.

    - ``/status/<code>`` answers with that status
    - ``/slow`` sleeps two seconds before answering
    - ``/truncated`` promises 100 bytes, sends 10 and drops the connection
    - anything else echoes the request back as JSON
    """

    protocol_version = "HTTP/1.1"

    def log_message(self, format, *args):
        pass

    def _read_body(self) -> str:
        length = int(self.headers.get("Content-Length") or 0)
        return self.rfile.read(length).decode("utf-8") if length else ""

    def _respond(self, status: int, payload: bytes, content_type: str) -> None:
        self.send_response(status)
        self.send_header("Content-Type", content_type)
        self.send_header("Content-Length", str(len(payload)))
        self.send_header("X-Echo", "1")
        self.end_headers()
        if self.command != "HEAD":
            self.wfile.write(payload)

    def _handle(self) -> None:
        body = self._read_body()
        parts = urlsplit(self.path)

        if parts.path.startswith("/status/"):
            self._respond(int(parts.path.rsplit("/", 1)[1]), b"status", "text/plain")
            return

        if parts.path == "/slow":
            time.sleep(2)
            self._respond(200, b"late", "text/plain")
            return

        if parts.path == "/truncated":
            self.send_response(200)
            self.send_header("Content-Type", "text/plain")
            self.send_header("Content-Length", "100")
            self.end_headers()
            self.wfile.write(b"0123456789")
            self.wfile.flush()
            self.close_connection = True
            return

        echo = {
            "method": self.command,
            "path": parts.path,
            "query": dict(parse_qsl(parts.query, keep_blank_values=True)),
            "headers": {key: value for key, value in self.headers.items()},
            "body": body,
        }
        self._respond(200, json.dumps(echo).encode("utf-8"), "application/json")

    do_GET = _handle
    do_POST = _handle
    do_PUT = _handle
    do_PATCH = _handle
    do_DELETE = _handle
    do_HEAD = _handle


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Provide a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as temp_dir:
        yield Path(temp_dir)


@pytest.fixture
def test_config(temp_dir: Path) -> GostmanConfig:
    """Provide a test configuration."""
    return GostmanConfig(
        debug=True,
        storage={"data_dir": str(temp_dir / "data")},
        executor={"timeout": 5},
        logging={"level": "DEBUG"},
    )


@pytest.fixture
def store(test_config: GostmanConfig) -> JSONRequestStore:
    """Provide a store on a fresh backing file."""
    return JSONRequestStore(test_config.store_path)


@pytest.fixture
def sample_definition() -> RequestDefinition:
    """Provide an unsaved request definition."""
    return RequestDefinition(
        name="List users",
        url="{{base_url}}/users",
        method="GET",
        headers='{"Accept": "application/json"}',
        query_params='{"page": "1"}',
    )


@pytest.fixture
def http_server() -> Generator[str, None, None]:
    """Run the echo peer on a free local port and yield its base URL."""
    server = ThreadingHTTPServer(("127.0.0.1", 0), EchoHandler)
    server.daemon_threads = True
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    try:
        yield f"http://127.0.0.1:{server.server_address[1]}"
    finally:
        server.shutdown()
        server.server_close()


@pytest.fixture
def closed_port_url() -> str:
    """URL of a local port with nothing listening."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        port = sock.getsockname()[1]
    return f"http://127.0.0.1:{port}"
