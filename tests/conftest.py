"""
pytest configuration and fixtures.
"""

import io
import json
import socket
import threading
import time
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Dict, Generator, List, Optional
from urllib.parse import urlsplit
import pytest

# Add src to path for imports
import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from simplehttp.errors import ResponseStatusError


# =============================================================================
# LOCAL HTTP SERVER
# =============================================================================

class _RecordingHandler(BaseHTTPRequestHandler):
    """
    Routes used by the tests.

    Unknown paths echo the request back as JSON.
    """

    server_version = "SimpleHttpTest/1.0"

    def log_message(self, format, *args):
        pass  # keep test output clean

    def _send(self, status: int, body: bytes = b"", content_type: Optional[str] = "text/plain",
              headers: Optional[Dict[str, str]] = None):
        self.send_response(status)
        if content_type:
            self.send_header("Content-Type", content_type)
        for name, value in (headers or {}).items():
            self.send_header(name, value)
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        if body:
            self.wfile.write(body)

    def _read_body(self) -> bytes:
        length = int(self.headers.get("Content-Length") or 0)
        return self.rfile.read(length) if length else b""

    def _route(self):
        self.server.hits.append(f"{self.command} {self.path}")
        body = self._read_body()
        path = urlsplit(self.path).path

        if path == "/latin1":
            self._send(200, "café".encode("iso-8859-1"), "text/plain; charset=ISO-8859-1")
        elif path == "/utf8":
            self._send(200, "café".encode("utf-8"), "text/plain")
        elif path == "/binary":
            self._send(200, bytes(range(256)), "application/octet-stream")
        elif path == "/lines":
            self._send(200, b"one\r\ntwo\nthree\n", "text/plain; charset=utf-8")
        elif path == "/bad":
            self._send(400, b"bad request")
        elif path == "/empty-error":
            self._send(500, b"")
        elif path == "/redirect":
            self._send(302, b"", headers={"Location": "/latin1"})
        elif path == "/not-modified":
            self._send(304, b"", content_type=None, headers={"ETag": '"v1"'})
        elif path == "/choices":
            self._send(300, b"pick one")
        elif path == "/moved":
            # urllib only follows a 307 for GET and HEAD
            self._send(307, b"moved", headers={"Location": "/latin1"})
        elif path == "/slow":
            time.sleep(1.0)
            self._send(200, b"late")
        else:
            echo = {
                "method": self.command,
                "path": self.path,
                "headers": {name.lower(): value for name, value in self.headers.items()},
                "body": body.decode("utf-8"),
            }
            self._send(200, json.dumps(echo).encode("utf-8"), "application/json",
                       headers={"X-Echo": "yes"})

    do_GET = _route
    do_POST = _route
    do_PUT = _route
    do_DELETE = _route


class LocalServer:
    """Test server helper that runs in a background thread."""

    def __init__(self):
        self.httpd = ThreadingHTTPServer(("127.0.0.1", 0), _RecordingHandler)
        self.httpd.daemon_threads = True
        self.httpd.hits = []
        self.port = self.httpd.server_address[1]
        self._thread: Optional[threading.Thread] = None

    @property
    def target(self) -> str:
        return f"http://127.0.0.1:{self.port}"

    @property
    def hits(self) -> List[str]:
        return self.httpd.hits

    def start(self):
        """Start server in background thread."""
        self._thread = threading.Thread(target=self.httpd.serve_forever, daemon=True)
        self._thread.start()

    def stop(self):
        """Stop the server."""
        self.httpd.shutdown()
        self.httpd.server_close()
        if self._thread and self._thread.is_alive():
            self._thread.join(timeout=5.0)


@pytest.fixture
def local_server() -> Generator[LocalServer, None, None]:
    """A running local HTTP server."""
    server = LocalServer()
    server.start()

    yield server

    server.stop()


@pytest.fixture
def free_port() -> int:
    """A port nothing is listening on."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(("127.0.0.1", 0))
        return s.getsockname()[1]


# =============================================================================
# IN-MEMORY CONNECTION
# =============================================================================

class FakeConnection:
    """
    Stand-in for HttpConnection with canned status, headers and bodies.

    Records the order in which the body and the headers were asked for.
    """

    def __init__(self, status: int = 200, body: bytes = b"",
                 headers: Optional[Dict[str, str]] = None,
                 error: Optional[OSError] = None,
                 error_body: Optional[bytes] = None):
        self.status = status
        self.body = body
        self.headers = {name.lower(): value for name, value in (headers or {}).items()}
        self.error = error
        self.error_body = error_body
        self.calls: List[str] = []
        self.transmissions = 0
        self.disconnected = False
        self.last_stream: Optional[io.BytesIO] = None

    def _transmit(self):
        if self.transmissions == 0:
            self.transmissions += 1

    def get_response_code(self) -> int:
        self._transmit()
        return self.status

    def get_input_stream(self):
        self._transmit()
        self.calls.append("input_stream")
        if self.error is not None:
            raise self.error
        self.last_stream = io.BytesIO(self.body)
        return self.last_stream

    def get_error_stream(self):
        if self.error_body is None:
            return None
        return io.BytesIO(self.error_body)

    def get_header_field(self, name: str) -> Optional[str]:
        self._transmit()
        self.calls.append(f"header:{name}")
        return self.headers.get(name.lower())

    def get_header_fields(self) -> Dict[str, List[str]]:
        return {name: [value] for name, value in self.headers.items()}

    def disconnect(self):
        self.disconnected = True


@pytest.fixture
def make_connection():
    """Factory for FakeConnection instances."""
    return FakeConnection


@pytest.fixture
def status_error() -> ResponseStatusError:
    """The error a connection raises for the body of a 400 response."""
    return ResponseStatusError(400, "http://example.test/things", "Bad Request")
