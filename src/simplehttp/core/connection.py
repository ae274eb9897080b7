"""
=============================================================================
LIVE CONNECTION
=============================================================================

HttpConnection is one HTTP exchange on top of Python's urllib.request
machinery (sockets, TLS, redirect following, proxies from the environment).
It exposes the small, explicit lifecycle the rest of the client is written
against.

=============================================================================
CONNECTION STATE MACHINE
=============================================================================

    CONFIGURED ──connect()──► CONNECTED ──transmit──► TRANSMITTED ──┐
        │                         │                                  │
        │   set method/headers    │   body may still be written      │
        │   body may be written   │                                  ▼
        │                         │                               CLOSED
        └─────────────────────────┴──────── disconnect() ──────────►  ▲
                                                                     │
    TRANSMITTED = status, headers and a body stream are available ───┘

connect() does not put anything on the wire. The request goes out the first
time the status, a header or the body is asked for (get_response_code(),
get_header_field(), get_input_stream()). That first access is the only
transmission; every later call reads the stored outcome.

=============================================================================
SUCCESS STREAM VS ERROR STREAM
=============================================================================

    status < 400   get_input_stream() → body      get_error_stream() → None
    status >= 400  get_input_stream() → raises    get_error_stream() → body
                   ResponseStatusError

Redirects (301/302/303/307/308) are followed during transmission, so the
status and headers seen afterwards belong to the final response. A 3xx that
is not followed (300, 304, a 307 answering a POST) is returned as is and
reads like any other status below 400.

=============================================================================
REQUEST BODY
=============================================================================

get_output_stream() hands out an in-memory buffer. Whatever has been
written to it when the request is transmitted becomes the body, sent with
a Content-Length. Closing the buffer is allowed and keeps its contents.

=============================================================================
"""

import io
import logging
import ssl
import urllib.request
import uuid
from dataclasses import dataclass, field
from enum import Enum
from http.client import HTTPResponse
from typing import Any, BinaryIO, Dict, List, Optional
from urllib.error import HTTPError
from urllib.parse import urlsplit

from ..errors import ConnectionStateError, ResponseStatusError


logger = logging.getLogger(__name__)


class ConnectionState(Enum):
    """Lifecycle states of an HttpConnection."""
    CONFIGURED = "configured"    # Created, method/headers/body can be set
    CONNECTED = "connected"      # connect() called, nothing sent yet
    TRANSMITTED = "transmitted"  # Request sent, response status known
    CLOSED = "closed"            # disconnect() called, resources released


class RequestBodyBuffer(io.BytesIO):
    """In-memory request body that keeps its bytes after close()."""

    _payload_at_close: Optional[bytes] = None

    def close(self) -> None:
        if not self.closed:
            self._payload_at_close = self.getvalue()
        super().close()

    def payload(self) -> bytes:
        if self.closed:
            return self._payload_at_close or b""
        return self.getvalue()


@dataclass
class HttpConnection:
    """
    One request/response exchange with an HTTP server.

    Attributes:
        url: Absolute request URL.
        method: HTTP method (GET, POST, PUT, DELETE, ...).
        do_input: Whether the response body may be read.
        do_output: Whether a request body may be written.
        use_caches: False adds no-cache request headers.
        connect_timeout: Connect timeout in ms (0 = none).
        read_timeout: Read timeout in ms (0 = none).
        ssl_context: TLS context for https URLs (None = platform default).
        id: Short identifier used in log lines.
        state: Current ConnectionState.
        transmissions: How many times the request went on the wire (0 or 1).
    """

    url: str
    method: str = "GET"
    do_input: bool = True
    do_output: bool = False
    use_caches: bool = True
    connect_timeout: int = 0
    read_timeout: int = 0
    ssl_context: Optional[ssl.SSLContext] = None

    id: str = field(default_factory=lambda: str(uuid.uuid4())[:8])
    state: ConnectionState = ConnectionState.CONFIGURED
    transmissions: int = 0

    _request_headers: Dict[str, str] = field(default_factory=dict, repr=False)
    _body: Optional[RequestBodyBuffer] = field(default=None, repr=False)
    _response: Any = field(default=None, repr=False)
    _failure: Optional[HTTPError] = field(default=None, repr=False)
    _transport_error: Optional[OSError] = field(default=None, repr=False)

    # =========================================================================
    # PROPERTIES
    # =========================================================================

    @property
    def is_https(self) -> bool:
        return urlsplit(self.url).scheme.lower() == "https"

    @property
    def request_headers(self) -> Dict[str, str]:
        """Copy of the request headers set so far."""
        return dict(self._request_headers)

    @property
    def response_url(self) -> str:
        """URL of the final response (differs from url after a redirect)."""
        self._transmit()
        return self._response.url if self._failure is None else self._failure.url

    # =========================================================================
    # CONFIGURATION (before transmission)
    # =========================================================================

    def set_request_method(self, method: str) -> None:
        self._require_state("set the request method", ConnectionState.CONFIGURED)
        self.method = method.upper()

    def set_request_property(self, key: str, value: str) -> None:
        """Set a request header, replacing any value with the same name."""
        self._require_state(
            "set request headers",
            ConnectionState.CONFIGURED,
            ConnectionState.CONNECTED,
        )
        for existing in list(self._request_headers):
            if existing.lower() == key.lower():
                del self._request_headers[existing]
        self._request_headers[key] = value

    def get_request_property(self, key: str) -> Optional[str]:
        for name, value in self._request_headers.items():
            if name.lower() == key.lower():
                return value
        return None

    def get_output_stream(self) -> BinaryIO:
        """
        Get the buffer the request body is written to.

        Raises:
            ConnectionStateError: If output is disabled or the request
                                  was already sent.
        """
        if not self.do_output:
            raise ConnectionStateError(
                f"[{self.id}] Cannot write a request body when do_output is False"
            )
        self._require_state(
            "write the request body",
            ConnectionState.CONFIGURED,
            ConnectionState.CONNECTED,
        )
        if self._body is None:
            self._body = RequestBodyBuffer()
        return self._body

    def connect(self) -> None:
        """Mark the connection as opened. Does not send the request."""
        if self.state == ConnectionState.CONFIGURED:
            self.state = ConnectionState.CONNECTED
            logger.debug(f"[{self.id}] Connected {self.method} {self.url}")

    # =========================================================================
    # RESPONSE ACCESS (transmits on first use)
    # =========================================================================

    def get_response_code(self) -> int:
        self._transmit()
        if self._failure is not None:
            return self._failure.code
        return self._response.status

    def get_response_message(self) -> str:
        self._transmit()
        if self._failure is not None:
            return str(self._failure.reason)
        return self._response.reason

    def get_input_stream(self) -> BinaryIO:
        """
        Get the response body of an exchange with a status below 400.

        Raises:
            ResponseStatusError: If the status is >= 400.
            OSError: If the request could not be transmitted.
        """
        if not self.do_input:
            raise ConnectionStateError(
                f"[{self.id}] Cannot read the response when do_input is False"
            )
        self._transmit()
        if self._failure is None:
            return self._response
        if self._failure.code >= 400:
            raise ResponseStatusError(self._failure.code, self.url, str(self._failure.reason))
        # 3xx urllib did not follow (304, 300, 307 after POST) is a plain response
        return self._failure

    def get_error_stream(self) -> Optional[BinaryIO]:
        """
        Get the response body of a failed (>= 400) exchange.

        Returns None when the request has not been sent or the status is
        below 400. Never transmits.
        """
        if self.state != ConnectionState.TRANSMITTED or self._failure is None:
            return None
        if self._failure.code < 400:
            return None
        return self._failure.fp

    def get_header_field(self, name: str) -> Optional[str]:
        """Response header value by case-insensitive name, or None."""
        headers = self._response_headers()
        if headers is None:
            return None
        return headers.get(name)

    def get_header_fields(self) -> Dict[str, List[str]]:
        """All response headers, each name mapped to its list of values."""
        headers = self._response_headers()
        fields: Dict[str, List[str]] = {}
        if headers is None:
            return fields
        for name, value in headers.items():
            fields.setdefault(name, []).append(value)
        return fields

    # =========================================================================
    # TEARDOWN
    # =========================================================================

    def disconnect(self) -> None:
        """Release the socket. Safe to call more than once."""
        if self.state == ConnectionState.CLOSED:
            return

        if self._failure is not None:
            if self._failure.fp is not None:
                self._failure.close()
        elif self._response is not None:
            self._response.close()
        if self._body is not None:
            self._body.close()

        self.state = ConnectionState.CLOSED
        logger.debug(f"[{self.id}] Disconnected after {self.transmissions} transmission(s)")

    def __enter__(self) -> "HttpConnection":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.disconnect()
        return False

    # =========================================================================
    # INTERNALS
    # =========================================================================

    def _require_state(self, action: str, *allowed: ConnectionState) -> None:
        if self.state not in allowed:
            raise ConnectionStateError(
                f"[{self.id}] Cannot {action} in state {self.state.value}"
            )

    def _response_headers(self):
        try:
            self._transmit()
        except OSError:
            return None
        if self._failure is not None:
            return self._failure.headers
        return self._response.headers

    def _has_request_header(self, name: str) -> bool:
        return self.get_request_property(name) is not None

    def _timeout_seconds(self) -> Optional[float]:
        # urllib applies a single socket timeout to connect and read
        timeout_ms = self.read_timeout or self.connect_timeout
        return timeout_ms / 1000.0 if timeout_ms > 0 else None

    def _build_request(self) -> urllib.request.Request:
        headers = dict(self._request_headers)
        if not self.use_caches:
            if not self._has_request_header("Cache-Control"):
                headers["Cache-Control"] = "no-cache"
            if not self._has_request_header("Pragma"):
                headers["Pragma"] = "no-cache"

        data = self._body.payload() if self._body is not None else None
        return urllib.request.Request(self.url, data=data, headers=headers, method=self.method)

    def _build_opener(self) -> urllib.request.OpenerDirector:
        if self.ssl_context is not None and self.is_https:
            return urllib.request.build_opener(
                urllib.request.HTTPSHandler(context=self.ssl_context)
            )
        return urllib.request.build_opener()

    def _transmit(self) -> None:
        """Send the request unless that already happened."""
        if self.state == ConnectionState.TRANSMITTED:
            return
        if self.state == ConnectionState.CLOSED:
            raise ConnectionStateError(f"[{self.id}] Connection is closed")
        if self._transport_error is not None:
            raise self._transport_error

        request = self._build_request()
        opener = self._build_opener()
        timeout = self._timeout_seconds()

        try:
            response: HTTPResponse = opener.open(request, timeout=timeout)
        except HTTPError as error:
            # urllib raises for every status it does not handle itself, 3xx
            # included; it is still a response
            self._failure = error
        except OSError as error:
            self._transport_error = error
            raise
        else:
            self._response = response

        self.transmissions += 1
        self.state = ConnectionState.TRANSMITTED
        logger.debug(
            f"[{self.id}] {self.method} {self.url} -> {self.get_response_code()}"
        )
