"""
=============================================================================
SIMPLE HTTP CLIENT
=============================================================================

A very small HTTP client with a fluent API.

Send a GET to http://myhost:8080/my/uri/path and get the body back as a
list of lines:

    lines = (SimpleHttpClient()
             .set_target("http://myhost:8080")
             .path("my/uri")
             .path("path")
             .header("Accept", "text/plain")
             .get()
             .read_entity(StringEntityReader()))

=============================================================================
REQUEST PIPELINE
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                    ONE VERB CALL                                     │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   1. Resolve URL        target + path + ?query                      │
    │      │                  bad URL → InvalidURLError, nothing sent     │
    │      ▼                                                               │
    │   2. Open connection    method, no-cache, TLS context, timeouts     │
    │      ▼                                                               │
    │   3. Apply headers      every header(), incl. Authorization         │
    │      ▼                                                               │
    │   4. Write body         POST/PUT only, writer(output_stream)        │
    │      ▼                                                               │
    │   5. Connect + flush    asks for the status, which sends it         │
    │      ▼                                                               │
    │   Response              status known, body ready to be read         │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

Each verb call opens its own connection. The client keeps its target,
path, headers and query params, so it can be reused for the same resource;
it is not meant to be configured from several threads at once.

The returned Response owns an open connection. Close it with
response.disconnect() or a with-block. get_text_response() is the only
method that closes the connection for you.

=============================================================================
LIMITATIONS
=============================================================================

- One value per query parameter; setting a key again replaces it.
- No retries, no connection pooling, no cookies.

=============================================================================
"""

import logging
import re
import ssl
from typing import Dict, List, Optional
from urllib.parse import quote, urlsplit

from .config import ClientConfig
from .core.connection import HttpConnection
from .core.tls import create_ssl_context
from .errors import InvalidURLError
from .http.entity import EntityWriter, StringEntityReader
from .http.headers import AUTHORIZATION, build_basic_auth_header_value, is_empty
from .http.response import Response


logger = logging.getLogger(__name__)


SUPPORTED_SCHEMES = ("http", "https")

# Characters left alone when escaping. "%" is kept so values that are
# already escaped are not escaped twice.
PATH_SAFE = "/%:@!$&'()*+,;=~"
QUERY_SAFE = "%:@!$'()*,;/?~"

_FORBIDDEN_URL_CHARS = re.compile(r"[\x00-\x20\x7f]")


class SimpleHttpClient:
    """
    Fluent builder for one HTTP resource, plus the verbs that call it.

    Attributes:
        config: Environment-level options (TLS, default timeout).
    """

    def __init__(self, config: Optional[ClientConfig] = None):
        self.config = config or ClientConfig()
        self.config.validate()

        self._target: Optional[str] = None
        self._path: str = ""
        self._headers: Dict[str, str] = {}
        self._query_params: Dict[str, str] = {}
        self._timeout_ms: int = self.config.timeout_ms
        self._ssl_context: Optional[ssl.SSLContext] = None

    def __repr__(self) -> str:
        return f"SimpleHttpClient(target={self._target!r}, path={self._path!r})"

    # =========================================================================
    # TARGET AND PATH
    # =========================================================================

    def set_target(self, target: str) -> "SimpleHttpClient":
        """
        Set the target, e.g. "https://myhost:8443".

        Not validated until a verb is called.
        """
        self._target = target
        return self

    def get_target(self) -> Optional[str]:
        return self._target

    def path(self, append_path: str) -> "SimpleHttpClient":
        """
        Append a path segment.

        A "/" goes in front of every segment, and slashes around the
        segment are dropped, so path("a").path("/b/") gives "/a/b".
        Slashes inside a segment ("my/uri") are kept.
        """
        segment = append_path.strip("/")
        if segment:
            self._path += "/" + quote(segment, safe=PATH_SAFE)
        return self

    def get_path(self) -> str:
        return self._path

    # =========================================================================
    # HEADERS
    # =========================================================================

    def header(self, key: str, value: str) -> "SimpleHttpClient":
        """
        Set a request header, replacing an earlier value for key.

        Ignored when key or value is None or empty.
        """
        if not is_empty(key) and not is_empty(value):
            self._headers[key] = value
        return self

    def get_headers(self) -> Dict[str, str]:
        return dict(self._headers)

    def set_basic_auth(self, user_and_pass: Optional[str]) -> "SimpleHttpClient":
        """
        Set the Basic "Authorization" header.

        Args:
            user_and_pass: "{user}:{pass}". Ignored when None or empty.
        """
        if not is_empty(user_and_pass):
            self.header(AUTHORIZATION, build_basic_auth_header_value(user_and_pass))
        return self

    # =========================================================================
    # QUERY PARAMETERS
    # =========================================================================

    def query_param(self, key: str, value: str) -> "SimpleHttpClient":
        """
        Set a query parameter. One value per key; the last call wins.

        Ignored when key is None/empty or value is None.

        Keys and values are percent-escaped when the URL is built, except
        for "%" itself, so an already escaped value ("a%20b") goes out
        unchanged. A literal percent sign must therefore be passed escaped:
        query_param("discount", "100%25"), not "100%".
        """
        if not is_empty(key) and value is not None:
            self._query_params[key] = value
        return self

    def get_query_params(self) -> Dict[str, str]:
        return dict(self._query_params)

    def get_query_string(self) -> str:
        """
        The query string including its leading "?", or "" without params.

        Parameters appear in the order they were first set.
        """
        if not self._query_params:
            return ""
        pairs = (
            f"{quote(str(key), safe=QUERY_SAFE)}={quote(str(value), safe=QUERY_SAFE)}"
            for key, value in self._query_params.items()
        )
        return "?" + "&".join(pairs)

    # =========================================================================
    # TIMEOUT
    # =========================================================================

    def set_timeout(self, timeout_ms: int) -> "SimpleHttpClient":
        """Timeout in ms for both connecting and reading. 0 = no timeout."""
        if timeout_ms < 0:
            raise ValueError(f"timeout must be >= 0, got {timeout_ms}")
        self._timeout_ms = timeout_ms
        return self

    def get_timeout(self) -> int:
        return self._timeout_ms

    # =========================================================================
    # URL RESOLUTION
    # =========================================================================

    def get_url(self) -> str:
        """
        Build the full request URL: target + path + query string.

        Raises:
            InvalidURLError: If no target is set or the result is not a
                             usable http(s) URL.
        """
        if is_empty(self._target):
            raise InvalidURLError("No target set; call set_target() first")

        url = self._target + self._path + self.get_query_string()

        if _FORBIDDEN_URL_CHARS.search(url):
            raise InvalidURLError(f"URL contains whitespace or control characters: {url!r}", url)

        try:
            parts = urlsplit(url)
            parts.port  # raises ValueError for a non-numeric/out-of-range port
        except ValueError as error:
            raise InvalidURLError(f"Malformed URL {url!r}: {error}", url) from error

        if parts.scheme.lower() not in SUPPORTED_SCHEMES:
            raise InvalidURLError(f"Unsupported protocol in URL {url!r}", url)
        if not parts.hostname:
            raise InvalidURLError(f"No host in URL {url!r}", url)

        return url

    # =========================================================================
    # VERBS
    # =========================================================================

    def get(self) -> Response:
        """Send a GET request."""
        return self._execute("GET")

    def delete(self) -> Response:
        """Send a DELETE request."""
        return self._execute("DELETE")

    def post(self, entity_writer: Optional[EntityWriter] = None) -> Response:
        """
        Send a POST request.

        Args:
            entity_writer: Called with the request's output stream to write
                           the body. None sends no body.
        """
        return self.with_payload("POST", entity_writer)

    def put(self, entity_writer: Optional[EntityWriter] = None) -> Response:
        """
        Send a PUT request.

        Args:
            entity_writer: Called with the request's output stream to write
                           the body. None sends no body.
        """
        return self.with_payload("PUT", entity_writer)

    def get_text_response(self) -> List[str]:
        """
        GET the resource and return its body as lines of text.

        The connection is closed before returning, also on failure.
        """
        response = self.get()
        try:
            return response.read_entity(StringEntityReader())
        finally:
            response.disconnect()

    def with_payload(self, method: str, entity_writer: Optional[EntityWriter]) -> Response:
        """Shared by POST and PUT: the body is written before the request is sent."""
        connection = self.set_headers(self.get_connection(method))
        if entity_writer is not None:
            entity_writer(connection.get_output_stream())
        connection.connect()
        return Response(connection).flush()

    def _execute(self, method: str) -> Response:
        connection = self.set_headers(self.get_connection(method))
        connection.connect()
        return Response(connection).flush()

    # =========================================================================
    # CONNECTION SETUP
    # =========================================================================

    def set_headers(self, connection: HttpConnection) -> HttpConnection:
        """Copy every configured header onto connection."""
        for key, value in self._headers.items():
            connection.set_request_property(key, value)
        return connection

    def get_connection(self, request_method: str) -> HttpConnection:
        """
        Open a connection for request_method to the current URL.

        https connections get the TLS context built from the config:
        hostname verification off when disable_hostname_verification is set
        (INSECURE, trusted environments only), and the client certificate
        when client_cert is set.
        """
        url = self.get_url()

        connection = HttpConnection(url)
        connection.do_input = True
        connection.do_output = True
        connection.use_caches = False
        connection.set_request_method(request_method)

        if connection.is_https:
            connection.ssl_context = self._get_ssl_context()

        connection.connect_timeout = self._timeout_ms
        connection.read_timeout = self._timeout_ms

        logger.debug(f"[{connection.id}] Opened {request_method} {url}")
        return connection

    def _get_ssl_context(self) -> Optional[ssl.SSLContext]:
        if self._ssl_context is None:
            self._ssl_context = create_ssl_context(self.config)
        return self._ssl_context
