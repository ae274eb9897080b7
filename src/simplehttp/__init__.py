"""
=============================================================================
SIMPLEHTTP - A Small Fluent HTTP Client
=============================================================================

Configure a target, path, headers and query params; call a verb; read the
response through a pluggable entity reader. Meant for simple
request/response exchanges where a full-blown HTTP library is more than
the job needs.

=============================================================================
PACKAGE STRUCTURE
=============================================================================

    simplehttp/
    ├── __init__.py          # This file - package exports
    ├── __main__.py          # CLI entry point (python -m simplehttp)
    ├── client.py            # SimpleHttpClient - fluent request builder
    ├── config.py            # ClientConfig dataclass (TLS, timeout)
    ├── errors.py            # Exception hierarchy
    ├── logging_utils.py     # CLI logging setup
    ├── core/                # Transport-facing components
    │   ├── connection.py    # HttpConnection over urllib.request
    │   ├── tls.py           # SSLContext construction
    │   └── streams.py       # Byte/char copying
    └── http/                # HTTP message components
        ├── response.py      # Response - status, headers, body
        ├── entity.py        # Entity readers and writers
        └── headers.py       # Basic auth, Content-Type parameters

=============================================================================
QUICK START
=============================================================================

    from simplehttp import SimpleHttpClient, StringEntityReader, JsonEntityWriter

    # GET, read lines, close
    lines = (SimpleHttpClient()
             .set_target("http://localhost:8080")
             .path("api")
             .path("health")
             .get_text_response())

    # POST JSON with basic auth
    client = (SimpleHttpClient()
              .set_target("https://api.example.com")
              .path("users")
              .set_basic_auth("alice:secret")
              .header("Content-Type", "application/json"))

    with client.post(JsonEntityWriter({"name": "bob"})) as response:
        print(response.get_response_code(), response.get_header("Location"))

=============================================================================
"""

__version__ = "1.0.0"

from .client import SimpleHttpClient
from .config import ClientConfig
from .errors import (
    SimpleHttpError,
    InvalidURLError,
    ResponseStatusError,
    ConnectionStateError,
)
from .http import (
    Response,
    StringEntityReader,
    BytesEntityReader,
    JsonEntityReader,
    BytesEntityWriter,
    StringEntityWriter,
    JsonEntityWriter,
)

__all__ = [
    "SimpleHttpClient",
    "ClientConfig",
    "Response",
    "StringEntityReader",
    "BytesEntityReader",
    "JsonEntityReader",
    "BytesEntityWriter",
    "StringEntityWriter",
    "JsonEntityWriter",
    "SimpleHttpError",
    "InvalidURLError",
    "ResponseStatusError",
    "ConnectionStateError",
    "__version__",
]
