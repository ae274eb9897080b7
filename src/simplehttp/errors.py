"""
=============================================================================
CLIENT EXCEPTIONS
=============================================================================

Every failure in this package surfaces as an exception. Nothing is logged
and dropped.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                    EXCEPTION HIERARCHY                              │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   SimpleHttpError                                                    │
    │   ├── InvalidURLError        (also a ValueError)                     │
    │   │     Bad target/URL. Raised before any network I/O.               │
    │   ├── ResponseStatusError    (also an OSError)                       │
    │   │     Status >= 400 when the success body was requested.           │
    │   └── ConnectionStateError   (also a RuntimeError)                   │
    │         Connection used out of order (body after transmission).      │
    │                                                                      │
    │   Transport failures (refused, reset, timeout) are the transport's  │
    │   own OSError subclasses: URLError, TimeoutError, ...                │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

The mixed-in builtin bases let callers catch the broad category they
already know (``except OSError``) without importing anything from here.

=============================================================================
"""

from typing import Optional


class SimpleHttpError(Exception):
    """Base class for errors raised by simplehttp itself."""


class InvalidURLError(SimpleHttpError, ValueError):
    """
    Raised when the request URL cannot be built.

    Carries the offending URL (or None when no target was set).
    """

    def __init__(self, message: str, url: Optional[str] = None):
        super().__init__(message)
        self.url = url


class ResponseStatusError(SimpleHttpError, OSError):
    """
    Raised when the success-path body is requested for a failed response.

    Mirrors what most platform HTTP clients do on 4xx/5xx: the status is
    known, the body lives on the error stream instead.
    """

    def __init__(self, status_code: int, url: str, reason: str = ""):
        message = f"Server returned HTTP response code: {status_code} for URL: {url}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)
        self.status_code = status_code
        self.url = url
        self.reason = reason


class ConnectionStateError(SimpleHttpError, RuntimeError):
    """Raised when a connection operation is invalid in its current state."""
