"""
=============================================================================
HTTP RESPONSE
=============================================================================

Response wraps the HttpConnection of one verb call and is how a caller
reads what the server sent back.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                    READING A RESPONSE                               │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   Status / headers     get_response_code(), get_header("ETag")      │
    │                                                                      │
    │   Typed body           read_entity(StringEntityReader())            │
    │                        read_entity(JsonEntityReader())              │
    │                                                                      │
    │   Streamed body        copy_to_stream(sys.stdout.buffer)            │
    │                        text/plain → decoded with its charset        │
    │                        anything else → bytes as-is                  │
    │                                                                      │
    │   Raw stream           get_input_stream()                           │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
FAILED RESPONSES
=============================================================================

A 4xx/5xx status does not raise by itself; check get_response_code().
Asking for the body of such a response does raise, and the error text is
enriched with whatever the server put in the error body:

    OSError: Server returned HTTP response code: 400 for URL: http://...
             (Bad Request): ['{"error": "missing field name"}']

=============================================================================
LIFETIME
=============================================================================

A Response is only as good as its connection. It never closes the
connection by itself; use it as a context manager, or call disconnect():

    with client.get() as response:
        lines = response.read_entity(StringEntityReader())

=============================================================================
"""

import io
from typing import IO, BinaryIO, Dict, List, Optional, TypeVar, Union

from ..core.connection import HttpConnection
from ..core.streams import copy_stream, copy_text
from .entity import EntityReader, StringEntityReader
from .headers import CONTENT_TYPE, charset_of, is_plain_text

T = TypeVar("T")


class Response:
    """The response side of one HTTP exchange."""

    def __init__(self, connection: HttpConnection):
        self.connection = connection

    def __repr__(self) -> str:
        return f"Response(connection={self.connection!r})"

    # =========================================================================
    # BODY
    # =========================================================================

    def read_entity(self, entity_reader: EntityReader[T]) -> T:
        """
        Pass the response body stream to entity_reader and return its result.

        Args:
            entity_reader: Callable taking the body stream.

        Raises:
            OSError: If the body is unavailable (see get_input_stream).
        """
        return entity_reader(self.get_input_stream())

    def get_input_stream(self) -> BinaryIO:
        """
        The response body stream of the connection.

        Raises:
            OSError: The transport's error, enriched with the server's
                     error body when there is one.
        """
        try:
            return self.connection.get_input_stream()
        except OSError as error:
            self.handle_failure_response(error)
            raise

    def handle_failure_response(self, error: OSError) -> None:
        """
        Re-raise error, adding the connection's error body to the message.

        An empty (or absent) error body re-raises error unchanged. Otherwise
        a new OSError is raised whose message is the original message
        followed by the error body lines, chained to error.
        """
        error_response = StringEntityReader()(self.connection.get_error_stream())
        if not error_response:
            raise error

        raise OSError(f"{error}: {error_response}") from error

    def copy_to_stream(
        self,
        output_stream: Union[BinaryIO, IO[str]],
        encoding: str = "utf-8",
    ) -> None:
        """
        Write the response body to output_stream.

        A text/plain body is decoded with the charset from its Content-Type
        (UTF-8 when none is given). A binary output_stream then receives it
        re-encoded with encoding; a text output_stream receives the str.
        Every other body is copied byte for byte.

        The body stream is closed afterwards. output_stream is left open.
        """
        # The body stream is fetched before the headers are inspected. On a
        # redirect the transport follows it while producing the stream, and
        # only then do the headers describe the body that is actually read.
        response_stream = self.get_input_stream()

        content_type = self.get_header(CONTENT_TYPE)

        if is_plain_text(content_type):
            charset = charset_of(content_type)
            try:
                copy_text(response_stream, charset, output_stream, encoding)
            except LookupError as error:
                raise OSError(f"Unsupported charset: {charset}") from error
        else:
            if isinstance(output_stream, io.TextIOBase):
                if not hasattr(output_stream, "buffer"):
                    response_stream.close()
                    raise TypeError(
                        f"{content_type or 'untyped'} body needs a binary output stream"
                    )
                output_stream = output_stream.buffer
            copy_stream(response_stream, output_stream)

    # =========================================================================
    # STATUS AND HEADERS
    # =========================================================================

    def get_header(self, name: str) -> Optional[str]:
        """Response header value (case-insensitive name), or None."""
        return self.connection.get_header_field(name)

    def get_headers(self) -> Dict[str, List[str]]:
        return self.connection.get_header_fields()

    def get_response_code(self) -> int:
        """
        The HTTP status code.

        The first call (normally the flush() done by every verb) is what
        puts the request on the wire; later calls return the stored status.
        """
        return self.connection.get_response_code()

    def is_success(self) -> bool:
        return 200 <= self.get_response_code() < 300

    def flush(self) -> "Response":
        """Force the request to be sent by asking for the status. Returns self."""
        self.get_response_code()
        return self

    # =========================================================================
    # CONNECTION
    # =========================================================================

    def get_connection(self) -> HttpConnection:
        return self.connection

    def disconnect(self) -> None:
        self.connection.disconnect()

    def __enter__(self) -> "Response":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.disconnect()
        return False
