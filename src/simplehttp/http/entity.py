"""
=============================================================================
ENTITY READERS AND WRITERS
=============================================================================

An entity is the typed value carried in a message body. Converting between
bytes and that value is left to small callables supplied by the caller:

    EntityReader[T]:  (stream: BinaryIO) -> T       response body → value
    EntityWriter:     (stream: BinaryIO) -> None    value → request body

Any function or object with __call__ fits. Nothing here has to be
subclassed:

    lines = client.get().read_entity(StringEntityReader())
    data = client.get().read_entity(lambda stream: stream.read())
    client.post(JsonEntityWriter({"name": "alice"}))

Readers and writers own their own (de)serialization errors; the client
passes whatever they raise straight through.

=============================================================================
"""

import json
from typing import Any, BinaryIO, Callable, List, Optional, TypeVar

from ..core.streams import read_all


T = TypeVar("T")

EntityReader = Callable[[BinaryIO], T]
EntityWriter = Callable[[BinaryIO], None]


# =============================================================================
# READERS
# =============================================================================

class StringEntityReader:
    """
    Read a body as text, one list item per line.

    Line terminators (\\n, \\r\\n, \\r) are stripped. A None stream (no body
    at all) reads as an empty list.
    """

    def __init__(self, encoding: str = "utf-8", errors: str = "replace"):
        self.encoding = encoding
        self.errors = errors

    def __call__(self, stream: Optional[BinaryIO]) -> List[str]:
        return self.read_entity(stream)

    def read_entity(self, stream: Optional[BinaryIO]) -> List[str]:
        if stream is None:
            return []
        try:
            text = stream.read().decode(self.encoding, self.errors)
        finally:
            stream.close()
        return text.splitlines()


class BytesEntityReader:
    """Read the whole body as bytes."""

    def __call__(self, stream: BinaryIO) -> bytes:
        return read_all(stream)


class JsonEntityReader:
    """Parse the body as JSON."""

    def __init__(self, encoding: str = "utf-8", **loads_kwargs: Any):
        self.encoding = encoding
        self.loads_kwargs = loads_kwargs

    def __call__(self, stream: BinaryIO) -> Any:
        try:
            raw = stream.read()
        finally:
            stream.close()
        return json.loads(raw.decode(self.encoding), **self.loads_kwargs)


# =============================================================================
# WRITERS
# =============================================================================
#
# Writers put bytes on the stream and nothing else. Setting a matching
# Content-Type header is the caller's job:
#
#     client.header("Content-Type", "application/json").post(JsonEntityWriter(doc))
#

class BytesEntityWriter:
    """Write raw bytes."""

    def __init__(self, data: bytes):
        self.data = data

    def __call__(self, stream: BinaryIO) -> None:
        stream.write(self.data)


class StringEntityWriter:
    """Write text in the given encoding."""

    def __init__(self, text: str, encoding: str = "utf-8"):
        self.text = text
        self.encoding = encoding

    def __call__(self, stream: BinaryIO) -> None:
        stream.write(self.text.encode(self.encoding))


class JsonEntityWriter:
    """Write a value as compact UTF-8 JSON."""

    def __init__(self, value: Any, **dumps_kwargs: Any):
        self.value = value
        self.dumps_kwargs = dumps_kwargs
        self.dumps_kwargs.setdefault("separators", (",", ":"))

    def __call__(self, stream: BinaryIO) -> None:
        stream.write(json.dumps(self.value, **self.dumps_kwargs).encode("utf-8"))
