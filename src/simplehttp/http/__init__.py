"""
=============================================================================
HTTP MESSAGE HELPERS
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │ RESPONSE (response.py)                                              │
    │ ─────────────────────────────────────────────────────────────────── │
    │ Reads what the server sent: status, headers, body                   │
    │   • read_entity(reader) for typed bodies                            │
    │   • copy_to_stream(out), charset-aware for text/plain               │
    │   • error bodies folded into the raised OSError                     │
    └─────────────────────────────────────────────────────────────────────┘

    ┌─────────────────────────────────────────────────────────────────────┐
    │ ENTITIES (entity.py)                                                │
    │ ─────────────────────────────────────────────────────────────────── │
    │ Callables converting bodies to values and back                      │
    │   • StringEntityReader, BytesEntityReader, JsonEntityReader         │
    │   • BytesEntityWriter, StringEntityWriter, JsonEntityWriter         │
    └─────────────────────────────────────────────────────────────────────┘

    ┌─────────────────────────────────────────────────────────────────────┐
    │ HEADERS (headers.py)                                                │
    │ ─────────────────────────────────────────────────────────────────── │
    │ Basic auth values, Content-Type parameters, charset selection       │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
"""

from .entity import (
    EntityReader,
    EntityWriter,
    StringEntityReader,
    BytesEntityReader,
    JsonEntityReader,
    BytesEntityWriter,
    StringEntityWriter,
    JsonEntityWriter,
)
from .headers import (
    build_basic_auth_header_value,
    parse_header_parameter,
    parse_media_type,
)
from .response import Response

__all__ = [
    # Response
    "Response",

    # Entity readers/writers
    "EntityReader",
    "EntityWriter",
    "StringEntityReader",
    "BytesEntityReader",
    "JsonEntityReader",
    "BytesEntityWriter",
    "StringEntityWriter",
    "JsonEntityWriter",

    # Header helpers
    "build_basic_auth_header_value",
    "parse_header_parameter",
    "parse_media_type",
]
