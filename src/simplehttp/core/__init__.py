"""
Transport-facing building blocks.

    connection.py  HttpConnection - one exchange over urllib.request
    tls.py         SSLContext construction from ClientConfig
    streams.py     Byte/char copying helpers
"""

from .connection import ConnectionState, HttpConnection, RequestBodyBuffer
from .streams import copy_stream, copy_text, read_all
from .tls import create_ssl_context, trust_all_hostnames

__all__ = [
    "ConnectionState",
    "HttpConnection",
    "RequestBodyBuffer",
    "copy_stream",
    "copy_text",
    "read_all",
    "create_ssl_context",
    "trust_all_hostnames",
]
