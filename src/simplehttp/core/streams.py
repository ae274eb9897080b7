"""
Byte and character copying between streams.

Both helpers close the source when done and leave the destination open.
"""

import codecs
import io
import shutil
from typing import BinaryIO, IO, Union


BUFFER_SIZE = 8192


def copy_stream(source: BinaryIO, destination: BinaryIO) -> int:
    """
    Copy raw bytes from source to destination.

    Returns:
        Number of bytes copied
    """
    copied = 0
    try:
        while True:
            chunk = source.read(BUFFER_SIZE)
            if not chunk:
                break
            destination.write(chunk)
            copied += len(chunk)
    finally:
        source.close()
    return copied


def copy_text(
    source: BinaryIO,
    source_encoding: str,
    destination: Union[IO[str], BinaryIO],
    destination_encoding: str = "utf-8",
) -> int:
    """
    Decode source with source_encoding and write the text to destination.

    A text destination receives the decoded str as-is. A binary destination
    receives it re-encoded with destination_encoding. The destination is
    flushed, never closed.

    Returns:
        Number of characters copied

    Raises:
        LookupError: If either encoding is unknown.
    """
    writes_text = isinstance(destination, io.TextIOBase)

    copied = 0
    try:
        decoder = codecs.getincrementaldecoder(source_encoding)()
        if not writes_text:
            codecs.lookup(destination_encoding)  # fail before reading anything

        while True:
            chunk = source.read(BUFFER_SIZE)
            # An empty chunk is EOF; final=True flushes any partial sequence
            text = decoder.decode(chunk, final=not chunk)
            if text:
                if writes_text:
                    destination.write(text)
                else:
                    destination.write(text.encode(destination_encoding))
                copied += len(text)
            if not chunk:
                break
    finally:
        source.close()

    destination.flush()
    return copied


def read_all(source: BinaryIO) -> bytes:
    """Read source to the end into memory and close it."""
    buffer = io.BytesIO()
    try:
        shutil.copyfileobj(source, buffer, BUFFER_SIZE)
    finally:
        source.close()
    return buffer.getvalue()
