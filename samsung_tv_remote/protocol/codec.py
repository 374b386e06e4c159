# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
Frame codec for the TV remote-control protocol.

Every message in either direction is a frame:

    [marker: 1 byte][app name length: u16 LE][app name][payload length: u16 LE][payload]

Variable length text fields inside payloads are base64 encoded, then length-prefixed
the same way.

Decoding functions read from a "stream": any object with a read(n) method that returns
at most n bytes, and b'' at end of stream (io.BytesIO, a socket file, or a ByteChannel).
"""

from __future__ import annotations

import base64
import binascii
import struct
from typing import Protocol

from ..internal_types import *
from ..exceptions import EncodingError, FramingError, ConnectionClosedError
from .constants import FRAME_MARKER, MAX_FIELD_LENGTH, LENGTH_PREFIX_SIZE

class ReadableStream(Protocol):
    """Anything with a read(n) method returning at most n bytes, and b'' at end of stream."""
    def read(self, n: int) -> bytes: ...

_LENGTH_STRUCT = struct.Struct('<H')

class Message(NamedTuple):
    """One decoded frame."""
    marker: int
    app_name: str
    payload: bytes

def encode_length_prefixed(data: Union[bytes, bytearray]) -> bytes:
    """Prepends an unsigned little-endian 16-bit length to data."""
    if len(data) > MAX_FIELD_LENGTH:
        raise EncodingError(f"Field length {len(data)} exceeds maximum allowed length {MAX_FIELD_LENGTH}")
    return _LENGTH_STRUCT.pack(len(data)) + bytes(data)

def encode_base64_field(text: str) -> bytes:
    """Base64-encodes the UTF-8 bytes of text and length-prefixes the result."""
    return encode_length_prefixed(base64.b64encode(text.encode('utf-8')))

def encode_envelope(app_name: Union[str, bytes], payload: Union[bytes, bytearray]) -> bytes:
    """Builds a complete frame, ready to be written to the TV in one write."""
    if isinstance(app_name, str):
        app_name = app_name.encode('utf-8')
    return bytes([FRAME_MARKER]) + encode_length_prefixed(app_name) + encode_length_prefixed(payload)

def read_exactly(stream: ReadableStream, length: int) -> bytes:
    """Reads exactly length bytes, blocking until they are available.

    Raises ConnectionClosedError if the stream ends first; never returns short data.
    """
    chunks: List[bytes] = []
    remaining = length
    while remaining > 0:
        chunk = stream.read(remaining)
        if not chunk:
            got = length - remaining
            raise ConnectionClosedError(
                f"End of stream after {got} of {length} bytes (TV could have powered off)")
        chunks.append(chunk)
        remaining -= len(chunk)
    return b''.join(chunks)

def decode_length_prefixed(stream: ReadableStream) -> bytes:
    """Reads a u16 LE length n, then exactly n bytes."""
    length, = _LENGTH_STRUCT.unpack(read_exactly(stream, LENGTH_PREFIX_SIZE))
    return read_exactly(stream, length)

def _decode_text(data: bytes, what: str) -> str:
    try:
        return data.decode('utf-8')
    except UnicodeDecodeError as e:
        raise FramingError(f"{what} is not valid UTF-8: {data.hex(' ')}") from e

def decode_base64_field(stream: ReadableStream) -> str:
    """Reads one length-prefixed base64 field and returns the text it encodes."""
    encoded = decode_length_prefixed(stream)
    try:
        raw = base64.b64decode(encoded, validate=True)
    except binascii.Error as e:
        raise FramingError(f"Invalid base64 field: {encoded!r}") from e
    return _decode_text(raw, "Base64 field")

def decode_message(stream: ReadableStream) -> Message:
    """Reads one complete incoming frame.

    The marker is returned as read; it is not validated.
    """
    marker_bytes = stream.read(1)
    if not marker_bytes:
        raise ConnectionClosedError("End of stream has been reached (TV could have powered off)")
    app_name = _decode_text(decode_length_prefixed(stream), "Frame app name")
    payload = decode_length_prefixed(stream)
    return Message(marker_bytes[0], app_name, payload)

def split_message(buffer: Union[bytes, bytearray]) -> Optional[Tuple[Message, int]]:
    """Decodes a frame from the start of a buffer without blocking.

    Returns (message, bytes_consumed), or None if buffer does not yet contain
    a complete frame.
    """
    offset = 1
    fields: List[bytes] = []
    for _ in range(2):
        if len(buffer) < offset + LENGTH_PREFIX_SIZE:
            return None
        length, = _LENGTH_STRUCT.unpack_from(buffer, offset)
        offset += LENGTH_PREFIX_SIZE
        if len(buffer) < offset + length:
            return None
        fields.append(bytes(buffer[offset:offset + length]))
        offset += length
    app_name = _decode_text(fields[0], "Frame app name")
    return Message(buffer[0], app_name, fields[1]), offset
