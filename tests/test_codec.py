"""Tests for the frame codec."""

from __future__ import annotations

import base64
import io

import pytest

from samsung_tv_remote.exceptions import (
    ConnectionClosedError,
    EncodingError,
    FramingError,
    TransportError,
)
from samsung_tv_remote.protocol import (
    APP_STRING,
    Message,
    decode_base64_field,
    decode_length_prefixed,
    decode_message,
    encode_base64_field,
    encode_envelope,
    encode_length_prefixed,
    split_message,
)


class TrickleStream:
    """Returns at most one byte per read, like a slow socket."""

    def __init__(self, data: bytes) -> None:
        self._data = io.BytesIO(data)

    def read(self, n: int) -> bytes:
        return self._data.read(min(n, 1))


def test_length_prefix_is_little_endian_u16() -> None:
    assert encode_length_prefixed(b"abc") == b"\x03\x00abc"
    assert encode_length_prefixed(b"x" * 0x0102)[:2] == b"\x02\x01"
    assert encode_length_prefixed(b"") == b"\x00\x00"


def test_length_prefix_accepts_maximum_and_rejects_longer() -> None:
    assert encode_length_prefixed(b"\x00" * 65535)[:2] == b"\xff\xff"
    with pytest.raises(EncodingError):
        encode_length_prefixed(b"\x00" * 65536)


def test_base64_field_encodes_utf8_text() -> None:
    assert encode_base64_field("10.0.0.5") == b"\x0c\x00MTAuMC4wLjU="
    assert encode_base64_field("") == b"\x00\x00"


def test_base64_field_has_no_line_wrapping() -> None:
    field = encode_base64_field("K" * 200)
    assert b"\n" not in field


@pytest.mark.parametrize("text", ["", "KEY_VOLUP", "Woonkamer TV", "Télécommande ☃", "日本語のテレビ"])
def test_base64_field_recovers_text(text: str) -> None:
    field = encode_base64_field(text)
    assert base64.b64decode(field[2:]).decode("utf-8") == text
    assert decode_base64_field(io.BytesIO(field)) == text


def test_base64_field_too_long_for_prefix() -> None:
    with pytest.raises(EncodingError):
        encode_base64_field("a" * 50000)


def test_envelope_layout() -> None:
    frame = encode_envelope(APP_STRING, b"\x01\x02")
    assert frame == b"\x00\x13\x00iphone.iapp.samsung\x02\x00\x01\x02"


@pytest.mark.parametrize(
    "app_name,payload",
    [
        (APP_STRING, b""),
        (APP_STRING, b"\x64\x00\x01\x00"),
        ("iapp.samsung", bytes(range(256))),
        ("ünïcode", b"\xff" * 65535),
    ],
)
def test_decode_message_reconstructs_envelope(app_name: str, payload: bytes) -> None:
    message = decode_message(io.BytesIO(encode_envelope(app_name, payload)))
    assert message == Message(0, app_name, payload)


def test_decode_message_from_trickling_stream() -> None:
    frame = encode_envelope(APP_STRING, b"\x65\x00")
    assert decode_message(TrickleStream(frame)) == Message(0, APP_STRING, b"\x65\x00")


def test_decode_message_returns_marker_as_read() -> None:
    frame = b"\x02" + encode_envelope("iapp.samsung", b"\x00")[1:]
    assert decode_message(io.BytesIO(frame)).marker == 2


def test_decode_message_reads_only_one_frame() -> None:
    stream = io.BytesIO(encode_envelope(APP_STRING, b"\x0a\x00") + encode_envelope(APP_STRING, b"\x65\x00"))
    assert decode_message(stream).payload == b"\x0a\x00"
    assert decode_message(stream).payload == b"\x65\x00"


def test_decode_message_at_end_of_stream() -> None:
    with pytest.raises(ConnectionClosedError):
        decode_message(io.BytesIO(b""))


@pytest.mark.parametrize("cut", [1, 2, 5, 21, 23, 24])
def test_truncated_frame_raises_instead_of_short_read(cut: int) -> None:
    frame = encode_envelope(APP_STRING, b"\x64\x00\x01\x00")
    with pytest.raises(FramingError) as excinfo:
        decode_message(io.BytesIO(frame[:cut]))
    assert isinstance(excinfo.value, TransportError)


def test_length_prefixed_truncated_body() -> None:
    with pytest.raises(ConnectionClosedError):
        decode_length_prefixed(io.BytesIO(b"\x05\x00abc"))


def test_length_prefixed_truncated_length() -> None:
    with pytest.raises(ConnectionClosedError):
        decode_length_prefixed(io.BytesIO(b"\x05"))


def test_invalid_app_name_is_framing_error() -> None:
    frame = b"\x00\x02\x00\xff\xfe\x00\x00"
    with pytest.raises(FramingError):
        decode_message(io.BytesIO(frame))


def test_invalid_base64_field() -> None:
    with pytest.raises(FramingError):
        decode_base64_field(io.BytesIO(b"\x03\x00a!b"))


def test_split_message_incomplete_then_complete() -> None:
    frame = encode_envelope(APP_STRING, b"\x00\x00\x00\x00")
    for cut in range(len(frame)):
        assert split_message(frame[:cut]) is None
    extra = b"\x00\x01"
    result = split_message(frame + extra)
    assert result is not None
    message, consumed = result
    assert message == Message(0, APP_STRING, b"\x00\x00\x00\x00")
    assert consumed == len(frame)
