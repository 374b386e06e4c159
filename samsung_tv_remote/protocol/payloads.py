# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
Payloads carried inside frames sent to the TV.

Authentication request:

    [0x64][0x00][base64 field: controller ip][base64 field: controller id][base64 field: name]

Key code:

    [0x00][0x00][0x00][base64 field: key code]

The parse_* functions are the TV side of the exchange; they are used by the emulator.
"""

from __future__ import annotations

import io

from ..internal_types import *
from ..exceptions import FramingError
from .constants import AUTH_PAYLOAD_HEADER, KEYCODE_PAYLOAD_HEADER
from .codec import encode_base64_field, decode_base64_field

def build_auth_payload(ip: str, controller_id: str, name: str) -> bytes:
    """Builds the payload of an authentication request."""
    return (
        AUTH_PAYLOAD_HEADER
        + encode_base64_field(ip)
        + encode_base64_field(controller_id)
        + encode_base64_field(name)
      )

def build_keycode_payload(key_code: str) -> bytes:
    """Builds the payload of a key press."""
    return KEYCODE_PAYLOAD_HEADER + encode_base64_field(key_code)

def _parse_fields(payload: bytes, header: bytes, n_fields: int, what: str) -> List[str]:
    if not payload.startswith(header):
        raise FramingError(f"Not a {what} payload: {payload.hex(' ')}")
    stream = io.BytesIO(payload[len(header):])
    fields = [decode_base64_field(stream) for _ in range(n_fields)]
    trailing = stream.read()
    if len(trailing) > 0:
        raise FramingError(f"{len(trailing)} unexpected trailing bytes in {what} payload: {trailing.hex(' ')}")
    return fields

def parse_auth_payload(payload: bytes) -> Tuple[str, str, str]:
    """Returns (ip, controller_id, name) from an authentication request payload."""
    ip, controller_id, name = _parse_fields(payload, AUTH_PAYLOAD_HEADER, 3, "authentication")
    return ip, controller_id, name

def parse_keycode_payload(payload: bytes) -> str:
    """Returns the key code from a key press payload."""
    key_code, = _parse_fields(payload, KEYCODE_PAYLOAD_HEADER, 1, "key code")
    return key_code
