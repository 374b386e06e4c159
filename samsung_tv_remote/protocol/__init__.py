# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
Low-level protocol definitions for Samsung TV remote control over TCP/IP.

This package defines the frame codec, payload layouts and reply interpretation.
It does no network I/O.

Refer to http://sc0ty.pl/2012/02/samsung-tv-network-remote-control-protocol/
for a description of the protocol.
"""

from .constants import (
    APP_STRING,
    TV_APP_STRING,
    FRAME_MARKER,
    MAX_FIELD_LENGTH,
    AUTH_COMMAND,
    AUTH_TIMEOUT_COMMAND,
    TRANSIENT_NOTICE,
    ALLOWED_PAYLOAD,
    DENIED_PAYLOAD,
    TIMEOUT_PAYLOAD,
    WAIT_NOTICE_PAYLOAD,
    KEEPALIVE_NOTICE_PAYLOAD,
    KEYCODE_ACK_PAYLOAD,
  )

from .codec import (
    Message,
    ReadableStream,
    encode_length_prefixed,
    encode_base64_field,
    encode_envelope,
    read_exactly,
    decode_length_prefixed,
    decode_base64_field,
    decode_message,
    split_message,
  )

from .payloads import (
    build_auth_payload,
    build_keycode_payload,
    parse_auth_payload,
    parse_keycode_payload,
  )

from .reply import (
    AuthResult,
    classify_auth_reply,
    is_transient_notice,
    read_authoritative_reply,
  )
