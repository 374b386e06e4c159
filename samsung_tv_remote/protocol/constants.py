# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
Protocol-specific constants
"""

from __future__ import annotations

APP_STRING = "iphone.iapp.samsung"
"""The application name carried in every frame sent to the TV. The TV only accepts
   controllers identifying with this literal."""

TV_APP_STRING = "iapp.samsung"
"""The application name the emulator uses in frames sent back to a controller."""

FRAME_MARKER = 0x00
"""The first byte of every frame."""

MAX_FIELD_LENGTH = 0xFFFF
"""Length prefixes are unsigned 16-bit little-endian integers."""

LENGTH_PREFIX_SIZE = 2

AUTH_COMMAND = 0x64
"""First payload byte of an authentication request and of an authentication result."""

AUTH_TIMEOUT_COMMAND = 0x65
"""First payload byte of an authentication timeout/cancel reply."""

TRANSIENT_NOTICE = 0x0a
"""First payload byte of a notice the TV sends while showing or hiding windows.
   These carry no result and are skipped while waiting for an authentication result."""

AUTH_PAYLOAD_HEADER = bytes([AUTH_COMMAND, 0x00])
KEYCODE_PAYLOAD_HEADER = bytes([0x00, 0x00, 0x00])

ALLOWED_PAYLOAD = bytes([AUTH_COMMAND, 0x00, 0x01, 0x00])
"""Authentication reply: the user accepted this controller."""

DENIED_PAYLOAD = bytes([AUTH_COMMAND, 0x00, 0x00, 0x00])
"""Authentication reply: the user rejected this controller."""

TIMEOUT_PAYLOAD = bytes([AUTH_TIMEOUT_COMMAND, 0x00])
"""Authentication reply: the request timed out or was cancelled on the TV."""

WAIT_NOTICE_PAYLOAD = bytes([TRANSIENT_NOTICE, 0x00, 0x02, 0x00, 0x00, 0x00])
"""Transient notice seen when the TV pops up the authorization dialog."""

KEEPALIVE_NOTICE_PAYLOAD = bytes([TRANSIENT_NOTICE, 0x00, 0x01, 0x00, 0x00, 0x00])
"""Transient notice with no known meaning; treated as a keep-alive."""

KEYCODE_ACK_PAYLOAD = bytes([0x00, 0x00, 0x00, 0x00])
"""Reply the emulator sends after receiving a key code."""
