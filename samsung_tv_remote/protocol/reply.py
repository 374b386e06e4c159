# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
Interpretation of replies received from the TV.

While an authentication request is pending, the TV may send any number of transient
notices (payload starting with 0x0a) before the authoritative reply. Skipping them is
a separate step from classification, so each can be exercised on its own.
"""

from __future__ import annotations

from enum import Enum

from ..internal_types import *
from ..exceptions import ProtocolError
from ..pkg_logging import logger
from .constants import (
    TRANSIENT_NOTICE,
    ALLOWED_PAYLOAD,
    DENIED_PAYLOAD,
    TIMEOUT_PAYLOAD,
  )
from .codec import Message

class AuthResult(Enum):
    """TV response to an authentication request."""

    ALLOWED = "allowed"
    """Authenticated; the TV will respond to key codes."""

    DENIED = "denied"
    """The TV user rejected this controller."""

    TIMED_OUT = "timed_out"
    """The request timed out or was cancelled by the TV user."""

_AUTH_REPLIES: Dict[bytes, AuthResult] = {
    ALLOWED_PAYLOAD: AuthResult.ALLOWED,
    DENIED_PAYLOAD: AuthResult.DENIED,
    TIMEOUT_PAYLOAD: AuthResult.TIMED_OUT,
}

def classify_auth_reply(payload: bytes) -> AuthResult:
    """Maps an authoritative reply payload to an AuthResult.

    Raises ProtocolError for anything but the three known payloads.
    """
    result = _AUTH_REPLIES.get(bytes(payload))
    if result is None:
        raise ProtocolError(f"Got unknown response to authentication request: [{payload.hex(' ')}]")
    return result

def is_transient_notice(payload: bytes) -> bool:
    """True if the payload is a notice to be ignored while awaiting an authentication result."""
    return len(payload) > 0 and payload[0] == TRANSIENT_NOTICE

def read_authoritative_reply(
        read_message: Callable[[], Message],
        on_skip: Optional[Callable[[Message], None]]=None,
      ) -> Message:
    """Reads messages until one that is not a transient notice arrives, and returns it.

    Errors raised by read_message propagate unchanged.
    """
    message = read_message()
    while is_transient_notice(message.payload):
        logger.debug(f"Skipping transient notice: [{message.payload.hex(' ')}]")
        if on_skip is not None:
            on_skip(message)
        message = read_message()
    return message
