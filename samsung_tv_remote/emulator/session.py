# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
Samsung TV emulator connection.

One instance per controller connection. Splits the incoming byte stream into frames
and hands requests to the emulator.
"""

from __future__ import annotations

import asyncio
from enum import Enum

from ..internal_types import *
from ..pkg_logging import logger
from ..exceptions import FramingError
from ..protocol import (
    TV_APP_STRING,
    encode_envelope,
    split_message,
    parse_auth_payload,
    parse_keycode_payload,
  )
from ..protocol.constants import AUTH_PAYLOAD_HEADER, KEYCODE_PAYLOAD_HEADER
from ..util import hex_dump

if TYPE_CHECKING:
    from .emulator_impl import SamsungTvEmulator

class EmulatorSessionState(Enum):
    UNCONNECTED = 0
    CONNECTED = 1
    AWAITING_APPROVAL = 2
    AUTHORIZED = 3
    DENIED = 4
    CLOSED = 5

class SamsungTvEmulatorSession(asyncio.Protocol):
    session_id: int = -1
    emulator: SamsungTvEmulator
    transport: Optional[asyncio.Transport] = None
    peer_name: str = "<unconnected>"
    description: str = "EmulatorSession(<unconnected>)"
    state: EmulatorSessionState = EmulatorSessionState.UNCONNECTED
    partial_data: bytes = b""
    controller_id: Optional[str] = None
    controller_name: Optional[str] = None
    approval_timer: Optional[asyncio.TimerHandle] = None

    def __init__(self, emulator: SamsungTvEmulator):
        self.emulator = emulator
        self.session_id = emulator.alloc_session_id(self)
        self.description = f"EmulatorSession(id={self.session_id}, from=<unconnected>)"

    @property
    def is_authorized(self) -> bool:
        return self.state == EmulatorSessionState.AUTHORIZED

    def send_payload(self, payload: bytes) -> None:
        """Sends one frame carrying payload to the controller."""
        if self.transport is None or self.state == EmulatorSessionState.CLOSED:
            logger.debug(f"EmulatorSession: Attempt to write to closed session {self.description}; ignored")
            return
        frame = encode_envelope(TV_APP_STRING, payload)
        logger.debug(f"{self}: Writing {len(frame)} bytes: {hex_dump(frame)}")
        self.transport.write(frame)

    def connection_made(self, transport: asyncio.BaseTransport) -> None:
        assert isinstance(transport, asyncio.Transport)
        assert self.state == EmulatorSessionState.UNCONNECTED
        self.transport = transport
        self.peer_name = str(transport.get_extra_info('peername'))
        self.description = f"EmulatorSession(id={self.session_id}, from='{self.peer_name}')"
        logger.debug(f"EmulatorSession: Connection from {self.peer_name}")
        self.state = EmulatorSessionState.CONNECTED

    def set_auth_state(self, state: EmulatorSessionState) -> None:
        if self.state != EmulatorSessionState.CLOSED:
            self.state = state

    def start_approval_timer(self, delay: float, callback: Callable[[], None]) -> None:
        self.cancel_approval_timer()
        self.approval_timer = asyncio.get_running_loop().call_later(delay, callback)

    def cancel_approval_timer(self) -> None:
        if self.approval_timer is not None:
            self.approval_timer.cancel()
            self.approval_timer = None

    def close(self) -> None:
        if self.state != EmulatorSessionState.CLOSED:
            self.state = EmulatorSessionState.CLOSED
            self.cancel_approval_timer()
            if self.transport is not None:
                self.transport.close()
            self.emulator.free_session_id(self.session_id)

    def _handle_payload(self, payload: bytes) -> None:
        if payload.startswith(AUTH_PAYLOAD_HEADER):
            ip, controller_id, name = parse_auth_payload(payload)
            self.controller_id = controller_id
            self.controller_name = name
            self.emulator.on_auth_request(self, ip, controller_id, name)
        elif payload.startswith(KEYCODE_PAYLOAD_HEADER):
            key_code = parse_keycode_payload(payload)
            self.emulator.on_key_code(self, key_code)
        else:
            logger.warning(f"{self}: Ignoring unrecognized payload: {hex_dump(payload)}")

    def data_received(self, data: bytes) -> None:
        """Called when some data is received."""
        try:
            self.partial_data += data
            while self.state != EmulatorSessionState.CLOSED:
                split = split_message(self.partial_data)
                if split is None:
                    break
                message, n_consumed = split
                self.partial_data = self.partial_data[n_consumed:]
                logger.debug(f"{self}: Received frame app={message.app_name!r} payload={hex_dump(message.payload)}")
                self._handle_payload(message.payload)
        except FramingError as e:
            logger.warning(f"{self}: Malformed frame from controller; closing connection: {e}")
            self.close()
        except BaseException as e:
            logger.exception(f"{self}: Exception while processing data: {e}")
            self.close()
            raise

    def connection_lost(self, exc: Optional[BaseException]) -> None:
        logger.debug(f"{self}: Connection lost, exception={exc}; closing connection")
        self.close()

    def eof_received(self) -> bool:
        logger.debug(f"{self}: EOF received; closing connection")
        self.close()
        return True

    def __str__(self) -> str:
        return self.description

    def __repr__(self) -> str:
        return str(self)
