# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
Samsung TV remote control session.

A session owns one open ByteChannel to the TV for its whole lifetime, and drives
the request/response cycle on it:

    CONNECTED --authenticate()--> AUTHENTICATING --> AUTHORIZED
                                                 --> DENIED
                                                 --> TIMED_OUT

Key codes can be sent from any connected state; the TV, not the client, decides
whether to act on them.

Sessions are not thread-safe. Callers sharing a session between threads must
serialize access themselves.
"""

from __future__ import annotations

import time
from contextlib import contextmanager
from enum import Enum

from ..internal_types import *
from ..exceptions import TransportError, ProtocolError
from ..constants import PING_KEY_CODE
from ..pkg_logging import logger
from ..util import error_message
from ..protocol import (
    APP_STRING,
    Message,
    AuthResult,
    encode_envelope,
    decode_message,
    build_auth_payload,
    build_keycode_payload,
    classify_auth_reply,
    read_authoritative_reply,
  )
from .channel import ByteChannel
from .client_config import SamsungTvClientConfig
from .resolve_host import resolve_tv_tcp_host
from .tcp_channel import TcpByteChannel

class SessionState(Enum):
    DISCONNECTED = 0
    CONNECTED = 1
    AUTHENTICATING = 2
    AUTHORIZED = 3
    DENIED = 4
    TIMED_OUT = 5

_RESULT_STATES: Dict[AuthResult, SessionState] = {
    AuthResult.ALLOWED: SessionState.AUTHORIZED,
    AuthResult.DENIED: SessionState.DENIED,
    AuthResult.TIMED_OUT: SessionState.TIMED_OUT,
}

class SamsungTvSession:
    """A remote control session with a Samsung TV."""

    channel: ByteChannel
    config: SamsungTvClientConfig
    state: SessionState
    verbose: bool
    _log: List[str]

    def __init__(
            self,
            channel: ByteChannel,
            *,
            config: Optional[SamsungTvClientConfig]=None,
            verbose: Optional[bool]=None,
          ) -> None:
        """Creates a session over an already open channel.

        The session takes ownership of the channel and closes it in close().
        """
        self.config = SamsungTvClientConfig(verbose=verbose, base_config=config)
        self.verbose = self.config.verbose
        self.channel = channel
        self._log = []
        self.state = SessionState.DISCONNECTED if channel.is_closed else SessionState.CONNECTED

    @classmethod
    def connect(
            cls,
            host: Optional[str]=None,
            port: Optional[int]=None,
            *,
            config: Optional[SamsungTvClientConfig]=None,
            verbose: Optional[bool]=None,
          ) -> SamsungTvSession:
        """Opens a TCP/IP connection to the TV and returns a connected session.

        Args:
            host: The hostname or IPV4 address of the TV, optionally prefixed
                  with "tcp://" and/or suffixed with ":<port>". If None, the
                  default host in config (or SAMSUNG_TV_REMOTE_HOST) is used.
            port: The default port. If None, taken from config.
            config: Base configuration.
            verbose: If True, keep a diagnostic log retrievable with get_log().
        """
        config = SamsungTvClientConfig(
            default_host=host,
            default_port=port,
            verbose=verbose,
            base_config=config,
          )
        resolved_host, resolved_port = resolve_tv_tcp_host(config=config)
        channel = TcpByteChannel.connect(
            resolved_host,
            resolved_port,
            connect_timeout_secs=config.connect_timeout_secs,
            timeout_secs=config.timeout_secs,
          )
        try:
            result = cls(channel, config=config)
        except BaseException:
            channel.close()
            raise
        result._log_event(f"Connected to {resolved_host}:{resolved_port}.")
        return result

    @property
    def is_closed(self) -> bool:
        """True if the session has been closed, by close() or after a transport error."""
        return self.state == SessionState.DISCONNECTED

    @property
    def is_authorized(self) -> bool:
        return self.state == SessionState.AUTHORIZED

    def _log_event(self, message: str) -> None:
        logger.debug(f"{self}: {message}")
        if self.verbose:
            # milliseconds within the current second
            millis = int(time.time() * 1000) % 1000
            self._log.append(f"{millis:3d}. {message}")

    def get_log(self) -> List[str]:
        """Returns a copy of the diagnostic log.

        The log is only filled when the session was created with verbose=True;
        otherwise the list is empty.
        """
        return list(self._log)

    def _require_open(self) -> None:
        if self.is_closed or self.channel.is_closed:
            raise TransportError(f"{self} is closed")

    @contextmanager
    def _closing_on_transport_error(self) -> Generator[None, None, None]:
        """On a transport error, the session is closed and no further interaction is possible."""
        try:
            yield
        except TransportError as e:
            self._log_event(f"Transport error: {error_message(e)}")
            self.close()
            raise

    def _read_message(self) -> Message:
        message = decode_message(self.channel)
        self._log_event(
            f"Message: first byte: {message.marker:x}, response: {message.app_name}, "
            f"payload: {message.payload.hex(' ')}")
        return message

    def _drain(self) -> None:
        """Reads and discards messages left in the receive buffer, so stale notices
           are not mistaken for the reply to the next request."""
        self._log_event("Emptying reader buffer.")
        while self.channel.has_pending():
            self._read_message()

    def _send_payload(self, payload: bytes) -> None:
        frame = encode_envelope(APP_STRING, payload)
        self.channel.write(frame)
        self.channel.flush()

    def authenticate(
            self,
            name: Optional[str]=None,
            controller_id: Optional[str]=None,
            ip: Optional[str]=None,
          ) -> AuthResult:
        """Authenticates with the TV. Has to be done on every new connection, before
           sending key codes.

        Blocks while the TV user decides, for up to config.auth_timeout_secs.

        Args:
            name: The name for this controller, displayed on the TV. Defaults
                  to config.controller_name.
            controller_id: The ID the TV uses to recognize this controller.
                  Defaults to config.controller_id, or the local IP address of
                  the connection.
            ip: The controller IP address reported to the TV. Defaults to the
                  local IP address of the connection.

        Returns:
            AuthResult.ALLOWED, AuthResult.DENIED or AuthResult.TIMED_OUT.

        Raises:
            ProtocolError: The TV sent a reply that is not an authentication result.
            TransportError: The connection failed or timed out; the session is closed.
        """
        self._require_open()
        with self._closing_on_transport_error():
            if ip is None:
                ip = self.channel.local_address
            if controller_id is None:
                controller_id = self.config.controller_id
                if controller_id is None:
                    controller_id = self.channel.local_address
            if name is None:
                name = self.config.controller_name
            payload = build_auth_payload(ip, controller_id, name)

            self._drain()
            self._log_event(f"Authenticating with ip: {ip}, id: {controller_id}, name: {name}.")
            previous_state = self.state
            self.state = SessionState.AUTHENTICATING
            try:
                self._send_payload(payload)
                with self.channel.override_timeout(self.config.auth_timeout_secs):
                    reply = read_authoritative_reply(
                        self._read_message,
                        on_skip=lambda _: self._log_event("Message is not relevant, waiting for new message."))
                result = classify_auth_reply(reply.payload)
            except ProtocolError:
                self._log_event("Authentication message is unknown.")
                self.state = SessionState.CONNECTED
                raise
            except BaseException:
                if self.state == SessionState.AUTHENTICATING:
                    self.state = previous_state
                raise
        self.state = _RESULT_STATES[result]
        self._log_event(f"Authentication response: {result.value}.")
        logger.info(f"{self}: Authentication result: {result.value}")
        return result

    def send_key_code(self, key_code: str) -> None:
        """Sends a key code to the TV, then blocks shortly waiting for the TV response,
           to confirm delivery.

        The content of the response is not interpreted. The TV only acts on key codes
        from an authorized controller, but the code is sent regardless of state.

        Raises:
            TransportError: Delivery could not be confirmed; the session is closed.
        """
        self._require_open()
        payload = build_keycode_payload(key_code)
        with self._closing_on_transport_error():
            self._drain()
            self._log_event(f"Sending keycode: {key_code}.")
            self._send_payload(payload)
            self._read_message()

    def send_key_code_async(self, key_code: str) -> None:
        """Sends a key code to the TV without reading any response.

        Suitable for rapid successive key presses. Use check_connection() to find out
        later whether the TV is still reachable.
        """
        self._require_open()
        payload = build_keycode_payload(key_code)
        with self._closing_on_transport_error():
            self._log_event(f"Sending keycode without reading: {key_code}.")
            self._send_payload(payload)

    def check_connection(self) -> None:
        """Sends a no-op key code; raises TransportError if the TV has become
           unreachable (e.g., turned off)."""
        self.send_key_code(PING_KEY_CODE)

    def close(self) -> None:
        """Closes the connection. Never raises; safe to call more than once."""
        if self.state == SessionState.DISCONNECTED and self.channel.is_closed:
            return
        self._log_event("Closing socket connection.")
        self.state = SessionState.DISCONNECTED
        try:
            self.channel.close()
        except Exception as e:
            self._log_event(f"Exception when closing connection: {error_message(e)}")
            logger.debug("Exception while closing channel", exc_info=True)

    def __enter__(self) -> SamsungTvSession:
        """Enters a context that will close the session on exit."""
        return self

    def __exit__(
            self,
            exc_type: Optional[Type[BaseException]],
            exc: Optional[BaseException],
            tb: Optional[TracebackType],
          ) -> None:
        self.close()

    def __str__(self) -> str:
        return f"SamsungTvSession({self.channel}, state={self.state.name})"

    def __repr__(self) -> str:
        return str(self)
