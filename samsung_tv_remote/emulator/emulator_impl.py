# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
Samsung TV emulator.

Provides a simple emulation of the TV side of the remote control protocol on TCP/IP.
Instead of a human pressing "Allow" or "Deny" on the TV screen, a fixed policy decides
each authentication request.
"""

from __future__ import annotations

import asyncio
from enum import Enum

from ..internal_types import *
from ..pkg_logging import logger
from ..exceptions import SamsungTvRemoteError
from ..constants import DEFAULT_PORT
from ..protocol import (
    ALLOWED_PAYLOAD,
    DENIED_PAYLOAD,
    TIMEOUT_PAYLOAD,
    WAIT_NOTICE_PAYLOAD,
    KEYCODE_ACK_PAYLOAD,
  )

from .session import SamsungTvEmulatorSession, EmulatorSessionState

class AuthPolicy(Enum):
    """How the emulated TV user answers authentication requests."""
    ALLOW = "allow"
    DENY = "deny"
    TIMEOUT = "timeout"
    IGNORE = "ignore"

class ReceivedKeyCode(NamedTuple):
    controller_id: Optional[str]
    key_code: str
    authorized: bool

class SamsungTvEmulator:
    policy: AuthPolicy
    bind_addr: str
    port: int
    transient_notices: int
    approval_delay: float
    authorized_ids: Set[str]
    received_key_codes: List[ReceivedKeyCode]
    sessions: Dict[int, SamsungTvEmulatorSession]
    next_session_id: int = 0
    server: Optional[asyncio.Server] = None
    _stopped: Optional[asyncio.Event] = None

    def __init__(
            self,
            policy: Union[AuthPolicy, str]=AuthPolicy.ALLOW,
            bind_addr: Optional[str]=None,
            port: int=DEFAULT_PORT,
            transient_notices: int=1,
            approval_delay: float=0.0,
            authorized_ids: Optional[Iterable[str]]=None,
          ):
        """Creates a TV emulator.

        Args:
            policy: The answer given to authentication requests from controllers
                    that are not yet authorized.
            bind_addr: The local address to listen on. Default: 0.0.0.0.
            port: The TCP port to listen on; 0 picks a free port (see bound_port).
            transient_notices: The number of transient notices sent before each
                    authentication result, as the TV does while it shows its
                    authorization dialog.
            approval_delay: Seconds between the request and the answer.
            authorized_ids: Controller IDs that are allowed without asking.
        """
        if isinstance(policy, str):
            try:
                policy = AuthPolicy(policy)
            except ValueError as e:
                raise SamsungTvRemoteError(f"Unknown authentication policy {policy!r}") from e
        self.policy = policy
        self.bind_addr = '0.0.0.0' if bind_addr is None else bind_addr
        self.port = port
        self.transient_notices = transient_notices
        self.approval_delay = approval_delay
        self.authorized_ids = set() if authorized_ids is None else set(authorized_ids)
        self.received_key_codes = []
        self.sessions = {}

    def alloc_session_id(self, session: SamsungTvEmulatorSession) -> int:
        session_id = self.next_session_id
        self.next_session_id += 1
        self.sessions[session_id] = session
        return session_id

    def free_session_id(self, session_id: int) -> None:
        self.sessions.pop(session_id, None)

    @property
    def bound_port(self) -> int:
        """The port actually listened on; differs from port when port is 0."""
        if self.server is None or len(self.server.sockets) == 0:
            return self.port
        return self.server.sockets[0].getsockname()[1]

    def _send_auth_result(self, session: SamsungTvEmulatorSession, controller_id: str, policy: AuthPolicy) -> None:
        session.approval_timer = None
        if policy == AuthPolicy.ALLOW:
            self.authorized_ids.add(controller_id)
            session.set_auth_state(EmulatorSessionState.AUTHORIZED)
            session.send_payload(ALLOWED_PAYLOAD)
        elif policy == AuthPolicy.DENY:
            session.set_auth_state(EmulatorSessionState.DENIED)
            session.send_payload(DENIED_PAYLOAD)
        else:
            assert policy == AuthPolicy.TIMEOUT
            session.set_auth_state(EmulatorSessionState.CONNECTED)
            session.send_payload(TIMEOUT_PAYLOAD)
        logger.info(f"{session}: Authentication of controller {controller_id!r}: {policy.value}")

    def on_auth_request(self, session: SamsungTvEmulatorSession, ip: str, controller_id: str, name: str) -> None:
        """Handles an authentication request from a controller."""
        logger.info(f"{session}: Authentication request from ip={ip!r}, id={controller_id!r}, name={name!r}")
        if controller_id in self.authorized_ids:
            self._send_auth_result(session, controller_id, AuthPolicy.ALLOW)
            return
        policy = self.policy
        session.set_auth_state(EmulatorSessionState.AWAITING_APPROVAL)
        for _ in range(self.transient_notices):
            session.send_payload(WAIT_NOTICE_PAYLOAD)
        if policy == AuthPolicy.IGNORE:
            logger.debug(f"{session}: Ignoring authentication request")
            return
        if self.approval_delay > 0:
            session.start_approval_timer(
                self.approval_delay,
                lambda: self._send_auth_result(session, controller_id, policy))
        else:
            self._send_auth_result(session, controller_id, policy)

    def on_key_code(self, session: SamsungTvEmulatorSession, key_code: str) -> None:
        """Handles a key press from a controller. Every key code is acknowledged; only
           key codes from authorized controllers would take effect on a real TV."""
        authorized = session.is_authorized
        if authorized:
            logger.info(f"{session}: Key code {key_code!r}")
        else:
            logger.warning(f"{session}: Key code {key_code!r} from unauthorized controller")
        self.received_key_codes.append(ReceivedKeyCode(session.controller_id, key_code, authorized))
        session.send_payload(KEYCODE_ACK_PAYLOAD)

    async def start(self) -> None:
        """Starts listening. Returns once the server socket is bound."""
        assert self.server is None
        self._stopped = asyncio.Event()
        loop = asyncio.get_running_loop()
        self.server = await loop.create_server(
            lambda: SamsungTvEmulatorSession(self),
            host=self.bind_addr,
            port=self.port,
          )
        logger.info(f"TV emulator listening on {self.bind_addr}:{self.bound_port}")

    def close(self) -> None:
        """Requests shutdown of the emulator. Safe to call from a signal handler."""
        if self._stopped is not None:
            self._stopped.set()

    async def aclose(self) -> None:
        """Stops listening and closes all connections."""
        self.close()
        for session in list(self.sessions.values()):
            session.close()
        if self.server is not None:
            self.server.close()
            await self.server.wait_closed()
            self.server = None

    async def run(self) -> None:
        """Runs the emulator until close() is called."""
        await self.start()
        assert self._stopped is not None
        try:
            await self._stopped.wait()
        finally:
            await self.aclose()

    async def __aenter__(self) -> SamsungTvEmulator:
        await self.start()
        return self

    async def __aexit__(
            self,
            exc_type: Optional[Type[BaseException]],
            exc: Optional[BaseException],
            tb: Optional[TracebackType],
          ) -> None:
        await self.aclose()
