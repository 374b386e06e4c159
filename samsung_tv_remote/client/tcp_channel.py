# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
Samsung TV TCP/IP byte channel.

Provides an implementation of ByteChannel over a blocking TCP/IP socket.
"""

from __future__ import annotations

import socket
import select

from ..internal_types import *
from ..exceptions import TransportError
from ..constants import DEFAULT_TIMEOUT, DEFAULT_PORT, CONNECT_TIMEOUT
from ..pkg_logging import logger
from ..util import hex_dump

from .channel import ByteChannel

RECV_SIZE = 4096

class TcpByteChannel(ByteChannel):
    """Blocking TCP/IP byte channel to a TV."""

    sock: socket.socket
    peer: HostAndPort
    _timeout_secs: float
    _read_buffer: bytearray
    _write_buffer: bytearray
    _eof: bool = False
    _closed: bool = False

    def __init__(
            self,
            sock: socket.socket,
            timeout_secs: float=DEFAULT_TIMEOUT,
          ) -> None:
        """Wraps an already connected socket."""
        self.sock = sock
        self.peer = sock.getpeername()[:2]
        self._read_buffer = bytearray()
        self._write_buffer = bytearray()
        self.timeout_secs = timeout_secs

    @classmethod
    def connect(
            cls,
            host: str,
            port: int=DEFAULT_PORT,
            *,
            connect_timeout_secs: float=CONNECT_TIMEOUT,
            timeout_secs: float=DEFAULT_TIMEOUT,
          ) -> TcpByteChannel:
        """Opens a TCP/IP connection to the TV, with timeout."""
        logger.debug(f"Connecting to TV at {host}:{port} with timeout={connect_timeout_secs}")
        try:
            sock = socket.create_connection((host, port), timeout=connect_timeout_secs)
        except socket.timeout as e:
            raise TransportError(f"Timeout connecting to TV at {host}:{port}") from e
        except OSError as e:
            raise TransportError(f"Unable to connect to TV at {host}:{port}: {e}") from e
        try:
            result = cls(sock, timeout_secs=timeout_secs)
        except BaseException:
            sock.close()
            raise
        logger.info(f"Connected to TV at {host}:{port}")
        return result

    @property
    def timeout_secs(self) -> float:
        return self._timeout_secs

    @timeout_secs.setter
    def timeout_secs(self, value: float) -> None:
        self._timeout_secs = value
        self.sock.settimeout(value)

    @property
    def local_address(self) -> str:
        try:
            return self.sock.getsockname()[0]
        except OSError as e:
            raise TransportError(f"Unable to get local address of TV connection: {e}") from e

    @property
    def is_closed(self) -> bool:
        return self._closed

    def _check_open(self) -> None:
        if self._closed:
            raise TransportError(f"{self} is closed")

    def _recv(self) -> None:
        """Receives whatever is available into the read buffer (blocking, with timeout)."""
        try:
            data = self.sock.recv(RECV_SIZE)
        except socket.timeout as e:
            raise TransportError(f"Timeout after {self._timeout_secs} seconds waiting for data from TV") from e
        except OSError as e:
            raise TransportError(f"Error reading from TV: {e}") from e
        if len(data) == 0:
            logger.debug(f"{self}: End of stream")
            self._eof = True
        else:
            logger.debug(f"Read {len(data)} bytes: {hex_dump(data)}")
            self._read_buffer += data

    def read(self, n: int) -> bytes:
        self._check_open()
        if len(self._read_buffer) == 0 and not self._eof:
            self._recv()
        result = bytes(self._read_buffer[:n])
        del self._read_buffer[:n]
        return result

    def has_pending(self) -> bool:
        self._check_open()
        if len(self._read_buffer) > 0:
            return True
        if self._eof:
            return False
        try:
            readable, _, _ = select.select([self.sock], [], [], 0)
        except (OSError, ValueError) as e:
            raise TransportError(f"Error polling TV connection: {e}") from e
        if len(readable) == 0:
            return False
        self._recv()
        return len(self._read_buffer) > 0

    def write(self, data: Union[bytes, bytearray, memoryview]) -> None:
        self._check_open()
        self._write_buffer += data

    def flush(self) -> None:
        self._check_open()
        if len(self._write_buffer) == 0:
            return
        data = bytes(self._write_buffer)
        self._write_buffer.clear()
        logger.debug(f"Writing exactly {len(data)} bytes: {hex_dump(data)}")
        try:
            self.sock.sendall(data)
        except socket.timeout as e:
            raise TransportError(f"Timeout after {self._timeout_secs} seconds writing to TV") from e
        except OSError as e:
            raise TransportError(f"Error writing to TV: {e}") from e

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._read_buffer.clear()
        self._write_buffer.clear()
        try:
            self.sock.shutdown(socket.SHUT_RDWR)
        except OSError:
            # the peer may already have gone away
            logger.debug("Exception while shutting down socket", exc_info=True)
        self.sock.close()

    def __str__(self) -> str:
        return f"TcpByteChannel({self.peer[0]}:{self.peer[1]})"

    def __repr__(self) -> str:
        return str(self)
