# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
Samsung TV remote abstract byte channel interface.

Provides a low-level abstract interface for a blocking, bidirectional byte stream
to the TV. Knows nothing of frames, authentication or key codes.

This abstraction allows the session to be driven over alternate transports
(and over in-memory fakes in tests).
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from contextlib import contextmanager

from ..internal_types import *

class ByteChannel(ABC):
    """Abstract base class for blocking byte channels to a TV."""

    @abstractmethod
    def read(self, n: int) -> bytes:
        """Reads at most n bytes, blocking until at least one is available.

        Returns b'' at end of stream. Raises TransportError on timeout or I/O failure.

        Must be implemented by subclasses.
        """
        raise NotImplementedError()

    @abstractmethod
    def write(self, data: Union[bytes, bytearray, memoryview]) -> None:
        """Queues data to be sent. Nothing is guaranteed to be sent until flush().

        Must be implemented by subclasses.
        """
        raise NotImplementedError()

    @abstractmethod
    def flush(self) -> None:
        """Sends all queued data, with timeout.

        Must be implemented by subclasses.
        """
        raise NotImplementedError()

    @abstractmethod
    def has_pending(self) -> bool:
        """Returns True if received data can be read without blocking.

        Returns False at end of stream.

        Must be implemented by subclasses.
        """
        raise NotImplementedError()

    @property
    @abstractmethod
    def timeout_secs(self) -> float:
        """The current read/write timeout, in seconds."""
        raise NotImplementedError()

    @timeout_secs.setter
    @abstractmethod
    def timeout_secs(self, value: float) -> None:
        raise NotImplementedError()

    @property
    @abstractmethod
    def local_address(self) -> str:
        """The local IP address of the channel, as a string."""
        raise NotImplementedError()

    @property
    @abstractmethod
    def is_closed(self) -> bool:
        """True once close() has been called."""
        raise NotImplementedError()

    @abstractmethod
    def close(self) -> None:
        """Closes the channel. Has no effect if the channel is already closed.

        Must be implemented by subclasses.
        """
        raise NotImplementedError()

    @contextmanager
    def override_timeout(self, timeout_secs: float) -> Generator[None, None, None]:
        """Returns a context manager that sets the read/write timeout while entered,
           and restores the previous timeout on exit, however the context is exited.

        Example:

           with channel.override_timeout(300.0):
               message = decode_message(channel)
        """
        previous = self.timeout_secs
        self.timeout_secs = timeout_secs
        try:
            yield
        finally:
            if not self.is_closed:
                self.timeout_secs = previous

    def __enter__(self) -> ByteChannel:
        """Enters a context that will close the channel on exit."""
        return self

    def __exit__(
            self,
            exc_type: Optional[Type[BaseException]],
            exc: Optional[BaseException],
            tb: Optional[TracebackType],
          ) -> None:
        self.close()
