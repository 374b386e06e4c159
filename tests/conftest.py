import asyncio
import os
import sys
import threading
from pathlib import Path
from typing import List, Optional

import pytest

# Ensure samsung_tv_remote is importable when running tests directly
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from samsung_tv_remote.client import ByteChannel
from samsung_tv_remote.emulator import SamsungTvEmulator
from samsung_tv_remote.exceptions import TransportError
from samsung_tv_remote.protocol import TV_APP_STRING, encode_envelope


def tv_frame(payload: bytes) -> bytes:
    """A frame as the TV would send it."""
    return encode_envelope(TV_APP_STRING, payload)


class FakeChannel(ByteChannel):
    """In-memory channel.

    ``stale`` is readable immediately. Each flush makes the next entry of ``replies``
    readable (or ``default_reply`` once ``replies`` is used up). When nothing is left to
    read, ``read`` returns b'' (end of stream), or raises TransportError if
    ``timeout_when_empty`` is set.
    """

    def __init__(
        self,
        replies: Optional[List[bytes]] = None,
        *,
        stale: bytes = b"",
        default_reply: Optional[bytes] = None,
        timeout_when_empty: bool = False,
        local_address: str = "10.0.0.5",
        close_error: Optional[BaseException] = None,
    ) -> None:
        self.replies = list(replies or [])
        self.default_reply = default_reply
        self.readable = bytearray(stale)
        self.timeout_when_empty = timeout_when_empty
        self._local_address = local_address
        self.close_error = close_error
        self.pending_write = bytearray()
        self.flushed: List[bytes] = []
        self.timeout_history: List[float] = []
        self._timeout = 3.0
        self.closed = False
        self.close_calls = 0

    @property
    def written(self) -> bytes:
        return b"".join(self.flushed)

    def read(self, n: int) -> bytes:
        if len(self.readable) == 0 and self.timeout_when_empty:
            raise TransportError(f"Timeout after {self._timeout} seconds waiting for data from TV")
        result = bytes(self.readable[:n])
        del self.readable[:n]
        return result

    def write(self, data) -> None:
        self.pending_write += data

    def flush(self) -> None:
        self.flushed.append(bytes(self.pending_write))
        self.pending_write.clear()
        if self.replies:
            self.readable += self.replies.pop(0)
        elif self.default_reply is not None:
            self.readable += self.default_reply

    def has_pending(self) -> bool:
        return len(self.readable) > 0

    @property
    def timeout_secs(self) -> float:
        return self._timeout

    @timeout_secs.setter
    def timeout_secs(self, value: float) -> None:
        self._timeout = value
        self.timeout_history.append(value)

    @property
    def local_address(self) -> str:
        return self._local_address

    @property
    def is_closed(self) -> bool:
        return self.closed

    def close(self) -> None:
        self.close_calls += 1
        self.closed = True
        if self.close_error is not None:
            raise self.close_error


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in list(os.environ):
        if name.startswith("SAMSUNG_TV_REMOTE_"):
            monkeypatch.delenv(name, raising=False)


class EmulatorRunner:
    """Runs a SamsungTvEmulator on an event loop in a background thread, so blocking
    clients can be exercised from the test thread."""

    def __init__(self, **kwargs) -> None:
        self.loop = asyncio.new_event_loop()
        self.thread = threading.Thread(target=self.loop.run_forever, daemon=True)
        self.emulator = SamsungTvEmulator(bind_addr="127.0.0.1", port=0, **kwargs)

    def start(self) -> "EmulatorRunner":
        self.thread.start()
        asyncio.run_coroutine_threadsafe(self.emulator.start(), self.loop).result(timeout=5)
        return self

    @property
    def port(self) -> int:
        return self.emulator.bound_port

    def stop(self) -> None:
        asyncio.run_coroutine_threadsafe(self.emulator.aclose(), self.loop).result(timeout=5)
        self.loop.call_soon_threadsafe(self.loop.stop)
        self.thread.join(timeout=5)
        self.loop.close()


@pytest.fixture
def run_emulator():
    runners: List[EmulatorRunner] = []

    def _start(**kwargs) -> EmulatorRunner:
        runner = EmulatorRunner(**kwargs).start()
        runners.append(runner)
        return runner

    yield _start

    for runner in runners:
        runner.stop()
