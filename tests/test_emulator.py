"""End-to-end tests of the blocking client against the TV emulator over real TCP sockets."""

import socket
import time

import pytest

from samsung_tv_remote import (
    AuthResult,
    SamsungTvClientConfig,
    SessionState,
    TransportError,
    samsung_tv_connect,
)
from samsung_tv_remote.emulator import AuthPolicy, ReceivedKeyCode, SamsungTvEmulator
from samsung_tv_remote.exceptions import SamsungTvRemoteError


def connect(runner, **kwargs):
    config = SamsungTvClientConfig(
        "127.0.0.1", default_port=runner.port, timeout_secs=5.0, use_config_file=False, **kwargs)
    return samsung_tv_connect(config=config)


@pytest.mark.parametrize("notices", [0, 1, 3])
def test_allow_and_send_key_codes(run_emulator, notices: int) -> None:
    runner = run_emulator(policy="allow", transient_notices=notices)

    with connect(runner, verbose=True) as session:
        assert session.authenticate(name="Test", controller_id="test-1") is AuthResult.ALLOWED
        assert session.state is SessionState.AUTHORIZED
        session.send_key_code("KEY_VOLUP")
        session.check_connection()

        skipped = [line for line in session.get_log() if "not relevant" in line]
        assert len(skipped) == notices

    assert runner.emulator.received_key_codes == [
        ReceivedKeyCode("test-1", "KEY_VOLUP", True),
        ReceivedKeyCode("test-1", "PING", True),
    ]
    assert "test-1" in runner.emulator.authorized_ids


def test_default_controller_id_is_local_address(run_emulator) -> None:
    runner = run_emulator(policy="allow")
    with connect(runner) as session:
        session.authenticate()
        session.send_key_code("KEY_MUTE")
    assert runner.emulator.received_key_codes == [ReceivedKeyCode("127.0.0.1", "KEY_MUTE", True)]


def test_denied_session_still_transmits_key_codes(run_emulator) -> None:
    runner = run_emulator(policy="deny")

    with connect(runner) as session:
        assert session.authenticate(name="Test", controller_id="test-2") is AuthResult.DENIED
        assert session.state is SessionState.DENIED
        session.send_key_code("KEY_POWEROFF")

    assert runner.emulator.received_key_codes == [ReceivedKeyCode("test-2", "KEY_POWEROFF", False)]


def test_timed_out_authentication(run_emulator) -> None:
    runner = run_emulator(policy="timeout", approval_delay=0.1)
    with connect(runner) as session:
        assert session.authenticate(name="Test") is AuthResult.TIMED_OUT
        assert session.state is SessionState.TIMED_OUT
        assert not session.is_closed


def test_unanswered_authentication_closes_session(run_emulator) -> None:
    runner = run_emulator(policy="ignore", transient_notices=2)
    session = connect(runner, auth_timeout_secs=0.3)

    with pytest.raises(TransportError):
        session.authenticate(name="Test")

    assert session.is_closed
    with pytest.raises(TransportError):
        session.send_key_code("KEY_VOLUP")


def test_known_controller_is_allowed_without_asking(run_emulator) -> None:
    runner = run_emulator(policy="deny", authorized_ids=["known"])
    with connect(runner) as session:
        assert session.authenticate(name="Test", controller_id="known") is AuthResult.ALLOWED


def test_async_key_codes_then_check(run_emulator) -> None:
    runner = run_emulator(policy="allow")
    with connect(runner) as session:
        session.authenticate(name="Test", controller_id="fast")
        for _ in range(5):
            session.send_key_code_async("KEY_VOLDOWN")
        # unread acknowledgements are discarded before the next confirmed send
        session.check_connection()

    deadline = time.monotonic() + 5.0
    while len(runner.emulator.received_key_codes) < 6 and time.monotonic() < deadline:
        time.sleep(0.01)
    key_codes = [received.key_code for received in runner.emulator.received_key_codes]
    assert key_codes == ["KEY_VOLDOWN"] * 5 + ["PING"]


def test_reconnect_after_close(run_emulator) -> None:
    runner = run_emulator(policy="allow")
    for _ in range(2):
        with connect(runner) as session:
            assert session.authenticate(name="Test", controller_id="again") is AuthResult.ALLOWED


def test_connect_refused() -> None:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        port = sock.getsockname()[1]
    with pytest.raises(TransportError):
        samsung_tv_connect("127.0.0.1", port)


def test_unknown_policy() -> None:
    with pytest.raises(SamsungTvRemoteError):
        SamsungTvEmulator(policy="maybe")
    assert SamsungTvEmulator(policy="deny").policy is AuthPolicy.DENY
