import threading
import time

import pytest
from fastapi.testclient import TestClient

from conftest import FakeChannel, tv_frame
from samsung_tv_remote import __version__, SamsungTvClientConfig, SamsungTvSession
from samsung_tv_remote.protocol import ALLOWED_PAYLOAD, KEYCODE_ACK_PAYLOAD, parse_keycode_payload
from samsung_tv_remote.rest_server import tv_api


def install_session(channel: FakeChannel) -> SamsungTvSession:
    config = SamsungTvClientConfig("tv.local", verbose=True, use_config_file=False)
    session = SamsungTvSession(channel, config=config)
    tv_api.state.tv_session = session
    tv_api.state.tv_lock = threading.Lock()
    tv_api.state.launch_time = time.monotonic()
    return session


@pytest.fixture
def client():
    # no "with" block, so the lifespan handler does not try to reach a real TV
    return TestClient(tv_api)


def sent_key_codes(channel: FakeChannel):
    # each flushed frame is header (3) + app name (19) + payload length (2) + payload
    return [parse_keycode_payload(frame[24:]) for frame in channel.flushed]


def test_version(client) -> None:
    install_session(FakeChannel())
    response = client.get("/api/v1/version")
    assert response.status_code == 200
    assert response.json() == {"version": __version__}


def test_config(client) -> None:
    install_session(FakeChannel())
    config = client.get("/api/v1/config").json()["config"]
    assert config["default_host"] == "tv.local"
    assert config["default_port"] == 55000


def test_ping_ok(client) -> None:
    channel = FakeChannel(default_reply=tv_frame(KEYCODE_ACK_PAYLOAD))
    install_session(channel)
    data = client.get("/api/v1/ping").json()
    assert data["server_status"] == "OK"
    assert data["tv_status"] == "OK"
    assert sent_key_codes(channel) == ["PING"]


def test_ping_reports_unreachable_tv(client) -> None:
    install_session(FakeChannel())
    data = client.get("/api/v1/ping").json()
    assert data["server_status"] == "OK"
    assert data["tv_status"] == "ERROR"
    assert data["tv_error"] == "samsung_tv_remote.exceptions.ConnectionClosedError"


def test_authenticate(client) -> None:
    install_session(FakeChannel([tv_frame(ALLOWED_PAYLOAD)]))
    assert client.post("/api/v1/authenticate").json() == {"result": "allowed"}


def test_send_key(client) -> None:
    channel = FakeChannel(default_reply=tv_frame(KEYCODE_ACK_PAYLOAD))
    install_session(channel)
    assert client.post("/api/v1/key/KEY_VOLUP").json() == {"key_code": "KEY_VOLUP"}
    assert client.post("/api/v1/key/KEY_MUTE", params={"wait": "false"}).json() == {"key_code": "KEY_MUTE"}
    assert sent_key_codes(channel) == ["KEY_VOLUP", "KEY_MUTE"]


def test_send_keys_stops_at_first_error(client) -> None:
    channel = FakeChannel([tv_frame(KEYCODE_ACK_PAYLOAD)])
    session = install_session(channel)

    responses = client.post("/api/v1/keys/KEY_1,KEY_2,KEY_3").json()["responses"]

    assert [r["key_code"] for r in responses] == ["KEY_1", "KEY_2"]
    assert "error" not in responses[0]
    assert responses[1]["error"] == "samsung_tv_remote.exceptions.ConnectionClosedError"
    assert session.is_closed


def test_log(client) -> None:
    channel = FakeChannel(default_reply=tv_frame(KEYCODE_ACK_PAYLOAD))
    install_session(channel)
    client.post("/api/v1/key/KEY_VOLUP")
    log = client.get("/api/v1/log").json()["log"]
    assert any("Sending keycode: KEY_VOLUP." in line for line in log)
