from __future__ import annotations

import pytest

from wbcmd.core.errors import BrokerConnectError, PublishError
from wbcmd.transports import mqtt as mqtt_transport
from wbcmd.transports.mqtt import MQTTBrokerClient, parse_endpoint


class FakeReasonCode:
    def __init__(self, is_failure: bool = False) -> None:
        self.is_failure = is_failure

    def __str__(self) -> str:
        return "Not authorized" if self.is_failure else "Success"


class FakeMessageInfo:
    def __init__(self, rc: int = 0, published: bool = True) -> None:
        self.rc = rc
        self.published = published

    def wait_for_publish(self, timeout: float | None = None) -> None:
        return None

    def is_published(self) -> bool:
        return self.published


class FakePahoClient:
    instances: list[FakePahoClient] = []
    refuse = False
    silent = False
    publish_info = FakeMessageInfo()

    def __init__(self, callback_api_version, client_id: str = "") -> None:
        self.client_id = client_id
        self.calls: list[tuple] = []
        self.on_connect = None
        self.on_disconnect = None
        FakePahoClient.instances.append(self)

    def connect(self, host: str, port: int, keepalive: int = 60) -> None:
        self.calls.append(("connect", host, port))

    def loop_start(self) -> None:
        self.calls.append(("loop_start",))
        if not FakePahoClient.silent:
            self.on_connect(self, None, {}, FakeReasonCode(FakePahoClient.refuse), None)

    def loop_stop(self) -> None:
        self.calls.append(("loop_stop",))

    def publish(self, topic: str, payload: str, qos: int = 0, retain: bool = False) -> FakeMessageInfo:
        self.calls.append(("publish", topic, payload, qos))
        return FakePahoClient.publish_info

    def disconnect(self) -> None:
        self.calls.append(("disconnect",))
        self.on_disconnect(self, None, {}, FakeReasonCode(), None)


@pytest.fixture
def fake_paho(monkeypatch: pytest.MonkeyPatch) -> type[FakePahoClient]:
    FakePahoClient.instances = []
    FakePahoClient.refuse = False
    FakePahoClient.silent = False
    FakePahoClient.publish_info = FakeMessageInfo()
    monkeypatch.setattr(mqtt_transport.mqtt, "Client", FakePahoClient)
    return FakePahoClient


@pytest.mark.parametrize(
    ("endpoint", "expected"),
    [
        ("wiren-board.test-stand", ("wiren-board.test-stand", 1883)),
        ("10.0.0.5:1884", ("10.0.0.5", 1884)),
        ("tcp://broker.local:1885", ("broker.local", 1885)),
        ("mqtt://broker.local", ("broker.local", 1883)),
    ],
)
def test_parse_endpoint(endpoint: str, expected: tuple[str, int]) -> None:
    assert parse_endpoint(endpoint) == expected


@pytest.mark.parametrize("endpoint", ["ws://broker:80", "broker:abc", ":1883"])
def test_parse_endpoint_rejects_invalid(endpoint: str) -> None:
    with pytest.raises(BrokerConnectError):
        parse_endpoint(endpoint)


def test_connect_publish_disconnect(fake_paho: type[FakePahoClient]) -> None:
    client = MQTTBrokerClient(client_id="bench")
    client.connect("tcp://broker.local:1884")
    client.publish("/devices/wb-mr3_17/controls/K1/on", "1")
    client.disconnect(250)

    paho = fake_paho.instances[0]
    assert paho.client_id == "bench"
    assert paho.calls == [
        ("connect", "broker.local", 1884),
        ("loop_start",),
        ("publish", "/devices/wb-mr3_17/controls/K1/on", "1", 0),
        ("disconnect",),
        ("loop_stop",),
    ]


def test_refused_connection_raises(fake_paho: type[FakePahoClient]) -> None:
    fake_paho.refuse = True
    client = MQTTBrokerClient()
    with pytest.raises(BrokerConnectError) as exc:
        client.connect("broker.local")
    assert "refused" in str(exc.value)
    assert fake_paho.instances[0].calls[-2:] == [("disconnect",), ("loop_stop",)]


def test_connack_timeout_closes_socket(fake_paho: type[FakePahoClient]) -> None:
    fake_paho.silent = True
    client = MQTTBrokerClient(timeout_s=0.01)
    with pytest.raises(BrokerConnectError) as exc:
        client.connect("broker.local")
    assert "Timed out" in str(exc.value)
    assert fake_paho.instances[0].calls[-2:] == [("disconnect",), ("loop_stop",)]


def test_socket_error_raises_connect_error(monkeypatch: pytest.MonkeyPatch, fake_paho: type[FakePahoClient]) -> None:
    def refuse(self, host, port, keepalive=60):
        raise ConnectionRefusedError("connection refused")

    monkeypatch.setattr(FakePahoClient, "connect", refuse)
    with pytest.raises(BrokerConnectError):
        MQTTBrokerClient().connect("broker.local")


def test_publish_without_connection_raises() -> None:
    with pytest.raises(PublishError):
        MQTTBrokerClient().publish("/c/K1", "1")


def test_unacknowledged_publish_raises(fake_paho: type[FakePahoClient]) -> None:
    fake_paho.publish_info = FakeMessageInfo(published=False)
    client = MQTTBrokerClient()
    client.connect("broker.local")
    with pytest.raises(PublishError):
        client.publish("/c/K1", "0")


def test_publish_error_code_raises(fake_paho: type[FakePahoClient]) -> None:
    fake_paho.publish_info = FakeMessageInfo(rc=mqtt_transport.mqtt.MQTT_ERR_NO_CONN)
    client = MQTTBrokerClient()
    client.connect("broker.local")
    with pytest.raises(PublishError):
        client.publish("/c/K1", "0")


def test_disconnect_without_connection_is_noop() -> None:
    MQTTBrokerClient().disconnect()
