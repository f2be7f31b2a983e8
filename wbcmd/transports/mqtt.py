"""MQTT broker client built on paho-mqtt."""

from __future__ import annotations

import logging
import os
import threading
from typing import Any
from urllib.parse import urlsplit

import paho.mqtt.client as mqtt

from wbcmd.core.errors import BrokerConnectError, PublishError

DEFAULT_PORT = 1883
_SCHEMES = {"tcp", "mqtt"}

LOGGER = logging.getLogger(__name__)


def parse_endpoint(endpoint: str) -> tuple[str, int]:
    """Split `host`, `host:port` or `tcp://host:port` into host and port."""
    value = endpoint.strip()
    if "://" in value:
        parts = urlsplit(value)
        if parts.scheme.lower() not in _SCHEMES:
            raise BrokerConnectError(f"Unsupported broker scheme '{parts.scheme}' in '{endpoint}'")
        try:
            port = parts.port or DEFAULT_PORT
        except ValueError as exc:
            raise BrokerConnectError(f"Invalid broker port in '{endpoint}'") from exc
        if not parts.hostname:
            raise BrokerConnectError(f"Missing broker host in '{endpoint}'")
        return parts.hostname, port

    host, sep, port_text = value.rpartition(":")
    if not sep:
        return value, DEFAULT_PORT
    if not host or not port_text.isdigit():
        raise BrokerConnectError(f"Invalid broker endpoint '{endpoint}'")
    return host, int(port_text)


class MQTTBrokerClient:
    """Blocking publish-only wrapper around a paho client.

    Publishes with QoS 0 and no retain flag. The paho network loop runs in a
    background thread between `connect` and `disconnect`.
    """

    def __init__(
        self,
        *,
        client_id: str | None = None,
        qos: int = 0,
        keepalive: int = 60,
        timeout_s: float = 5.0,
    ) -> None:
        self.client_id = client_id or f"wbcmd-{os.getpid()}"
        self.qos = qos
        self.keepalive = keepalive
        self.timeout_s = timeout_s
        self._client: mqtt.Client | None = None
        self._connected = threading.Event()
        self._disconnected = threading.Event()
        self._connect_reason: Any = None

    def connect(self, endpoint: str) -> None:
        host, port = parse_endpoint(endpoint)
        client = mqtt.Client(mqtt.CallbackAPIVersion.VERSION2, client_id=self.client_id)
        client.on_connect = self._on_connect
        client.on_disconnect = self._on_disconnect
        self._connected.clear()
        self._connect_reason = None

        try:
            client.connect(host, port, keepalive=self.keepalive)
        except (OSError, ValueError) as exc:
            raise BrokerConnectError(f"Unable to connect to MQTT broker at {host}:{port}: {exc}") from exc

        client.loop_start()
        if not self._connected.wait(self.timeout_s):
            client.disconnect()
            client.loop_stop()
            raise BrokerConnectError(f"Timed out waiting for MQTT broker at {host}:{port}")
        if getattr(self._connect_reason, "is_failure", False):
            client.disconnect()
            client.loop_stop()
            raise BrokerConnectError(f"MQTT broker at {host}:{port} refused connection: {self._connect_reason}")

        LOGGER.info("Connected to MQTT broker at %s:%d", host, port)
        self._client = client

    def publish(self, topic: str, payload: str) -> None:
        if self._client is None:
            raise PublishError(f"Cannot publish to {topic}: not connected")

        info = self._client.publish(topic, payload, qos=self.qos, retain=False)
        if info.rc != mqtt.MQTT_ERR_SUCCESS:
            raise PublishError(f"Publish to {topic} failed: {mqtt.error_string(info.rc)}")
        try:
            info.wait_for_publish(timeout=self.timeout_s)
        except (RuntimeError, ValueError) as exc:
            raise PublishError(f"Publish to {topic} failed: {exc}") from exc
        if not info.is_published():
            raise PublishError(f"Timed out waiting for publish acknowledgment on {topic}")

    def disconnect(self, grace_period_ms: int = 250) -> None:
        client = self._client
        if client is None:
            return
        self._client = None
        self._disconnected.clear()
        client.disconnect()
        self._disconnected.wait(grace_period_ms / 1000)
        client.loop_stop()
        LOGGER.info("Disconnected from MQTT broker")

    def _on_connect(self, client: mqtt.Client, userdata: Any, flags: Any, reason_code: Any, properties: Any) -> None:
        self._connect_reason = reason_code
        self._connected.set()

    def _on_disconnect(
        self,
        client: mqtt.Client,
        userdata: Any,
        flags: Any,
        reason_code: Any,
        properties: Any,
    ) -> None:
        if getattr(reason_code, "is_failure", False):
            LOGGER.warning("Unexpected MQTT disconnection: %s", reason_code)
        self._disconnected.set()
