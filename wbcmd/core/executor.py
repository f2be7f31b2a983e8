"""Publish sequences for validated commands."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable

from wbcmd.core.errors import UnknownActionError
from wbcmd.core.model import Device, ExecutionResult
from wbcmd.transports.base import BrokerClient
from wbcmd.transports.mqtt import MQTTBrokerClient

ON_PAYLOAD = "1"
OFF_PAYLOAD = "0"

PUBLISH_SETTLE_S = 1.0
RESTART_SETTLE_S = 7.0
DISCONNECT_GRACE_MS = 250

_SEQUENCES: dict[str, tuple[str, ...]] = {
    "up": (ON_PAYLOAD,),
    "down": (OFF_PAYLOAD,),
    "restart": (OFF_PAYLOAD, ON_PAYLOAD),
}

LOGGER = logging.getLogger(__name__)


class ActionExecutor:
    def __init__(
        self,
        *,
        broker_factory: Callable[[], BrokerClient] = MQTTBrokerClient,
        sleep: Callable[[float], None] = time.sleep,
        publish_settle_s: float = PUBLISH_SETTLE_S,
        restart_settle_s: float = RESTART_SETTLE_S,
        disconnect_grace_ms: int = DISCONNECT_GRACE_MS,
    ) -> None:
        self.broker_factory = broker_factory
        self.sleep = sleep
        self.publish_settle_s = publish_settle_s
        self.restart_settle_s = restart_settle_s
        self.disconnect_grace_ms = disconnect_grace_ms

    def execute(self, device: Device, action: str) -> ExecutionResult:
        """Run the publish sequence for `action` against `device.channel`.

        A single broker connection is used for the whole sequence and is
        always released before an error propagates. Nothing is retried.
        """
        sequence = _SEQUENCES.get(action)
        if sequence is None:
            raise UnknownActionError(f"Action '{action}' is unknown")

        broker = self.broker_factory()
        broker.connect(device.host)
        published: list[str] = []
        try:
            for index, payload in enumerate(sequence):
                if index > 0:
                    LOGGER.info("Waiting %.1fs before next publish to %s", self.restart_settle_s, device.channel)
                    self.sleep(self.restart_settle_s)
                self._publish(broker, device.channel, payload)
                published.append(payload)
        finally:
            broker.disconnect(self.disconnect_grace_ms)

        return ExecutionResult(device=device, action=action, payloads=tuple(published))

    def _publish(self, broker: BrokerClient, channel: str, payload: str) -> None:
        LOGGER.info("Publish %s to channel %s", payload, channel)
        broker.publish(channel, payload)
        self.sleep(self.publish_settle_s)
