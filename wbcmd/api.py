"""Stable public API for building tooling on top of wbcmd.

This module is the supported integration surface for scripts that drive
relays without going through the CLI. Avoid importing from internal modules
unless intentionally depending on non-stable internals.
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

from wbcmd.core.errors import (
    BrokerConnectError,
    CommandError,
    ConfigError,
    ConfigLoadError,
    ConfigValidationError,
    DeviceNotFoundError,
    ExecutionError,
    NoApplicableDeviceError,
    PublishError,
    UnknownActionError,
    UnsupportedActionError,
    UsageError,
    WbcmdError,
)
from wbcmd.core.executor import ActionExecutor
from wbcmd.core.model import ActionPolicy, Command, Device, ExecutionResult
from wbcmd.core.policy import allowed_actions
from wbcmd.core.service import WbcmdService
from wbcmd.transports.base import BrokerClient
from wbcmd.transports.mqtt import MQTTBrokerClient

__all__ = [
    "WbcmdError",
    "ConfigError",
    "ConfigLoadError",
    "ConfigValidationError",
    "CommandError",
    "UsageError",
    "DeviceNotFoundError",
    "NoApplicableDeviceError",
    "UnsupportedActionError",
    "ExecutionError",
    "BrokerConnectError",
    "PublishError",
    "UnknownActionError",
    "ActionPolicy",
    "Command",
    "Device",
    "ExecutionResult",
    "ActionExecutor",
    "BrokerClient",
    "MQTTBrokerClient",
    "Client",
]


class Client:
    """Public client for resolving and executing relay commands.

    A `Client` wraps device table loading, command validation and the MQTT
    publish sequence. Pass `devices` to skip reading the config file and
    `executor` to swap the broker client or settle delays.
    """

    def __init__(
        self,
        *,
        devices: Sequence[Device] | None = None,
        config_path: Path | None = None,
        executor: ActionExecutor | None = None,
    ) -> None:
        self._service = WbcmdService(devices=devices, config_path=config_path, executor=executor)

    @property
    def load_warnings(self) -> tuple[str, ...]:
        return self._service.load_warnings

    def list_devices(self) -> list[Device]:
        return list(self._service.devices)

    def allowed_actions(self, target: str) -> tuple[str, ...]:
        return allowed_actions(target)

    def help_page(self) -> str:
        return self._service.help_page()

    def resolve(self, target: str, action: str, device_name: str) -> Device:
        return self._service.resolve(Command.from_args(target, action, device_name))

    def switch(self, target: str, action: str, device_name: str) -> ExecutionResult:
        return self._service.run(Command.from_args(target, action, device_name))
