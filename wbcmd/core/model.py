"""Core data models used across loader, service, and CLI."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

BASE_ACTIONS = ("up", "down")
POWER_ACTIONS = ("restart",)
POWER_TARGET = "power"


@dataclass(frozen=True)
class Device:
    host: str
    name: str
    target: str
    channel: str

    def normalized(self) -> Device:
        return Device(
            host=self.host,
            name=self.name.lower(),
            target=self.target.lower(),
            channel=self.channel,
        )


@dataclass(frozen=True)
class Command:
    target: str
    action: str
    device_name: str

    @classmethod
    def from_args(cls, target: str, action: str, device_name: str) -> Command:
        return cls(target=target.lower(), action=action.lower(), device_name=device_name.lower())


class ActionPolicy(Enum):
    """Closed set of per-target action policies."""

    DEFAULT = BASE_ACTIONS
    POWER = BASE_ACTIONS + POWER_ACTIONS

    @classmethod
    def for_target(cls, target: str) -> ActionPolicy:
        if target.lower() == POWER_TARGET:
            return cls.POWER
        return cls.DEFAULT

    @property
    def allowed_actions(self) -> tuple[str, ...]:
        return self.value

    def allows(self, action: str) -> bool:
        return action.lower() in self.value


@dataclass(frozen=True)
class ExecutionResult:
    device: Device
    action: str
    payloads: tuple[str, ...]
