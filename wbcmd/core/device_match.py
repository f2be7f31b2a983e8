"""Command-to-device matching logic."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from wbcmd.core.errors import DeviceNotFoundError, NoApplicableDeviceError
from wbcmd.core.model import Command, Device

LOGGER = logging.getLogger(__name__)


def devices_by_name(devices: Sequence[Device], name: str) -> list[Device]:
    lower_name = name.lower()
    return [device for device in devices if device.name.lower() == lower_name]


def devices_for_target(devices: Sequence[Device], target: str) -> list[Device]:
    lower_target = target.lower()
    return [device for device in devices if device.target.lower() == lower_target]


def resolve_device(devices: Sequence[Device], command: Command) -> Device:
    """Pick the device a command refers to.

    The name check runs before the target check so that an unknown device is
    always reported as such. When several records share the same name and
    target, the first one in table order wins.
    """
    named = devices_by_name(devices, command.device_name)
    if not named:
        raise DeviceNotFoundError(f"Device '{command.device_name.lower()}' is not defined")

    candidates = devices_for_target(named, command.target)
    if not candidates:
        targets = ", ".join(sorted({d.target.lower() for d in named}))
        raise NoApplicableDeviceError(
            f"No applicable device '{command.device_name.lower()}' for target "
            f"'{command.target.lower()}'. Available targets: {targets}"
        )

    if len(candidates) > 1:
        LOGGER.debug(
            "%d records match device '%s' target '%s'; using the first",
            len(candidates),
            command.device_name,
            command.target,
        )
    return candidates[0].normalized()
