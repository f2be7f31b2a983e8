"""Action legality checks."""

from __future__ import annotations

from collections.abc import Sequence

from wbcmd.core.device_match import resolve_device
from wbcmd.core.errors import UnsupportedActionError
from wbcmd.core.model import ActionPolicy, Command, Device


def allowed_actions(target: str) -> tuple[str, ...]:
    return ActionPolicy.for_target(target).allowed_actions


def validate_action(target: str, action: str) -> None:
    policy = ActionPolicy.for_target(target)
    if not policy.allows(action):
        allowed = ", ".join(policy.allowed_actions)
        raise UnsupportedActionError(
            f"Action '{action.lower()}' is not supported for target '{target.lower()}'. Allowed: {allowed}"
        )


def validate_command(devices: Sequence[Device], command: Command) -> Device:
    """Resolve the device, then check the action against its target.

    Device errors take precedence over action errors.
    """
    device = resolve_device(devices, command)
    validate_action(device.target, command.action)
    return device
