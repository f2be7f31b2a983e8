"""Usage text derived from the device table."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from wbcmd.core.model import BASE_ACTIONS, POWER_ACTIONS, POWER_TARGET, Device

HELP_TOKENS = frozenset({"-h", "--help", "?"})

_BASIC_HELP = "\nUsage:\n\twbcmd <target> <action> <device>\n\nOptions:\n"


def is_help_request(argument: str) -> bool:
    return argument.lower() in HELP_TOKENS


def _quoted(values: Iterable[str]) -> str:
    return ", ".join(f"'{value}'" for value in sorted(values))


def format_help(devices: Sequence[Device]) -> str:
    targets = {device.target.lower() for device in devices}
    names = {device.name.lower() for device in devices}
    actions = set(BASE_ACTIONS)
    if POWER_TARGET in targets:
        actions.update(POWER_ACTIONS)

    lines = [
        f"\t<target>\t\t\tWhat you want switch. Allowed values: {_quoted(targets)}\n",
        f"\t<action>\t\t\tWhat action you want to do. Allowed values: {_quoted(actions)}",
    ]
    if "restart" in actions:
        lines.append(f" ('restart' may be applicable for '{POWER_TARGET}' only)")
    lines.append("\n")
    lines.append(f"\t<device>\t\t\tDevice name. Allowed values: {_quoted(names)}\n")
    return _BASIC_HELP + "".join(lines)
