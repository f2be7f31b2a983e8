"""Service layer used by CLI and API frontends."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

from wbcmd.core.config_loader import load_devices
from wbcmd.core.errors import UsageError
from wbcmd.core.executor import ActionExecutor
from wbcmd.core.help_page import format_help, is_help_request
from wbcmd.core.model import Command, Device, ExecutionResult
from wbcmd.core.policy import validate_command


class WbcmdService:
    def __init__(
        self,
        *,
        devices: Sequence[Device] | None = None,
        config_path: Path | None = None,
        executor: ActionExecutor | None = None,
    ) -> None:
        if devices is None:
            loaded = load_devices(config_path)
            self.devices = loaded.devices
            self.load_warnings = loaded.warnings
        else:
            self.devices = tuple(device.normalized() for device in devices)
            self.load_warnings = ()
        self.executor = executor or ActionExecutor()

    def help_page(self) -> str:
        return format_help(self.devices)

    def is_help_request(self, args: Sequence[str]) -> bool:
        return len(args) == 1 and is_help_request(args[0])

    def parse_command(self, args: Sequence[str]) -> Command:
        if len(args) != 3:
            raise UsageError(f"Expected 3 arguments <target> <action> <device>, got {len(args)}")
        return Command.from_args(*args)

    def resolve(self, command: Command) -> Device:
        return validate_command(self.devices, command)

    def run(self, command: Command) -> ExecutionResult:
        device = self.resolve(command)
        return self.executor.execute(device, command.action)
