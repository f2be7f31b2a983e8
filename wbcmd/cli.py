"""Typer CLI entrypoint."""

from __future__ import annotations

import logging
import os

import typer

from wbcmd.core.errors import CommandError, ConfigError, ExecutionError
from wbcmd.core.service import WbcmdService

LOG_LEVEL_ENV_VAR = "WBCMD_LOG_LEVEL"

app = typer.Typer(help="Switch test bench relays over MQTT", add_completion=False)


def _build_service() -> WbcmdService:
    service = WbcmdService()
    for warning in getattr(service, "load_warnings", ()):
        typer.echo(f"Warning: {warning}", err=True)
    return service


@app.command(context_settings={"ignore_unknown_options": True, "help_option_names": []})
def main(
    args: list[str] | None = typer.Argument(None, metavar="<target> <action> <device>"),
) -> None:
    """Publish the relay state for ACTION on DEVICE's TARGET channel.

    Pass -h, --help or ? as the only argument to list configured values.
    A literal -- ends option parsing and is not counted as an argument.
    """
    argv = list(args or [])
    try:
        service = _build_service()
    except ConfigError as exc:
        typer.echo(f"Error: Can't parse config: {exc}", err=True)
        raise typer.Exit(code=1) from None

    if service.is_help_request(argv):
        typer.echo(service.help_page(), nl=False)
        return

    try:
        command = service.parse_command(argv)
        device = service.resolve(command)
    except CommandError as exc:
        typer.echo(f"Error: Command is incorrect: {exc}", err=True)
        raise typer.Exit(code=1) from None

    try:
        result = service.executor.execute(device, command.action)
    except ExecutionError as exc:
        typer.echo(f"Error: Command is not executed: {exc}", err=True)
        raise typer.Exit(code=2) from None

    payloads = ", ".join(result.payloads)
    typer.echo(
        f"Sent {result.action} to {result.device.name} ({result.device.target}) "
        f"via {result.device.host} channel={result.device.channel} payloads={payloads}"
    )


def _configure_logging() -> None:
    level = os.environ.get(LOG_LEVEL_ENV_VAR, "WARNING").upper()
    logging.basicConfig(
        level=logging.getLevelNamesMapping().get(level, logging.WARNING),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def run() -> None:
    _configure_logging()
    app()


if __name__ == "__main__":
    run()
