"""Device table loading and validation."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from importlib import resources
from pathlib import Path
from typing import Any

from jsonschema import ValidationError, validators

from wbcmd.core.errors import ConfigLoadError, ConfigValidationError
from wbcmd.core.model import Device

CONFIG_ENV_VAR = "MQTT_ENV_CONFIG"
DEFAULT_CONFIG_PATH = Path("/etc/wbcmd/mqtt_env_config")
LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class LoadedDevices:
    devices: tuple[Device, ...]
    warnings: tuple[str, ...]


def config_path() -> Path:
    override = os.environ.get(CONFIG_ENV_VAR)
    if override is None:
        return DEFAULT_CONFIG_PATH
    return Path(override)


def _load_schema_validator() -> Any:
    schema_text = resources.files("wbcmd.schemas").joinpath("devices.schema.json").read_text(
        encoding="utf-8"
    )
    schema = json.loads(schema_text)
    validator_cls = validators.validator_for(schema)
    validator_cls.check_schema(schema)
    return validator_cls(schema)


def _fold_keys(doc: Any) -> Any:
    if not isinstance(doc, list):
        return doc
    return [
        {str(key).upper(): value for key, value in record.items()} if isinstance(record, dict) else record
        for record in doc
    ]


def _build_device(record: dict[str, Any]) -> Device:
    device = Device(
        host=record["WB_MQTT_HOST"],
        name=record["NAME"].strip(),
        target=record["TARGET"].strip(),
        channel=record["CHANNEL"],
    )
    if not (device.host.strip() and device.name and device.target and device.channel.strip()):
        raise ConfigValidationError(f"Incorrect device detected: {record}")
    return device.normalized()


def _duplicate_warnings(devices: tuple[Device, ...]) -> tuple[str, ...]:
    seen: set[tuple[str, str]] = set()
    warnings: list[str] = []
    for device in devices:
        key = (device.name, device.target)
        if key in seen:
            warning = (
                f"Device '{device.name}' is defined more than once for target "
                f"'{device.target}'; the first entry is used"
            )
            LOGGER.warning(warning)
            warnings.append(warning)
        seen.add(key)
    return tuple(warnings)


def parse_devices(text: str, *, source: str = "<string>") -> LoadedDevices:
    """Parse a JSON device table, keeping the table order.

    Record keys match case-insensitively. Names and targets are lower-cased;
    hosts and channels are kept as written. Records sharing a name and target are
    kept but reported in `warnings`.
    """
    try:
        doc = _fold_keys(json.loads(text))
    except json.JSONDecodeError as exc:
        raise ConfigLoadError(f"Invalid JSON in {source}: {exc}") from exc

    validator = _load_schema_validator()
    try:
        validator.validate(doc)
    except ValidationError as exc:
        path = ".".join(str(p) for p in exc.path)
        where = f" ({path})" if path else ""
        raise ConfigValidationError(f"Schema validation failed for {source}{where}: {exc.message}") from exc

    devices = tuple(_build_device(record) for record in doc)
    return LoadedDevices(devices=devices, warnings=_duplicate_warnings(devices))


def load_devices(path: Path | None = None) -> LoadedDevices:
    source = path or config_path()
    try:
        content = source.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigLoadError(f"Could not read device config {source}: {exc}") from exc
    return parse_devices(content, source=str(source))
