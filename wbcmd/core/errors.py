"""Domain-specific errors for wbcmd."""


class WbcmdError(Exception):
    """Base error for wbcmd."""


class ConfigError(WbcmdError):
    """Base error for device table problems."""


class ConfigLoadError(ConfigError):
    """Raised when the device table cannot be read or parsed."""


class ConfigValidationError(ConfigError):
    """Raised when a device record does not conform to schema or semantics."""


class CommandError(WbcmdError):
    """Base error for commands rejected before any broker I/O."""


class UsageError(CommandError):
    """Raised on a malformed command line."""


class DeviceNotFoundError(CommandError):
    """Raised when no device record carries the requested name."""


class NoApplicableDeviceError(CommandError):
    """Raised when the device exists but not for the requested target."""


class UnsupportedActionError(CommandError):
    """Raised when the action is not allowed for the target."""


class ExecutionError(WbcmdError):
    """Base error for failures after a command was validated."""


class BrokerConnectError(ExecutionError):
    """Raised when the MQTT broker connection cannot be established."""


class PublishError(ExecutionError):
    """Raised when a publish fails or is not acknowledged."""


class UnknownActionError(ExecutionError):
    """Raised when an unvalidated action reaches the executor."""
