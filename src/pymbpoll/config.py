"""Configuration model: one frozen record of every resolved option, plus its validation pass."""

from dataclasses import dataclass

from .errors import ConfigValidationError, WriteValueError
from .types import Action, DataType, Mode, RegisterFormat

MAX_COUNT = 125
MAX_ADDRESS_SPACE = 0x10000


@dataclass(frozen=True)
class Configuration:
    """Everything one invocation needs; built by the argument parser, read-only afterwards."""

    mode: Mode = Mode.TCP
    host: str = ""
    device: str = ""
    port: int = 502
    baudrate: int = 19200
    databits: int = 8
    stopbits: int = 1
    parity: str = "even"
    slave_id: int = 1
    start_ref: int = 1
    count: int = 1
    data_type: DataType = DataType()
    zero_based: bool = False
    big_endian: bool = True
    poll_once: bool = False
    poll_rate_ms: int = 1000
    timeout: float = 1.0
    verbose: bool = False
    write_values: tuple[float, ...] = ()
    action: Action = Action.RUN

    @property
    def is_write(self) -> bool:
        return bool(self.write_values)

    @property
    def address(self) -> int:
        """Wire (PDU) address of the first point: references are 1-based unless zero_based."""
        return self.start_ref if self.zero_based else self.start_ref - 1

    @property
    def target(self) -> str:
        return self.host or self.device

    @property
    def poll_rate(self) -> float:
        """Poll period in seconds."""
        return self.poll_rate_ms / 1000.0


def validate(config: Configuration) -> Configuration:
    """
    Check ranges and cross-field rules; return the config unchanged or raise on the first failure.

    Every message names the violated constraint and its legal range. Nothing is aggregated.
    """
    if not 1 <= config.count <= MAX_COUNT:
        raise ConfigValidationError(f"count must be between 1 and {MAX_COUNT}", field="count")
    if not 0 <= config.slave_id <= 255:
        raise ConfigValidationError("slave address must be between 0 and 255", field="slave_id")
    if not 1200 <= config.baudrate <= 921600:
        raise ConfigValidationError("baudrate must be between 1200 and 921600", field="baudrate")
    if config.databits not in (7, 8):
        raise ConfigValidationError("databits must be 7 or 8", field="databits")
    if config.stopbits not in (1, 2):
        raise ConfigValidationError("stopbits must be 1 or 2", field="stopbits")
    if config.parity not in ("none", "even", "odd"):
        raise ConfigValidationError("parity must be none, even, or odd", field="parity")
    if config.poll_rate_ms < 10:
        raise ConfigValidationError("poll rate must be at least 10ms", field="poll_rate_ms")
    if not 0.01 <= config.timeout <= 10.0:
        raise ConfigValidationError("timeout must be between 0.01 and 10.00 seconds", field="timeout")

    first_ref = 0 if config.zero_based else 1
    if config.start_ref < first_ref:
        raise ConfigValidationError(f"reference must be at least {first_ref}", field="start_ref")
    span = len(config.write_values) if config.is_write else config.count
    if config.address + span > MAX_ADDRESS_SPACE:
        raise ConfigValidationError(
            f"reference {config.start_ref} with {span} value(s) runs past the end of the address space",
            field="start_ref",
        )

    if config.mode.is_network and not config.host:
        raise ConfigValidationError(
            f"mode {config.mode.value} needs a HOST, but {config.device!r} was read as a serial device "
            "(give -m before the target)",
            field="host",
        )
    if not config.mode.is_network and not config.device:
        raise ConfigValidationError(
            f"mode {config.mode.value} needs a DEVICE, but {config.host!r} was read as a host "
            "(give -m before the target)",
            field="device",
        )

    if config.data_type.is_wide:
        if config.is_write and len(config.write_values) % 2:
            kind = "floats" if config.data_type.fmt is RegisterFormat.FLOAT else "integers"
            raise WriteValueError(f"32-bit {kind} require even number of values")
        if not config.is_write and config.count % 2:
            raise ConfigValidationError(
                f"count must be even for 32-bit data type {config.data_type}", field="count"
            )
    return config
