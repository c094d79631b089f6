"""Core data model: transport modes, Modbus tables, register formats and the data type tag."""

from dataclasses import dataclass
from enum import Enum

from .errors import UnsupportedModeError, UsageError


class Mode(str, Enum):
    """Transport modes understood by the selector."""

    TCP = "tcp"
    TLS = "tls"
    UDP = "udp"
    RTU = "rtu"
    RTU_OVER_TCP = "rtuovertcp"
    RTU_OVER_UDP = "rtuoverudp"

    @property
    def is_network(self) -> bool:
        """True when the target is a host name, False when it is a serial device."""
        return self is not Mode.RTU

    @classmethod
    def parse(cls, raw: str) -> "Mode":
        try:
            return cls(raw)
        except ValueError:
            raise UnsupportedModeError(raw, tuple(m.value for m in cls)) from None


class ModbusTable(str, Enum):
    """Modbus tables, keyed by the mbpoll type prefix."""

    COIL = "0"
    DISCRETE_INPUT = "1"
    INPUT_REGISTER = "3"
    HOLDING_REGISTER = "4"

    @property
    def is_bit(self) -> bool:
        return self in (ModbusTable.COIL, ModbusTable.DISCRETE_INPUT)

    @property
    def label(self) -> str:
        return _TABLE_LABELS[self]


_TABLE_LABELS = {
    ModbusTable.COIL: "Coils",
    ModbusTable.DISCRETE_INPUT: "Discrete Inputs",
    ModbusTable.INPUT_REGISTER: "Input Registers",
    ModbusTable.HOLDING_REGISTER: "Holding Registers",
}


class RegisterFormat(str, Enum):
    """Display/encoding format suffix for register tables."""

    DECIMAL = ""
    HEX = "hex"
    INT = "int"
    FLOAT = "float"


class Parity(str, Enum):
    """Serial parity; the value is what the user types, code is what pymodbus wants."""

    NONE = "none"
    EVEN = "even"
    ODD = "odd"

    @property
    def code(self) -> str:
        return self.value[0].upper()


class Action(str, Enum):
    """What the invocation asks for once parsing is done."""

    RUN = "run"
    HELP = "help"
    VERSION = "version"


@dataclass(frozen=True)
class DataType:
    """Resolved `-t` tag: which table to address and how to render/encode registers."""

    table: ModbusTable = ModbusTable.HOLDING_REGISTER
    fmt: RegisterFormat = RegisterFormat.DECIMAL

    def __post_init__(self) -> None:
        if self.table.is_bit and self.fmt is not RegisterFormat.DECIMAL:
            raise ValueError(f"bit table {self.table.value} takes no format, got {self.fmt.value!r}")

    @property
    def is_wide(self) -> bool:
        """True for formats spanning two 16-bit registers."""
        return self.fmt in (RegisterFormat.INT, RegisterFormat.FLOAT)

    @classmethod
    def parse(cls, raw: str) -> "DataType":
        """
        Parse an mbpoll type tag: 0, 1, 3[:hex|int|float] or 4[:hex|int|float].

        Raises UsageError for anything else, including a format on a bit table.
        """
        prefix, sep, suffix = raw.strip().partition(":")
        try:
            table = ModbusTable(prefix)
            fmt = RegisterFormat(suffix)
        except ValueError:
            raise UsageError(f"unsupported data type: {raw}", option="-t") from None
        if sep and not suffix:
            raise UsageError(f"unsupported data type: {raw}", option="-t")
        if table.is_bit and fmt is not RegisterFormat.DECIMAL:
            raise UsageError(
                f"unsupported data type: {raw} (coils and discrete inputs take no format suffix)",
                option="-t",
            )
        return cls(table=table, fmt=fmt)

    def __str__(self) -> str:
        if self.fmt is RegisterFormat.DECIMAL:
            return self.table.value
        return f"{self.table.value}:{self.fmt.value}"
