"""pymbpoll: mbpoll-style Modbus master (read/write coils and registers) on top of pymodbus."""

__version__ = "0.1.0"

from .args import parse_args, parse_tokens
from .client import ModbusSession
from .codec import combine_words, decode_float32, decode_int32, split_words
from .config import Configuration, validate
from .dispatch import Operation, resolve_operation
from .errors import (
    ConfigValidationError,
    MbpollError,
    ModbusIOError,
    NotWritableError,
    UnsupportedModeError,
    UsageError,
    WriteValueError,
)
from .poll import run_operation
from .transport import TransportDescriptor, open_session, select_transport
from .types import Action, DataType, Mode, ModbusTable, Parity, RegisterFormat

__all__ = [
    "__version__",
    "parse_args",
    "parse_tokens",
    "ModbusSession",
    "combine_words",
    "decode_float32",
    "decode_int32",
    "split_words",
    "Configuration",
    "validate",
    "Operation",
    "resolve_operation",
    "ConfigValidationError",
    "MbpollError",
    "ModbusIOError",
    "NotWritableError",
    "UnsupportedModeError",
    "UsageError",
    "WriteValueError",
    "run_operation",
    "TransportDescriptor",
    "open_session",
    "select_transport",
    "Action",
    "DataType",
    "Mode",
    "ModbusTable",
    "Parity",
    "RegisterFormat",
]
