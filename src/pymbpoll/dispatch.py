"""Operation dispatch: pick one read or write for the configured data type and render its output."""

import logging
import math
from dataclasses import dataclass
from functools import partial
from typing import Callable, Sequence

from .client import ModbusSession
from .codec import combine_words, decode_float32, decode_int32, float_from_bits, pair_values, to_uint16
from .config import Configuration
from .errors import NotWritableError
from .types import DataType, ModbusTable, RegisterFormat

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Operation:
    """A resolved request: call it with an open session, get the output lines back."""

    name: str
    is_write: bool
    run: Callable[[ModbusSession], list[str]]

    def __call__(self, session: ModbusSession) -> list[str]:
        return self.run(session)


def format_float(value: float) -> str:
    """Two decimals; NaN and the infinities print as NaN, +Inf and -Inf."""
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "+Inf" if value > 0 else "-Inf"
    return f"{value:.2f}"


def _header(label: str, start_ref: int, count: int) -> str:
    return f"{label} ({start_ref}-{start_ref + count - 1}):"


def format_bits(label: str, start_ref: int, bits: Sequence[bool]) -> list[str]:
    lines = [_header(label, start_ref, len(bits))]
    lines.extend(f"[{start_ref + i}]: {int(bit)}" for i, bit in enumerate(bits))
    return lines


def format_registers(
    label: str,
    start_ref: int,
    registers: Sequence[int],
    data_type: DataType,
    big_endian: bool = True,
) -> list[str]:
    """
    One line per register. hex adds the 4-digit hex form; int/float add the 32-bit
    value on the first register of each pair.
    """
    lines = [_header(label, start_ref, len(registers))]
    if not data_type.is_wide:
        for i, reg in enumerate(registers):
            line = f"[{start_ref + i}]: {reg}"
            if data_type.fmt is RegisterFormat.HEX:
                line += f" (0x{reg:04X})"
            lines.append(line)
        return lines

    for i in range(0, len(registers), 2):
        first = registers[i]
        if i + 1 == len(registers):
            lines.append(f"[{start_ref + i}]: {first}")
            break
        second = registers[i + 1]
        if data_type.fmt is RegisterFormat.INT:
            wide = f"{decode_int32(first, second, big_endian)} as 32-bit int"
        else:
            wide = f"{format_float(decode_float32(first, second, big_endian))} as 32-bit float"
        lines.append(f"[{start_ref + i}]: {first} ({wide})")
        lines.append(f"[{start_ref + i + 1}]: {second}")
    return lines


def read_bits(session: ModbusSession, config: Configuration) -> list[str]:
    table = config.data_type.table
    if table is ModbusTable.COIL:
        bits = session.read_coils(config.address, config.count)
    else:
        bits = session.read_discrete_inputs(config.address, config.count)
    return format_bits(table.label, config.start_ref, bits)


def read_registers(session: ModbusSession, config: Configuration) -> list[str]:
    table = config.data_type.table
    registers = session.read_registers(config.address, config.count, table)
    return format_registers(table.label, config.start_ref, registers, config.data_type, config.big_endian)


def write_coils(session: ModbusSession, config: Configuration) -> list[str]:
    coils = [value != 0 for value in config.write_values]
    session.write_coils(config.address, coils)
    lines = [f"Successfully wrote {len(coils)} coil(s) starting at address {config.start_ref}"]
    lines.extend(f"[{config.start_ref + i}]: {int(coil)}" for i, coil in enumerate(coils))
    return lines


def write_registers(session: ModbusSession, config: Configuration) -> list[str]:
    registers = [to_uint16(value) for value in config.write_values]
    session.write_registers(config.address, registers)
    lines = [f"Successfully wrote {len(registers)} 16-bit register(s) starting at address {config.start_ref}"]
    lines.extend(f"[{config.start_ref + i}]: {reg}" for i, reg in enumerate(registers))
    return lines


def _combined_pairs(config: Configuration) -> list[int]:
    """Each pair of write values -> one unsigned 32-bit pattern, per the configured word order."""
    return [
        combine_words(to_uint16(first), to_uint16(second), config.big_endian)
        for first, second in pair_values(config.write_values)
    ]


def write_int32s(session: ModbusSession, config: Configuration) -> list[str]:
    values = _combined_pairs(config)
    session.write_uint32s(config.address, values)
    lines = [f"Successfully wrote {len(values)} 32-bit integer(s) starting at address {config.start_ref}"]
    lines.extend(f"[{config.start_ref + i * 2}]: {value}" for i, value in enumerate(values))
    return lines


def write_float32s(session: ModbusSession, config: Configuration) -> list[str]:
    patterns = _combined_pairs(config)
    session.write_float32s(config.address, patterns)
    values = [float_from_bits(bits) for bits in patterns]
    lines = [f"Successfully wrote {len(values)} 32-bit float(s) starting at address {config.start_ref}"]
    lines.extend(f"[{config.start_ref + i * 2}]: {format_float(value)}" for i, value in enumerate(values))
    return lines


_WRITERS: dict[RegisterFormat, tuple[str, Callable[[ModbusSession, Configuration], list[str]]]] = {
    RegisterFormat.DECIMAL: ("write holding registers", write_registers),
    RegisterFormat.HEX: ("write holding registers", write_registers),
    RegisterFormat.INT: ("write 32-bit integers", write_int32s),
    RegisterFormat.FLOAT: ("write 32-bit floats", write_float32s),
}


def resolve_operation(config: Configuration) -> Operation:
    """
    Choose the single operation this run performs.

    No write values: read the configured table. Write values: write coils or holding
    registers (16-bit, or 32-bit per the format); other tables raise NotWritableError.
    """
    data_type = config.data_type
    table = data_type.table
    if not config.is_write:
        name = f"read {table.label.lower()}"
        handler = read_bits if table.is_bit else read_registers
        logger.debug("Resolved %s for data type %s", name, data_type)
        return Operation(name=name, is_write=False, run=partial(handler, config=config))

    if table is ModbusTable.COIL:
        name, handler = "write coils", write_coils
    elif table is ModbusTable.HOLDING_REGISTER:
        name, handler = _WRITERS[data_type.fmt]
    else:
        raise NotWritableError(str(data_type))
    logger.debug("Resolved %s for data type %s (%d value(s))", name, data_type, len(config.write_values))
    return Operation(name=name, is_write=True, run=partial(handler, config=config))
