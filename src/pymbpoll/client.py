"""ModbusSession: one bound pymodbus client with unit id and word order fixed for the run."""

import logging
from typing import Any, Callable, Sequence

from pymodbus.client.base import ModbusBaseSyncClient
from pymodbus.client.mixin import ModbusClientMixin
from pymodbus.exceptions import ModbusException as PymodbusException

from .codec import DATATYPE, word_order
from .errors import ModbusIOError
from .types import ModbusTable

logger = logging.getLogger(__name__)


class ModbusSession:
    """
    Thin wrapper over a pymodbus sync client.

    Every request goes to the same unit id, wide values use the same word order, and
    every failure (exception response or pymodbus exception) becomes a ModbusIOError
    whose message names the operation.
    """

    def __init__(
        self,
        client: ModbusBaseSyncClient,
        unit_id: int = 1,
        big_endian: bool = True,
        url: str = "",
    ) -> None:
        self._client = client
        self._unit_id = unit_id
        self._word_order = word_order(big_endian)
        self._url = url
        self._open = False

    @property
    def unit_id(self) -> int:
        return self._unit_id

    @property
    def word_order(self) -> str:
        return self._word_order

    def open(self) -> None:
        """Connect the underlying client; a refused connection is fatal."""
        if self._open:
            return
        logger.debug("Connecting to %s (unit id %d)", self._url, self._unit_id)
        try:
            connected = self._client.connect()
        except PymodbusException as e:
            raise ModbusIOError(f"failed to connect: {e}", operation="connect", cause=e) from e
        if not connected:
            raise ModbusIOError(f"failed to connect to {self._url}", operation="connect")
        self._open = True

    def close(self) -> None:
        if not self._open:
            return
        try:
            self._client.close()
        except Exception as e:
            logger.warning("Error closing Modbus client: %s", e)
        self._open = False
        logger.debug("Closed connection to %s", self._url)

    def __enter__(self) -> "ModbusSession":
        self.open()
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def _call(
        self,
        operation: str,
        table: ModbusTable,
        address: int,
        request: Callable[[], Any],
    ) -> Any:
        logger.debug("%s at address %d (unit id %d)", operation, address, self._unit_id)
        try:
            rr = request()
        except PymodbusException as e:
            raise ModbusIOError(
                f"failed to {operation}: {e}",
                operation=operation,
                table=table.label,
                address=address,
                cause=e,
            ) from e
        if rr.isError():
            raise ModbusIOError(
                f"failed to {operation}: {rr}",
                operation=operation,
                table=table.label,
                address=address,
                cause=getattr(rr, "exception", None),
            )
        return rr

    def _bits(self, operation: str, table: ModbusTable, address: int, count: int, rr: Any) -> list[bool]:
        bits = getattr(rr, "bits", None)
        if bits is None or len(bits) < count:
            raise ModbusIOError(
                f"failed to {operation}: short bit response",
                operation=operation,
                table=table.label,
                address=address,
            )
        # pymodbus pads bit responses to a multiple of 8
        return [bool(b) for b in bits[:count]]

    def read_coils(self, address: int, count: int) -> list[bool]:
        rr = self._call(
            "read coils",
            ModbusTable.COIL,
            address,
            lambda: self._client.read_coils(address, count=count, device_id=self._unit_id),
        )
        return self._bits("read coils", ModbusTable.COIL, address, count, rr)

    def read_discrete_inputs(self, address: int, count: int) -> list[bool]:
        rr = self._call(
            "read discrete inputs",
            ModbusTable.DISCRETE_INPUT,
            address,
            lambda: self._client.read_discrete_inputs(address, count=count, device_id=self._unit_id),
        )
        return self._bits("read discrete inputs", ModbusTable.DISCRETE_INPUT, address, count, rr)

    def read_registers(self, address: int, count: int, table: ModbusTable) -> list[int]:
        """Read input or holding registers, chosen by table."""
        if table is ModbusTable.INPUT_REGISTER:
            operation = "read input registers"
            read = self._client.read_input_registers
        elif table is ModbusTable.HOLDING_REGISTER:
            operation = "read holding registers"
            read = self._client.read_holding_registers
        else:
            raise ValueError(f"{table.label} are not registers")
        rr = self._call(operation, table, address, lambda: read(address, count=count, device_id=self._unit_id))
        registers = getattr(rr, "registers", None)
        if registers is None or len(registers) < count:
            raise ModbusIOError(
                f"failed to {operation}: short register response",
                operation=operation,
                table=table.label,
                address=address,
            )
        return [int(r) for r in registers[:count]]

    def write_coils(self, address: int, values: Sequence[bool]) -> None:
        self._call(
            "write coils",
            ModbusTable.COIL,
            address,
            lambda: self._client.write_coils(address, list(values), device_id=self._unit_id),
        )

    def write_registers(self, address: int, values: Sequence[int], operation: str = "write holding registers") -> None:
        self._call(
            operation,
            ModbusTable.HOLDING_REGISTER,
            address,
            lambda: self._client.write_registers(address, list(values), device_id=self._unit_id),
        )

    def _write_patterns(self, address: int, patterns: Sequence[int], operation: str) -> None:
        registers: list[int] = []
        for bits in patterns:
            registers.extend(
                ModbusClientMixin.convert_to_registers(bits, DATATYPE.UINT32, word_order=self._word_order)
            )
        self.write_registers(address, registers, operation=operation)

    def write_uint32s(self, address: int, values: Sequence[int]) -> None:
        """Write unsigned 32-bit values, two registers each, in the session word order."""
        self._write_patterns(address, values, "write 32-bit integers")

    def write_float32s(self, address: int, patterns: Sequence[int]) -> None:
        """
        Write IEEE 754 singles given as their 32-bit patterns, two registers each.

        The pattern goes out unchanged, NaN payloads included.
        """
        self._write_patterns(address, patterns, "write 32-bit floats")
