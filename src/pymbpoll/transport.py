"""Transport selection: Configuration -> transport descriptor -> pymodbus client -> open session."""

import logging
from dataclasses import dataclass

from pymodbus import FramerType
from pymodbus.client import (
    ModbusSerialClient,
    ModbusTcpClient,
    ModbusTlsClient,
    ModbusUdpClient,
)
from pymodbus.client.base import ModbusBaseSyncClient

from .client import ModbusSession
from .config import Configuration
from .types import Mode, Parity

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TransportDescriptor:
    """Where and how to connect. Serial fields are None for plain network transports."""

    mode: Mode
    url: str
    timeout: float
    host: str = ""
    port: int | None = None
    device: str = ""
    baudrate: int | None = None
    databits: int | None = None
    stopbits: int | None = None
    parity: Parity | None = None


def select_transport(config: Configuration) -> TransportDescriptor:
    """
    Map the configured mode onto a transport descriptor.

    rtuovertcp and rtuoverudp keep the baud rate alongside the network endpoint; it
    describes the serial line behind the gateway, the socket itself ignores it.
    """
    mode = config.mode
    if mode in (Mode.TCP, Mode.TLS, Mode.UDP):
        return TransportDescriptor(
            mode=mode,
            url=f"{mode.value}://{config.host}:{config.port}",
            timeout=config.timeout,
            host=config.host,
            port=config.port,
        )
    if mode in (Mode.RTU_OVER_TCP, Mode.RTU_OVER_UDP):
        return TransportDescriptor(
            mode=mode,
            url=f"{mode.value}://{config.host}:{config.port}",
            timeout=config.timeout,
            host=config.host,
            port=config.port,
            baudrate=config.baudrate,
        )
    if mode is Mode.RTU:
        return TransportDescriptor(
            mode=mode,
            url=f"rtu://{config.device}",
            timeout=config.timeout,
            device=config.device,
            baudrate=config.baudrate,
            databits=config.databits,
            stopbits=config.stopbits,
            parity=Parity(config.parity),
        )
    raise AssertionError(f"unhandled mode: {mode!r}")


def create_client(descriptor: TransportDescriptor) -> ModbusBaseSyncClient:
    """Build (but do not connect) the pymodbus client for a descriptor. No retries at this layer."""
    mode = descriptor.mode
    timeout = descriptor.timeout
    if mode is Mode.TCP:
        return ModbusTcpClient(descriptor.host, port=descriptor.port, framer=FramerType.SOCKET, timeout=timeout, retries=0)
    if mode is Mode.TLS:
        return ModbusTlsClient(descriptor.host, port=descriptor.port, timeout=timeout, retries=0)
    if mode is Mode.UDP:
        return ModbusUdpClient(descriptor.host, port=descriptor.port, framer=FramerType.SOCKET, timeout=timeout, retries=0)
    if mode is Mode.RTU_OVER_TCP:
        return ModbusTcpClient(descriptor.host, port=descriptor.port, framer=FramerType.RTU, timeout=timeout, retries=0)
    if mode is Mode.RTU_OVER_UDP:
        return ModbusUdpClient(descriptor.host, port=descriptor.port, framer=FramerType.RTU, timeout=timeout, retries=0)
    if mode is Mode.RTU:
        if descriptor.parity is None:
            raise ValueError(f"serial descriptor for {descriptor.device} has no parity")
        return ModbusSerialClient(
            descriptor.device,
            framer=FramerType.RTU,
            baudrate=descriptor.baudrate,
            bytesize=descriptor.databits,
            parity=descriptor.parity.code,
            stopbits=descriptor.stopbits,
            timeout=timeout,
            retries=0,
        )
    raise AssertionError(f"unhandled mode: {mode!r}")


def open_session(config: Configuration) -> ModbusSession:
    """
    Select the transport, build the client and connect it.

    Unit id and word order are bound to the returned session before any request.
    Raises ModbusIOError when the connection cannot be opened; nothing is retried.
    """
    descriptor = select_transport(config)
    logger.debug("Transport: %s (timeout %.2f s)", descriptor.url, descriptor.timeout)
    session = ModbusSession(
        create_client(descriptor),
        unit_id=config.slave_id,
        big_endian=config.big_endian,
        url=descriptor.url,
    )
    session.open()
    return session
