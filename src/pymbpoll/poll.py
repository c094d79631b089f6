"""Poll loop: run an operation once, or keep re-reading at a fixed period until it fails."""

import logging
import time
from typing import Callable

from .client import ModbusSession
from .config import Configuration
from .dispatch import Operation

logger = logging.getLogger(__name__)


def run_operation(
    session: ModbusSession,
    operation: Operation,
    config: Configuration,
    emit: Callable[[str], None] = print,
    sleep: Callable[[float], None] | None = None,
) -> int:
    """
    Execute operation against session and emit its output lines.

    Writes always run exactly once. Reads repeat every config.poll_rate seconds unless
    config.poll_once is set. Any error from the operation ends the loop and propagates.
    Returns the number of completed executions.
    """
    cycles = 0
    while True:
        for line in operation(session):
            emit(line)
        cycles += 1
        if operation.is_write or config.poll_once:
            return cycles
        logger.debug("%s done (cycle %d), next in %d ms", operation.name, cycles, config.poll_rate_ms)
        (sleep or time.sleep)(config.poll_rate)
