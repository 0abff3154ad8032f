"""Modbus RTU request/response transactions over asyncio serial ports."""

__version__ = "0.1.0"

from modbus_rtu_link.core.exceptions import ChecksumError, ResponseTimeoutError, TransactionError
from modbus_rtu_link.core.models import PortFilter, SerialOptions
from modbus_rtu_link.serial.connection import SerialSession

__all__ = [
    "ChecksumError",
    "PortFilter",
    "ResponseTimeoutError",
    "SerialOptions",
    "SerialSession",
    "TransactionError",
    "__version__",
]
