"""Core application functionality."""

from .config import Settings, setup_logging
from .exceptions import ChecksumError, ResponseTimeoutError, TransactionError
from .models import PortFilter, SerialOptions

__all__ = [
    "ChecksumError",
    "PortFilter",
    "ResponseTimeoutError",
    "SerialOptions",
    "Settings",
    "TransactionError",
    "setup_logging",
]
