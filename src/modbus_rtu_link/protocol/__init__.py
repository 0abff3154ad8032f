"""Modbus RTU framing and transaction handling."""

from modbus_rtu_link.protocol.buffer import ReassemblyBuffer
from modbus_rtu_link.protocol.constants import (
    EXCEPTION_BIT,
    FUNCTION_CODE_MASK,
    FunctionCode,
    function_name,
)
from modbus_rtu_link.protocol.crc import append_crc16, calculate_crc16, check_crc
from modbus_rtu_link.protocol.frames import FrameKind, classify, resolve_frame_length
from modbus_rtu_link.protocol.handler import ByteStream, Transaction, TransactionHandler, TransactionState

__all__ = [
    "ByteStream",
    "FrameKind",
    "FunctionCode",
    "ReassemblyBuffer",
    "Transaction",
    "TransactionHandler",
    "TransactionState",
    "append_crc16",
    "calculate_crc16",
    "check_crc",
    "classify",
    "function_name",
    "resolve_frame_length",
    "EXCEPTION_BIT",
    "FUNCTION_CODE_MASK",
]
