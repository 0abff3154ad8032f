"""Frame boundary detection for Modbus RTU responses.

RTU frames carry no length prefix. The total length of a response is
inferred from its function code:

    exception       [ADDR][FC|0x80][EXC][CRC_L][CRC_H]              5 bytes
    variable read   [ADDR][FC][COUNT][DATA * COUNT][CRC_L][CRC_H]   3 + COUNT + 2
    fixed echo      [ADDR][FC][ADDR_H][ADDR_L][VAL_H][VAL_L][CRC_L][CRC_H]   8 bytes

Unrecognised function codes are assumed to be echo-sized.
"""

from enum import Enum

from .constants import (
    CRC_LEN,
    ECHO_FRAME_LEN,
    ECHO_FUNCTION_CODES,
    EXCEPTION_BIT,
    EXCEPTION_FRAME_LEN,
    HEADER_LEN,
    READ_FUNCTION_CODES,
)


class FrameKind(Enum):
    """Response categories, each with its own length rule."""

    EXCEPTION = "exception"
    VARIABLE_READ = "variable_read"
    FIXED_ECHO = "fixed_echo"
    UNKNOWN = "unknown"

    def frame_length(self, buffer: bytes) -> int:
        """
        Total frame length for this kind, given at least ``HEADER_LEN`` bytes.

        Args:
            buffer: Buffered bytes starting at the frame's address byte

        Returns:
            Total frame length in bytes, including the CRC
        """
        if self is FrameKind.EXCEPTION:
            return EXCEPTION_FRAME_LEN
        if self is FrameKind.VARIABLE_READ:
            return HEADER_LEN + buffer[2] + CRC_LEN
        # FIXED_ECHO and UNKNOWN share the echo length
        return ECHO_FRAME_LEN


def classify(function_code: int) -> FrameKind:
    """Map a raw function-code byte to its frame kind."""
    if function_code & EXCEPTION_BIT:
        return FrameKind.EXCEPTION
    if function_code in READ_FUNCTION_CODES:
        return FrameKind.VARIABLE_READ
    if function_code in ECHO_FUNCTION_CODES:
        return FrameKind.FIXED_ECHO
    return FrameKind.UNKNOWN


def resolve_frame_length(buffer: bytes | bytearray) -> int:
    """
    Determine the length of the next complete frame in ``buffer``.

    Args:
        buffer: Buffered bytes, first byte being a frame's address

    Returns:
        Total frame length if the buffer already holds the whole frame,
        0 if more bytes are needed to decide or to complete it

    Example:
        >>> resolve_frame_length(b'\\x01\\x03\\x04')
        0
        >>> resolve_frame_length(b'\\x01\\x83\\x02\\xc0\\xf1')
        5
    """
    if len(buffer) < HEADER_LEN:
        return 0

    need = classify(buffer[1]).frame_length(buffer)
    return need if len(buffer) >= need else 0
