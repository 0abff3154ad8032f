"""CRC-16 calculation for Modbus RTU frames."""


def calculate_crc16(data: bytes) -> int:
    """
    Calculate the Modbus CRC-16 of a byte sequence.

    The register starts at 0xFFFF and each byte is shifted through the
    reflected polynomial 0xA001, least significant bit first.

    Args:
        data: Bytes to calculate CRC over

    Returns:
        16-bit CRC value

    Example:
        >>> hex(calculate_crc16(b'\\x01\\x03\\x00\\x00\\x00\\x02'))
        '0xbc4'
    """
    crc = 0xFFFF

    for byte in data:
        crc ^= byte
        for _ in range(8):
            if crc & 1:
                crc = (crc >> 1) ^ 0xA001
            else:
                crc >>= 1

    return crc


def check_crc(frame: bytes) -> bool:
    """
    Verify the trailing checksum of a complete frame.

    The CRC is computed over everything except the last two bytes, which
    must hold the CRC low byte followed by the high byte.

    Args:
        frame: Complete frame including the two CRC bytes

    Returns:
        True if the trailing bytes match, False otherwise
    """
    if len(frame) < 3:
        return False

    crc = calculate_crc16(frame[:-2])
    return frame[-2] == (crc & 0xFF) and frame[-1] == (crc >> 8)


def append_crc16(data: bytes) -> bytes:
    """Return ``data`` with its CRC appended, low byte first."""
    crc = calculate_crc16(data)
    return bytes(data) + bytes([crc & 0xFF, crc >> 8])
