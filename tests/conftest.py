"""Shared test fixtures."""

import pytest

from modbus_rtu_link.protocol.crc import append_crc16

# Read 2 holding registers starting at 0 on slave 1
READ_REGS_REQUEST = bytes([0x01, 0x03, 0x00, 0x00, 0x00, 0x02, 0xC4, 0x0B])
READ_REGS_RESPONSE = append_crc16(bytes([0x01, 0x03, 0x04, 0x00, 0x0A, 0x00, 0x0B]))

# Write 3 to holding register 1 on slave 1 (response echoes the request)
WRITE_REG_ECHO = bytes([0x01, 0x06, 0x00, 0x01, 0x00, 0x03, 0x98, 0x0B])


class FakeClock:
    """Manually advanced monotonic clock (seconds)."""

    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeStream:
    """In-memory ByteStream that serves scripted chunks.

    Once the chunks run out, ``read()`` reports end of stream (``b""``).
    ``on_read`` is called before each read, e.g. to advance a fake clock.
    """

    def __init__(self, chunks: list[bytes] | None = None, on_read=None):
        self.chunks = list(chunks or [])
        self.on_read = on_read
        self.written: list[bytes] = []
        self.reads = 0

    async def read(self) -> bytes:
        self.reads += 1
        if self.on_read is not None:
            self.on_read()
        if not self.chunks:
            return b""
        return self.chunks.pop(0)

    async def write(self, data: bytes) -> None:
        self.written.append(bytes(data))


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()
