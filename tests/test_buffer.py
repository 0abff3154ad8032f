"""Unit tests for the reassembly buffer."""

import pytest

from modbus_rtu_link.protocol.buffer import ReassemblyBuffer


class TestReassemblyBuffer:
    """Tests for ReassemblyBuffer."""

    def test_starts_empty(self):
        """Test a new buffer holds nothing."""
        buffer = ReassemblyBuffer()
        assert len(buffer) == 0
        assert bytes(buffer) == b""

    def test_append_accumulates_in_order(self):
        """Test chunks are kept in arrival order."""
        buffer = ReassemblyBuffer()
        buffer.append(b"\x01\x03")
        buffer.append(b"\x04")
        buffer.append(b"")
        assert bytes(buffer) == b"\x01\x03\x04"

    def test_consume_returns_prefix_and_keeps_rest(self):
        """Test consume removes exactly the requested prefix."""
        buffer = ReassemblyBuffer(b"\x01\x02\x03\x04\x05")
        prefix = buffer.consume(2)

        assert prefix == b"\x01\x02"
        assert isinstance(prefix, bytes)
        assert bytes(buffer) == b"\x03\x04\x05"

    def test_repeated_consume(self):
        """Test several frames can be taken from one chunk."""
        buffer = ReassemblyBuffer()
        buffer.append(b"aaabbbbcc")

        assert buffer.consume(3) == b"aaa"
        assert buffer.consume(4) == b"bbbb"
        assert buffer.consume(2) == b"cc"
        assert len(buffer) == 0

    def test_consume_zero(self):
        """Test consuming nothing leaves the buffer untouched."""
        buffer = ReassemblyBuffer(b"\x01")
        assert buffer.consume(0) == b""
        assert len(buffer) == 1

    def test_consume_too_many(self):
        """Test consuming more than buffered raises."""
        buffer = ReassemblyBuffer(b"\x01\x02")
        with pytest.raises(ValueError, match="only 2 buffered"):
            buffer.consume(3)
        assert len(buffer) == 2

    def test_consume_negative(self):
        """Test a negative count is rejected."""
        with pytest.raises(ValueError, match="negative"):
            ReassemblyBuffer(b"\x01").consume(-1)

    def test_drop_one(self):
        """Test drop removes a single leading byte by default."""
        buffer = ReassemblyBuffer(b"\x01\x02\x03")
        assert buffer.drop() == 1
        assert bytes(buffer) == b"\x02\x03"

    def test_drop_on_empty(self):
        """Test dropping from an empty buffer is a no-op."""
        buffer = ReassemblyBuffer()
        assert buffer.drop() == 0
        assert len(buffer) == 0

    def test_drop_more_than_buffered(self):
        """Test drop is clamped to the buffered length."""
        buffer = ReassemblyBuffer(b"\x01\x02")
        assert buffer.drop(5) == 2
        assert len(buffer) == 0

    def test_peek_is_live_view(self):
        """Test peek reflects later appends."""
        buffer = ReassemblyBuffer(b"\x01")
        view = buffer.peek()
        buffer.append(b"\x02")
        assert bytes(view) == b"\x01\x02"

    def test_clear(self):
        """Test clear discards everything."""
        buffer = ReassemblyBuffer(b"leftover data")
        buffer.clear()
        assert len(buffer) == 0
