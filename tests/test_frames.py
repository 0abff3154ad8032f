"""Unit tests for frame length resolution."""

import pytest

from modbus_rtu_link.protocol.constants import FunctionCode
from modbus_rtu_link.protocol.frames import FrameKind, classify, resolve_frame_length

from .conftest import READ_REGS_RESPONSE, WRITE_REG_ECHO


class TestClassify:
    """Tests for function code classification."""

    @pytest.mark.parametrize("fc", [0x01, 0x02, 0x03, 0x04])
    def test_read_codes(self, fc):
        """Test read function codes use the byte-count rule."""
        assert classify(fc) is FrameKind.VARIABLE_READ

    @pytest.mark.parametrize("fc", [0x05, 0x06, 0x0F, 0x10])
    def test_echo_codes(self, fc):
        """Test write function codes use the fixed echo rule."""
        assert classify(fc) is FrameKind.FIXED_ECHO

    @pytest.mark.parametrize("fc", [0x81, 0x83, 0x86, 0x90, 0xFF])
    def test_exception_codes(self, fc):
        """Test the exception bit wins over the operation code."""
        assert classify(fc) is FrameKind.EXCEPTION

    @pytest.mark.parametrize("fc", [0x00, 0x07, 0x08, 0x14, 0x17, 0x2B, 0x7F])
    def test_unknown_codes(self, fc):
        """Test unrecognised codes fall back to unknown."""
        assert classify(fc) is FrameKind.UNKNOWN


class TestResolveFrameLength:
    """Tests for resolve_frame_length."""

    @pytest.mark.parametrize("size", [0, 1, 2])
    def test_fewer_than_three_bytes(self, size):
        """Test that short buffers are always indeterminate."""
        assert resolve_frame_length(b"\x01\x83\x02"[:size]) == 0

    def test_exception_frame(self):
        """Test exception replies are 5 bytes."""
        assert resolve_frame_length(b"\x01\x83\x02\xc0") == 0
        assert resolve_frame_length(b"\x01\x83\x02\xc0\xf1") == 5

    def test_exception_frame_with_trailing_bytes(self):
        """Test extra buffered bytes do not change the resolved length."""
        assert resolve_frame_length(b"\x01\x83\x02\xc0\xf1\x01\x03") == 5

    def test_read_response(self):
        """Test read replies use 3 + byte count + 2."""
        assert resolve_frame_length(READ_REGS_RESPONSE) == 9
        assert resolve_frame_length(READ_REGS_RESPONSE[:8]) == 0

    def test_read_response_zero_byte_count(self):
        """Test a read reply with no data bytes."""
        assert resolve_frame_length(b"\x01\x01\x00\x00\x00") == 5

    def test_read_response_max_byte_count(self):
        """Test the largest possible byte count."""
        buffer = bytes([0x01, 0x04, 0xFF]) + bytes(255) + b"\x00\x00"
        assert resolve_frame_length(buffer) == 260
        assert resolve_frame_length(buffer[:-1]) == 0

    @pytest.mark.parametrize("fc", [FunctionCode.WRITE_SINGLE_COIL, FunctionCode.WRITE_MULTIPLE_REGISTERS])
    def test_echo_response(self, fc):
        """Test write replies are 8 bytes."""
        buffer = bytes([0x01, fc, 0x00, 0x01, 0x00, 0x03, 0x00, 0x00])
        assert resolve_frame_length(buffer[:7]) == 0
        assert resolve_frame_length(buffer) == 8

    def test_unknown_code_falls_back_to_eight(self):
        """Test unrecognised function codes assume echo length."""
        assert resolve_frame_length(b"\x01\x2b\x0e\x01\x00\x00\x00") == 0
        assert resolve_frame_length(b"\x01\x2b\x0e\x01\x00\x00\x00\x00") == 8

    def test_accepts_bytearray(self):
        """Test the resolver works on a live bytearray."""
        assert resolve_frame_length(bytearray(WRITE_REG_ECHO)) == 8

    @pytest.mark.parametrize("fc", range(256))
    def test_total_over_all_codes(self, fc):
        """Test every function code resolves to a permitted value."""
        buffer = bytes([0x01, fc, 0x04]) + bytes(10)
        assert resolve_frame_length(buffer) in {0, 5, 8, 3 + 0x04 + 2}
