"""Errors raised by the transaction layer."""


class TransactionError(Exception):
    """Base class for failures of a single request/response exchange."""


class ResponseTimeoutError(TransactionError, TimeoutError):
    """No complete response arrived before the deadline, or the stream ended."""

    def __init__(self, message: str = "Timed out waiting for response", timeout_ms: int | None = None):
        super().__init__(message)
        self.timeout_ms = timeout_ms


class ChecksumError(TransactionError):
    """A candidate response frame failed CRC validation."""

    def __init__(self, frame: bytes):
        super().__init__(f"CRC mismatch in frame {frame.hex()}")
        self.frame = frame
