"""Request/response transaction handling for Modbus RTU.

One call to :meth:`TransactionHandler.transact` writes a request and then
reassembles response frames from whatever chunks the stream delivers:

    SENDING -> ACCUMULATING -> LENGTH_KNOWN -> CRC_CHECKED -> MATCHED
                    ^                               |
                    +--------- MISMATCHED_FC -------+
                                                    +-> CRC_FAIL  (ChecksumError)
    ACCUMULATING -> TIMEOUT  (ResponseTimeoutError)

Frames whose function code does not match the request are stale replies
to some earlier exchange and are dropped without surfacing an error.
"""

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Protocol

from ..core.exceptions import ChecksumError, ResponseTimeoutError
from .buffer import ReassemblyBuffer
from .constants import FUNCTION_CODE_MASK, HEADER_LEN, function_name
from .crc import check_crc
from .frames import resolve_frame_length

logger = logging.getLogger(__name__)


class ByteStream(Protocol):
    """Duplex byte source/sink driven by the handler."""

    async def read(self) -> bytes:
        """Return the next chunk, or ``b""`` once no more data will come."""
        ...

    async def write(self, data: bytes) -> None:
        """Send ``data`` and wait until it has been handed to the device."""
        ...


class TransactionState(Enum):
    """Steps of a single exchange."""

    IDLE = "idle"
    SENDING = "sending"
    ACCUMULATING = "accumulating"
    LENGTH_KNOWN = "length_known"
    CRC_CHECKED = "crc_checked"
    MATCHED = "matched"
    MISMATCHED_FC = "mismatched_fc"
    CRC_FAIL = "crc_fail"
    TIMEOUT = "timeout"


@dataclass(frozen=True)
class Transaction:
    """A pending exchange: what was sent, what reply it expects, and until when."""

    request: bytes
    expected_function_code: int
    deadline: float

    @classmethod
    def start(cls, request: bytes, timeout_ms: int, clock: Callable[[], float] = time.monotonic) -> "Transaction":
        return cls(
            request=bytes(request),
            expected_function_code=request[1] & FUNCTION_CODE_MASK,
            deadline=clock() + timeout_ms / 1000,
        )

    def expired(self, now: float) -> bool:
        return now > self.deadline


def _new_stats() -> dict[str, int]:
    return {
        "transactions": 0,
        "frames_read": 0,
        "frames_discarded": 0,
        "crc_errors": 0,
        "timeouts": 0,
        "bytes_read": 0,
        "bytes_written": 0,
    }


class TransactionHandler:
    """Drives request/response exchanges over a :class:`ByteStream`.

    Holds no lock: only one ``transact`` call may be in flight at a time,
    callers serialise access themselves.
    """

    def __init__(
        self,
        stream: ByteStream,
        timeout: int = 500,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Initialize transaction handler.

        Args:
            stream: Byte stream to write requests to and read responses from
            timeout: Per-transaction deadline in milliseconds
            clock: Monotonic clock in seconds (injectable for tests)
        """
        self.stream = stream
        self.timeout = timeout
        self._clock = clock
        self._buffer = ReassemblyBuffer()
        self._state = TransactionState.IDLE
        self._stats = _new_stats()

    @property
    def timeout(self) -> int:
        """Transaction timeout in milliseconds."""
        return self._timeout

    @timeout.setter
    def timeout(self, value: int) -> None:
        if value <= 0:
            raise ValueError(f"Timeout must be positive, got {value}")
        self._timeout = value

    @property
    def state(self) -> TransactionState:
        return self._state

    @property
    def buffer(self) -> ReassemblyBuffer:
        """Bytes received but not yet consumed by a transaction."""
        return self._buffer

    @property
    def stats(self) -> dict:
        """Get handler statistics."""
        return self._stats.copy()

    def reset_stats(self) -> None:
        """Reset handler statistics."""
        self._stats = _new_stats()

    def reset_buffer(self) -> None:
        """Discard any leftover received bytes."""
        self._buffer.clear()

    def _enter(self, state: TransactionState) -> None:
        self._state = state
        logger.debug("Transaction state: %s", state.value)

    async def transact(self, request: bytes) -> bytes:
        """
        Send a request frame and wait for the matching response frame.

        Args:
            request: Complete outgoing frame, CRC included

        Returns:
            The CRC-valid response frame whose function code matches the request

        Raises:
            ValueError: If the request has no function code byte
            ResponseTimeoutError: If the deadline passes or the stream ends first
            ChecksumError: If the next complete frame fails CRC validation
        """
        if len(request) < 2:
            raise ValueError(f"Request too short: {len(request)} bytes")

        self._stats["transactions"] += 1
        self._enter(TransactionState.SENDING)
        await self.stream.write(request)
        self._stats["bytes_written"] += len(request)
        logger.debug("Request sent: %s (hex: %s)", function_name(request[1]), bytes(request).hex())

        transaction = Transaction.start(request, self._timeout, self._clock)

        while True:
            self._enter(TransactionState.ACCUMULATING)
            while len(self._buffer) < HEADER_LEN:
                await self._fill(transaction)

            need = resolve_frame_length(self._buffer.peek())
            if need == 0:
                await self._fill(transaction)
                continue

            self._enter(TransactionState.LENGTH_KNOWN)
            candidate = self._buffer.consume(need)

            if not check_crc(candidate):
                self._enter(TransactionState.CRC_FAIL)
                self._buffer.drop(1)
                self._stats["crc_errors"] += 1
                logger.warning(
                    "CRC mismatch in %d-byte frame: %s (%d byte(s) left buffered)",
                    len(candidate),
                    candidate.hex(),
                    len(self._buffer),
                )
                raise ChecksumError(candidate)

            self._enter(TransactionState.CRC_CHECKED)
            received = candidate[1] & FUNCTION_CODE_MASK
            if received == transaction.expected_function_code:
                self._enter(TransactionState.MATCHED)
                self._stats["frames_read"] += 1
                logger.debug("Response received: %s (hex: %s)", function_name(candidate[1]), candidate.hex())
                return candidate

            self._enter(TransactionState.MISMATCHED_FC)
            self._stats["frames_discarded"] += 1
            logger.debug(
                "Discarding stale frame %s while waiting for %s: %s",
                function_name(candidate[1]),
                function_name(transaction.expected_function_code),
                candidate.hex(),
            )

    async def _fill(self, transaction: Transaction) -> None:
        """Read one chunk into the buffer, enforcing the deadline beforehand."""
        if transaction.expired(self._clock()):
            self._timed_out(f"Timed out after {self._timeout} ms waiting for response")

        chunk = await self.stream.read()
        if not chunk:
            self._timed_out("Stream ended before a complete response arrived")

        self._buffer.append(chunk)
        self._stats["bytes_read"] += len(chunk)

    def _timed_out(self, message: str) -> None:
        self._enter(TransactionState.TIMEOUT)
        self._stats["timeouts"] += 1
        logger.warning("%s (%d byte(s) buffered)", message, len(self._buffer))
        raise ResponseTimeoutError(message, timeout_ms=self._timeout)
