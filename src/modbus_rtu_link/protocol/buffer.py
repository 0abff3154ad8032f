"""Rolling receive buffer for reassembling frames from a chunked stream."""

import logging

logger = logging.getLogger(__name__)


class ReassemblyBuffer:
    """Ordered byte arena that keeps leftovers between reads.

    Bytes are only ever appended at the end and removed from the front,
    so frames that arrived together in one chunk can be consumed one
    after another without touching the stream again.
    """

    def __init__(self, data: bytes = b""):
        self._data = bytearray(data)

    def __len__(self) -> int:
        return len(self._data)

    def __bytes__(self) -> bytes:
        return bytes(self._data)

    def __repr__(self) -> str:
        return f"ReassemblyBuffer(len={len(self._data)}, data={self._data.hex()})"

    def peek(self) -> bytearray:
        """Live view of the buffered bytes (do not mutate)."""
        return self._data

    def append(self, chunk: bytes) -> None:
        """Add freshly read bytes to the end of the buffer."""
        self._data.extend(chunk)

    def consume(self, n: int) -> bytes:
        """
        Remove and return the first ``n`` bytes.

        Args:
            n: Number of bytes to take from the front

        Returns:
            The removed prefix

        Raises:
            ValueError: If ``n`` is negative or more than is buffered
        """
        if n < 0:
            raise ValueError(f"Cannot consume a negative byte count: {n}")
        if n > len(self._data):
            raise ValueError(f"Cannot consume {n} bytes, only {len(self._data)} buffered")

        prefix = bytes(self._data[:n])
        del self._data[:n]
        return prefix

    def drop(self, n: int = 1) -> int:
        """Discard up to ``n`` leading bytes. Returns how many were dropped."""
        dropped = min(max(n, 0), len(self._data))
        if dropped:
            logger.debug("Dropping %d byte(s) from receive buffer: %s", dropped, self._data[:dropped].hex())
            del self._data[:dropped]
        return dropped

    def clear(self) -> None:
        """Discard everything."""
        self._data.clear()
