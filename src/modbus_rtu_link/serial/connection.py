"""Serial port session management."""

import asyncio
import logging
from typing import Any

import serial
import serial_asyncio
from serial import SerialException
from serial.tools import list_ports

from ..core.models import PortFilter, SerialOptions
from ..protocol.handler import TransactionHandler

logger = logging.getLogger(__name__)


def list_serial_ports() -> list[Any]:
    """Enumerate serial ports known to the operating system."""
    return sorted(list_ports.comports(), key=lambda info: info.device)


def discover_port(filters: list[PortFilter] | None = None) -> str:
    """
    Pick a serial device, optionally restricted by USB identifiers.

    Args:
        filters: A port is accepted if it matches any filter (no filters accepts all)

    Returns:
        Device path of the first accepted port

    Raises:
        ConnectionError: If no port is accepted
    """
    ports = list_serial_ports()
    for info in ports:
        if not filters or any(f.matches(info) for f in filters):
            logger.debug("Discovered serial port %s (%s)", info.device, info.description)
            return info.device

    raise ConnectionError(f"No serial port found matching filters (scanned {len(ports)} port(s))")


class SerialSession:
    """An open serial connection that runs Modbus RTU transactions.

    Obtain one with :meth:`SerialSession.open`; the constructor only
    allocates an empty, unconnected session.
    """

    read_size = 256

    def __init__(self, options: SerialOptions):
        self.options = options

        self._reader: asyncio.StreamReader | None = None
        self._writer: asyncio.StreamWriter | None = None
        self._serial: serial.Serial | None = None
        self._handler = TransactionHandler(self, timeout=options.timeout)

    @classmethod
    async def open(cls, options: SerialOptions | None = None, **overrides: Any) -> "SerialSession":
        """
        Open a serial session.

        Args:
            options: Session options (defaults apply when omitted)
            **overrides: Individual option fields, applied on top of ``options``

        Returns:
            A connected session

        Raises:
            ConnectionError: If no port could be found or the port could not be opened
        """
        if options is None:
            options = SerialOptions(**overrides)
        elif overrides:
            options = SerialOptions(**{**options.model_dump(), **overrides})

        session = cls(options)
        try:
            await session._connect()
        except (OSError, SerialException) as e:
            logger.error("Failed to open serial port: %s", e)
            await session.close()
            if isinstance(e, ConnectionError):
                raise
            raise ConnectionError(f"Failed to open serial port: {e}") from e

        return session

    async def _connect(self) -> None:
        """Acquire the port handle and stream pair."""
        loop = asyncio.get_running_loop()

        if self.options.port is not None:
            port = self.options.port
            self._serial = port
            logger.info("Using supplied serial port %s at %d baud", port.port, self.options.baudrate)
            port.apply_settings(self.options.serial_kwargs())
            if not port.is_open:
                port.open()

            self._reader = asyncio.StreamReader()
            protocol = asyncio.StreamReaderProtocol(self._reader)
            transport = serial_asyncio.SerialTransport(loop, protocol, port)
            self._writer = asyncio.StreamWriter(transport, protocol, self._reader, loop)
        else:
            device = self.options.device or discover_port(self.options.filters)
            logger.info("Connecting to serial port %s at %d baud", device, self.options.baudrate)

            self._reader, self._writer = await serial_asyncio.open_serial_connection(
                url=device,
                **self.options.serial_kwargs(),
            )
            self._serial = self._writer.transport.serial

        logger.info("Successfully connected to %s", self.name)

    @property
    def name(self) -> str:
        """Device name of the underlying port."""
        if self._serial is not None and self._serial.port:
            return self._serial.port
        return self.options.device or "<unopened>"

    @property
    def connected(self) -> bool:
        """Check if currently connected."""
        return self._writer is not None and not self._writer.is_closing()

    @property
    def port(self) -> serial.Serial | None:
        """Underlying pyserial handle (device metadata, line settings)."""
        return self._serial

    def get_port(self) -> serial.Serial | None:
        return self._serial

    @property
    def timeout(self) -> int:
        """Transaction timeout in milliseconds."""
        return self._handler.timeout

    @timeout.setter
    def timeout(self, value: int) -> None:
        self._handler.timeout = value

    def get_timeout(self) -> int:
        return self._handler.timeout

    def set_timeout(self, ms: int) -> None:
        self._handler.timeout = ms

    @property
    def stats(self) -> dict:
        """Transaction statistics."""
        return self._handler.stats

    def reset_buffer(self) -> None:
        """Discard leftover bytes from earlier exchanges."""
        self._handler.reset_buffer()

    async def transact(self, request: bytes) -> bytes:
        """
        Send one request frame and return the matching response frame.

        Only one transaction may be in flight per session.

        Raises:
            ResponseTimeoutError: No complete response before the timeout
            ChecksumError: Response failed CRC validation
            ConnectionError: If not connected
        """
        return await self._handler.transact(request)

    async def read(self) -> bytes:
        """
        Read the next chunk from the serial port.

        Waits at most one transaction timeout for data so that a silent
        line cannot stall a transaction forever.

        Returns:
            Bytes read, or ``b""`` when the port is closed or stays silent

        Raises:
            ConnectionError: If not connected
        """
        if not self.connected or not self._reader:
            raise ConnectionError("Not connected to serial port")

        try:
            return await asyncio.wait_for(self._reader.read(self.read_size), timeout=self.timeout / 1000)
        except TimeoutError:
            logger.debug("No data within %d ms", self.timeout)
            return b""

    async def write(self, data: bytes) -> None:
        """
        Write to serial port.

        Args:
            data: Bytes to write

        Raises:
            ConnectionError: If not connected
        """
        if not self.connected or not self._writer:
            raise ConnectionError("Not connected to serial port")

        try:
            self._writer.write(data)
            await self._writer.drain()

        except Exception as e:
            logger.error("Write error: %s", e)
            raise

    async def close(self) -> None:
        """Release reader, writer and port, each independently of the others."""
        if self._reader is None and self._writer is None and self._serial is None:
            return

        logger.info("Closing serial session on %s", self.name)

        if self._reader is not None:
            try:
                self._reader.feed_eof()
            except Exception as e:
                logger.error("Error releasing reader: %s", e)

        if self._writer is not None:
            try:
                self._writer.close()
                await self._writer.wait_closed()
            except Exception as e:
                logger.error("Error closing writer: %s", e)

        if self._serial is not None:
            try:
                if self._serial.is_open:
                    self._serial.close()
            except Exception as e:
                logger.error("Error closing serial port: %s", e)

        self._reader = None
        self._writer = None
        self._serial = None
        logger.info("Serial session closed")

    async def __aenter__(self):
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()
