"""Command line entry point: send one Modbus RTU request and print the reply.

Usage:
    # List serial ports
    modbus-rtu-link --list-ports

    # Read 2 holding registers from address 0 on slave 1
    modbus-rtu-link --device /dev/ttyUSB0 010300000002 --append-crc
"""

import argparse
import asyncio
import logging
import sys

from modbus_rtu_link import __version__
from modbus_rtu_link.core.config import Settings, setup_logging
from modbus_rtu_link.core.exceptions import TransactionError
from modbus_rtu_link.protocol.constants import EXCEPTION_BIT, function_name
from modbus_rtu_link.protocol.crc import append_crc16
from modbus_rtu_link.serial.connection import SerialSession, list_serial_ports

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Send a Modbus RTU request over a serial port")
    parser.add_argument("request", nargs="?", help="Request frame as hex (e.g. 010300000002c40b)")
    parser.add_argument("--list-ports", action="store_true", help="List serial ports and exit")
    parser.add_argument("--append-crc", action="store_true", help="Append CRC to the request before sending")
    parser.add_argument("--device", help="Serial device (default: MODBUS_SERIAL_DEVICE or discovery)")
    parser.add_argument("--baud", type=int, help="Baud rate (default: MODBUS_SERIAL_BAUD or 9600)")
    parser.add_argument("--parity", choices=["none", "even", "odd"], help="Parity (default: none)")
    parser.add_argument("--timeout", type=int, help="Response timeout in ms (default: 500)")
    parser.add_argument("--log-level", help="Log level (default: MODBUS_LOG_LEVEL or INFO)")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def apply_overrides(settings: Settings, args: argparse.Namespace) -> Settings:
    """Layer command line options over environment settings."""
    overrides = {
        "serial_device": args.device,
        "serial_baud": args.baud,
        "serial_parity": args.parity,
        "timeout_ms": args.timeout,
        "log_level": args.log_level,
    }
    return settings.model_copy(update={k: v for k, v in overrides.items() if v is not None})


def print_ports() -> None:
    ports = list_serial_ports()
    if not ports:
        print("No serial ports found.")
        return
    for info in ports:
        ids = f"{info.vid:04X}:{info.pid:04X}" if info.vid is not None and info.pid is not None else "-"
        print(f"{info.device}\t{ids}\t{info.description}")


async def run(settings: Settings, request: bytes) -> bytes:
    """Open a session from ``settings``, run one transaction and close it."""
    session = await SerialSession.open(settings.serial_options())
    async with session:
        return await session.transact(request)


def main(argv: list[str] | None = None) -> int:
    """Run the application (for CLI entry point)."""
    parser = build_parser()
    args = parser.parse_args(argv)

    settings = apply_overrides(Settings(), args)
    setup_logging(settings.log_level)

    if args.list_ports:
        print_ports()
        return 0

    if not args.request:
        parser.error("a request frame is required unless --list-ports is given")

    try:
        request = bytes.fromhex(args.request)
    except ValueError:
        parser.error(f"request is not valid hex: {args.request!r}")
    if args.append_crc:
        request = append_crc16(request)

    try:
        response = asyncio.run(run(settings, request))
    except (TransactionError, ConnectionError) as e:
        logger.error("Transaction failed: %s", e)
        return 1

    status = "exception" if response[1] & EXCEPTION_BIT else "ok"
    print(f"{function_name(response[1])} [{status}] slave={response[0]} {response.hex()}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
