"""Serial communication layer."""

from .connection import SerialSession, discover_port, list_serial_ports

__all__ = ["SerialSession", "discover_port", "list_serial_ports"]
