"""Application configuration using pydantic-settings."""

import logging
import sys

from pydantic_settings import BaseSettings, SettingsConfigDict

from .models import PortFilter, SerialOptions


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    All settings can be overridden via environment variables
    prefixed with MODBUS_ (e.g., MODBUS_SERIAL_DEVICE).
    """

    serial_device: str | None = None
    serial_baud: int = 9600
    serial_bytesize: int = 8
    serial_stopbits: int = 1
    serial_parity: str = "none"
    usb_vendor_id: int | None = None
    usb_product_id: int | None = None
    timeout_ms: int = 500
    log_level: str = "INFO"

    model_config = SettingsConfigDict(env_prefix="MODBUS_")

    def serial_options(self) -> SerialOptions:
        """Build session options from these settings."""
        filters = []
        if self.usb_vendor_id is not None or self.usb_product_id is not None:
            filters.append(PortFilter(usb_vendor_id=self.usb_vendor_id, usb_product_id=self.usb_product_id))

        return SerialOptions(
            baudrate=self.serial_baud,
            bytesize=self.serial_bytesize,
            stopbits=self.serial_stopbits,
            parity=self.serial_parity,
            device=self.serial_device,
            filters=filters,
            timeout=self.timeout_ms,
        )


def setup_logging(level: str = "INFO") -> None:
    """Configure application logging.

    Args:
        level: Log level string (DEBUG, INFO, WARNING, ERROR, CRITICAL).
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        level=numeric_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
    )
