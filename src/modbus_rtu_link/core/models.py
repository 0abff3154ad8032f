"""Data models for serial session options."""

from typing import Any, Literal

import serial
from pydantic import BaseModel, ConfigDict, Field, field_validator

PARITY_MAP = {
    "none": serial.PARITY_NONE,
    "even": serial.PARITY_EVEN,
    "odd": serial.PARITY_ODD,
}


class PortFilter(BaseModel):
    """USB identifiers used to pick a serial port during discovery.

    Unset fields match anything.
    """

    usb_vendor_id: int | None = Field(None, ge=0, le=0xFFFF, description="USB vendor ID")
    usb_product_id: int | None = Field(None, ge=0, le=0xFFFF, description="USB product ID")

    def matches(self, port_info: Any) -> bool:
        """Check an entry from ``serial.tools.list_ports.comports()``."""
        if self.usb_vendor_id is not None and port_info.vid != self.usb_vendor_id:
            return False
        if self.usb_product_id is not None and port_info.pid != self.usb_product_id:
            return False
        return True


class SerialOptions(BaseModel):
    """Options for opening a serial session."""

    baudrate: int = Field(9600, gt=0, description="Line speed in baud")
    bytesize: Literal[7, 8] = Field(8, description="Data bits per character")
    stopbits: Literal[1, 2] = Field(1, description="Stop bits per character")
    parity: Literal["none", "even", "odd"] = Field("none", description="Parity mode")
    device: str | None = Field(None, description="Device path or pyserial URL; skips discovery")
    port: Any = Field(None, description="Already constructed serial.Serial handle; skips discovery")
    filters: list[PortFilter] = Field(default_factory=list, description="Discovery filters")
    timeout: int = Field(500, gt=0, description="Transaction timeout in milliseconds")

    @field_validator("parity", mode="before")
    @classmethod
    def normalize_parity(cls, v: Any) -> Any:
        """Accept parity names in any case."""
        if isinstance(v, str):
            return v.lower()
        return v

    @property
    def serial_parity(self) -> str:
        """Parity constant understood by pyserial."""
        return PARITY_MAP[self.parity]

    def serial_kwargs(self) -> dict[str, Any]:
        """Line settings in the keyword form ``serial.Serial`` expects."""
        return {
            "baudrate": self.baudrate,
            "bytesize": self.bytesize,
            "stopbits": self.stopbits,
            "parity": self.serial_parity,
        }

    model_config = ConfigDict(
        arbitrary_types_allowed=True,
        json_schema_extra={
            "example": {
                "baudrate": 9600,
                "bytesize": 8,
                "stopbits": 1,
                "parity": "none",
                "device": "/dev/ttyUSB0",
                "filters": [],
                "timeout": 500,
            }
        },
    )
