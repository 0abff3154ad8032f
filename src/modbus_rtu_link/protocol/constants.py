"""Protocol constants for Modbus RTU communication."""

from enum import IntEnum

# ============================================================================
# Frame Structure
# ============================================================================

EXCEPTION_BIT = 0x80
FUNCTION_CODE_MASK = 0x7F

HEADER_LEN = 3  # ADDR(1) + FC(1) + first payload byte(1)
CRC_LEN = 2
EXCEPTION_FRAME_LEN = 5  # ADDR(1) + FC(1) + EXC(1) + CRC(2)
ECHO_FRAME_LEN = 8  # ADDR(1) + FC(1) + ADDRESS(2) + VALUE/QTY(2) + CRC(2)
FRAME_MIN_LEN = EXCEPTION_FRAME_LEN

# ============================================================================
# Function Codes
# ============================================================================


class FunctionCode(IntEnum):
    """Modbus function codes handled by the length resolver."""

    # Read operations (byte count in payload[0])
    READ_COILS = 0x01
    READ_DISCRETE_INPUTS = 0x02
    READ_HOLDING_REGISTERS = 0x03
    READ_INPUT_REGISTERS = 0x04

    # Write operations (response echoes the request)
    WRITE_SINGLE_COIL = 0x05
    WRITE_SINGLE_REGISTER = 0x06
    WRITE_MULTIPLE_COILS = 0x0F
    WRITE_MULTIPLE_REGISTERS = 0x10


READ_FUNCTION_CODES = frozenset(
    {
        FunctionCode.READ_COILS,
        FunctionCode.READ_DISCRETE_INPUTS,
        FunctionCode.READ_HOLDING_REGISTERS,
        FunctionCode.READ_INPUT_REGISTERS,
    }
)

ECHO_FUNCTION_CODES = frozenset(
    {
        FunctionCode.WRITE_SINGLE_COIL,
        FunctionCode.WRITE_SINGLE_REGISTER,
        FunctionCode.WRITE_MULTIPLE_COILS,
        FunctionCode.WRITE_MULTIPLE_REGISTERS,
    }
)

FUNCTION_NAMES = {
    FunctionCode.READ_COILS: "ReadCoils",
    FunctionCode.READ_DISCRETE_INPUTS: "ReadDiscreteInputs",
    FunctionCode.READ_HOLDING_REGISTERS: "ReadHoldingRegs",
    FunctionCode.READ_INPUT_REGISTERS: "ReadInputRegs",
    FunctionCode.WRITE_SINGLE_COIL: "WriteSingleCoil",
    FunctionCode.WRITE_SINGLE_REGISTER: "WriteSingleReg",
    FunctionCode.WRITE_MULTIPLE_COILS: "WriteMultiCoils",
    FunctionCode.WRITE_MULTIPLE_REGISTERS: "WriteMultiRegs",
}


def function_name(code: int) -> str:
    """Readable name for a raw function-code byte (``_ERR`` suffix for exceptions)."""
    fc = code & FUNCTION_CODE_MASK
    name = FUNCTION_NAMES.get(fc, f"FC_0x{fc:02X}")
    if code & EXCEPTION_BIT:
        name += "_ERR"
    return name
