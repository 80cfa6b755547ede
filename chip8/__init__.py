from .config import EmulatorConfig
from .errors import (
    Chip8Error, OutOfBoundsAccess, RomTooLarge, StackOverflow,
    StackUnderflow, UnimplementedOpcode, UnknownOpcode,
)
from .history import History
from .machine import Machine
from .opcode import OpcodeSymbols, decode, disassemble

__version__ = "0.1.0"

__all__ = [
    "Chip8Error", "EmulatorConfig", "History", "Machine", "OpcodeSymbols",
    "OutOfBoundsAccess", "RomTooLarge", "StackOverflow", "StackUnderflow",
    "UnimplementedOpcode", "UnknownOpcode", "decode", "disassemble",
]
