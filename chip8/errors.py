"""Faults raised by the CHIP-8 machine.

Every fault carries the opcode and program counter it happened at, when the
machine knows them, so the host can report it and stop.
"""

from typing import Optional


class Chip8Error(Exception):
    fatal = True

    def __init__(self, message: str, opcode: Optional[int] = None, pc: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.opcode = opcode
        self.pc = pc

    def __str__(self):
        parts = [self.message]
        if self.opcode is not None:
            parts.append("opcode=0x%04X" % self.opcode)
        if self.pc is not None:
            parts.append("pc=0x%03X" % self.pc)
        return " ".join(parts)


class OutOfBoundsAccess(Chip8Error):
    pass


class StackOverflow(Chip8Error):
    pass


class StackUnderflow(Chip8Error):
    pass


class UnknownOpcode(Chip8Error):
    def __init__(self, opcode: Optional[int] = None, pc: Optional[int] = None):
        super().__init__("Unknown opcode", opcode=opcode, pc=pc)


class UnimplementedOpcode(Chip8Error):
    """A recognised instruction this interpreter refuses to run (0NNN SYS)."""

    def __init__(self, opcode: Optional[int] = None, pc: Optional[int] = None):
        super().__init__("SYS call not supported", opcode=opcode, pc=pc)


class RomTooLarge(Chip8Error):
    fatal = False

    def __init__(self, size: int, capacity: int):
        super().__init__("ROM is %d bytes, only %d fit in memory" % (size, capacity))
        self.size = size
        self.capacity = capacity
