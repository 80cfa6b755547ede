# Opcode field extraction.
#
# Every CHIP-8 instruction is one big-endian 16-bit word. Nibble names follow
# Cowgod's reference: http://devernay.free.fr/hacks/chip8/C8TECH10.HTM#3.0
#
#   a   - top nibble, selects the opcode family
#   x   - register index (bits 11-8)
#   y   - register index (bits 7-4)
#   n   - 4-bit constant
#   nn  - 8-bit constant (kk in Cowgod)
#   nnn - 12-bit address

from functools import lru_cache
from typing import NamedTuple, Optional


class OpcodeSymbols(NamedTuple):
    a: int
    x: int
    y: int
    n: int
    nn: int
    nnn: int


def decode(opcode: int) -> OpcodeSymbols:
    """Split a raw instruction word into its named fields."""
    if not 0 <= opcode <= 0xFFFF:
        raise ValueError("opcode out of range: %r" % opcode)
    return OpcodeSymbols(
        a=(opcode & 0xF000) >> 12,
        x=(opcode & 0x0F00) >> 8,
        y=(opcode & 0x00F0) >> 4,
        n=opcode & 0x000F,
        nn=opcode & 0x00FF,
        nnn=opcode & 0x0FFF,
    )


# Dispatch table: (mask, pattern, mnemonic). A nibble of F in the mask pins
# that field of (a, x, y, n); 0 leaves it as a wildcard. Order matters, the
# first match wins, so the specific 00E0/00EE entries sit above 0NNN.
INSTRUCTIONS = [
    (0xFFFF, 0x00E0, "CLEAR"),
    (0xFFFF, 0x00EE, "RETURN"),
    (0xF000, 0x0000, "SYS"),

    (0xF000, 0x1000, "JUMP"),
    (0xF000, 0x2000, "CALL"),
    (0xF000, 0x3000, "SKIP_EQ"),
    (0xF000, 0x4000, "SKIP_NEQ"),
    (0xF00F, 0x5000, "SKIP_REQ"),
    (0xF000, 0x6000, "LOAD_IMM"),
    (0xF000, 0x7000, "ADD_IMM"),

    (0xF00F, 0x8000, "MOVE"),
    (0xF00F, 0x8001, "OR"),
    (0xF00F, 0x8002, "AND"),
    (0xF00F, 0x8003, "XOR"),
    (0xF00F, 0x8004, "ADD_REG"),
    (0xF00F, 0x8005, "SUB"),
    (0xF00F, 0x8006, "SHR"),
    (0xF00F, 0x8007, "SUBN"),
    (0xF00F, 0x800E, "SHL"),

    (0xF00F, 0x9000, "SKIP_RNEQ"),
    (0xF000, 0xA000, "LOAD_INDEX"),
    (0xF000, 0xB000, "JUMP_OFFSET"),
    (0xF000, 0xC000, "RAND"),
    (0xF000, 0xD000, "DRAW"),

    (0xF0FF, 0xE09E, "SKIP_PRESSED"),
    (0xF0FF, 0xE0A1, "SKIP_NOTPRESSED"),

    (0xF0FF, 0xF007, "READ_DELAY"),
    (0xF0FF, 0xF00A, "WAIT_KEY"),
    (0xF0FF, 0xF015, "SET_DELAY"),
    (0xF0FF, 0xF018, "SET_SOUND"),
    (0xF0FF, 0xF01E, "ADD_INDEX"),
    (0xF0FF, 0xF029, "LOAD_GLYPH"),
    (0xF0FF, 0xF033, "STORE_BCD"),
    (0xF0FF, 0xF055, "STORE_REGS"),
    (0xF0FF, 0xF065, "LOAD_REGS"),
]


@lru_cache(maxsize=None)
def mnemonic(opcode: int) -> Optional[str]:
    """Name of the instruction an opcode word encodes, or None if it matches nothing."""
    for mask, pattern, name in INSTRUCTIONS:
        if opcode & mask == pattern:
            return name
    return None


# operand layout per mnemonic, for the debugger
_OPERANDS = {
    "SYS": "{nnn:03X}",
    "JUMP": "{nnn:03X}",
    "CALL": "{nnn:03X}",
    "SKIP_EQ": "V{x:X}, {nn:02X}",
    "SKIP_NEQ": "V{x:X}, {nn:02X}",
    "LOAD_IMM": "V{x:X}, {nn:02X}",
    "ADD_IMM": "V{x:X}, {nn:02X}",
    "RAND": "V{x:X}, {nn:02X}",
    "LOAD_INDEX": "{nnn:03X}",
    "JUMP_OFFSET": "V0, {nnn:03X}",
    "DRAW": "V{x:X}, V{y:X}, {n:X}",
}


def disassemble(opcode: int) -> str:
    name = mnemonic(opcode)
    if name is None:
        return "???? %04X" % opcode
    if name in ("CLEAR", "RETURN"):
        return name
    fields = decode(opcode)._asdict()
    if name in _OPERANDS:
        operands = _OPERANDS[name]
    elif opcode & 0xF000 in (0x5000, 0x8000, 0x9000):
        operands = "V{x:X}, V{y:X}"
    else:
        operands = "V{x:X}"
    return "%s %s" % (name, operands.format(**fields))
