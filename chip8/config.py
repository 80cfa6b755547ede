# CHIP-8 configuration: fixed architecture constants plus the runtime
# settings the host loop and window read.

from dataclasses import dataclass
from typing import Optional

# ---- Architecture ----
MEMORY_SIZE = 4096
NUM_REGISTERS = 16
NUM_KEYS = 16
STACK_DEPTH = 16
FLAG = 0xF              # VF holds carry/borrow/collision

PROGRAM_START = 0x200   # everything below is reserved
FONT_START = 0x050
GLYPH_SIZE = 5          # bytes per font glyph
OPCODE_SIZE = 2

width, height = 64, 32
SPRITE_WIDTH = 8

# Standard CHIP-8 fontset (80 bytes)
fontset = [
    0xF0, 0x90, 0x90, 0x90, 0xF0,  # 0
    0x20, 0x60, 0x20, 0x20, 0x70,  # 1
    0xF0, 0x10, 0xF0, 0x80, 0xF0,  # 2
    0xF0, 0x10, 0xF0, 0x10, 0xF0,  # 3
    0x90, 0x90, 0xF0, 0x10, 0x10,  # 4
    0xF0, 0x80, 0xF0, 0x10, 0xF0,  # 5
    0xF0, 0x80, 0xF0, 0x90, 0xF0,  # 6
    0xF0, 0x10, 0x20, 0x40, 0x40,  # 7
    0xF0, 0x90, 0xF0, 0x90, 0xF0,  # 8
    0xF0, 0x90, 0xF0, 0x10, 0xF0,  # 9
    0xF0, 0x90, 0xF0, 0x90, 0x90,  # A
    0xE0, 0x90, 0xE0, 0x90, 0xE0,  # B
    0xF0, 0x80, 0x80, 0x80, 0xF0,  # C
    0xE0, 0x90, 0x90, 0x90, 0xE0,  # D
    0xF0, 0x80, 0xF0, 0x80, 0xF0,  # E
    0xF0, 0x80, 0xF0, 0x80, 0x80   # F
] #notice 80 bytes

# ---- Host defaults ----
CPU_HZ = 500
TIMER_HZ = 60
SCALE = 10
HISTORY_CAPACITY = 600      # 10s of rewind when saving once per 60Hz frame
TIMER_COUPLING_PERIOD = 8   # ticks per timer decay when coupled in-core

# Logical keypad layout, row by row as printed on the COSMAC VIP:
#   1 2 3 C        1 2 3 4
#   4 5 6 D   <->  Q W E R
#   7 8 9 E        A S D F
#   A 0 B F        Z X C V
KEYPAD_LAYOUT = {
    "1": 0x1, "2": 0x2, "3": 0x3, "4": 0xC,
    "Q": 0x4, "W": 0x5, "E": 0x6, "R": 0xD,
    "A": 0x7, "S": 0x8, "D": 0x9, "F": 0xE,
    "Z": 0xA, "X": 0x0, "C": 0xB, "V": 0xF,
}


@dataclass
class EmulatorConfig:
    """Runtime settings for a single emulator session."""
    cpu_hz: int = CPU_HZ
    timer_hz: int = TIMER_HZ
    scale: int = SCALE
    history_capacity: int = HISTORY_CAPACITY
    couple_timers: bool = False
    seed: Optional[int] = None
    verbose: bool = False

    @property
    def window_size(self):
        return width * self.scale, height * self.scale

