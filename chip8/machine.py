# CHIP8 Virtual Machine:
# Input  - 16 key states, pushed in by the host through set_keys().
# Output - 64x32 display (each pixel on or off) plus a "frame dirty" flag, and
#          the sound timer which the host turns into a buzzer.
# CPU    - Cowgod's CHIP8 Technical reference http://devernay.free.fr/hacks/chip8/C8TECH10.HTM#0.0
# Memory - 4096 bytes holding the font set (at 0x050) and the loaded ROM (at 0x200).
#----------------------------------------------------------------------------------------------
# The machine knows nothing about windows, audio or wall-clock time. A host
# calls tick() at the CPU rate and decrement_timers() at 60Hz, on its own clocks.

import copy
import logging
import random

import numpy as np

from .config import (
    FLAG, FONT_START, GLYPH_SIZE, MEMORY_SIZE, NUM_KEYS, NUM_REGISTERS,
    OPCODE_SIZE, PROGRAM_START, SPRITE_WIDTH, STACK_DEPTH,
    TIMER_COUPLING_PERIOD, fontset, height, width,
)
from .errors import (
    Chip8Error, OutOfBoundsAccess, RomTooLarge, StackOverflow,
    StackUnderflow, UnimplementedOpcode, UnknownOpcode,
)
from .opcode import decode, mnemonic

logger = logging.getLogger(__name__)


class Machine:

    def __init__(self, seed=None, couple_timers=False):
        # ---- CPU state ----
        self.memory = bytearray(MEMORY_SIZE)
        self.registers = bytearray(NUM_REGISTERS)  # V0..VF
        self.index_register = 0                    # I register (memory pointer)
        self.program_counter = PROGRAM_START
        self.stack = np.zeros(STACK_DEPTH, dtype=np.uint16)
        self.stack_pointer = 0
        self.delay_timer = 0
        self.sound_timer = 0
        self.keys = np.zeros(NUM_KEYS, dtype=bool)
        self._display = np.zeros((height, width), dtype=bool)  # row-major
        self._frame_dirty = False

        # FX0A state
        self.wait_for_input = False
        self.pending_input_register = None

        self.cycle_count = 0
        self.last_opcode = None
        self.couple_timers = couple_timers

        # per-machine random source so snapshots replay the same CXNN values
        self.rng = random.Random(seed)

        # Load fontset into memory
        self.memory[FONT_START:FONT_START + len(fontset)] = bytes(fontset)

    # ---- Outputs ----
    @property
    def display(self):
        """The 64x32 pixel grid, indexed [row, column]. Writes are disabled."""
        view = self._display.view()
        view.flags.writeable = False
        return view

    @property
    def frame_dirty(self):
        return self._frame_dirty

    @property
    def sound_active(self):
        return self.sound_timer > 0

    # ---- Load ROM ----
    def load(self, rom):
        rom = bytes(rom)
        capacity = MEMORY_SIZE - PROGRAM_START
        if len(rom) > capacity:
            raise RomTooLarge(len(rom), capacity)
        self.memory[PROGRAM_START:PROGRAM_START + len(rom)] = rom
        logger.info("Loaded %d bytes at 0x%03X", len(rom), PROGRAM_START)

    def load_rom(self, path):
        logger.info("Loading ROM: %s", path)
        with open(path, "rb") as f:
            data = f.read()
        self.load(data)

    # ---- Input ----
    def set_keys(self, pressed):
        """Replace the 16 key states. Releases a pending FX0A on the lowest newly pressed key."""
        pressed = np.array(pressed, dtype=bool)
        if pressed.shape != (NUM_KEYS,):
            raise ValueError("expected %d key states, got shape %s" % (NUM_KEYS, pressed.shape))
        newly_pressed = np.flatnonzero(pressed & ~self.keys)
        self.keys = pressed

        if self.wait_for_input and newly_pressed.size:
            key = int(newly_pressed[0])
            self.registers[self.pending_input_register] = key
            logger.debug("Key %X pressed, stored in V%X", key, self.pending_input_register)
            self.wait_for_input = False
            self.pending_input_register = None

    # ---- Timers ----
    def decrement_timers(self):
        if self.delay_timer > 0:
            self.delay_timer -= 1
        if self.sound_timer > 0:
            self.sound_timer -= 1

    # ---- Snapshots ----
    def snapshot(self):
        return copy.deepcopy(self)

    def restore(self, snapshot):
        """Overwrite this machine's state with an independent copy of `snapshot`."""
        self.__dict__.update(copy.deepcopy(snapshot.__dict__))

    # ---- Cycle ----
    def tick(self):
        if self.wait_for_input:
            return

        # Fetch opcode
        pc = self.program_counter
        if pc < 0 or pc + 1 >= MEMORY_SIZE:
            raise OutOfBoundsAccess("PC out of bounds", pc=pc)
        opcode = (self.memory[pc] << 8) | self.memory[pc + 1]

        name = mnemonic(opcode)
        if name is None:
            raise UnknownOpcode(opcode, pc)
        handler = getattr(self, "op_" + name)

        was_dirty = self._frame_dirty
        self._frame_dirty = False
        # PC already points at the next instruction while the handler runs;
        # jumps overwrite it and skips add another OPCODE_SIZE.
        self.program_counter = pc + OPCODE_SIZE
        try:
            handler(decode(opcode))
        except Chip8Error as e:
            self.program_counter = pc
            self._frame_dirty = was_dirty
            if e.opcode is None:
                e.opcode = opcode
            if e.pc is None:
                e.pc = pc
            raise

        self.last_opcode = opcode
        self.cycle_count += 1
        if self.couple_timers and self.cycle_count % TIMER_COUPLING_PERIOD == 0:
            self.decrement_timers()

    # ---- helpers ----
    def _check_span(self, start, length, what):
        if start < 0 or start + length > MEMORY_SIZE:
            raise OutOfBoundsAccess(
                "%s of %d bytes at 0x%03X runs past memory" % (what, length, start))

    def _skip(self):
        self.program_counter += OPCODE_SIZE

    # ---- Opcode Handlers ----

    # 00E0 - Clear the display
    def op_CLEAR(self, op):
        self._display[:] = False
        self._frame_dirty = True
        logger.debug("Clear the display")

    # 00EE - Return from subroutine
    def op_RETURN(self, op):
        if self.stack_pointer == 0:
            raise StackUnderflow("Stack underflow on RETURN")
        self.stack_pointer -= 1
        self.program_counter = int(self.stack[self.stack_pointer])
        logger.debug("Return to 0x%03X", self.program_counter)

    # 0nnn - SYS call, machine code routine on the original hardware
    def op_SYS(self, op):
        if op.nnn == 0:
            raise UnknownOpcode()
        raise UnimplementedOpcode()

    # 1nnn - Jump to address nnn
    def op_JUMP(self, op):
        self.program_counter = op.nnn
        logger.debug("Jump to 0x%03X", op.nnn)

    # 2nnn - Call subroutine at nnn
    def op_CALL(self, op):
        if self.stack_pointer >= STACK_DEPTH:
            raise StackOverflow("Stack overflow on CALL")
        self.stack[self.stack_pointer] = self.program_counter
        self.stack_pointer += 1
        self.program_counter = op.nnn
        logger.debug("Call subroutine at 0x%03X", op.nnn)

    # 3xkk - Skip next instruction if Vx == kk
    def op_SKIP_EQ(self, op):
        if self.registers[op.x] == op.nn:
            self._skip()

    # 4xkk - Skip next instruction if Vx != kk
    def op_SKIP_NEQ(self, op):
        if self.registers[op.x] != op.nn:
            self._skip()

    # 5xy0 - Skip next instruction if Vx == Vy
    def op_SKIP_REQ(self, op):
        if self.registers[op.x] == self.registers[op.y]:
            self._skip()

    # 6xkk - Set Vx = kk
    def op_LOAD_IMM(self, op):
        self.registers[op.x] = op.nn
        logger.debug("Set V%X = %d", op.x, op.nn)

    # 7xkk - Add immediate, VF untouched
    def op_ADD_IMM(self, op):
        self.registers[op.x] = (self.registers[op.x] + op.nn) & 0xFF
        logger.debug("Add %d to V%X: %d", op.nn, op.x, self.registers[op.x])

    # 8xy0..8xyE - register to register arithmetic
    def op_MOVE(self, op):
        self.registers[op.x] = self.registers[op.y]

    def op_OR(self, op):
        self.registers[op.x] |= self.registers[op.y]

    def op_AND(self, op):
        self.registers[op.x] &= self.registers[op.y]

    def op_XOR(self, op):
        self.registers[op.x] ^= self.registers[op.y]

    def op_ADD_REG(self, op):
        total = self.registers[op.x] + self.registers[op.y]
        self.registers[FLAG] = 1 if total > 0xFF else 0
        self.registers[op.x] = total & 0xFF
        logger.debug("Add V%X to V%X: carry=%d", op.y, op.x, self.registers[FLAG])

    def op_SUB(self, op):
        vx, vy = self.registers[op.x], self.registers[op.y]
        self.registers[FLAG] = 1 if vx > vy else 0
        self.registers[op.x] = (vx - vy) & 0xFF

    # Vy is ignored by both shifts
    def op_SHR(self, op):
        vx = self.registers[op.x]
        self.registers[FLAG] = vx & 1
        self.registers[op.x] = vx >> 1

    def op_SUBN(self, op):
        vx, vy = self.registers[op.x], self.registers[op.y]
        self.registers[FLAG] = 1 if vy > vx else 0
        self.registers[op.x] = (vy - vx) & 0xFF

    def op_SHL(self, op):
        vx = self.registers[op.x]
        self.registers[FLAG] = (vx >> 7) & 1
        self.registers[op.x] = (vx << 1) & 0xFF

    # 9xy0 - Skip next instruction if Vx != Vy
    def op_SKIP_RNEQ(self, op):
        if self.registers[op.x] != self.registers[op.y]:
            self._skip()

    # Annn - Set I = nnn
    def op_LOAD_INDEX(self, op):
        self.index_register = op.nnn
        logger.debug("Set I = 0x%03X", op.nnn)

    # Bnnn - Jump to address nnn + V0
    def op_JUMP_OFFSET(self, op):
        target = op.nnn + self.registers[0]
        if target >= MEMORY_SIZE:
            raise OutOfBoundsAccess("Jump to 0x%04X outside memory" % target)
        self.program_counter = target
        logger.debug("Jump to V0 + 0x%03X = 0x%03X", op.nnn, target)

    # Cxkk - Vx = random byte AND kk
    def op_RAND(self, op):
        self.registers[op.x] = self.rng.getrandbits(8) & op.nn

    # Dxyn - Draw n-row sprite from memory[I] at (Vx, Vy), wrapping at the edges
    def op_DRAW(self, op):
        start, rows = self.index_register, op.n
        self._check_span(start, rows, "Sprite")
        px, py = self.registers[op.x], self.registers[op.y]

        sprite = np.unpackbits(np.fromiter(self.memory[start:start + rows], dtype=np.uint8, count=rows))
        sprite = sprite.reshape(rows, SPRITE_WIDTH).astype(bool)
        region = np.ix_((py + np.arange(rows)) % height, (px + np.arange(SPRITE_WIDTH)) % width)

        collision = bool(np.any(self._display[region] & sprite))
        self._display[region] ^= sprite
        self.registers[FLAG] = 1 if collision else 0
        self._frame_dirty = True
        logger.debug("Drew %d rows at (%d, %d), collision=%d", rows, px, py, collision)

    # Ex9E / ExA1 - Skip next instruction if key Vx is / is not pressed
    def op_SKIP_PRESSED(self, op):
        if self.keys[self.registers[op.x] & 0xF]:
            self._skip()

    def op_SKIP_NOTPRESSED(self, op):
        if not self.keys[self.registers[op.x] & 0xF]:
            self._skip()

    # Fx07..Fx65 - timers, memory, I, and key input
    def op_READ_DELAY(self, op):
        self.registers[op.x] = self.delay_timer

    def op_WAIT_KEY(self, op):
        self.wait_for_input = True
        self.pending_input_register = op.x
        logger.debug("Waiting for a key press into V%X", op.x)

    def op_SET_DELAY(self, op):
        self.delay_timer = self.registers[op.x]

    def op_SET_SOUND(self, op):
        self.sound_timer = self.registers[op.x]

    def op_ADD_INDEX(self, op):
        total = self.index_register + self.registers[op.x]
        self.registers[FLAG] = 1 if total > 0xFFF else 0
        self.index_register = total & 0xFFF

    def op_LOAD_GLYPH(self, op):
        self.index_register = FONT_START + self.registers[op.x] * GLYPH_SIZE

    def op_STORE_BCD(self, op):
        self._check_span(self.index_register, 3, "BCD store")
        val = self.registers[op.x]
        self.memory[self.index_register] = val // 100
        self.memory[self.index_register + 1] = (val // 10) % 10
        self.memory[self.index_register + 2] = val % 10

    def op_STORE_REGS(self, op):
        count = op.x + 1
        self._check_span(self.index_register, count, "Register store")
        self.memory[self.index_register:self.index_register + count] = self.registers[:count]

    def op_LOAD_REGS(self, op):
        count = op.x + 1
        self._check_span(self.index_register, count, "Register load")
        self.registers[:count] = self.memory[self.index_register:self.index_register + count]
