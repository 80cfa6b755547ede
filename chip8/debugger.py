# Read-only views of machine state for the F2 dump and --dump.
# Nothing here writes to the machine.

from .config import MEMORY_SIZE, NUM_REGISTERS, PROGRAM_START
from .opcode import disassemble


def dump_state(machine):
    """Multi-line summary of CPU state: PC, SP, I, last opcode, cycles, registers, stack, keys."""
    if machine.last_opcode is None:
        last = "----"
    else:
        last = "%04X  %s" % (machine.last_opcode, disassemble(machine.last_opcode))

    lines = [
        "PC: 0x%03X  SP: %d  I: 0x%03X" % (
            machine.program_counter, machine.stack_pointer, machine.index_register),
        "Last opcode: %s" % last,
        "Cycles: %d  DT: %d  ST: %d" % (
            machine.cycle_count, machine.delay_timer, machine.sound_timer),
    ]
    regs = ["V%X=%02X" % (i, machine.registers[i]) for i in range(NUM_REGISTERS)]
    lines.append("Registers: " + " ".join(regs[:8]))
    lines.append("           " + " ".join(regs[8:]))

    stack = [("%03X" % int(addr)) for addr in machine.stack[:machine.stack_pointer]]
    lines.append("Stack: [%s]" % ", ".join(stack))

    keys = "".join("%X" % i if pressed else "." for i, pressed in enumerate(machine.keys))
    lines.append("Keys: %s" % keys)
    if machine.wait_for_input:
        lines.append("Waiting for key into V%X" % machine.pending_input_register)
    return "\n".join(lines)


def hexdump(memory, start=PROGRAM_START, length=200, width=16):
    """Classic offset / hex / ASCII dump of memory[start:start+length]."""
    end = min(start + length, MEMORY_SIZE, len(memory))
    rows = []
    for offset in range(start, end, width):
        chunk = bytes(memory[offset:min(offset + width, end)])
        hex_part = " ".join("%02x" % b for b in chunk)
        text = "".join(chr(b) if 0x20 <= b < 0x7F else "." for b in chunk)
        rows.append("%04x:  %-*s  %s" % (offset, width * 3 - 1, hex_part, text))
    return "\n".join(rows)
