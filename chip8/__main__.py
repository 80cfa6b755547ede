"""Command line entry point: python -m chip8 ROM [options]"""

import argparse
import logging
import sys

from .config import CPU_HZ, HISTORY_CAPACITY, SCALE, TIMER_HZ, EmulatorConfig
from .debugger import dump_state, hexdump
from .errors import Chip8Error
from .history import History
from .machine import Machine
from .runner import run_headless

logger = logging.getLogger("chip8")


def _positive_int(text):
    value = int(text)
    if value < 1:
        raise argparse.ArgumentTypeError("must be at least 1, got %s" % text)
    return value


def _non_negative_int(text):
    value = int(text)
    if value < 0:
        raise argparse.ArgumentTypeError("must not be negative, got %s" % text)
    return value


def parse_args(args):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(prog="chip8", description="CHIP-8 Emulator")
    parser.add_argument("rom", help="Path to the ROM file")
    parser.add_argument("--headless", action="store_true",
                        help="Run without a window for --cycles instructions")
    parser.add_argument("--cycles", type=_non_negative_int, default=10000,
                        help="Instructions to execute in headless mode")
    parser.add_argument("--cpu-hz", type=_positive_int, default=CPU_HZ, help="Instructions per second")
    parser.add_argument("--timer-hz", type=_positive_int, default=TIMER_HZ, help="Timer decrements per second")
    parser.add_argument("--scale", type=_positive_int, default=SCALE, help="Window pixels per CHIP-8 pixel")
    parser.add_argument("--history", type=_non_negative_int, default=HISTORY_CAPACITY,
                        help="Snapshots kept for rewind, 0 disables headless history")
    parser.add_argument("--seed", type=int, default=None, help="Seed for the CXNN random source")
    parser.add_argument("--couple-timers", action="store_true",
                        help="Decrement timers every 8 instructions instead of on a separate clock")
    parser.add_argument("--dump", action="store_true",
                        help="Print CPU state and a memory dump when the run ends")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser.parse_args(args)


def build_config(args):
    return EmulatorConfig(
        cpu_hz=args.cpu_hz,
        timer_hz=args.timer_hz,
        scale=args.scale,
        history_capacity=args.history,
        couple_timers=args.couple_timers,
        seed=args.seed,
        verbose=args.verbose,
    )


def main(argv=None):
    args = parse_args(sys.argv[1:] if argv is None else argv)
    config = build_config(args)
    logging.basicConfig(
        level=logging.DEBUG if config.verbose else logging.INFO,
        format="[%(levelname)s] %(name)s: %(message)s",
    )

    machine = Machine(seed=config.seed, couple_timers=config.couple_timers)
    try:
        machine.load_rom(args.rom)
    except (OSError, Chip8Error) as e:
        logger.error("Could not load %s: %s", args.rom, e)
        return 1

    status = 0
    if args.headless:
        history = History(config.history_capacity) if config.history_capacity else None
        try:
            executed = run_headless(machine, args.cycles, config.cpu_hz, config.timer_hz, history)
            logger.info("Executed %d instructions", executed)
        except Chip8Error as e:
            logger.error("Emulation error: %s", e)
            status = 1
    else:
        # imported here so headless runs never need a display
        from .frontend import run
        run(machine, config)

    if args.dump:
        print(dump_state(machine))
        print(hexdump(machine.memory))
    return status


if __name__ == "__main__":
    sys.exit(main())
