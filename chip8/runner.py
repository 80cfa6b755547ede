"""Headless host loop.

Drives a Machine without a window: the CPU clock and the 60Hz timer clock are
both expressed as tick counts, so a run is deterministic and needs no real time.
"""

import logging

from .config import CPU_HZ, TIMER_HZ

logger = logging.getLogger(__name__)


def timer_frame(machine, history=None):
    """One edge of the 60Hz timer clock.

    Decrements the timers unless the machine already decays them inside
    tick(), then saves a rewind point if a history is given.
    """
    if not machine.couple_timers:
        machine.decrement_timers()
    if history is not None:
        history.save(machine)


def run_headless(machine, cycles, cpu_hz=CPU_HZ, timer_hz=TIMER_HZ, history=None):
    """Execute up to `cycles` instructions and return how many actually ran.

    Timers are decremented every cpu_hz / timer_hz ticks, or by the machine
    itself when it was built with couple_timers. The run stops early when the
    program blocks on FX0A, since nothing can press a key here.
    Faults propagate to the caller.
    """
    ticks_per_timer = max(1, round(cpu_hz / timer_hz))
    executed = 0
    for step in range(1, cycles + 1):
        if machine.wait_for_input:
            logger.info("Program is waiting for a key at PC 0x%03X, stopping", machine.program_counter)
            break
        machine.tick()
        executed += 1
        if history is not None:
            history.save(machine)
        if step % ticks_per_timer == 0:
            timer_frame(machine)
    return executed
