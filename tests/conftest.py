import pytest

from chip8.machine import Machine


def assemble(*words):
    return b"".join(word.to_bytes(2, "big") for word in words)


@pytest.fixture
def load_program():
    """Build a machine with the given opcode words loaded at 0x200."""

    def _load(*words, **kwargs):
        machine = Machine(**kwargs)
        machine.load(assemble(*words))
        return machine

    return _load


def run(machine, ticks):
    for _ in range(ticks):
        machine.tick()
    return machine
