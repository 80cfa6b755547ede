import pytest

from chip8.history import History

from conftest import run


def test_restore_defaults_to_newest(load_program):
    m = load_program(0x6001, 0x6002, 0x6003)
    history = History(capacity=10)
    m.tick()
    history.save(m)
    m.tick()
    history.save(m)
    m.tick()
    assert m.registers[0] == 3

    history.restore(m)
    assert m.registers[0] == 2
    assert m.program_counter == 0x204
    assert len(history) == 2


def test_restore_by_index(load_program):
    m = load_program(0x6001, 0x6002, 0x6003)
    history = History(capacity=10)
    for _ in range(3):
        m.tick()
        history.save(m)

    history.restore(m, 0)
    assert m.cycle_count == 1
    history.restore(m, -2)
    assert m.cycle_count == 2


def test_capacity_keeps_newest_snapshots(load_program):
    m = load_program(0x7001, 0x1200)
    history = History(capacity=3)
    for _ in range(5):
        m.tick()
        history.save(m)
    assert len(history) == 3
    assert history.capacity == 3

    history.restore(m, 0)
    assert m.cycle_count == 3


def test_snapshots_are_not_aliased(load_program):
    m = load_program(0x6A05, 0x6A06)
    history = History(capacity=4)
    history.save(m)

    m.tick()
    assert m.registers[0xA] == 5
    history.restore(m)
    assert m.registers[0xA] == 0

    # mutating the restored machine must not reach the stored snapshot
    m.registers[0xA] = 0x42
    m.memory[0x300] = 0x99
    history.restore(m)
    assert m.registers[0xA] == 0
    assert m.memory[0x300] == 0


def test_restored_display_is_a_copy(load_program):
    m = load_program(0xA050, 0xD005, 0x00E0)
    history = History(capacity=4)
    run(m, 2)
    history.save(m)
    m.tick()
    assert not m.display.any()

    history.restore(m)
    assert m.display.any()
    m.tick()
    history.restore(m)
    assert m.display.any()


def test_rewind_pops_newest(load_program):
    m = load_program(0x7001, 0x1200)
    history = History(capacity=10)
    for _ in range(4):
        history.save(m)
        m.tick()
    assert m.registers[0] == 2

    history.rewind(m)
    assert len(history) == 3
    assert m.cycle_count == 3
    history.rewind(m)
    assert m.cycle_count == 2


def test_empty_history_raises(load_program):
    m = load_program(0x6001)
    history = History(capacity=2)
    with pytest.raises(IndexError):
        history.restore(m)
    with pytest.raises(IndexError):
        history.rewind(m)
    assert m.program_counter == 0x200


def test_clear(load_program):
    m = load_program(0x6001)
    history = History(capacity=2)
    history.save(m)
    history.clear()
    assert len(history) == 0


@pytest.mark.parametrize("capacity", [0, -1])
def test_capacity_must_be_positive(capacity):
    with pytest.raises(ValueError):
        History(capacity)
