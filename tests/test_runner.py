import pytest

from chip8.errors import UnknownOpcode
from chip8.history import History
from chip8.runner import run_headless, timer_frame


def test_runs_requested_cycles_and_decays_timers(load_program):
    # V0 = 20, DT = V0, then spin at 0x204
    m = load_program(0x6014, 0xF015, 0x1204)
    executed = run_headless(m, 120, cpu_hz=500, timer_hz=60)
    assert executed == 120
    assert m.cycle_count == 120
    # 500 / 60 rounds to a decrement every 8 ticks: 15 decrements
    assert m.delay_timer == 5


def test_stops_when_waiting_for_a_key(load_program):
    m = load_program(0xF00A, 0x6001)
    executed = run_headless(m, 10)
    assert executed == 1
    assert m.wait_for_input
    assert m.registers[0] == 0


def test_saves_history_every_tick(load_program):
    m = load_program(0x7001, 0x1200)
    history = History(capacity=50)
    run_headless(m, 10, history=history)
    assert len(history) == 10
    history.restore(m, 0)
    assert m.cycle_count == 1


def test_faults_propagate(load_program):
    m = load_program(0x6001)
    with pytest.raises(UnknownOpcode) as excinfo:
        run_headless(m, 5)
    assert excinfo.value.pc == 0x202
    assert m.cycle_count == 1


def test_coupled_timers_are_not_decremented_twice(load_program):
    # V0 = 40, DT = V0, then spin at 0x204
    m = load_program(0x6028, 0xF015, 0x1204, couple_timers=True)
    run_headless(m, 80, cpu_hz=500, timer_hz=60)
    # only the machine's own decay: DT set at tick 2, then ticks 8..80 -> 10 decrements
    assert m.delay_timer == 30


def test_timer_frame_decrements_and_saves(load_program):
    m = load_program(0x6005, 0xF015)
    m.tick()
    m.tick()
    history = History(capacity=4)
    timer_frame(m, history)
    assert m.delay_timer == 4
    assert len(history) == 1


def test_timer_frame_with_coupled_timers_only_saves(load_program):
    m = load_program(0x6005, 0xF015, couple_timers=True)
    m.tick()
    m.tick()
    history = History(capacity=4)
    timer_frame(m, history)
    assert m.delay_timer == 5
    assert len(history) == 1
    history.rewind(m)
    assert m.cycle_count == 2
