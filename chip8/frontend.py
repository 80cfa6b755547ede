# pyglet host for the Machine: keyboard -> 16 logical keys, display -> window,
# and the two independent clocks (CPU rate and 60Hz timers).
#
#   ESC        quit
#   SPACE      pause / resume
#   F1         toggle debug logging
#   F2         print the CPU state
#   F5 / F9    save / restore a history snapshot
#   BACKSPACE  rewind one frame

import logging

import numpy as np
import pyglet
from pyglet.window import key

from .config import KEYPAD_LAYOUT, height, width
from .debugger import dump_state
from .errors import Chip8Error
from .history import History
from .runner import timer_frame

logger = logging.getLogger(__name__)

SAVE_SLOTS = 10

#map binding keys
keymap = {
    getattr(key, "_" + name if name.isdigit() else name): value
    for name, value in KEYPAD_LAYOUT.items()
}


class Chip8Window(pyglet.window.Window):

    def __init__(self, machine, config):
        window_width, window_height = config.window_size
        super().__init__(
            width=window_width,
            height=window_height,
            caption="CHIP-8 Emulator",
            vsync=False
        )
        self.machine = machine
        self.config = config
        self.history = History(max(1, config.history_capacity))  # rewind, one per frame
        self.save_points = History(SAVE_SLOTS)                    # F5 / F9
        self.keys = np.zeros(len(keymap), dtype=bool)
        self.paused = False
        self.has_exit = False
        self._cpu_debt = 0.0
        self._should_draw = True

        # Performance tracking
        self._fps_counter = 0
        self._cps_counter = 0
        self.fps_label = pyglet.text.Label(
            "FPS: 0", font_size=12, x=5, y=window_height - 15,
            anchor_x='left', anchor_y='center', color=(255, 255, 255, 255))
        self.cps_label = pyglet.text.Label(
            "Cycles/s: 0", font_size=12, x=5, y=window_height - 30,
            anchor_x='left', anchor_y='center', color=(255, 255, 255, 255))
        self.status_label = pyglet.text.Label(
            "", font_size=12, x=window_width - 5, y=window_height - 15,
            anchor_x='right', anchor_y='center', color=(255, 255, 0, 255))

        # RGBA framebuffer, uploaded once per dirty frame and upscaled with numpy.repeat
        self.image = pyglet.image.ImageData(
            window_width, window_height, 'RGBA',
            bytes(window_width * window_height * 4))

        # Schedule the loops
        pyglet.clock.schedule_interval(self._cpu_tick, 1.0 / config.cpu_hz)
        # runs even with coupled timers, it also feeds the rewind history
        pyglet.clock.schedule_interval(self._timer_tick, 1.0 / config.timer_hz)
        pyglet.clock.schedule_interval(self._update_bench, 1.0)

    # ---- CPU cycle ----
    def _cpu_tick(self, dt):
        if self.has_exit or self.paused:
            return
        # pyglet rarely fires at the full CPU rate, so catch up on owed cycles
        self._cpu_debt += dt * self.config.cpu_hz
        cycles, self._cpu_debt = divmod(self._cpu_debt, 1.0)
        try:
            for _ in range(int(cycles)):
                self.machine.tick()
                self._cps_counter += 1
                if self.machine.frame_dirty:
                    self._should_draw = True
        except Chip8Error as e:
            logger.error("Emulation error: %s", e)
            logger.error("\n%s", dump_state(self.machine))
            self.has_exit = True
            self.close()

    # ---- timers ----
    def _timer_tick(self, dt):
        if self.paused:
            return
        timer_frame(self.machine, self.history)

    def _update_bench(self, dt):
        self.fps_label.text = f"FPS: {self._fps_counter / dt:.1f}"
        self.cps_label.text = f"Cycles/s: {self._cps_counter / dt:.0f}"
        self._fps_counter = 0
        self._cps_counter = 0

    # ---- Drawing ----
    def on_draw(self):
        self.clear()
        if self._should_draw:
            # row 0 of the display is the top line, pyglet's origin is bottom-left
            frame = np.flipud(self.machine.display).astype(np.uint8) * 255
            scale = self.config.scale
            frame = np.repeat(np.repeat(frame, scale, axis=0), scale, axis=1)
            rgba = np.empty(frame.shape + (4,), dtype=np.uint8)
            rgba[..., :3] = frame[..., None]
            rgba[..., 3] = 255
            self.image.set_data('RGBA', width * scale * 4, rgba.tobytes())
            self._should_draw = False
        self.image.blit(0, 0)

        status = []
        if self.paused:
            status.append("PAUSED")
        if self.machine.sound_active:
            status.append("BEEP")
        self.status_label.text = " ".join(status)

        self.fps_label.draw()
        self.cps_label.draw()
        self.status_label.draw()
        self._fps_counter += 1

    # ---- Input ----
    def on_key_press(self, symbol, modifiers):
        if symbol == key.ESCAPE:
            self.has_exit = True
            self.close()
        elif symbol == key.SPACE:
            self.paused = not self.paused
            logger.info("Paused" if self.paused else "Resumed")
        elif symbol == key.F1:
            root = logging.getLogger()
            root.setLevel(logging.INFO if root.isEnabledFor(logging.DEBUG) else logging.DEBUG)
            logger.info("Debug logging %s", "on" if root.isEnabledFor(logging.DEBUG) else "off")
        elif symbol == key.F2:
            print(dump_state(self.machine))
        elif symbol == key.F5:
            self.save_points.save(self.machine)
            logger.info("Saved state at cycle %d", self.machine.cycle_count)
        elif symbol == key.F9:
            self._restore(self.save_points.restore)
        elif symbol == key.BACKSPACE:
            self._restore(self.history.rewind)
        elif symbol in keymap:
            self.keys[keymap[symbol]] = True
            self.machine.set_keys(self.keys)

    def on_key_release(self, symbol, modifiers):
        if symbol in keymap:
            self.keys[keymap[symbol]] = False
            self.machine.set_keys(self.keys)

    def _restore(self, action):
        try:
            action(self.machine)
        except IndexError as e:
            logger.warning("Nothing to restore: %s", e)
            return
        # the restored machine keeps its old key states; resync with the keyboard
        self.machine.set_keys(self.keys)
        self._should_draw = True


def run(machine, config):
    window = Chip8Window(machine, config)
    pyglet.app.run()
    return window
