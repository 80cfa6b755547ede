"""Bounded history of machine snapshots, for save points and rewind."""

import logging
from collections import deque

from .config import HISTORY_CAPACITY

logger = logging.getLogger(__name__)


class History:
    """Fixed-capacity ring of deep-copied Machine snapshots.

    Index 0 is the oldest snapshot still held, -1 the newest. Once the ring is
    full, saving a new snapshot drops the oldest one.
    """

    def __init__(self, capacity=HISTORY_CAPACITY):
        if capacity < 1:
            raise ValueError("history capacity must be at least 1")
        self._snapshots = deque(maxlen=capacity)

    @property
    def capacity(self):
        return self._snapshots.maxlen

    def __len__(self):
        return len(self._snapshots)

    def save(self, machine):
        self._snapshots.append(machine.snapshot())

    def restore(self, machine, index=None):
        """Load a stored snapshot into `machine`, the newest one by default."""
        if not self._snapshots:
            raise IndexError("restore from empty history")
        if index is None:
            index = -1
        machine.restore(self._snapshots[index])
        logger.debug("Restored snapshot %d of %d (cycle %d)", index, len(self), machine.cycle_count)

    def rewind(self, machine):
        """Step back: drop the newest snapshot and load it into `machine`."""
        if not self._snapshots:
            raise IndexError("rewind past the start of history")
        machine.restore(self._snapshots.pop())

    def clear(self):
        self._snapshots.clear()
