"""
scheduler.py - Fixed-rate frame loop providing call_soon() for Session ticks
"""

import time
from collections import deque
from typing import Callable, Optional


class FrameScheduler:
    """
    Callbacks queued with call_soon() run on the next frame. Callbacks that
    queue themselves again land in the frame after, so a self-rescheduling
    tick runs once per frame.
    """

    def __init__(self, poll_hz: int = 60, sleep: Callable[[float], None] = time.sleep):
        self.frame_dt = 1.0 / max(1, poll_hz)
        self._sleep = sleep
        self._pending = deque()
        self._stopped = False

    def call_soon(self, callback: Callable[[], None]) -> None:
        self._pending.append(callback)

    @property
    def pending(self) -> int:
        return len(self._pending)

    def run_frame(self) -> int:
        """Run everything queued before this frame began. Returns how many ran."""
        batch = list(self._pending)
        self._pending.clear()
        for cb in batch:
            cb()
        return len(batch)

    def run(self, on_frame: Optional[Callable[[], None]] = None, max_frames: Optional[int] = None) -> None:
        """
        Loop until stop() or max_frames. on_frame runs at the start of every
        frame (connection polling etc.), so the loop keeps going while idle.
        """
        self._stopped = False
        frames = 0
        while not self._stopped:
            if max_frames is not None and frames >= max_frames:
                break
            if on_frame:
                on_frame()
            self.run_frame()
            frames += 1
            self._sleep(self.frame_dt)

    def stop(self) -> None:
        self._stopped = True
