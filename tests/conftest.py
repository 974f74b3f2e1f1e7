import logging

import pytest

from gamepad_events.controller.buttons import RawSnapshot


class FakeClock:
    def __init__(self, now: float = 0.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


class FakeSource:
    """Returns whatever snapshot the test set last; None means unplugged."""

    def __init__(self, snapshot=None):
        self.snapshot = snapshot if snapshot is not None else RawSnapshot.neutral()
        self.reads = []

    def get_snapshot(self, device_index):
        self.reads.append(device_index)
        return self.snapshot


class RecordingScheduler:
    def __init__(self):
        self.queued = []

    def call_soon(self, callback):
        self.queued.append(callback)

    def run_next(self):
        return self.queued.pop(0)()


@pytest.fixture
def log():
    return logging.getLogger("gamepad.test")


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def source():
    return FakeSource()


@pytest.fixture
def scheduler():
    return RecordingScheduler()
