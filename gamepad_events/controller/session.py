#!/usr/bin/env python3
"""
session.py - Polls one gamepad and turns snapshots into events

Each tick():
    1. stop flag cleared?           -> Stopped, nothing else happens
    2. fetch a fresh snapshot       (none -> DeviceUnavailable, tick ends, no reschedule)
    3. diff all 17 buttons against the previous snapshot, dispatch in ButtonId order
    4. deadzone both sticks and hand them to the stick handlers
    5. cache the snapshot, reschedule via scheduler.call_soon() if still running

Everything runs on the caller's thread. stop() only clears the flag; a tick
already in progress finishes normally.
"""

import time
from enum import Enum
from typing import Callable, Dict, Optional

from gamepad_events.controller.bindings import HandlerConfig
from gamepad_events.controller.buttons import BUTTON_ORDER, ButtonId, RawSnapshot, Stick, StickVector
from gamepad_events.controller.deadzone import apply_deadzone
from gamepad_events.controller.dispatcher import EventDispatcher
from gamepad_events.controller.errors import DeviceUnavailable
from gamepad_events.controller.timing import ButtonTimingRecord, ButtonTracker, make_trackers


def monotonic_ms() -> float:
    return time.perf_counter() * 1000.0


class SessionState(Enum):
    IDLE = "idle"
    RUNNING = "running"
    STOPPED = "stopped"


class Session:
    def __init__(
            self,
            log,
            source,
            scheduler,
            config: Optional[HandlerConfig] = None,
            *,
            device_index: int = 0,
            clock: Callable[[], float] = monotonic_ms,
            on_device_unavailable: Optional[Callable[[DeviceUnavailable], None]] = None,
    ):
        """
        source     : object with get_snapshot(device_index) -> RawSnapshot | None
        scheduler  : object with call_soon(callback)
        clock      : returns the current time in milliseconds
        """
        self.log = log
        self.source = source
        self.scheduler = scheduler
        self.device_index = device_index
        self.clock = clock
        self.on_device_unavailable = on_device_unavailable

        self._dispatcher = EventDispatcher(log, config or HandlerConfig())
        self._trackers: Dict[ButtonId, ButtonTracker] = make_trackers()
        self._prev: Optional[RawSnapshot] = None
        self._running = False
        self._tick_pending = False
        self._in_tick = False
        self.state = SessionState.IDLE
        self.last_error: Optional[Exception] = None

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    @property
    def running(self) -> bool:
        return self._running

    @property
    def config(self) -> HandlerConfig:
        return self._dispatcher.config

    def set_config(self, config: HandlerConfig) -> None:
        """Swap the active configuration. Safe between ticks or from a handler."""
        self._dispatcher.set_config(config)
        if config.options.do_debug:
            self.log.debug(f"[CONFIG] Active config replaced: {config!r}")

    def start(self, config: Optional[HandlerConfig] = None,
              initial_snapshot: Optional[RawSnapshot] = None) -> None:
        """
        Begin monitoring. Without an initial snapshot the source is read once
        and DeviceUnavailable is raised if it has nothing.
        """
        if self._running:
            raise RuntimeError(f"Session for device {self.device_index} is already running")

        if config is not None:
            self.set_config(config)

        if initial_snapshot is None:
            initial_snapshot = self.get_snapshot()

        for tracker in self._trackers.values():
            tracker.record.reset()
        self._prev = initial_snapshot
        self.last_error = None
        self._running = True
        self.state = SessionState.RUNNING
        self.log.info(f"[SESSION] Monitoring device {self.device_index}")

        # a tick from before a quick stop()/start() may still be queued
        self._schedule()

    def stop(self) -> None:
        if self._running:
            self.log.info(f"[SESSION] Stop requested for device {self.device_index}")
        self._running = False
        if not self._tick_pending and not self._in_tick:
            self.state = SessionState.STOPPED

    # ------------------------------------------------------------------
    # Tick
    # ------------------------------------------------------------------
    def tick(self) -> bool:
        """Run one poll/diff/dispatch/cache cycle. Returns True if rescheduled."""
        self._tick_pending = False
        if self.state is SessionState.IDLE:
            return False
        if not self._running:
            self._halt()
            return False

        try:
            snapshot = self.get_snapshot()
        except DeviceUnavailable as e:
            self._device_unavailable(e)
            return False

        now = self.clock()
        self._in_tick = True
        try:
            self._check_buttons(snapshot, now)
            self._check_sticks(snapshot)
        except Exception as e:
            # failed tick: no reschedule, other scheduler callbacks keep running
            self.log.exception(f"[SESSION] Handler failed, device {self.device_index} stopped")
            self.last_error = e
            self._running = False
            self.state = SessionState.STOPPED
            return False
        finally:
            self._in_tick = False
        self._prev = snapshot

        if self._running:
            self._schedule()
            return True
        self._halt()
        return False

    def _schedule(self) -> None:
        if self._tick_pending:
            return
        self._tick_pending = True
        self.scheduler.call_soon(self.tick)

    def _halt(self) -> None:
        if self.state is not SessionState.STOPPED:
            self.log.info(f"[SESSION] Device {self.device_index} stopped")
        self.state = SessionState.STOPPED

    def _device_unavailable(self, err: DeviceUnavailable) -> None:
        self.log.warning(f"[SESSION] {err}")
        self.last_error = err
        self._running = False
        self.state = SessionState.STOPPED
        if self.on_device_unavailable:
            self.on_device_unavailable(err)

    def _check_buttons(self, snapshot: RawSnapshot, now: float) -> None:
        prev = self._prev if self._prev is not None else snapshot
        for btn in BUTTON_ORDER:
            tracker = self._trackers[btn]
            # re-read per button, a handler may have swapped the config
            hold_ms = self.config.options.hold_ms
            events = tracker.check(snapshot.is_pressed(btn), prev.is_pressed(btn), now, hold_ms)
            for ev in events:
                self._dispatcher.dispatch(ev, tracker.record)

    def _check_sticks(self, snapshot: RawSnapshot) -> None:
        # sticks always report, including neutral
        for stick in (Stick.LEFT, Stick.RIGHT):
            x, y = snapshot.stick(stick)
            nx, ny = apply_deadzone(x, y, self.config.options.stick_deadzone)
            self._dispatcher.dispatch_stick(stick, StickVector(nx, ny))

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def get_snapshot(self) -> RawSnapshot:
        """Fresh snapshot from the source."""
        snap = self.source.get_snapshot(self.device_index)
        if snap is None:
            raise DeviceUnavailable(self.device_index)
        return snap

    def is_pressed(self, button: ButtonId) -> bool:
        """Pressed flag from the last snapshot seen by the session."""
        if self._prev is None:
            return False
        return self._prev.is_pressed(button)

    def record(self, button: ButtonId) -> ButtonTimingRecord:
        return self._trackers[button].record
