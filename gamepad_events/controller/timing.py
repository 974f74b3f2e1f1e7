#!/usr/bin/env python3
"""
timing.py - Per-button timing records and transition derivation

A button moves through these transitions between two snapshots:

    not pressed -> pressed     Down
    pressed -> not pressed     Up, plus Press (short tap) or HoldRelease
    pressed -> pressed         Hold, once, after hold_ms

ButtonTracker only *derives* events from the record as it stands. The
dispatcher applies each event back onto the record (ButtonTimingRecord.apply)
right after calling its handler, so every transition is recorded exactly once.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional

from gamepad_events.controller.buttons import BUTTON_ORDER, ButtonEvent, ButtonId, Phase


@dataclass
class ButtonTimingRecord:
    down_at: Optional[float] = None
    up_at: Optional[float] = None
    hold_at: Optional[float] = None
    hold_release_at: Optional[float] = None

    def apply(self, event: ButtonEvent) -> None:
        """Update the timestamps for an event that has just been dispatched."""
        now = event.occurred_at
        phase = event.phase

        if phase is Phase.DOWN:
            self.down_at = now
            self.up_at = None

        elif phase is Phase.UP:
            self.up_at = now

        elif phase is Phase.PRESS:
            # tap cycle complete
            self.down_at = None
            self.up_at = None

        elif phase is Phase.HOLD:
            # hold_at == down_at marks "Hold already fired for this press"
            if self.hold_at is None:
                self.hold_at = self.down_at

        elif phase is Phase.HOLD_RELEASE:
            self.hold_release_at = now
            self.hold_at = None

    def reset(self) -> None:
        self.down_at = None
        self.up_at = None
        self.hold_at = None
        self.hold_release_at = None


class ButtonTracker:
    """Derives ButtonEvents for one button from two consecutive pressed flags."""

    def __init__(self, button: ButtonId):
        self.button = button
        self.record = ButtonTimingRecord()

    def check(self, is_pressed: bool, was_pressed: bool, now: float, hold_ms: float) -> List[ButtonEvent]:
        rec = self.record

        # ---------------- DOWN ----------------
        if is_pressed and not was_pressed:
            return [ButtonEvent(self.button, Phase.DOWN, now)]

        # ---------------- UP (+ PRESS / HOLD RELEASE) ----------------
        if was_pressed and not is_pressed:
            events = [ButtonEvent(self.button, Phase.UP, now)]
            # a held press never becomes a tap, even if hold_ms was raised since
            if rec.hold_at is None and rec.down_at is not None and now - rec.down_at < hold_ms:
                events.append(ButtonEvent(self.button, Phase.PRESS, now))
            if rec.hold_at is not None:
                events.append(
                    ButtonEvent(self.button, Phase.HOLD_RELEASE, now, held_ms=now - rec.hold_at)
                )
            return events

        # ---------------- HOLD ----------------
        if is_pressed and was_pressed and rec.hold_at is None:
            if rec.down_at is not None and now - rec.down_at >= hold_ms:
                return [ButtonEvent(self.button, Phase.HOLD, now)]

        return []


def make_trackers() -> Dict[ButtonId, ButtonTracker]:
    """One tracker per button, in snapshot order."""
    return {btn: ButtonTracker(btn) for btn in BUTTON_ORDER}
