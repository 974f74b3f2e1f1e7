#!/usr/bin/env python3
"""
buttons.py - Data model shared by the tracker, dispatcher and session

ButtonId order is the index order of RawSnapshot.buttons (standard gamepad
layout). Do not reorder.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple, NamedTuple


class ButtonId(Enum):
    A = "a"
    B = "b"
    X = "x"
    Y = "y"
    LB = "lb"
    RB = "rb"
    LT = "lt"
    RT = "rt"
    BACK = "back"
    START = "start"
    L3 = "l3"
    R3 = "r3"
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"
    CENTER = "center"

    @property
    def index(self) -> int:
        return BUTTON_ORDER.index(self)


# Enum iteration follows definition order
BUTTON_ORDER: Tuple[ButtonId, ...] = tuple(ButtonId)
BUTTON_COUNT = len(BUTTON_ORDER)
AXIS_COUNT = 4


class Phase(Enum):
    DOWN = "Down"
    UP = "Up"
    PRESS = "Press"
    HOLD = "Hold"
    HOLD_RELEASE = "HoldRelease"


class Stick(Enum):
    LEFT = "lStick"
    RIGHT = "rStick"

    @property
    def axes(self) -> Tuple[int, int]:
        """Snapshot axis indices (x, y) for this stick."""
        return (0, 1) if self is Stick.LEFT else (2, 3)


# ---------------------------------------------------------------
# Snapshots / events
# ---------------------------------------------------------------
@dataclass(frozen=True)
class RawSnapshot:
    buttons: Tuple[bool, ...]
    axes: Tuple[float, ...]

    def __post_init__(self):
        buttons = tuple(bool(b) for b in self.buttons)
        axes = tuple(float(a) for a in self.axes)
        if len(buttons) != BUTTON_COUNT:
            raise ValueError(f"Snapshot needs {BUTTON_COUNT} buttons (got {len(buttons)})")
        if len(axes) != AXIS_COUNT:
            raise ValueError(f"Snapshot needs {AXIS_COUNT} axes (got {len(axes)})")
        object.__setattr__(self, "buttons", buttons)
        object.__setattr__(self, "axes", axes)

    @classmethod
    def neutral(cls) -> "RawSnapshot":
        return cls((False,) * BUTTON_COUNT, (0.0,) * AXIS_COUNT)

    @classmethod
    def from_pressed(cls, *pressed: ButtonId, axes=(0.0, 0.0, 0.0, 0.0)) -> "RawSnapshot":
        """Build a snapshot with only the given buttons held down."""
        flags = [False] * BUTTON_COUNT
        for btn in pressed:
            flags[btn.index] = True
        return cls(tuple(flags), tuple(axes))

    def is_pressed(self, button: ButtonId) -> bool:
        return self.buttons[button.index]

    def stick(self, stick: Stick) -> Tuple[float, float]:
        ix, iy = stick.axes
        return self.axes[ix], self.axes[iy]


@dataclass(frozen=True)
class ButtonEvent:
    button: ButtonId
    phase: Phase
    occurred_at: float
    held_ms: Optional[float] = None   # HoldRelease only

    def __str__(self):
        text = f"{self.button.value}.{self.phase.value}@{self.occurred_at:.1f}"
        if self.held_ms is not None:
            text += f" held={self.held_ms:.1f}ms"
        return text


class StickVector(NamedTuple):
    """Deadzoned (x, y) pair; unpacks as x, y. The stick is the handler's key."""
    x: float
    y: float

    @property
    def is_neutral(self) -> bool:
        return self.x == 0.0 and self.y == 0.0
