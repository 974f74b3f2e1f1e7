"""
deadzone.py - Stick axis deadzone filter
"""

from typing import Tuple


def apply_deadzone(x: float, y: float, deadzone: float) -> Tuple[float, float]:
    """
    Zero each axis whose magnitude is within the deadzone.
    Values outside the deadzone pass through unscaled.
    """
    nx = x if abs(x) > deadzone else 0.0
    ny = y if abs(y) > deadzone else 0.0
    return nx, ny
