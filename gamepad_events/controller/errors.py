"""
errors.py - Exceptions raised by the gamepad event engine
"""

from typing import Optional


class GamepadError(Exception):
    pass


class DeviceUnavailable(GamepadError):
    """No snapshot could be read from the device for the current tick."""

    def __init__(self, device_index: Optional[int], message: Optional[str] = None):
        self.device_index = device_index
        super().__init__(message or f"No gamepad snapshot available for device {device_index}")
