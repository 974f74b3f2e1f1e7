#!/usr/bin/env python3
"""
gamecontroller.py
Pygame-backed snapshot source and connect/disconnect watcher.

pygame reports XInput-style pads as:
    buttons 0-10 : a b x y lb rb back start l3 r3 guide
    axes    0-3  : left x/y, right x/y      axes 4-5 : lt / rt
    hat     0    : d-pad
These are folded into the standard 17-button RawSnapshot ordering.
"""

from typing import Callable, Dict, List, Optional, Tuple

import pygame

from gamepad_events.controller.buttons import AXIS_COUNT, ButtonId, RawSnapshot

PYGAME_BUTTONS = {
    ButtonId.A: 0,
    ButtonId.B: 1,
    ButtonId.X: 2,
    ButtonId.Y: 3,
    ButtonId.LB: 4,
    ButtonId.RB: 5,
    ButtonId.BACK: 6,
    ButtonId.START: 7,
    ButtonId.L3: 8,
    ButtonId.R3: 9,
    ButtonId.CENTER: 10,
}
PYGAME_TRIGGER_AXES = {
    ButtonId.LT: 4,
    ButtonId.RT: 5,
}


def snapshot_from_joystick(js, trigger_threshold: float = 0.5) -> RawSnapshot:
    """Read one RawSnapshot from an initialised pygame joystick (or lookalike)."""
    num_buttons = js.get_numbuttons()
    num_axes = js.get_numaxes()
    hat_x, hat_y = js.get_hat(0) if js.get_numhats() > 0 else (0, 0)

    pressed = []
    for btn in ButtonId:
        if btn in PYGAME_BUTTONS:
            idx = PYGAME_BUTTONS[btn]
            state = idx < num_buttons and js.get_button(idx) == 1
        elif btn in PYGAME_TRIGGER_AXES:
            idx = PYGAME_TRIGGER_AXES[btn]
            state = idx < num_axes and js.get_axis(idx) > trigger_threshold
        elif btn is ButtonId.UP:
            state = hat_y > 0
        elif btn is ButtonId.DOWN:
            state = hat_y < 0
        elif btn is ButtonId.LEFT:
            state = hat_x < 0
        else:  # RIGHT
            state = hat_x > 0
        pressed.append(state)

    axes = [js.get_axis(i) if i < num_axes else 0.0 for i in range(AXIS_COUNT)]
    return RawSnapshot(tuple(pressed), tuple(axes))


class PygameSnapshotSource:
    def __init__(self, log, trigger_threshold: float = 0.5):
        self.log = log
        self.trigger_threshold = trigger_threshold
        self._joysticks: Dict[int, "pygame.joystick.JoystickType"] = {}

        pygame.init()
        pygame.joystick.init()

    @staticmethod
    def list_devices() -> List[Tuple[int, str, str]]:
        """
        Return list of all connected devices with (index, guid, name).
        """
        pygame.init()
        pygame.joystick.init()
        devices = []
        for i in range(pygame.joystick.get_count()):
            js = pygame.joystick.Joystick(i)
            devices.append((i, js.get_guid(), js.get_name()))
        return devices

    def open(self, device_index: int):
        if device_index >= pygame.joystick.get_count():
            raise ValueError(f"No joystick at index {device_index}")
        js = pygame.joystick.Joystick(device_index)
        js.init()
        self._joysticks[device_index] = js
        self.log.info(
            f"[DEVICE] Joystick {device_index}: {js.get_name()} "
            f"(GUID={js.get_guid()}) Buttons={js.get_numbuttons()} "
            f"Axes={js.get_numaxes()} Hats={js.get_numhats()}"
        )
        return js

    def close(self, device_index: int) -> None:
        js = self._joysticks.pop(device_index, None)
        if js is not None:
            js.quit()

    def instance_id(self, device_index: int) -> Optional[int]:
        js = self._joysticks.get(device_index)
        return js.get_instance_id() if js is not None else None

    def get_snapshot(self, device_index: int) -> Optional[RawSnapshot]:
        js = self._joysticks.get(device_index)
        if js is None:
            return None
        pygame.event.pump()
        try:
            if not js.get_init():
                return None
            return snapshot_from_joystick(js, self.trigger_threshold)
        except pygame.error:
            # device vanished between pump() and the read
            return None


class ConnectionWatcher:
    """
    Turns pygame JOYDEVICEADDED / JOYDEVICEREMOVED into connected(device_index)
    and disconnected(instance_id) callbacks. Call poll() once per frame.
    """

    def __init__(self, log,
                 on_connected: Callable[[int], None],
                 on_disconnected: Callable[[int], None]):
        self.log = log
        self.on_connected = on_connected
        self.on_disconnected = on_disconnected

    def poll(self) -> None:
        for ev in pygame.event.get((pygame.JOYDEVICEADDED, pygame.JOYDEVICEREMOVED)):
            if ev.type == pygame.JOYDEVICEADDED:
                self.log.info(f"[DEVICE] Connected: index {ev.device_index}")
                self.on_connected(ev.device_index)
            else:
                self.log.info(f"[DEVICE] Disconnected: instance {ev.instance_id}")
                self.on_disconnected(ev.instance_id)
