#!/usr/bin/env python3
"""
main.py - Entry point for gamepad-events

Watches for a gamepad, then logs every button event (Down/Up/Press/Hold/
HoldRelease) and stick movement until Ctrl+C.
"""

import argparse
import logging
from pathlib import Path

from gamepad_events.controller.bindings import HandlerConfig, HandlerOptions
from gamepad_events.controller.buttons import ButtonId, Phase, Stick
from gamepad_events.controller.errors import DeviceUnavailable
from gamepad_events.controller.gamecontroller import ConnectionWatcher, PygameSnapshotSource
from gamepad_events.controller.scheduler import FrameScheduler
from gamepad_events.controller.session import Session
from gamepad_events.file.inireader import IniReader
from gamepad_events.logger.logger import setup_logger


# ----------------------------------------------------------------------
# Config selector
# ----------------------------------------------------------------------
def select_config_file(explicit: str | None) -> str | None:
    if explicit:
        return explicit

    ini_files = sorted(Path(".").glob("*.ini"))
    if not ini_files:
        return None

    if len(ini_files) == 1:
        return str(ini_files[0])

    # Multiple INIs → let user choose
    print("\nAvailable config files:")
    for idx, f in enumerate(ini_files, start=1):
        print(f"  {idx}. {f.name}")
    while True:
        try:
            choice = int(input("Select config file [1-{}]: ".format(len(ini_files))))
            if 1 <= choice <= len(ini_files):
                return str(ini_files[choice - 1])
        except ValueError:
            pass
        print("Invalid choice, try again.")


# ----------------------------------------------------------------------
# Demo handlers
# ----------------------------------------------------------------------
def build_demo_config(log, options: HandlerOptions, *, log_buttons=True, log_sticks=False) -> HandlerConfig:
    cfg = HandlerConfig(options=options)

    if log_buttons:
        for btn in ButtonId:
            for phase in (Phase.DOWN, Phase.UP, Phase.PRESS, Phase.HOLD):
                cfg.bind((btn, phase), lambda b=btn, p=phase: log.info(f"[BUTTON] {b.value} {p.value.upper()}"))
            cfg.bind(
                (btn, Phase.HOLD_RELEASE),
                lambda held_ms, b=btn: log.info(f"[BUTTON] {b.value} HOLDRELEASE ({held_ms:.0f} ms)"),
            )

    if log_sticks:
        for stick in Stick:
            def log_stick(vec, s=stick):
                if not vec.is_neutral:
                    x, y = vec
                    log.info(f"[STICK] {s.value} x={x:+.3f} y={y:+.3f}")
            cfg.bind(stick, log_stick)

    return cfg


# ----------------------------------------------------------------------
# Device connect / disconnect
# ----------------------------------------------------------------------
class DeviceLink:
    """
    Starts the session when its device is plugged in and stops it when that
    same device (matched by pygame instance id) goes away.
    """

    def __init__(self, log, source, session):
        self.log = log
        self.source = source
        self.session = session

    @property
    def device_index(self) -> int:
        return self.session.device_index

    def connected(self, device_index: int) -> None:
        if device_index != self.device_index or self.session.running:
            return
        self.source.open(device_index)
        try:
            self.session.start(initial_snapshot=self.source.get_snapshot(device_index))
        except DeviceUnavailable as e:
            # unplugged again before the first read, wait for the next JOYDEVICEADDED
            self.log.warning(f"[DEVICE] {e}")
            self.source.close(device_index)

    def disconnected(self, instance_id: int) -> None:
        if instance_id != self.source.instance_id(self.device_index):
            return
        self.session.stop()
        self.source.close(self.device_index)


# ----------------------------------------------------------------------
# Main runner
# ----------------------------------------------------------------------
def run_main(log, cfgfile: str | None):
    cfg = IniReader(cfgfile)

    options = HandlerOptions.from_ini(cfg)
    device_index = cfg.get_int("gamepad", "device_index", 0)
    poll_hz = cfg.get_int("gamepad", "poll_hz", 60)
    trigger_threshold = cfg.get_float("gamepad", "trigger_threshold", 0.5)

    handlers = build_demo_config(
        log,
        options,
        log_buttons=cfg.get_bool("logging", "log_buttons", True),
        log_sticks=cfg.get_bool("logging", "log_sticks", False),
    )
    log.info(
        f"[CONFIG] hold_ms={options.hold_ms:.0f} stick_deadzone={options.stick_deadzone} "
        f"poll_hz={poll_hz} device={device_index} ({len(handlers)} handlers)"
    )

    source = PygameSnapshotSource(log, trigger_threshold=trigger_threshold)
    for idx, guid, name in source.list_devices():
        log.info(f"[DEVICE] Found {idx}: {name} (GUID={guid})")

    scheduler = FrameScheduler(poll_hz)
    session = Session(log, source, scheduler, handlers, device_index=device_index)

    link = DeviceLink(log, source, session)
    watcher = ConnectionWatcher(log, link.connected, link.disconnected)
    log.info("Waiting for gamepad... (Ctrl+C to quit)")
    try:
        scheduler.run(on_frame=watcher.poll)
    except KeyboardInterrupt:
        log.info("Interrupted, shutting down")
    finally:
        session.stop()


def main():
    parser = argparse.ArgumentParser(description="Gamepad event monitor")
    parser.add_argument(
        "--config",
        "-c",
        type=str,
        default=None,
        help="INI config file (default: ask user if multiple exist)",
    )
    parser.add_argument("--debug", action="store_true", help="Show debug output on the console")
    args = parser.parse_args()

    # logfile lives in the config, so pick the config before logging exists
    cfgfile = select_config_file(args.config)
    logfile = IniReader(cfgfile).get_str("logging", "logfile", "gamepad.log")

    log = setup_logger(
        "gamepad",
        logfile=logfile or None,
        console_level=logging.DEBUG if args.debug else logging.INFO,
    )
    log.info("Starting gamepad-events")
    log.info(f"Using config: {cfgfile}" if cfgfile else "No INI configuration found, using defaults.")
    run_main(log, cfgfile)


if __name__ == "__main__":
    main()
