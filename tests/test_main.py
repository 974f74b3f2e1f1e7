import logging

import pytest

pytest.importorskip("pygame")

from gamepad_events.controller.bindings import HandlerConfig, HandlerOptions
from gamepad_events.controller.buttons import RawSnapshot, Stick, StickVector
from gamepad_events.controller.session import Session, SessionState
from main import DeviceLink, build_demo_config


class FakePads:
    """Stands in for PygameSnapshotSource: open/close/instance_id/get_snapshot."""

    def __init__(self, instance_ids=None):
        self.instance_ids = dict(instance_ids or {})
        self.plugged = set(self.instance_ids)
        self.opened = []
        self.closed = []

    def open(self, device_index):
        self.opened.append(device_index)

    def close(self, device_index):
        self.closed.append(device_index)

    def instance_id(self, device_index):
        return self.instance_ids.get(device_index)

    def get_snapshot(self, device_index):
        if device_index not in self.plugged:
            return None
        return RawSnapshot.neutral()


@pytest.fixture
def pads():
    return FakePads({0: 11, 1: 12})


@pytest.fixture
def session(log, pads, scheduler, clock):
    return Session(log, pads, scheduler, device_index=0, clock=clock)


def test_connect_starts_session_for_configured_device(log, pads, session):
    link = DeviceLink(log, pads, session)
    link.connected(1)
    assert session.state is SessionState.IDLE
    link.connected(0)
    assert session.running
    assert pads.opened == [0]


def test_connect_while_running_is_ignored(log, pads, session):
    link = DeviceLink(log, pads, session)
    link.connected(0)
    link.connected(0)
    assert pads.opened == [0]


def test_connect_without_readable_device_logs_and_waits(log, pads, session, scheduler, caplog):
    pads.plugged.discard(0)
    link = DeviceLink(log, pads, session)
    with caplog.at_level(logging.WARNING, logger=log.name):
        link.connected(0)
    assert not session.running
    assert session.state is SessionState.IDLE
    assert pads.closed == [0]
    assert scheduler.queued == []
    assert "No gamepad snapshot available for device 0" in caplog.text

    pads.plugged.add(0)
    link.connected(0)
    assert session.running


def test_disconnect_of_other_device_is_ignored(log, pads, session):
    link = DeviceLink(log, pads, session)
    link.connected(0)
    link.disconnected(12)
    assert session.running
    assert pads.closed == []


def test_disconnect_of_own_device_stops_session(log, pads, session, scheduler):
    link = DeviceLink(log, pads, session)
    link.connected(0)
    link.disconnected(11)
    assert not session.running
    assert pads.closed == [0]
    assert scheduler.run_next() is False
    assert session.state is SessionState.STOPPED


def test_demo_stick_logging_skips_neutral(log, caplog):
    cfg = build_demo_config(log, HandlerOptions(), log_buttons=False, log_sticks=True)
    assert isinstance(cfg, HandlerConfig)
    with caplog.at_level(logging.INFO, logger=log.name):
        cfg.stick_handler(Stick.LEFT)(StickVector(0.0, 0.0))
        cfg.stick_handler(Stick.RIGHT)(StickVector(0.5, -0.25))
    assert caplog.messages == ["[STICK] rStick x=+0.500 y=-0.250"]
