#!/usr/bin/env python3
"""
dispatcher.py - Delivers derived events to configured handlers

- Button events: handler(), or handler(held_ms) for HoldRelease
- Stick vectors: handler(StickVector), an (x, y) pair, every tick
- Missing handlers are a no-op; non-callable handlers are skipped
- Timing records are updated right after the handler call, even if it raises
"""

from gamepad_events.controller.bindings import HandlerConfig
from gamepad_events.controller.buttons import ButtonEvent, Phase, Stick, StickVector
from gamepad_events.controller.timing import ButtonTimingRecord


class EventDispatcher:
    def __init__(self, log, config: HandlerConfig):
        self.log = log
        self.config = config

    def set_config(self, config: HandlerConfig) -> None:
        # single reference swap, next lookup sees the new mapping
        self.config = config

    # ---------------------------------------------------------------
    # Buttons
    # ---------------------------------------------------------------
    def dispatch(self, event: ButtonEvent, record: ButtonTimingRecord) -> None:
        cfg = self.config
        if cfg.options.do_debug:
            self.log.debug(f"[BUTTON] {event}")

        handler = cfg.handler_for(event.button, event.phase)
        try:
            if handler is None:
                return
            if not callable(handler):
                if cfg.options.do_debug:
                    self.log.debug(
                        f"[CONFIG] Handler for {event.button.value}.{event.phase.value} "
                        f"is not callable ({handler!r}), skipped"
                    )
                return
            if event.phase is Phase.HOLD_RELEASE:
                handler(event.held_ms)
            else:
                handler()
        finally:
            record.apply(event)

    # ---------------------------------------------------------------
    # Sticks
    # ---------------------------------------------------------------
    def dispatch_stick(self, stick: Stick, vector: StickVector) -> None:
        handler = self.config.stick_handler(stick)
        if handler is None:
            return
        if not callable(handler):
            if self.config.options.do_debug:
                self.log.debug(f"[CONFIG] Handler for {stick.value} is not callable, skipped")
            return
        handler(vector)
