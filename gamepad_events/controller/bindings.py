from dataclasses import dataclass
from typing import Any, Callable, Dict, Mapping, Optional, Tuple, Union

from gamepad_events.controller.buttons import ButtonId, Phase, Stick

EventKey = Union[Tuple[ButtonId, Phase], Stick]

DEFAULT_HOLD_MS = 300.0
DEFAULT_STICK_DEADZONE = 0.3

# Option names accepted in a flat handler mapping (both spellings)
_OPTION_ALIASES = {
    "doDebug": "do_debug",
    "do_debug": "do_debug",
    "holdMs": "hold_ms",
    "hold_ms": "hold_ms",
    "stickDeadzone": "stick_deadzone",
    "stick_deadzone": "stick_deadzone",
}

_BUTTONS_BY_NAME = {b.value: b for b in ButtonId}
_PHASES_BY_NAME = {p.value: p for p in Phase}
_STICKS_BY_NAME = {s.value: s for s in Stick}


# ---------------------------------------------------------------
# Key parsing (configuration build time only)
# ---------------------------------------------------------------
def parse_event_key(key: Union[str, EventKey]) -> EventKey:
    """
    Turn "a.Down" / "lStick" (or an already structured key) into an EventKey.
    Raises ValueError for anything that does not name a known event.
    """
    if isinstance(key, Stick):
        return key
    if isinstance(key, tuple):
        if len(key) == 2 and isinstance(key[0], ButtonId) and isinstance(key[1], Phase):
            return key
        raise ValueError(f"Invalid event key {key!r}")
    if not isinstance(key, str):
        raise ValueError(f"Invalid event key {key!r}")

    if key in _STICKS_BY_NAME:
        return _STICKS_BY_NAME[key]

    btn_name, sep, phase_name = key.partition(".")
    if not sep:
        raise ValueError(f"Event key must look like '<button>.<phase>' ({key})")
    btn = _BUTTONS_BY_NAME.get(btn_name)
    if btn is None:
        raise ValueError(f"Unknown button '{btn_name}' in event key '{key}'")
    phase = _PHASES_BY_NAME.get(phase_name)
    if phase is None:
        raise ValueError(f"Unknown phase '{phase_name}' in event key '{key}'")
    return (btn, phase)


def format_event_key(key: EventKey) -> str:
    if isinstance(key, Stick):
        return key.value
    btn, phase = key
    return f"{btn.value}.{phase.value}"


# ---------------------------------------------------------------
# Options
# ---------------------------------------------------------------
@dataclass(frozen=True)
class HandlerOptions:
    do_debug: bool = False
    hold_ms: float = DEFAULT_HOLD_MS
    stick_deadzone: float = DEFAULT_STICK_DEADZONE

    def __post_init__(self):
        if self.hold_ms < 0:
            raise ValueError(f"hold_ms must be >= 0 (got {self.hold_ms})")
        if not 0.0 <= self.stick_deadzone < 1.0:
            raise ValueError(f"stick_deadzone must be in [0, 1) (got {self.stick_deadzone})")

    @classmethod
    def from_ini(cls, cfg, section: str = "gamepad"):
        return cls(
            do_debug=cfg.get_bool(section, "do_debug", False),
            hold_ms=cfg.get_float(section, "hold_ms", DEFAULT_HOLD_MS),
            stick_deadzone=cfg.get_float(section, "stick_deadzone", DEFAULT_STICK_DEADZONE),
        )


# ---------------------------------------------------------------
# Handler configuration
# ---------------------------------------------------------------
class HandlerConfig:
    """
    Event key -> handler mapping plus HandlerOptions.

    Button handlers take no arguments, except HoldRelease handlers which get
    the held duration in ms. Stick handlers get a StickVector (x, y) every tick.
    Values that are not callable are kept but never invoked.
    """

    def __init__(self, handlers: Optional[Mapping[Any, Any]] = None,
                 options: Optional[HandlerOptions] = None):
        self.options = options or HandlerOptions()
        self._handlers: Dict[EventKey, Any] = {}
        for key, handler in (handlers or {}).items():
            self.bind(key, handler)

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> "HandlerConfig":
        """
        Build from a single flat mapping holding both handlers and options,
        e.g. {"a.Down": fn, "lStick": fn2, "holdMs": 250, "doDebug": True}.
        """
        opts = {}
        handlers = {}
        for key, value in mapping.items():
            if isinstance(key, str) and key in _OPTION_ALIASES:
                if value is not None:
                    opts[_OPTION_ALIASES[key]] = value
            else:
                handlers[key] = value

        if "hold_ms" in opts:
            opts["hold_ms"] = float(opts["hold_ms"])
        if "stick_deadzone" in opts:
            opts["stick_deadzone"] = float(opts["stick_deadzone"])
        if "do_debug" in opts:
            opts["do_debug"] = bool(opts["do_debug"])
        return cls(handlers, HandlerOptions(**opts))

    # -----------------------------------------------------------
    # Mutation
    # -----------------------------------------------------------
    def bind(self, key: Union[str, EventKey], handler: Any) -> EventKey:
        ek = parse_event_key(key)
        self._handlers[ek] = handler
        return ek

    def unbind(self, key: Union[str, EventKey]) -> None:
        self._handlers.pop(parse_event_key(key), None)

    # -----------------------------------------------------------
    # Lookup
    # -----------------------------------------------------------
    def handler_for(self, button: ButtonId, phase: Phase) -> Optional[Callable]:
        return self._handlers.get((button, phase))

    def stick_handler(self, stick: Stick) -> Optional[Callable]:
        return self._handlers.get(stick)

    def keys(self):
        return list(self._handlers.keys())

    def __contains__(self, key) -> bool:
        try:
            return parse_event_key(key) in self._handlers
        except ValueError:
            return False

    def __len__(self) -> int:
        return len(self._handlers)

    def __repr__(self):
        keys = ", ".join(format_event_key(k) for k in self._handlers)
        return f"HandlerConfig([{keys}], {self.options})"
