"""Controller input aggregation.

Keeps one HandInputState per hand, updated from discrete controller events,
and notifies handlers registered per (InputAction, Hand) pair. Handlers run
synchronously inside the event call, after the state update.

Events may arrive on a different thread than the control tick, so state is
guarded by a lock and readers receive copies.
"""

import threading
from collections import defaultdict
from typing import Any, Callable

import numpy as np

from pendant_teleop.interfaces.input_device import Hand, HandInputState, InputAction
from pendant_teleop.utils.logger import get_logger

logger = get_logger("input_aggregator")

InputHandler = Callable[[Any, Hand], None]


def as_pressed(value: bool | float) -> bool:
    """Interpret a button reading: bools pass through, floats count only at 1.0."""
    if isinstance(value, (bool, np.bool_)):
        return bool(value)
    return float(value) == 1.0


class InputAggregator:
    """Aggregates controller events into per-hand input snapshots."""

    def __init__(self):
        self._states: dict[Hand, HandInputState] = {
            Hand.LEFT: HandInputState(),
            Hand.RIGHT: HandInputState(),
        }
        self._handlers: dict[tuple[InputAction, Hand], list[InputHandler]] = defaultdict(list)
        self._lock = threading.Lock()

    def subscribe(self, action: InputAction, hand: Hand, handler: InputHandler) -> None:
        """Register handler(value, hand) for events of action on hand."""
        self._handlers[(action, hand)].append(handler)

    def subscribe_both(self, action: InputAction, handler: InputHandler) -> None:
        for hand in Hand:
            self.subscribe(action, hand, handler)

    def clear_subscriptions(self) -> None:
        self._handlers.clear()

    # --- Events ---

    def on_primary_button(self, pressed: bool | float, hand: Hand) -> None:
        pressed = as_pressed(pressed)
        with self._lock:
            self._states[hand].primary_button_pressed = pressed
        self._notify(InputAction.PRIMARY_BUTTON, pressed, hand)

    def on_trigger(self, pressed: bool | float, hand: Hand) -> None:
        pressed = as_pressed(pressed)
        with self._lock:
            self._states[hand].trigger_pressed = pressed
        self._notify(InputAction.TRIGGER, pressed, hand)

    def on_grip(self, pressed: bool | float, hand: Hand) -> None:
        pressed = as_pressed(pressed)
        with self._lock:
            self._states[hand].grip_pressed = pressed
        self._notify(InputAction.GRIP, pressed, hand)

    def on_joystick_axis(self, axis, hand: Hand) -> None:
        axis = np.asarray(axis, dtype=float).reshape(2)
        with self._lock:
            self._states[hand].joystick_axis = axis.copy()
        self._notify(InputAction.JOYSTICK_AXIS, axis, hand)

    def on_joystick_pressed(self, pressed: bool | float, hand: Hand) -> None:
        pressed = as_pressed(pressed)
        with self._lock:
            self._states[hand].joystick_pressed = pressed
        self._notify(InputAction.JOYSTICK_PRESSED, pressed, hand)

    def on_joystick_touched(self, touched: bool | float, hand: Hand) -> None:
        touched = as_pressed(touched)
        with self._lock:
            self._states[hand].joystick_touched = touched
        self._notify(InputAction.JOYSTICK_TOUCHED, touched, hand)

    def on_rotation(self, rotation, hand: Hand) -> None:
        rotation = np.asarray(rotation, dtype=float).reshape(4)
        with self._lock:
            self._states[hand].rotation = rotation.copy()
        self._notify(InputAction.ROTATION, rotation, hand)

    # --- Snapshots ---

    def snapshot(self, hand: Hand) -> HandInputState:
        """Consistent copy of one hand's state."""
        with self._lock:
            return self._states[hand].copy()

    def snapshot_all(self) -> dict[Hand, HandInputState]:
        """Copies of both hands taken under a single lock acquisition."""
        with self._lock:
            return {hand: state.copy() for hand, state in self._states.items()}

    def _notify(self, action: InputAction, value, hand: Hand) -> None:
        for handler in self._handlers.get((action, hand), ()):
            handler(value, hand)
