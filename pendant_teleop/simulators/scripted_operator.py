"""Scripted operator for running the jog loop without controllers.

Replays a fixed timeline of controller events against a JogController:
pick up the pendant, hold the pressure button, jog linearly, switch to
articulated mode, bend and twist joints in both axis sets, then release.
"""

from dataclasses import dataclass
from typing import Callable

import numpy as np

from pendant_teleop.interfaces.input_device import Hand
from pendant_teleop.modules.arm_jog.jog_controller import JogController
from pendant_teleop.simulators.simulated_joystick import SimulatedHeldObjects
from pendant_teleop.utils.logger import get_logger
from pendant_teleop.utils.transforms import axis_angle_to_quat

logger = get_logger("scripted_operator")


@dataclass
class TimedEvent:
    time: float
    description: str
    action: Callable[[], None]


class ScriptedOperator:
    """Drives a JogController from a deterministic event timeline."""

    def __init__(
        self,
        controller: JogController,
        held_objects: SimulatedHeldObjects,
        control_device_id: str = "Flexpendant",
    ):
        self._controller = controller
        self._held_objects = held_objects
        self._device_id = control_device_id
        self._events = self._build_timeline()
        self._next = 0

    @property
    def duration(self) -> float:
        return self._events[-1].time

    @property
    def finished(self) -> bool:
        return self._next >= len(self._events)

    def update(self, t: float) -> None:
        """Fire every event scheduled at or before t."""
        while self._next < len(self._events) and self._events[self._next].time <= t:
            event = self._events[self._next]
            logger.info(f"t={t:5.2f}s  {event.description}")
            event.action()
            self._next += 1

    def _build_timeline(self) -> list[TimedEvent]:
        c = self._controller
        cfg = c.config
        gate, manip = cfg.gating_hand, cfg.manipulation_hand
        twisted = axis_angle_to_quat(np.array([0.0, 0.0, 1.0]), 40.0)
        identity = np.array([0.0, 0.0, 0.0, 1.0])

        def press(fn, hand):
            return lambda: (fn(True, hand), fn(False, hand))

        events = [
            TimedEvent(0.0, "grab pendant", lambda: self._held_objects.grab(gate, self._device_id)),
            TimedEvent(0.1, "hold pressure button", lambda: c.on_trigger(True, gate)),
            TimedEvent(0.2, "push joystick forward", lambda: c.on_joystick_axis((0.0, 0.8), manip)),
            TimedEvent(1.0, "push joystick left", lambda: c.on_joystick_axis((-0.8, 0.0), manip)),
            TimedEvent(1.8, "center joystick", lambda: c.on_joystick_axis((0.0, 0.0), manip)),
        ]
        if cfg.mode_switch_input == "grip":
            events.append(TimedEvent(2.0, "switch movement mode", press(c.on_grip, cfg.mode_switch_hand)))
        events += [
            TimedEvent(2.2, "bend horizontally", lambda: c.on_joystick_axis((0.8, 0.1), manip)),
            TimedEvent(3.0, "bend vertically", lambda: c.on_joystick_axis((0.1, 0.6), manip)),
            TimedEvent(3.8, "center joystick", lambda: c.on_joystick_axis((0.0, 0.0), manip)),
            TimedEvent(4.0, "toggle axis set", press(c.on_primary_button, cfg.axis_toggle_hand)),
            TimedEvent(4.2, "bend vertically", lambda: c.on_joystick_axis((0.0, -0.7), manip)),
            TimedEvent(5.0, "center joystick", lambda: c.on_joystick_axis((0.0, 0.0), manip)),
            TimedEvent(5.2, "press joystick", lambda: c.on_joystick_pressed(True, manip)),
            TimedEvent(5.3, "twist controller", lambda: c.on_rotation(twisted, manip)),
            TimedEvent(6.3, "release joystick", lambda: (
                c.on_rotation(identity, manip), c.on_joystick_pressed(False, manip))),
            TimedEvent(6.5, "release pressure button", lambda: c.on_trigger(False, gate)),
        ]
        return events
