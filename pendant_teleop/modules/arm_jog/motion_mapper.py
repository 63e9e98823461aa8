"""Joystick-to-motion mapping.

Pure mapping logic with no side effects: given the manipulation hand's
input snapshot, the joystick tilt reading and the active axis set, compute
either a linear direction for the end effector or a single joint selection.

Joint layout per axis set (twist is driven by joystick tilt, bends by the
2D axis):

    set A: horizontal bend -> 0, vertical bend -> 1, twist -> 2
    set B: horizontal bend -> 3, vertical bend -> 4, twist -> 5
"""

from dataclasses import dataclass

import numpy as np

from pendant_teleop.interfaces.input_device import HandInputState
from pendant_teleop.interfaces.robot_output import (
    JOINT_COUNT,
    AxisSet,
    JointSelection,
    RotationDirection,
)


@dataclass(frozen=True)
class AxisSetJoints:
    horizontal: int
    vertical: int
    twist: int


AXIS_SET_JOINTS = {
    AxisSet.A: AxisSetJoints(horizontal=0, vertical=1, twist=2),
    AxisSet.B: AxisSetJoints(horizontal=3, vertical=4, twist=5),
}

# Vertical bends whose sign is flipped relative to every other joint.
# Matches the physical rig; unconfirmed whether intentional, keep as is.
INVERTED_VERTICAL_JOINTS = frozenset({1})

_ALL_JOINTS = sorted(
    j for joints in AXIS_SET_JOINTS.values()
    for j in (joints.horizontal, joints.vertical, joints.twist)
)
assert _ALL_JOINTS == list(range(JOINT_COUNT)), "axis sets must cover each joint exactly once"

# Linear direction is (x, y, z) with y vertical.
_TILT_MIN_MAGNITUDE = 0.5
_TILT_MAX_MAGNITUDE = 1.0


class MotionMapper:
    """Maps controller input to linear directions or joint selections."""

    def __init__(self, joystick_threshold: float = 0.1, per_component: bool = False):
        """Initialize the mapper.

        Args:
            joystick_threshold: Minimum 2D axis deflection that selects a bend
                joint in articulated mode.
            per_component: Compare each axis component against the threshold
                on its own instead of the 2D magnitude.
        """
        self._joystick_threshold = joystick_threshold
        self._per_component = per_component

    @property
    def joystick_threshold(self) -> float:
        return self._joystick_threshold

    def map_linear(
        self,
        manipulation: HandInputState,
        tilt_pressed: bool,
        tilt_angle: float,
    ) -> np.ndarray:
        """Direction for the linear follow target.

        A pressed joystick drives the vertical component from its tilt,
        clamped to [0.5, 1.0] in magnitude. Otherwise the 2D axis drives the
        horizontal plane: x <- axis.y, z <- -axis.x.

        Returns:
            (3,) direction, possibly all zeros.
        """
        direction = np.zeros(3)

        if tilt_pressed:
            sign = 1.0 if tilt_angle > 0 else -1.0
            magnitude = np.clip(abs(tilt_angle / 180.0), _TILT_MIN_MAGNITUDE, _TILT_MAX_MAGNITUDE)
            direction[1] = magnitude * sign
        else:
            x, y = manipulation.joystick_axis
            direction[0] = y
            direction[2] = -x

        return direction

    def map_articulated(
        self,
        manipulation: HandInputState,
        tilt_pressed: bool,
        tilt_angle: float,
        tilt_threshold: float,
        axis_set: AxisSet,
    ) -> JointSelection | None:
        """Select one joint and a rotation direction, or None for a full stop.

        While the joystick is pressed only the tilt is considered; a tilt
        within the threshold selects nothing rather than falling back to the
        2D axis.
        """
        joints = AXIS_SET_JOINTS[axis_set]

        if tilt_pressed:
            if abs(tilt_angle) > tilt_threshold:
                return JointSelection(joints.twist, _signed(tilt_angle > 0))
            return None

        x, y = manipulation.joystick_axis
        if not self._deflected(x, y):
            return None

        if abs(x) > abs(y):
            return JointSelection(joints.horizontal, _signed(not x > 0))

        if joints.vertical in INVERTED_VERTICAL_JOINTS:
            return JointSelection(joints.vertical, _signed(not y > 0))
        return JointSelection(joints.vertical, _signed(y > 0))

    def _deflected(self, x: float, y: float) -> bool:
        if self._per_component:
            return max(abs(x), abs(y)) > self._joystick_threshold
        return np.hypot(x, y) > self._joystick_threshold


def _signed(positive: bool) -> RotationDirection:
    return RotationDirection.POSITIVE if positive else RotationDirection.NEGATIVE
