"""Simulated joystick interactor and held-object registry.

SimulatedJoystickInteractor listens to one controller's joystick and
rotation events. While the joystick is pressed, the tilt angle is the twist
of the controller about its forward axis relative to the orientation it
had when the joystick was pressed.
"""

import numpy as np

from pendant_teleop.interfaces.input_device import (
    Hand,
    IHeldObjectRegistry,
    IJoystickTiltSource,
    IJoystickVisual,
)
from pendant_teleop.utils.logger import get_logger
from pendant_teleop.utils.transforms import IDENTITY_XYZW, tilt_angle_deg

logger = get_logger("simulated_joystick")


class SimulatedJoystickInteractor(IJoystickTiltSource, IJoystickVisual):
    """Tilt source and joystick visual for a single hand."""

    def __init__(
        self,
        hand: Hand = Hand.RIGHT,
        tilt_threshold: float = 15.0,
        tilt_axis: np.ndarray | None = None,
    ):
        """Initialize simulated joystick interactor.

        Args:
            hand: Controller whose events this interactor follows.
            tilt_threshold: |tilt| in degrees required to twist a joint.
            tilt_axis: (3,) twist axis in the controller frame (default +Z).
        """
        self._hand = hand
        self._threshold = tilt_threshold
        self._tilt_axis = np.array([0.0, 0.0, 1.0]) if tilt_axis is None else np.asarray(tilt_axis, dtype=float)
        self._pressed = False
        self._touched = False
        self._rotation = IDENTITY_XYZW.copy()
        self._reference = IDENTITY_XYZW.copy()

    # --- IJoystickVisual ---

    def snap_to_joystick(self, touched: bool, hand: Hand) -> None:
        if hand is self._hand:
            self._touched = touched

    def press_joystick(self, pressed: bool, hand: Hand) -> None:
        if hand is not self._hand:
            return
        if pressed and not self._pressed:
            self._reference = self._rotation.copy()
        self._pressed = pressed

    def rotate_controller(self, rotation: np.ndarray, hand: Hand) -> None:
        if hand is self._hand:
            self._rotation = np.asarray(rotation, dtype=float).copy()

    # --- IJoystickTiltSource ---

    def tilt_angle(self) -> float:
        if not self._pressed:
            return 0.0
        return tilt_angle_deg(self._reference, self._rotation, self._tilt_axis)

    def is_pressed(self) -> bool:
        return self._pressed

    def tilt_threshold(self) -> float:
        return self._threshold

    @property
    def is_touched(self) -> bool:
        return self._touched


class SimulatedHeldObjects(IHeldObjectRegistry):
    """Records what each hand is holding."""

    def __init__(self):
        self._held: dict[Hand, str | None] = {Hand.LEFT: None, Hand.RIGHT: None}

    def grab(self, hand: Hand, object_id: str) -> None:
        self._held[hand] = object_id
        logger.info(f"{hand.name} hand grabbed {object_id!r}")

    def release(self, hand: Hand) -> None:
        self._held[hand] = None

    def held_object(self, hand: Hand) -> str | None:
        return self._held[hand]
