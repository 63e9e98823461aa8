"""Simulated end-effector follow target and IK enable flag.

The follow target moves by direction * move_speed * dt on each
move_towards() while enabled. Solving joint angles for the target is left
to the IK subsystem, which here only records whether it is enabled.
"""

import numpy as np

from pendant_teleop.interfaces.robot_output import IIkSubsystem, ILinearDriveTarget
from pendant_teleop.utils.logger import get_logger

logger = get_logger("simulated_linear_drive")


class SimulatedLinearDrive(ILinearDriveTarget):
    """Follow target integrated at a fixed control period."""

    def __init__(
        self,
        move_speed: float = 0.25,
        dt: float = 0.02,
        initial_position: np.ndarray | None = None,
    ):
        """Initialize simulated linear drive.

        Args:
            move_speed: Target speed in m/s for a unit direction.
            dt: Control period the drive is called at (seconds).
            initial_position: Optional (3,) starting target position.
        """
        self._move_speed = move_speed
        self._dt = dt
        self._position = np.zeros(3) if initial_position is None else np.asarray(initial_position, dtype=float).copy()
        self._enabled = False
        self._last_direction = np.zeros(3)

    def move_towards(self, direction: np.ndarray) -> None:
        self._last_direction = np.asarray(direction, dtype=float).copy()
        if not self._enabled or not np.any(self._last_direction):
            return
        self._position = self._position + self._last_direction * self._move_speed * self._dt

    def seed_position(self, position: np.ndarray) -> None:
        self._position = np.asarray(position, dtype=float).copy()
        logger.debug(f"Follow target seeded at {np.round(self._position, 3)}")

    def set_enabled(self, enabled: bool) -> None:
        self._enabled = bool(enabled)

    @property
    def position(self) -> np.ndarray:
        return self._position.copy()

    @property
    def last_direction(self) -> np.ndarray:
        return self._last_direction.copy()

    @property
    def is_enabled(self) -> bool:
        return self._enabled


class SimulatedIkSubsystem(IIkSubsystem):
    """Records the IK enable flag."""

    def __init__(self):
        self._enabled = False

    def set_enabled(self, enabled: bool) -> None:
        if enabled != self._enabled:
            logger.info(f"IK {'enabled' if enabled else 'disabled'}")
        self._enabled = bool(enabled)

    @property
    def is_enabled(self) -> bool:
        return self._enabled
