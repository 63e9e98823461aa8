"""Joint-controller mediated actuation.

Each jogged joint is driven by its own IJointController, which applies a
configured angular speed in the commanded direction on its own tick. This
backend only forwards rotation states.
"""

import numpy as np

from pendant_teleop.interfaces.robot_output import (
    ConfigurationError,
    IJointActuatorBackend,
    IJointController,
    RotationDirection,
)
from pendant_teleop.utils.logger import get_logger

logger = get_logger("articulation_backend")


class ArticulationBackend(IJointActuatorBackend):
    """Forwards rotation commands to per-joint controllers."""

    def __init__(self, joint_controllers: list[IJointController]):
        if not joint_controllers:
            raise ConfigurationError("ArticulationBackend needs at least one joint controller")
        missing = [i for i, c in enumerate(joint_controllers) if c is None]
        if missing:
            raise ConfigurationError(f"Joint controllers not configured for joints {missing}")
        self._controllers = list(joint_controllers)
        logger.info(f"ArticulationBackend initialized: {len(self._controllers)} joints")

    def set_rotation_command(self, joint_index: int, direction: RotationDirection) -> None:
        self._controllers[joint_index].set_rotation_state(direction)

    def stop_all(self) -> None:
        for controller in self._controllers:
            controller.set_rotation_state(RotationDirection.NONE)

    def get_joint_count(self) -> int:
        return len(self._controllers)

    def get_joint_position(self, joint_index: int) -> np.ndarray:
        return self._controllers[joint_index].get_world_position()

    def get_joint_angles(self) -> np.ndarray:
        return np.array([c.get_angle() for c in self._controllers])

    def get_rotation_states(self) -> list[RotationDirection]:
        return [c.get_rotation_state() for c in self._controllers]

    def advance(self, dt: float) -> None:
        for controller in self._controllers:
            controller.advance(dt)
