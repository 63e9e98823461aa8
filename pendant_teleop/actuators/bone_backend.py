"""Direct bone-rotation actuation.

No intermediate joint controller: every advance() rotates each commanded
bone about its local axis by rotate_speed * sign * dt.
"""

import numpy as np
from omegaconf import DictConfig, OmegaConf

from pendant_teleop.interfaces.robot_output import (
    ConfigurationError,
    IJointActuatorBackend,
    RotationDirection,
)
from pendant_teleop.utils.logger import get_logger
from pendant_teleop.utils.transforms import IDENTITY_XYZW, chain_positions, rotate_local

logger = get_logger("bone_backend")


class BoneRotationBackend(IJointActuatorBackend):
    """Rotates a chain of bone transforms directly."""

    def __init__(
        self,
        axes: np.ndarray,
        offsets: np.ndarray,
        rotate_speed: float = 45.0,
        base_position: np.ndarray | None = None,
    ):
        """Initialize bone backend.

        Args:
            axes: (N, 3) local rotation axis per bone.
            offsets: (N, 3) bone position relative to its parent bone.
            rotate_speed: Angular speed in degrees per second.
            base_position: Optional (3,) world position of the chain root.
        """
        axes = np.asarray(axes, dtype=float)
        offsets = np.asarray(offsets, dtype=float)
        if axes.ndim != 2 or axes.shape[1] != 3 or len(axes) == 0:
            raise ConfigurationError(f"Bone axes must be (N, 3), got shape {axes.shape}")
        if offsets.shape != axes.shape:
            raise ConfigurationError(
                f"Bone offsets shape {offsets.shape} does not match axes shape {axes.shape}"
            )
        if np.any(np.linalg.norm(axes, axis=1) == 0.0):
            raise ConfigurationError("Bone axes must be non-zero")

        self._axes = axes
        self._offsets = offsets
        self._rotate_speed = rotate_speed
        self._base_position = np.zeros(3) if base_position is None else np.asarray(base_position, dtype=float)

        n = len(axes)
        self._rotations = [IDENTITY_XYZW.copy() for _ in range(n)]
        self._angles = np.zeros(n)
        self._commands = [RotationDirection.NONE] * n
        logger.info(f"BoneRotationBackend initialized: {n} bones, {rotate_speed} deg/s")

    @classmethod
    def from_config(cls, bones: DictConfig | dict) -> "BoneRotationBackend":
        """Build from a 'bones' config section (axes, offsets, rotate_speed_deg_s)."""
        if isinstance(bones, DictConfig):
            bones = OmegaConf.to_container(bones, resolve=True)
        return cls(
            axes=np.array(bones["axes"], dtype=float),
            offsets=np.array(bones["offsets"], dtype=float),
            rotate_speed=float(bones.get("rotate_speed_deg_s", 45.0)),
            base_position=np.array(bones.get("base_position", [0.0, 0.0, 0.0]), dtype=float),
        )

    def set_rotation_command(self, joint_index: int, direction: RotationDirection) -> None:
        self._commands[joint_index] = direction

    def stop_all(self) -> None:
        self._commands = [RotationDirection.NONE] * len(self._commands)

    def get_joint_count(self) -> int:
        return len(self._axes)

    def get_joint_position(self, joint_index: int) -> np.ndarray:
        return chain_positions(self._offsets, self._rotations, self._base_position)[joint_index]

    def get_joint_angles(self) -> np.ndarray:
        return self._angles.copy()

    def get_bone_rotation(self, joint_index: int) -> np.ndarray:
        """(4,) local xyzw rotation of a bone."""
        return self._rotations[joint_index].copy()

    def get_rotation_states(self) -> list[RotationDirection]:
        return list(self._commands)

    def advance(self, dt: float) -> None:
        for i, direction in enumerate(self._commands):
            if direction is RotationDirection.NONE:
                continue
            angle = self._rotate_speed * direction.sign * dt
            self._rotations[i] = rotate_local(self._rotations[i], self._axes[i], angle)
            self._angles[i] += angle
