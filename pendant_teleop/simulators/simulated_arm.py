"""Simulated articulated arm for testing without an engine or hardware.

Each joint is a SimulatedJointController that turns at a fixed angular
speed in its commanded direction and stops at its limits. Joint world
positions come from a serial link-offset chain.
"""

import numpy as np
from omegaconf import DictConfig, OmegaConf

from pendant_teleop.interfaces.robot_output import (
    ConfigurationError,
    IJointController,
    RotationDirection,
)
from pendant_teleop.utils.logger import get_logger
from pendant_teleop.utils.transforms import axis_angle_to_quat, chain_positions

logger = get_logger("simulated_arm")


class SimulatedJointController(IJointController):
    """One revolute joint with speed and position limits."""

    def __init__(
        self,
        arm: "SimulatedArticulatedArm",
        index: int,
        speed_deg_s: float = 30.0,
        lower_deg: float = -180.0,
        upper_deg: float = 180.0,
    ):
        self._arm = arm
        self._index = index
        self._speed = speed_deg_s
        self._lower = lower_deg
        self._upper = upper_deg
        self._angle = 0.0
        self._state = RotationDirection.NONE
        self._at_limit = False

    def set_rotation_state(self, direction: RotationDirection) -> None:
        self._state = direction

    def get_rotation_state(self) -> RotationDirection:
        return self._state

    def get_angle(self) -> float:
        return self._angle

    def set_angle(self, angle_deg: float) -> None:
        self._angle = float(np.clip(angle_deg, self._lower, self._upper))

    def get_world_position(self) -> np.ndarray:
        return self._arm.get_world_positions()[self._index]

    def advance(self, dt: float) -> None:
        if self._state is RotationDirection.NONE:
            self._at_limit = False
            return

        target = self._angle + self._speed * self._state.sign * dt
        clamped = float(np.clip(target, self._lower, self._upper))
        if clamped != target and not self._at_limit:
            logger.warning(f"Joint {self._index} reached limit at {clamped:.1f} deg")
        self._at_limit = clamped != target
        self._angle = clamped


class SimulatedArticulatedArm:
    """Serial arm of SimulatedJointControllers with forward kinematics."""

    def __init__(
        self,
        offsets: np.ndarray,
        axes: np.ndarray,
        speed_deg_s: float = 30.0,
        lower_deg: list[float] | None = None,
        upper_deg: list[float] | None = None,
        base_position: np.ndarray | None = None,
    ):
        """Initialize simulated arm.

        Args:
            offsets: (N, 3) joint position relative to its parent joint (meters).
            axes: (N, 3) joint rotation axis in the parent frame.
            speed_deg_s: Joint angular speed while commanded.
            lower_deg: Optional per-joint lower limits (default -180).
            upper_deg: Optional per-joint upper limits (default 180).
            base_position: Optional (3,) world position of the base.
        """
        self._offsets = np.asarray(offsets, dtype=float)
        self._axes = np.asarray(axes, dtype=float)
        if self._offsets.shape != self._axes.shape or self._offsets.ndim != 2:
            raise ConfigurationError(
                f"Arm offsets {self._offsets.shape} and axes {self._axes.shape} must both be (N, 3)"
            )
        n = len(self._offsets)
        lower_deg = lower_deg if lower_deg is not None else [-180.0] * n
        upper_deg = upper_deg if upper_deg is not None else [180.0] * n
        if len(lower_deg) != n or len(upper_deg) != n:
            raise ConfigurationError(f"Joint limits must list {n} values")

        self._base_position = np.zeros(3) if base_position is None else np.asarray(base_position, dtype=float)
        self._joints = [
            SimulatedJointController(self, i, speed_deg_s, lower_deg[i], upper_deg[i])
            for i in range(n)
        ]
        logger.info(f"SimulatedArticulatedArm initialized: {n} joints, {speed_deg_s} deg/s")

    @classmethod
    def from_config(cls, arm: DictConfig | dict) -> "SimulatedArticulatedArm":
        """Build from a hardware 'sim_arm' section."""
        if isinstance(arm, DictConfig):
            arm = OmegaConf.to_container(arm, resolve=True)
        joints = arm.get("joints", {})
        return cls(
            offsets=np.array(arm["links"]["offsets"], dtype=float),
            axes=np.array(arm["links"]["axes"], dtype=float),
            speed_deg_s=float(joints.get("speed_deg_s", 30.0)),
            lower_deg=joints.get("lower_deg"),
            upper_deg=joints.get("upper_deg"),
            base_position=np.array(arm.get("base_position", [0.0, 0.0, 0.0]), dtype=float),
        )

    @property
    def joints(self) -> list[SimulatedJointController]:
        return list(self._joints)

    def get_angles(self) -> np.ndarray:
        return np.array([j.get_angle() for j in self._joints])

    def get_world_positions(self) -> np.ndarray:
        """(N, 3) world positions of all joints."""
        rotations = [
            axis_angle_to_quat(axis, joint.get_angle())
            for axis, joint in zip(self._axes, self._joints)
        ]
        return chain_positions(self._offsets, rotations, self._base_position)
