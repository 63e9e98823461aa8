"""Output-side interfaces for the jogged manipulator.

Defines:
- RotationDirection / MovementMode / AxisSet: jog state enums.
- JointSelection / JogCommand: per-tick mapping results.
- IJointController: one externally actuated joint (rotation-state driven).
- IJointActuatorBackend: joint command sink (articulation or bone backend).
- ILinearDriveTarget / IIkSubsystem: end-effector follow-target pipeline.
- IDisplayFeedback: operator-facing mode / axis display.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum, auto

import numpy as np


# Number of jogged joints. Both axis sets together cover exactly this many.
JOINT_COUNT = 6


class ConfigurationError(Exception):
    """Raised when the jog pipeline is configured incompletely or inconsistently."""


class RotationDirection(Enum):
    """Commanded rotation of a single joint."""
    NONE = 0
    POSITIVE = 1
    NEGATIVE = -1

    @property
    def sign(self) -> int:
        return self.value


class MovementMode(Enum):
    """Active movement strategy."""
    LINEAR = auto()
    ARTICULATED = auto()

    @classmethod
    def from_name(cls, name: str) -> "MovementMode":
        try:
            return cls[str(name).strip().upper()]
        except KeyError:
            raise ValueError(
                f"Unknown movement mode: {name!r} (expected 'linear' or 'articulated')"
            ) from None

    def toggled(self) -> "MovementMode":
        return MovementMode.ARTICULATED if self is MovementMode.LINEAR else MovementMode.LINEAR


class AxisSet(Enum):
    """Which three joints the joystick gestures currently address."""
    A = auto()
    B = auto()

    def toggled(self) -> "AxisSet":
        return AxisSet.B if self is AxisSet.A else AxisSet.A


@dataclass
class JointSelection:
    """A single joint chosen for rotation this tick.

    Attributes:
        joint_index: Index into the jogged joint set, in [0, JOINT_COUNT).
        direction: Commanded rotation (never NONE for a selection).
    """
    joint_index: int
    direction: RotationDirection


@dataclass
class JogCommand:
    """What one control tick produced.

    Attributes:
        gated: Whether the safety gate was open for this tick.
        mode: Movement mode the tick was dispatched to.
        linear_direction: (3,) direction sent to the linear drive (linear mode).
        selection: Joint selected for rotation (articulated mode), or None.
        full_stop: True when every joint was commanded to stop this tick.
    """
    gated: bool = False
    mode: MovementMode | None = None
    linear_direction: np.ndarray | None = None
    selection: JointSelection | None = None
    full_stop: bool = False


class IJointController(ABC):
    """Abstract interface for one externally actuated joint.

    Implementations: SimulatedJointController, engine joint drives.
    The controller applies its own angular speed on its own fixed tick.
    """

    @abstractmethod
    def set_rotation_state(self, direction: RotationDirection) -> None:
        """Set the rotation the joint applies on each of its ticks."""
        ...

    @abstractmethod
    def get_rotation_state(self) -> RotationDirection:
        ...

    @abstractmethod
    def get_angle(self) -> float:
        """Current joint angle in degrees."""
        ...

    @abstractmethod
    def get_world_position(self) -> np.ndarray:
        """(3,) world position of the joint."""
        ...

    @abstractmethod
    def advance(self, dt: float) -> None:
        """Integrate the current rotation state over dt seconds."""
        ...


class IJointActuatorBackend(ABC):
    """Abstract sink for per-joint rotation commands.

    Implementations: ArticulationBackend (joint-controller mediated),
    BoneRotationBackend (direct transform rotation).
    """

    @abstractmethod
    def set_rotation_command(self, joint_index: int, direction: RotationDirection) -> None:
        """Command a rotation for one joint."""
        ...

    @abstractmethod
    def stop_all(self) -> None:
        """Command RotationDirection.NONE on every joint."""
        ...

    @abstractmethod
    def get_joint_count(self) -> int:
        ...

    @abstractmethod
    def get_joint_position(self, joint_index: int) -> np.ndarray:
        """(3,) world position of a joint."""
        ...

    @abstractmethod
    def get_joint_angles(self) -> np.ndarray:
        """(N,) current joint angles in degrees."""
        ...

    @abstractmethod
    def advance(self, dt: float) -> None:
        """Apply the active rotation commands for dt seconds."""
        ...


class ILinearDriveTarget(ABC):
    """End-effector follow target moved in linear mode."""

    @abstractmethod
    def move_towards(self, direction: np.ndarray) -> None:
        """Move the follow target along a (3,) direction. Zero means hold."""
        ...

    @abstractmethod
    def seed_position(self, position: np.ndarray) -> None:
        """Place the follow target at a world position without moving the arm."""
        ...

    @abstractmethod
    def set_enabled(self, enabled: bool) -> None:
        ...


class IIkSubsystem(ABC):
    """Inverse-kinematics solver that tracks the linear follow target."""

    @abstractmethod
    def set_enabled(self, enabled: bool) -> None:
        ...


class IDisplayFeedback(ABC):
    """Operator-facing display of the jog state."""

    @abstractmethod
    def show_axis_set(self, active_set: AxisSet) -> None:
        ...

    @abstractmethod
    def show_mode(self, mode: MovementMode) -> None:
        ...

    @abstractmethod
    def show_joint_range(self, label: str) -> None:
        """Textual label naming the joints the active axis set addresses."""
        ...

    @abstractmethod
    def show_selected_joint(self, joint_index: int) -> None:
        ...
