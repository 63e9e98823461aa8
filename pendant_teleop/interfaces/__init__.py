"""Abstract interfaces for the pendant teleoperation system.

All engine- and hardware-dependent collaborators must implement these interfaces.
"""

from pendant_teleop.interfaces.input_device import (
    Hand,
    HandInputState,
    IHeldObjectRegistry,
    IJoystickTiltSource,
    IJoystickVisual,
    InputAction,
    IPointIndicator,
    ITeleportControl,
)
from pendant_teleop.interfaces.robot_output import (
    JOINT_COUNT,
    AxisSet,
    ConfigurationError,
    IDisplayFeedback,
    IIkSubsystem,
    IJointActuatorBackend,
    IJointController,
    ILinearDriveTarget,
    JogCommand,
    JointSelection,
    MovementMode,
    RotationDirection,
)

__all__ = [
    "IDisplayFeedback",
    "IHeldObjectRegistry",
    "IIkSubsystem",
    "IJointActuatorBackend",
    "IJointController",
    "IJoystickTiltSource",
    "IJoystickVisual",
    "ILinearDriveTarget",
    "IPointIndicator",
    "ITeleportControl",
    "JOINT_COUNT",
    "AxisSet",
    "ConfigurationError",
    "Hand",
    "HandInputState",
    "InputAction",
    "JogCommand",
    "JointSelection",
    "MovementMode",
    "RotationDirection",
]
