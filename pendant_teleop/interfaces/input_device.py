"""Input-side interfaces for hand-held motion controllers.

Defines:
- Hand / InputAction: identity of a controller and of an input signal.
- HandInputState: per-hand snapshot of the latest controller values.
- Abstract collaborators the input layer reads from or forwards to:
  IJoystickTiltSource, IHeldObjectRegistry, IJoystickVisual,
  IPointIndicator, ITeleportControl.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum, auto

import numpy as np


class Hand(Enum):
    """Controller hand designation."""
    LEFT = auto()
    RIGHT = auto()

    @classmethod
    def from_name(cls, name: str) -> "Hand":
        """Parse 'left' / 'right' (case-insensitive)."""
        try:
            return cls[str(name).strip().upper()]
        except KeyError:
            raise ValueError(f"Unknown hand: {name!r} (expected 'left' or 'right')") from None

    @property
    def other(self) -> "Hand":
        return Hand.RIGHT if self is Hand.LEFT else Hand.LEFT


class InputAction(Enum):
    """Controller input signals routed through the aggregator."""
    PRIMARY_BUTTON = auto()
    TRIGGER = auto()
    GRIP = auto()
    JOYSTICK_AXIS = auto()
    JOYSTICK_PRESSED = auto()
    JOYSTICK_TOUCHED = auto()
    ROTATION = auto()


@dataclass
class HandInputState:
    """Latest controller values for one hand.

    Fields are only ever overwritten by a new event of the same kind;
    nothing resets them automatically.

    Attributes:
        trigger_pressed: Trigger fully pressed.
        grip_pressed: Grip (select) fully pressed.
        primary_button_pressed: Primary face button pressed.
        joystick_axis: (2,) joystick x, y in [-1, 1].
        joystick_pressed: Joystick clicked in.
        joystick_touched: Thumb resting on the joystick.
        rotation: (4,) controller orientation quaternion (x, y, z, w).
    """
    trigger_pressed: bool = False
    grip_pressed: bool = False
    primary_button_pressed: bool = False
    joystick_axis: np.ndarray = field(default_factory=lambda: np.zeros(2))
    joystick_pressed: bool = False
    joystick_touched: bool = False
    rotation: np.ndarray = field(default_factory=lambda: np.array([0.0, 0.0, 0.0, 1.0]))

    def copy(self) -> "HandInputState":
        """Deep copy, safe to hand to another execution context."""
        return HandInputState(
            trigger_pressed=self.trigger_pressed,
            grip_pressed=self.grip_pressed,
            primary_button_pressed=self.primary_button_pressed,
            joystick_axis=self.joystick_axis.copy(),
            joystick_pressed=self.joystick_pressed,
            joystick_touched=self.joystick_touched,
            rotation=self.rotation.copy(),
        )


class IJoystickTiltSource(ABC):
    """Source of the one-dimensional joystick tilt input.

    Implementations: SimulatedJoystickInteractor, engine-side interactors.
    """

    @abstractmethod
    def tilt_angle(self) -> float:
        """Signed tilt of the pressed joystick in degrees."""
        ...

    @abstractmethod
    def is_pressed(self) -> bool:
        """Whether the joystick is currently clicked in."""
        ...

    @abstractmethod
    def tilt_threshold(self) -> float:
        """Minimum |tilt_angle| (degrees) that counts as a deliberate twist."""
        ...


class IHeldObjectRegistry(ABC):
    """Lookup of the object currently held in each hand."""

    @abstractmethod
    def held_object(self, hand: Hand) -> str | None:
        """Identity of the object held in hand, or None if empty-handed."""
        ...


class IJoystickVisual(ABC):
    """Visual joystick feedback driven by controller events."""

    @abstractmethod
    def snap_to_joystick(self, touched: bool, hand: Hand) -> None:
        ...

    @abstractmethod
    def press_joystick(self, pressed: bool, hand: Hand) -> None:
        ...

    @abstractmethod
    def rotate_controller(self, rotation: np.ndarray, hand: Hand) -> None:
        ...


class IPointIndicator(ABC):
    """Pointing ray shown while the trigger is held."""

    @abstractmethod
    def point(self, pressed: bool, hand: Hand) -> None:
        ...


class ITeleportControl(ABC):
    """Teleport arming driven by the vertical joystick axis."""

    @abstractmethod
    def switch_to_teleport(self, vertical: float) -> None:
        ...
