"""Movement-mode switching between linear and articulated jogging.

Exactly one strategy is active at a time. A switch always stops every joint
first, so no command from the previous strategy survives the transition.
"""

from pendant_teleop.interfaces.input_device import Hand
from pendant_teleop.interfaces.robot_output import (
    IDisplayFeedback,
    IIkSubsystem,
    IJointActuatorBackend,
    ILinearDriveTarget,
    MovementMode,
)
from pendant_teleop.utils.logger import get_logger

logger = get_logger("mode_controller")


class ModeController:
    """Owns the MovementMode and performs the mode-transition side effects."""

    def __init__(
        self,
        backend: IJointActuatorBackend,
        linear_drive: ILinearDriveTarget,
        ik: IIkSubsystem,
        display: IDisplayFeedback,
        mode_switch_hand: Hand = Hand.RIGHT,
        terminal_joint: int = 5,
        initial_mode: MovementMode = MovementMode.LINEAR,
        switching_enabled: bool = True,
    ):
        self._backend = backend
        self._linear_drive = linear_drive
        self._ik = ik
        self._display = display
        self._mode_switch_hand = mode_switch_hand
        self._terminal_joint = terminal_joint
        self._switching_enabled = switching_enabled
        self._mode = initial_mode

    def apply_initial_mode(self) -> None:
        """Bring collaborators in line with the current mode without stopping joints."""
        linear = self._mode is MovementMode.LINEAR
        self._ik.set_enabled(linear)
        self._linear_drive.set_enabled(linear)
        self._display.show_mode(self._mode)

    def toggle_movement_mode(self, pressed_edge: bool, hand: Hand) -> bool:
        """Switch mode on a rising edge from the mode-switch hand.

        Returns:
            True if a transition happened.
        """
        if not self._switching_enabled or hand is not self._mode_switch_hand:
            return False
        if not pressed_edge:
            return False

        self.set_mode(self._mode.toggled())
        return True

    def set_mode(self, mode: MovementMode) -> None:
        """Transition to mode: stop all joints, swap strategies, notify display."""
        self._backend.stop_all()
        self._mode = mode

        if mode is MovementMode.LINEAR:
            # Re-seed before enabling so the follow target doesn't jump
            # back to where linear motion last left it.
            self._linear_drive.seed_position(
                self._backend.get_joint_position(self._terminal_joint)
            )
            self._ik.set_enabled(True)
            self._linear_drive.set_enabled(True)
        else:
            self._ik.set_enabled(False)
            self._linear_drive.set_enabled(False)

        logger.info(f"Movement mode -> {mode.name}")
        self._display.show_mode(mode)

    @property
    def mode(self) -> MovementMode:
        return self._mode

    @property
    def linear_active(self) -> bool:
        return self._mode is MovementMode.LINEAR

    @property
    def articulated_active(self) -> bool:
        return self._mode is MovementMode.ARTICULATED
