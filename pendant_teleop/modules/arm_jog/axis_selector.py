"""Axis-set selection: which three joints the joystick gestures address."""

from pendant_teleop.interfaces.input_device import Hand
from pendant_teleop.interfaces.robot_output import AxisSet, IDisplayFeedback
from pendant_teleop.utils.logger import get_logger

logger = get_logger("axis_selector")

JOINT_RANGE_LABELS = {
    AxisSet.A: "1  2  3",
    AxisSet.B: "4  5  6",
}


class AxisSelector:
    """Owns the active AxisSet and toggles it on primary-button presses."""

    def __init__(
        self,
        display: IDisplayFeedback,
        toggle_hand: Hand = Hand.RIGHT,
        show_joint_range: bool = False,
        initial: AxisSet = AxisSet.A,
    ):
        self._display = display
        self._toggle_hand = toggle_hand
        self._show_joint_range = show_joint_range
        self._active_set = initial

    def publish(self) -> None:
        """Push the current set to the display."""
        self._display.show_axis_set(self._active_set)
        if self._show_joint_range:
            self._display.show_joint_range(JOINT_RANGE_LABELS[self._active_set])

    def toggle(self) -> AxisSet:
        self._active_set = self._active_set.toggled()
        logger.info(f"Axis set -> {self._active_set.name}")
        self.publish()
        return self._active_set

    def on_button(self, pressed: bool, hand: Hand) -> None:
        """Primary-button handler: toggles on a press from the toggle hand."""
        if hand is not self._toggle_hand or not pressed:
            return
        self.toggle()

    @property
    def active_set(self) -> AxisSet:
        return self._active_set
