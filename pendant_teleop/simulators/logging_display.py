"""Display feedback that logs jog state instead of rendering it."""

from pendant_teleop.interfaces.robot_output import AxisSet, IDisplayFeedback, MovementMode
from pendant_teleop.utils.logger import get_logger

logger = get_logger("display")


class LoggingDisplay(IDisplayFeedback):
    """Keeps the last shown values and logs changes."""

    def __init__(self):
        self.axis_set: AxisSet | None = None
        self.mode: MovementMode | None = None
        self.joint_range: str | None = None
        self.selected_joint: int | None = None

    def show_axis_set(self, active_set: AxisSet) -> None:
        self.axis_set = active_set
        logger.info(f"Axis set {active_set.name}")

    def show_mode(self, mode: MovementMode) -> None:
        self.mode = mode
        logger.info(f"Mode {mode.name.lower()}")

    def show_joint_range(self, label: str) -> None:
        self.joint_range = label
        logger.info(f"Joints [{label}]")

    def show_selected_joint(self, joint_index: int) -> None:
        if joint_index != self.selected_joint:
            logger.debug(f"Jogging joint {joint_index + 1}")
        self.selected_joint = joint_index
