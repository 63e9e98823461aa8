"""Arm jogging from hand-held controllers."""

from pendant_teleop.modules.arm_jog.axis_selector import AxisSelector
from pendant_teleop.modules.arm_jog.gating import GatingController
from pendant_teleop.modules.arm_jog.input_aggregator import InputAggregator
from pendant_teleop.modules.arm_jog.jog_controller import JogConfig, JogController
from pendant_teleop.modules.arm_jog.mode_controller import ModeController
from pendant_teleop.modules.arm_jog.motion_mapper import MotionMapper

__all__ = [
    "AxisSelector",
    "GatingController",
    "InputAggregator",
    "JogConfig",
    "JogController",
    "ModeController",
    "MotionMapper",
]
