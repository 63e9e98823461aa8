"""Assembly of a fully simulated jog pipeline from configuration.

    config/teleop/<variant>.yaml -> JogConfig
        (+ config/hardware/<name>.yaml with the variant's hardware_overrides)
        -> actuation backend (simulated articulated arm or bone chain)
        -> simulated linear drive, IK flag, joystick, held objects, display
        -> JogController (initialized)
"""

from dataclasses import dataclass
from typing import Any

from pendant_teleop.actuators.articulation_backend import ArticulationBackend
from pendant_teleop.actuators.bone_backend import BoneRotationBackend
from pendant_teleop.interfaces.robot_output import IJointActuatorBackend
from pendant_teleop.modules.arm_jog.jog_controller import JogConfig, JogController
from pendant_teleop.simulators.logging_display import LoggingDisplay
from pendant_teleop.simulators.simulated_arm import SimulatedArticulatedArm
from pendant_teleop.simulators.simulated_joystick import (
    SimulatedHeldObjects,
    SimulatedJoystickInteractor,
)
from pendant_teleop.simulators.simulated_linear_drive import (
    SimulatedIkSubsystem,
    SimulatedLinearDrive,
)
from pendant_teleop.utils.config_loader import load_teleop_config, resolve_hardware
from pendant_teleop.utils.logger import get_logger

logger = get_logger("sim_pipeline")


@dataclass
class SimPipeline:
    config: JogConfig
    controller: JogController
    backend: IJointActuatorBackend
    linear_drive: SimulatedLinearDrive
    ik: SimulatedIkSubsystem
    display: LoggingDisplay
    joystick: SimulatedJoystickInteractor
    held_objects: SimulatedHeldObjects
    arm: SimulatedArticulatedArm | None = None


def create_sim_pipeline(
    variant: str = "arm_jog",
    overrides: dict[str, Any] | None = None,
) -> SimPipeline:
    """Build and initialize a simulated jog pipeline.

    Args:
        variant: Teleop config name ('arm_jog' or 'bone_jog').
        overrides: Optional values merged over the variant section.

    Returns:
        SimPipeline with an initialized JogController.
    """
    section = load_teleop_config(variant, overrides)
    jog_cfg = JogConfig.from_config(section)

    arm = None
    if jog_cfg.actuation == "bone":
        backend = BoneRotationBackend.from_config(section.bones)
    else:
        arm = SimulatedArticulatedArm.from_config(resolve_hardware(section))
        backend = ArticulationBackend(arm.joints)

    linear = section.get("linear", {})
    linear_drive = SimulatedLinearDrive(
        move_speed=float(linear.get("move_speed", 0.25)),
        dt=jog_cfg.dt,
        initial_position=backend.get_joint_position(jog_cfg.terminal_joint),
    )
    ik = SimulatedIkSubsystem()
    display = LoggingDisplay()
    joystick = SimulatedJoystickInteractor(
        hand=jog_cfg.manipulation_hand,
        tilt_threshold=float(section.get("tilt_threshold", 15.0)),
    )
    held_objects = SimulatedHeldObjects()

    controller = JogController(
        config=jog_cfg,
        backend=backend,
        linear_drive=linear_drive,
        ik=ik,
        display=display,
        tilt_source=joystick,
        held_objects=held_objects,
        joystick_visual=joystick,
    )
    controller.init()
    logger.info(f"Simulated pipeline ready: {variant}")

    return SimPipeline(
        config=jog_cfg,
        controller=controller,
        backend=backend,
        linear_drive=linear_drive,
        ik=ik,
        display=display,
        joystick=joystick,
        held_objects=held_objects,
        arm=arm,
    )
