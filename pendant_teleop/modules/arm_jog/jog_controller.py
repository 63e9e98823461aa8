"""Arm jog controller logic.

Pure control logic with no engine dependency: owns the input aggregator,
gate, mode and axis state, and the motion mapper, and turns controller
events plus a fixed-rate tick into joint or end-effector commands.

Per tick:
    InputAggregator snapshot -> gate check -> mode dispatch
        -> MotionMapper -> IJointActuatorBackend / ILinearDriveTarget
"""

import threading
from dataclasses import dataclass
from typing import Any

from omegaconf import DictConfig, OmegaConf

from pendant_teleop.interfaces.input_device import (
    Hand,
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
    ILinearDriveTarget,
    JogCommand,
    JointSelection,
    MovementMode,
    RotationDirection,
)
from pendant_teleop.modules.arm_jog.axis_selector import AxisSelector
from pendant_teleop.modules.arm_jog.gating import GatingController
from pendant_teleop.modules.arm_jog.input_aggregator import InputAggregator
from pendant_teleop.modules.arm_jog.mode_controller import ModeController
from pendant_teleop.modules.arm_jog.motion_mapper import MotionMapper
from pendant_teleop.utils.logger import get_logger

logger = get_logger("jog_controller")

_MODE_SWITCH_INPUTS = ("grip", "none")
_ACTUATIONS = ("articulation", "bone")


@dataclass
class JogConfig:
    """Settings for one JogController.

    Attributes:
        rate_hz: Control tick rate.
        actuation: 'articulation' or 'bone' backend.
        default_mode: Movement mode at startup.
        gating_hand: Hand that must hold the control device and pressure button.
        manipulation_hand: Hand whose joystick drives motion.
        mode_switch_hand: Hand allowed to toggle the movement mode.
        axis_toggle_hand: Hand whose primary button toggles the axis set.
        mode_switch_input: 'grip' to toggle mode on grip presses, 'none' to disable.
        control_device_id: Identity of the object that must be held to open the gate.
        joystick_threshold: 2D axis magnitude needed to select a bend joint.
        threshold_per_component: Apply joystick_threshold to each axis component
            separately (bone rig) instead of to the 2D magnitude.
        terminal_joint: Joint whose position seeds the linear follow target.
        show_joint_range: Publish the textual joint-range label on axis changes.
        joint_count: Expected number of jogged joints.
    """
    rate_hz: float = 50.0
    actuation: str = "articulation"
    default_mode: MovementMode = MovementMode.LINEAR
    gating_hand: Hand = Hand.LEFT
    manipulation_hand: Hand = Hand.RIGHT
    mode_switch_hand: Hand = Hand.RIGHT
    axis_toggle_hand: Hand = Hand.RIGHT
    mode_switch_input: str = "grip"
    control_device_id: str = "Flexpendant"
    joystick_threshold: float = 0.1
    threshold_per_component: bool = False
    terminal_joint: int = JOINT_COUNT - 1
    show_joint_range: bool = False
    joint_count: int = JOINT_COUNT

    @property
    def dt(self) -> float:
        return 1.0 / self.rate_hz

    @classmethod
    def from_config(cls, section: DictConfig | dict[str, Any]) -> "JogConfig":
        """Build from a teleop config section (e.g. cfg.arm_jog).

        Raises:
            ConfigurationError: On unknown names or an unsupported joint count.
        """
        if isinstance(section, DictConfig):
            section = OmegaConf.to_container(section, resolve=True)
        hands = section.get("hands", {}) or {}

        try:
            manipulation = Hand.from_name(hands.get("manipulation", "right"))
            cfg = cls(
                rate_hz=float(section.get("rate_hz", 50.0)),
                actuation=str(section.get("actuation", "articulation")),
                default_mode=MovementMode.from_name(section.get("default_mode", "linear")),
                gating_hand=Hand.from_name(hands.get("gating", "left")),
                manipulation_hand=manipulation,
                mode_switch_hand=Hand.from_name(hands.get("mode_switch", "right")),
                axis_toggle_hand=Hand.from_name(hands.get("axis_toggle", manipulation.name)),
                mode_switch_input=str(section.get("mode_switch_input", "grip")),
                control_device_id=str(section.get("control_device_id", "Flexpendant")),
                joystick_threshold=float(section.get("joystick_threshold", 0.1)),
                threshold_per_component=bool(section.get("threshold_per_component", False)),
                terminal_joint=int(section.get("terminal_joint", JOINT_COUNT - 1)),
                show_joint_range=bool(section.get("show_joint_range", False)),
                joint_count=int(section.get("joint_count", JOINT_COUNT)),
            )
        except (ValueError, TypeError) as e:
            raise ConfigurationError(str(e)) from e

        cfg.validate()
        return cfg

    def validate(self) -> None:
        if self.actuation not in _ACTUATIONS:
            raise ConfigurationError(f"Unknown actuation {self.actuation!r}, expected one of {_ACTUATIONS}")
        if self.mode_switch_input not in _MODE_SWITCH_INPUTS:
            raise ConfigurationError(
                f"Unknown mode_switch_input {self.mode_switch_input!r}, expected one of {_MODE_SWITCH_INPUTS}"
            )
        if self.joint_count != JOINT_COUNT:
            raise ConfigurationError(f"joint_count must be {JOINT_COUNT}, got {self.joint_count}")
        if not 0 <= self.terminal_joint < JOINT_COUNT:
            raise ConfigurationError(f"terminal_joint {self.terminal_joint} out of range")
        if self.rate_hz <= 0:
            raise ConfigurationError(f"rate_hz must be positive, got {self.rate_hz}")


class JogController:
    """Jogs a six-joint arm from two hand-held controllers.

    Owns one instance of each core component and wires the edge-triggered
    input side effects at init(). The external scheduler calls
    run_control_tick() (or step(dt)) at a fixed rate.
    """

    def __init__(
        self,
        config: JogConfig,
        backend: IJointActuatorBackend,
        linear_drive: ILinearDriveTarget,
        ik: IIkSubsystem,
        display: IDisplayFeedback,
        tilt_source: IJoystickTiltSource,
        held_objects: IHeldObjectRegistry,
        joystick_visual: IJoystickVisual | None = None,
        point_indicator: IPointIndicator | None = None,
        teleport: ITeleportControl | None = None,
    ):
        """Initialize jog controller.

        Args:
            config: Jog settings.
            backend: Joint command sink (articulation or bone).
            linear_drive: End-effector follow target for linear mode.
            ik: IK subsystem enabled while in linear mode.
            display: Operator feedback display.
            tilt_source: Joystick tilt reading used for the twist joint and
                vertical linear motion.
            held_objects: Registry used by the gate to check the held device.
            joystick_visual: Optional joystick visual receiving touch/press/rotation.
            point_indicator: Optional pointer receiving trigger presses.
            teleport: Optional teleport arming driven by the gating-hand joystick.
        """
        self._config = config
        self._backend = backend
        self._linear_drive = linear_drive
        self._display = display
        self._tilt_source = tilt_source
        self._joystick_visual = joystick_visual
        self._point_indicator = point_indicator
        self._teleport = teleport

        self._aggregator = InputAggregator()
        self._gating = GatingController(
            held_objects=held_objects,
            gating_hand=config.gating_hand,
            control_device_id=config.control_device_id,
        )
        self._mode = ModeController(
            backend=backend,
            linear_drive=linear_drive,
            ik=ik,
            display=display,
            mode_switch_hand=config.mode_switch_hand,
            terminal_joint=config.terminal_joint,
            initial_mode=config.default_mode,
            switching_enabled=config.mode_switch_input != "none",
        )
        self._axis_selector = AxisSelector(
            display=display,
            toggle_hand=config.axis_toggle_hand,
            show_joint_range=config.show_joint_range,
        )
        self._mapper = MotionMapper(
            joystick_threshold=config.joystick_threshold,
            per_component=config.threshold_per_component,
        )

        self._last_selection: JointSelection | None = None
        self._initialized = False
        # Held across each tick and every gate, mode or axis-set change.
        self._lock = threading.RLock()
        self._gating.add_listener(self._on_gate_changed)

    def init(self) -> None:
        """Validate the joint set, wire input side effects and publish initial state.

        Raises:
            ConfigurationError: If the backend does not expose the full joint set.
        """
        count = self._backend.get_joint_count()
        if count != JOINT_COUNT:
            raise ConfigurationError(
                f"Actuator backend exposes {count} joints, expected {JOINT_COUNT}"
            )

        self._aggregator.clear_subscriptions()
        self._wire_inputs()

        self._mode.apply_initial_mode()
        self._axis_selector.publish()

        self._initialized = True
        logger.info(
            f"JogController initialized: actuation={self._config.actuation}, "
            f"mode={self._mode.mode.name}, gating={self._config.gating_hand.name}, "
            f"manipulation={self._config.manipulation_hand.name}"
        )

    def _wire_inputs(self) -> None:
        agg = self._aggregator
        agg.subscribe_both(InputAction.PRIMARY_BUTTON, self._on_axis_button)
        agg.subscribe_both(InputAction.TRIGGER, self.set_pressure_button)

        if self._point_indicator is not None:
            agg.subscribe_both(InputAction.TRIGGER, self._point_indicator.point)

        if self._config.mode_switch_input == "grip":
            agg.subscribe_both(InputAction.GRIP, self.toggle_movement_mode)

        if self._joystick_visual is not None:
            agg.subscribe_both(InputAction.JOYSTICK_TOUCHED, self._joystick_visual.snap_to_joystick)
            agg.subscribe_both(InputAction.JOYSTICK_PRESSED, self._joystick_visual.press_joystick)
            agg.subscribe_both(InputAction.ROTATION, self._joystick_visual.rotate_controller)

        if self._teleport is not None:
            teleport = self._teleport
            agg.subscribe(
                InputAction.JOYSTICK_AXIS,
                self._config.gating_hand,
                lambda axis, hand: teleport.switch_to_teleport(float(axis[1])),
            )

    def _on_gate_changed(self, held: bool) -> None:
        if not held:
            self._backend.stop_all()
            self._last_selection = None

    def _on_axis_button(self, pressed: bool, hand: Hand) -> None:
        with self._lock:
            self._axis_selector.on_button(pressed, hand)

    # --- Controller events ---

    def on_primary_button(self, pressed, hand: Hand) -> None:
        self._aggregator.on_primary_button(pressed, hand)

    def on_trigger(self, pressed, hand: Hand) -> None:
        self._aggregator.on_trigger(pressed, hand)

    def on_grip(self, pressed, hand: Hand) -> None:
        self._aggregator.on_grip(pressed, hand)

    def on_joystick_axis(self, axis, hand: Hand) -> None:
        self._aggregator.on_joystick_axis(axis, hand)

    def on_joystick_pressed(self, pressed, hand: Hand) -> None:
        self._aggregator.on_joystick_pressed(pressed, hand)

    def on_joystick_touched(self, touched, hand: Hand) -> None:
        self._aggregator.on_joystick_touched(touched, hand)

    def on_rotation(self, rotation, hand: Hand) -> None:
        self._aggregator.on_rotation(rotation, hand)

    def set_pressure_button(self, pressed: bool, hand: Hand) -> None:
        with self._lock:
            self._gating.set_pressure_button(pressed, hand)

    def toggle_movement_mode(self, pressed_edge: bool, hand: Hand) -> bool:
        with self._lock:
            changed = self._mode.toggle_movement_mode(pressed_edge, hand)
            if changed:
                self._last_selection = None
            return changed

    def toggle_axis_set(self) -> AxisSet:
        with self._lock:
            return self._axis_selector.toggle()

    # --- Control tick ---

    def run_control_tick(self) -> JogCommand:
        """Run one control cycle: gate check -> mode dispatch -> command output.

        All inputs (both hand snapshots and the tilt reading) are read once
        up front, before the gate and mode are consulted. The whole cycle
        holds the controller lock, so gate, mode and axis-set changes land
        either before the cycle or after its command.

        Returns:
            JogCommand describing what was sent (gated=False if nothing was).

        Raises:
            RuntimeError: If init() has not completed.
        """
        if not self._initialized:
            raise RuntimeError("JogController.run_control_tick() called before init()")

        with self._lock:
            hands = self._aggregator.snapshot_all()
            tilt_pressed = self._tilt_source.is_pressed()
            tilt_angle = self._tilt_source.tilt_angle()
            tilt_threshold = self._tilt_source.tilt_threshold()

            if not self._gating.is_open:
                return JogCommand(gated=False)

            manipulation = hands[self._config.manipulation_hand]

            if self._mode.linear_active:
                direction = self._mapper.map_linear(manipulation, tilt_pressed, tilt_angle)
                self._linear_drive.move_towards(direction)
                return JogCommand(gated=True, mode=MovementMode.LINEAR, linear_direction=direction)

            selection = self._mapper.map_articulated(
                manipulation,
                tilt_pressed,
                tilt_angle,
                tilt_threshold,
                self._axis_selector.active_set,
            )

            if selection is None:
                self._backend.stop_all()
                self._last_selection = None
                return JogCommand(gated=True, mode=MovementMode.ARTICULATED, full_stop=True)

            previous = self._last_selection
            if previous is not None and previous.joint_index != selection.joint_index:
                self._backend.set_rotation_command(previous.joint_index, RotationDirection.NONE)
            self._backend.set_rotation_command(selection.joint_index, selection.direction)
            self._display.show_selected_joint(selection.joint_index)
            self._last_selection = selection

            return JogCommand(gated=True, mode=MovementMode.ARTICULATED, selection=selection)

    def step(self, dt: float | None = None) -> JogCommand:
        """Run one control tick, then advance the actuator backend by dt."""
        command = self.run_control_tick()
        self._backend.advance(self._config.dt if dt is None else dt)
        return command

    # --- State ---

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    @property
    def mode(self) -> MovementMode:
        return self._mode.mode

    @property
    def active_axis_set(self) -> AxisSet:
        return self._axis_selector.active_set

    @property
    def gate_open(self) -> bool:
        return self._gating.is_open

    @property
    def config(self) -> JogConfig:
        return self._config

    @property
    def aggregator(self) -> InputAggregator:
        return self._aggregator

    @property
    def backend(self) -> IJointActuatorBackend:
        return self._backend
