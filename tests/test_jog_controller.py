"""Unit tests for the JogController (no engine dependency)."""

import threading

import numpy as np
import pytest

from pendant_teleop.interfaces.input_device import (
    Hand,
    IHeldObjectRegistry,
    IJoystickTiltSource,
    IJoystickVisual,
    IPointIndicator,
    ITeleportControl,
)
from pendant_teleop.interfaces.robot_output import (
    AxisSet,
    ConfigurationError,
    IDisplayFeedback,
    IIkSubsystem,
    IJointActuatorBackend,
    ILinearDriveTarget,
    MovementMode,
    RotationDirection,
)
from pendant_teleop.modules.arm_jog.jog_controller import JogConfig, JogController

END_EFFECTOR = np.array([0.1, 0.9, 0.2])


class MockBackend(IJointActuatorBackend):
    """Records every actuator call in a shared log."""

    def __init__(self, log: list, n_joints: int = 6):
        self.log = log
        self.n_joints = n_joints
        self.states = [RotationDirection.NONE] * n_joints
        self.commands: list[tuple[int, RotationDirection]] = []
        self.stop_count = 0
        self.advanced: list[float] = []

    def set_rotation_command(self, joint_index, direction):
        self.log.append(("command", joint_index, direction))
        self.commands.append((joint_index, direction))
        self.states[joint_index] = direction

    def stop_all(self):
        self.log.append(("stop_all",))
        self.stop_count += 1
        self.states = [RotationDirection.NONE] * self.n_joints

    def get_joint_count(self):
        return self.n_joints

    def get_joint_position(self, joint_index):
        return END_EFFECTOR.copy() if joint_index == 5 else np.zeros(3)

    def get_joint_angles(self):
        return np.zeros(self.n_joints)

    def advance(self, dt):
        self.advanced.append(dt)

    @property
    def call_count(self):
        return len(self.commands) + self.stop_count


class MockLinearDrive(ILinearDriveTarget):
    def __init__(self, log: list):
        self.log = log
        self.directions: list[np.ndarray] = []
        self.seeded: np.ndarray | None = None
        self.enabled = False

    def move_towards(self, direction):
        self.directions.append(np.asarray(direction).copy())

    def seed_position(self, position):
        self.log.append(("seed", tuple(position)))
        self.seeded = np.asarray(position).copy()

    def set_enabled(self, enabled):
        self.log.append(("linear_enabled", enabled))
        self.enabled = enabled


class MockIk(IIkSubsystem):
    def __init__(self, log: list):
        self.log = log
        self.enabled = False

    def set_enabled(self, enabled):
        self.log.append(("ik_enabled", enabled))
        self.enabled = enabled


class MockDisplay(IDisplayFeedback):
    def __init__(self):
        self.axis_sets: list[AxisSet] = []
        self.modes: list[MovementMode] = []
        self.ranges: list[str] = []
        self.selected: list[int] = []

    def show_axis_set(self, active_set):
        self.axis_sets.append(active_set)

    def show_mode(self, mode):
        self.modes.append(mode)

    def show_joint_range(self, label):
        self.ranges.append(label)

    def show_selected_joint(self, joint_index):
        self.selected.append(joint_index)


class MockTilt(IJoystickTiltSource):
    def __init__(self):
        self.pressed = False
        self.angle = 0.0
        self.threshold = 15.0
        # Called once, from inside the next threshold read.
        self.on_threshold_read = None

    def tilt_angle(self):
        return self.angle

    def is_pressed(self):
        return self.pressed

    def tilt_threshold(self):
        if self.on_threshold_read is not None:
            callback, self.on_threshold_read = self.on_threshold_read, None
            callback()
        return self.threshold


class MockHeld(IHeldObjectRegistry):
    def __init__(self):
        self.held = {Hand.LEFT: None, Hand.RIGHT: None}

    def held_object(self, hand):
        return self.held[hand]


class MockVisual(IJoystickVisual):
    def __init__(self):
        self.calls = []

    def snap_to_joystick(self, touched, hand):
        self.calls.append(("touch", touched, hand))

    def press_joystick(self, pressed, hand):
        self.calls.append(("press", pressed, hand))

    def rotate_controller(self, rotation, hand):
        self.calls.append(("rotate", tuple(rotation), hand))


class MockPointer(IPointIndicator):
    def __init__(self):
        self.calls = []

    def point(self, pressed, hand):
        self.calls.append((pressed, hand))


class MockTeleport(ITeleportControl):
    def __init__(self):
        self.values = []

    def switch_to_teleport(self, vertical):
        self.values.append(vertical)


class Rig:
    """Controller plus every mock collaborator."""

    def __init__(self, config: JogConfig | None = None, n_joints: int = 6, init: bool = True):
        self.log: list = []
        self.backend = MockBackend(self.log, n_joints)
        self.linear = MockLinearDrive(self.log)
        self.ik = MockIk(self.log)
        self.display = MockDisplay()
        self.tilt = MockTilt()
        self.held = MockHeld()
        self.visual = MockVisual()
        self.pointer = MockPointer()
        self.teleport = MockTeleport()
        self.controller = JogController(
            config=config or JogConfig(),
            backend=self.backend,
            linear_drive=self.linear,
            ik=self.ik,
            display=self.display,
            tilt_source=self.tilt,
            held_objects=self.held,
            joystick_visual=self.visual,
            point_indicator=self.pointer,
            teleport=self.teleport,
        )
        if init:
            self.controller.init()

    def open_gate(self):
        self.held.held[Hand.LEFT] = "Flexpendant"
        self.controller.on_trigger(True, Hand.LEFT)
        assert self.controller.gate_open

    def articulated(self):
        self.controller.on_grip(True, Hand.RIGHT)
        self.controller.on_grip(False, Hand.RIGHT)
        assert self.controller.mode is MovementMode.ARTICULATED
        self.log.clear()
        self.backend.commands.clear()
        self.backend.stop_count = 0


class TestInitialization:
    def test_tick_before_init_raises(self):
        rig = Rig(init=False)
        with pytest.raises(RuntimeError):
            rig.controller.run_control_tick()

    def test_incomplete_joint_set_is_fatal(self):
        rig = Rig(n_joints=5, init=False)
        with pytest.raises(ConfigurationError):
            rig.controller.init()
        assert rig.controller.is_initialized is False

    def test_initial_state_published(self):
        rig = Rig()
        assert rig.controller.mode is MovementMode.LINEAR
        assert rig.controller.active_axis_set is AxisSet.A
        assert rig.display.modes == [MovementMode.LINEAR]
        assert rig.display.axis_sets == [AxisSet.A]
        assert rig.ik.enabled is True
        assert rig.linear.enabled is True

    def test_articulated_default(self):
        rig = Rig(JogConfig(default_mode=MovementMode.ARTICULATED))
        assert rig.ik.enabled is False
        assert rig.linear.enabled is False
        assert rig.display.modes == [MovementMode.ARTICULATED]

    def test_joint_range_label(self):
        rig = Rig(JogConfig(show_joint_range=True))
        assert rig.display.ranges == ["1  2  3"]
        rig.controller.on_primary_button(True, Hand.RIGHT)
        assert rig.display.ranges[-1] == "4  5  6"


class TestGate:
    def test_closed_gate_issues_no_commands(self):
        rig = Rig()
        rig.articulated()
        rig.controller.on_joystick_axis((0.9, 0.0), Hand.RIGHT)
        rig.tilt.pressed = True
        rig.tilt.angle = 60.0
        for _ in range(5):
            cmd = rig.controller.run_control_tick()
            assert cmd.gated is False
        assert rig.backend.call_count == 0
        assert rig.linear.directions == []

    def test_closed_gate_in_linear_mode(self):
        rig = Rig()
        rig.controller.on_joystick_axis((0.5, 0.5), Hand.RIGHT)
        rig.controller.run_control_tick()
        assert rig.linear.directions == []

    def test_no_device_held(self):
        rig = Rig()
        rig.controller.set_pressure_button(True, Hand.LEFT)
        assert rig.controller.gate_open is False

    def test_wrong_device_held(self):
        rig = Rig()
        rig.held.held[Hand.LEFT] = "Screwdriver"
        rig.controller.set_pressure_button(True, Hand.LEFT)
        assert rig.controller.gate_open is False

    def test_correct_device_opens_gate(self):
        rig = Rig()
        rig.held.held[Hand.LEFT] = "Flexpendant"
        rig.controller.set_pressure_button(True, Hand.LEFT)
        assert rig.controller.gate_open is True

    def test_wrong_hand_ignored(self):
        rig = Rig()
        rig.held.held[Hand.LEFT] = "Flexpendant"
        rig.held.held[Hand.RIGHT] = "Flexpendant"
        rig.controller.on_trigger(True, Hand.RIGHT)
        assert rig.controller.gate_open is False

    def test_stale_value_kept_after_device_dropped(self):
        rig = Rig()
        rig.open_gate()
        rig.held.held[Hand.LEFT] = None
        rig.controller.on_trigger(False, Hand.LEFT)
        assert rig.controller.gate_open is True

    def test_closing_gate_stops_joints(self):
        rig = Rig()
        rig.articulated()
        rig.open_gate()
        rig.controller.on_joystick_axis((0.9, 0.0), Hand.RIGHT)
        rig.controller.run_control_tick()
        assert rig.backend.states[0] is RotationDirection.NEGATIVE
        rig.controller.on_trigger(False, Hand.LEFT)
        assert rig.backend.states == [RotationDirection.NONE] * 6

    def test_trigger_forwarded_to_pointer(self):
        rig = Rig()
        rig.controller.on_trigger(1.0, Hand.RIGHT)
        rig.controller.on_trigger(0.4, Hand.RIGHT)
        assert rig.pointer.calls == [(True, Hand.RIGHT), (False, Hand.RIGHT)]


class TestModeSwitch:
    def test_rising_edge_toggles(self):
        rig = Rig()
        rig.controller.on_grip(True, Hand.RIGHT)
        assert rig.controller.mode is MovementMode.ARTICULATED
        rig.controller.on_grip(False, Hand.RIGHT)
        assert rig.controller.mode is MovementMode.ARTICULATED

    def test_wrong_hand_ignored(self):
        rig = Rig()
        rig.controller.on_grip(True, Hand.LEFT)
        assert rig.controller.mode is MovementMode.LINEAR

    def test_switch_to_articulated(self):
        rig = Rig()
        rig.log.clear()
        rig.controller.toggle_movement_mode(True, Hand.RIGHT)
        assert rig.log[0] == ("stop_all",)
        assert ("ik_enabled", False) in rig.log
        assert ("linear_enabled", False) in rig.log
        assert rig.display.modes[-1] is MovementMode.ARTICULATED

    def test_switch_to_linear_ordering(self):
        rig = Rig()
        rig.articulated()
        rig.controller.toggle_movement_mode(True, Hand.RIGHT)

        names = [entry[0] for entry in rig.log]
        stop = names.index("stop_all")
        seed = names.index("seed")
        enable = names.index("linear_enabled")
        assert stop < seed < enable
        assert rig.log[enable] == ("linear_enabled", True)
        assert ("ik_enabled", True) in rig.log
        np.testing.assert_allclose(rig.linear.seeded, END_EFFECTOR)
        assert rig.display.modes[-1] is MovementMode.LINEAR

    def test_mode_switch_disabled(self):
        rig = Rig(JogConfig(mode_switch_input="none"))
        rig.controller.on_grip(True, Hand.RIGHT)
        assert rig.controller.mode is MovementMode.LINEAR
        assert rig.controller.toggle_movement_mode(True, Hand.RIGHT) is False


class TestAxisSet:
    def test_toggle_twice_returns(self):
        rig = Rig()
        rig.controller.toggle_axis_set()
        assert rig.controller.active_axis_set is AxisSet.B
        rig.controller.toggle_axis_set()
        assert rig.controller.active_axis_set is AxisSet.A

    def test_primary_button_edges(self):
        rig = Rig()
        rig.controller.on_primary_button(True, Hand.RIGHT)
        rig.controller.on_primary_button(False, Hand.RIGHT)
        assert rig.controller.active_axis_set is AxisSet.B
        rig.controller.on_primary_button(True, Hand.LEFT)
        assert rig.controller.active_axis_set is AxisSet.B
        assert rig.display.axis_sets == [AxisSet.A, AxisSet.B]


class TestControlTick:
    def test_below_threshold_full_stop(self):
        rig = Rig()
        rig.articulated()
        rig.open_gate()
        rig.controller.on_joystick_axis((0.05, 0.02), Hand.RIGHT)
        cmd = rig.controller.run_control_tick()
        assert cmd.full_stop is True
        assert rig.backend.stop_count == 1
        assert rig.backend.commands == []

    def test_joint_1_inverted(self):
        rig = Rig()
        rig.articulated()
        rig.open_gate()
        rig.controller.on_joystick_axis((0.0, 0.6), Hand.RIGHT)
        cmd = rig.controller.run_control_tick()
        assert cmd.selection.joint_index == 1
        assert cmd.selection.direction is RotationDirection.NEGATIVE
        assert rig.backend.commands == [(1, RotationDirection.NEGATIVE)]
        assert rig.display.selected == [1]

    def test_joint_4_not_inverted(self):
        rig = Rig()
        rig.articulated()
        rig.open_gate()
        rig.controller.toggle_axis_set()
        rig.controller.on_joystick_axis((0.0, 0.6), Hand.RIGHT)
        cmd = rig.controller.run_control_tick()
        assert cmd.selection.joint_index == 4
        assert cmd.selection.direction is RotationDirection.POSITIVE

    def test_changing_joint_stops_previous(self):
        rig = Rig()
        rig.articulated()
        rig.open_gate()
        rig.controller.on_joystick_axis((0.9, 0.0), Hand.RIGHT)
        rig.controller.run_control_tick()
        rig.controller.on_joystick_axis((0.0, 0.9), Hand.RIGHT)
        rig.controller.run_control_tick()
        assert rig.backend.states[0] is RotationDirection.NONE
        assert rig.backend.states[1] is RotationDirection.NEGATIVE

    def test_twist_from_tilt(self):
        rig = Rig()
        rig.articulated()
        rig.open_gate()
        rig.tilt.pressed = True
        rig.tilt.angle = -25.0
        cmd = rig.controller.run_control_tick()
        assert cmd.selection.joint_index == 2
        assert cmd.selection.direction is RotationDirection.NEGATIVE

    def test_linear_tilt(self):
        rig = Rig()
        rig.open_gate()
        rig.tilt.pressed = True
        rig.tilt.angle = 90.0
        cmd = rig.controller.run_control_tick()
        np.testing.assert_allclose(cmd.linear_direction, [0.0, 0.5, 0.0])
        np.testing.assert_allclose(rig.linear.directions[-1], [0.0, 0.5, 0.0])
        assert rig.backend.call_count == 0

    def test_linear_emits_zero_direction(self):
        rig = Rig()
        rig.open_gate()
        for _ in range(3):
            rig.controller.run_control_tick()
        assert len(rig.linear.directions) == 3
        np.testing.assert_array_equal(rig.linear.directions[-1], np.zeros(3))

    def test_left_joystick_does_not_drive_motion(self):
        rig = Rig()
        rig.open_gate()
        rig.controller.on_joystick_axis((0.5, 0.5), Hand.LEFT)
        cmd = rig.controller.run_control_tick()
        np.testing.assert_array_equal(cmd.linear_direction, np.zeros(3))

    def test_step_advances_backend(self):
        rig = Rig()
        rig.controller.step(0.02)
        rig.controller.step()
        assert rig.backend.advanced == [0.02, pytest.approx(1.0 / 50.0)]


class TestInputForwarding:
    def test_visual_receives_touch_press_rotation(self):
        rig = Rig()
        rig.controller.on_joystick_touched(1.0, Hand.RIGHT)
        rig.controller.on_joystick_pressed(True, Hand.LEFT)
        rig.controller.on_rotation([0.0, 0.0, 0.0, 1.0], Hand.RIGHT)
        assert rig.visual.calls == [
            ("touch", True, Hand.RIGHT),
            ("press", True, Hand.LEFT),
            ("rotate", (0.0, 0.0, 0.0, 1.0), Hand.RIGHT),
        ]

    def test_teleport_only_from_gating_hand(self):
        rig = Rig()
        rig.controller.on_joystick_axis((0.2, -0.7), Hand.LEFT)
        rig.controller.on_joystick_axis((0.2, 0.9), Hand.RIGHT)
        assert rig.teleport.values == [pytest.approx(-0.7)]


class TestEventsDuringTick:
    """Gate and mode changes that land while a tick is in progress."""

    def _jogging_rig(self):
        rig = Rig()
        rig.articulated()
        rig.open_gate()
        rig.controller.on_joystick_axis((0.9, 0.0), Hand.RIGHT)
        return rig

    def test_mode_switch_mid_tick_leaves_every_joint_stopped(self):
        rig = self._jogging_rig()
        rig.tilt.on_threshold_read = lambda: rig.controller.on_grip(True, Hand.RIGHT)
        cmd = rig.controller.run_control_tick()
        assert rig.controller.mode is MovementMode.LINEAR
        assert cmd.mode is MovementMode.LINEAR
        assert rig.backend.states == [RotationDirection.NONE] * 6
        assert rig.backend.commands == []

    def test_gate_close_mid_tick_leaves_every_joint_stopped(self):
        rig = self._jogging_rig()
        rig.tilt.on_threshold_read = lambda: rig.controller.on_trigger(False, Hand.LEFT)
        cmd = rig.controller.run_control_tick()
        assert cmd.gated is False
        for _ in range(3):
            rig.controller.run_control_tick()
        assert rig.controller.gate_open is False
        assert rig.backend.states == [RotationDirection.NONE] * 6

    def test_gate_close_from_event_thread_waits_for_tick(self):
        rig = self._jogging_rig()
        threads = []

        def close_gate_from_thread():
            t = threading.Thread(target=rig.controller.on_trigger, args=(False, Hand.LEFT))
            threads.append(t)
            t.start()
            t.join(timeout=0.05)

        rig.tilt.on_threshold_read = close_gate_from_thread
        cmd = rig.controller.run_control_tick()
        threads[0].join(timeout=2.0)

        assert not threads[0].is_alive()
        assert cmd.selection.joint_index == 0
        assert rig.controller.gate_open is False
        assert rig.backend.states == [RotationDirection.NONE] * 6
        assert rig.log[-1] == ("stop_all",)

    def test_axis_toggle_from_event_thread_applies_after_tick(self):
        rig = self._jogging_rig()
        threads = []

        def toggle_from_thread():
            t = threading.Thread(target=rig.controller.on_primary_button, args=(True, Hand.RIGHT))
            threads.append(t)
            t.start()
            t.join(timeout=0.05)

        rig.tilt.on_threshold_read = toggle_from_thread
        first = rig.controller.run_control_tick()
        threads[0].join(timeout=2.0)
        second = rig.controller.run_control_tick()

        assert first.selection.joint_index == 0
        assert second.selection.joint_index == 3
        assert rig.backend.states[0] is RotationDirection.NONE
        assert rig.backend.states[3] is RotationDirection.NEGATIVE
