"""Unit tests for input aggregation, the pressure-button gate and axis selection."""

import threading

import numpy as np
import pytest

from pendant_teleop.interfaces.input_device import (
    Hand,
    HandInputState,
    IHeldObjectRegistry,
    InputAction,
)
from pendant_teleop.interfaces.robot_output import AxisSet, IDisplayFeedback
from pendant_teleop.modules.arm_jog.axis_selector import AxisSelector
from pendant_teleop.modules.arm_jog.gating import GatingController
from pendant_teleop.modules.arm_jog.input_aggregator import InputAggregator, as_pressed


class TestAsPressed:
    def test_bools_pass_through(self):
        assert as_pressed(True) is True
        assert as_pressed(False) is False

    def test_float_only_full_press(self):
        assert as_pressed(1.0) is True
        assert as_pressed(0.99) is False
        assert as_pressed(0.0) is False


class TestInputAggregator:
    def test_default_state(self):
        state = InputAggregator().snapshot(Hand.LEFT)
        assert state.trigger_pressed is False
        np.testing.assert_array_equal(state.joystick_axis, [0.0, 0.0])
        np.testing.assert_array_equal(state.rotation, [0.0, 0.0, 0.0, 1.0])

    def test_events_update_only_their_hand(self):
        agg = InputAggregator()
        agg.on_trigger(True, Hand.RIGHT)
        agg.on_grip(1.0, Hand.RIGHT)
        agg.on_joystick_axis((0.3, -0.4), Hand.RIGHT)
        right = agg.snapshot(Hand.RIGHT)
        left = agg.snapshot(Hand.LEFT)
        assert right.trigger_pressed and right.grip_pressed
        np.testing.assert_allclose(right.joystick_axis, [0.3, -0.4])
        assert not left.trigger_pressed and not left.grip_pressed

    def test_fields_persist_until_overwritten(self):
        agg = InputAggregator()
        agg.on_joystick_pressed(True, Hand.RIGHT)
        agg.on_joystick_touched(True, Hand.RIGHT)
        agg.on_primary_button(True, Hand.RIGHT)
        agg.on_joystick_axis((0.5, 0.5), Hand.RIGHT)
        state = agg.snapshot(Hand.RIGHT)
        assert state.joystick_pressed and state.joystick_touched and state.primary_button_pressed
        agg.on_joystick_pressed(False, Hand.RIGHT)
        state = agg.snapshot(Hand.RIGHT)
        assert state.joystick_pressed is False
        assert state.joystick_touched is True

    def test_snapshot_is_a_copy(self):
        agg = InputAggregator()
        agg.on_joystick_axis((0.1, 0.2), Hand.LEFT)
        snap = agg.snapshot(Hand.LEFT)
        snap.joystick_axis[0] = 9.0
        assert agg.snapshot(Hand.LEFT).joystick_axis[0] == pytest.approx(0.1)

    def test_rotation_stored(self):
        agg = InputAggregator()
        q = np.array([0.0, 0.7071, 0.0, 0.7071])
        agg.on_rotation(q, Hand.LEFT)
        np.testing.assert_allclose(agg.snapshot(Hand.LEFT).rotation, q)

    def test_subscribers_per_action_and_hand(self):
        agg = InputAggregator()
        calls = []
        agg.subscribe(InputAction.PRIMARY_BUTTON, Hand.RIGHT, lambda v, h: calls.append((v, h)))
        agg.on_primary_button(True, Hand.LEFT)
        agg.on_primary_button(True, Hand.RIGHT)
        agg.on_trigger(True, Hand.RIGHT)
        assert calls == [(True, Hand.RIGHT)]

    def test_subscriber_sees_updated_state(self):
        agg = InputAggregator()
        seen = []
        agg.subscribe(
            InputAction.TRIGGER, Hand.LEFT,
            lambda v, h: seen.append(agg.snapshot(h).trigger_pressed),
        )
        agg.on_trigger(True, Hand.LEFT)
        assert seen == [True]

    def test_snapshot_all_consistent_under_concurrent_events(self):
        agg = InputAggregator()
        stop = threading.Event()

        def writer():
            i = 0
            while not stop.is_set():
                v = float(i % 2)
                agg.on_joystick_axis((v, v), Hand.RIGHT)
                i += 1

        thread = threading.Thread(target=writer)
        thread.start()
        try:
            for _ in range(200):
                axis = agg.snapshot_all()[Hand.RIGHT].joystick_axis
                assert axis[0] == axis[1]
        finally:
            stop.set()
            thread.join()


class TestHandInputState:
    def test_copy_is_deep(self):
        state = HandInputState()
        clone = state.copy()
        clone.rotation[3] = 0.0
        assert state.rotation[3] == 1.0


class FixedHeld(IHeldObjectRegistry):
    def __init__(self, left=None, right=None):
        self.held = {Hand.LEFT: left, Hand.RIGHT: right}

    def held_object(self, hand):
        return self.held[hand]


class TestGatingController:
    def test_requires_control_device(self):
        held = FixedHeld()
        gate = GatingController(held, Hand.LEFT, "Flexpendant")
        gate.set_pressure_button(True, Hand.LEFT)
        assert gate.pressure_button_held is False

        held.held[Hand.LEFT] = "Cup"
        gate.set_pressure_button(True, Hand.LEFT)
        assert gate.pressure_button_held is False

        held.held[Hand.LEFT] = "Flexpendant"
        gate.set_pressure_button(True, Hand.LEFT)
        assert gate.pressure_button_held is True

    def test_configurable_gating_hand(self):
        gate = GatingController(FixedHeld(right="Pendant"), Hand.RIGHT, "Pendant")
        gate.set_pressure_button(True, Hand.LEFT)
        assert gate.is_open is False
        gate.set_pressure_button(True, Hand.RIGHT)
        assert gate.is_open is True

    def test_listener_only_on_transitions(self):
        gate = GatingController(FixedHeld(left="Flexpendant"))
        changes = []
        gate.add_listener(changes.append)
        gate.set_pressure_button(True, Hand.LEFT)
        gate.set_pressure_button(True, Hand.LEFT)
        gate.set_pressure_button(False, Hand.LEFT)
        assert changes == [True, False]


class RecordingDisplay(IDisplayFeedback):
    def __init__(self):
        self.sets = []
        self.ranges = []

    def show_axis_set(self, active_set):
        self.sets.append(active_set)

    def show_mode(self, mode):
        pass

    def show_joint_range(self, label):
        self.ranges.append(label)

    def show_selected_joint(self, joint_index):
        pass


class TestAxisSelector:
    def test_toggle_involution(self):
        selector = AxisSelector(RecordingDisplay())
        start = selector.active_set
        selector.toggle()
        selector.toggle()
        assert selector.active_set is start

    def test_button_rising_edge_on_toggle_hand(self):
        display = RecordingDisplay()
        selector = AxisSelector(display, toggle_hand=Hand.RIGHT, show_joint_range=True)
        selector.on_button(False, Hand.RIGHT)
        selector.on_button(True, Hand.LEFT)
        assert selector.active_set is AxisSet.A
        selector.on_button(True, Hand.RIGHT)
        assert selector.active_set is AxisSet.B
        assert display.sets == [AxisSet.B]
        assert display.ranges == ["4  5  6"]
