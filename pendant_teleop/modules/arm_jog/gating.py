"""Safety gate for jog motion.

Motion is only enabled while the pressure button is held on the gating
hand AND that hand is holding the designated control device (the pendant).
"""

from typing import Callable

from pendant_teleop.interfaces.input_device import Hand, IHeldObjectRegistry
from pendant_teleop.utils.logger import get_logger

logger = get_logger("gating")


class GatingController:
    """Tracks the pressure-button gate.

    Calls from the other hand, calls while nothing is held, and calls while
    the wrong object is held are ignored: the previous value is kept.
    """

    def __init__(
        self,
        held_objects: IHeldObjectRegistry,
        gating_hand: Hand = Hand.LEFT,
        control_device_id: str = "Flexpendant",
    ):
        self._held_objects = held_objects
        self._gating_hand = gating_hand
        self._control_device_id = control_device_id
        self._pressure_button_held = False
        self._listeners: list[Callable[[bool], None]] = []

    def add_listener(self, callback: Callable[[bool], None]) -> None:
        """Register callback(held) invoked whenever the gate changes state."""
        self._listeners.append(callback)

    def set_pressure_button(self, pressed: bool, hand: Hand) -> None:
        if hand is not self._gating_hand:
            return

        held = self._held_objects.held_object(self._gating_hand)
        if held is None:
            logger.debug(f"Pressure button ignored: nothing held in {hand.name} hand")
            return
        if held != self._control_device_id:
            logger.debug(f"Pressure button ignored: holding {held!r}, not the control device")
            return

        previous = self._pressure_button_held
        self._pressure_button_held = bool(pressed)
        if previous != self._pressure_button_held:
            logger.info(f"Gate {'opened' if self._pressure_button_held else 'closed'}")
            for callback in self._listeners:
                callback(self._pressure_button_held)

    @property
    def pressure_button_held(self) -> bool:
        return self._pressure_button_held

    @property
    def is_open(self) -> bool:
        """Whether motion mapping may run this tick."""
        return self._pressure_button_held

    @property
    def gating_hand(self) -> Hand:
        return self._gating_hand
