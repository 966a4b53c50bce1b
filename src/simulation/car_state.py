from __future__ import annotations

from enum import Enum
from typing import Dict, Tuple


class CarState(str, Enum):
    IDLE = "idle"
    MOVING = "moving"
    ARRIVING = "arriving"
    DOORS_OPENING = "doors_opening"
    DOORS_OPEN = "doors_open"
    DOORS_CLOSING = "doors_closing"


class CarEvent(str, Enum):
    DISPATCHED = "dispatched"
    FLOOR_PASSED = "floor_passed"
    FLOOR_REACHED = "floor_reached"
    SETTLED = "settled"
    DOORS_OPENED = "doors_opened"
    DWELL_ELAPSED = "dwell_elapsed"
    QUEUE_PENDING = "queue_pending"
    QUEUE_EMPTY = "queue_empty"
    FAULT = "fault"
    RESET = "reset"


class InvalidTransition(RuntimeError):
    def __init__(self, state: CarState, event: CarEvent) -> None:
        super().__init__(f"No transition from {state.value} on {event.value}")
        self.state = state
        self.event = event


TRANSITIONS: Dict[Tuple[CarState, CarEvent], CarState] = {
    (CarState.IDLE, CarEvent.DISPATCHED): CarState.MOVING,
    (CarState.MOVING, CarEvent.FLOOR_PASSED): CarState.MOVING,
    (CarState.MOVING, CarEvent.FLOOR_REACHED): CarState.ARRIVING,
    (CarState.ARRIVING, CarEvent.SETTLED): CarState.DOORS_OPENING,
    (CarState.DOORS_OPENING, CarEvent.DOORS_OPENED): CarState.DOORS_OPEN,
    (CarState.DOORS_OPEN, CarEvent.DWELL_ELAPSED): CarState.DOORS_CLOSING,
    (CarState.DOORS_CLOSING, CarEvent.QUEUE_PENDING): CarState.MOVING,
    (CarState.DOORS_CLOSING, CarEvent.QUEUE_EMPTY): CarState.IDLE,
}

DOOR_CYCLE = frozenset(
    {CarState.ARRIVING, CarState.DOORS_OPENING, CarState.DOORS_OPEN, CarState.DOORS_CLOSING}
)


def transition(state: CarState, event: CarEvent) -> CarState:
    """Return the state reached from ``state`` when ``event`` happens."""

    if event in (CarEvent.FAULT, CarEvent.RESET):
        return CarState.IDLE
    try:
        return TRANSITIONS[(state, event)]
    except KeyError:
        raise InvalidTransition(state, event) from None
