from __future__ import annotations

import pytest

from simulation import CarEvent, CarState, InvalidTransition, transition


def test_full_stop_cycle():
    state = CarState.IDLE
    path = [
        CarEvent.DISPATCHED,
        CarEvent.FLOOR_PASSED,
        CarEvent.FLOOR_REACHED,
        CarEvent.SETTLED,
        CarEvent.DOORS_OPENED,
        CarEvent.DWELL_ELAPSED,
        CarEvent.QUEUE_EMPTY,
    ]
    seen = []
    for event in path:
        state = transition(state, event)
        seen.append(state)
    assert seen == [
        CarState.MOVING,
        CarState.MOVING,
        CarState.ARRIVING,
        CarState.DOORS_OPENING,
        CarState.DOORS_OPEN,
        CarState.DOORS_CLOSING,
        CarState.IDLE,
    ]


def test_closing_doors_with_work_left_moves_again():
    assert transition(CarState.DOORS_CLOSING, CarEvent.QUEUE_PENDING) is CarState.MOVING


@pytest.mark.parametrize("state", list(CarState))
def test_fault_and_reset_always_land_idle(state):
    assert transition(state, CarEvent.FAULT) is CarState.IDLE
    assert transition(state, CarEvent.RESET) is CarState.IDLE


@pytest.mark.parametrize(
    "state,event",
    [
        (CarState.IDLE, CarEvent.FLOOR_REACHED),
        (CarState.MOVING, CarEvent.DOORS_OPENED),
        (CarState.DOORS_OPEN, CarEvent.DISPATCHED),
        (CarState.ARRIVING, CarEvent.QUEUE_EMPTY),
    ],
)
def test_unknown_transition_raises(state, event):
    with pytest.raises(InvalidTransition) as excinfo:
        transition(state, event)
    assert excinfo.value.state is state
    assert excinfo.value.event is event
