from __future__ import annotations

from typing import Dict, List

import pytest

from scheduler import LookPolicy
from simulation import Car, ElevatorSystem, SimpyClock, SystemConfig, TimingModel


class EventLog:
    def __init__(self) -> None:
        self.events: Dict[str, List[dict]] = {}

    def __call__(self, event: str, payload: dict) -> None:
        self.events.setdefault(event, []).append(payload)

    def of(self, event: str) -> List[dict]:
        return self.events.get(event, [])

    def served_floors(self) -> List[int]:
        return [payload["floor"] for payload in self.of("served")]

    def states(self) -> List[str]:
        return [payload["to"] for payload in self.of("state")]


@pytest.fixture
def clock() -> SimpyClock:
    return SimpyClock()


@pytest.fixture
def events() -> EventLog:
    return EventLog()


@pytest.fixture
def make_car(clock, events):
    def factory(num_floors: int = 10, policy=None, car_id: int = 0) -> Car:
        return Car(
            car_id=car_id,
            num_floors=num_floors,
            clock=clock,
            policy=policy or LookPolicy(),
            timing=TimingModel.instant(),
            emit=events,
        )

    return factory


@pytest.fixture
def make_system(clock, events):
    def factory(num_floors: int = 10, num_cars: int = 1, policy: str = "look", mode: str = "automatic") -> ElevatorSystem:
        config = SystemConfig(
            num_floors=num_floors,
            num_cars=num_cars,
            policy=policy,
            mode=mode,
            timing=TimingModel.instant(),
        )
        system = ElevatorSystem(config, clock=clock)
        for name in ("served", "trip", "state", "fault", "direction_change"):
            system.on_event(name, lambda payload, name=name: events(name, payload))
        return system

    return factory


def assert_car_invariants(car: Car) -> None:
    idle_flags = {
        car.state.value == "idle",
        car.direction.value == "idle",
        not car.queue,
        car.target_floor is None,
    }
    assert len(idle_flags) == 1, car
    assert 1 <= car.current_floor <= car.num_floors
    assert car.has_pending_timer == (not car.is_idle)
    floors = [d.floor for d in car.queue]
    assert len(floors) == len(set(floors))
