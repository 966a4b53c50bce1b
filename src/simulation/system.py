from __future__ import annotations

import logging
from dataclasses import asdict
from typing import Callable, Dict, List, Optional, Union

from scheduler import Direction, get_policy

from .car import Car
from .clock import Clock, SimpyClock
from .config import SystemConfig
from .dispatcher import Call, Dispatcher, DispatchMode
from .metrics import MetricsTracker

logger = logging.getLogger(__name__)


class ElevatorSystem:
    """Elevator bank: a dispatcher in front of a fixed set of cars."""

    def __init__(self, config: Optional[SystemConfig] = None, clock: Optional[Clock] = None) -> None:
        self.config = config or SystemConfig()
        self.clock = clock or SimpyClock()
        self.policy = get_policy(self.config.policy)
        self.metrics = MetricsTracker()
        self.event_hooks: Dict[str, List[Callable[[dict], None]]] = {}
        self.on_event("served", self.metrics.record_served)
        self.on_event("trip", self.metrics.record_trip)
        self.on_event("direction_change", self.metrics.record_direction_change)
        self.dispatcher = Dispatcher(clock=self.clock, policy=self.policy, mode=self.config.mode)
        self._cars: List[Car] = []
        self.configure(self.config.num_floors, self.config.num_cars)

    @property
    def num_floors(self) -> int:
        return self.config.num_floors

    @property
    def cars(self) -> List[Car]:
        return list(self._cars)

    @property
    def pending_calls(self) -> List[Call]:
        return list(self.dispatcher.pending)

    @property
    def policy_name(self) -> str:
        return self.policy.name

    @property
    def mode(self) -> DispatchMode:
        return self.dispatcher.mode

    def configure(self, num_floors: int, num_cars: int) -> None:
        """Rebuild the bank; in-flight work is discarded, not drained."""

        if num_floors < 1 or num_cars < 1:
            raise ValueError("A building needs at least one floor and one car")
        for car in self._cars:
            car.reset()
        self.config.num_floors = num_floors
        self.config.num_cars = num_cars
        self._cars = [
            Car(
                car_id=i,
                num_floors=num_floors,
                clock=self.clock,
                policy=self.policy,
                timing=self.config.timing,
                emit=self._emit,
            )
            for i in range(num_cars)
        ]
        self.dispatcher.reset(self._cars, num_floors)
        logger.info("Configured %d floors with %d cars", num_floors, num_cars)
        self._emit("configure", {"num_floors": num_floors, "num_cars": num_cars})

    def call(self, floor: int, direction: Union[Direction, str]) -> Optional[Call]:
        return self.dispatcher.call(floor, direction)

    def assign(self, call_id: int, car_id: int) -> bool:
        return self.dispatcher.assign(call_id, car_id)

    def move_car(self, car_id: int, floor: int) -> bool:
        return self.dispatcher.move_car(car_id, floor)

    def auto_assign_all(self) -> int:
        return self.dispatcher.auto_assign_all()

    def set_policy(self, name: str) -> None:
        policy = get_policy(name)
        changed = policy.name != self.policy.name
        self.policy = policy
        self.config.policy = self.policy.name
        self.dispatcher.policy = self.policy
        for car in self._cars:
            car.policy = self.policy
            if changed:
                car.drop_synthetic_stops()
        logger.info("Scheduling policy set to %s", self.policy.name)

    def set_mode(self, mode: Union[DispatchMode, str]) -> None:
        self.dispatcher.set_mode(mode)
        self.config.mode = self.dispatcher.mode.value

    def get_car(self, car_id: int) -> Optional[Car]:
        for car in self._cars:
            if car.car_id == car_id:
                return car
        return None

    def on_event(self, event: str, callback: Callable[[dict], None]) -> None:
        self.event_hooks.setdefault(event, []).append(callback)

    def snapshot(self) -> dict:
        return {
            "time": self.clock.now,
            "num_floors": self.num_floors,
            "policy": self.policy.name,
            "mode": self.dispatcher.mode.value,
            "cars": [car.as_dict() for car in self._cars],
            "calls": [call.as_dict() for call in self.dispatcher.pending],
            "metrics": asdict(self.metrics.snapshot(self.clock.now)),
        }

    def _emit(self, event: str, payload: dict) -> None:
        for callback in self.event_hooks.get(event, []):
            callback(payload)
