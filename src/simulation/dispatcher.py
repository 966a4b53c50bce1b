from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Sequence, Union

from scheduler import CarSnapshot, Direction, Policy

from .car import Car
from .clock import Clock

logger = logging.getLogger(__name__)


class DispatchMode(str, Enum):
    AUTOMATIC = "automatic"
    MANUAL = "manual"


@dataclass(frozen=True)
class Call:
    """A hall call waiting for a car."""

    call_id: int
    floor: int
    direction: Direction
    timestamp: float

    def as_dict(self) -> dict:
        return {
            "id": self.call_id,
            "floor": self.floor,
            "direction": self.direction.value,
            "timestamp": self.timestamp,
        }


class Dispatcher:
    """Assigns hall calls to cars through the active policy.

    In automatic mode calls are handed to a car as soon as the policy picks
    one and only stay pending when no car can be chosen. In manual mode every
    call waits for an explicit ``assign``.
    """

    def __init__(
        self,
        clock: Clock,
        policy: Policy,
        cars: Sequence[Car] = (),
        num_floors: int = 1,
        mode: Union[DispatchMode, str] = DispatchMode.AUTOMATIC,
    ) -> None:
        self.clock = clock
        self.policy = policy
        self.cars: List[Car] = list(cars)
        self.num_floors = num_floors
        self.mode = DispatchMode(mode)
        self.pending: List[Call] = []
        self._next_call_id = 1

    def call(self, floor: int, direction: Union[Direction, str]) -> Optional[Call]:
        try:
            direction = Direction(direction)
        except ValueError:
            direction = Direction.IDLE
        if direction is Direction.IDLE:
            logger.warning("Ignoring call at floor %s without an up/down direction", floor)
            return None
        if not 1 <= floor <= self.num_floors:
            logger.warning("Ignoring call at floor %s outside 1..%s", floor, self.num_floors)
            return None

        existing = self._find_pending(floor, direction)
        if existing is not None:
            return existing

        call = Call(call_id=self._next_call_id, floor=floor, direction=direction, timestamp=self.clock.now)
        self._next_call_id += 1

        if self.mode is DispatchMode.MANUAL:
            self.pending.append(call)
            return call

        if self.pending:
            self.auto_assign_all()
        if not self._try_assign(call, self._snapshots()):
            self.pending.append(call)
        return call

    def assign(self, call_id: int, car_id: int) -> bool:
        call = self._get_call(call_id)
        car = self._get_car(car_id)
        if call is None or car is None:
            logger.warning("Cannot assign call %s to car %s", call_id, car_id)
            return False
        self.pending.remove(call)
        accepted = car.enqueue(call.floor, call.direction, requested_at=call.timestamp)
        logger.info("Call %s (floor %s %s) assigned to car %s", call.call_id, call.floor, call.direction.value, car_id)
        return accepted

    def move_car(self, car_id: int, floor: int) -> bool:
        car = self._get_car(car_id)
        if car is None:
            logger.warning("Cannot move unknown car %s", car_id)
            return False
        if self.mode is DispatchMode.MANUAL:
            if not car.is_idle:
                logger.warning("Car %s is busy; manual move to %s rejected", car_id, floor)
                return False
            if car.current_floor == floor:
                return False
        return car.enqueue(floor)

    def auto_assign_all(self) -> int:
        """Drain pending calls in one pass.

        Every call is evaluated against the car states seen before the pass,
        so one idle car can win several calls of the same batch.
        """

        snapshots = self._snapshots()
        remaining: List[Call] = []
        assigned = 0
        for call in list(self.pending):
            if self._try_assign(call, snapshots):
                assigned += 1
            else:
                remaining.append(call)
        self.pending = remaining
        return assigned

    def set_mode(self, mode: Union[DispatchMode, str]) -> None:
        self.mode = DispatchMode(mode)
        if self.mode is DispatchMode.AUTOMATIC and self.pending:
            self.auto_assign_all()

    def reset(self, cars: Sequence[Car], num_floors: int) -> None:
        self.cars = list(cars)
        self.num_floors = num_floors
        dropped = [call for call in self.pending if call.floor > num_floors]
        if dropped:
            logger.info("Dropping %d pending calls above floor %s", len(dropped), num_floors)
        self.pending = [call for call in self.pending if call.floor <= num_floors]
        if self.mode is DispatchMode.AUTOMATIC and self.pending:
            self.auto_assign_all()

    def _try_assign(self, call: Call, snapshots: Sequence[CarSnapshot]) -> bool:
        car_id = self.policy.choose_car(snapshots, call.floor, call.direction)
        if car_id is None:
            logger.info("No car available for call %s at floor %s", call.call_id, call.floor)
            return False
        car = self._get_car(car_id)
        if car is None:
            logger.warning(
                "Policy %s chose unknown car %s for call %s; keeping it pending",
                self.policy.name,
                car_id,
                call.call_id,
            )
            return False
        if not car.enqueue(call.floor, call.direction, requested_at=call.timestamp):
            return False
        logger.info("Call %s (floor %s %s) assigned to car %s", call.call_id, call.floor, call.direction.value, car_id)
        return True

    def _snapshots(self) -> List[CarSnapshot]:
        return [car.snapshot() for car in self.cars]

    def _find_pending(self, floor: int, direction: Direction) -> Optional[Call]:
        for call in self.pending:
            if call.floor == floor and call.direction is direction:
                return call
        return None

    def _get_call(self, call_id: int) -> Optional[Call]:
        for call in self.pending:
            if call.call_id == call_id:
                return call
        return None

    def _get_car(self, car_id: int) -> Optional[Car]:
        for car in self.cars:
            if car.car_id == car_id:
                return car
        return None
