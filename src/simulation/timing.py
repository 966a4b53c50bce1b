"""Timing constants and duration helpers for car movement and door cycles.

All values are seconds and follow typical commercial elevator figures.
"""
from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Optional

FLOOR_TRAVEL_TIME = 1.0
ACCELERATION_TIME = 0.5
DECELERATION_TIME = 0.5
SHORT_TRIP_TIME_PER_FLOOR = 2.0

DOOR_OPEN_TIME = 2.5
DOOR_HOLD_TIME = 3.0
DOOR_CLOSE_TIME = 2.0

PASSENGER_BOARDING_TIME = 0.5
BASE_PASSENGERS = 2
MAX_ADDITIONAL_PASSENGERS = 4

DIRECTION_CHANGE_DELAY = 1.0
ARRIVAL_SETTLING_TIME = 1.0

SHORT_TRIP_FLOORS = 2
MEDIUM_TRIP_FLOORS = 5


def trip_category(distance: int) -> str:
    floors = abs(distance)
    if floors <= SHORT_TRIP_FLOORS:
        return "short"
    if floors <= MEDIUM_TRIP_FLOORS:
        return "medium"
    return "long"


@dataclass
class TimingModel:
    """Per-state durations used by the car state machine.

    A trip is charged one moving step per floor. Short trips pay
    ``short_trip_time_per_floor`` for every floor since the car never reaches
    cruise speed. Longer trips spend the first floor accelerating, the last
    one decelerating and the floors between at ``floor_travel_time``.
    """

    floor_travel_time: float = FLOOR_TRAVEL_TIME
    acceleration_time: float = ACCELERATION_TIME
    deceleration_time: float = DECELERATION_TIME
    short_trip_time_per_floor: float = SHORT_TRIP_TIME_PER_FLOOR
    door_open_time: float = DOOR_OPEN_TIME
    door_hold_time: float = DOOR_HOLD_TIME
    door_close_time: float = DOOR_CLOSE_TIME
    passenger_boarding_time: float = PASSENGER_BOARDING_TIME
    base_passengers: int = BASE_PASSENGERS
    max_additional_passengers: int = MAX_ADDITIONAL_PASSENGERS
    direction_change_delay: float = DIRECTION_CHANGE_DELAY
    arrival_settling_time: float = ARRIVAL_SETTLING_TIME
    speed: float = 1.0
    random_seed: Optional[int] = None
    rng: random.Random = field(init=False, repr=False)

    def __post_init__(self) -> None:
        if self.speed <= 0:
            raise ValueError("speed must be positive")
        self.rng = random.Random(self.random_seed)

    @classmethod
    def instant(cls) -> "TimingModel":
        """One second per stage and no passenger variance."""

        return cls(
            floor_travel_time=1.0,
            acceleration_time=1.0,
            deceleration_time=1.0,
            short_trip_time_per_floor=1.0,
            door_open_time=1.0,
            door_hold_time=1.0,
            door_close_time=1.0,
            passenger_boarding_time=0.0,
            base_passengers=0,
            max_additional_passengers=0,
            direction_change_delay=0.0,
            arrival_settling_time=1.0,
        )

    def _scaled(self, seconds: float) -> float:
        return seconds / self.speed

    def moving_step(self, trip_floors: int, starting: bool, stopping: bool, reversing: bool = False) -> float:
        if trip_category(trip_floors) == "short":
            seconds = self.short_trip_time_per_floor
        elif starting:
            seconds = self.acceleration_time
        elif stopping:
            seconds = self.deceleration_time
        else:
            seconds = self.floor_travel_time
        if reversing:
            seconds += self.direction_change_delay
        return self._scaled(seconds)

    def arriving(self) -> float:
        return self._scaled(self.arrival_settling_time)

    def doors_opening(self) -> float:
        return self._scaled(self.door_open_time)

    def doors_open(self) -> float:
        passengers = self.base_passengers + self.rng.randint(0, self.max_additional_passengers)
        return self._scaled(self.door_hold_time + passengers * self.passenger_boarding_time)

    def doors_closing(self) -> float:
        return self._scaled(self.door_close_time)
