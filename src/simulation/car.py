from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from scheduler import CarSnapshot, Destination, Direction, Policy
from scheduler.utils import find_floor

from .car_state import DOOR_CYCLE, CarEvent, CarState, transition
from .clock import Clock, TimerHandle
from .timing import TimingModel

logger = logging.getLogger(__name__)

EventSink = Callable[[str, dict], None]


def _discard(event: str, payload: dict) -> None:
    return None


@dataclass
class Car:
    """One elevator car driven by its own timer.

    Every state except ``IDLE`` lasts for a duration taken from the timing
    model. When the timer fires the car takes exactly one transition and arms
    the next timer, so a car never has more than one pending timer.
    """

    car_id: int
    num_floors: int
    clock: Clock = field(repr=False)
    policy: Policy = field(repr=False)
    timing: TimingModel = field(default_factory=TimingModel, repr=False)
    emit: EventSink = field(default=_discard, repr=False)
    current_floor: int = 1
    direction: Direction = Direction.IDLE
    state: CarState = CarState.IDLE
    queue: List[Destination] = field(default_factory=list)
    target_floor: Optional[int] = None
    floors_traveled: int = 0
    trips_completed: int = 0
    direction_changes: int = 0
    served_count: int = 0
    _duplicates: List[Destination] = field(default_factory=list, init=False, repr=False)
    _timer: Optional[TimerHandle] = field(default=None, init=False, repr=False)
    _trip_floors: int = field(default=0, init=False, repr=False)

    @property
    def is_idle(self) -> bool:
        return self.state is CarState.IDLE

    @property
    def has_pending_timer(self) -> bool:
        return self._timer is not None

    def enqueue(
        self,
        floor: int,
        call_direction: Optional[Direction] = None,
        requested_at: Optional[float] = None,
    ) -> bool:
        """Add a stop, keeping the policy's visit order."""

        if not 1 <= floor <= self.num_floors:
            logger.warning("Car %s rejected floor %s outside 1..%s", self.car_id, floor, self.num_floors)
            return False
        destination = Destination(
            floor=floor,
            call_direction=call_direction,
            requested_at=self.clock.now if requested_at is None else requested_at,
        )

        index = find_floor(self.queue, floor)
        if index is not None:
            if not self.queue[index].synthetic:
                # Placement stays as is, the request is still reported when served.
                self._duplicates.append(destination)
                logger.debug("Car %s already stops at floor %s", self.car_id, floor)
                return True
            if index == 0 and self.state in DOOR_CYCLE:
                self.queue[0] = destination
                return True

        if self.state is CarState.IDLE:
            self.queue = self.policy.insert_call([], self.current_floor, Direction.IDLE, destination, self.num_floors)
            self._depart(call_direction)
        elif self.state in DOOR_CYCLE:
            head, rest = self.queue[0], self.queue[1:]
            self.queue = [head] + self.policy.insert_call(
                rest, self.current_floor, self.direction, destination, self.num_floors
            )
        else:
            self.queue = self.policy.insert_call(
                self.queue, self.current_floor, self.direction, destination, self.num_floors
            )
            self._retarget()
        return True

    def drop_synthetic_stops(self) -> None:
        """Forget terminal stops nobody asked for.

        The floor being served during a door cycle stays. A moving car left
        with nothing real to do comes to rest at the floor it is approaching.
        """

        if not any(d.synthetic for d in self.queue):
            return
        if self.state in DOOR_CYCLE:
            self.queue = self.queue[:1] + [d for d in self.queue[1:] if not d.synthetic]
            return
        self.queue = [d for d in self.queue if not d.synthetic]
        if not self.queue:
            floor = self.current_floor + self.direction.step
            if not 1 <= floor <= self.num_floors:
                floor = self.current_floor
            self.queue = [Destination(floor=floor, requested_at=self.clock.now, synthetic=True)]
        self._retarget()

    def reset(self, num_floors: Optional[int] = None) -> None:
        self.cancel()
        if num_floors is not None:
            self.num_floors = num_floors
        self.queue = []
        self._duplicates = []
        self.current_floor = 1
        self.target_floor = None
        self.direction = Direction.IDLE
        self._enter(CarEvent.RESET)

    def cancel(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def snapshot(self) -> CarSnapshot:
        return CarSnapshot(
            car_id=self.car_id,
            current_floor=self.current_floor,
            direction=self.direction,
            queue=tuple(d.floor for d in self.queue),
            num_floors=self.num_floors,
        )

    def as_dict(self) -> dict:
        return {
            "id": self.car_id,
            "current_floor": self.current_floor,
            "target_floor": self.target_floor,
            "direction": self.direction.value,
            "state": self.state.value,
            "queue": [
                {
                    "floor": d.floor,
                    "call_direction": d.call_direction.value if d.call_direction else None,
                    "requested_at": d.requested_at,
                    "synthetic": d.synthetic,
                }
                for d in self.queue
            ],
            "floors_traveled": self.floors_traveled,
            "trips_completed": self.trips_completed,
            "direction_changes": self.direction_changes,
            "served": self.served_count,
        }

    def _enter(self, event: CarEvent) -> None:
        previous = self.state
        self.state = transition(previous, event)
        if self.state is not previous:
            logger.debug("Car %s: %s -> %s", self.car_id, previous.value, self.state.value)
            self.emit(
                "state",
                {"car_id": self.car_id, "from": previous.value, "to": self.state.value, "floor": self.current_floor},
            )

    def _arm(self, delay: float) -> None:
        if self._timer is not None:
            raise RuntimeError(f"Car {self.car_id} already has a pending timer")
        self._timer = self.clock.call_later(delay, self._on_timer)

    def _on_timer(self) -> None:
        self._timer = None
        if self.state is CarState.MOVING:
            self._advance_floor()
        elif self.state is CarState.ARRIVING:
            self._enter(CarEvent.SETTLED)
            self._arm(self.timing.doors_opening())
        elif self.state is CarState.DOORS_OPENING:
            self._enter(CarEvent.DOORS_OPENED)
            self._arm(self.timing.doors_open())
        elif self.state is CarState.DOORS_OPEN:
            self._enter(CarEvent.DWELL_ELAPSED)
            self._arm(self.timing.doors_closing())
        elif self.state is CarState.DOORS_CLOSING:
            self._finish_stop()

    def _depart(self, call_direction: Optional[Direction]) -> None:
        self.target_floor = self.queue[0].floor
        heading = Direction.toward(self.current_floor, self.target_floor)
        if heading is Direction.IDLE:
            heading = call_direction or Direction.UP
        self.direction = heading
        self._trip_floors = 0
        self._enter(CarEvent.DISPATCHED)
        self._arm(self.timing.moving_step(self._trip_length(), starting=True, stopping=self._one_floor_left()))

    def _retarget(self) -> None:
        head = self.queue[0].floor
        if head == self.target_floor:
            return
        logger.debug("Car %s retargeted %s -> %s", self.car_id, self.target_floor, head)
        self.target_floor = head
        heading = Direction.toward(self.current_floor, head)
        if heading is not Direction.IDLE and heading is not self.direction:
            self._count_reversal(heading)
            self.direction = heading

    def _advance_floor(self) -> None:
        if self.current_floor != self.target_floor:
            self.current_floor += Direction.toward(self.current_floor, self.target_floor).step
            self.floors_traveled += 1
            self._trip_floors += 1
        if not 1 <= self.current_floor <= self.num_floors:
            self._fault(f"floor {self.current_floor} outside 1..{self.num_floors}")
            return
        if self.current_floor == self.target_floor:
            self._enter(CarEvent.FLOOR_REACHED)
            self.trips_completed += 1
            self.emit(
                "trip",
                {"car_id": self.car_id, "floor": self.current_floor, "floors_traveled": self._trip_floors},
            )
            self._arm(self.timing.arriving())
        else:
            self._enter(CarEvent.FLOOR_PASSED)
            self._arm(self.timing.moving_step(self._trip_length(), starting=False, stopping=self._one_floor_left()))

    def _finish_stop(self) -> None:
        if not self.queue:
            self._settle_idle()
            return
        served = self.queue.pop(0)
        self._report_served(served)

        self.queue = self.policy.after_stop(self.queue, self.current_floor, self.direction, self.num_floors)
        if not self.queue:
            self._settle_idle()
            return

        self.target_floor = self.queue[0].floor
        heading = Direction.toward(self.current_floor, self.target_floor)
        reversing = heading is not Direction.IDLE and heading is not self.direction
        if reversing:
            self._count_reversal(heading)
            self.direction = heading
        self._trip_floors = 0
        self._enter(CarEvent.QUEUE_PENDING)
        self._arm(
            self.timing.moving_step(
                self._trip_length(), starting=True, stopping=self._one_floor_left(), reversing=reversing
            )
        )

    def _report_served(self, served: Destination) -> None:
        matched = [d for d in self._duplicates if d.floor == served.floor]
        self._duplicates = [d for d in self._duplicates if d.floor != served.floor]
        if not served.synthetic:
            matched.insert(0, served)
        now = self.clock.now
        for destination in matched:
            self.served_count += 1
            self.emit(
                "served",
                {
                    "car_id": self.car_id,
                    "floor": destination.floor,
                    "wait_time": now - destination.requested_at,
                },
            )

    def _settle_idle(self) -> None:
        self.target_floor = None
        self.direction = Direction.IDLE
        self._duplicates = []
        self._enter(CarEvent.QUEUE_EMPTY)

    def _count_reversal(self, heading: Direction) -> None:
        self.direction_changes += 1
        self.emit("direction_change", {"car_id": self.car_id, "floor": self.current_floor, "direction": heading.value})

    def _fault(self, reason: str) -> None:
        logger.error("Car %s fault: %s; clearing %d queued stops", self.car_id, reason, len(self.queue))
        self.current_floor = max(1, min(self.num_floors, self.current_floor))
        self.queue = []
        self._duplicates = []
        self.target_floor = None
        self.direction = Direction.IDLE
        self._enter(CarEvent.FAULT)
        self.emit("fault", {"car_id": self.car_id, "reason": reason})

    def _one_floor_left(self) -> bool:
        return self.target_floor is not None and abs(self.target_floor - self.current_floor) <= 1

    def _trip_length(self) -> int:
        # Covered floors plus the remaining ones; grows or shrinks on retarget.
        return self._trip_floors + abs(self.target_floor - self.current_floor)
