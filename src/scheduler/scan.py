from __future__ import annotations

from typing import List, Optional, Sequence

from .interface import CarSnapshot, Destination, Direction
from .utils import (
    find_floor,
    has_floors_ahead,
    heading_with_call,
    lowest_cost_car,
    merge_destination,
    sort_in_sweep_order,
)

DIRECTION_CHANGE_PENALTY = 100


def terminal_floor(direction: Direction, num_floors: int) -> Optional[int]:
    if direction is Direction.UP:
        return num_floors
    if direction is Direction.DOWN:
        return 1
    return None


class ScanPolicy:
    """Implements the classic elevator SCAN algorithm.

    Cars always run to the terminal floor of a sweep before reversing. The
    terminal floor is queued as a synthetic stop when no passenger asked for
    it.
    """

    name = "scan"

    def choose_car(
        self,
        cars: Sequence[CarSnapshot],
        call_floor: int,
        call_direction: Optional[Direction],
    ) -> Optional[int]:
        return lowest_cost_car(cars, lambda car: self.cost(car, call_floor, call_direction))

    def cost(self, car: CarSnapshot, call_floor: int, call_direction: Optional[Direction]) -> int:
        if car.idle:
            return abs(car.current_floor - call_floor)
        if heading_with_call(car, call_floor, call_direction):
            return abs(call_floor - car.current_floor)
        terminal = terminal_floor(car.direction, car.num_floors)
        return (
            abs(terminal - car.current_floor)
            + abs(terminal - call_floor)
            + DIRECTION_CHANGE_PENALTY
        )

    def insert_call(
        self,
        queue: Sequence[Destination],
        current_floor: int,
        direction: Direction,
        destination: Destination,
        num_floors: int,
    ) -> List[Destination]:
        if direction is Direction.IDLE or not queue:
            # An idle car is about to leave toward the new stop.
            direction = Direction.toward(current_floor, destination.floor)
            return self._with_terminal_stop([destination], current_floor, direction, num_floors, destination.requested_at)
        merged = merge_destination(queue, destination)
        if merged is None:
            merged = list(queue) + [destination]
        return self._with_terminal_stop(merged, current_floor, direction, num_floors, destination.requested_at)

    def after_stop(
        self,
        queue: Sequence[Destination],
        current_floor: int,
        direction: Direction,
        num_floors: int,
    ) -> List[Destination]:
        if not queue:
            return []
        if not has_floors_ahead(queue, current_floor, direction):
            # The car reverses here, so the return sweep needs its own terminal.
            direction = direction.opposite
        return self._with_terminal_stop(list(queue), current_floor, direction, num_floors, 0.0)

    def _with_terminal_stop(
        self,
        queue: List[Destination],
        current_floor: int,
        direction: Direction,
        num_floors: int,
        requested_at: float,
    ) -> List[Destination]:
        terminal = terminal_floor(direction, num_floors)
        if terminal is None:
            return queue
        if has_floors_ahead(queue, current_floor, direction) and find_floor(queue, terminal) is None:
            queue = queue + [Destination(floor=terminal, requested_at=requested_at, synthetic=True)]
        return sort_in_sweep_order(queue, current_floor, direction)
