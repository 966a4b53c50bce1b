from __future__ import annotations

from typing import List, Optional, Sequence

from .interface import CarSnapshot, Destination, Direction
from .utils import heading_with_call, lowest_cost_car, merge_destination, sort_in_sweep_order, sweep_end


class LookPolicy:
    """LOOK: sweep while stops remain ahead, then turn around."""

    name = "look"

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
        # The building height outweighs any pick-up on the way.
        end = sweep_end(car)
        return abs(end - car.current_floor) + abs(end - call_floor) + car.num_floors

    def insert_call(
        self,
        queue: Sequence[Destination],
        current_floor: int,
        direction: Direction,
        destination: Destination,
        num_floors: int,
    ) -> List[Destination]:
        if direction is Direction.IDLE or not queue:
            return [destination]
        merged = merge_destination(queue, destination)
        if merged is not None:
            return merged
        return sort_in_sweep_order(list(queue) + [destination], current_floor, direction)

    def after_stop(
        self,
        queue: Sequence[Destination],
        current_floor: int,
        direction: Direction,
        num_floors: int,
    ) -> List[Destination]:
        return list(queue)
