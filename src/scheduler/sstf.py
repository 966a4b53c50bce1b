from __future__ import annotations

from typing import List, Optional, Sequence

from .interface import CarSnapshot, Destination, Direction
from .utils import lowest_cost_car, merge_destination


class SstfPolicy:
    """Shortest Seek Time First: always serve the nearest stop next.

    Direction and queued work are ignored, so distant floors can starve while
    nearer calls keep arriving.
    """

    name = "sstf"

    def choose_car(
        self,
        cars: Sequence[CarSnapshot],
        call_floor: int,
        call_direction: Optional[Direction],
    ) -> Optional[int]:
        return lowest_cost_car(cars, lambda car: abs(car.current_floor - call_floor))

    def insert_call(
        self,
        queue: Sequence[Destination],
        current_floor: int,
        direction: Direction,
        destination: Destination,
        num_floors: int,
    ) -> List[Destination]:
        if not queue:
            return [destination]
        merged = merge_destination(queue, destination)
        if merged is not None:
            return merged
        return self._nearest_first(list(queue) + [destination], current_floor)

    def after_stop(
        self,
        queue: Sequence[Destination],
        current_floor: int,
        direction: Direction,
        num_floors: int,
    ) -> List[Destination]:
        return self._nearest_first(queue, current_floor)

    def _nearest_first(self, queue: Sequence[Destination], current_floor: int) -> List[Destination]:
        return sorted(queue, key=lambda d: abs(d.floor - current_floor))
