from __future__ import annotations

from typing import List, Optional, Sequence

from .interface import CarSnapshot, Destination, Direction


def find_floor(queue: Sequence[Destination], floor: int) -> Optional[int]:
    for index, destination in enumerate(queue):
        if destination.floor == floor:
            return index
    return None


def merge_destination(
    queue: Sequence[Destination], destination: Destination
) -> Optional[List[Destination]]:
    """Handle a floor that is already queued.

    Returns ``None`` when the floor is new. Otherwise the queue comes back with
    its placement untouched; a synthetic stop is swapped for the real request.
    """

    index = find_floor(queue, destination.floor)
    if index is None:
        return None
    merged = list(queue)
    if merged[index].synthetic and not destination.synthetic:
        merged[index] = destination
    return merged


def sort_in_sweep_order(
    queue: Sequence[Destination], current_floor: int, direction: Direction
) -> List[Destination]:
    """Order stops the way a car sweeping in ``direction`` reaches them.

    Floors strictly ahead come first in travel order, followed by the floors
    left behind in the order of the return sweep.
    """

    if direction is Direction.IDLE:
        return list(queue)
    step = direction.step
    ahead = [d for d in queue if (d.floor - current_floor) * step > 0]
    behind = [d for d in queue if (d.floor - current_floor) * step <= 0]
    ahead.sort(key=lambda d: d.floor * step)
    behind.sort(key=lambda d: -d.floor * step)
    return ahead + behind


def has_floors_ahead(queue: Sequence[Destination], current_floor: int, direction: Direction) -> bool:
    step = direction.step
    return step != 0 and any((d.floor - current_floor) * step > 0 for d in queue)


def sweep_end(car: CarSnapshot) -> int:
    """Farthest floor the car reaches before it can reverse."""

    if car.direction is Direction.UP:
        return max((car.current_floor,) + car.queue)
    if car.direction is Direction.DOWN:
        return min((car.current_floor,) + car.queue)
    return car.current_floor


def heading_with_call(car: CarSnapshot, call_floor: int, call_direction: Optional[Direction]) -> bool:
    """True when the call lies ahead of the car and wants the same direction."""

    if car.direction is Direction.UP:
        return call_direction is Direction.UP and call_floor >= car.current_floor
    if car.direction is Direction.DOWN:
        return call_direction is Direction.DOWN and call_floor <= car.current_floor
    return False


def lowest_cost_car(cars: Sequence[CarSnapshot], cost) -> Optional[int]:
    best: Optional[CarSnapshot] = None
    lowest = float("inf")
    for car in cars:
        value = cost(car)
        if value < lowest:
            lowest = value
            best = car
    return best.car_id if best is not None else None
