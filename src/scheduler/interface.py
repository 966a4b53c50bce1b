from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Protocol, Sequence, Tuple


class Direction(str, Enum):
    UP = "up"
    DOWN = "down"
    IDLE = "idle"

    @classmethod
    def toward(cls, origin: int, target: int) -> "Direction":
        if target > origin:
            return cls.UP
        if target < origin:
            return cls.DOWN
        return cls.IDLE

    @property
    def step(self) -> int:
        return {Direction.UP: 1, Direction.DOWN: -1}.get(self, 0)

    @property
    def opposite(self) -> "Direction":
        return {Direction.UP: Direction.DOWN, Direction.DOWN: Direction.UP}.get(self, Direction.IDLE)


@dataclass(frozen=True)
class Destination:
    """A floor a car has to stop at.

    ``call_direction`` is ``None`` for direct floor targets. ``synthetic``
    marks terminal stops added by SCAN; those are never reported as served.
    """

    floor: int
    call_direction: Optional[Direction] = None
    requested_at: float = 0.0
    synthetic: bool = False


@dataclass(frozen=True)
class CarSnapshot:
    """Read-only view of a car for scheduling decisions."""

    car_id: int
    current_floor: int
    direction: Direction
    queue: Tuple[int, ...]
    num_floors: int

    @property
    def idle(self) -> bool:
        return self.direction is Direction.IDLE


class Policy(Protocol):
    """Strategy interface pairing car selection with queue ordering."""

    name: str

    def choose_car(
        self,
        cars: Sequence[CarSnapshot],
        call_floor: int,
        call_direction: Optional[Direction],
    ) -> Optional[int]:
        """
        Return the id of the car that should serve the call.

        ``None`` is returned only when ``cars`` is empty.
        """
        ...

    def insert_call(
        self,
        queue: Sequence[Destination],
        current_floor: int,
        direction: Direction,
        destination: Destination,
        num_floors: int,
    ) -> List[Destination]:
        """Return a new queue holding ``destination`` in visit order."""
        ...

    def after_stop(
        self,
        queue: Sequence[Destination],
        current_floor: int,
        direction: Direction,
        num_floors: int,
    ) -> List[Destination]:
        """Reorder the remaining queue once a stop has been served."""
        ...
