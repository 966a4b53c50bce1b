from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Dict, List


@dataclass
class MetricsSnapshot:
    time: float
    average_wait: float
    wait_p95: float
    max_wait: float
    served: int
    trips: int
    floors_traveled: int
    direction_changes: int
    wait_by_floor: Dict[int, float]


class MetricsTracker:
    """Aggregates the served / trip / direction change feed of the cars."""

    def __init__(self) -> None:
        self.wait_times: List[float] = []
        self.wait_by_floor: Dict[int, List[float]] = {}
        self.trips: int = 0
        self.floors_traveled: int = 0
        self.direction_changes: int = 0

    def record_served(self, payload: dict) -> None:
        wait = float(payload["wait_time"])
        self.wait_times.append(wait)
        self.wait_by_floor.setdefault(payload["floor"], []).append(wait)

    def record_trip(self, payload: dict) -> None:
        self.trips += 1
        self.floors_traveled += payload.get("floors_traveled", 0)

    def record_direction_change(self, payload: dict) -> None:
        self.direction_changes += 1

    def reset(self) -> None:
        self.__init__()

    def average_wait_for(self, floor: int) -> float:
        return self._average(self.wait_by_floor.get(floor, []))

    def _average(self, values: List[float]) -> float:
        if not values:
            return 0.0
        return sum(values) / len(values)

    def _percentile(self, values: List[float], percentile: float) -> float:
        if not values:
            return 0.0
        sorted_vals = sorted(values)
        k = (len(sorted_vals) - 1) * percentile
        f = math.floor(k)
        c = math.ceil(k)
        if f == c:
            return float(sorted_vals[int(k)])
        d0 = sorted_vals[int(f)] * (c - k)
        d1 = sorted_vals[int(c)] * (k - f)
        return float(d0 + d1)

    def snapshot(self, now: float) -> MetricsSnapshot:
        return MetricsSnapshot(
            time=now,
            average_wait=self._average(self.wait_times),
            wait_p95=self._percentile(self.wait_times, 0.95),
            max_wait=max(self.wait_times, default=0.0),
            served=len(self.wait_times),
            trips=self.trips,
            floors_traveled=self.floors_traveled,
            direction_changes=self.direction_changes,
            wait_by_floor={floor: self.average_wait_for(floor) for floor in sorted(self.wait_by_floor)},
        )
