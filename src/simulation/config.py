from __future__ import annotations

from dataclasses import dataclass, field

from .timing import TimingModel


@dataclass
class SystemConfig:
    """Building shape and dispatch settings for an elevator bank."""

    num_floors: int = 10
    num_cars: int = 3
    policy: str = "look"
    mode: str = "automatic"
    timing: TimingModel = field(default_factory=TimingModel)

    def __post_init__(self) -> None:
        if self.num_floors < 1:
            raise ValueError("num_floors must be at least 1")
        if self.num_cars < 1:
            raise ValueError("num_cars must be at least 1")
