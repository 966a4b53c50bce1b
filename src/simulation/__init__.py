"""Simulation primitives for the elevator bank."""

from .car import Car
from .car_state import CarEvent, CarState, InvalidTransition, transition
from .clock import AsyncioClock, SimpyClock
from .config import SystemConfig
from .dispatcher import Call, DispatchMode, Dispatcher
from .metrics import MetricsSnapshot, MetricsTracker
from .system import ElevatorSystem
from .timing import TimingModel

__all__ = [
    "AsyncioClock",
    "Call",
    "Car",
    "CarEvent",
    "CarState",
    "DispatchMode",
    "Dispatcher",
    "ElevatorSystem",
    "InvalidTransition",
    "MetricsSnapshot",
    "MetricsTracker",
    "SimpyClock",
    "SystemConfig",
    "TimingModel",
    "transition",
]
