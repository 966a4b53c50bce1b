from __future__ import annotations

from typing import Dict, Type

from .interface import CarSnapshot, Destination, Direction, Policy
from .look import LookPolicy
from .scan import ScanPolicy
from .sstf import SstfPolicy

__all__ = [
    "CarSnapshot",
    "Destination",
    "Direction",
    "LookPolicy",
    "Policy",
    "ScanPolicy",
    "SstfPolicy",
    "get_policy",
]


POLICY_REGISTRY: Dict[str, Type[Policy]] = {
    "look": LookPolicy,
    "scan": ScanPolicy,
    "sstf": SstfPolicy,
}


def get_policy(name: str) -> Policy:
    cls = POLICY_REGISTRY.get(name.lower())
    if cls is None:
        raise ValueError(f"Unknown policy '{name}'. Available: {', '.join(POLICY_REGISTRY)}")
    return cls()
