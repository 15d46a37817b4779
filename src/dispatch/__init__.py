from __future__ import annotations

from typing import Dict, Type

from .interface import Direction, DirectionPolicy, Dispatcher
from .load_balance import LoadBalancingDispatcher, LoadRankedDispatcher
from .scan import ScanDirectionPolicy

__all__ = [
    "Direction",
    "DirectionPolicy",
    "Dispatcher",
    "LoadBalancingDispatcher",
    "LoadRankedDispatcher",
    "ScanDirectionPolicy",
    "get_dispatcher",
]


DISPATCHER_REGISTRY: Dict[str, Type[LoadBalancingDispatcher]] = {
    "load_balance": LoadBalancingDispatcher,
    "load_ranked": LoadRankedDispatcher,
}


def get_dispatcher(name: str, **kwargs) -> Dispatcher:
    cls = DISPATCHER_REGISTRY.get(name.lower())
    if cls is None:
        raise ValueError(f"Unknown dispatcher '{name}'. Available: {', '.join(DISPATCHER_REGISTRY)}")
    return cls(**kwargs)
