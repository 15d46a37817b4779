"""Tick-driven elevator cars, hall calls and the building that routes them."""

from .building import Building
from .call import Call, Direction
from .car import Car, CarCallSet, CarState
from .config import BuildingConfig, VisitRecording
from .errors import InvalidCallDirection, InvalidFloorRequest, LiftError
from .simulation import EVENTS, MetricsSnapshot, MetricsTracker, Simulation

__all__ = [
    "Building",
    "BuildingConfig",
    "Call",
    "Car",
    "CarCallSet",
    "CarState",
    "Direction",
    "EVENTS",
    "InvalidCallDirection",
    "InvalidFloorRequest",
    "LiftError",
    "MetricsSnapshot",
    "MetricsTracker",
    "Simulation",
    "VisitRecording",
]
