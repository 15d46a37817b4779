from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional


class VisitRecording(str, Enum):
    """Which floors a car reports as visited."""

    EVERY_FLOOR = "every_floor"
    SERVICE_STOPS = "service_stops"


@dataclass
class BuildingConfig:
    """Fixed parameters of one building, set at construction time."""

    num_floors: int = 10
    bottom_floor: int = 1
    num_cars: int = 1
    starting_floors: Optional[List[int]] = None
    visit_recording: VisitRecording = VisitRecording.EVERY_FLOOR
    dispatcher: str = "load_balance"
    starvation_ticks: Optional[int] = 10

    def __post_init__(self) -> None:
        self.visit_recording = VisitRecording(self.visit_recording)

    @property
    def top_floor(self) -> int:
        return self.bottom_floor + self.num_floors - 1

    def contains(self, floor: int) -> bool:
        return self.bottom_floor <= floor <= self.top_floor

    def starting_floor(self, car_id: int) -> int:
        floors = self.starting_floors or [self.bottom_floor]
        return floors[car_id % len(floors)]

    def validate(self) -> None:
        if self.num_floors < 2:
            raise ValueError("Building must have at least two floors")
        if self.num_cars < 1:
            raise ValueError("Building requires at least one car")
        for floor in self.starting_floors or []:
            if not self.contains(floor):
                raise ValueError(
                    f"Starting floor {floor} must be within [{self.bottom_floor}, {self.top_floor}]"
                )
        if self.starvation_ticks is not None and self.starvation_ticks < 1:
            raise ValueError("starvation_ticks must be at least 1 or null")

    def to_dict(self) -> Dict:
        return {
            "num_floors": self.num_floors,
            "bottom_floor": self.bottom_floor,
            "num_cars": self.num_cars,
            "starting_floors": list(self.starting_floors) if self.starting_floors else None,
            "visit_recording": self.visit_recording.value,
            "dispatcher": self.dispatcher,
            "starvation_ticks": self.starvation_ticks,
        }

    @classmethod
    def from_dict(cls, data: Dict) -> "BuildingConfig":
        defaults = cls()
        cfg = cls(
            num_floors=data.get("num_floors", defaults.num_floors),
            bottom_floor=data.get("bottom_floor", defaults.bottom_floor),
            num_cars=data.get("num_cars", defaults.num_cars),
            starting_floors=data.get("starting_floors"),
            visit_recording=data.get("visit_recording", defaults.visit_recording),
            dispatcher=data.get("dispatcher", defaults.dispatcher),
            starvation_ticks=data.get("starvation_ticks", defaults.starvation_ticks),
        )
        cfg.validate()
        return cfg
